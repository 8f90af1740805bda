import hashlib
import hmac
import logging
import time
import requests
from decimal import Decimal, InvalidOperation
from urllib.parse import quote
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from users.helpers.errors import NotFound, UpstreamFailure, ValidationFailed
from users.models import PaymentNotification, User
from users.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

# characters encodeURIComponent leaves alone
_UNRESERVED = "-_.!~*'()"


def encode_value(value):
    return quote(str(value).strip(), safe=_UNRESERVED).replace('%20', '+')


def build_param_string(data, skip_empty=True):
    """``key=value&...`` over ``data`` in iteration order, without the signature field."""
    pairs = []
    for key, value in data.items():
        if key == 'signature':
            continue
        value = '' if value is None else str(value)
        if skip_empty and value.strip() == '':
            continue
        pairs.append(f"{key}={encode_value(value)}")
    return '&'.join(pairs)


def generate_signature(data, passphrase=None, skip_empty=True):
    param_string = build_param_string(data, skip_empty=skip_empty)
    if passphrase:
        param_string += f"&passphrase={encode_value(passphrase)}"
    return hashlib.md5(param_string.encode('utf-8')).hexdigest()


class PaymentService:
    VALIDATE_TIMEOUT = 10
    COMPLETE = 'COMPLETE'

    @staticmethod
    def _generate_payment_id():
        return f"Order-{int(time.time() * 1000)}"

    @staticmethod
    def build_checkout(user, cart):
        if cart.is_empty:
            raise ValidationFailed('Cart is empty', errors={'cart': 'cart must contain at least one item'})

        first_name, _, last_name = user.name.strip().partition(' ')
        app_url = settings.APP_URL

        fields = {
            'merchant_id': settings.PAYMENT_MERCHANT_ID,
            'merchant_key': settings.PAYMENT_MERCHANT_KEY,
            'return_url': f"{app_url}/dashboard",
            'cancel_url': f"{app_url}/checkout",
            'notify_url': f"{app_url}/api/payments/notify",
            'name_first': first_name,
            'name_last': last_name.strip(),
            'email_address': user.email,
            'm_payment_id': PaymentService._generate_payment_id(),
            'amount': f"{cart.total_price():.2f}",
            'item_name': cart.item_names(),
        }
        fields = {key: value for key, value in fields.items() if value not in (None, '')}
        fields['signature'] = generate_signature(fields, settings.PAYMENT_PASSPHRASE)

        logger.info('Checkout %s prepared for user %s (%s)', fields['m_payment_id'], user.id, fields['amount'])
        return {'action': settings.PAYMENT_PROCESS_URL, 'fields': fields}

    @staticmethod
    def verify_signature(data):
        received = data.get('signature', '')
        expected = generate_signature(data, settings.PAYMENT_PASSPHRASE, skip_empty=False)
        return bool(received) and hmac.compare_digest(received, expected)

    @classmethod
    def confirm_with_gateway(cls, param_string):
        url = settings.PAYMENT_VALIDATE_URL
        if not url:
            return True

        try:
            response = requests.post(
                url,
                data=param_string,
                headers={'Content-Type': 'application/x-www-form-urlencoded'},
                timeout=cls.VALIDATE_TIMEOUT
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.exception('Payment gateway validation call failed')
            raise UpstreamFailure('Could not validate payment with the gateway') from e

        return response.text.strip() == 'VALID'

    @classmethod
    def handle_notification(cls, data):
        """Apply a gateway payment notification.

        Nothing is written unless the merchant, signature and (when configured)
        the gateway confirmation all check out. Replays of the same payment id
        are acknowledged without adding items again.
        """
        email = (data.get('email_address') or '').strip().lower()
        if not email:
            raise ValidationFailed('Email address is required', errors={'email_address': 'email_address is required'})

        if data.get('merchant_id') != settings.PAYMENT_MERCHANT_ID:
            logger.warning('Payment notification for unknown merchant %r', data.get('merchant_id'))
            raise ValidationFailed('Invalid merchant')

        if not cls.verify_signature(data):
            logger.warning('Payment notification with bad signature for %s', email)
            raise ValidationFailed('Invalid signature')

        param_string = build_param_string(data, skip_empty=False)

        if not cls.confirm_with_gateway(param_string):
            logger.warning('Gateway rejected payment notification for %s', email)
            raise ValidationFailed('Payment could not be validated')

        payment_status = data.get('payment_status')
        if payment_status and payment_status != cls.COMPLETE:
            logger.info('Ignoring %s payment notification for %s', payment_status, email)
            return {'processed': False, 'reason': f'Payment status {payment_status}', 'pfParamString': param_string}

        user = User.objects.filter(email=email).first()
        if not user:
            raise NotFound('User not found')

        names = [name.strip() for name in (data.get('item_name') or '').split(',') if name.strip()]
        payment_id = data.get('m_payment_id') or data.get('pf_payment_id') or ''

        try:
            amount = Decimal(data['amount_gross']) if data.get('amount_gross') else None
        except InvalidOperation:
            amount = None

        with transaction.atomic():
            if payment_id:
                _, created = PaymentNotification.objects.get_or_create(
                    m_payment_id=payment_id,
                    defaults={
                        'pf_payment_id': data.get('pf_payment_id', ''),
                        'email': email,
                        'amount': amount,
                        'payment_status': payment_status or '',
                        'item_names': names,
                        'payload': dict(data),
                    }
                )
                if not created:
                    logger.info('Duplicate payment notification %s ignored', payment_id)
                    return {'processed': False, 'reason': 'Already processed', 'pfParamString': param_string}

            ProfileService.append_items(user.id, names, timezone.now())

        return {'processed': True, 'items': names, 'pfParamString': param_string}
