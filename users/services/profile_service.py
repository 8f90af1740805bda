import logging
from datetime import timezone as dt_timezone
from django.contrib.auth.hashers import make_password, check_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from users.catalog import PRODUCTS, serialize_product
from users.helpers.errors import NotFound, ValidationFailed
from users.models import User, default_pf_data

logger = logging.getLogger(__name__)


def _timestamp_key(entry):
    value = entry.get('timestamp') or ''
    try:
        parsed = parse_datetime(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        # unparseable timestamps sort last and never win "oldest"
        return (True, 0)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return (False, parsed.timestamp())


class ProfileService:

    @staticmethod
    def pf_items(user):
        pf_data = user.pf_data if isinstance(user.pf_data, dict) else {}
        items = pf_data.get('item_name')
        return items if isinstance(items, list) else []

    @classmethod
    def append_items(cls, user_id, names, timestamp=None):
        """Record purchased product ids; duplicates are kept, one entry per unit bought."""
        timestamp = (timestamp or timezone.now()).isoformat()

        with transaction.atomic():
            user = User.objects.select_for_update().get(id=user_id)
            pf_data = dict(user.pf_data) if isinstance(user.pf_data, dict) else default_pf_data()
            items = list(cls.pf_items(user))
            items.extend({'name': str(name), 'timestamp': timestamp} for name in names)
            pf_data['item_name'] = items
            user.pf_data = pf_data
            user.save(update_fields=['pf_data', 'updated_at'])

        logger.info('Added %d pfData item(s) for user %s', len(names), user_id)
        return user

    @classmethod
    def remove_item(cls, user_id, item_name, remove_only_one=True):
        """Remove the oldest entry named ``item_name``.

        With ``remove_only_one=False`` every entry sharing that entry's name and
        timestamp goes with it.
        """
        item_name = str(item_name)

        with transaction.atomic():
            try:
                user = User.objects.select_for_update().get(id=user_id)
            except User.DoesNotExist:
                raise NotFound('User not found')

            if not isinstance(user.pf_data, dict) or not isinstance(user.pf_data.get('item_name'), list):
                raise NotFound('pfData or item_name not found')

            items = user.pf_data['item_name']
            matches = [i for i in items if isinstance(i, dict) and str(i.get('name')) == item_name]
            if not matches:
                raise NotFound('Item not found')

            oldest = min(matches, key=_timestamp_key)

            if remove_only_one:
                position = next(i for i, item in enumerate(items) if item is oldest)
                remaining = items[:position] + items[position + 1:]
            else:
                remaining = [
                    i for i in items
                    if not (isinstance(i, dict) and str(i.get('name')) == item_name
                            and i.get('timestamp') == oldest.get('timestamp'))
                ]

            user.pf_data = {**user.pf_data, 'item_name': remaining}
            user.save(update_fields=['pf_data', 'updated_at'])

        logger.info('Removed pfData item %s for user %s', item_name, user_id)
        return user, oldest

    @classmethod
    def count_items(cls, user, service_id):
        return sum(1 for i in cls.pf_items(user) if isinstance(i, dict) and str(i.get('name')) == str(service_id))

    @classmethod
    def matching_products(cls, user):
        owned = {str(i.get('name')) for i in cls.pf_items(user) if isinstance(i, dict)}
        products = [serialize_product(p) for pid, p in PRODUCTS.items() if pid in owned]
        return {'numberOfEntries': len(cls.pf_items(user)), 'products': products}

    @staticmethod
    def admin_set_pf_data(user_id, pf_data, admin):
        if not isinstance(pf_data, dict):
            raise ValidationFailed('pfData must be an object', errors={'pfData': 'pfData must be an object'})

        with transaction.atomic():
            try:
                user = User.objects.select_for_update().get(id=user_id)
            except User.DoesNotExist:
                raise NotFound('User not found')

            changes = list(pf_data.get('adminChanges') or [])
            changes.append(f"PF Data updated by admin: {admin.name} at {timezone.now().isoformat()}")

            user.pf_data = {**pf_data, 'adminChanges': changes}
            user.save(update_fields=['pf_data', 'updated_at'])

        logger.info('Admin %s replaced pfData of user %s', admin.id, user_id)
        return user

    @staticmethod
    def update_profile(user, name=None, email=None, current_password=None, new_password=None):
        fields = []

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationFailed('Name cannot be empty', errors={'name': 'name cannot be empty'})
            user.name = name
            fields.append('name')

        if email is not None and email.strip().lower() != user.email:
            email = email.strip().lower()
            try:
                validate_email(email)
            except ValidationError:
                raise ValidationFailed('Invalid email address', errors={'email': 'Invalid email address'})
            if User.objects.filter(email=email).exclude(id=user.id).exists():
                raise ValidationFailed('Email already in use', errors={'email': 'Email already in use'})
            user.email = email
            user.email_verified = False
            fields.extend(['email', 'email_verified'])

        if new_password:
            if not current_password or not check_password(current_password, user.password):
                raise ValidationFailed('Current password is incorrect', errors={'currentPassword': 'Current password is incorrect'})
            if len(new_password) < 8:
                raise ValidationFailed('Password must be at least 8 characters', errors={'newPassword': 'Password must be at least 8 characters'})
            user.password = make_password(new_password)
            fields.append('password')

        if fields:
            user.save(update_fields=fields + ['updated_at'])
        return user
