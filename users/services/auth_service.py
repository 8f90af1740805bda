import jwt
import logging
import secrets
from datetime import datetime, timedelta, timezone as dt_timezone
from django.conf import settings
from django.contrib.auth.hashers import make_password, check_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone
from ..models import User, Session
from .mail_service import MailService

logger = logging.getLogger(__name__)


class AuthService:
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRY_DAYS = 3
    CONFIRMATION_TOKEN_DAYS = 30
    RESET_TOKEN_HOURS = 1
    MIN_PASSWORD_LENGTH = 8

    @classmethod
    def _secret(cls):
        return getattr(settings, 'JWT_SECRET_KEY', settings.SECRET_KEY)

    @classmethod
    def register(cls, name, email, password):
        email = (email or '').strip().lower()
        try:
            validate_email(email)
        except ValidationError:
            return {'success': False, 'user': None, 'message': 'Invalid email address'}

        if len(password) < cls.MIN_PASSWORD_LENGTH:
            return {'success': False, 'user': None, 'message': f'Password must be at least {cls.MIN_PASSWORD_LENGTH} characters'}

        with transaction.atomic():
            if User.objects.filter(email=email).exists():
                return {'success': False, 'user': None, 'message': 'Email already registered'}

            user = User.objects.create(
                name=name.strip(),
                email=email,
                password=make_password(password),
                role=User.RoleChoices.USER,
                confirmation_token=secrets.token_hex(32),
                confirmation_token_expiry=timezone.now() + timedelta(days=cls.CONFIRMATION_TOKEN_DAYS)
            )

        confirm_url = f"{settings.APP_URL}/auth?token={user.confirmation_token}"
        if not MailService.send_confirmation(user, confirm_url):
            logger.warning('Confirmation email for user %s was not sent', user.id)

        return {'success': True, 'user': user, 'message': 'User registered successfully. Please check your email to confirm your account.'}

    @classmethod
    def confirm_email(cls, token):
        user = User.objects.filter(confirmation_token=token).first() if token else None
        if not user:
            return {'success': False, 'message': 'Invalid confirmation token'}

        if user.confirmation_token_expiry and user.confirmation_token_expiry < timezone.now():
            return {'success': False, 'message': 'Confirmation token expired'}

        user.email_verified = True
        user.confirmation_token = None
        user.confirmation_token_expiry = None
        user.save(update_fields=['email_verified', 'confirmation_token', 'confirmation_token_expiry', 'updated_at'])
        return {'success': True, 'message': 'Email confirmed'}

    @classmethod
    @transaction.atomic
    def login(cls, email, password, ip_address, user_agent='Unknown'):
        user = User.objects.filter(email=(email or '').strip().lower()).first()

        if not user or not check_password(password, user.password):
            return {'success': False, 'token': None, 'user': None, 'message': 'Invalid credentials'}

        Session.objects.filter(user_id=user).delete()

        token = cls._generate_token(user)

        Session.objects.create(
            user_id=user,
            ip_address=ip_address or '',
            user_agent=user_agent,
            payload=cls.session_key(token)
        )

        User.objects.filter(id=user.id).update(last_login_at=timezone.now())

        return {'success': True, 'token': token, 'user': user, 'message': 'Login successful'}

    @classmethod
    def logout(cls, token):
        user = cls._verify_token(token)
        if not user:
            return {'success': False, 'message': 'Invalid token'}

        Session.objects.filter(user_id=user).delete()
        return {'success': True, 'message': 'Logged out successfully'}

    @classmethod
    @transaction.atomic
    def refresh_token(cls, old_token, ip_address, user_agent='Unknown'):
        user = cls._verify_token(old_token)
        if not user:
            return {'success': False, 'token': None, 'message': 'Invalid token'}

        Session.objects.filter(user_id=user).delete()

        new_token = cls._generate_token(user)

        Session.objects.create(
            user_id=user,
            ip_address=ip_address or '',
            user_agent=user_agent,
            payload=cls.session_key(new_token)
        )

        return {'success': True, 'token': new_token, 'message': 'Token refreshed'}

    @classmethod
    def request_password_reset(cls, email):
        user = User.objects.filter(email=(email or '').strip().lower()).first()

        # Unknown addresses get the same answer so accounts cannot be enumerated.
        if user:
            user.reset_token = secrets.token_hex(32)
            user.reset_token_expiry = timezone.now() + timedelta(hours=cls.RESET_TOKEN_HOURS)
            user.save(update_fields=['reset_token', 'reset_token_expiry', 'updated_at'])

            reset_url = f"{settings.APP_URL}/auth/reset-password?token={user.reset_token}"
            if not MailService.send_password_reset(user, reset_url):
                logger.warning('Password reset email for user %s was not sent', user.id)

        return {'success': True, 'message': 'If that email is registered, a reset link has been sent'}

    @classmethod
    @transaction.atomic
    def reset_password(cls, token, new_password):
        user = User.objects.select_for_update().filter(reset_token=token).first() if token else None
        if not user or not user.reset_token_expiry or user.reset_token_expiry < timezone.now():
            return {'success': False, 'message': 'Invalid or expired reset token'}

        if len(new_password) < cls.MIN_PASSWORD_LENGTH:
            return {'success': False, 'message': f'Password must be at least {cls.MIN_PASSWORD_LENGTH} characters'}

        user.password = make_password(new_password)
        user.reset_token = None
        user.reset_token_expiry = None
        user.save(update_fields=['password', 'reset_token', 'reset_token_expiry', 'updated_at'])

        Session.objects.filter(user_id=user).delete()
        return {'success': True, 'message': 'Password has been reset'}

    @staticmethod
    def session_key(token):
        # the signature segment; the header prefix is identical for every token
        return token[-20:]

    @classmethod
    def get_user_from_token(cls, token):
        return cls._verify_token(token)

    @classmethod
    def _generate_token(cls, user):
        now = datetime.now(dt_timezone.utc)
        payload = {
            'user_id': user.id,
            'email': user.email,
            'role': user.role,
            'exp': now + timedelta(days=cls.JWT_EXPIRY_DAYS),
            'iat': now,
            'jti': secrets.token_hex(8)
        }
        return jwt.encode(payload, cls._secret(), algorithm=cls.JWT_ALGORITHM)

    @classmethod
    def _verify_token(cls, token):
        if not token:
            return None
        try:
            payload = jwt.decode(token, cls._secret(), algorithms=[cls.JWT_ALGORITHM])
        except jwt.InvalidTokenError:
            return None

        user = User.objects.filter(id=payload.get('user_id')).first()
        if not user:
            return None

        if not Session.objects.filter(user_id=user, payload=cls.session_key(token)).exists():
            return None

        return user

    @classmethod
    def is_admin(cls, user):
        return user.role == User.RoleChoices.ADMIN

    @staticmethod
    def serialize_user(user):
        return {
            'id': user.id,
            'name': user.name,
            'email': user.email,
            'role': user.role,
            'email_verified': user.email_verified,
            'image': user.image,
            'created_at': user.created_at.isoformat() if user.created_at else None
        }
