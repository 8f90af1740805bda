import logging
from django.db.models import Q, Count
from django.core.paginator import Paginator
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from users.helpers.errors import NotFound, ValidationFailed
from users.models import User
from users.services.auth_service import AuthService
from users.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class UserService:
    CACHE_TILL = 300
    VERSION_KEY = 'users:version'
    EDITABLE_FIELDS = ('name', 'email', 'role', 'email_verified')

    @classmethod
    def _version(cls):
        return cache.get_or_set(cls.VERSION_KEY, 1, None)

    @classmethod
    def invalidate(cls):
        try:
            cache.incr(cls.VERSION_KEY)
        except ValueError:
            cache.set(cls.VERSION_KEY, 2, None)

    @staticmethod
    def serialize_user(user):
        data = AuthService.serialize_user(user)
        data['pf_data'] = user.pf_data
        data['ticket_count'] = getattr(user, 'ticket_count', None)
        return data

    @classmethod
    def get_all_users(cls, page=1, per_page=20, search=None, role=None):
        cache_key = f'users:all:{cls._version()}:{page}:{per_page}:{search}:{role}'
        cached_data = cache.get(cache_key)

        if cached_data:
            return cached_data

        queryset = User.objects.annotate(ticket_count=Count('tickets'))

        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) |
                Q(name__icontains=search)
            )

        if role:
            queryset = queryset.filter(role=role)

        paginator = Paginator(queryset.order_by('-created_at'), per_page)
        page_obj = paginator.get_page(page)

        result = {
            'users': [cls.serialize_user(u) for u in page_obj.object_list],
            'pagination': {
                'current_page': page_obj.number,
                'total_pages': paginator.num_pages,
                'total_users': paginator.count,
                'per_page': per_page,
                'has_next': page_obj.has_next(),
                'has_previous': page_obj.has_previous()
            }
        }
        cache.set(cache_key, result, cls.CACHE_TILL)
        return result

    @classmethod
    def update_user(cls, user_id, data):
        try:
            user = User.objects.get(id=user_id)
        except User.DoesNotExist:
            raise NotFound('User not found')

        unknown = [key for key in data if key not in cls.EDITABLE_FIELDS]
        if unknown:
            raise ValidationFailed('Unsupported fields', errors={key: 'cannot be changed here' for key in unknown})

        if 'email' in data:
            email = str(data['email']).strip().lower()
            try:
                validate_email(email)
            except ValidationError:
                raise ValidationFailed('Invalid email address', errors={'email': 'Invalid email address'})
            if User.objects.filter(email=email).exclude(id=user.id).exists():
                raise ValidationFailed('Email already in use', errors={'email': 'Email already in use'})
            user.email = email

        if 'role' in data:
            if data['role'] not in User.RoleChoices.values:
                raise ValidationFailed('Invalid role', errors={'role': f'role must be one of {", ".join(User.RoleChoices.values)}'})
            user.role = data['role']

        if 'name' in data:
            if not str(data['name']).strip():
                raise ValidationFailed('Name cannot be empty', errors={'name': 'name cannot be empty'})
            user.name = str(data['name']).strip()

        if 'email_verified' in data:
            user.email_verified = bool(data['email_verified'])

        user.save()
        cls.invalidate()
        logger.info('User %s updated by admin: %s', user.id, ', '.join(data))
        return user

    @classmethod
    def set_pf_data(cls, user_id, pf_data, admin):
        user = ProfileService.admin_set_pf_data(user_id, pf_data, admin)
        cls.invalidate()
        return user
