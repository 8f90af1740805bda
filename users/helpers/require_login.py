import jwt
from functools import wraps
from django.conf import settings
from users.models import User, Session
from users.services.auth_service import AuthService
from .response import APIResponse
from .request import get_token_from_request

JWT_ALGO = "HS256"


def user_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        token = get_token_from_request(request)

        if not token:
            return APIResponse.unauthorized(message="Missing token")

        secret = getattr(settings, 'JWT_SECRET_KEY', settings.SECRET_KEY)
        try:
            payload = jwt.decode(token, secret, algorithms=[JWT_ALGO])
        except jwt.ExpiredSignatureError:
            return APIResponse.unauthorized(message="Token expired")
        except jwt.InvalidTokenError:
            return APIResponse.unauthorized(message="Invalid token")

        user = User.objects.filter(id=payload.get("user_id")).first()
        if user is None:
            return APIResponse.unauthorized(message="User not found")

        if not Session.objects.filter(user_id=user, payload=AuthService.session_key(token)).exists():
            return APIResponse.unauthorized(message="Session expired")

        request.user = user
        request._dont_enforce_csrf_checks = True

        return view_func(request, *args, **kwargs)

    return wrapper
