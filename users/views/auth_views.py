from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from ..services.auth_service import AuthService
from ..helpers.response import APIResponse
from ..helpers.request import get_client_ip, get_user_agent, get_token_from_request, parse_json_body
from ..helpers.require_login import user_required


@csrf_exempt
@require_http_methods(["POST"])
def register(request):
    data, error = parse_json_body(request)
    if error:
        return error

    missing = [field for field in ['name', 'email', 'password'] if not data.get(field)]
    if missing:
        return APIResponse.missing_fields(missing)

    result = AuthService.register(
        name=data['name'],
        email=data['email'],
        password=data['password']
    )

    if result['success']:
        return APIResponse.created(
            data={'user': AuthService.serialize_user(result['user'])},
            message=result['message']
        )

    return APIResponse.error(message=result['message'], status_code=400)


@csrf_exempt
@require_http_methods(["POST"])
def confirm_email(request):
    data, error = parse_json_body(request)
    if error:
        return error

    if not data.get('token'):
        return APIResponse.missing_fields(['token'])

    result = AuthService.confirm_email(data['token'])

    if result['success']:
        return APIResponse.success(message=result['message'])

    return APIResponse.error(message=result['message'], status_code=400)


@csrf_exempt
@require_http_methods(["POST"])
def login(request):
    data, error = parse_json_body(request)
    if error:
        return error

    missing = [field for field in ['email', 'password'] if not data.get(field)]
    if missing:
        return APIResponse.missing_fields(missing)

    result = AuthService.login(
        email=data['email'],
        password=data['password'],
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request)
    )

    if result['success']:
        return APIResponse.success(
            data={
                'token': result['token'],
                'user': AuthService.serialize_user(result['user'])
            },
            message=result['message']
        )

    return APIResponse.unauthorized(message=result['message'])


@csrf_exempt
@require_http_methods(["POST"])
def logout(request):
    token = get_token_from_request(request)
    if not token:
        return APIResponse.unauthorized(message='Token not provided')

    result = AuthService.logout(token)

    if result['success']:
        return APIResponse.success(message=result['message'])

    return APIResponse.unauthorized(message=result['message'])


@csrf_exempt
@require_http_methods(["POST"])
def refresh_token(request):
    token = get_token_from_request(request)
    if not token:
        return APIResponse.unauthorized(message='Token not provided')

    result = AuthService.refresh_token(
        old_token=token,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request)
    )

    if result['success']:
        return APIResponse.success(
            data={'token': result['token']},
            message=result['message']
        )

    return APIResponse.unauthorized(message=result['message'])


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def me(request):
    return APIResponse.success(
        data=AuthService.serialize_user(request.user),
        message='User data retrieved'
    )


@csrf_exempt
@require_http_methods(["POST"])
def forgot_password(request):
    data, error = parse_json_body(request)
    if error:
        return error

    if not data.get('email'):
        return APIResponse.missing_fields(['email'])

    result = AuthService.request_password_reset(data['email'])
    return APIResponse.success(message=result['message'])


@csrf_exempt
@require_http_methods(["POST"])
def reset_password(request):
    data, error = parse_json_body(request)
    if error:
        return error

    missing = [field for field in ['token', 'password'] if not data.get(field)]
    if missing:
        return APIResponse.missing_fields(missing)

    result = AuthService.reset_password(data['token'], data['password'])

    if result['success']:
        return APIResponse.success(message=result['message'])

    return APIResponse.error(message=result['message'], status_code=400)
