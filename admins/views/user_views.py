from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from ..services.user_service import UserService
from users.helpers.response import APIResponse
from users.helpers.request import parse_json_body, get_int_param
from admins.helpers.require_admin import require_admin


@csrf_exempt
@require_http_methods(["GET"])
@require_admin
def list_users(request):
    page = get_int_param(request, 'page', 1, maximum=10_000)
    per_page = get_int_param(request, 'per_page', 20)
    search = request.GET.get('search')
    role = request.GET.get('role')

    result = UserService.get_all_users(
        page=page,
        per_page=per_page,
        search=search,
        role=role
    )

    return APIResponse.success(data=result)


@csrf_exempt
@require_http_methods(["PUT"])
@require_admin
def update_user(request, user_id):
    data, error = parse_json_body(request)
    if error:
        return error

    if not data:
        return APIResponse.validation_error(errors={'body': 'Nothing to update'})

    user = UserService.update_user(user_id, data)
    return APIResponse.success(data=UserService.serialize_user(user), message='User updated')


@csrf_exempt
@require_http_methods(["PUT"])
@require_admin
def update_pf_data(request, user_id):
    data, error = parse_json_body(request)
    if error:
        return error

    pf_data = data.get('pfData', data.get('pf_data'))
    if not isinstance(pf_data, dict):
        return APIResponse.validation_error(errors={'pfData': 'pfData must be an object'})

    user = UserService.set_pf_data(user_id, pf_data, request.user)
    return APIResponse.success(data=UserService.serialize_user(user), message='PF data updated')
