from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.helpers.request import parse_json_body
from users.helpers.require_login import user_required
from users.helpers.response import APIResponse
from users.services.auth_service import AuthService
from users.services.profile_service import ProfileService


@csrf_exempt
@require_http_methods(["POST", "PUT"])
@user_required
def update_profile(request):
    data, error = parse_json_body(request)
    if error:
        return error

    user = ProfileService.update_profile(
        request.user,
        name=data.get('name'),
        email=data.get('email'),
        current_password=data.get('currentPassword'),
        new_password=data.get('newPassword')
    )
    return APIResponse.success(data=AuthService.serialize_user(user), message='Profile updated')


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def pf_data(request):
    return APIResponse.success(data=request.user.pf_data)


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def pf_data_count(request):
    service_id = request.GET.get('serviceId') or request.GET.get('service_id')
    if not service_id:
        return APIResponse.missing_fields(['serviceId'])

    return APIResponse.success(data={
        'serviceId': service_id,
        'count': ProfileService.count_items(request.user, service_id)
    })


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def purchased_services(request):
    return APIResponse.success(data=ProfileService.matching_products(request.user))


@csrf_exempt
@require_http_methods(["POST"])
@user_required
def remove_pf_item(request):
    """{"itemName": "2", "removeOnlyOne": true, "userId": <admins only>}"""
    data, error = parse_json_body(request)
    if error:
        return error

    item_name = data.get('itemName')
    if not item_name:
        return APIResponse.missing_fields(['itemName'])

    user_id = request.user.id
    if data.get('userId') and str(data['userId']) != str(request.user.id):
        if not AuthService.is_admin(request.user):
            return APIResponse.forbidden(message='You can only change your own services')
        if not str(data['userId']).isdigit():
            return APIResponse.validation_error(errors={'userId': 'userId must be a number'})
        user_id = int(data['userId'])

    _, removed = ProfileService.remove_item(
        user_id,
        item_name,
        remove_only_one=data.get('removeOnlyOne', True) is not False
    )
    return APIResponse.success(data={'removedItem': removed}, message='Item removed successfully')
