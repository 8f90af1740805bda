from django.http import HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.helpers.response import APIResponse
from users.services.storage_service import get_storage
from admins.helpers.require_admin import require_admin


@csrf_exempt
@require_http_methods(["GET"])
@require_admin
def list_files(request):
    prefix = request.GET.get('prefix', '')
    return APIResponse.success(data=get_storage().list_files(prefix=prefix))


@csrf_exempt
@require_http_methods(["GET"])
@require_admin
def fetch_file(request):
    key = request.GET.get('key')
    if not key:
        return APIResponse.missing_fields(['key'])

    body, content_type = get_storage().fetch(key)
    response = HttpResponse(body, content_type=content_type)
    response['Content-Disposition'] = f'inline; filename="{key.rsplit("/", 1)[-1]}"'
    return response
