from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from ..services.bot_response_service import BotResponseService
from users.helpers.response import APIResponse
from users.helpers.request import parse_json_body
from admins.helpers.require_admin import require_admin


@csrf_exempt
@require_http_methods(["GET", "POST"])
@require_admin
def bot_responses(request):
    if request.method == 'GET':
        return APIResponse.success(data=[BotResponseService.serialize(b) for b in BotResponseService.list_all()])

    data, error = parse_json_body(request)
    if error:
        return error

    bot_response = BotResponseService.create(data)
    return APIResponse.created(data=BotResponseService.serialize(bot_response), message='Bot response created')


@csrf_exempt
@require_http_methods(["PUT", "DELETE"])
@require_admin
def bot_response_detail(request, bot_response_id):
    if request.method == 'DELETE':
        BotResponseService.delete(bot_response_id)
        return APIResponse.success(message='Bot response deleted')

    data, error = parse_json_body(request)
    if error:
        return error

    bot_response = BotResponseService.update(bot_response_id, data)
    return APIResponse.success(data=BotResponseService.serialize(bot_response), message='Bot response updated')
