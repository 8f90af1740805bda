from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.helpers.request import parse_json_body
from users.helpers.response import APIResponse
from users.services.contact_service import ContactService


@csrf_exempt
@require_http_methods(["POST"])
def contact(request):
    data, error = parse_json_body(request)
    if error:
        return error

    submission = ContactService.submit_contact(data)
    return APIResponse.created(data={'id': submission.id}, message='Thank you, we will be in touch shortly')


@csrf_exempt
@require_http_methods(["POST"])
def newsletter(request):
    data, error = parse_json_body(request)
    if error:
        return error

    created = ContactService.subscribe(data)
    return APIResponse.success(
        data={'subscribed': True, 'new': created},
        message='Subscribed to the newsletter'
    )
