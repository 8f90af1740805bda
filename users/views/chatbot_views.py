from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.helpers.request import parse_json_body
from users.helpers.require_login import user_required
from users.helpers.response import APIResponse
from users.services.chatbot_service import ChatbotService
from users.services.ticket_service import TicketService


@csrf_exempt
@require_http_methods(["GET", "POST"])
@user_required
def messages(request):
    if request.method == 'GET':
        user_tickets = ChatbotService.list_tickets(request.user)
        current = next((t for t in user_tickets if t.status != t.TicketStatus.CLOSED), None)
        return APIResponse.success(data=TicketService.serialize_ticket(current) if current else None)

    data, error = parse_json_body(request)
    if error:
        return error

    text = (data.get('text') or data.get('message') or '').strip()
    if not text:
        return APIResponse.missing_fields(['text'])

    ticket = ChatbotService.post_message(request.user, text)
    return APIResponse.success(data=TicketService.serialize_ticket(ticket), message='Message sent')


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def tickets(request):
    user_tickets = ChatbotService.list_tickets(request.user)
    return APIResponse.success(data=[TicketService.serialize_ticket(t) for t in user_tickets])
