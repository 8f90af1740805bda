from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.helpers.messages import SENDER_ADMIN
from users.helpers.response import APIResponse
from users.helpers.request import parse_json_body
from users.models import Ticket
from users.services.ticket_service import TicketService
from admins.helpers.require_admin import require_admin


def ticket_id_from(data):
    ticket_id = data.get('ticketId') or data.get('ticket_id')
    if ticket_id is None or not str(ticket_id).isdigit():
        return None
    return int(ticket_id)


@csrf_exempt
@require_http_methods(["GET"])
@require_admin
def chat_logs(request):
    status = request.GET.get('status')
    if status and status not in Ticket.TicketStatus.values:
        return APIResponse.validation_error(errors={'status': 'Unknown status'})

    return APIResponse.success(data=TicketService.list_chat_logs(status=status))


@csrf_exempt
@require_http_methods(["POST"])
@require_admin
def reply(request):
    data, error = parse_json_body(request)
    if error:
        return error

    ticket_id = ticket_id_from(data)
    text = (data.get('text') or data.get('message') or '').strip()

    missing = [name for name, value in (('ticketId', ticket_id), ('text', text)) if not value]
    if missing:
        return APIResponse.missing_fields(missing)

    ticket, message = TicketService.append_message(ticket_id, request.user, text, sender=SENDER_ADMIN)
    return APIResponse.success(
        data={'ticket': TicketService.serialize_ticket(ticket), 'message': message},
        message='Reply sent'
    )


@csrf_exempt
@require_http_methods(["POST"])
@require_admin
def update_ticket_status(request):
    data, error = parse_json_body(request)
    if error:
        return error

    ticket_id = ticket_id_from(data)
    status = data.get('status')

    missing = [name for name, value in (('ticketId', ticket_id), ('status', status)) if not value]
    if missing:
        return APIResponse.missing_fields(missing)

    ticket = TicketService.set_status(ticket_id, request.user, status)
    return APIResponse.success(data=TicketService.serialize_ticket(ticket, include_messages=False), message='Status updated')
