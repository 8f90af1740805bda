from rest_framework.decorators import api_view
from users.helpers.require_login import user_required
from users.helpers.response import APIResponse
from users.models import Ticket
from users.services.ticket_service import TicketService


@api_view(['GET', 'POST'])
@user_required
def tickets(request):
    """
    GET  /api/tickets?status=Open        current user's tickets, newest first
    POST /api/tickets                    {"subject": "...", "message": "..."}
    """
    if request.method == 'GET':
        status_filter = request.GET.get('status')
        if status_filter and status_filter not in Ticket.TicketStatus.values:
            return APIResponse.validation_error(errors={'status': 'Unknown status'})

        user_tickets = TicketService.list_user_tickets(request.user, status=status_filter)
        return APIResponse.success(data=[TicketService.serialize_ticket(t) for t in user_tickets])

    data = request.data
    ticket = TicketService.create_ticket(
        user=request.user,
        subject=data.get('subject', ''),
        message=data.get('message', '')
    )
    return APIResponse.created(data=TicketService.serialize_ticket(ticket), message='Ticket created')


@api_view(['GET', 'PUT', 'DELETE'])
@user_required
def ticket_detail(request, ticket_id):
    """
    PUT /api/tickets/<id>   {"text": "...", "status": "Closed"?}  appends a message
    """
    if request.method == 'GET':
        ticket = TicketService.get_ticket(ticket_id, request.user)
        return APIResponse.success(data=TicketService.serialize_ticket(ticket))

    if request.method == 'DELETE':
        TicketService.delete_ticket(ticket_id, request.user)
        return APIResponse.success(message='Ticket deleted')

    data = request.data
    ticket, message = TicketService.append_message(
        ticket_id,
        request.user,
        data.get('text') or data.get('message', ''),
        status=data.get('status') or None
    )
    return APIResponse.success(
        data={'ticket': TicketService.serialize_ticket(ticket), 'message': message},
        message='Message added'
    )


@api_view(['PATCH'])
@user_required
def ticket_status(request, ticket_id):
    status_value = request.data.get('status')
    if not status_value:
        return APIResponse.missing_fields(['status'])

    ticket = TicketService.set_status(ticket_id, request.user, status_value)
    return APIResponse.success(data=TicketService.serialize_ticket(ticket, include_messages=False), message='Status updated')


@api_view(['GET', 'PUT', 'DELETE'])
@user_required
def notifications(request):
    """
    GET    open and in-progress tickets of the current user
    PUT    {"ticketId": 1} closes one of them
    DELETE closes them all
    """
    if request.method == 'GET':
        open_tickets = TicketService.open_notifications(request.user)
        return APIResponse.success(data=[TicketService.serialize_ticket(t, include_messages=False) for t in open_tickets])

    if request.method == 'PUT':
        ticket_id = request.data.get('ticketId') or request.data.get('ticket_id')
        if not ticket_id:
            return APIResponse.missing_fields(['ticketId'])
        if not str(ticket_id).isdigit():
            return APIResponse.validation_error(errors={'ticketId': 'ticketId must be a number'})
        TicketService.close_ticket(request.user, int(ticket_id))
        return APIResponse.success(message='Notification dismissed')

    closed = TicketService.close_all(request.user)
    return APIResponse.success(data={'closed': closed}, message='All notifications dismissed')
