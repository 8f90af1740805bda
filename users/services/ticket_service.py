import logging
import secrets
from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync
from django.db import transaction, IntegrityError
from django.db.models import Prefetch
from users.helpers.errors import Forbidden, NotFound, ValidationFailed
from users.helpers.messages import (
    SENDER_ADMIN, SENDER_USER, make_message, sorted_messages
)
from users.models import Ticket, User

logger = logging.getLogger(__name__)


class TicketNotifier:
    """Pushes ticket changes to websocket subscribers of ``ticket_<id>``."""

    @staticmethod
    def group_name(ticket_id):
        return f'ticket_{ticket_id}'

    @staticmethod
    def notify_ticket(ticket_id, event_type, data):
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return
        try:
            async_to_sync(channel_layer.group_send)(
                TicketNotifier.group_name(ticket_id),
                {
                    'type': 'ticket_update',
                    'event_type': event_type,
                    'data': data
                }
            )
        except Exception:
            # the change is already committed; subscribers catch up on next fetch
            logger.warning('Broadcast of %s for ticket %s failed', event_type, ticket_id, exc_info=True)


class TicketService:
    NUMBER_ATTEMPTS = 10

    @staticmethod
    def can_access(ticket, user):
        return ticket.user_id == user.id or user.role == User.RoleChoices.ADMIN

    @staticmethod
    def serialize_ticket(ticket, include_messages=True):
        data = {
            'id': ticket.id,
            'number': ticket.number,
            'subject': ticket.subject,
            'status': ticket.status,
            'user_id': ticket.user_id,
            'created_at': ticket.created_at.isoformat(),
            'updated_at': ticket.updated_at.isoformat()
        }
        if include_messages:
            data['messages'] = sorted_messages(ticket.messages)
        return data

    @classmethod
    def _generate_ticket_number(cls):
        for _ in range(cls.NUMBER_ATTEMPTS):
            number = str(secrets.randbelow(900000) + 100000)
            if not Ticket.objects.filter(number=number).exists():
                return number
        raise IntegrityError('Could not allocate a ticket number')

    @classmethod
    def _get_for_update(cls, ticket_id, actor):
        try:
            ticket = Ticket.objects.select_for_update().get(id=ticket_id)
        except Ticket.DoesNotExist:
            raise NotFound('Ticket not found')

        if not cls.can_access(ticket, actor):
            raise Forbidden('You do not have access to this ticket')
        return ticket

    @classmethod
    def create_ticket(cls, user, subject, message, sender=SENDER_USER):
        subject = (subject or '').strip()
        message = (message or '').strip()

        errors = {}
        if not subject:
            errors['subject'] = 'subject is required'
        if not message:
            errors['message'] = 'message is required'
        if errors:
            raise ValidationFailed('Subject and message are required', errors=errors)

        with transaction.atomic():
            ticket = Ticket.objects.create(
                user=user,
                number=cls._generate_ticket_number(),
                subject=subject[:255],
                status=Ticket.TicketStatus.OPEN,
                messages=[make_message(message, sender)]
            )

        logger.info('Ticket %s opened by user %s', ticket.number, user.id)
        return ticket

    @classmethod
    def append_message(cls, ticket_id, actor, text, sender=None, status=None):
        """Append one message under a row lock.

        An admin reply moves the ticket to InProgress; otherwise the status only
        changes when ``status`` is given.
        """
        text = (text or '').strip()
        if not text:
            raise ValidationFailed('Message text is required', errors={'text': 'text is required'})

        if status and status not in Ticket.TicketStatus.values:
            raise ValidationFailed('Invalid status', errors={'status': f'status must be one of {", ".join(Ticket.TicketStatus.values)}'})

        with transaction.atomic():
            ticket = cls._get_for_update(ticket_id, actor)

            if sender is None:
                sender = SENDER_USER if ticket.user_id == actor.id else SENDER_ADMIN

            message = make_message(text, sender)
            ticket.messages = sorted_messages(ticket.messages) + [message]

            if sender == SENDER_ADMIN:
                ticket.status = Ticket.TicketStatus.IN_PROGRESS
            elif status:
                ticket.status = status

            ticket.save(update_fields=['messages', 'status', 'updated_at'])

            transaction.on_commit(lambda: TicketNotifier.notify_ticket(
                ticket.id, 'message_added', {'message': message, 'status': ticket.status}
            ))

        return ticket, message

    @classmethod
    def set_status(cls, ticket_id, actor, status):
        if status not in Ticket.TicketStatus.values:
            raise ValidationFailed('Invalid status', errors={'status': f'status must be one of {", ".join(Ticket.TicketStatus.values)}'})

        with transaction.atomic():
            ticket = cls._get_for_update(ticket_id, actor)
            ticket.status = status
            ticket.save(update_fields=['status', 'updated_at'])

            transaction.on_commit(lambda: TicketNotifier.notify_ticket(
                ticket.id, 'status_changed', {'status': status}
            ))

        logger.info('Ticket %s set to %s by user %s', ticket.number, status, actor.id)
        return ticket

    @classmethod
    def get_ticket(cls, ticket_id, actor):
        try:
            ticket = Ticket.objects.get(id=ticket_id)
        except Ticket.DoesNotExist:
            raise NotFound('Ticket not found')

        if not cls.can_access(ticket, actor):
            raise Forbidden('You do not have access to this ticket')
        return ticket

    @classmethod
    def delete_ticket(cls, ticket_id, actor):
        with transaction.atomic():
            ticket = cls._get_for_update(ticket_id, actor)
            ticket.delete()

    @staticmethod
    def list_user_tickets(user, status=None):
        queryset = Ticket.objects.filter(user=user)
        if status:
            queryset = queryset.filter(status=status)
        return list(queryset.order_by('-created_at'))

    @classmethod
    def list_chat_logs(cls, status=None):
        tickets = Ticket.objects.order_by('-created_at')
        if status:
            tickets = tickets.filter(status=status)

        users = (
            User.objects.filter(tickets__in=tickets).distinct()
            .prefetch_related(Prefetch('tickets', queryset=tickets, to_attr='chat_tickets'))
            .order_by('name')
        )

        return [
            {
                'user': {'id': user.id, 'name': user.name, 'email': user.email},
                'tickets': [cls.serialize_ticket(t) for t in user.chat_tickets]
            }
            for user in users
        ]

    @staticmethod
    def open_notifications(user):
        return list(
            Ticket.objects.filter(
                user=user,
                status__in=[Ticket.TicketStatus.OPEN, Ticket.TicketStatus.IN_PROGRESS]
            ).order_by('-updated_at')
        )

    @classmethod
    def close_ticket(cls, user, ticket_id):
        updated = Ticket.objects.filter(id=ticket_id, user=user).update(status=Ticket.TicketStatus.CLOSED)
        if not updated:
            raise NotFound('Ticket not found')

    @staticmethod
    def close_all(user):
        return Ticket.objects.filter(user=user).exclude(
            status=Ticket.TicketStatus.CLOSED
        ).update(status=Ticket.TicketStatus.CLOSED)
