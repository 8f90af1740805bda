import logging
from users.helpers.messages import SENDER_BOT
from users.models import BotResponse, Ticket
from users.services.ticket_service import TicketService

logger = logging.getLogger(__name__)


class ChatbotService:
    CHAT_SUBJECT = 'Chat support'

    @staticmethod
    def find_reply(text):
        lowered = text.lower()
        for bot_response in BotResponse.objects.all():
            trigger = bot_response.trigger.strip().lower()
            if trigger and trigger in lowered:
                return bot_response.response
        return None

    @classmethod
    def post_message(cls, user, text):
        """Route a widget message onto the user's newest open ticket, then auto-reply if a trigger matches."""
        ticket = (
            Ticket.objects.filter(user=user)
            .exclude(status=Ticket.TicketStatus.CLOSED)
            .order_by('-updated_at')
            .first()
        )

        if ticket is None:
            ticket = TicketService.create_ticket(user, cls.CHAT_SUBJECT, text)
        else:
            ticket, _ = TicketService.append_message(ticket.id, user, text)

        reply = cls.find_reply(text)
        if reply:
            ticket, _ = TicketService.append_message(ticket.id, user, reply, sender=SENDER_BOT)
            logger.info('Bot replied on ticket %s', ticket.number)

        return ticket

    @staticmethod
    def list_tickets(user):
        return TicketService.list_user_tickets(user)
