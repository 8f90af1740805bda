import json
import logging
from urllib.parse import parse_qs
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async
from users.helpers.errors import ServiceError
from users.models import Ticket
from users.services.auth_service import AuthService
from users.services.ticket_service import TicketNotifier, TicketService

logger = logging.getLogger(__name__)


class TicketChatConsumer(AsyncWebsocketConsumer):
    """Live view of one ticket for its owner or an admin.

    Connect to ``ws/tickets/<id>/?token=<jwt>``; send ``{"type": "chat_message", "text": ...}``.
    """

    async def connect(self):
        self.ticket_id = self.scope['url_route']['kwargs']['ticket_id']
        self.room_group_name = TicketNotifier.group_name(self.ticket_id)

        query = parse_qs(self.scope.get('query_string', b'').decode())
        token = (query.get('token') or [None])[0]

        self.user = await self.authenticate(token)
        if self.user is None or not await self.verify_ticket_access():
            await self.close(code=4403)
            return

        await self.channel_layer.group_add(
            self.room_group_name,
            self.channel_name
        )

        await self.accept()

        await self.send(text_data=json.dumps({
            'type': 'connection_established',
            'ticket_id': self.ticket_id
        }))

    async def disconnect(self, close_code):
        if getattr(self, 'user', None) is not None:
            await self.channel_layer.group_discard(
                self.room_group_name,
                self.channel_name
            )

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            await self.send_error('Invalid JSON')
            return

        if data.get('type') == 'chat_message':
            await self.handle_chat_message(data)
        else:
            await self.send_error('Unsupported message type')

    async def handle_chat_message(self, data):
        text = (data.get('text') or data.get('message') or '').strip()
        if not text:
            return

        try:
            await self.save_message(text)
        except ServiceError as e:
            await self.send_error(e.message)

    async def send_error(self, message):
        await self.send(text_data=json.dumps({
            'type': 'error',
            'message': message
        }))

    async def ticket_update(self, event):
        await self.send(text_data=json.dumps({
            'type': 'ticket_update',
            'event_type': event['event_type'],
            'data': event['data']
        }))

    @database_sync_to_async
    def authenticate(self, token):
        return AuthService.get_user_from_token(token)

    @database_sync_to_async
    def verify_ticket_access(self):
        ticket = Ticket.objects.filter(id=self.ticket_id).first()
        return ticket is not None and TicketService.can_access(ticket, self.user)

    @database_sync_to_async
    def save_message(self, text):
        # the resulting ticket_update broadcast reaches this socket too
        return TicketService.append_message(self.ticket_id, self.user, text)
