from django.urls import path
from users.services.ticket_consumer import TicketChatConsumer

websocket_urlpatterns = [
    path('ws/tickets/<int:ticket_id>/', TicketChatConsumer.as_asgi()),
]
