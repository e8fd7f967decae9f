# apps/board/routing.py

from django.urls import re_path
from . import consumers

# WebSocket routes of the board app
websocket_urlpatterns = [
    # Single endpoint, rooms are joined per message
    re_path(r'ws/boards/$', consumers.BoardConsumer.as_asgi()),
]
