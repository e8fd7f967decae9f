# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from apps.core.models import Board
from apps.core.permissions import BoardPermissions

from .realtime import BOARD_EVENTS, BoardRooms, InvalidRoomError

logger = logging.getLogger(__name__)


class BoardConsumer(AsyncWebsocketConsumer):
    """
    Websocket endpoint for realtime board sync

    Client messages:
    - {"type": "join-board", "boardId": ...}   -> {"type": "board-joined", ...}
    - {"type": "leave-board", "boardId": ...}  -> {"type": "board-left", ...}
    - {"type": "card-updated" | "task-moved", "boardId": ..., ...}
      relayed verbatim to the other connections of the room
    - {"type": "ping"}                         -> {"type": "pong", ...}

    With MINITRELLO_REALTIME_REQUIRE_MEMBERSHIP on, the connection must be
    authenticated, joins are limited to boards the user owns or belongs to,
    and events can only be sent to joined rooms.
    """

    async def connect(self):
        self.user = self.scope.get('user')
        self.require_membership = getattr(settings, 'MINITRELLO_REALTIME_REQUIRE_MEMBERSHIP', True)
        self.rooms = BoardRooms(self.channel_layer, self.channel_name)

        if self.require_membership and not (self.user and self.user.is_authenticated):
            logger.warning("❌ WebSocket rejected - user not authenticated")
            await self.close()
            return

        await self.accept()
        logger.info(f"🔌 WebSocket connected - {self.describe_user()} ({self.channel_name})")

    async def disconnect(self, close_code):
        if hasattr(self, 'rooms'):
            await self.rooms.leave_all()

        logger.info(f"🔌 WebSocket disconnected - {self.describe_user()} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ Invalid JSON received from {self.describe_user()}")
            await self.send_error('Invalid JSON')
            return

        if not isinstance(data, dict):
            await self.send_error('Messages must be JSON objects')
            return

        message_type = data.get('type')

        try:
            # Heartbeat
            if message_type == 'ping':
                await self.send_json({'type': 'pong', 'timestamp': self.get_timestamp()})

            elif message_type == 'join-board':
                await self.join_board(data.get('boardId'))

            elif message_type == 'leave-board':
                room = await self.rooms.leave(data.get('boardId'))
                await self.send_json({'type': 'board-left', 'boardId': room})
                logger.info(f"👋 {self.describe_user()} left board {room}")

            elif message_type in BOARD_EVENTS:
                await self.relay_event(message_type, data)

            else:
                await self.send_error(f'Unknown message type: {message_type}')

        except InvalidRoomError as e:
            await self.send_error(str(e))

    async def join_board(self, board_id):
        if self.require_membership and not await self.can_join(board_id):
            logger.warning(f"❌ {self.describe_user()} denied access to board {board_id}")
            await self.send_error('You do not have access to this board', boardId=board_id)
            return

        room = await self.rooms.join(board_id)
        await self.send_json({'type': 'board-joined', 'boardId': room})
        logger.info(f"👥 {self.describe_user()} joined board {room}")

    async def relay_event(self, event, data):
        board_id = data.get('boardId')
        if self.require_membership and board_id not in self.rooms:
            await self.send_error('Join the board before sending events', boardId=board_id)
            return

        await self.rooms.relay(event, data)

    # === Group message handlers ===

    async def board_event(self, event):
        """
        Delivers a room event to this connection

        The connection that sent the event does not get it back.
        """
        if event.get('sender') == self.channel_name:
            return
        await self.send_json(event['payload'])

    # === Helpers ===

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    async def send_error(self, message, **extra):
        await self.send_json({'type': 'error', 'message': message, **extra})

    @database_sync_to_async
    def can_join(self, board_id):
        """Owner or member of an existing board"""
        try:
            board = Board.objects.with_members().get(pk=board_id)
        except (Board.DoesNotExist, ValueError, TypeError):
            return False
        return BoardPermissions.is_board_member_or_owner(self.user, board)

    def describe_user(self):
        if self.user is not None and self.user.is_authenticated:
            return self.user.email
        return 'anonymous'

    def get_timestamp(self):
        return timezone.now().isoformat()
