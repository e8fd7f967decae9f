# apps/board/realtime.py

"""
Realtime fanout helpers

Every board has one room, a Channels group named ``board_<id>``. Clients
relay ``card-updated`` and ``task-moved`` to everyone else in the room; the
HTTP API emits the same events after its writes commit.

Room membership is tracked per connection (``BoardRooms``); the group
registry itself lives in the channel layer.
"""

import logging
import re

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

CARD_UPDATED = 'card-updated'
TASK_MOVED = 'task-moved'
BOARD_EVENTS = (CARD_UPDATED, TASK_MOVED)

# Group names are limited to ASCII alphanumerics, hyphens, underscores and
# periods, under 100 characters
BOARD_ID_PATTERN = re.compile(r'^[A-Za-z0-9_.-]{1,80}$')

# Type of the group message, dispatched to ``BoardConsumer.board_event``
GROUP_MESSAGE_TYPE = 'board.event'


class InvalidRoomError(ValueError):
    """Board id that cannot be used as a room key"""


def normalize_board_id(board_id):
    room = str(board_id).strip() if board_id is not None else ''
    if not BOARD_ID_PATTERN.match(room):
        raise InvalidRoomError(f'Invalid board id: {board_id!r}')
    return room


def board_group_name(board_id):
    return f'board_{normalize_board_id(board_id)}'


def group_message(event, payload, sender=None):
    return {
        'type': GROUP_MESSAGE_TYPE,
        'event': event,
        'payload': payload,
        'sender': sender,
    }


class BoardRooms:
    """
    Rooms joined by one websocket connection

    Leaving a room that was never joined is harmless, and so is joining
    twice.
    """

    def __init__(self, channel_layer, channel_name):
        self.channel_layer = channel_layer
        self.channel_name = channel_name
        self.rooms = set()

    def __contains__(self, board_id):
        try:
            return normalize_board_id(board_id) in self.rooms
        except InvalidRoomError:
            return False

    def __len__(self):
        return len(self.rooms)

    async def join(self, board_id):
        room = normalize_board_id(board_id)
        await self.channel_layer.group_add(board_group_name(room), self.channel_name)
        self.rooms.add(room)
        return room

    async def leave(self, board_id):
        room = normalize_board_id(board_id)
        await self.channel_layer.group_discard(board_group_name(room), self.channel_name)
        self.rooms.discard(room)
        return room

    async def leave_all(self):
        for room in list(self.rooms):
            await self.leave(room)

    async def relay(self, event, payload):
        """
        Broadcasts a client event to the room named by ``payload['boardId']``

        The payload goes out unchanged; this connection is marked as the
        sender so it does not receive its own event.
        """
        room = normalize_board_id(payload.get('boardId'))
        await self.channel_layer.group_send(
            board_group_name(room),
            group_message(event, payload, sender=self.channel_name)
        )
        return room


def notify_board(board_id, event, payload):
    """
    Sends a server-side event to every connection in a board room

    Synchronous, for use from views and signals.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    message = {**payload, 'type': event, 'boardId': str(board_id)}
    async_to_sync(channel_layer.group_send)(
        board_group_name(board_id),
        group_message(event, message)
    )
    logger.debug(f"{event} sent to board {board_id}")


def notify_board_on_commit(board_id, event, payload):
    """Schedules ``notify_board`` for when the current transaction commits"""
    transaction.on_commit(lambda: notify_board(board_id, event, payload))
