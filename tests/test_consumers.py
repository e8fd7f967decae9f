# tests/test_consumers.py

import pytest
from asgiref.sync import sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from apps.board.realtime import CARD_UPDATED, notify_board
from apps.board.routing import websocket_urlpatterns

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]


class ScopeUser:
    """Stands in for AuthMiddlewareStack, puts a fixed user in the scope"""

    def __init__(self, inner, user):
        self.inner = inner
        self.user = user

    async def __call__(self, scope, receive, send):
        return await self.inner({**scope, 'user': self.user}, receive, send)


async def open_socket(user):
    communicator = WebsocketCommunicator(ScopeUser(URLRouter(websocket_urlpatterns), user), '/ws/boards/')
    connected, _ = await communicator.connect()
    assert connected
    return communicator


async def join(communicator, board_id):
    await communicator.send_json_to({'type': 'join-board', 'boardId': board_id})
    return await communicator.receive_json_from()


async def test_anonymous_connection_is_rejected():
    communicator = WebsocketCommunicator(
        ScopeUser(URLRouter(websocket_urlpatterns), AnonymousUser()),
        '/ws/boards/'
    )

    connected, _ = await communicator.connect()

    assert not connected


async def test_ping(member):
    communicator = await open_socket(member)

    await communicator.send_json_to({'type': 'ping'})
    response = await communicator.receive_json_from()

    assert response['type'] == 'pong'
    assert response['timestamp']
    await communicator.disconnect()


async def test_event_reaches_everyone_but_the_sender(board, owner, member):
    alice = await open_socket(owner)
    bob = await open_socket(member)

    assert await join(alice, board.pk) == {'type': 'board-joined', 'boardId': str(board.pk)}
    assert await join(bob, board.pk) == {'type': 'board-joined', 'boardId': str(board.pk)}

    event = {'type': 'task-moved', 'boardId': board.pk, 'taskId': 7, 'status': 'review'}
    await bob.send_json_to(event)

    assert await alice.receive_json_from() == event
    assert await bob.receive_nothing()

    await alice.disconnect()
    await bob.disconnect()


async def test_outsider_cannot_join(board, outsider):
    communicator = await open_socket(outsider)

    response = await join(communicator, board.pk)

    assert response['type'] == 'error'
    assert response['boardId'] == board.pk
    await communicator.disconnect()


async def test_unknown_board_cannot_be_joined(member):
    communicator = await open_socket(member)

    assert (await join(communicator, 999999))['type'] == 'error'
    assert (await join(communicator, 'not a board'))['type'] == 'error'
    await communicator.disconnect()


async def test_events_need_a_joined_room(board, owner, member):
    alice = await open_socket(owner)
    bob = await open_socket(member)
    await join(alice, board.pk)

    await bob.send_json_to({'type': 'card-updated', 'boardId': board.pk})

    assert (await bob.receive_json_from())['type'] == 'error'
    assert await alice.receive_nothing()

    await alice.disconnect()
    await bob.disconnect()


async def test_left_room_gets_no_events(board, owner, member):
    alice = await open_socket(owner)
    bob = await open_socket(member)
    await join(alice, board.pk)
    await join(bob, board.pk)

    await alice.send_json_to({'type': 'leave-board', 'boardId': board.pk})
    assert await alice.receive_json_from() == {'type': 'board-left', 'boardId': str(board.pk)}

    await bob.send_json_to({'type': 'card-updated', 'boardId': board.pk, 'cardId': 1})
    assert await alice.receive_nothing()

    await alice.disconnect()
    await bob.disconnect()


async def test_bad_messages(member):
    communicator = await open_socket(member)

    await communicator.send_to(text_data='{not json')
    assert await communicator.receive_json_from() == {'type': 'error', 'message': 'Invalid JSON'}

    await communicator.send_json_to({'type': 'dance'})
    response = await communicator.receive_json_from()
    assert response['type'] == 'error'
    assert 'dance' in response['message']

    await communicator.disconnect()


async def test_server_notification_reaches_the_room(board, owner):
    communicator = await open_socket(owner)
    await join(communicator, board.pk)

    await sync_to_async(notify_board)(board.pk, CARD_UPDATED, {'action': 'updated', 'cardId': 3})

    assert await communicator.receive_json_from() == {
        'type': CARD_UPDATED,
        'boardId': str(board.pk),
        'action': 'updated',
        'cardId': 3,
    }
    await communicator.disconnect()


class TestOpenRooms:
    """Membership checks switched off: any connection, any room"""

    @pytest.fixture(autouse=True)
    def open_rooms(self, settings):
        settings.MINITRELLO_REALTIME_REQUIRE_MEMBERSHIP = False

    async def test_anonymous_clients_share_a_room(self):
        first = await open_socket(AnonymousUser())
        second = await open_socket(AnonymousUser())

        assert (await join(first, 'lobby'))['boardId'] == 'lobby'
        await join(second, 'lobby')

        await first.send_json_to({'type': 'card-updated', 'boardId': 'lobby', 'cardId': 'c1'})

        assert await second.receive_json_from() == {'type': 'card-updated', 'boardId': 'lobby', 'cardId': 'c1'}
        assert await first.receive_nothing()

        await first.disconnect()
        await second.disconnect()

    async def test_room_ids_are_still_validated(self):
        communicator = await open_socket(AnonymousUser())

        response = await join(communicator, 'no spaces allowed')

        assert response['type'] == 'error'
        await communicator.disconnect()
