# tests/test_realtime.py

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from apps.board.realtime import (
    CARD_UPDATED, TASK_MOVED, BoardRooms, InvalidRoomError, board_group_name, normalize_board_id,
    notify_board
)


@pytest.mark.parametrize('board_id, expected', [
    (42, '42'),
    (' 42 ', '42'),
    ('665f1c2ab1', '665f1c2ab1'),
    ('team.alpha-1_x', 'team.alpha-1_x'),
])
def test_normalize_board_id(board_id, expected):
    assert normalize_board_id(board_id) == expected


@pytest.mark.parametrize('board_id', [None, '', 'has space', 'x' * 81, 'emoji🙂'])
def test_invalid_board_ids(board_id):
    with pytest.raises(InvalidRoomError):
        normalize_board_id(board_id)


def test_group_name():
    assert board_group_name(7) == 'board_7'


@pytest.mark.asyncio
async def test_rooms_join_leave_and_relay():
    layer = get_channel_layer()
    sender = BoardRooms(layer, await layer.new_channel())
    listener = BoardRooms(layer, await layer.new_channel())

    await sender.join('7')
    await listener.join(7)
    await listener.join(7)

    assert '7' in listener and 7 in listener
    assert len(listener) == 1
    assert 'bad id!' not in listener

    await sender.relay(TASK_MOVED, {'type': TASK_MOVED, 'boardId': 7})
    message = await layer.receive(listener.channel_name)

    assert message == {
        'type': 'board.event',
        'event': TASK_MOVED,
        'payload': {'type': TASK_MOVED, 'boardId': 7},
        'sender': sender.channel_name,
    }

    await listener.leave(7)
    await listener.leave(7)
    await sender.leave_all()
    assert len(listener) == 0
    assert len(sender) == 0


def test_notify_board_keeps_event_type_and_board_id():
    layer = get_channel_layer()
    channel = async_to_sync(layer.new_channel)()
    async_to_sync(layer.group_add)(board_group_name(7), channel)

    notify_board(7, CARD_UPDATED, {'type': 'spoofed', 'boardId': '99', 'cardId': 1})
    message = async_to_sync(layer.receive)(channel)

    assert message['event'] == CARD_UPDATED
    assert message['sender'] is None
    assert message['payload'] == {'type': CARD_UPDATED, 'boardId': '7', 'cardId': 1}
