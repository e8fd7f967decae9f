# tests/conftest.py

import json

import pytest
from channels.layers import channel_layers

from apps.core.models import Board, BoardRole, Card, Task, User


@pytest.fixture(autouse=True)
def fresh_channel_layers():
    """Every test gets its own in-memory channel layer"""
    channel_layers.backends.clear()
    yield
    channel_layers.backends.clear()


@pytest.fixture
def make_user(db):
    def _make(email, name=None, verified=True, **extra):
        return User.objects.create_user(email=email, name=name, is_verified=verified, **extra)
    return _make


@pytest.fixture
def owner(make_user):
    return make_user('owner@example.com', 'Olivia')


@pytest.fixture
def board_admin(make_user):
    return make_user('admin@example.com', 'Adam')


@pytest.fixture
def member(make_user):
    return make_user('member@example.com', 'Mia')


@pytest.fixture
def viewer(make_user):
    return make_user('viewer@example.com', 'Victor')


@pytest.fixture
def outsider(make_user):
    return make_user('outsider@example.com', 'Oscar')


@pytest.fixture
def board(owner, board_admin, member, viewer):
    board = Board.objects.create(name='Roadmap', description='Q3 plans', owner=owner)
    board.add_member(board_admin, BoardRole.ADMIN)
    board.add_member(member, BoardRole.MEMBER)
    board.add_member(viewer, BoardRole.VIEWER)
    return Board.objects.with_members().get(pk=board.pk)


@pytest.fixture
def card(board, owner):
    card = Card.objects.create(board=board, owner=owner, name='Launch website')
    return Card.objects.with_members().get(pk=card.pk)


@pytest.fixture
def task(card, owner):
    task = Task.objects.create(card=card, owner=owner, title='Write landing copy')
    return Task.objects.with_assignments().get(pk=task.pk)


class JsonClient:
    """Django test client speaking JSON"""

    def __init__(self, client):
        self.client = client

    def login(self, user):
        self.client.force_login(user)
        return self

    def get(self, url, **params):
        return self.client.get(url, params)

    def post(self, url, data=None):
        return self._send('post', url, data)

    def put(self, url, data=None):
        return self._send('put', url, data)

    def delete(self, url):
        return self.client.delete(url)

    def _send(self, method, url, data):
        body = json.dumps(data) if data is not None else ''
        return getattr(self.client, method)(url, data=body, content_type='application/json')


@pytest.fixture
def api(client):
    return JsonClient(client)
