# tests/test_board_api.py

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from apps.board.realtime import CARD_UPDATED, TASK_MOVED, board_group_name
from apps.core.models import Board, BoardRole, Card, Invitation, Task, WorkflowStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def sent_events(monkeypatch):
    """Room events emitted by the API, as (board_id, event, payload)"""
    events = []
    monkeypatch.setattr(
        'apps.board.realtime.notify_board',
        lambda board_id, event, payload: events.append((board_id, event, payload))
    )
    return events


class TestBoards:

    def test_list_only_accessible_boards(self, api, board, member, outsider):
        response = api.login(member).get('/api/boards/')
        assert [item['id'] for item in response.json()['boards']] == [board.pk]

        response = api.login(outsider).get('/api/boards/')
        assert response.json()['boards'] == []

    def test_create(self, api, outsider):
        response = api.login(outsider).post('/api/boards/', {'name': 'Side project'})

        assert response.status_code == 201
        board = Board.objects.get(pk=response.json()['board']['id'])
        assert board.owner == outsider
        assert board.default_card_status == WorkflowStatus.BACKLOG

    def test_create_requires_name(self, api, outsider):
        response = api.login(outsider).post('/api/boards/', {'name': ''})

        assert response.status_code == 400
        assert response.json()['error'] == 'Validation error'

    def test_detail_for_members(self, api, board, viewer):
        response = api.login(viewer).get(f'/api/boards/{board.pk}/')

        assert response.status_code == 200
        body = response.json()['board']
        assert body['settings']['allowMemberEdit'] is True
        assert {entry['role'] for entry in body['members']} == {'admin', 'member', 'viewer'}

    def test_not_found_comes_before_forbidden(self, api, board, outsider):
        api.login(outsider)

        assert api.get('/api/boards/999999/').status_code == 404
        assert api.get(f'/api/boards/{board.pk}/').status_code == 403

    def test_requires_authentication(self, api, board):
        response = api.get(f'/api/boards/{board.pk}/')

        assert response.status_code == 401
        assert response.json()['error'] == 'Authentication required'

    def test_member_updates_board(self, api, board, member):
        response = api.login(member).put(f'/api/boards/{board.pk}/', {'name': 'Roadmap 2'})

        assert response.status_code == 200
        board.refresh_from_db()
        assert board.name == 'Roadmap 2'
        assert board.description == 'Q3 plans'

    def test_viewer_cannot_update(self, api, board, viewer):
        response = api.login(viewer).put(f'/api/boards/{board.pk}/', {'name': 'Mine now'})

        assert response.status_code == 403

    def test_settings_are_merged(self, api, board, owner, member):
        response = api.login(owner).put(
            f'/api/boards/{board.pk}/',
            {'settings': {'allowMemberEdit': False}}
        )

        assert response.status_code == 200
        assert response.json()['board']['settings'] == {
            'allowMemberInvite': True,
            'allowMemberEdit': False,
            'defaultCardStatus': 'backlog',
        }

        response = api.login(member).put(f'/api/boards/{board.pk}/', {'name': 'Nope'})
        assert response.status_code == 403

    def test_only_owner_deletes(self, api, board, board_admin, owner):
        assert api.login(board_admin).delete(f'/api/boards/{board.pk}/').status_code == 403

        assert api.login(owner).delete(f'/api/boards/{board.pk}/').status_code == 200
        assert not Board.objects.filter(pk=board.pk).exists()

    def test_archive_hides_board(self, api, board, owner):
        api.login(owner)

        response = api.post(f'/api/boards/{board.pk}/archive/')

        assert response.json()['board']['isArchived'] is True
        assert api.get('/api/boards/').json()['boards'] == []

    def test_remove_member(self, api, board, owner, viewer):
        response = api.login(owner).delete(f'/api/boards/{board.pk}/members/{viewer.pk}/')

        assert response.status_code == 200
        assert api.login(viewer).get(f'/api/boards/{board.pk}/').status_code == 403

    def test_wrong_method(self, api, board, owner):
        assert api.login(owner).post(f'/api/boards/{board.pk}/').status_code == 405


class TestInvitationsApi:

    def test_invite_and_accept(self, api, board, member, outsider, mailoutbox):
        response = api.login(member).post(
            f'/api/boards/{board.pk}/invite/',
            {'email': outsider.email, 'role': 'viewer'}
        )
        assert response.status_code == 201
        assert len(mailoutbox) == 1

        api.login(outsider)
        pending = api.get('/api/invitations/').json()['invitations']
        assert [item['boardName'] for item in pending] == ['Roadmap']

        response = api.post(f'/api/invitations/{pending[0]["id"]}/accept/')
        assert response.status_code == 200
        assert response.json()['invitation']['status'] == 'accepted'

        assert api.get(f'/api/boards/{board.pk}/').status_code == 200
        board.refresh_from_db()
        assert board.get_membership(outsider).role == BoardRole.VIEWER

    def test_viewer_cannot_invite(self, api, board, viewer, outsider):
        response = api.login(viewer).post(f'/api/boards/{board.pk}/invite/', {'email': outsider.email})

        assert response.status_code == 403

    def test_inviting_a_member_conflicts(self, api, board, owner, viewer):
        response = api.login(owner).post(f'/api/boards/{board.pk}/invite/', {'email': viewer.email})

        assert response.status_code == 409

    def test_accepting_twice_conflicts(self, api, board, owner, outsider):
        api.login(owner).post(f'/api/boards/{board.pk}/invite/', {'email': outsider.email})
        invitation = Invitation.objects.get(invitee=outsider)

        api.login(outsider)
        assert api.post(f'/api/invitations/{invitation.pk}/accept/').status_code == 200
        assert api.post(f'/api/invitations/{invitation.pk}/decline/').status_code == 409

    def test_someone_else_cannot_accept(self, api, board, owner, member, outsider):
        api.login(owner).post(f'/api/boards/{board.pk}/invite/', {'email': outsider.email})
        invitation = Invitation.objects.get(invitee=outsider)

        response = api.login(member).post(f'/api/invitations/{invitation.pk}/accept/')

        assert response.status_code == 403

    def test_board_invitations_for_editors(self, api, board, owner, outsider, viewer):
        api.login(owner).post(f'/api/boards/{board.pk}/invite/', {'email': outsider.email})

        response = api.get(f'/api/boards/{board.pk}/invitations/')
        assert [item['email'] for item in response.json()['invitations']] == [outsider.email]

        assert api.login(viewer).get(f'/api/boards/{board.pk}/invitations/').status_code == 403


class TestCards:

    def test_create_uses_board_defaults(self, api, board, member, sent_events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = api.login(member).post(f'/api/cards/board/{board.pk}/', {'name': 'Docs'})

        assert response.status_code == 201
        card = response.json()['card']
        assert card['status'] == 'backlog'
        assert card['priority'] == 'medium'
        assert sent_events == [(board.pk, CARD_UPDATED, {
            'action': 'created',
            'cardId': card['id'],
            'card': card,
        })]

    def test_outsider_cannot_list_cards(self, api, board, outsider):
        assert api.login(outsider).get(f'/api/cards/board/{board.pk}/').status_code == 403

    def test_board_admin_is_not_a_card_editor(self, api, card, board_admin):
        response = api.login(board_admin).get(f'/api/cards/{card.pk}/')

        assert response.status_code == 403

    def test_card_member_edits(self, api, card, owner, member):
        api.login(owner).post(f'/api/cards/{card.pk}/members/', {'userId': member.pk})

        response = api.login(member).put(f'/api/cards/{card.pk}/', {'priority': 'urgent'})

        assert response.status_code == 200
        card.refresh_from_db()
        assert card.priority == 'urgent'
        assert card.name == 'Launch website'

    def test_add_unknown_member(self, api, card, owner):
        response = api.login(owner).post(f'/api/cards/{card.pk}/members/', {'userId': 999999})

        assert response.status_code == 404

    def test_invalid_status(self, api, card, owner):
        response = api.login(owner).put(f'/api/cards/{card.pk}/', {'status': 'someday'})

        assert response.status_code == 400

    def test_labels(self, api, card, owner):
        api.login(owner)

        api.post(f'/api/cards/{card.pk}/labels/', {'name': 'Bug'})
        response = api.post(f'/api/cards/{card.pk}/labels/', {'name': 'BUG', 'color': '#FF0000'})
        assert response.json()['labels'] == [{'name': 'Bug', 'color': '#3B82F6'}]

        response = api.delete(f'/api/cards/{card.pk}/labels/bug/')
        assert response.json()['labels'] == []

    def test_label_without_color_gets_default(self, api, card, owner):
        response = api.login(owner).post(f'/api/cards/{card.pk}/labels/', {'name': 'Docs'})

        assert response.status_code == 200
        assert response.json()['labels'] == [{'name': 'Docs', 'color': '#3B82F6'}]

    def test_bad_label_color(self, api, card, owner):
        response = api.login(owner).post(f'/api/cards/{card.pk}/labels/', {'name': 'Bug', 'color': 'red'})

        assert response.status_code == 400

    def test_delete(self, api, card, owner, sent_events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = api.login(owner).delete(f'/api/cards/{card.pk}/')

        assert response.status_code == 200
        assert not Card.objects.filter(pk=card.pk).exists()
        assert sent_events == [(card.board_id, CARD_UPDATED, {'action': 'deleted', 'cardId': card.pk})]


class TestTasks:

    def test_create_on_the_card_board(self, api, card, owner):
        response = api.login(owner).post(
            f'/api/tasks/card/{card.pk}/',
            {'title': 'Pick fonts', 'estimatedHours': 2.5}
        )

        assert response.status_code == 201
        task = Task.objects.get(pk=response.json()['task']['id'])
        assert task.board_id == card.board_id
        assert task.estimated_hours == 2.5

    def test_negative_hours_rejected(self, api, card, owner):
        response = api.login(owner).post(
            f'/api/tasks/card/{card.pk}/',
            {'title': 'Pick fonts', 'estimatedHours': -1}
        )

        assert response.status_code == 400

    def test_not_found_comes_before_forbidden(self, api, task, outsider):
        api.login(outsider)

        assert api.put('/api/tasks/999999/', {'title': 'x'}).status_code == 404
        assert api.put(f'/api/tasks/{task.pk}/', {'title': 'x'}).status_code == 403

    def test_card_member_is_not_a_task_editor(self, api, task, owner, member):
        api.login(owner).post(f'/api/cards/{task.card_id}/members/', {'userId': member.pk})

        assert api.login(member).get(f'/api/tasks/{task.pk}/').status_code == 403

    def test_assignee_edits(self, api, task, owner, member):
        api.login(owner).post(f'/api/tasks/{task.pk}/assign/', {'userId': member.pk})

        response = api.login(member).put(f'/api/tasks/{task.pk}/', {'actualHours': 4})

        assert response.status_code == 200
        assert response.json()['task']['actualHours'] == 4.0

    def test_status_change_emits_task_moved(self, api, task, owner, sent_events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = api.login(owner).put(f'/api/tasks/{task.pk}/', {'status': 'review'})

        assert response.status_code == 200
        assert sent_events == [(task.board_id, TASK_MOVED, {
            'action': 'moved',
            'taskId': task.pk,
            'cardId': task.card_id,
            'status': 'review',
            'isCompleted': False,
        })]

    def test_status_update_leaves_completion_alone(self, api, task, owner):
        task.complete(owner)

        api.login(owner).put(f'/api/tasks/{task.pk}/', {'status': 'ongoing'})

        task.refresh_from_db()
        assert task.status == WorkflowStatus.ONGOING
        assert task.is_completed

    def test_complete_and_reopen(self, api, task, owner, sent_events, django_capture_on_commit_callbacks):
        api.login(owner)

        with django_capture_on_commit_callbacks(execute=True):
            completed = api.post(f'/api/tasks/{task.pk}/complete/').json()['task']
            reopened = api.post(f'/api/tasks/{task.pk}/reopen/').json()['task']

        assert (completed['status'], completed['isCompleted']) == ('done', True)
        assert (reopened['status'], reopened['isCompleted']) == ('ongoing', False)
        assert [(event, payload['action']) for _, event, payload in sent_events] == [
            (TASK_MOVED, 'completed'),
            (TASK_MOVED, 'reopened'),
        ]

    def test_other_updates_emit_card_updated(self, api, task, owner, sent_events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            api.login(owner).put(f'/api/tasks/{task.pk}/', {'title': 'Write better copy'})

        assert [(event, payload['action']) for _, event, payload in sent_events] == [
            (CARD_UPDATED, 'task-updated'),
        ]

    def test_comments(self, api, task, owner):
        response = api.login(owner).post(f'/api/tasks/{task.pk}/comments/', {'content': 'On it'})

        assert response.status_code == 201
        detail = api.get(f'/api/tasks/{task.pk}/').json()['task']
        assert [comment['content'] for comment in detail['comments']] == ['On it']

    def test_unassign(self, api, task, owner, member):
        api.login(owner)
        api.post(f'/api/tasks/{task.pk}/assign/', {'userId': member.pk})

        response = api.delete(f'/api/tasks/{task.pk}/assign/{member.pk}/')

        assert response.json()['task']['assignedTo'] == []


class TestEmission:

    def test_nothing_is_sent_before_commit(self, api, card, owner, sent_events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            api.login(owner).put(f'/api/cards/{card.pk}/', {'name': 'Renamed'})

        assert sent_events == []
        assert len(callbacks) == 1

    def test_event_reaches_the_board_room(self, api, board, owner, django_capture_on_commit_callbacks):
        layer = get_channel_layer()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(board_group_name(board.pk), channel)

        with django_capture_on_commit_callbacks(execute=True):
            api.login(owner).post(f'/api/cards/board/{board.pk}/', {'name': 'Live'})

        message = async_to_sync(layer.receive)(channel)
        assert message['type'] == 'board.event'
        assert message['sender'] is None
        assert message['payload']['type'] == CARD_UPDATED
        assert message['payload']['boardId'] == str(board.pk)
        assert message['payload']['card']['name'] == 'Live'
