# tests/test_membership.py

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.models import (
    Board, BoardMembership, BoardRole, CardMember, Task, TaskAssignment, WorkflowStatus
)

pytestmark = pytest.mark.django_db


def _age(resource):
    """Moves last_activity into the past, bypassing save()"""
    past = timezone.now() - timedelta(days=1)
    type(resource).objects.filter(pk=resource.pk).update(last_activity=past)
    resource.refresh_from_db()
    return past


class TestBoardMembership:

    def test_add_member_twice_keeps_one_entry_with_last_role(self, owner, member):
        board = Board.objects.create(name='Ops', owner=owner)

        board.add_member(member, BoardRole.VIEWER)
        board.add_member(member, BoardRole.ADMIN)

        memberships = BoardMembership.objects.filter(board=board, user=member)
        assert memberships.count() == 1
        assert memberships.get().role == BoardRole.ADMIN

    def test_role_defaults_to_member(self, owner, member):
        board = Board.objects.create(name='Ops', owner=owner)

        membership = board.add_member(member)

        assert membership.role == BoardRole.MEMBER
        assert membership.joined_at is not None

    def test_remove_member_is_idempotent(self, board, member, outsider):
        board.remove_member(member)
        board.remove_member(member)
        board.remove_member(outsider)

        assert not BoardMembership.objects.filter(board=board, user=member).exists()
        assert board.get_membership(member) is None

    def test_mutations_touch_last_activity(self, board, member):
        past = _age(board)

        board.add_member(member, BoardRole.VIEWER)
        assert board.last_activity > past

        past = _age(board)
        board.remove_member(member)
        assert board.last_activity > past

    def test_for_user_lists_owned_and_member_boards(self, board, owner, member, outsider):
        archived = Board.objects.create(name='Old', owner=owner, is_archived=True)

        assert list(Board.objects.for_user(owner)) == [board]
        assert list(Board.objects.for_user(member)) == [board]
        assert list(Board.objects.for_user(outsider)) == []
        assert archived not in Board.objects.for_user(owner)

    def test_settings_dict(self, board):
        assert board.settings == {
            'allowMemberInvite': True,
            'allowMemberEdit': True,
            'defaultCardStatus': WorkflowStatus.BACKLOG,
        }


class TestCardMembership:

    def test_add_member_is_a_no_op_when_present(self, card, member):
        first = card.add_member(member)
        second = card.add_member(member)

        assert first.pk == second.pk
        assert CardMember.objects.filter(card=card, user=member).count() == 1

    def test_remove_member_is_idempotent(self, card, member):
        card.add_member(member)

        card.remove_member(member)
        card.remove_member(member)

        assert card.get_membership(member) is None

    def test_labels_are_unique_case_insensitively(self, card):
        card.add_label('Bug')
        card.add_label('bug', '#FF0000')
        card.add_label('Feature', '#00FF00')

        assert card.labels == [
            {'name': 'Bug', 'color': '#3B82F6'},
            {'name': 'Feature', 'color': '#00FF00'},
        ]

        card.remove_label('BUG')
        assert [label['name'] for label in card.labels] == ['Feature']


class TestTasks:

    def test_board_is_taken_from_the_card(self, card, owner):
        task = Task.objects.create(card=card, owner=owner, title='Inherit board')

        assert task.board_id == card.board_id

    def test_assign_is_a_no_op_when_present(self, task, member):
        task.assign_user(member)
        task.assign_user(member)

        assert TaskAssignment.objects.filter(task=task, user=member).count() == 1

    def test_unassign_is_idempotent(self, task, member):
        task.assign_user(member)

        task.unassign_user(member)
        task.unassign_user(member)

        assert not task.assignments.exists()

    def test_complete_and_reopen(self, task, member):
        task.complete(member)
        task.refresh_from_db()

        assert task.is_completed
        assert task.status == WorkflowStatus.DONE
        assert task.completed_by == member
        assert task.completed_at is not None

        task.reopen()
        task.refresh_from_db()

        assert not task.is_completed
        assert task.status == WorkflowStatus.ONGOING
        assert task.completed_by is None
        assert task.completed_at is None

    def test_status_and_completion_can_diverge(self, task, owner):
        task.complete(owner)

        task.status = WorkflowStatus.REVIEW
        task.save()
        task.refresh_from_db()

        assert task.status == WorkflowStatus.REVIEW
        assert task.is_completed

    def test_add_comment_touches_task(self, task, member):
        past = _age(task)

        comment = task.add_comment('Looks good', member)

        assert comment.author == member
        assert task.comments.count() == 1
        assert task.last_activity > past
