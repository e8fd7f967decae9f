# apps/core/permissions.py

from functools import wraps

from django.core.exceptions import PermissionDenied
from django.http import Http404

from .exceptions import AuthenticationFailed
from .models import Board, BoardRole, Card, Task
from .utils import actor_id, find_entry


class BoardPermissions:
    """
    Permission resolver of Mini Trello

    Three independent layers:
    - Board: owner, or member with an editing role when members may edit
    - Card: owner or card member (board roles are not consulted)
    - Task: owner or assignee (board and card are not consulted)

    Every predicate takes an actor (user or user id) and an already loaded
    resource. Membership rows are read from ``resource.memberships.all()``
    (or ``task.assignments.all()``), so a prefetched resource costs no query.
    Predicates never raise.
    """

    EDITING_ROLES = (BoardRole.ADMIN, BoardRole.MEMBER)

    @staticmethod
    def is_owner(actor, resource):
        """Board, card or task owner"""
        uid = actor_id(actor)
        return uid is not None and resource.owner_id == uid

    @staticmethod
    def is_member(actor, resource):
        """Member of a board or a card"""
        return find_entry(resource.memberships.all(), actor) is not None

    @staticmethod
    def is_assigned(actor, task):
        return find_entry(task.assignments.all(), actor) is not None

    @staticmethod
    def get_role(actor, board):
        membership = find_entry(board.memberships.all(), actor)
        return membership.role if membership else None

    @staticmethod
    def is_admin(actor, board):
        return BoardPermissions.get_role(actor, board) == BoardRole.ADMIN

    @staticmethod
    def can_edit_board(actor, board):
        if BoardPermissions.is_owner(actor, board):
            return True

        # Viewers never edit, members only when the board allows it
        if not board.allow_member_edit:
            return False
        return BoardPermissions.get_role(actor, board) in BoardPermissions.EDITING_ROLES

    @staticmethod
    def can_edit_card(actor, card):
        return BoardPermissions.is_owner(actor, card) or BoardPermissions.is_member(actor, card)

    @staticmethod
    def can_edit_task(actor, task):
        return BoardPermissions.is_owner(actor, task) or BoardPermissions.is_assigned(actor, task)

    @staticmethod
    def is_board_member_or_owner(actor, board):
        """Read access to a board"""
        return BoardPermissions.is_owner(actor, board) or BoardPermissions.is_member(actor, board)


# === DECORATORS FOR API VIEWS ===
# Resource decorators expect the id as a view kwarg, answer 404 before 403,
# and attach the loaded resource to the request (request.board, ...).

def api_login_required(view_func):
    """Requires an authenticated, active and verified user"""

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        user = request.user
        if not user.is_authenticated:
            raise AuthenticationFailed()
        if not user.is_active:
            raise AuthenticationFailed('Account is deactivated')
        if not user.is_verified:
            raise PermissionDenied('Please verify your email to continue')
        return view_func(request, *args, **kwargs)

    return wrapped_view


def _load(queryset, pk, label):
    try:
        return queryset.get(pk=pk)
    except queryset.model.DoesNotExist:
        raise Http404(f'{label} not found')


def _board_guard(check, message):

    def decorator(view_func):
        @api_login_required
        @wraps(view_func)
        def wrapped_view(request, board_id, *args, **kwargs):
            board = _load(Board.objects.with_members(), board_id, 'Board')
            if not check(request.user, board):
                raise PermissionDenied(message)

            request.board = board
            return view_func(request, board_id, *args, **kwargs)

        return wrapped_view

    return decorator


require_board_member = _board_guard(
    BoardPermissions.is_board_member_or_owner,
    'You do not have access to this board'
)

require_board_edit = _board_guard(
    BoardPermissions.can_edit_board,
    'You do not have permission to edit this board'
)

require_board_owner = _board_guard(
    BoardPermissions.is_owner,
    'Only the board owner can do this'
)


def require_card_edit(view_func):
    """Card owner or card member; expects ``card_id``"""

    @api_login_required
    @wraps(view_func)
    def wrapped_view(request, card_id, *args, **kwargs):
        card = _load(Card.objects.with_members(), card_id, 'Card')
        if not BoardPermissions.can_edit_card(request.user, card):
            raise PermissionDenied('You do not have permission to edit this card')

        request.card = card
        return view_func(request, card_id, *args, **kwargs)

    return wrapped_view


def require_task_edit(view_func):
    """Task owner or assignee; expects ``task_id``"""

    @api_login_required
    @wraps(view_func)
    def wrapped_view(request, task_id, *args, **kwargs):
        task = _load(Task.objects.with_assignments(), task_id, 'Task')
        if not BoardPermissions.can_edit_task(request.user, task):
            raise PermissionDenied('You do not have permission to edit this task')

        request.task = task
        return view_func(request, task_id, *args, **kwargs)

    return wrapped_view
