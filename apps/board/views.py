# apps/board/views.py

"""
JSON API of boards, cards, tasks and invitations

Every view runs behind one of the permission decorators, which load the
resource (404), check the actor (403) and attach it to the request. Writes
notify the board room once the transaction commits.
"""

import logging

from django.http import Http404, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import RequestValidationError
from apps.core.forms import (
    BoardCreateForm,
    BoardUpdateForm,
    CardForm,
    CardUpdateForm,
    CommentForm,
    InviteForm,
    LabelForm,
    TaskForm,
    TaskUpdateForm,
    UserReferenceForm,
)
from apps.core.invitation_service import invitation_service
from apps.core.models import DEFAULT_LABEL_COLOR, Board, Card, Invitation, Priority, Task, User
from apps.core.permissions import (
    api_login_required,
    require_board_edit,
    require_board_member,
    require_board_owner,
    require_card_edit,
    require_task_edit,
)
from apps.core.utils import parse_json_body, snake_case_keys, validate_form

from .realtime import CARD_UPDATED, TASK_MOVED, notify_board_on_commit

logger = logging.getLogger(__name__)


def _get_user(user_id):
    try:
        return User.objects.get(pk=user_id, is_active=True)
    except User.DoesNotExist:
        raise Http404('User not found')


def _apply(instance, data):
    for field, value in data.items():
        setattr(instance, field, value)


def _card_changed(card, action):
    notify_board_on_commit(card.board_id, CARD_UPDATED, {
        'action': action,
        'cardId': card.pk,
        'card': card.summary(),
    })


def _task_changed(task, action, event=CARD_UPDATED):
    notify_board_on_commit(task.board_id, event, {
        'action': action,
        'taskId': task.pk,
        'cardId': task.card_id,
        'status': task.status,
        'isCompleted': task.is_completed,
    })


# === BOARDS ===

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@api_login_required
def board_collection(request):
    """Boards of the current user / create a board"""
    if request.method == 'GET':
        boards = Board.objects.for_user(request.user).with_members()
        return JsonResponse({'boards': [board.summary() for board in boards]})

    data = validate_form(BoardCreateForm, parse_json_body(request))
    board = Board.objects.create(owner=request.user, **data)
    board = Board.objects.with_members().get(pk=board.pk)

    logger.info(f"Board {board.pk} created by {request.user.email}")
    return JsonResponse({'message': 'Board created', 'board': board.summary()}, status=201)


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
def board_detail(request, board_id):
    if request.method == 'GET':
        return _board_read(request, board_id)
    if request.method == 'PUT':
        return _board_update(request, board_id)
    return _board_delete(request, board_id)


@require_board_member
def _board_read(request, board_id):
    return JsonResponse({'board': request.board.detail()})


@require_board_edit
def _board_update(request, board_id):
    board = request.board
    payload = parse_json_body(request)

    # Partial settings are merged into the current ones
    settings_update = payload.pop('settings', None)
    if settings_update is not None:
        if not isinstance(settings_update, dict):
            raise RequestValidationError(details=[{'field': 'settings', 'message': 'Settings must be an object'}])
        for key, value in snake_case_keys(settings_update).items():
            if key in Board.SETTINGS_FIELDS:
                payload[key] = value

    data = validate_form(BoardUpdateForm, payload)
    _apply(board, data)
    board.save()

    logger.info(f"Board {board.pk} updated by {request.user.email}")
    return JsonResponse({'message': 'Board updated', 'board': board.detail()})


@require_board_owner
def _board_delete(request, board_id):
    request.board.delete()
    logger.info(f"Board {board_id} deleted by {request.user.email}")
    return JsonResponse({'message': 'Board deleted'})


@csrf_exempt
@require_http_methods(['POST'])
@require_board_owner
def board_archive(request, board_id):
    board = request.board
    archived = board.toggle_archived()
    return JsonResponse({
        'message': 'Board archived' if archived else 'Board unarchived',
        'board': {'id': board.pk, 'name': board.name, 'isArchived': archived},
    })


@csrf_exempt
@require_http_methods(['POST'])
@require_board_edit
def board_invite(request, board_id):
    data = validate_form(InviteForm, parse_json_body(request))
    invitation = invitation_service.invite(
        request.board,
        request.user,
        data['email'],
        role=data.get('role'),
        message=data.get('message', '')
    )
    return JsonResponse({'message': 'Invitation sent', 'invitation': invitation.summary()}, status=201)


@require_http_methods(['GET'])
@require_board_edit
def board_invitations(request, board_id):
    invitations = Invitation.objects.for_board(request.board)
    return JsonResponse({'invitations': [invitation.summary() for invitation in invitations]})


@csrf_exempt
@require_http_methods(['DELETE'])
@require_board_edit
def board_remove_member(request, board_id, user_id):
    request.board.remove_member(user_id)
    logger.info(f"User {user_id} removed from board {board_id} by {request.user.email}")
    return JsonResponse({'message': 'Member removed', 'board': request.board.detail()})


# === CARDS ===

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@require_board_member
def card_collection(request, board_id):
    """Cards of a board / create a card in it"""
    board = request.board
    if request.method == 'GET':
        cards = Card.objects.for_board(board).with_members()
        return JsonResponse({'cards': [card.summary() for card in cards]})

    payload = parse_json_body(request)
    payload.setdefault('status', board.default_card_status)
    payload.setdefault('priority', Priority.MEDIUM)
    data = validate_form(CardForm, payload)

    card = Card.objects.create(board=board, owner=request.user, **data)
    card = Card.objects.with_members().get(pk=card.pk)
    _card_changed(card, 'created')

    return JsonResponse({'message': 'Card created', 'card': card.summary()}, status=201)


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
@require_card_edit
def card_detail(request, card_id):
    card = request.card

    if request.method == 'GET':
        return JsonResponse({'card': card.detail()})

    if request.method == 'DELETE':
        board_id = card.board_id
        card.delete()
        notify_board_on_commit(board_id, CARD_UPDATED, {'action': 'deleted', 'cardId': card_id})
        return JsonResponse({'message': 'Card deleted'})

    data = validate_form(CardUpdateForm, parse_json_body(request))
    _apply(card, data)
    card.save()
    _card_changed(card, 'updated')

    return JsonResponse({'message': 'Card updated', 'card': card.detail()})


@csrf_exempt
@require_http_methods(['POST'])
@require_card_edit
def card_add_member(request, card_id):
    data = validate_form(UserReferenceForm, parse_json_body(request))
    user = _get_user(data['user_id'])

    request.card.add_member(user)
    _card_changed(request.card, 'member-added')
    return JsonResponse({'message': 'Member added', 'card': request.card.detail()})


@csrf_exempt
@require_http_methods(['DELETE'])
@require_card_edit
def card_remove_member(request, card_id, user_id):
    request.card.remove_member(user_id)
    _card_changed(request.card, 'member-removed')
    return JsonResponse({'message': 'Member removed', 'card': request.card.detail()})


@csrf_exempt
@require_http_methods(['POST'])
@require_card_edit
def card_add_label(request, card_id):
    data = validate_form(LabelForm, parse_json_body(request))
    request.card.add_label(data['name'], data.get('color', DEFAULT_LABEL_COLOR))
    _card_changed(request.card, 'label-added')
    return JsonResponse({'message': 'Label added', 'labels': request.card.labels})


@csrf_exempt
@require_http_methods(['DELETE'])
@require_card_edit
def card_remove_label(request, card_id, name):
    request.card.remove_label(name)
    _card_changed(request.card, 'label-removed')
    return JsonResponse({'message': 'Label removed', 'labels': request.card.labels})


@csrf_exempt
@require_http_methods(['POST'])
@require_card_edit
def card_archive(request, card_id):
    card = request.card
    archived = card.toggle_archived()
    _card_changed(card, 'archived' if archived else 'unarchived')
    return JsonResponse({
        'message': 'Card archived' if archived else 'Card unarchived',
        'card': {'id': card.pk, 'name': card.name, 'isArchived': archived},
    })


# === TASKS ===

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@require_card_edit
def task_collection(request, card_id):
    """Tasks of a card / create a task in it"""
    card = request.card
    if request.method == 'GET':
        tasks = Task.objects.for_card(card).with_assignments()
        return JsonResponse({'tasks': [task.summary() for task in tasks]})

    payload = parse_json_body(request)
    payload.setdefault('status', card.board.default_card_status)
    payload.setdefault('priority', Priority.MEDIUM)
    data = validate_form(TaskForm, payload)

    # The task always lives on its card's board
    task = Task.objects.create(card=card, board_id=card.board_id, owner=request.user, **data)
    task = Task.objects.with_assignments().get(pk=task.pk)
    _task_changed(task, 'task-created')

    return JsonResponse({'message': 'Task created', 'task': task.summary()}, status=201)


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
@require_task_edit
def task_detail(request, task_id):
    task = request.task

    if request.method == 'GET':
        return JsonResponse({'task': task.detail()})

    if request.method == 'DELETE':
        board_id, card_id = task.board_id, task.card_id
        task.delete()
        notify_board_on_commit(board_id, CARD_UPDATED, {
            'action': 'task-deleted',
            'taskId': task_id,
            'cardId': card_id,
        })
        return JsonResponse({'message': 'Task deleted'})

    data = validate_form(TaskUpdateForm, parse_json_body(request))
    previous_status = task.status

    # Status alone never changes is_completed
    _apply(task, data)
    task.save()

    if task.status != previous_status:
        _task_changed(task, 'moved', event=TASK_MOVED)
    else:
        _task_changed(task, 'task-updated')
    return JsonResponse({'message': 'Task updated', 'task': task.detail()})


@csrf_exempt
@require_http_methods(['POST'])
@require_task_edit
def task_assign(request, task_id):
    data = validate_form(UserReferenceForm, parse_json_body(request))
    user = _get_user(data['user_id'])

    request.task.assign_user(user)
    _task_changed(request.task, 'task-assigned')
    return JsonResponse({'message': 'Task assigned', 'task': request.task.summary()})


@csrf_exempt
@require_http_methods(['DELETE'])
@require_task_edit
def task_unassign(request, task_id, user_id):
    request.task.unassign_user(user_id)
    _task_changed(request.task, 'task-unassigned')
    return JsonResponse({'message': 'Task unassigned', 'task': request.task.summary()})


@csrf_exempt
@require_http_methods(['POST'])
@require_task_edit
def task_complete(request, task_id):
    request.task.complete(request.user)
    _task_changed(request.task, 'completed', event=TASK_MOVED)
    return JsonResponse({'message': 'Task completed', 'task': request.task.summary()})


@csrf_exempt
@require_http_methods(['POST'])
@require_task_edit
def task_reopen(request, task_id):
    request.task.reopen()
    _task_changed(request.task, 'reopened', event=TASK_MOVED)
    return JsonResponse({'message': 'Task reopened', 'task': request.task.summary()})


@csrf_exempt
@require_http_methods(['POST'])
@require_task_edit
def task_add_comment(request, task_id):
    data = validate_form(CommentForm, parse_json_body(request))
    comment = request.task.add_comment(data['content'], request.user)
    return JsonResponse({'message': 'Comment added', 'comment': comment.as_dict()}, status=201)


# === INVITATIONS ===

def _get_invitation(invitation_id):
    try:
        return Invitation.objects.select_related('board').get(pk=invitation_id)
    except Invitation.DoesNotExist:
        raise Http404('Invitation not found')


@require_http_methods(['GET'])
@api_login_required
def invitation_list(request):
    """Pending, unexpired invitations of the current user"""
    invitations = Invitation.objects.pending_for_user(request.user)
    return JsonResponse({
        'invitations': [
            {
                **invitation.summary(),
                'boardName': invitation.board.name,
                'inviterName': invitation.inviter.name,
            }
            for invitation in invitations
        ]
    })


@csrf_exempt
@require_http_methods(['POST'])
@api_login_required
def invitation_accept(request, invitation_id):
    invitation = _get_invitation(invitation_id)
    invitation_service.accept(invitation, request.user)
    return JsonResponse({
        'message': 'Invitation accepted',
        'invitation': invitation.summary(),
        'board': invitation.board.summary(),
    })


@csrf_exempt
@require_http_methods(['POST'])
@api_login_required
def invitation_decline(request, invitation_id):
    invitation = _get_invitation(invitation_id)
    invitation_service.decline(invitation, request.user)
    return JsonResponse({'message': 'Invitation declined', 'invitation': invitation.summary()})
