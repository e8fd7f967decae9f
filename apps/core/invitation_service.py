# apps/core/invitation_service.py

"""
Invitation workflow - invite, accept and decline board invitations
"""

import logging

from django.core.exceptions import PermissionDenied
from django.db import transaction

from .email_service import send_invitation_email
from .exceptions import ConflictError, InvitationStateError, NotFoundError, RequestValidationError
from .models import BoardRole, Invitation, InvitationStatus, User
from .permissions import BoardPermissions
from .utils import actor_id

logger = logging.getLogger(__name__)


class InvitationService:
    """
    Creates invitations and applies responses to them

    Acceptance grants the membership in the same database transaction that
    marks the invitation accepted.
    """

    def invite(self, board, inviter, email, role=BoardRole.MEMBER, message=''):
        """
        Invites a registered user to a board

        Raises:
            RequestValidationError: inviting yourself
            NotFoundError: no account with that email
            ConflictError: already a member, or a pending invitation exists
        """
        email = User.objects.normalize_email(email)
        if email == inviter.email.lower():
            raise RequestValidationError('You cannot invite yourself', error='Invalid invitation')

        invitee = User.objects.get_by_email(email)
        if not invitee:
            raise NotFoundError('No user is registered with this email', error='User not found')

        if BoardPermissions.is_board_member_or_owner(invitee, board):
            raise ConflictError('User is already a member of this board', error='Already a member')

        # Expired rows stay pending and still count
        if Invitation.objects.filter(board=board, invitee=invitee, status=InvitationStatus.PENDING).exists():
            raise ConflictError('User already has a pending invitation to this board', error='Already invited')

        invitation = Invitation.objects.create(
            board=board,
            inviter=inviter,
            invitee=invitee,
            email=email,
            role=role or BoardRole.MEMBER,
            message=message or ''
        )
        logger.info(f"{inviter.email} invited {email} to board {board.pk} as {invitation.role}")

        if not send_invitation_email(invitation, board.name, inviter.name):
            logger.warning(f"Invitation {invitation.pk} created but its email was not sent")

        return invitation

    def accept(self, invitation, user):
        self._check_respondent(invitation, user)
        if not invitation.is_valid():
            raise InvitationStateError('Invitation is no longer valid or has expired')

        with transaction.atomic():
            invitation.accept()
            membership = invitation.board.add_member(invitation.invitee, invitation.role)

        logger.info(f"{user.email} joined board {invitation.board_id} as {invitation.role}")
        return membership

    def decline(self, invitation, user):
        self._check_respondent(invitation, user)
        if not invitation.is_valid():
            raise InvitationStateError('Invitation is no longer valid or has expired')

        invitation.decline()
        logger.info(f"{user.email} declined the invitation to board {invitation.board_id}")
        return invitation

    def _check_respondent(self, invitation, user):
        if invitation.invitee_id != actor_id(user):
            raise PermissionDenied('Only the invited user can respond to this invitation')


# Service instance shared by the views
invitation_service = InvitationService()
