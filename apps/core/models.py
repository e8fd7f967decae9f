# apps/core/models.py

import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from .exceptions import InvitationStateError
from .utils import actor_id, find_entry, isoformat


# === ENUMERATIONS ===
# Roles and workflow statuses are distinct types, never interchangeable

class BoardRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    MEMBER = 'member', 'Member'
    VIEWER = 'viewer', 'Viewer'


class WorkflowStatus(models.TextChoices):
    ICEBOX = 'icebox', 'Icebox'
    BACKLOG = 'backlog', 'Backlog'
    ONGOING = 'ongoing', 'Ongoing'
    REVIEW = 'review', 'Review'
    DONE = 'done', 'Done'


class Priority(models.TextChoices):
    LOW = 'low', 'Low'
    MEDIUM = 'medium', 'Medium'
    HIGH = 'high', 'High'
    URGENT = 'urgent', 'Urgent'


class InvitationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    DECLINED = 'declined', 'Declined'


DEFAULT_LABEL_COLOR = '#3B82F6'


# === IDENTITY ===

class UserManager(BaseUserManager):
    """Manager for email-identified users"""

    use_in_migrations = True

    @classmethod
    def normalize_email(cls, email):
        # The whole address is case-insensitive here, not only the domain
        return (email or '').strip().lower()

    def get_by_email(self, email):
        """Case-insensitive lookup, None when nobody has that email"""
        return self.filter(email__iexact=self.normalize_email(email)).first()

    def create_user(self, email, name=None, password=None, **extra_fields):
        email = self.normalize_email(email)
        if not email:
            raise ValueError('Users must have an email address')

        user = self.model(email=email, name=name or email.split('@')[0][:50], **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_verified', True)
        return self.create_user(email, password=password, **extra_fields)


class User(AbstractUser):
    """
    Account identified by email

    There are no passwords for regular accounts: signing in means proving
    ownership of the mailbox with a short-lived 6 digit code.
    """

    username = None
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=50)
    avatar = models.URLField(blank=True, null=True)
    github_username = models.CharField(max_length=100, blank=True, null=True)

    # === EMAIL VERIFICATION ===
    is_verified = models.BooleanField(default=False)
    verification_code = models.CharField(max_length=6, blank=True, null=True)
    verification_code_expires = models.DateTimeField(blank=True, null=True)

    # === METADATA ===
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'user'
        ordering = ['email']

    def save(self, *args, **kwargs):
        self.email = User.objects.normalize_email(self.email)
        super().save(*args, **kwargs)

    def generate_verification_code(self):
        """
        Stores a fresh 6 digit code and its expiry, returns the code

        The caller is responsible for saving the user.
        """
        ttl = getattr(settings, 'MINITRELLO_VERIFICATION_CODE_TTL_MINUTES', 10)
        code = str(100000 + secrets.randbelow(900000))
        self.verification_code = code
        self.verification_code_expires = timezone.now() + timedelta(minutes=ttl)
        return code

    def verify_code(self, code):
        """
        Checks a submitted code

        Rules:
        1. No pending code never verifies
        2. An expired code is cleared and fails
        3. A matching code verifies the account and is cleared (single use)
        4. A wrong code fails and stays pending

        The caller is responsible for saving the user.
        """
        if not self.verification_code or not self.verification_code_expires:
            return False

        if timezone.now() > self.verification_code_expires:
            self.clear_verification_code()
            return False

        if secrets.compare_digest(str(code), self.verification_code):
            self.is_verified = True
            self.clear_verification_code()
            return True

        return False

    def clear_verification_code(self):
        self.verification_code = None
        self.verification_code_expires = None

    def update_last_login(self):
        self.last_login = timezone.now()
        self.save(update_fields=['last_login', 'updated_at'])

    def profile(self):
        return {
            'id': self.pk,
            'email': self.email,
            'name': self.name,
            'avatar': self.avatar,
            'githubUsername': self.github_username,
            'isVerified': self.is_verified,
            'lastLogin': isoformat(self.last_login),
            'createdAt': isoformat(self.created_at),
        }

    def public_profile(self):
        return {
            'id': self.pk,
            'name': self.name,
            'email': self.email,
            'avatar': self.avatar,
            'githubUsername': self.github_username,
        }

    def __str__(self):
        return f"{self.name} <{self.email}>"


# === RESOURCE HIERARCHY ===

class ActivityTrackedModel(models.Model):
    """
    Abstract base for resources that keep a ``last_activity`` timestamp

    Every save bumps ``last_activity``, including saves restricted with
    ``update_fields``.
    """

    last_activity = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.last_activity = timezone.now()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = {*update_fields, 'last_activity', 'updated_at'}
        super().save(*args, **kwargs)

    def touch(self):
        """Records activity on the resource without changing anything else"""
        self.save(update_fields=['last_activity'])

    def _forget_prefetched(self, name):
        # A mutated relation must not be answered from a stale prefetch
        getattr(self, '_prefetched_objects_cache', {}).pop(name, None)


class BoardQuerySet(models.QuerySet):

    def for_user(self, user):
        """Non-archived boards the user owns or is a member of"""
        return self.filter(
            Q(owner=user) | Q(memberships__user=user),
            is_archived=False
        ).distinct()

    def with_members(self):
        return self.select_related('owner').prefetch_related('memberships__user')


class Board(ActivityTrackedModel):
    """Top-level shared workspace, owns cards"""

    name = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True, default='')
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='owned_boards'
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through='BoardMembership',
        related_name='member_boards'
    )
    is_public = models.BooleanField(default=False)
    is_archived = models.BooleanField(default=False)

    # === SETTINGS ===
    allow_member_invite = models.BooleanField(default=True)
    allow_member_edit = models.BooleanField(default=True)
    default_card_status = models.CharField(
        max_length=10,
        choices=WorkflowStatus.choices,
        default=WorkflowStatus.BACKLOG
    )

    objects = BoardQuerySet.as_manager()

    SETTINGS_FIELDS = ('allow_member_invite', 'allow_member_edit', 'default_card_status')

    class Meta:
        db_table = 'board'
        ordering = ['-last_activity']
        indexes = [
            models.Index(fields=['owner'], name='board_owner_idx'),
            models.Index(fields=['is_archived'], name='board_archived_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def settings(self):
        return {
            'allowMemberInvite': self.allow_member_invite,
            'allowMemberEdit': self.allow_member_edit,
            'defaultCardStatus': self.default_card_status,
        }

    def toggle_archived(self):
        self.is_archived = not self.is_archived
        self.save(update_fields=['is_archived'])
        return self.is_archived

    def get_membership(self, user):
        return find_entry(self.memberships.all(), user)

    def add_member(self, user, role=BoardRole.MEMBER):
        """
        Adds a member or updates the role of an existing one

        At most one membership per user: re-adding changes the role in place.
        """
        membership = self.get_membership(user)
        if membership:
            membership.role = role
            membership.save(update_fields=['role'])
        else:
            membership = BoardMembership.objects.create(
                board=self,
                user_id=actor_id(user),
                role=role,
                joined_at=timezone.now()
            )
        self._forget_prefetched('memberships')
        self.touch()
        return membership

    def remove_member(self, user):
        """Drops every membership of the user; removing a non-member is fine"""
        self.memberships.filter(user_id=actor_id(user)).delete()
        self._forget_prefetched('memberships')
        self.touch()

    def summary(self):
        return {
            'id': self.pk,
            'name': self.name,
            'description': self.description,
            'owner': self.owner.public_profile(),
            'memberCount': len(self.memberships.all()),
            'isPublic': self.is_public,
            'isArchived': self.is_archived,
            'lastActivity': isoformat(self.last_activity),
            'createdAt': isoformat(self.created_at),
        }

    def detail(self):
        data = self.summary()
        data['members'] = [membership.as_dict() for membership in self.memberships.all()]
        data['settings'] = self.settings
        return data


class BoardMembership(models.Model):
    """
    (user, role) entry of a board

    Uniqueness per (board, user) is kept by ``Board.add_member``, there is
    no database constraint.
    """

    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='memberships')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='board_memberships'
    )
    role = models.CharField(max_length=10, choices=BoardRole.choices, default=BoardRole.MEMBER)
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'board_membership'
        ordering = ['joined_at', 'id']
        indexes = [
            models.Index(fields=['user'], name='membership_user_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} on {self.board_id} ({self.role})"

    def as_dict(self):
        return {
            'user': self.user.public_profile(),
            'role': self.role,
            'joinedAt': isoformat(self.joined_at),
        }


class WorkItemBase(ActivityTrackedModel):
    """
    Abstract base for cards and tasks

    Both carry the same workflow fields and label list.
    """

    description = models.CharField(max_length=1000, blank=True, default='')
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='owned_%(class)ss'
    )
    status = models.CharField(
        max_length=10,
        choices=WorkflowStatus.choices,
        default=WorkflowStatus.BACKLOG
    )
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)
    due_date = models.DateTimeField(null=True, blank=True)
    labels = models.JSONField(default=list, blank=True)
    is_archived = models.BooleanField(default=False)

    class Meta:
        abstract = True

    def add_label(self, name, color=DEFAULT_LABEL_COLOR):
        """Adds a label unless one with the same name (any case) exists"""
        if not any(label['name'].lower() == name.lower() for label in self.labels):
            self.labels = [*self.labels, {'name': name, 'color': color}]
            self.save(update_fields=['labels'])

    def remove_label(self, name):
        self.labels = [label for label in self.labels if label['name'].lower() != name.lower()]
        self.save(update_fields=['labels'])

    def toggle_archived(self):
        self.is_archived = not self.is_archived
        self.save(update_fields=['is_archived'])
        return self.is_archived


class CardQuerySet(models.QuerySet):

    def for_board(self, board):
        return self.filter(board=board, is_archived=False)

    def for_user(self, user):
        return self.filter(
            Q(owner=user) | Q(memberships__user=user),
            is_archived=False
        ).distinct()

    def with_members(self):
        return self.select_related('owner', 'board').prefetch_related('memberships__user')


class Card(WorkItemBase):
    """
    Grouping of tasks inside a board

    Card membership is its own list: being a board member or admin grants
    nothing on a card.
    """

    name = models.CharField(max_length=200)
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='cards')
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through='CardMember',
        related_name='member_cards'
    )

    objects = CardQuerySet.as_manager()

    class Meta:
        db_table = 'card'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['board'], name='card_board_idx'),
            models.Index(fields=['status'], name='card_status_idx'),
        ]

    def __str__(self):
        return self.name

    def get_membership(self, user):
        return find_entry(self.memberships.all(), user)

    def add_member(self, user):
        """Adds a member; already present means nothing to do"""
        membership = self.get_membership(user)
        if membership is None:
            membership = CardMember.objects.create(
                card=self,
                user_id=actor_id(user),
                assigned_at=timezone.now()
            )
            self._forget_prefetched('memberships')
            self.touch()
        return membership

    def remove_member(self, user):
        self.memberships.filter(user_id=actor_id(user)).delete()
        self._forget_prefetched('memberships')
        self.touch()

    def summary(self):
        return {
            'id': self.pk,
            'name': self.name,
            'description': self.description,
            'board': self.board_id,
            'owner': self.owner_id,
            'status': self.status,
            'priority': self.priority,
            'dueDate': isoformat(self.due_date),
            'memberCount': len(self.memberships.all()),
            'labels': self.labels,
            'isArchived': self.is_archived,
            'lastActivity': isoformat(self.last_activity),
            'createdAt': isoformat(self.created_at),
        }

    def detail(self):
        data = self.summary()
        data['owner'] = self.owner.public_profile()
        data['board'] = {'id': self.board_id, 'name': self.board.name}
        data['members'] = [
            {'user': member.user.public_profile(), 'assignedAt': isoformat(member.assigned_at)}
            for member in self.memberships.all()
        ]
        return data


class CardMember(models.Model):
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name='memberships')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='card_memberships'
    )
    assigned_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'card_member'
        ordering = ['assigned_at', 'id']

    def __str__(self):
        return f"{self.user_id} on card {self.card_id}"


class TaskQuerySet(models.QuerySet):

    def for_card(self, card):
        return self.filter(card=card, is_archived=False)

    def for_board(self, board):
        return self.filter(board=board, is_archived=False)

    def for_user(self, user):
        return self.filter(
            Q(owner=user) | Q(assignments__user=user),
            is_archived=False
        ).distinct()

    def with_assignments(self):
        return self.select_related('owner', 'card', 'board').prefetch_related('assignments__user')


class Task(WorkItemBase):
    """
    Leaf work item

    ``is_completed`` and ``status`` are only kept in step by
    ``complete()``/``reopen()``; an update that sets ``status`` alone leaves
    ``is_completed`` untouched.
    """

    title = models.CharField(max_length=200)
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name='tasks')
    # Denormalized from the card
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='tasks')
    assigned_to = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through='TaskAssignment',
        related_name='assigned_tasks'
    )
    estimated_hours = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)]
    )
    actual_hours = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)]
    )
    is_completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    completed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='completed_tasks'
    )

    objects = TaskQuerySet.as_manager()

    class Meta:
        db_table = 'task'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['card'], name='task_card_idx'),
            models.Index(fields=['board'], name='task_board_idx'),
            models.Index(fields=['status'], name='task_status_idx'),
            models.Index(fields=['is_completed'], name='task_completed_idx'),
        ]

    def __str__(self):
        return self.title

    def get_assignment(self, user):
        return find_entry(self.assignments.all(), user)

    def assign_user(self, user):
        """Assigns a user; already assigned means nothing to do"""
        assignment = self.get_assignment(user)
        if assignment is None:
            assignment = TaskAssignment.objects.create(
                task=self,
                user_id=actor_id(user),
                assigned_at=timezone.now()
            )
            self._forget_prefetched('assignments')
            self.touch()
        return assignment

    def unassign_user(self, user):
        self.assignments.filter(user_id=actor_id(user)).delete()
        self._forget_prefetched('assignments')
        self.touch()

    def add_comment(self, content, author):
        comment = TaskComment.objects.create(task=self, author_id=actor_id(author), content=content)
        self.touch()
        return comment

    def complete(self, user):
        self.is_completed = True
        self.completed_at = timezone.now()
        self.completed_by_id = actor_id(user)
        self.status = WorkflowStatus.DONE
        self.save(update_fields=['is_completed', 'completed_at', 'completed_by', 'status'])

    def reopen(self):
        self.is_completed = False
        self.completed_at = None
        self.completed_by = None
        self.status = WorkflowStatus.ONGOING
        self.save(update_fields=['is_completed', 'completed_at', 'completed_by', 'status'])

    def summary(self):
        return {
            'id': self.pk,
            'title': self.title,
            'description': self.description,
            'card': self.card_id,
            'board': self.board_id,
            'owner': self.owner_id,
            'assignedTo': [
                {'user': assignment.user_id, 'assignedAt': isoformat(assignment.assigned_at)}
                for assignment in self.assignments.all()
            ],
            'status': self.status,
            'priority': self.priority,
            'dueDate': isoformat(self.due_date),
            'estimatedHours': float(self.estimated_hours),
            'actualHours': float(self.actual_hours),
            'labels': self.labels,
            'isCompleted': self.is_completed,
            'isArchived': self.is_archived,
            'lastActivity': isoformat(self.last_activity),
            'createdAt': isoformat(self.created_at),
        }

    def detail(self):
        data = self.summary()
        data['owner'] = self.owner.public_profile()
        data['card'] = {'id': self.card_id, 'name': self.card.name}
        data['board'] = {'id': self.board_id, 'name': self.board.name}
        data['assignedTo'] = [
            {'user': assignment.user.public_profile(), 'assignedAt': isoformat(assignment.assigned_at)}
            for assignment in self.assignments.all()
        ]
        data['comments'] = [comment.as_dict() for comment in self.comments.select_related('author')]
        data['completedAt'] = isoformat(self.completed_at)
        data['completedBy'] = self.completed_by_id
        return data


class TaskAssignment(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='assignments')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='task_assignments'
    )
    assigned_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'task_assignment'
        ordering = ['assigned_at', 'id']

    def __str__(self):
        return f"{self.user_id} on task {self.task_id}"


class TaskComment(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='comments')
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='task_comments'
    )
    content = models.CharField(max_length=1000)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'task_comment'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"Comment by {self.author_id} on task {self.task_id}"

    def as_dict(self):
        return {
            'id': self.pk,
            'content': self.content,
            'author': self.author.public_profile(),
            'createdAt': isoformat(self.created_at),
        }


# === INVITATIONS ===

def default_invitation_expiry():
    days = getattr(settings, 'MINITRELLO_INVITATION_TTL_DAYS', 7)
    return timezone.now() + timedelta(days=days)


class InvitationQuerySet(models.QuerySet):

    def pending(self):
        """Pending and not yet expired"""
        return self.filter(status=InvitationStatus.PENDING, expires_at__gt=timezone.now())

    def pending_for_user(self, user):
        return self.pending().filter(invitee=user).select_related('board', 'inviter')

    def pending_for_email(self, email):
        return self.pending().filter(email__iexact=email).select_related('board', 'inviter')

    def for_board(self, board):
        return self.filter(board=board).select_related('inviter', 'invitee')


class Invitation(models.Model):
    """
    Pending grant of board membership

    State machine: pending -> accepted | declined, both terminal. Expiry is
    derived from ``expires_at`` and never stored: an expired invitation
    stays ``pending`` but is no longer valid.
    """

    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='invitations')
    inviter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='sent_invitations'
    )
    invitee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='received_invitations'
    )
    email = models.EmailField()
    role = models.CharField(max_length=10, choices=BoardRole.choices, default=BoardRole.MEMBER)
    status = models.CharField(
        max_length=10,
        choices=InvitationStatus.choices,
        default=InvitationStatus.PENDING
    )
    message = models.CharField(max_length=500, blank=True, default='')
    expires_at = models.DateTimeField(default=default_invitation_expiry)
    responded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InvitationQuerySet.as_manager()

    class Meta:
        db_table = 'invitation'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['board'], name='invitation_board_idx'),
            models.Index(fields=['invitee'], name='invitation_invitee_idx'),
            models.Index(fields=['email'], name='invitation_email_idx'),
            models.Index(fields=['status'], name='invitation_status_idx'),
            models.Index(fields=['expires_at'], name='invitation_expires_idx'),
        ]

    def __str__(self):
        return f"Invitation of {self.email} to {self.board_id} ({self.status})"

    def save(self, *args, **kwargs):
        self.email = (self.email or '').lower()
        super().save(*args, **kwargs)

    @property
    def is_expired(self):
        return timezone.now() > self.expires_at

    def is_valid(self):
        return self.status == InvitationStatus.PENDING and not self.is_expired

    def accept(self):
        self._respond(InvitationStatus.ACCEPTED)

    def decline(self):
        self._respond(InvitationStatus.DECLINED)

    def _respond(self, status):
        if self.status != InvitationStatus.PENDING:
            raise InvitationStateError(f'Invitation was already {self.status}')
        self.status = status
        self.responded_at = timezone.now()
        self.save(update_fields=['status', 'responded_at', 'updated_at'])

    def summary(self):
        return {
            'id': self.pk,
            'board': self.board_id,
            'inviter': self.inviter_id,
            'invitee': self.invitee_id,
            'email': self.email,
            'role': self.role,
            'message': self.message,
            'status': self.status,
            'expiresAt': isoformat(self.expires_at),
            'respondedAt': isoformat(self.responded_at),
            'isExpired': self.is_expired,
        }
