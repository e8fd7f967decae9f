# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import (
    Board, BoardMembership, Card, CardMember, Invitation,
    Task, TaskAssignment, TaskComment, User
)

PRIORITY_COLORS = {
    'low': '#10B981',
    'medium': '#3B82F6',
    'high': '#F59E0B',
    'urgent': '#EF4444',
}


def _badge(color, label):
    return format_html(
        '<span style="background-color: {}; color: white; '
        'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
        color, label
    )


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for email-identified users"""

    list_display = ['email', 'name', 'is_verified', 'is_active', 'is_staff', 'last_login']
    list_filter = ['is_verified', 'is_active', 'is_staff']
    search_fields = ['email', 'name', 'github_username']
    ordering = ['email']
    readonly_fields = ['last_login', 'created_at', 'updated_at']

    fieldsets = (
        (None, {'fields': ('email', 'name', 'avatar', 'github_username')}),
        ('Verification', {
            'fields': ('is_verified', 'verification_code', 'verification_code_expires')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')
        }),
        ('Dates', {
            'fields': ('last_login', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name'),
        }),
    )


class BoardMembershipInline(admin.TabularInline):
    model = BoardMembership
    extra = 0
    fields = ['user', 'role', 'joined_at']
    autocomplete_fields = ['user']


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Admin for boards, members edited inline"""

    list_display = ['name', 'owner', 'members_count', 'cards_count', 'is_public', 'is_archived', 'last_activity']
    list_filter = ['is_archived', 'is_public', 'allow_member_edit']
    search_fields = ['name', 'description', 'owner__email']
    readonly_fields = ['last_activity', 'created_at', 'updated_at']
    autocomplete_fields = ['owner']
    inlines = [BoardMembershipInline]

    def members_count(self, obj):
        return obj.memberships.count()

    members_count.short_description = 'Members'

    def cards_count(self, obj):
        return obj.cards.count()

    cards_count.short_description = 'Cards'


class CardMemberInline(admin.TabularInline):
    model = CardMember
    extra = 0
    fields = ['user', 'assigned_at']
    autocomplete_fields = ['user']


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    list_display = ['name', 'board', 'owner', 'status', 'priority_badge', 'due_date', 'is_archived']
    list_filter = ['status', 'priority', 'is_archived']
    search_fields = ['name', 'description', 'board__name']
    list_select_related = ['board', 'owner']
    readonly_fields = ['last_activity', 'created_at', 'updated_at']
    autocomplete_fields = ['owner', 'board']
    inlines = [CardMemberInline]

    def priority_badge(self, obj):
        return _badge(PRIORITY_COLORS.get(obj.priority, '#6B7280'), obj.get_priority_display())

    priority_badge.short_description = 'Priority'


class TaskAssignmentInline(admin.TabularInline):
    model = TaskAssignment
    extra = 0
    fields = ['user', 'assigned_at']
    autocomplete_fields = ['user']


class TaskCommentInline(admin.TabularInline):
    model = TaskComment
    extra = 0
    fields = ['author', 'content', 'created_at']
    readonly_fields = ['created_at']

    def has_add_permission(self, request, obj=None):
        """Read only in the admin"""
        return False


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'card', 'board', 'owner', 'status', 'priority_badge', 'is_completed', 'is_archived']
    list_filter = ['status', 'priority', 'is_completed', 'is_archived']
    search_fields = ['title', 'description', 'card__name', 'board__name']
    list_select_related = ['card', 'board', 'owner']
    readonly_fields = ['board', 'completed_at', 'completed_by', 'last_activity', 'created_at', 'updated_at']
    autocomplete_fields = ['owner', 'card']
    inlines = [TaskAssignmentInline, TaskCommentInline]

    def priority_badge(self, obj):
        return _badge(PRIORITY_COLORS.get(obj.priority, '#6B7280'), obj.get_priority_display())

    priority_badge.short_description = 'Priority'


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    list_display = ['email', 'board', 'inviter', 'role', 'status', 'expires_at', 'expired']
    list_filter = ['status', 'role']
    search_fields = ['email', 'board__name', 'inviter__email']
    list_select_related = ['board', 'inviter']
    readonly_fields = ['responded_at', 'created_at', 'updated_at']
    autocomplete_fields = ['board', 'inviter', 'invitee']

    def expired(self, obj):
        return obj.is_expired

    expired.boolean = True
    expired.short_description = 'Expired'
