# apps/core/forms.py

from decimal import Decimal

from django import forms
from django.core.validators import RegexValidator

from .models import BoardRole, DEFAULT_LABEL_COLOR, Priority, WorkflowStatus


class PartialUpdateMixin:
    """
    Makes every field optional unless the client sent it

    A required field that is sent must still be valid (an empty ``name`` is
    rejected), a field that is left out is simply not updated.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name, field in self.fields.items():
            field.required = field.required and name in self.data


# === AUTHENTICATION ===

class EmailForm(forms.Form):
    email = forms.EmailField(max_length=254)


class VerificationCodeForm(EmailForm):
    verification_code = forms.CharField(
        min_length=6,
        max_length=6,
        validators=[RegexValidator(r'^\d{6}$', 'Verification code must have 6 digits')]
    )


# === USERS ===

class UserUpdateForm(PartialUpdateMixin, forms.Form):
    name = forms.CharField(min_length=2, max_length=50)
    avatar = forms.URLField(required=False)


# === BOARDS ===

class BoardCreateForm(forms.Form):
    name = forms.CharField(min_length=1, max_length=100)
    description = forms.CharField(max_length=500, required=False)


class BoardUpdateForm(PartialUpdateMixin, BoardCreateForm):
    is_public = forms.BooleanField(required=False)
    allow_member_invite = forms.BooleanField(required=False)
    allow_member_edit = forms.BooleanField(required=False)
    default_card_status = forms.ChoiceField(choices=WorkflowStatus.choices)


class InviteForm(forms.Form):
    email = forms.EmailField(max_length=254)
    role = forms.ChoiceField(choices=BoardRole.choices, required=False)
    message = forms.CharField(max_length=500, required=False)

    def clean_role(self):
        return self.cleaned_data.get('role') or BoardRole.MEMBER


# === CARDS AND TASKS ===

class WorkItemForm(forms.Form):
    description = forms.CharField(max_length=1000, required=False)
    status = forms.ChoiceField(choices=WorkflowStatus.choices)
    priority = forms.ChoiceField(choices=Priority.choices)
    due_date = forms.DateTimeField(required=False)


class CardForm(WorkItemForm):
    name = forms.CharField(min_length=1, max_length=200)


class CardUpdateForm(PartialUpdateMixin, CardForm):
    pass


class TaskForm(WorkItemForm):
    title = forms.CharField(min_length=1, max_length=200)
    estimated_hours = forms.DecimalField(min_value=0, max_digits=7, decimal_places=2, required=False)

    def clean_estimated_hours(self):
        return self.cleaned_data.get('estimated_hours') or Decimal('0')


class TaskUpdateForm(PartialUpdateMixin, TaskForm):
    actual_hours = forms.DecimalField(min_value=0, max_digits=7, decimal_places=2, required=False)

    def clean_actual_hours(self):
        return self.cleaned_data.get('actual_hours') or Decimal('0')


class LabelForm(forms.Form):
    name = forms.CharField(min_length=1, max_length=50)
    color = forms.CharField(
        required=False,
        validators=[RegexValidator(r'^#[0-9A-Fa-f]{6}$', 'Color must be a hex value like #3B82F6')]
    )

    def clean_color(self):
        return self.cleaned_data.get('color') or DEFAULT_LABEL_COLOR


class UserReferenceForm(forms.Form):
    user_id = forms.IntegerField(min_value=1)


class CommentForm(forms.Form):
    content = forms.CharField(min_length=1, max_length=1000)
