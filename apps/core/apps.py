# apps/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Core app: users, boards, cards, tasks and invitations"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core - Boards and Accounts'

    def ready(self):
        """
        Connects the model signals
        """
        from . import signals  # noqa: F401
