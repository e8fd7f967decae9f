# apps/core/signals.py

import logging

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import BoardMembership, Card, Task

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Task)
def sync_task_board(sender, instance, **kwargs):
    """
    Keeps the denormalized board of a task equal to its card's board
    """
    if instance.card_id:
        board_id = Card.objects.filter(pk=instance.card_id).values_list('board_id', flat=True).first()
        if board_id is not None:
            instance.board_id = board_id


@receiver(post_save, sender=BoardMembership)
def log_membership_change(sender, instance, created, **kwargs):
    if created:
        logger.info(f"User {instance.user_id} joined board {instance.board_id} as {instance.role}")
    else:
        logger.info(f"User {instance.user_id} is now {instance.role} on board {instance.board_id}")


@receiver(post_delete, sender=BoardMembership)
def log_membership_removed(sender, instance, **kwargs):
    logger.info(f"User {instance.user_id} left board {instance.board_id}")
