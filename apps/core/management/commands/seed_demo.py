# apps/core/management/commands/seed_demo.py

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import Board, BoardRole, Card, Priority, Task, User, WorkflowStatus

DEMO_USERS = [
    ('alice@example.com', 'Alice'),
    ('bob@example.com', 'Bob'),
    ('carol@example.com', 'Carol'),
    ('dave@example.com', 'Dave'),
]

DEMO_BOARD = 'Demo board'

DEMO_CARDS = [
    ('Launch website', WorkflowStatus.ONGOING, Priority.HIGH, [
        ('Write landing page copy', WorkflowStatus.REVIEW),
        ('Set up analytics', WorkflowStatus.BACKLOG),
    ]),
    ('Mobile app', WorkflowStatus.BACKLOG, Priority.MEDIUM, [
        ('Sketch onboarding screens', WorkflowStatus.ONGOING),
    ]),
    ('Ideas', WorkflowStatus.ICEBOX, Priority.LOW, []),
]


class Command(BaseCommand):
    help = 'Creates demo users, a board, cards and tasks for local development (safe to run twice)'

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('🌱 Seeding demo data...')

        users = {}
        for email, name in DEMO_USERS:
            user = User.objects.get_by_email(email)
            if user is None:
                user = User.objects.create_user(email=email, name=name, is_verified=True)
                self.stdout.write(f'  👤 {email}')
            users[name] = user

        owner = users['Alice']
        board, created = Board.objects.get_or_create(
            name=DEMO_BOARD,
            owner=owner,
            defaults={'description': 'Sample board created by seed_demo'}
        )
        if created:
            self.stdout.write(f'  📋 {board.name}')

        board.add_member(users['Bob'], BoardRole.ADMIN)
        board.add_member(users['Carol'], BoardRole.MEMBER)
        board.add_member(users['Dave'], BoardRole.VIEWER)

        for name, status, priority, tasks in DEMO_CARDS:
            card, _ = Card.objects.get_or_create(
                board=board,
                name=name,
                defaults={'owner': owner, 'status': status, 'priority': priority}
            )
            card.add_member(users['Carol'])

            for title, task_status in tasks:
                task, _ = Task.objects.get_or_create(
                    card=card,
                    title=title,
                    defaults={'owner': owner, 'board': board, 'status': task_status}
                )
                task.assign_user(users['Carol'])

        self.stdout.write(self.style.SUCCESS(
            '✅ Demo data ready. Sign in with alice@example.com '
            '(request a code, it is printed by the console email backend).'
        ))
