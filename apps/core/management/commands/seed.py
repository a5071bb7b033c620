# apps/core/management/commands/seed.py

from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from apps.core.board_service import board_service
from apps.core.models import Board, User
from apps.core.task_service import task_service

DEMO_USERS = [
    {'username': 'alice', 'email': 'alice@example.com', 'display_name': 'Alice Martin'},
    {'username': 'bob', 'email': 'bob@example.com', 'display_name': 'Bob Silva'},
    {'username': 'carol', 'email': 'carol@example.com', 'display_name': 'Carol Chen'},
]

DEMO_BOARD = 'Website Launch'


class Command(BaseCommand):
    help = 'Creates demo users and a demo board with tasks and subtasks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            default='demo1234',
            help='Password of the demo users (default: demo1234)'
        )
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete the demo board before seeding again'
        )

    def handle(self, *args, **options):
        self.stdout.write('🌱 Seeding demo data...')

        with transaction.atomic():
            users = self._create_users(options['password'])
            owner = users['alice']

            existing = Board.objects.filter(name=DEMO_BOARD, owner=owner).first()
            if existing and not options['reset']:
                raise CommandError(
                    f'Board "{DEMO_BOARD}" already exists. Use --reset to recreate it.'
                )
            if existing:
                board_service.delete_board(existing, owner)
                self.stdout.write('  🗑️  Previous demo board deleted')

            board = self._create_board(owner, users)
            self._create_tasks(board, users)

        self.stdout.write(
            self.style.SUCCESS(
                '\n✅ Demo data ready!\n'
                '\n'
                f'  Board: {board.name}\n'
                f'  Users: {", ".join(u["email"] for u in DEMO_USERS)}\n'
                f'  Password: {options["password"]}\n'
            )
        )

    def _create_users(self, password):
        self.stdout.write('  👤 Creating demo users...')

        users = {}
        for data in DEMO_USERS:
            user, created = User.objects.get_or_create(
                username=data['username'],
                defaults={'email': data['email'], 'display_name': data['display_name']}
            )
            if created:
                user.set_password(password)
                user.save()
                self.stdout.write(f'    ✅ {user.email}')
            users[user.username] = user
        return users

    def _create_board(self, owner, users):
        self.stdout.write('  📋 Creating demo board...')

        board = board_service.create_board(
            owner, DEMO_BOARD,
            'Everything needed to ship the new marketing site.'
        )
        board_service.add_status(board, owner, 'Review', 'from-purple-500 to-pink-600')

        # Direct adds; invitations go through the board page
        board.members.add(users['bob'], users['carol'])
        return board

    def _create_tasks(self, board, users):
        self.stdout.write('  📝 Creating tasks...')

        owner, bob, carol = users['alice'], users['bob'], users['carol']
        now = timezone.now()
        review_key = board.get_status_keys()[-1]

        design = task_service.create_task(
            board, owner, 'Design landing page',
            description='Hero, pricing and FAQ sections.',
            status='in-progress',
            due_date=now + timedelta(days=2),
            assigned_to=carol,
        )
        task_service.create_subtask(design, owner, 'Wireframes', status='done', assigned_to=carol)
        task_service.create_subtask(design, carol, 'High fidelity mockups', status='in-progress',
                                    due_date=now + timedelta(days=1))

        copy = task_service.create_task(
            board, owner, 'Write launch copy',
            status=review_key,
            due_date=now - timedelta(days=1),
            assigned_to=bob,
        )
        task_service.create_subtask(copy, bob, 'Proofread', assigned_to=owner)

        task_service.create_task(board, bob, 'Set up analytics', assigned_to=bob)
        task_service.create_task(board, owner, 'Register domain', status='done')

        self.stdout.write(f'    ✅ {board.tasks.count()} tasks created')
