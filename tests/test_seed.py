# tests/test_seed.py

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from apps.core.models import Board, User

pytestmark = pytest.mark.django_db


def seed(*args):
    out = StringIO()
    call_command('seed', *args, stdout=out)
    return out.getvalue()


def test_seed_creates_demo_board():
    output = seed()

    assert 'Demo data ready' in output
    assert set(User.objects.values_list('username', flat=True)) == {'alice', 'bob', 'carol'}

    board = Board.objects.get(name='Website Launch')
    assert board.owner.username == 'alice'
    assert board.members.count() == 3
    assert board.get_statuses()[-1]['name'] == 'Review'
    assert board.tasks.count() == 4
    assert board.tasks.get(title='Design landing page').subtasks.count() == 2


def test_demo_users_can_log_in(client):
    seed('--password', 'launch-day')
    assert client.login(username='bob', password='launch-day')


def test_seed_twice_needs_reset():
    seed()

    with pytest.raises(CommandError):
        seed()

    seed('--reset')
    assert Board.objects.filter(name='Website Launch').count() == 1
    assert User.objects.count() == 3
