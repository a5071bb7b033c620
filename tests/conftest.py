# tests/conftest.py

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.board_service import board_service
from apps.core.models import User
from apps.core.task_service import task_service


def make_user(username, **extra):
    return User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='secret123',
        **extra
    )


@pytest.fixture
def owner(db):
    return make_user('alice', display_name='Alice Martin')


@pytest.fixture
def member(db):
    return make_user('bob', display_name='Bob Silva')


@pytest.fixture
def outsider(db):
    return make_user('mallory')


@pytest.fixture
def board(owner, member):
    board = board_service.create_board(owner, 'Launch', 'Ship the site')
    board.members.add(member)
    return board


@pytest.fixture
def task(board, owner):
    return task_service.create_task(board, owner, 'Write copy', description='Landing page text')


@pytest.fixture
def subtask(task, owner):
    return task_service.create_subtask(task, owner, 'Proofread')


@pytest.fixture
def soon():
    return timezone.now() + timedelta(days=1)


@pytest.fixture
def owner_client(client, owner):
    client.force_login(owner)
    return client


@pytest.fixture
def member_client(client, member):
    client.force_login(member)
    return client


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()
