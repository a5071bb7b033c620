# tests/test_models.py

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.models import DEFAULT_STATUSES, Board, BoardStatus, Subtask
from apps.core.task_service import task_service

pytestmark = pytest.mark.django_db


class TestUser:

    def test_display_name_fallbacks(self, owner, outsider):
        assert owner.get_display_name() == 'Alice Martin'
        assert outsider.get_display_name() == 'mallory'

    def test_uid_is_unique_per_user(self, owner, member):
        assert owner.uid != member.uid

    def test_accessible_boards(self, board, owner, outsider):
        assert list(owner.get_accessible_boards()) == [board]
        assert not outsider.get_accessible_boards().exists()


class TestBoard:

    def test_owner_and_membership(self, board, owner, member, outsider):
        assert board.is_owner(owner)
        assert not board.is_owner(member)
        assert board.is_member(member)
        assert not board.is_member(outsider)

    def test_default_statuses_in_order(self, board):
        assert board.get_status_keys() == ['todo', 'in-progress', 'done']
        assert board.get_statuses()[0]['color'] == DEFAULT_STATUSES[0]['color']

    def test_statuses_fall_back_to_defaults(self, owner):
        board = Board.objects.create(name='Bare', owner=owner)
        assert board.get_status_keys() == ['todo', 'in-progress', 'done']

    def test_status_in_use(self, board, task):
        todo = BoardStatus.objects.get(board=board, key='todo')
        done = BoardStatus.objects.get(board=board, key='done')
        assert todo.in_use()
        assert not done.in_use()


class TestWorkItems:

    def test_overdue(self, task):
        now = timezone.now()
        task.due_date = now - timedelta(hours=1)
        assert task.is_overdue(now)

        task.status = 'done'
        assert not task.is_overdue(now)

    def test_subtask_uses_task_due_date(self, task, subtask):
        task.due_date = timezone.now() + timedelta(days=2)
        task.save()

        subtask = Subtask.objects.select_related('task').get(id=subtask.id)
        assert subtask.due_date is None
        assert subtask.effective_due_date == task.due_date

    def test_subtask_progress(self, task, subtask, owner):
        task_service.create_subtask(task, owner, 'Publish', status='done')
        assert task.subtask_progress() == (1, 2)
        assert list(task.open_subtasks()) == [subtask]

    def test_subtask_board(self, board, subtask):
        assert subtask.board == board
