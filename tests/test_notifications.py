# tests/test_notifications.py

from datetime import timedelta

import pytest
from django.test import override_settings
from django.utils import timezone

from apps.core.notification_service import SUBTASK_DUE, TASK_ASSIGNED, TASK_DUE, notification_service
from apps.core.task_service import task_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def now():
    return timezone.now()


def test_due_soon_and_overdue_tasks(board, owner, now):
    soon = task_service.create_task(board, owner, 'Soon', due_date=now + timedelta(days=1))
    late = task_service.create_task(board, owner, 'Late', due_date=now - timedelta(days=1))
    task_service.create_task(board, owner, 'Far away', due_date=now + timedelta(days=10))
    task_service.create_task(board, owner, 'Undated')

    notifications = notification_service.collect(owner, now=now)

    assert [n.id for n in notifications] == [f'{TASK_DUE}_{late.id}', f'{TASK_DUE}_{soon.id}']
    assert notifications[0].title == 'Overdue Task'
    assert notifications[0].message == '"Late" is overdue'
    assert notifications[0].is_overdue
    assert notifications[1].title == 'Task Due Soon'
    assert notifications[1].message == '"Soon" is due soon'
    assert notifications[1].board_name == 'Launch'


def test_done_tasks_are_skipped(board, owner, now):
    task_service.create_task(board, owner, 'Shipped', status='done', due_date=now - timedelta(days=1))
    assert notification_service.collect(owner, now=now) == []


def test_assigned_task_counts_for_assignee_once(board, owner, member, now):
    task = task_service.create_task(board, member, 'Mine', due_date=now + timedelta(hours=5),
                                    assigned_to=member)

    notifications = notification_service.collect(member, now=now)
    assert [n.id for n in notifications] == [f'{TASK_DUE}_{task.id}']
    assert notification_service.collect(owner, now=now) == []


def test_subtask_falls_back_to_task_due_date(task, owner, member, now):
    task_service.update_task(task, owner, due_date=now + timedelta(days=2))
    subtask = task_service.create_subtask(task, owner, 'Check', assigned_to=member)

    notifications = notification_service.collect(member, now=now)

    assert [n.id for n in notifications] == [f'{SUBTASK_DUE}_{subtask.id}']
    assert notifications[0].message == '"Check" in "Write copy" is due soon'
    assert notifications[0].due_date == task.due_date
    assert notifications[0].subtask_title == 'Check'


@override_settings(TASKBOARD_DUE_SOON_DAYS=7)
def test_due_soon_window_is_configurable(board, owner, now):
    task_service.create_task(board, owner, 'Next week', due_date=now + timedelta(days=6))
    assert len(notification_service.collect(owner, now=now)) == 1


def test_read_state(board, owner, now):
    first = task_service.create_task(board, owner, 'A', due_date=now + timedelta(days=1))
    task_service.create_task(board, owner, 'B', due_date=now + timedelta(days=2))

    notification_service.mark_read(owner, f'{TASK_DUE}_{first.id}')
    notifications = notification_service.collect(owner, now=now)
    assert [n.is_read for n in notifications] == [True, False]
    assert notification_service.unread_count(notifications) == 1

    notification_service.mark_all_read(owner)
    assert notification_service.unread_count(notification_service.collect(owner, now=now)) == 0


def test_clear_hides_notification(board, owner, member, now):
    task = task_service.create_task(board, owner, 'A', due_date=now + timedelta(days=1))
    notification_service.clear(owner, f'{TASK_DUE}_{task.id}')

    assert notification_service.collect(owner, now=now) == []


def test_read_state_is_per_user(board, owner, member, now):
    task = task_service.create_task(board, owner, 'Shared', due_date=now + timedelta(days=1),
                                    assigned_to=member)
    notification_service.mark_read(owner, f'{TASK_DUE}_{task.id}')

    assert notification_service.collect(member, now=now)[0].is_read is False


def test_assignment_notification(task, subtask):
    notification = notification_service.assignment_notification(subtask)

    assert notification.id == f'{TASK_ASSIGNED}_subtask_{subtask.id}'
    assert notification.task_id == task.id
    assert notification.to_dict()['subtask_title'] == 'Proofread'

    assert notification_service.assignment_notification(task).id == f'{TASK_ASSIGNED}_task_{task.id}'


def test_due_soon_boundary_is_inclusive(settings, board, owner, now):
    edge = task_service.create_task(
        board, owner, 'Edge', due_date=now + timedelta(days=settings.TASKBOARD_DUE_SOON_DAYS)
    )
    task_service.create_task(
        board, owner, 'Past edge',
        due_date=now + timedelta(days=settings.TASKBOARD_DUE_SOON_DAYS, seconds=1)
    )

    assert [n.id for n in notification_service.collect(owner, now=now)] == [f'{TASK_DUE}_{edge.id}']


def test_subtask_own_due_date_wins_over_task(task, owner, member, now):
    task_service.update_task(task, owner, due_date=now + timedelta(days=1))
    task_service.create_subtask(task, owner, 'Later', due_date=now + timedelta(days=10),
                                assigned_to=member)

    assert notification_service.collect(member, now=now) == []
