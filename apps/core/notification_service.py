# apps/core/notification_service.py

"""
Notification service - due and overdue items for a user

Notifications are computed on demand from the user's tasks and subtasks.
Only the read/cleared state is stored, in the Django cache, per user.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from django.conf import settings
from django.core.cache import cache
from django.db.models import Q
from django.utils import timezone

from .models import DONE_STATUS, Subtask, Task

logger = logging.getLogger(__name__)

TASK_DUE = 'task_due'
SUBTASK_DUE = 'subtask_due'
TASK_ASSIGNED = 'task_assigned'


@dataclass
class Notification:
    id: str
    type: str
    title: str
    message: str
    board_id: int
    board_name: str
    task_id: int
    task_title: str
    subtask_id: Optional[int] = None
    subtask_title: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime = field(default_factory=timezone.now)
    is_read: bool = False

    @property
    def is_overdue(self):
        return self.title == 'Overdue Task'

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['due_date'] = self.due_date.isoformat() if self.due_date else None
        data['created_at'] = self.created_at.isoformat()
        return data


class NotificationService:
    """Builds due-date notifications and tracks their read state"""

    def collect(self, user, now: Optional[datetime] = None) -> List[Notification]:
        """
        Due-soon and overdue notifications for the user

        Tasks owned by or assigned to the user and subtasks assigned to the
        user count when not done and due within TASKBOARD_DUE_SOON_DAYS.
        A subtask without its own due date uses its task's one. Cleared
        notifications are left out; read ones are flagged.
        """
        now = now or timezone.now()
        threshold = now + timedelta(days=settings.TASKBOARD_DUE_SOON_DAYS)
        read_ids = self._get_ids(user, 'read')
        cleared_ids = self._get_ids(user, 'cleared')

        notifications = []

        tasks = Task.objects.filter(
            Q(owner=user) | Q(assigned_to=user),
            board__members=user,
            due_date__isnull=False,
            due_date__lte=threshold,
        ).exclude(status=DONE_STATUS).select_related('board').distinct()

        for task in tasks:
            overdue = task.due_date < now
            notifications.append(Notification(
                id=f'{TASK_DUE}_{task.id}',
                type=TASK_DUE,
                title='Overdue Task' if overdue else 'Task Due Soon',
                message=f'"{task.title}" is {"overdue" if overdue else "due soon"}',
                board_id=task.board_id,
                board_name=task.board.name,
                task_id=task.id,
                task_title=task.title,
                due_date=task.due_date,
                created_at=now,
            ))

        subtasks = Subtask.objects.filter(
            assigned_to=user,
            task__board__members=user,
        ).filter(
            Q(due_date__isnull=False, due_date__lte=threshold) |
            Q(due_date__isnull=True, task__due_date__isnull=False, task__due_date__lte=threshold)
        ).exclude(status=DONE_STATUS).select_related('task__board').distinct()

        for subtask in subtasks:
            due_date = subtask.effective_due_date
            overdue = due_date < now
            task = subtask.task
            notifications.append(Notification(
                id=f'{SUBTASK_DUE}_{subtask.id}',
                type=SUBTASK_DUE,
                title='Overdue Task' if overdue else 'Task Due Soon',
                message=f'"{subtask.title}" in "{task.title}" is {"overdue" if overdue else "due soon"}',
                board_id=task.board_id,
                board_name=task.board.name,
                task_id=task.id,
                task_title=task.title,
                subtask_id=subtask.id,
                subtask_title=subtask.title,
                due_date=due_date,
                created_at=now,
            ))

        notifications = [n for n in notifications if n.id not in cleared_ids]
        for notification in notifications:
            notification.is_read = notification.id in read_ids

        notifications.sort(key=lambda n: n.due_date)
        return notifications

    def unread_count(self, notifications: List[Notification]) -> int:
        return sum(1 for n in notifications if not n.is_read)

    def mark_read(self, user, notification_id: str) -> None:
        self._add_ids(user, 'read', [notification_id])

    def mark_all_read(self, user) -> None:
        self._add_ids(user, 'read', [n.id for n in self.collect(user)])

    def clear(self, user, notification_id: str) -> None:
        """Dismisses a notification for good"""
        self._add_ids(user, 'cleared', [notification_id])

    def assignment_notification(self, item) -> Notification:
        """Realtime notice sent to a user a task or subtask was assigned to"""
        is_subtask = isinstance(item, Subtask)
        task = item.task if is_subtask else item
        return Notification(
            id=f'{TASK_ASSIGNED}_{"subtask" if is_subtask else "task"}_{item.id}',
            type=TASK_ASSIGNED,
            title='New Assignment',
            message=f'You were assigned to "{item.title}"',
            board_id=task.board_id,
            board_name=task.board.name,
            task_id=task.id,
            task_title=task.title,
            subtask_id=item.id if is_subtask else None,
            subtask_title=item.title if is_subtask else None,
            due_date=item.due_date,
        )

    # === Read state (cache) ===

    def _cache_key(self, user, kind: str) -> str:
        return f'notifications:{user.id}:{kind}'

    def _get_ids(self, user, kind: str) -> set:
        return set(cache.get(self._cache_key(user, kind)) or [])

    def _add_ids(self, user, kind: str, ids) -> None:
        current = self._get_ids(user, kind)
        current.update(ids)
        cache.set(
            self._cache_key(user, kind),
            sorted(current),
            settings.TASKBOARD_NOTIFICATION_STATE_TTL,
        )


notification_service = NotificationService()
