# apps/core/task_service.py

"""
Task service - tasks, subtasks, status moves and assignment

Rules applied on every write:
- a status must be one of the board's columns
- a task can't be done while any subtask is still open
- an assignee must be a member of the board
"""

import logging
from typing import Dict, List, Optional

from django.db import transaction

from .exceptions import FailedPrecondition, InvalidArgument, NotFound
from .models import DONE_STATUS, Subtask, Task
from .permissions import BoardPermissions

logger = logging.getLogger(__name__)

TASK_FIELDS = ('title', 'description', 'status', 'due_date', 'remark')
SUBTASK_FIELDS = ('title', 'status', 'due_date', 'remark')


class TaskService:
    """CRUD and status mutation for tasks and subtasks"""

    # === Tasks ===

    def create_task(self, board, user, title: str, description: str = '', status: Optional[str] = None,
                    due_date=None, remark: str = '', assigned_to=None) -> Task:
        BoardPermissions.check_access(user, board)

        status = status or board.get_status_keys()[0]
        self._validate_status(board, status)
        self._validate_assignee(board, assigned_to)

        task = Task.objects.create(
            board=board,
            title=self._clean_title(title),
            description=(description or '').strip(),
            status=status,
            due_date=due_date,
            remark=(remark or '').strip(),
            owner=user,
            assigned_to=assigned_to,
        )
        logger.info(f"✅ Task '{task.title}' ({task.id}) created on board {board.id} by {user.username}")
        return task

    def update_task(self, task: Task, user, **fields) -> Task:
        """
        Updates the editable fields of a task

        Unknown field names raise InvalidArgument. Setting the status to done
        fails while subtasks are open.
        """
        board = task.board
        BoardPermissions.check_access(user, board)
        self._check_fields(fields, TASK_FIELDS + ('assigned_to',))

        if 'title' in fields:
            fields['title'] = self._clean_title(fields['title'])
        if 'status' in fields:
            self._validate_status(board, fields['status'])
            if fields['status'] == DONE_STATUS:
                self._check_can_complete(task)
        if 'assigned_to' in fields:
            self._validate_assignee(board, fields['assigned_to'])

        for name, value in fields.items():
            setattr(task, name, value)
        task.save()
        return task

    def delete_task(self, task: Task, user) -> None:
        """Deletes the task and its subtasks in one transaction"""
        BoardPermissions.check_access(user, task.board)

        task_id, title = task.id, task.title
        with transaction.atomic():
            task.subtasks.all().delete()
            task.delete()

        logger.info(f"🗑️ Task '{title}' ({task_id}) and its subtasks deleted by {user.username}")

    def move_task(self, task: Task, user, status: str) -> Task:
        """Drag-and-drop status change (last write wins)"""
        return self.update_task(task, user, status=status)

    def assign_task(self, task: Task, user, assignee) -> Task:
        return self.update_task(task, user, assigned_to=assignee)

    # === Subtasks ===

    def create_subtask(self, task: Task, user, title: str, status: Optional[str] = None,
                       due_date=None, remark: str = '', assigned_to=None) -> Subtask:
        board = task.board
        BoardPermissions.check_access(user, board)

        status = status or board.get_status_keys()[0]
        self._validate_status(board, status)
        self._validate_assignee(board, assigned_to)

        subtask = Subtask.objects.create(
            task=task,
            title=self._clean_title(title),
            status=status,
            due_date=due_date,
            remark=(remark or '').strip(),
            owner=user,
            assigned_to=assigned_to,
        )
        logger.info(f"➕ Subtask '{subtask.title}' added to task {task.id} by {user.username}")
        return subtask

    def update_subtask(self, subtask: Subtask, user, **fields) -> Subtask:
        board = subtask.task.board
        BoardPermissions.check_access(user, board)
        self._check_fields(fields, SUBTASK_FIELDS + ('assigned_to',))

        if 'title' in fields:
            fields['title'] = self._clean_title(fields['title'])
        if 'status' in fields:
            self._validate_status(board, fields['status'])
        if 'assigned_to' in fields:
            self._validate_assignee(board, fields['assigned_to'])

        for name, value in fields.items():
            setattr(subtask, name, value)
        subtask.save()
        return subtask

    def delete_subtask(self, subtask: Subtask, user) -> None:
        BoardPermissions.check_access(user, subtask.task.board)
        subtask.delete()

    def move_subtask(self, subtask: Subtask, user, status: str) -> Subtask:
        return self.update_subtask(subtask, user, status=status)

    def assign_subtask(self, subtask: Subtask, user, assignee) -> Subtask:
        return self.update_subtask(subtask, user, assigned_to=assignee)

    # === Lookups ===

    def get_task(self, board, task_id) -> Task:
        try:
            return board.tasks.select_related('board', 'owner', 'assigned_to').get(id=task_id)
        except (Task.DoesNotExist, ValueError, TypeError):
            raise NotFound('Task not found.')

    def get_subtask(self, task: Task, subtask_id) -> Subtask:
        try:
            return task.subtasks.select_related('task__board', 'owner', 'assigned_to').get(id=subtask_id)
        except (Subtask.DoesNotExist, ValueError, TypeError):
            raise NotFound('Subtask not found.')

    def assigned_items(self, user, status: Optional[str] = None, order: str = 'asc') -> List[Dict]:
        """
        Tasks and subtasks assigned to the user across all boards

        Args:
            user: assignee
            status: only items in this status ("all"/None for every status)
            order: due date order, "asc" or "desc"; undated items go last

        Returns:
            list of dicts with the item, its type, board and parent task
        """
        tasks = Task.objects.filter(
            assigned_to=user, board__members=user
        ).select_related('board').distinct()
        subtasks = Subtask.objects.filter(
            assigned_to=user, task__board__members=user
        ).select_related('task__board').distinct()

        if status and status != 'all':
            tasks = tasks.filter(status=status)
            subtasks = subtasks.filter(status=status)

        items = []
        for task in tasks:
            items.append({
                'type': 'task',
                'item': task,
                'board': task.board,
                'task': task,
                'due_date': task.due_date,
            })
        for subtask in subtasks:
            items.append({
                'type': 'subtask',
                'item': subtask,
                'board': subtask.task.board,
                'task': subtask.task,
                'due_date': subtask.effective_due_date,
            })

        dated = [i for i in items if i['due_date']]
        undated = [i for i in items if not i['due_date']]
        dated.sort(key=lambda i: i['due_date'], reverse=(order == 'desc'))
        return dated + undated

    # === Validation helpers ===

    def _clean_title(self, title) -> str:
        title = (title or '').strip()
        if not title:
            raise InvalidArgument('Title is required.')
        return title

    def _validate_status(self, board, status) -> None:
        if status not in board.get_status_keys():
            raise InvalidArgument(f'Unknown status "{status}" for this board.')

    def _validate_assignee(self, board, assignee) -> None:
        if assignee is not None and not board.members.filter(id=assignee.id).exists():
            raise InvalidArgument('The assignee must be a member of the board.')

    def _check_can_complete(self, task: Task) -> None:
        if task.open_subtasks().exists():
            raise FailedPrecondition('Cannot mark task as done. All subtasks must be completed first.')

    def _check_fields(self, fields: Dict, allowed) -> None:
        unknown = set(fields) - set(allowed)
        if unknown:
            raise InvalidArgument(f"Unknown field(s): {', '.join(sorted(unknown))}")


task_service = TaskService()
