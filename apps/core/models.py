# apps/core/models.py

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

DONE_STATUS = 'done'

# Columns every new board starts with
DEFAULT_STATUSES = [
    {'key': 'todo', 'name': 'To Do', 'color': 'from-yellow-500 to-orange-600', 'order': 1},
    {'key': 'in-progress', 'name': 'In Progress', 'color': 'from-blue-500 to-cyan-600', 'order': 2},
    {'key': DONE_STATUS, 'name': 'Done', 'color': 'from-green-500 to-emerald-600', 'order': 3},
]

DEFAULT_STATUS_COLOR = 'from-gray-500 to-gray-600'


class User(AbstractUser):
    """
    Custom user model

    The public identity of a user is its ``uid``; boards reference members
    by uid in every payload sent to the browser.
    """

    uid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    email = models.EmailField('email address', unique=True)
    display_name = models.CharField(max_length=150, blank=True)
    photo_url = models.URLField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user'

    def get_display_name(self):
        """Display name, falling back to the full name, then the username"""
        return self.display_name or self.get_full_name() or self.username

    def get_accessible_boards(self):
        """Boards this user is a member of"""
        return Board.objects.filter(members=self).distinct()

    def __str__(self):
        return f"{self.get_display_name()} <{self.email}>"


class Board(models.Model):
    """A project workspace containing tasks"""

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    owner = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='owned_boards'
    )
    members = models.ManyToManyField(
        User,
        related_name='boards'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'board'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def is_owner(self, user):
        return user.is_authenticated and self.owner_id == user.id

    def is_member(self, user):
        if not user.is_authenticated:
            return False
        return self.members.filter(id=user.id).exists()

    def create_default_statuses(self):
        """Creates the default To Do / In Progress / Done columns"""
        BoardStatus.objects.bulk_create([
            BoardStatus(board=self, **status) for status in DEFAULT_STATUSES
        ])

    def get_statuses(self):
        """
        Ordered column definitions as dicts

        Falls back to the default columns when the board has none.
        """
        statuses = [
            {'key': s.key, 'name': s.name, 'color': s.color, 'order': s.order}
            for s in self.statuses.all()
        ]
        return statuses or [dict(s) for s in DEFAULT_STATUSES]

    def get_status_keys(self):
        return [status['key'] for status in self.get_statuses()]


class BoardStatus(models.Model):
    """Custom status (column) definition of a board"""

    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='statuses'
    )
    key = models.CharField(max_length=50)
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=100, default=DEFAULT_STATUS_COLOR)
    order = models.IntegerField(default=0)

    class Meta:
        db_table = 'board_status'
        ordering = ['order', 'name']
        unique_together = ['board', 'key']

    def __str__(self):
        return f"{self.name} - {self.board.name}"

    def in_use(self):
        """Whether any task or subtask of the board sits in this column"""
        return (
            Task.objects.filter(board_id=self.board_id, status=self.key).exists() or
            Subtask.objects.filter(task__board_id=self.board_id, status=self.key).exists()
        )


class WorkItem(models.Model):
    """Fields shared by tasks and subtasks"""

    title = models.CharField(max_length=200)
    status = models.CharField(max_length=50, default='todo')
    due_date = models.DateTimeField(null=True, blank=True)
    remark = models.TextField(blank=True)
    owner = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='owned_%(class)ss'
    )
    assigned_to = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_%(class)ss'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def is_done(self):
        return self.status == DONE_STATUS

    @property
    def effective_due_date(self):
        return self.due_date

    def is_overdue(self, now=None):
        """Past its due date and not done"""
        due_date = self.effective_due_date
        if not due_date or self.is_done:
            return False
        return due_date < (now or timezone.now())

    def __str__(self):
        return self.title


class Task(WorkItem):
    """A unit of work with a status"""

    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='tasks'
    )
    description = models.TextField(blank=True)

    class Meta:
        db_table = 'task'
        ordering = ['created_at', 'id']

    def open_subtasks(self):
        return self.subtasks.exclude(status=DONE_STATUS)

    def subtask_progress(self):
        """(done, total) subtask counts"""
        subtasks = list(self.subtasks.all())
        return sum(1 for s in subtasks if s.is_done), len(subtasks)


class Subtask(WorkItem):
    """A child unit of work under a task"""

    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        related_name='subtasks'
    )

    class Meta:
        db_table = 'subtask'
        ordering = ['created_at', 'id']

    @property
    def board(self):
        return self.task.board

    @property
    def effective_due_date(self):
        """Own due date, or the parent task's one"""
        return self.due_date or self.task.due_date
