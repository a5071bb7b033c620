# apps/core/board_service.py

"""
Board service - creation, settings, statuses and dashboard figures

Ownership checks live here so every entry point (views, consumers,
management commands) goes through the same rules.
"""

import logging
import time
from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from .exceptions import FailedPrecondition, InvalidArgument, NotFound
from .models import Board, BoardStatus, DEFAULT_STATUS_COLOR, DONE_STATUS, Subtask, Task
from .permissions import BoardPermissions

logger = logging.getLogger(__name__)


class BoardService:
    """Board CRUD and status (column) management"""

    def create_board(self, owner, name: str, description: str = '',
                     statuses: Optional[Iterable[Dict]] = None) -> Board:
        """
        Creates a board owned by ``owner``

        Args:
            owner: creating user, added as first member
            name: board name (required)
            description: optional text
            statuses: optional column definitions; defaults when omitted

        Returns:
            the new Board
        """
        name = (name or '').strip()
        if not name:
            raise InvalidArgument('Board name is required.')

        with transaction.atomic():
            board = Board.objects.create(
                name=name,
                description=(description or '').strip(),
                owner=owner,
            )
            board.members.add(owner)

            if statuses:
                self._replace_statuses(board, statuses)
            else:
                board.create_default_statuses()

        logger.info(f"📋 Board '{board.name}' ({board.id}) created by {owner.username}")
        return board

    def update_board(self, board: Board, user, name: str, description: str = '') -> Board:
        BoardPermissions.check_owner(user, board, 'Only the board owner can edit the board.')

        name = (name or '').strip()
        if not name:
            raise InvalidArgument('Board name is required.')

        board.name = name
        board.description = (description or '').strip()
        board.save(update_fields=['name', 'description', 'updated_at'])
        return board

    def delete_board(self, board: Board, user) -> None:
        """Deletes the board with all its tasks and subtasks"""
        BoardPermissions.check_owner(user, board, 'Only the board owner can delete the board.')

        board_id, board_name = board.id, board.name
        with transaction.atomic():
            Subtask.objects.filter(task__board=board).delete()
            board.tasks.all().delete()
            board.delete()

        logger.info(f"🗑️ Board '{board_name}' ({board_id}) deleted by {user.username}")

    def boards_for_user(self, user):
        """Boards where the user is a member, newest first"""
        return (
            Board.objects.filter(members=user)
            .select_related('owner')
            .prefetch_related('members')
            .distinct()
            .order_by('-created_at')
        )

    # === Statuses ===

    def add_status(self, board: Board, user, name: str, color: str = DEFAULT_STATUS_COLOR) -> BoardStatus:
        BoardPermissions.check_owner(user, board, 'Only the board owner can manage statuses.')

        name = (name or '').strip()
        if not name:
            raise InvalidArgument('Status name is required.')

        last = board.statuses.order_by('-order').first()
        return BoardStatus.objects.create(
            board=board,
            key=self._new_status_key(board),
            name=name,
            color=color or DEFAULT_STATUS_COLOR,
            order=(last.order + 1) if last else 1,
        )

    def update_status(self, board: Board, user, key: str, name: str, color: Optional[str] = None) -> BoardStatus:
        BoardPermissions.check_owner(user, board, 'Only the board owner can manage statuses.')

        status = self._get_status(board, key)
        name = (name or '').strip()
        if not name:
            raise InvalidArgument('Status name is required.')

        status.name = name
        if color:
            status.color = color
        status.save()
        return status

    def delete_status(self, board: Board, user, key: str) -> None:
        BoardPermissions.check_owner(user, board, 'Only the board owner can manage statuses.')

        status = self._get_status(board, key)
        if status.in_use():
            raise FailedPrecondition(
                f'"{status.name}" still has tasks. Move them to another status first.'
            )
        status.delete()

    def reorder_statuses(self, board: Board, user, keys: List[str]) -> None:
        """Rewrites column order following ``keys``"""
        BoardPermissions.check_owner(user, board, 'Only the board owner can manage statuses.')

        if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
            raise InvalidArgument('Status keys must be a list of strings.')

        current = {status.key: status for status in board.statuses.all()}
        if sorted(keys) != sorted(current):
            raise InvalidArgument('The new order must list every status exactly once.')

        with transaction.atomic():
            for idx, key in enumerate(keys, start=1):
                status = current[key]
                if status.order != idx:
                    status.order = idx
                    status.save(update_fields=['order'])

    def _get_status(self, board: Board, key: str) -> BoardStatus:
        try:
            return board.statuses.get(key=key)
        except BoardStatus.DoesNotExist:
            raise NotFound('Status not found.')

    def _new_status_key(self, board: Board) -> str:
        key = f"status-{int(time.time() * 1000)}"
        while board.statuses.filter(key=key).exists():
            key = f"{key}-1"
        return key

    def _replace_statuses(self, board: Board, statuses: Iterable[Dict]) -> None:
        seen = set()
        rows = []
        for idx, status in enumerate(statuses, start=1):
            name = (status.get('name') or '').strip()
            if not name:
                raise InvalidArgument('Status name is required.')
            key = status.get('key') or f"status-{int(time.time() * 1000)}-{idx}"
            if key in seen:
                raise InvalidArgument(f'Duplicate status "{key}".')
            seen.add(key)
            rows.append(BoardStatus(
                board=board,
                key=key,
                name=name,
                color=status.get('color') or DEFAULT_STATUS_COLOR,
                order=status.get('order') or idx,
            ))
        board.statuses.all().delete()
        BoardStatus.objects.bulk_create(rows)

    # === Dashboard ===

    def dashboard_stats(self, user, boards) -> Dict:
        """Figures shown on the dashboard"""
        now = timezone.now()
        soon = now + timedelta(days=settings.TASKBOARD_DUE_SOON_DAYS)
        board_ids = [board.id for board in boards]

        open_tasks = Task.objects.filter(
            board_id__in=board_ids, assigned_to=user
        ).exclude(status=DONE_STATUS)
        open_subtasks = Subtask.objects.filter(
            task__board_id__in=board_ids, assigned_to=user
        ).exclude(status=DONE_STATUS)

        due_soon = Task.objects.filter(
            Q(owner=user) | Q(assigned_to=user),
            board_id__in=board_ids,
            due_date__isnull=False,
            due_date__lte=soon,
        ).exclude(status=DONE_STATUS).count()

        return {
            'total_boards': len(board_ids),
            'owned_boards': sum(1 for board in boards if board.owner_id == user.id),
            'total_members': sum(board.members.count() for board in boards),
            'open_assigned': open_tasks.count() + open_subtasks.count(),
            'due_soon': due_soon,
        }


board_service = BoardService()
