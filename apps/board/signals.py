# apps/board/signals.py

from django.db.models.signals import m2m_changed, post_delete, post_init, post_save, pre_delete
from django.dispatch import receiver

from apps.core.models import Board, BoardStatus, Subtask, Task
from apps.core.notification_service import notification_service
from apps.core.utils import serialize_board, serialize_member, serialize_subtask, serialize_task

from .realtime import broadcast_on_commit, notify_on_commit


@receiver(post_save, sender=Board)
def board_saved(sender, instance, created, **kwargs):
    """Settings changes are pushed to open board pages"""
    if not created:
        broadcast_on_commit(instance.id, 'board_updated', serialize_board(instance))


@receiver(pre_delete, sender=Board)
def board_deleted(sender, instance, **kwargs):
    broadcast_on_commit(instance.id, 'board_deleted', {'id': instance.id})


@receiver(m2m_changed, sender=Board.members.through)
def board_members_changed(sender, instance, action, pk_set, **kwargs):
    """
    Members added or removed

    Only forward changes on a Board instance (not user.boards.add()).
    """
    if action not in ('post_add', 'post_remove', 'post_clear') or not isinstance(instance, Board):
        return

    members = [serialize_member(member) for member in instance.members.order_by('username')]
    broadcast_on_commit(instance.id, 'members_changed', {
        'boardId': instance.id,
        'members': members,
    })


@receiver(post_save, sender=BoardStatus)
@receiver(post_delete, sender=BoardStatus)
def board_statuses_changed(sender, instance, **kwargs):
    board = Board.objects.filter(id=instance.board_id).first()
    if board is not None:
        broadcast_on_commit(board.id, 'statuses_changed', {
            'boardId': board.id,
            'statuses': board.get_statuses(),
        })


# === Tasks and subtasks ===

@receiver(post_init, sender=Task)
@receiver(post_init, sender=Subtask)
def remember_assignee(sender, instance, **kwargs):
    """Keeps the stored assignee to detect new assignments on save"""
    # Unsaved instances have no stored assignee yet
    instance._loaded_assigned_to_id = instance.assigned_to_id if instance.pk else None


def _notify_new_assignee(instance):
    assignee_id = instance.assigned_to_id
    if assignee_id and assignee_id != instance._loaded_assigned_to_id and assignee_id != instance.owner_id:
        notification = notification_service.assignment_notification(instance)
        notify_on_commit(assignee_id, notification.to_dict())
    instance._loaded_assigned_to_id = assignee_id


@receiver(post_save, sender=Task)
def task_saved(sender, instance, created, **kwargs):
    event = 'task_created' if created else 'task_updated'
    broadcast_on_commit(instance.board_id, event, serialize_task(instance))
    _notify_new_assignee(instance)


@receiver(pre_delete, sender=Task)
def task_deleted(sender, instance, **kwargs):
    broadcast_on_commit(instance.board_id, 'task_deleted', {
        'id': instance.id,
        'boardId': instance.board_id,
    })


@receiver(post_save, sender=Subtask)
def subtask_saved(sender, instance, created, **kwargs):
    event = 'subtask_created' if created else 'subtask_updated'
    broadcast_on_commit(instance.task.board_id, event, serialize_subtask(instance))
    _notify_new_assignee(instance)


@receiver(pre_delete, sender=Subtask)
def subtask_deleted(sender, instance, **kwargs):
    board_id = instance.task.board_id
    broadcast_on_commit(board_id, 'subtask_deleted', {
        'id': instance.id,
        'taskId': instance.task_id,
        'boardId': board_id,
    })
