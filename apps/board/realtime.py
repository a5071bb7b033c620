# apps/board/realtime.py

"""
Realtime fan-out of board changes over the channel layer

Every board has a group (``board_<id>``) joined by the BoardConsumer of each
open board page; every user has a personal group (``user_<id>``) joined by
the NotificationConsumer.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)


def board_group_name(board_id):
    return f'board_{board_id}'


def user_group_name(user_id):
    return f'user_{user_id}'


def broadcast_board_event(board_id, event, payload):
    """
    Sends ``event`` to every client watching the board

    Failures are logged; the database write that triggered the event has
    already been committed.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(
            board_group_name(board_id),
            {
                'type': 'board_event',
                'event': event,
                'payload': payload,
                'timestamp': timezone.now().isoformat(),
            }
        )
    except Exception as e:
        logger.error(f"❌ Failed to broadcast {event} to board {board_id}: {str(e)}")


def send_user_notification(user_id, notification):
    """Pushes a notification dict to the user's personal group"""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(
            user_group_name(user_id),
            {
                'type': 'notification_message',
                'message': notification,
            }
        )
    except Exception as e:
        logger.error(f"❌ Failed to notify user {user_id}: {str(e)}")


def broadcast_on_commit(board_id, event, payload):
    """Broadcasts once the current transaction commits"""
    transaction.on_commit(lambda: broadcast_board_event(board_id, event, payload))


def notify_on_commit(user_id, notification):
    transaction.on_commit(lambda: send_user_notification(user_id, notification))
