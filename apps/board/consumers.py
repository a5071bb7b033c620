# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.utils import timezone

from apps.core.models import Board
from apps.core.notification_service import notification_service
from apps.core.permissions import BoardPermissions
from apps.core.utils import board_snapshot

from .realtime import board_group_name, user_group_name

logger = logging.getLogger(__name__)

# Application close codes; clients must not reconnect on these
CLOSE_ACCESS_REVOKED = 4403
CLOSE_BOARD_DELETED = 4404


class BoardConsumer(AsyncWebsocketConsumer):
    """
    Realtime board subscription

    A member connecting to ``ws/board/<id>/`` receives the full board state,
    then every change to the board, its tasks, subtasks, statuses and
    members as ``{type, payload, timestamp}`` messages.
    """

    async def connect(self):
        """
        Joins the board group
        Checks membership before accepting the connection
        """
        self.board_id = self.scope['url_route']['kwargs']['board_id']
        self.board_group_name = board_group_name(self.board_id)
        self.user = self.scope['user']

        if not self.user.is_authenticated:
            logger.warning("❌ WebSocket rejected - user not authenticated")
            await self.close()
            return

        has_access = await self.check_board_access()
        if not has_access:
            logger.warning(f"❌ WebSocket rejected - {self.user.username} has no access to board {self.board_id}")
            await self.close()
            return

        await self.channel_layer.group_add(
            self.board_group_name,
            self.channel_name
        )

        await self.accept()
        await self.send_board_sync()

        logger.info(f"✅ WebSocket connected - {self.user.username} on board {self.board_id}")

    async def disconnect(self, close_code):
        if hasattr(self, 'board_group_name'):
            await self.channel_layer.group_discard(
                self.board_group_name,
                self.channel_name
            )

        logger.info(f"🔌 WebSocket disconnected - {self.user.username} from board {self.board_id}")

    async def receive(self, text_data):
        """
        Client messages

        ping -> pong, sync_board -> board_sync
        """
        try:
            data = json.loads(text_data)
            message_type = data.get('type')

            if message_type == 'ping':
                await self.send(text_data=json.dumps({
                    'type': 'pong',
                    'timestamp': self.get_timestamp()
                }))

            elif message_type == 'sync_board':
                await self.send_board_sync()

        except json.JSONDecodeError:
            logger.error(f"❌ Invalid JSON received over WebSocket from {self.user.username}")

    async def board_event(self, event):
        """Forwards a board change to the client"""
        await self.send(text_data=json.dumps({
            'type': event['event'],
            'payload': event['payload'],
            'timestamp': event['timestamp'],
        }))

        if event['event'] == 'board_deleted':
            await self.close(code=CLOSE_BOARD_DELETED)

        elif event['event'] == 'members_changed':
            # Removed members lose the subscription
            member_uids = {member['uid'] for member in event['payload']['members']}
            if str(self.user.uid) not in member_uids:
                await self.close(code=CLOSE_ACCESS_REVOKED)

    async def send_board_sync(self):
        board_data = await self.get_board_state()
        await self.send(text_data=json.dumps({
            'type': 'board_sync',
            'payload': board_data,
            'timestamp': self.get_timestamp()
        }))

    # === Helpers ===

    @database_sync_to_async
    def check_board_access(self):
        try:
            board = Board.objects.get(id=self.board_id)
            return BoardPermissions.has_board_access(self.user, board)
        except Board.DoesNotExist:
            return False

    @database_sync_to_async
    def get_board_state(self):
        try:
            board = Board.objects.select_related('owner').get(id=self.board_id)
        except Board.DoesNotExist:
            logger.error(f"❌ Board {self.board_id} vanished during sync")
            return {}
        return board_snapshot(board)

    def get_timestamp(self):
        return timezone.now().isoformat()


class NotificationConsumer(AsyncWebsocketConsumer):
    """
    Personal notification channel

    Sends the current due/overdue list on connect, then assignment notices
    as they happen. Read state changes are answered with a fresh list.
    """

    async def connect(self):
        self.user = self.scope['user']

        if not self.user.is_authenticated:
            await self.close()
            return

        self.user_group_name = user_group_name(self.user.id)

        await self.channel_layer.group_add(
            self.user_group_name,
            self.channel_name
        )

        await self.accept()
        await self.send_notifications()
        logger.info(f"🔔 Notifications connected for {self.user.username}")

    async def disconnect(self, close_code):
        if hasattr(self, 'user_group_name'):
            await self.channel_layer.group_discard(
                self.user_group_name,
                self.channel_name
            )
            logger.info(f"🔕 Notifications disconnected for {self.user.username}")

    async def receive(self, text_data):
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.error(f"❌ Invalid JSON on notification socket from {self.user.username}")
            return

        message_type = data.get('type')
        notification_id = data.get('notification_id')

        if message_type == 'mark_read' and notification_id:
            await self.update_state(notification_service.mark_read, notification_id)
        elif message_type == 'clear' and notification_id:
            await self.update_state(notification_service.clear, notification_id)
        elif message_type == 'mark_all_read':
            await self.update_state(notification_service.mark_all_read)
        else:
            return

        await self.send_notifications()

    async def notification_message(self, event):
        await self.send(text_data=json.dumps({
            'type': 'notification',
            'message': event['message']
        }))

    async def send_notifications(self):
        payload = await self.get_notifications()
        await self.send(text_data=json.dumps({
            'type': 'notifications',
            'payload': payload,
        }))

    @database_sync_to_async
    def update_state(self, operation, *args):
        operation(self.user, *args)

    @database_sync_to_async
    def get_notifications(self):
        notifications = notification_service.collect(self.user)
        return {
            'notifications': [n.to_dict() for n in notifications],
            'unread_count': notification_service.unread_count(notifications),
        }
