# tests/test_consumers.py

from datetime import timedelta

import pytest
from channels.db import database_sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.utils import timezone

from apps.board.consumers import CLOSE_ACCESS_REVOKED
from apps.board.routing import websocket_urlpatterns
from apps.core.member_service import member_service
from apps.core.task_service import task_service

pytestmark = pytest.mark.django_db(transaction=True)

application = URLRouter(websocket_urlpatterns)


async def open_socket(path, user):
    communicator = WebsocketCommunicator(application, path)
    communicator.scope['user'] = user
    connected, _ = await communicator.connect()
    return communicator, connected


class TestBoardConsumer:

    async def test_anonymous_is_rejected(self, board):
        communicator, connected = await open_socket(f'/ws/board/{board.id}/', AnonymousUser())
        assert not connected

    async def test_outsider_is_rejected(self, board, outsider):
        communicator, connected = await open_socket(f'/ws/board/{board.id}/', outsider)
        assert not connected

    async def test_member_gets_snapshot(self, board, task, member):
        communicator, connected = await open_socket(f'/ws/board/{board.id}/', member)
        assert connected

        message = await communicator.receive_json_from()
        assert message['type'] == 'board_sync'
        assert message['payload']['board']['name'] == 'Launch'
        assert [t['title'] for t in message['payload']['tasks']] == ['Write copy']
        assert [s['key'] for s in message['payload']['statuses']] == ['todo', 'in-progress', 'done']

        await communicator.disconnect()

    async def test_ping_and_sync(self, board, member):
        communicator, _ = await open_socket(f'/ws/board/{board.id}/', member)
        await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'ping'})
        assert (await communicator.receive_json_from())['type'] == 'pong'

        await communicator.send_json_to({'type': 'sync_board'})
        assert (await communicator.receive_json_from())['type'] == 'board_sync'

        await communicator.disconnect()

    async def test_task_changes_reach_members(self, board, owner, member):
        communicator, _ = await open_socket(f'/ws/board/{board.id}/', member)
        await communicator.receive_json_from()

        await database_sync_to_async(task_service.create_task)(board, owner, 'Fresh')

        message = await communicator.receive_json_from()
        assert message['type'] == 'task_created'
        assert message['payload']['title'] == 'Fresh'
        assert message['payload']['boardId'] == board.id

        await communicator.disconnect()

    async def test_removed_member_is_disconnected(self, board, owner, member):
        communicator, _ = await open_socket(f'/ws/board/{board.id}/', member)
        await communicator.receive_json_from()

        await database_sync_to_async(member_service.remove_member)(board.id, owner, str(member.uid))

        message = await communicator.receive_json_from()
        assert message['type'] == 'members_changed'

        closed = await communicator.receive_output()
        assert closed['type'] == 'websocket.close'
        assert closed['code'] == CLOSE_ACCESS_REVOKED


class TestNotificationConsumer:

    async def test_anonymous_is_rejected(self):
        communicator, connected = await open_socket('/ws/notifications/', AnonymousUser())
        assert not connected

    async def test_initial_list_and_mark_read(self, board, owner):
        task = await database_sync_to_async(task_service.create_task)(
            board, owner, 'Due', due_date=timezone.now() + timedelta(days=1)
        )

        communicator, connected = await open_socket('/ws/notifications/', owner)
        assert connected

        message = await communicator.receive_json_from()
        assert message['type'] == 'notifications'
        assert message['payload']['unread_count'] == 1
        notification_id = message['payload']['notifications'][0]['id']
        assert notification_id == f'task_due_{task.id}'

        await communicator.send_json_to({'type': 'mark_read', 'notification_id': notification_id})
        message = await communicator.receive_json_from()
        assert message['payload']['unread_count'] == 0

        await communicator.disconnect()

    async def test_assignment_is_pushed(self, board, owner, member):
        communicator, _ = await open_socket('/ws/notifications/', member)
        await communicator.receive_json_from()

        await database_sync_to_async(task_service.create_task)(board, owner, 'For Bob', assigned_to=member)

        message = await communicator.receive_json_from()
        assert message['type'] == 'notification'
        assert message['message']['type'] == 'task_assigned'
        assert message['message']['title'] == 'New Assignment'

        await communicator.disconnect()
