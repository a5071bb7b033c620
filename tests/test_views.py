# tests/test_views.py

import json

import pytest
from django.urls import reverse

from apps.core.models import Board, Task
from apps.core.task_service import task_service

pytestmark = pytest.mark.django_db


def post_json(client, url, data):
    return client.post(url, data=json.dumps(data), content_type='application/json')


class TestPages:

    def test_login_required(self, client):
        response = client.get(reverse('core:dashboard'))
        assert response.status_code == 302
        assert response.url.startswith('/login/')

    def test_login_page(self, client):
        assert client.get(reverse('login')).status_code == 200

    def test_dashboard_lists_boards(self, member_client, board):
        response = member_client.get(reverse('core:dashboard'))

        assert response.status_code == 200
        assert list(response.context['boards']) == [board]
        assert response.context['stats']['total_boards'] == 1

    def test_board_page_columns(self, member_client, board, task):
        response = member_client.get(reverse('board:detail', args=[board.id]))

        assert response.status_code == 200
        columns = response.context['columns']
        assert [c['key'] for c in columns] == ['todo', 'in-progress', 'done']
        assert columns[0]['items'] == [task]

    def test_board_card_shows_subtask_progress(self, member_client, board, task, subtask, owner):
        task_service.create_subtask(task, owner, 'Translate', status='done')

        response = member_client.get(reverse('board:detail', args=[board.id]))

        assert b'1/2 subtasks done' in response.content

    def test_board_list_view(self, member_client, board, task):
        response = member_client.get(reverse('board:detail', args=[board.id]), {'view': 'list'})

        assert response.context['view_mode'] == 'list'
        assert b'Write copy' in response.content

    def test_outsider_is_sent_to_dashboard(self, client, outsider, board):
        client.force_login(outsider)
        response = client.get(reverse('board:detail', args=[board.id]))

        assert response.status_code == 302
        assert response.url == reverse('core:dashboard')

    def test_task_page(self, member_client, board, task, subtask):
        response = member_client.get(reverse('board:task_detail', args=[board.id, task.id]))

        assert response.status_code == 200
        assert response.context['progress'] == {'done': 0, 'total': 1}

    def test_my_tasks(self, member_client, board, owner, member):
        task = task_service.create_task(board, owner, 'For Bob', assigned_to=member)
        response = member_client.get(reverse('core:my_tasks'), {'status': 'all', 'order': 'desc'})

        assert response.status_code == 200
        assert [entry['item'] for entry in response.context['items']] == [task]

    def test_profile_update(self, member_client, member):
        response = member_client.post(reverse('core:profile'), {
            'display_name': '  Robert  ',
            'photo_url': 'https://example.com/bob.png',
        })

        assert response.status_code == 302
        member.refresh_from_db()
        assert member.display_name == 'Robert'

    def test_health(self, client):
        response = client.get(reverse('core:health'))
        assert response.json()['status'] == 'healthy'


class TestBoardSettings:

    def test_create_board_with_statuses(self, owner_client, owner):
        response = owner_client.post(reverse('core:board_create'), {
            'name': 'Hiring',
            'description': '',
            'status_key': ['todo', '', 'done'],
            'status_name': ['Sourced', 'Interviewing', 'Hired'],
            'status_color': ['from-yellow-500 to-orange-600', 'from-blue-500 to-cyan-600',
                             'from-green-500 to-emerald-600'],
        })

        board = Board.objects.get(name='Hiring')
        assert response.status_code == 302
        assert response.url == reverse('board:detail', args=[board.id])
        assert [s['name'] for s in board.get_statuses()] == ['Sourced', 'Interviewing', 'Hired']
        assert board.is_member(owner)

    def test_member_cannot_open_settings(self, member_client, board):
        response = member_client.get(reverse('core:board_edit', args=[board.id]))

        assert response.status_code == 302
        assert response.url == reverse('board:detail', args=[board.id])

    def test_delete_status_in_use(self, owner_client, board, task):
        response = owner_client.post(reverse('core:status_delete', args=[board.id, 'todo']))

        assert response.status_code == 302
        assert 'todo' in board.get_status_keys()

    def test_reorder_statuses(self, owner_client, board):
        response = post_json(owner_client, reverse('core:status_reorder', args=[board.id]),
                             {'keys': ['in-progress', 'todo', 'done']})

        assert response.status_code == 200
        assert [s['key'] for s in response.json()['statuses']] == ['in-progress', 'todo', 'done']

    def test_reorder_with_mixed_keys(self, owner_client, board):
        response = post_json(owner_client, reverse('core:status_reorder', args=[board.id]),
                             {'keys': [1, 'todo', 'done']})

        assert response.status_code == 400
        assert response.json()['success'] is False

    def test_reorder_with_list_body(self, owner_client, board):
        response = post_json(owner_client, reverse('core:status_reorder', args=[board.id]),
                             ['todo', 'in-progress', 'done'])

        assert response.status_code == 400

    def test_delete_board(self, owner_client, board, task):
        response = owner_client.post(reverse('core:board_delete', args=[board.id]))

        assert response.status_code == 302
        assert not Board.objects.filter(id=board.id).exists()


class TestTaskEndpoints:

    def test_create_task(self, member_client, board, member):
        response = member_client.post(reverse('board:task_create', args=[board.id]), {
            'title': 'New task',
            'status': 'in-progress',
            'assigned_to': member.id,
        })

        assert response.status_code == 302
        task = Task.objects.get(title='New task')
        assert task.status == 'in-progress'
        assert task.owner == member
        assert task.assigned_to == member

    def test_create_task_htmx(self, member_client, board):
        response = member_client.post(
            reverse('board:task_create', args=[board.id]),
            {'title': 'Via HTMX', 'status': 'todo'},
            HTTP_HX_REQUEST='true',
        )

        assert response.status_code == 204
        assert 'showToast' in response['HX-Trigger']
        assert Task.objects.filter(title='Via HTMX').exists()

    def test_create_task_unknown_status(self, member_client, board):
        response = member_client.post(
            reverse('board:task_create', args=[board.id]),
            {'title': 'Bad', 'status': 'archived'},
            HTTP_ACCEPT='application/json',
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'invalid-argument'

    def test_update_to_done_with_open_subtasks(self, member_client, board, task, subtask):
        response = member_client.post(
            reverse('board:task_update', args=[board.id, task.id]),
            {'title': task.title, 'status': 'done'},
            HTTP_ACCEPT='application/json',
        )

        assert response.status_code == 409
        assert response.json()['code'] == 'failed-precondition'
        task.refresh_from_db()
        assert task.status == 'todo'

    def test_delete_task(self, member_client, board, task, subtask):
        response = member_client.post(reverse('board:task_delete', args=[board.id, task.id]))

        assert response.status_code == 302
        assert not Task.objects.filter(id=task.id).exists()

    def test_subtask_crud(self, member_client, board, task):
        url = reverse('board:subtask_create', args=[board.id, task.id])
        member_client.post(url, {'title': 'Step one', 'status': 'todo'})
        subtask = task.subtasks.get()

        member_client.post(reverse('board:subtask_update', args=[board.id, task.id, subtask.id]),
                           {'title': 'Step one', 'status': 'done'})
        subtask.refresh_from_db()
        assert subtask.status == 'done'

        member_client.post(reverse('board:subtask_delete', args=[board.id, task.id, subtask.id]))
        assert not task.subtasks.exists()


class TestAjax:

    def test_move_task(self, member_client, board, task):
        response = post_json(member_client, reverse('board:move_item', args=[board.id]),
                             {'item_type': 'task', 'task_id': task.id, 'status': 'in-progress'})

        assert response.status_code == 200
        assert response.json()['item']['status'] == 'in-progress'

    def test_move_subtask(self, member_client, board, task, subtask):
        response = post_json(member_client, reverse('board:move_item', args=[board.id]), {
            'item_type': 'subtask', 'task_id': task.id, 'subtask_id': subtask.id, 'status': 'done',
        })

        assert response.status_code == 200
        subtask.refresh_from_db()
        assert subtask.is_done

    def test_move_blocked_by_open_subtasks(self, member_client, board, task, subtask):
        response = post_json(member_client, reverse('board:move_item', args=[board.id]),
                             {'item_type': 'task', 'task_id': task.id, 'status': 'done'})

        assert response.status_code == 409
        assert response.json()['success'] is False

    def test_move_by_outsider(self, client, outsider, board, task):
        client.force_login(outsider)
        response = post_json(client, reverse('board:move_item', args=[board.id]),
                             {'item_type': 'task', 'task_id': task.id, 'status': 'done'})

        assert response.status_code == 403

    def test_move_with_list_body(self, member_client, board, task):
        response = post_json(member_client, reverse('board:move_item', args=[board.id]), [1])

        assert response.status_code == 400
        assert response.json()['success'] is False

    def test_assign_with_list_body(self, member_client, board, task):
        response = post_json(member_client, reverse('board:assign_item', args=[board.id]), [task.id])

        assert response.status_code == 400

    def test_assign(self, member_client, board, task, member):
        url = reverse('board:assign_item', args=[board.id])

        response = post_json(member_client, url,
                             {'item_type': 'task', 'task_id': task.id, 'assignee': str(member.uid)})
        assert response.json()['item']['assignedTo'] == str(member.uid)

        response = post_json(member_client, url, {'item_type': 'task', 'task_id': task.id, 'assignee': None})
        assert response.json()['item']['assignedTo'] is None

    def test_assign_outsider(self, member_client, board, task, outsider):
        response = post_json(member_client, reverse('board:assign_item', args=[board.id]),
                             {'item_type': 'task', 'task_id': task.id, 'assignee': str(outsider.uid)})

        assert response.status_code == 400

    def test_board_state(self, member_client, board, task, subtask):
        response = member_client.get(reverse('board:state', args=[board.id]))

        data = response.json()
        assert data['board']['id'] == board.id
        assert data['subtasks'][str(task.id)][0]['title'] == 'Proofread'


class TestMembers:

    def test_invite_json(self, owner_client, board, outsider):
        response = post_json(owner_client, reverse('board:member_invite', args=[board.id]),
                             {'email': outsider.email})

        assert response.status_code == 200
        assert response.json()['message'] == f'Successfully invited {outsider.email} to the board.'
        assert board.is_member(outsider)

    def test_invite_by_member_is_denied(self, member_client, board, outsider):
        response = post_json(member_client, reverse('board:member_invite', args=[board.id]),
                             {'email': outsider.email})

        assert response.status_code == 403
        assert response.json()['error'] == 'You must be the board owner to invite users.'

    def test_invite_form_post(self, owner_client, board, outsider):
        response = owner_client.post(reverse('board:member_invite', args=[board.id]),
                                     {'email': outsider.email})

        assert response.status_code == 302
        assert board.is_member(outsider)

    def test_remove_owner_is_rejected(self, owner_client, board, owner):
        response = owner_client.post(reverse('board:member_remove', args=[board.id, owner.uid]),
                                     HTTP_ACCEPT='application/json')

        assert response.status_code == 400
        assert board.is_member(owner)

    def test_members_list(self, member_client, board, owner):
        response = member_client.get(reverse('board:members', args=[board.id]))

        assert response.json()['owner'] == str(owner.uid)
        assert len(response.json()['members']) == 2


class TestNotificationsApi:

    def test_list_and_mark_read(self, owner_client, board, owner, soon):
        task = task_service.create_task(board, owner, 'Due', due_date=soon)

        data = owner_client.get(reverse('core:notifications')).json()
        assert data['unread_count'] == 1
        assert data['notifications'][0]['id'] == f'task_due_{task.id}'

        owner_client.post(reverse('core:notification_read', args=[f'task_due_{task.id}']))
        assert owner_client.get(reverse('core:notifications')).json()['unread_count'] == 0

    def test_clear(self, owner_client, board, owner, soon):
        task = task_service.create_task(board, owner, 'Due', due_date=soon)

        owner_client.post(reverse('core:notification_clear', args=[f'task_due_{task.id}']))
        assert owner_client.get(reverse('core:notifications')).json()['notifications'] == []

    def test_read_all(self, owner_client, board, owner, soon):
        task_service.create_task(board, owner, 'A', due_date=soon)
        task_service.create_task(board, owner, 'B', due_date=soon)

        owner_client.post(reverse('core:notifications_read_all'))
        assert owner_client.get(reverse('core:notifications')).json()['unread_count'] == 0
