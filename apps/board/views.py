# apps/board/views.py

import json
import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db.models import Prefetch
from django.http import JsonResponse
from django.shortcuts import render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST

from apps.core.exceptions import BoardActionError, InvalidArgument
from apps.core.forms import InviteMemberForm, SubtaskForm, TaskForm
from apps.core.member_service import member_service
from apps.core.models import Subtask
from apps.core.permissions import BoardPermissions, ajax_require_board_access, require_board_access
from apps.core.responses import error_response, success_response
from apps.core.task_service import task_service
from apps.core.utils import board_snapshot, group_by_status, serialize_subtask, serialize_task

logger = logging.getLogger(__name__)

BOARD_VIEWS = ('board', 'list')


def _form_error(form):
    """First validation message of a bound form, as an InvalidArgument"""
    for field, errors in form.errors.items():
        label = form.fields[field].label if field in form.fields else None
        message = errors[0]
        return InvalidArgument(f'{label}: {message}' if label else message)
    return InvalidArgument()


def _json_body(request):
    try:
        data = json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        raise InvalidArgument('Invalid JSON.')
    if not isinstance(data, dict):
        raise InvalidArgument('The request body must be a JSON object.')
    return data


def _request_data(request):
    """JSON body for fetch() calls, POST data for forms"""
    if 'application/json' in request.headers.get('Content-Type', ''):
        return _json_body(request)
    return request.POST


@login_required
@require_board_access
def detail(request, board_id):
    """
    Main board page

    ``?view=board`` shows the columns, ``?view=list`` a flat task list.
    Live updates arrive over the board WebSocket.
    """
    board = request.board
    view_mode = request.GET.get('view', 'board')
    if view_mode not in BOARD_VIEWS:
        view_mode = 'board'

    tasks = list(
        board.tasks.select_related('owner', 'assigned_to').prefetch_related(
            Prefetch('subtasks', queryset=Subtask.objects.select_related('assigned_to'))
        )
    )
    statuses = board.get_statuses()

    context = {
        'title': board.name,
        'board': board,
        'view_mode': view_mode,
        'statuses': statuses,
        'columns': group_by_status(statuses, tasks),
        'tasks': tasks,
        'members': member_service.list_members(board),
        'is_owner': BoardPermissions.is_board_owner(request.user, board),
        'task_form': TaskForm(board=board),
        'invite_form': InviteMemberForm(),
        'websocket_path': f'/ws/board/{board.id}/',
    }

    return render(request, 'board/board.html', context)


@login_required
@require_board_access
def task_detail(request, board_id, task_id):
    """Task page with its subtasks"""
    board = request.board

    try:
        task = task_service.get_task(board, task_id)
    except BoardActionError as e:
        return error_response(request, e, reverse('board:detail', args=[board_id]))

    subtasks = list(task.subtasks.select_related('owner', 'assigned_to'))
    done, total = task.subtask_progress()

    context = {
        'title': task.title,
        'board': board,
        'task': task,
        'subtasks': subtasks,
        'progress': {'done': done, 'total': total},
        'statuses': board.get_statuses(),
        'task_form': TaskForm(instance=task, board=board),
        'subtask_form': SubtaskForm(board=board),
    }

    return render(request, 'board/task_detail.html', context)


# === Tasks ===

@login_required
@require_POST
@require_board_access
def task_create(request, board_id):
    board = request.board
    board_url = reverse('board:detail', args=[board_id])
    form = TaskForm(request.POST, board=board)

    if not form.is_valid():
        return error_response(request, _form_error(form), board_url)

    try:
        task = task_service.create_task(
            board, request.user,
            title=form.cleaned_data['title'],
            description=form.cleaned_data['description'],
            status=form.cleaned_data['status'],
            due_date=form.cleaned_data['due_date'],
            remark=form.cleaned_data['remark'],
            assigned_to=form.cleaned_data['assigned_to'],
        )
    except BoardActionError as e:
        return error_response(request, e, board_url)

    return success_response(request, f'Task "{task.title}" created.', board_url,
                            data={'task': serialize_task(task)})


@login_required
@require_POST
@require_board_access
def task_update(request, board_id, task_id):
    board = request.board
    board_url = reverse('board:detail', args=[board_id])

    try:
        task = task_service.get_task(board, task_id)
    except BoardActionError as e:
        return error_response(request, e, board_url)

    task_url = reverse('board:task_detail', args=[board_id, task.id])
    form = TaskForm(request.POST, board=board)
    if not form.is_valid():
        return error_response(request, _form_error(form), task_url)

    try:
        task = task_service.update_task(task, request.user, **form.cleaned_data)
    except BoardActionError as e:
        return error_response(request, e, task_url)

    return success_response(request, 'Task updated.', task_url, data={'task': serialize_task(task)})


@login_required
@require_POST
@require_board_access
def task_delete(request, board_id, task_id):
    board_url = reverse('board:detail', args=[board_id])

    try:
        task = task_service.get_task(request.board, task_id)
        task_service.delete_task(task, request.user)
    except BoardActionError as e:
        return error_response(request, e, board_url)

    return success_response(request, 'Task deleted.', board_url)


# === Subtasks ===

@login_required
@require_POST
@require_board_access
def subtask_create(request, board_id, task_id):
    board = request.board

    try:
        task = task_service.get_task(board, task_id)
    except BoardActionError as e:
        return error_response(request, e, reverse('board:detail', args=[board_id]))

    task_url = reverse('board:task_detail', args=[board_id, task.id])
    form = SubtaskForm(request.POST, board=board)
    if not form.is_valid():
        return error_response(request, _form_error(form), task_url)

    try:
        subtask = task_service.create_subtask(task, request.user, **form.cleaned_data)
    except BoardActionError as e:
        return error_response(request, e, task_url)

    return success_response(request, f'Subtask "{subtask.title}" added.', task_url,
                            data={'subtask': serialize_subtask(subtask)})


@login_required
@require_POST
@require_board_access
def subtask_update(request, board_id, task_id, subtask_id):
    board = request.board
    task_url = reverse('board:task_detail', args=[board_id, task_id])

    try:
        task = task_service.get_task(board, task_id)
        subtask = task_service.get_subtask(task, subtask_id)
    except BoardActionError as e:
        return error_response(request, e, reverse('board:detail', args=[board_id]))

    form = SubtaskForm(request.POST, board=board)
    if not form.is_valid():
        return error_response(request, _form_error(form), task_url)

    try:
        subtask = task_service.update_subtask(subtask, request.user, **form.cleaned_data)
    except BoardActionError as e:
        return error_response(request, e, task_url)

    return success_response(request, 'Subtask updated.', task_url,
                            data={'subtask': serialize_subtask(subtask)})


@login_required
@require_POST
@require_board_access
def subtask_delete(request, board_id, task_id, subtask_id):
    task_url = reverse('board:task_detail', args=[board_id, task_id])

    try:
        task = task_service.get_task(request.board, task_id)
        subtask = task_service.get_subtask(task, subtask_id)
        task_service.delete_subtask(subtask, request.user)
    except BoardActionError as e:
        return error_response(request, e, task_url)

    return success_response(request, 'Subtask deleted.', task_url)


# === AJAX: drag and drop / assignment ===

def _item_from_payload(board, data):
    """Resolves the task or subtask a JSON payload points at"""
    item_type = data.get('item_type', 'task')
    task = task_service.get_task(board, data.get('task_id'))

    if item_type == 'task':
        return item_type, task
    if item_type == 'subtask':
        return item_type, task_service.get_subtask(task, data.get('subtask_id'))

    raise InvalidArgument('item_type must be "task" or "subtask".')


@login_required
@require_POST
@ajax_require_board_access
def move_item(request, board_id):
    """
    Moves a task or subtask to another column

    Body: {"item_type": "task"|"subtask", "task_id", "subtask_id"?, "status"}
    """
    try:
        data = _json_body(request)
        status = data.get('status')
        if not status:
            raise InvalidArgument('A target status is required.')

        item_type, item = _item_from_payload(request.board, data)
        if item_type == 'task':
            item = task_service.move_task(item, request.user, status)
            payload = serialize_task(item)
        else:
            item = task_service.move_subtask(item, request.user, status)
            payload = serialize_subtask(item)

    except BoardActionError as e:
        logger.warning(f"⚠️ Move rejected on board {board_id}: {e.message}")
        return JsonResponse(e.as_dict(), status=e.status_code)

    return JsonResponse({'success': True, 'item_type': item_type, 'item': payload})


@login_required
@require_POST
@ajax_require_board_access
def assign_item(request, board_id):
    """
    Sets or clears the assignee of a task or subtask

    Body: {"item_type", "task_id", "subtask_id"?, "assignee": <member uid>|null}
    """
    board = request.board

    try:
        data = _json_body(request)
        item_type, item = _item_from_payload(board, data)

        assignee = None
        if data.get('assignee'):
            assignee = board.members.filter(uid=data['assignee']).first()
            if assignee is None:
                raise InvalidArgument('The assignee must be a member of the board.')

        if item_type == 'task':
            item = task_service.assign_task(item, request.user, assignee)
            payload = serialize_task(item)
        else:
            item = task_service.assign_subtask(item, request.user, assignee)
            payload = serialize_subtask(item)

    except BoardActionError as e:
        return JsonResponse(e.as_dict(), status=e.status_code)
    except ValidationError:
        # malformed uid
        error = InvalidArgument('The assignee must be a member of the board.')
        return JsonResponse(error.as_dict(), status=error.status_code)

    return JsonResponse({'success': True, 'item_type': item_type, 'item': payload})


@login_required
@require_GET
@ajax_require_board_access
def board_state(request, board_id):
    """Full board snapshot, same shape as the WebSocket board_sync"""
    return JsonResponse({'success': True, **board_snapshot(request.board)})


# === Members ===

@login_required
@require_GET
@ajax_require_board_access
def members(request, board_id):
    board = request.board
    return JsonResponse({
        'success': True,
        'owner': str(board.owner.uid),
        'members': member_service.list_members(board),
    })


@login_required
@require_POST
def member_invite(request, board_id):
    """
    Adds a registered user to the board by email (owner only)

    Accepts a form post or a JSON body with an ``email`` key.
    """
    board_url = reverse('board:detail', args=[board_id])

    try:
        data = _request_data(request)
        form = InviteMemberForm(data)
        if not form.is_valid():
            raise _form_error(form)

        message = member_service.invite_member(board_id, request.user, form.cleaned_data['email'])
    except BoardActionError as e:
        return error_response(request, e, board_url)

    return success_response(request, message, board_url)


@login_required
@require_POST
def member_remove(request, board_id, member_uid):
    board_url = reverse('board:detail', args=[board_id])

    try:
        message = member_service.remove_member(board_id, request.user, member_uid)
    except BoardActionError as e:
        return error_response(request, e, board_url)

    return success_response(request, message, board_url)
