# apps/core/views.py

import json
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_http_methods, require_POST

from .board_service import board_service
from .exceptions import BoardActionError, InvalidArgument
from .forms import BoardForm, BoardStatusForm, MyTasksFilterForm, ProfileForm, STATUS_COLOR_CHOICES
from .models import DEFAULT_STATUSES, User
from .notification_service import notification_service
from .permissions import require_board_owner
from .responses import error_response, success_response
from .task_service import task_service

logger = logging.getLogger(__name__)


@login_required
def dashboard(request):
    """
    Boards the user is a member of, with summary figures
    """
    boards = list(board_service.boards_for_user(request.user))
    stats = board_service.dashboard_stats(request.user, boards)

    context = {
        'title': 'Dashboard',
        'boards': boards,
        'stats': stats,
    }

    return render(request, 'core/dashboard.html', context)


def _statuses_from_post(request):
    """
    Column definitions posted by the board creation form

    Returns None when the form posted none, so the defaults apply.
    """
    names = request.POST.getlist('status_name')
    colors = request.POST.getlist('status_color')
    keys = request.POST.getlist('status_key')
    if not names:
        return None

    statuses = []
    for idx, name in enumerate(names):
        if not name.strip():
            continue
        statuses.append({
            'key': keys[idx] if idx < len(keys) and keys[idx] else None,
            'name': name,
            'color': colors[idx] if idx < len(colors) else None,
            'order': idx + 1,
        })
    return statuses or None


@login_required
@require_http_methods(['GET', 'POST'])
def board_create(request):
    """
    Create a board; starts with the default columns, editable before saving
    """
    form = BoardForm()

    if request.method == 'POST':
        form = BoardForm(request.POST)

        if form.is_valid():
            try:
                board = board_service.create_board(
                    request.user,
                    form.cleaned_data['name'],
                    form.cleaned_data['description'],
                    statuses=_statuses_from_post(request),
                )
                messages.success(request, f'Board "{board.name}" created!')
                return redirect('board:detail', board_id=board.id)

            except BoardActionError as e:
                messages.error(request, e.message)

    context = {
        'title': 'Create Board',
        'form': form,
        'statuses': DEFAULT_STATUSES,
        'color_choices': STATUS_COLOR_CHOICES,
    }

    return render(request, 'core/board_form.html', context)


@login_required
@require_board_owner
@require_http_methods(['GET', 'POST'])
def board_edit(request, board_id):
    """
    Board settings: name, description and custom statuses
    """
    board = request.board
    form = BoardForm(instance=board)

    if request.method == 'POST':
        form = BoardForm(request.POST, instance=board)

        if form.is_valid():
            try:
                board_service.update_board(
                    board, request.user,
                    form.cleaned_data['name'],
                    form.cleaned_data['description'],
                )
                messages.success(request, 'Board updated successfully!')
                return redirect('board:detail', board_id=board.id)

            except BoardActionError as e:
                messages.error(request, e.message)

    context = {
        'title': f'Edit {board.name}',
        'board': board,
        'form': form,
        'status_form': BoardStatusForm(),
        'statuses': board.get_statuses(),
        'color_choices': STATUS_COLOR_CHOICES,
    }

    return render(request, 'core/board_edit.html', context)


@login_required
@require_POST
@require_board_owner
def board_delete(request, board_id):
    board = request.board
    name = board.name

    try:
        board_service.delete_board(board, request.user)
    except BoardActionError as e:
        return error_response(request, e, reverse('core:board_edit', args=[board_id]))

    return success_response(request, f'Board "{name}" deleted.', reverse('core:dashboard'))


# === Statuses ===

@login_required
@require_POST
@require_board_owner
def status_add(request, board_id):
    board = request.board
    edit_url = reverse('core:board_edit', args=[board_id])
    form = BoardStatusForm(request.POST)

    if not form.is_valid():
        return error_response(request, InvalidArgument('Status name is required.'), edit_url)

    try:
        status = board_service.add_status(
            board, request.user, form.cleaned_data['name'], form.cleaned_data['color']
        )
    except BoardActionError as e:
        return error_response(request, e, edit_url)

    return success_response(request, f'Status "{status.name}" added.', edit_url,
                            data={'status': {'key': status.key, 'name': status.name}})


@login_required
@require_POST
@require_board_owner
def status_update(request, board_id, key):
    board = request.board
    edit_url = reverse('core:board_edit', args=[board_id])
    form = BoardStatusForm(request.POST)

    if not form.is_valid():
        return error_response(request, InvalidArgument('Status name is required.'), edit_url)

    try:
        board_service.update_status(
            board, request.user, key, form.cleaned_data['name'], form.cleaned_data['color']
        )
    except BoardActionError as e:
        return error_response(request, e, edit_url)

    return success_response(request, 'Status updated.', edit_url)


@login_required
@require_POST
@require_board_owner
def status_delete(request, board_id, key):
    edit_url = reverse('core:board_edit', args=[board_id])

    try:
        board_service.delete_status(request.board, request.user, key)
    except BoardActionError as e:
        return error_response(request, e, edit_url)

    return success_response(request, 'Status deleted.', edit_url)


@login_required
@require_POST
@require_board_owner
def status_reorder(request, board_id):
    """Receives {"keys": [...]} in the new column order"""
    try:
        data = json.loads(request.body)
        if not isinstance(data, dict):
            raise InvalidArgument('The request body must be a JSON object.')
        board_service.reorder_statuses(request.board, request.user, data.get('keys') or [])
    except json.JSONDecodeError:
        return JsonResponse(InvalidArgument('Invalid JSON.').as_dict(), status=400)
    except BoardActionError as e:
        return JsonResponse(e.as_dict(), status=e.status_code)

    return JsonResponse({'success': True, 'statuses': request.board.get_statuses()})


# === User pages ===

@login_required
@require_http_methods(['GET', 'POST'])
def profile(request):
    """
    Display name and photo shown to other members
    """
    form = ProfileForm(instance=request.user)

    if request.method == 'POST':
        form = ProfileForm(request.POST, instance=request.user)
        if form.is_valid():
            form.save()
            messages.success(request, 'Profile updated successfully!')
            return redirect('core:profile')
        messages.error(request, 'Please fix the errors below.')

    context = {
        'title': 'My Profile',
        'form': form,
    }

    return render(request, 'core/profile.html', context)


@login_required
def my_tasks(request):
    """
    Tasks and subtasks assigned to the user on every board
    """
    filters = MyTasksFilterForm(request.GET or None)
    status, order = 'all', 'asc'
    if filters.is_valid():
        status = filters.cleaned_data['status'] or 'all'
        order = filters.cleaned_data['order'] or 'asc'

    items = task_service.assigned_items(request.user, status=status, order=order)
    now = timezone.now()
    for entry in items:
        entry['overdue'] = entry['item'].is_overdue(now)

    status_choices = {}
    for board in board_service.boards_for_user(request.user):
        for column in board.get_statuses():
            status_choices.setdefault(column['key'], column['name'])

    context = {
        'title': 'My Tasks',
        'items': items,
        'filters': filters,
        'status': status,
        'order': order,
        'status_choices': sorted(status_choices.items(), key=lambda kv: kv[1]),
    }

    return render(request, 'core/my_tasks.html', context)


# === Notifications API ===

@login_required
def notifications_list(request):
    notifications = notification_service.collect(request.user)

    return JsonResponse({
        'success': True,
        'notifications': [n.to_dict() for n in notifications],
        'unread_count': notification_service.unread_count(notifications),
    })


@login_required
@require_POST
def notification_mark_read(request, notification_id):
    notification_service.mark_read(request.user, notification_id)
    return JsonResponse({'success': True})


@login_required
@require_POST
def notification_mark_all_read(request):
    notification_service.mark_all_read(request.user)
    return JsonResponse({'success': True})


@login_required
@require_POST
def notification_clear(request, notification_id):
    notification_service.clear(request.user, notification_id)
    return JsonResponse({'success': True})


def health_check(request):
    """
    Health check for monitoring
    """
    try:
        User.objects.exists()

        from django.core.cache import cache
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        status = {
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
        }

        return JsonResponse(status)

    except Exception as e:
        logger.error(f"❌ Health check failed: {str(e)}")
        status = {
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
        }

        return JsonResponse(status, status=500)
