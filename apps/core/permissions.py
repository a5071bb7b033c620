# apps/core/permissions.py

from functools import wraps

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect

from .exceptions import NotFound, PermissionDenied, Unauthenticated


class BoardPermissions:
    """
    Access rules for boards

    Members can read a board and work on its tasks; only the owner can
    change board settings and its member list.
    """

    @staticmethod
    def has_board_access(user, board):
        """Checks whether the user is a member of the board"""
        return board.is_member(user)

    @staticmethod
    def is_board_owner(user, board):
        """Checks whether the user owns the board"""
        return board.is_owner(user)

    @staticmethod
    def check_access(user, board):
        """Raises unless the user is a board member"""
        if not user.is_authenticated:
            raise Unauthenticated()
        if not board.is_member(user):
            raise PermissionDenied("You don't have access to this board.")

    @staticmethod
    def check_owner(user, board, message=None):
        """Raises unless the user owns the board"""
        if not user.is_authenticated:
            raise Unauthenticated()
        if not board.is_owner(user):
            raise PermissionDenied(message or 'Only the board owner can do that.')


# View decorators

def require_board_access(view_func):
    """
    Checks board membership before running the view

    Expects the view to receive board_id; the board is attached to
    request.board.
    """

    @wraps(view_func)
    def wrapped_view(request, board_id, *args, **kwargs):
        from .models import Board

        try:
            board = Board.objects.select_related('owner').get(id=board_id)
        except Board.DoesNotExist:
            messages.error(request, 'Board not found.')
            return redirect('core:dashboard')

        if not BoardPermissions.has_board_access(request.user, board):
            messages.error(request, "Board not found or you don't have access.")
            return redirect('core:dashboard')

        request.board = board
        return view_func(request, board_id, *args, **kwargs)

    return wrapped_view


def require_board_owner(view_func):
    """Like require_board_access, but only lets the owner through"""

    @wraps(view_func)
    @require_board_access
    def wrapped_view(request, board_id, *args, **kwargs):
        if not BoardPermissions.is_board_owner(request.user, request.board):
            messages.error(request, 'Only the board owner can do that.')
            return redirect('board:detail', board_id=board_id)
        return view_func(request, board_id, *args, **kwargs)

    return wrapped_view


def ajax_require_board_access(view_func):
    """
    Board membership check for AJAX/HTMX views

    Answers with a JSON error instead of redirecting.
    """

    @wraps(view_func)
    def wrapped_view(request, board_id, *args, **kwargs):
        from .models import Board

        try:
            board = Board.objects.select_related('owner').get(id=board_id)
            BoardPermissions.check_access(request.user, board)
        except Board.DoesNotExist:
            error = NotFound('Board not found.')
            return JsonResponse(error.as_dict(), status=error.status_code)
        except (Unauthenticated, PermissionDenied) as error:
            return JsonResponse(error.as_dict(), status=error.status_code)

        request.board = board
        return view_func(request, board_id, *args, **kwargs)

    return wrapped_view
