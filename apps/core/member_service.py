# apps/core/member_service.py

"""
Member service - invitations and removals

Both operations check that the caller is authenticated and owns the board,
then mutate the members list. Known failures raise a BoardActionError with
the matching code; anything else is logged and reported as ``internal``.
"""

import logging
from typing import Dict, List

from django.core.exceptions import ValidationError

from .exceptions import (
    AlreadyExists, BoardActionError, InvalidArgument, NotFound,
    PermissionDenied, Unauthenticated
)
from .models import Board, User
from .utils import serialize_member

logger = logging.getLogger(__name__)


class MembershipService:
    """Board member list management"""

    def invite_member(self, board_id, caller, email: str) -> str:
        """
        Adds the user registered under ``email`` to the board

        Returns:
            success message
        """
        if not caller.is_authenticated:
            raise Unauthenticated('You must be logged in to invite users.')

        email = (email or '').strip()
        if not email or not board_id:
            raise InvalidArgument('Please provide an email and board ID.')

        try:
            board = self._get_board(board_id)
            if board.owner_id != caller.id:
                raise PermissionDenied('You must be the board owner to invite users.')

            invited = User.objects.filter(email__iexact=email, is_active=True).first()
            if invited is None:
                raise NotFound('No user found with this email address.')

            if board.members.filter(id=invited.id).exists():
                raise AlreadyExists('This user is already a member of the board.')

            board.members.add(invited)

        except BoardActionError:
            raise
        except Exception as e:
            logger.error(f"❌ Error inviting user to board {board_id}: {str(e)}")
            raise BoardActionError('An unexpected error occurred. Please try again.')

        logger.info(f"📨 {invited.username} invited to board {board.id} by {caller.username}")
        return f'Successfully invited {email} to the board.'

    def remove_member(self, board_id, caller, member_uid) -> str:
        """
        Removes the member with ``member_uid`` from the board

        The owner can't be removed. Removing a uid that isn't a member is a
        no-op.
        """
        if not caller.is_authenticated:
            raise Unauthenticated('You must be logged in.')

        if not board_id or not member_uid:
            raise InvalidArgument('Board ID and member UID are required.')

        try:
            board = self._get_board(board_id)
            if board.owner_id != caller.id:
                raise PermissionDenied('Only the board owner can remove members.')

            if str(board.owner.uid) == str(member_uid):
                raise InvalidArgument('The board owner cannot be removed.')

            member = self._get_user_by_uid(member_uid)
            if member is not None:
                board.members.remove(member)

        except BoardActionError:
            raise
        except Exception as e:
            logger.error(f"❌ Error removing user from board {board_id}: {str(e)}")
            raise BoardActionError('An unexpected error occurred while removing the member.')

        logger.info(f"👋 Member {member_uid} removed from board {board.id} by {caller.username}")
        return 'Member removed successfully.'

    def list_members(self, board: Board) -> List[Dict]:
        """Denormalized member profiles of the board"""
        return [serialize_member(member) for member in board.members.order_by('username')]

    def _get_board(self, board_id) -> Board:
        try:
            return Board.objects.select_related('owner').get(id=board_id)
        except (Board.DoesNotExist, ValueError, TypeError):
            raise NotFound('Board not found.')

    def _get_user_by_uid(self, uid):
        try:
            return User.objects.filter(uid=uid).first()
        except ValidationError:
            # malformed uuid
            return None


member_service = MembershipService()
