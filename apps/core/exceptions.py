# apps/core/exceptions.py

"""
Domain errors raised by the board/task/member services

Each error carries a short code and the HTTP status views answer with.
Views catch ``BoardActionError`` per operation and show the message to the
user as a toast.
"""


class BoardActionError(Exception):
    code = 'internal'
    status_code = 500
    default_message = 'An unexpected error occurred. Please try again.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {'success': False, 'error': self.message, 'code': self.code}


class Unauthenticated(BoardActionError):
    code = 'unauthenticated'
    status_code = 401
    default_message = 'You must be logged in.'


class InvalidArgument(BoardActionError):
    code = 'invalid-argument'
    status_code = 400
    default_message = 'Invalid parameters.'


class NotFound(BoardActionError):
    code = 'not-found'
    status_code = 404
    default_message = 'Not found.'


class PermissionDenied(BoardActionError):
    code = 'permission-denied'
    status_code = 403
    default_message = "You don't have permission to do that."


class AlreadyExists(BoardActionError):
    code = 'already-exists'
    status_code = 409
    default_message = 'Already exists.'


class FailedPrecondition(BoardActionError):
    code = 'failed-precondition'
    status_code = 409
    default_message = 'The operation cannot be performed right now.'
