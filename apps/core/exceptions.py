# apps/core/exceptions.py

"""
Domain errors of Mini Trello.

Each error carries the HTTP status and the short ``error`` label the API
answers with; ``ApiErrorMiddleware`` does the translation. Access decisions
use Django's own ``PermissionDenied`` and ``Http404``.
"""


class MiniTrelloError(Exception):
    """Base class for errors reported to API clients"""

    status_code = 500
    error = 'Server error'
    default_message = 'Internal server error'

    def __init__(self, message=None, error=None, details=None):
        self.message = message or self.default_message
        if error:
            self.error = error
        self.details = details
        super().__init__(self.message)

    def as_dict(self):
        body = {'error': self.error, 'message': self.message}
        if self.details:
            body['details'] = self.details
        return body


class RequestValidationError(MiniTrelloError):
    status_code = 400
    error = 'Validation error'
    default_message = 'Invalid data'


class AuthenticationFailed(MiniTrelloError):
    status_code = 401
    error = 'Authentication required'
    default_message = 'Please sign in to continue'


class NotFoundError(MiniTrelloError):
    status_code = 404
    error = 'Not found'
    default_message = 'Resource not found'


class ConflictError(MiniTrelloError):
    status_code = 409
    error = 'Conflict'
    default_message = 'The request conflicts with the current state'


class InvitationStateError(ConflictError):
    """Raised when an invitation is no longer pending or has expired"""

    error = 'Invalid invitation'
    default_message = 'Invitation is no longer valid'


class EmailDeliveryError(MiniTrelloError):
    error = 'Email service error'
    default_message = 'Could not send the email. Please try again later.'
