"""
Error taxonomy shared by the store, storage and admin API layers.

Each error carries the HTTP status it maps to and a message that is safe
to show to the admin client.
"""


class ShowreelError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(ShowreelError):
    """Raised when a required field is missing or a value is rejected."""

    status_code = 400
    message = 'Invalid request'


class Unauthorized(ShowreelError):
    """Raised when a mutating admin call has no valid session."""

    status_code = 401
    message = 'Unauthorized'


class NotFound(ShowreelError):
    status_code = 404
    message = 'Not found'


class Conflict(ShowreelError):
    """Raised when a slug is already taken by another project."""

    status_code = 409
    message = 'Conflict'


class UpstreamFailure(ShowreelError):
    """Raised when the database or object storage fails.

    The client only ever sees the generic message; the original exception
    is kept on ``cause`` for logging.
    """

    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, cause=None):
        super().__init__(message)
        self.cause = cause


_STATUS_ERRORS = {
    400: ValidationError,
    401: Unauthorized,
    404: NotFound,
    409: Conflict,
}


def error_for_status(status_code, message=None):
    """Map an HTTP error status back onto the taxonomy (client side)."""
    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code](message)
    if 400 <= status_code < 500:
        error = ValidationError(message)
        error.status_code = status_code
        return error
    return UpstreamFailure(message)
