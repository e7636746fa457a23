"""Error kinds surfaced to HTTP clients.

Every error carries the status code and the short ``error`` string used in
the ``{error, details, success: false}`` response body; ``details`` is the
exception message.
"""


class TraderError(Exception):
    status_code = 500
    error = 'Internal server error'

    def __init__(self, details='', error=None):
        super().__init__(details)
        if error:
            self.error = error

    def to_dict(self):
        return {'error': self.error, 'details': str(self), 'success': False}


class ValidationError(TraderError):
    """Malformed or missing input to a mutating operation."""
    status_code = 400
    error = 'Invalid request'


class AuthenticationError(TraderError):
    status_code = 401
    error = 'Unauthorized'


class NotFound(TraderError):
    status_code = 404
    error = 'Not found'


class StoreUnavailable(TraderError):
    """The backing store could not be reached or a query failed."""
    status_code = 503
    error = 'Store unavailable'
