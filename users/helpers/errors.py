class ServiceError(Exception):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    status_code = 400
    default_message = 'Validation failed'


class Unauthorized(ServiceError):
    status_code = 401
    default_message = 'Unauthorized access'


class Forbidden(ServiceError):
    status_code = 403
    default_message = 'Access forbidden'


class NotFound(ServiceError):
    status_code = 404
    default_message = 'Resource not found'


class UpstreamFailure(ServiceError):
    """A dependency (object storage, document store, payment gateway) failed.

    The message is shown to the client as-is, so keep upstream details out of it
    and log them instead.
    """
    status_code = 500
    default_message = 'Upstream service unavailable'
