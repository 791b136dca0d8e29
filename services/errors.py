# services/errors.py


class ServiceError(Exception):
    """Base class for failures the HTTP layer turns into an error response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ServiceError):
    status_code = 400


class Unauthenticated(ServiceError):
    status_code = 401


class Unauthorized(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404
