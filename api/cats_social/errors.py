class DomainError(Exception):
    """Base for errors that carry an HTTP status and a user-facing message."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(DomainError):
    status_code = 400


class UnauthenticatedError(DomainError):
    status_code = 401


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    status_code = 409


class InternalError(DomainError):
    status_code = 500
