# errors.py


class AppError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid data"


class UniquenessConflict(AppError):
    status_code = 400
    default_message = "Username or email already exists"


class AuthRequired(AppError):
    status_code = 401
    default_message = "Authentication required"


class AuthInvalid(AppError):
    status_code = 403
    default_message = "Invalid authentication token"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class StoreFailure(AppError):
    # message never carries database internals
    status_code = 500
    default_message = "Internal server error"
