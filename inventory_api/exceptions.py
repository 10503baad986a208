from typing import Optional


class ApiError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ApiError):
    """Missing or invalid request fields."""
    status_code = 400


class UnauthorizedError(ApiError):
    """Missing, invalid or expired credentials."""
    status_code = 401


class NotFoundError(ApiError):
    """Raised when a row is missing or belongs to another user."""
    status_code = 404


class ConflictError(ApiError):
    """Duplicate primary key."""
    status_code = 409


class EmailAlreadyRegisteredError(ConflictError):
    # Registration has always answered duplicates with 400
    status_code = 400

    def __init__(self):
        super().__init__("User already exists")


class PayloadTooLargeError(ApiError):
    status_code = 413
