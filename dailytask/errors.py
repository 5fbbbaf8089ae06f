"""Error types raised by the stores and routes.

Every error carries the HTTP status it maps to. The app registers a single
handler for :class:`AppError` that renders ``{"error": ...}`` bodies.
"""


class AppError(Exception):
    status_code = 500
    public_message = "Server error"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details


class ValidationFailure(AppError):
    status_code = 400
    public_message = "Invalid request"


class Unauthorized(AppError):
    status_code = 401
    public_message = "Authentication required"


class NotFound(AppError):
    status_code = 400
    public_message = "Not found"


class DuplicateEmail(AppError):
    status_code = 400
    public_message = "User already exists"


class PersistenceFailure(AppError):
    status_code = 500


class DeliveryFailure(AppError):
    status_code = 500
