"""Application error taxonomy.

Each error carries the HTTP status it renders as; the handlers in
``interfaces.http.errors`` turn them into ``{"message": ...}`` bodies.
"""


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.default_message
        self.code = code
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "All fields are required"


class InvalidStateError(AppError):
    """The resource exists but its lifecycle status forbids the operation."""
    status_code = 400
    default_message = "Resource is not in a state that allows this operation"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not Found"


class InvalidCredentialsError(NotFoundError):
    default_message = "Invalid credentials"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class DependencyFailure(AppError):
    status_code = 500
    default_message = "Server Error"


class MediaUploadError(DependencyFailure):
    default_message = "Failed to upload any media files."
