"""
Domain error taxonomy.

Services raise these exceptions; the handlers registered in
``main.create_app`` turn them into JSON responses of the form
``{"error": "<message>"}`` with the status code carried by the
exception class.  Messages are safe to show to clients.
"""

from fastapi import status


class AppError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# 400 ----------------------------------------------------------------------

class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidCoordinates(ValidationError):
    default_message = "Invalid latitude, longitude or radius"


class MissingField(ValidationError):
    default_message = "Missing required fields"


class AlreadyVerified(ValidationError):
    default_message = "User already verified"


# 401 ----------------------------------------------------------------------

class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class AuthenticationFailed(AuthenticationError):
    pass


class MissingToken(AuthenticationError):
    default_message = "No token provided"


class InvalidToken(AuthenticationError):
    default_message = "Failed to authenticate token"


class InvalidExternalToken(AuthenticationError):
    default_message = "Invalid Google token"


# 403 ----------------------------------------------------------------------

class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class Forbidden(AuthorizationError):
    pass


# 404 ----------------------------------------------------------------------

class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ParentNotFound(NotFoundError):
    pass


class UserNotFound(NotFoundError):
    default_message = "User not found"


class NotRegistered(NotFoundError):
    default_message = "Participation not found"


# 409 ----------------------------------------------------------------------

class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class DuplicateEmail(ConflictError):
    default_message = "Registration failed, email already exists"


class DuplicateUsername(ConflictError):
    default_message = "Registration failed, username already exists"


class AlreadyRegistered(ConflictError):
    default_message = "Already registered"


class CapacityError(AppError):
    # The handler may replace this with ``settings.capacity_exceeded_status``.
    status_code = status.HTTP_409_CONFLICT
    default_message = "Maximum number of participants reached"


# 5xx ----------------------------------------------------------------------

class UpstreamError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service error"


class ServiceUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"
