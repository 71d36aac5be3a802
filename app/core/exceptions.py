"""Custom exceptions for the Postboard API.

These exceptions provide structured error handling that:
- Separates internal details from user-facing messages
- Carries the HTTP status the request boundary responds with
- Maintains security by not leaking account or implementation details
"""

from typing import Optional


class PostboardError(Exception):
    """Base exception for application errors."""

    status_code: int = 500
    default_user_message: str = "An error occurred while processing your request."

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        """
        Initialize application error.

        Args:
            message: Internal error message for logging/debugging
            user_message: Safe message to show to users (defaults to generic message)
            status_code: Override for the class-level HTTP status
        """
        super().__init__(message)
        self.user_message = user_message or self.default_user_message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PostboardError):
    """Missing or malformed request field."""

    status_code = 422
    default_user_message = "All fields are required."


class ConflictError(PostboardError):
    """Uniqueness violation, e.g. an email already in use."""

    status_code = 409
    default_user_message = "Resource already exists."


class AuthError(PostboardError):
    """Missing, invalid or expired token, or wrong credentials."""

    status_code = 403
    default_user_message = "Invalid token."


class NotFoundError(PostboardError):
    """Unknown resource."""

    status_code = 404
    default_user_message = "Not found."


class UpstreamError(PostboardError):
    """The external service failed; its message is passed through."""

    status_code = 500

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message, user_message or message)


class StoreError(PostboardError):
    """Unexpected persistence failure."""

    status_code = 500
    default_user_message = "Unable to complete the request. Please try again."
