from typing import Optional


class AppError(Exception):
    """Base for errors that map onto an HTTP response.

    ``message`` of ``None`` renders as an empty body.
    """

    status_code = 500
    body_key = "error"
    default_message: Optional[str] = None

    def __init__(self, message: Optional[str] = None):
        self.message = message if message is not None else self.default_message
        super().__init__(self.message or self.__class__.__name__)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Invalid username or password"


class TokenMissingError(AuthError):
    default_message = None


class TokenInvalidError(AuthError):
    status_code = 403
    default_message = None


class NotFoundError(AppError):
    status_code = 404
    body_key = "message"
    default_message = "Transaction not found"


class StoreError(AppError):
    """Persistence failure. ``detail`` is for the log only."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__()
