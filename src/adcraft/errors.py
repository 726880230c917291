"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to and a message that is safe to
show to API clients. The API layer renders them as ``{"error": message}``.
"""


class AppError(Exception):
    """Base application error."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """User input is malformed."""

    status_code = 400
    default_message = "Invalid request"


class Unauthenticated(AppError):
    """Credentials are missing or no longer accepted."""

    status_code = 401
    default_message = "Not authenticated"

    def __init__(
        self, message: str | None = None, *, clear_session: bool = False
    ) -> None:
        super().__init__(message)
        self.clear_session = clear_session


class Forbidden(AppError):
    """Authenticated, but not the owner of the resource."""

    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    """Referenced record does not exist."""

    status_code = 404
    default_message = "Not found"


class UpstreamProviderError(AppError):
    """An external provider failed and there is no fallback."""

    status_code = 502
    default_message = "Upstream provider error"


class AuthProviderError(AppError):
    """The identity provider rejected the request."""

    status_code = 400
    default_message = "Authentication request rejected"

    def __init__(
        self, message: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        if status_code:
            self.status_code = status_code


class AuthProviderUnavailable(UpstreamProviderError):
    """The identity provider could not be reached."""

    default_message = "Authentication service unavailable"


class ServerError(AppError):
    """Unexpected or unclassified failure."""
