"""Session cookie helpers."""

from dataclasses import dataclass

from starlette.responses import Response

from adcraft.domain.auth import AuthSession

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"
DEFAULT_ACCESS_MAX_AGE_SECONDS = 60 * 60
REFRESH_MAX_AGE_SECONDS = 30 * 24 * 60 * 60


@dataclass(frozen=True)
class SessionCookieCodec:
    """Writes and clears the access/refresh cookie pair with one policy."""

    secure: bool
    samesite: str = "none"
    path: str = "/"

    def cookie_options(self) -> dict[str, object]:
        """Return the attribute set shared by every session cookie."""
        return {
            "httponly": True,
            "secure": self.secure,
            "samesite": self.samesite,
            "path": self.path,
        }

    def set_access_cookie(
        self, response: Response, token: str, expires_in: int | None = None
    ) -> None:
        """Set the short-lived access cookie."""
        max_age = expires_in if expires_in else DEFAULT_ACCESS_MAX_AGE_SECONDS
        response.set_cookie(
            ACCESS_TOKEN_COOKIE, token, max_age=max_age, **self.cookie_options()
        )

    def set_refresh_cookie(self, response: Response, token: str) -> None:
        """Set the long-lived refresh cookie."""
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            token,
            max_age=REFRESH_MAX_AGE_SECONDS,
            **self.cookie_options(),
        )

    def apply_session(self, response: Response, session: AuthSession) -> None:
        """Set both cookies from a provider session."""
        self.set_access_cookie(response, session.access_token, session.expires_in)
        self.set_refresh_cookie(response, session.refresh_token)

    def clear_both(self, response: Response) -> None:
        """Expire both cookies using the attributes they were created with."""
        for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
            response.delete_cookie(name, **self.cookie_options())
