"""Authentication session lifecycle."""

import logging
from dataclasses import dataclass
from typing import Protocol

from starlette.responses import Response

from adcraft.domain.auth import AuthSession, AuthUser
from adcraft.errors import (
    AppError,
    AuthProviderError,
    AuthProviderUnavailable,
    ServerError,
    Unauthenticated,
)
from adcraft.services.cookies import SessionCookieCodec
from adcraft.services.credentials import validate_credentials
from adcraft.services.retry import with_retry

_logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    """Interface for the external identity service.

    Implementations raise ``AuthProviderError`` when the provider rejects a
    request and ``AuthProviderUnavailable`` when it cannot be reached.
    """

    async def sign_up(self, email: str, password: str) -> AuthUser:
        """Register a new user."""

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> AuthSession | None:
        """Exchange credentials for a session, if one is issued."""

    async def get_user(self, access_token: str) -> AuthUser:
        """Return the user owning an access token."""

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""


@dataclass
class AuthSessionManager:
    """Issues and rotates cookie-based sessions."""

    provider: AuthProvider
    cookies: SessionCookieCodec
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0

    async def signup(self, email: str, password: str) -> AuthUser:
        """Create an account. No cookies are issued."""
        validate_credentials(email, password)
        try:
            return await self.provider.sign_up(email, password)
        except AppError:
            raise
        except Exception as exc:
            _logger.exception("Signup failed unexpectedly")
            raise ServerError() from exc

    async def login(self, email: str, password: str, response: Response) -> None:
        """Sign in and set both session cookies on the response."""
        validate_credentials(email, password)
        try:
            session = await self.provider.sign_in_with_password(email, password)
        except AppError:
            raise
        except Exception as exc:
            _logger.exception("Login failed unexpectedly")
            raise ServerError() from exc
        if session is None:
            raise ServerError("No session returned")
        self.cookies.apply_session(response, session)

    def logout(self, response: Response) -> None:
        """Clear both session cookies."""
        self.cookies.clear_both(response)

    async def resolve_identity(
        self,
        access_token: str | None,
        refresh_token: str | None,
        response: Response,
    ) -> AuthUser:
        """Resolve the caller, refreshing the session when the access token fails.

        The access token is always tried first. The refresh token is only used
        when the access token is missing or rejected. A failed refresh raises
        ``Unauthenticated`` flagged to clear the cookie pair.
        """
        if access_token:
            try:
                return await self._lookup_user(access_token)
            except Exception as exc:
                _logger.info("Access token rejected, trying refresh: %s", exc)

        if refresh_token:
            try:
                session = await self.provider.refresh_session(refresh_token)
                user = session.user or await self._lookup_user(session.access_token)
            except Exception as exc:
                _logger.warning("Session refresh failed: %s", exc)
                raise Unauthenticated(
                    "Authentication failed", clear_session=True
                ) from exc
            self.cookies.apply_session(response, session)
            return user

        raise Unauthenticated("Not authenticated")

    async def authenticate(self, access_token: str) -> AuthUser:
        """Return the user for a single access token, without refreshing."""
        try:
            return await self._lookup_user(access_token)
        except AuthProviderError as exc:
            raise Unauthenticated("Invalid token") from exc

    async def _lookup_user(self, access_token: str) -> AuthUser:
        return await with_retry(
            lambda: self.provider.get_user(access_token),
            attempts=self.retry_attempts,
            delay_seconds=self.retry_delay_seconds,
            retry_on=(AuthProviderUnavailable,),
            action="Auth get_user",
        )
