"""Domain models for authentication."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """Identity returned by the auth provider."""

    id: UUID
    email: str | None


@dataclass(frozen=True)
class AuthSession:
    """Token pair issued by the auth provider."""

    access_token: str
    refresh_token: str
    expires_in: int | None
    user: AuthUser | None = None
