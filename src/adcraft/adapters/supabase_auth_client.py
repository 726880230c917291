"""Supabase Auth (GoTrue) REST client."""

from dataclasses import dataclass
from uuid import UUID

import httpx

from adcraft.domain.auth import AuthSession, AuthUser
from adcraft.errors import AuthProviderError, AuthProviderUnavailable
from adcraft.services.auth import AuthProvider

_RETRYABLE_STATUS_CODES = {502, 503, 504}


@dataclass
class HttpxSupabaseAuthClient(AuthProvider):
    """Stateless GoTrue client; no session is kept between calls."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 10

    @classmethod
    def create(cls, supabase_url: str, api_key: str) -> "HttpxSupabaseAuthClient":
        """Create an auth client with a managed httpx session."""
        return cls(
            base_url=f"{supabase_url.rstrip('/')}/auth/v1",
            api_key=api_key,
            http_client=httpx.AsyncClient(),
        )

    async def sign_up(self, email: str, password: str) -> AuthUser:
        """Register a user with email and password."""
        data = await self._request(
            "POST", "/signup", json={"email": email, "password": password}
        )
        # With auto-confirm enabled GoTrue answers with a full session.
        user_payload = data.get("user") if "access_token" in data else data
        if not isinstance(user_payload, dict) or "id" not in user_payload:
            raise AuthProviderError("Signup returned no user", status_code=500)
        return _parse_user(user_payload)

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> AuthSession | None:
        """Exchange credentials for a session."""
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return _parse_session(data)

    async def get_user(self, access_token: str) -> AuthUser:
        """Return the user for an access token."""
        data = await self._request("GET", "/user", token=access_token)
        return _parse_user(data)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        session = _parse_session(data)
        if session is None:
            raise AuthProviderError("No session returned", status_code=401)
        return session

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> dict[str, object]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token or self.api_key}",
        }
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise AuthProviderUnavailable() from exc

        if response.status_code in _RETRYABLE_STATUS_CODES:
            raise AuthProviderUnavailable()
        if response.is_error:
            raise AuthProviderError(
                _error_message(response), status_code=response.status_code
            )
        payload = response.json()
        return payload if isinstance(payload, dict) else {}


def _parse_user(payload: dict[str, object]) -> AuthUser:
    email = payload.get("email")
    return AuthUser(
        id=UUID(str(payload["id"])),
        email=str(email) if email else None,
    )


def _parse_session(payload: dict[str, object]) -> AuthSession | None:
    access_token = payload.get("access_token")
    refresh_token = payload.get("refresh_token")
    if not access_token or not refresh_token:
        return None
    expires_in = payload.get("expires_in")
    user_payload = payload.get("user")
    return AuthSession(
        access_token=str(access_token),
        refresh_token=str(refresh_token),
        expires_in=int(expires_in) if isinstance(expires_in, int | float) else None,
        user=_parse_user(user_payload) if isinstance(user_payload, dict) else None,
    )


def _error_message(response: httpx.Response) -> str:
    """Extract GoTrue's error message from whichever field it used."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("msg", "error_description", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Authentication request failed ({response.status_code})"
