"""Request authentication dependencies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request

from adcraft.domain.auth import AuthUser  # noqa: TC001
from adcraft.errors import Unauthenticated
from adcraft.services.cookies import ACCESS_TOKEN_COOKIE

if TYPE_CHECKING:
    from adcraft.containers import AppContainer

_logger = logging.getLogger(__name__)


def extract_token(request: Request) -> str | None:
    """Return a bearer token from the Authorization header, else the cookie."""
    header = request.headers.get("Authorization")
    if header:
        scheme, _, token = header.partition(" ")
        token = token.strip()
        if scheme == "Bearer" and token:
            return token
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


async def require_user(request: Request) -> AuthUser:
    """Resolve the caller or reject the request with 401."""
    token = extract_token(request)
    if not token:
        raise Unauthenticated("No token provided")
    container: AppContainer = request.app.state.container
    user = await container.auth_manager.authenticate(token)
    request.state.user = user
    return user


async def optional_user(request: Request) -> AuthUser | None:
    """Resolve the caller when possible; never rejects the request."""
    user = None
    token = extract_token(request)
    if token:
        container: AppContainer = request.app.state.container
        try:
            user = await container.auth_manager.authenticate(token)
        except Exception as exc:
            _logger.warning("Optional auth failed, continuing as guest: %s", exc)
    request.state.user = user
    return user
