"""Authentication endpoints backed by session cookies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from adcraft.api.models import CredentialsRequest  # noqa: TC001
from adcraft.services.cookies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE

if TYPE_CHECKING:
    from adcraft.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: CredentialsRequest, request: Request) -> dict[str, object]:
    """Create an account."""
    container: AppContainer = request.app.state.container
    user = await container.auth_manager.signup(body.email, body.password)
    return {"message": "Signup successful", "user": user}


@router.post("/login")
async def login(
    body: CredentialsRequest, request: Request, response: Response
) -> dict[str, str]:
    """Sign in; tokens are only returned as cookies."""
    container: AppContainer = request.app.state.container
    await container.auth_manager.login(body.email, body.password, response)
    return {"message": "Login successful"}


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: Request) -> Response:
    """Clear the session cookies."""
    container: AppContainer = request.app.state.container
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    container.auth_manager.logout(response)
    return response


@router.get("/me")
async def me(request: Request, response: Response) -> dict[str, object]:
    """Return the current user, refreshing the session when needed."""
    container: AppContainer = request.app.state.container
    user = await container.auth_manager.resolve_identity(
        request.cookies.get(ACCESS_TOKEN_COOKIE),
        request.cookies.get(REFRESH_TOKEN_COOKIE),
        response,
    )
    return {"user": user}
