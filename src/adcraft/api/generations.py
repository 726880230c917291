"""Prompt enhancement and image generation endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from adcraft.api.deps import optional_user, require_user
from adcraft.api.models import (  # noqa: TC001
    EnhanceRequest,
    GenerateRequest,
    SaveGenerationRequest,
)
from adcraft.domain.auth import AuthUser  # noqa: TC001

if TYPE_CHECKING:
    from adcraft.containers import AppContainer

router = APIRouter(tags=["generations"])


@router.post("/enhance")
async def enhance(body: EnhanceRequest, request: Request) -> dict[str, str]:
    """Return an enhanced version of the prompt."""
    container: AppContainer = request.app.state.container
    enhanced = await container.generation_service.enhance(body.prompt)
    return {"enhancedPrompt": enhanced}


@router.post("/generate")
async def generate(
    body: GenerateRequest,
    request: Request,
    user: AuthUser | None = Depends(optional_user),
) -> dict[str, str]:
    """Generate an image; guests are allowed."""
    container: AppContainer = request.app.state.container
    image_url = await container.generation_service.generate(
        body.prompt, body.enhanced_prompt, user
    )
    return {"imageUrl": image_url}


@router.post("/generate/save")
async def save_generation(
    body: SaveGenerationRequest,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> dict[str, str]:
    """Record an image that was generated elsewhere."""
    container: AppContainer = request.app.state.container
    message = container.generation_service.save(
        user, body.image_url, body.prompt, body.enhanced_prompt
    )
    return {"message": message}


@router.get("/generate/generations")
async def list_generations(
    request: Request, user: AuthUser = Depends(require_user)
) -> dict[str, object]:
    """Return the caller's generations, newest first."""
    container: AppContainer = request.app.state.container
    return {"generations": container.generation_service.list_generations(user)}


@router.delete("/generate/generations/{generation_id}")
async def delete_generation(
    generation_id: UUID, request: Request, user: AuthUser = Depends(require_user)
) -> dict[str, str]:
    """Delete one of the caller's generations."""
    container: AppContainer = request.app.state.container
    container.generation_service.delete_generation(user, generation_id)
    return {"message": "Deleted"}
