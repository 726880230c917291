"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from adcraft.adapters.openai_generation_client import OpenAIGenerationClient
from adcraft.adapters.supabase_auth_client import HttpxSupabaseAuthClient
from adcraft.adapters.supabase_generation_repository import (
    SupabaseGenerationRepository,
)
from adcraft.adapters.supabase_image_store import SupabaseImageStore
from adcraft.config import Settings
from adcraft.services.auth import AuthSessionManager
from adcraft.services.cookies import SessionCookieCodec
from adcraft.services.generation import (
    GenerationRepository,
    GenerationService,
    ImageStore,
)

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cookies: SessionCookieCodec
    auth_manager: AuthSessionManager
    generation_service: GenerationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    cookies = SessionCookieCodec(secure=resolved_settings.is_production)
    auth_client = HttpxSupabaseAuthClient.create(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    auth_manager = AuthSessionManager(
        provider=auth_client,
        cookies=cookies,
        retry_attempts=resolved_settings.auth_retry_attempts,
        retry_delay_seconds=resolved_settings.auth_retry_delay_seconds,
    )

    repository: GenerationRepository | None = None
    image_store: ImageStore | None = None
    if resolved_settings.persistence_configured:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        repository = SupabaseGenerationRepository(supabase_client)
        image_store = SupabaseImageStore(
            supabase_client, bucket=resolved_settings.supabase_bucket
        )
    else:
        _logger.warning("SUPABASE_SERVICE_KEY missing; generations are not stored")

    generation_client: OpenAIGenerationClient | None = None
    if resolved_settings.openai_api_key:
        generation_client = OpenAIGenerationClient.create(
            api_key=resolved_settings.openai_api_key,
            text_model=resolved_settings.openai_text_model,
            image_model=resolved_settings.openai_image_model,
            image_size=resolved_settings.openai_image_size,
        )
    else:
        _logger.warning("OPENAI_API_KEY missing; using fallback prompts and images")

    generation_service = GenerationService(
        client=generation_client,
        image_store=image_store,
        repository=repository,
    )

    async def close_resources() -> None:
        await auth_client.close()
        if generation_client is not None:
            await generation_client.close()

    return AppContainer(
        settings=resolved_settings,
        cookies=cookies,
        auth_manager=auth_manager,
        generation_service=generation_service,
        close_resources=close_resources,
    )
