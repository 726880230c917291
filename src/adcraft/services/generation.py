"""Image generation pipeline and generation history."""

import base64
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from adcraft.domain.auth import AuthUser
from adcraft.domain.generations import GenerationRecord
from adcraft.errors import Forbidden, NotFound, ServerError, ValidationError

_logger = logging.getLogger(__name__)

ENHANCEMENT_SUFFIX = ", cinematic luxury ad, glossy lighting, soft shadows"
PLACEHOLDER_PNG_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8Xw8AAnUB9nVxS6cAAAAASUVORK5CYII="
)
PLACEHOLDER_IMAGE_URL = f"data:image/png;base64,{PLACEHOLDER_PNG_B64}"
SAVE_SKIPPED_MESSAGE = "Persistence not configured; skipping save."


class GenerationClient(Protocol):
    """Interface for text enhancement and image generation."""

    async def enhance_prompt(self, prompt: str) -> str:
        """Return a more detailed version of the prompt."""

    async def generate_image(self, prompt: str) -> bytes:
        """Return PNG bytes generated from the prompt."""


class ImageStore(Protocol):
    """Interface for binary object storage."""

    def upload(self, filename: str, data: bytes, content_type: str) -> str:
        """Store bytes under filename and return a public URL."""

    def remove(self, filenames: list[str]) -> None:
        """Delete stored objects."""


class GenerationRepository(Protocol):
    """Persistence interface for generation records."""

    def insert(self, record: GenerationRecord) -> None:
        """Persist a new generation record."""

    def get(self, generation_id: UUID) -> GenerationRecord | None:
        """Return a generation by id, if present."""

    def list_for_user(self, user_id: UUID) -> list[GenerationRecord]:
        """Return a user's generations, newest first."""

    def delete(self, generation_id: UUID) -> None:
        """Delete a generation row."""


@dataclass
class GenerationService:
    """Runs the enhance → generate → upload → persist chain.

    Each external step degrades instead of failing: enhancement falls back to
    a templated suffix, generation to a placeholder image, upload to an inline
    data URI, and persistence failures are logged. Any collaborator may be
    ``None`` when it is not configured.
    """

    client: GenerationClient | None
    image_store: ImageStore | None
    repository: GenerationRepository | None

    async def enhance(self, prompt: str) -> str:
        """Return an enhanced prompt, falling back to a fixed template."""
        if not prompt:
            raise ValidationError("Prompt required")
        if self.client is not None:
            try:
                enhanced = await self.client.enhance_prompt(prompt)
            except Exception as exc:
                _logger.warning("Prompt enhancement failed, using template: %s", exc)
            else:
                if enhanced:
                    return enhanced
        return f"{prompt}{ENHANCEMENT_SUFFIX}"

    async def generate(
        self,
        prompt: str,
        enhanced_prompt: str | None = None,
        user: AuthUser | None = None,
    ) -> str:
        """Generate, store and record an image. Returns the image reference."""
        if not prompt:
            raise ValidationError("Prompt required")

        image_bytes = await self._generate_image(prompt)
        if image_bytes is None:
            image_url = PLACEHOLDER_IMAGE_URL
        else:
            image_url = self._store_image(image_bytes, user)

        record = GenerationRecord(
            id=uuid4(),
            user_id=user.id if user else None,
            original_prompt=prompt,
            enhanced_prompt=enhanced_prompt or None,
            image_url=image_url,
            created_at=datetime.now(tz=UTC),
        )
        if self.repository is None:
            _logger.warning("Persistence not configured; generation not recorded")
        else:
            try:
                self.repository.insert(record)
            except Exception:
                _logger.exception(
                    "Failed to save generation", extra={"generation_id": record.id}
                )
        return image_url

    def save(
        self,
        user: AuthUser,
        image_url: str | None,
        prompt: str | None = None,
        enhanced_prompt: str | None = None,
    ) -> str:
        """Record an image generated elsewhere. Returns a status message."""
        if not image_url:
            raise ValidationError("imageUrl required")
        if self.repository is None:
            return SAVE_SKIPPED_MESSAGE
        record = GenerationRecord(
            id=uuid4(),
            user_id=user.id,
            original_prompt=prompt or None,
            enhanced_prompt=enhanced_prompt or None,
            image_url=image_url,
            created_at=datetime.now(tz=UTC),
        )
        try:
            self.repository.insert(record)
        except Exception as exc:
            _logger.exception("Failed to save generation", extra={"user_id": user.id})
            raise ServerError("Failed to save generation") from exc
        return "Saved"

    def list_generations(self, user: AuthUser) -> list[GenerationRecord]:
        """Return the user's generations, newest first."""
        if self.repository is None:
            return []
        try:
            records = self.repository.list_for_user(user.id)
        except Exception as exc:
            _logger.exception("Failed to fetch generations", extra={"user_id": user.id})
            raise ServerError("Failed to fetch generations") from exc
        return sorted(records, key=lambda record: record.created_at, reverse=True)

    def delete_generation(self, user: AuthUser, generation_id: UUID) -> None:
        """Delete an owned generation and its stored image."""
        record = self.repository.get(generation_id) if self.repository else None
        if record is None:
            raise NotFound("Generation not found")
        if record.user_id != user.id:
            raise Forbidden("Forbidden")

        filename = _stored_filename(record.image_url)
        # Saved records may carry any URL; only the owner's uploads are removed.
        if filename and not filename.startswith(f"{user.id}-"):
            _logger.info("Skipping removal of foreign object %s", filename)
            filename = None
        if filename and self.image_store is not None:
            try:
                self.image_store.remove([filename])
            except Exception:
                _logger.exception(
                    "Failed to remove stored image", extra={"object_name": filename}
                )

        try:
            self.repository.delete(generation_id)
        except Exception as exc:
            _logger.exception(
                "Failed to delete generation", extra={"generation_id": generation_id}
            )
            raise ServerError("Failed to delete generation") from exc

    async def _generate_image(self, prompt: str) -> bytes | None:
        if self.client is None:
            _logger.warning("Image generation not configured, using placeholder")
            return None
        try:
            image_bytes = await self.client.generate_image(prompt)
        except Exception as exc:
            _logger.warning("Image generation failed, using placeholder: %s", exc)
            return None
        return image_bytes or None

    def _store_image(self, image_bytes: bytes, user: AuthUser | None) -> str:
        filename = f"{user.id if user else 'guest'}-{uuid4()}.png"
        if self.image_store is not None:
            try:
                return self.image_store.upload(filename, image_bytes, "image/png")
            except Exception:
                _logger.exception(
                    "Image upload failed, returning inline data",
                    extra={"object_name": filename},
                )
        return _to_data_url(image_bytes)


def _to_data_url(image_bytes: bytes) -> str:
    """Encode PNG bytes as a data URL."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


def _stored_filename(image_url: str | None) -> str | None:
    """Return the object name at the end of a stored image URL."""
    if not image_url or image_url.startswith("data:"):
        return None
    path = image_url.split("?", 1)[0].rstrip("/")
    filename = path.rsplit("/", 1)[-1]
    return filename or None
