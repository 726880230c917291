"""Domain models for image generations."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class GenerationRecord:
    """Represents a persisted generation."""

    id: UUID
    user_id: UUID | None
    original_prompt: str | None
    enhanced_prompt: str | None
    image_url: str
    created_at: datetime
