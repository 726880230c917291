"""Supabase-backed generation repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from adcraft.domain.generations import GenerationRecord
from adcraft.services.generation import GenerationRepository

_COLUMNS = "id, user_id, original_prompt, enhanced_prompt, image_url, created_at"


@dataclass
class SupabaseGenerationRepository(GenerationRepository):
    """Supabase implementation for generation persistence."""

    client: Client
    table_name: str = "generations"

    def insert(self, record: GenerationRecord) -> None:
        """Insert a generation row."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "id": str(record.id),
                    "user_id": str(record.user_id) if record.user_id else None,
                    "original_prompt": record.original_prompt,
                    "enhanced_prompt": record.enhanced_prompt,
                    "image_url": record.image_url,
                    "created_at": record.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create generation")

    def get(self, generation_id: UUID) -> GenerationRecord | None:
        """Return a generation by id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", str(generation_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_record(response.data[0])

    def list_for_user(self, user_id: UUID) -> list[GenerationRecord]:
        """Return a user's generations, newest first."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_row_to_record(row) for row in response.data or []]

    def delete(self, generation_id: UUID) -> None:
        """Delete a generation row."""
        self.client.table(self.table_name).delete().eq(
            "id", str(generation_id)
        ).execute()


def _row_to_record(row: dict[str, object]) -> GenerationRecord:
    return GenerationRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])) if row.get("user_id") else None,
        original_prompt=row.get("original_prompt"),
        enhanced_prompt=row.get("enhanced_prompt"),
        image_url=str(row["image_url"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
