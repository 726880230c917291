"""Supabase Storage adapter for generated images."""

from dataclasses import dataclass

from supabase import Client

from adcraft.services.generation import ImageStore


@dataclass
class SupabaseImageStore(ImageStore):
    """Stores images in a public Supabase Storage bucket."""

    client: Client
    bucket: str = "generations"

    def upload(self, filename: str, data: bytes, content_type: str) -> str:
        """Upload bytes and return the object's public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(filename, data, {"content-type": content_type})
        return _normalize_public_url(bucket.get_public_url(filename))

    def remove(self, filenames: list[str]) -> None:
        """Delete objects from the bucket."""
        self.client.storage.from_(self.bucket).remove(filenames)


def _normalize_public_url(raw: object) -> str:
    """Return the public URL regardless of the client version's response shape."""
    if isinstance(raw, dict):
        data = raw.get("data", raw)
        raw = data.get("publicUrl") or data.get("publicURL")
    if not isinstance(raw, str) or not raw:
        raise RuntimeError("Storage returned no public URL")
    return raw.rstrip("?")
