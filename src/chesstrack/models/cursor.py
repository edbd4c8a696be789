"""Persisted ingestion progress."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class IngestionCursor(BaseModel):
    """Pointer marking how far ingestion has progressed.

    Attributes:
        last_url: URL of the most recently ingested game.
        last_end_time: End timestamp (epoch seconds) of that game.
        etag: Change-detection token of the archive named by ``etag_archive``.
        etag_archive: Archive URL the token belongs to (the current month when saved).
        full_sync_complete: Whether the initial full sync has finished.
    """

    model_config = ConfigDict(frozen=True)

    last_url: str | None = None
    last_end_time: int | None = None
    etag: str | None = None
    etag_archive: str | None = None
    full_sync_complete: bool = False

    def token_for(self, archive_url: str) -> str | None:
        """Return the stored token when it belongs to ``archive_url``."""
        if self.etag and self.etag_archive == archive_url:
            return self.etag
        return None
