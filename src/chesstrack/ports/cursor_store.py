"""Port interface for ingestion cursor persistence."""

from __future__ import annotations

from typing import Protocol

from chesstrack.models.cursor import IngestionCursor


class CursorStore(Protocol):
    """Persist the process-wide ingestion cursor."""

    def read(self) -> IngestionCursor:
        """Return the stored cursor, or an empty cursor when none exists."""

    def write(self, cursor: IngestionCursor) -> None:
        """Replace the stored cursor."""
