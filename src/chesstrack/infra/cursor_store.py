"""File-backed ingestion cursor."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from chesstrack.models.cursor import IngestionCursor
from chesstrack.ports.cursor_store import CursorStore
from chesstrack.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileCursorStore(CursorStore):
    """Store the cursor as a JSON document on disk."""

    path: Path

    def read(self) -> IngestionCursor:
        """Read the cursor from disk.

        Returns:
            The stored cursor, or an empty one when the file is missing or unreadable.
        """

        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return IngestionCursor()
        if not raw:
            return IngestionCursor()
        try:
            return IngestionCursor.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring unreadable cursor file %s: %s", self.path, exc)
            return IngestionCursor()

    def write(self, cursor: IngestionCursor) -> None:
        """Write the cursor, replacing the previous file in one rename.

        Args:
            cursor: Cursor to persist.
        """

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(cursor.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug("Wrote cursor to %s: %s", self.path, cursor)
