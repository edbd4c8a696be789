"""Port for fetching per-game callback details."""

from __future__ import annotations

from typing import Protocol


class CallbackSource(Protocol):
    """Fetch the callback payload of one game (``ChesscomClient`` in production)."""

    def fetch_callback(self, game_id: str, *, daily: bool = False) -> dict:
        """Return the decoded JSON payload for ``game_id``."""
