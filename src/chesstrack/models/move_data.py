"""Per-game move and clock data derived from PGN text."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class DerivedMoveData(BaseModel):
    """Moves, clocks, and timing derived from a game's move text.

    ``moves``, ``clocks`` and ``time_spent`` are parallel sequences. They are
    empty when the move text carries no clock annotations; ``ply_count`` is
    counted independently and may still be positive in that case.
    """

    model_config = ConfigDict(frozen=True)

    moves: tuple[str, ...] = ()
    clocks: tuple[float, ...] = ()
    time_spent: tuple[float, ...] = ()
    ply_count: int = 0
    moves_count: int = 0
    eco: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration_seconds: float | None = None
