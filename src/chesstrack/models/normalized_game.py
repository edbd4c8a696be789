"""Player-centric view of a single game."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

Color = Literal["white", "black"]
Outcome = Literal["win", "loss", "draw"]


class NormalizedGame(BaseModel):
    """A raw game seen from the perspective of the tracked account.

    ``result`` is the canonical ``1-0``/``0-1``/``1/2-1/2`` string or ``None``
    while undetermined. ``did_i_win`` is ``None`` for draws and result codes
    that do not decide the question.
    """

    model_config = ConfigDict(frozen=True)

    game_id: str
    url: str = ""

    my_username: str
    my_rating: int | None = None
    my_result: str | None = None
    my_accuracy: float | None = None
    my_profile: str | None = None

    opp_username: str
    opp_rating: int | None = None
    opp_result: str | None = None
    opp_accuracy: float | None = None
    opp_profile: str | None = None

    time_control: str | None = None
    time_class: str | None = None
    rules: str | None = None
    rated: bool | None = None
    eco_url: str | None = None
    tournament: str | None = None
    match: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    result: str | None = None
    played_as: Color
    did_i_win: bool | None = None
    outcome: Outcome | None = None
    termination: str | None = None
    format: str

    pgn: str | None = None

    @property
    def end_timestamp(self) -> int | None:
        if self.end_time is None:
            return None
        return int(self.end_time.timestamp())
