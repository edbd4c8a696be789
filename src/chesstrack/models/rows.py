"""Row models for the persisted Games, Derived, Daily, and callback collections."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class GameRow(BaseModel):
    """One row of the Games collection.

    Attributes:
        row_id: Insertion ordinal; preserves store order across rewrites.
        end_date: Calendar date of the game end in the configured timezone.
        end_time_of_day: Wall-clock end time (``HH:MM:SS``) in that timezone.
        end_timestamp: Game end as epoch seconds.
        last_rating: My rating in the most recent earlier game of the same format.
    """

    model_config = ConfigDict(from_attributes=True)

    row_id: int | None = None
    game_id: str
    url: str
    end_date: dt.date
    end_time_of_day: str
    end_timestamp: int
    my_color: str
    opponent: str
    outcome: str | None = None
    termination: str | None = None
    format: str
    my_rating: int | None = None
    opp_rating: int | None = None
    last_rating: int | None = None
    analyzed: bool = False
    callback_fetched: bool = False


class DerivedRow(BaseModel):
    """One row of the Derived collection: every field derived for a game."""

    game_id: str
    url: str
    time_control: str | None = None
    time_control_kind: str | None = None
    base_seconds: int | None = None
    increment_seconds: int | None = None
    correspondence_seconds: int | None = None
    time_class: str | None = None
    rules: str | None = None
    format: str
    rated: bool | None = None
    eco: str | None = None
    eco_url: str | None = None
    tournament: str | None = None
    match: str | None = None
    start_time: dt.datetime | None = None
    end_time: dt.datetime
    result: str | None = None
    played_as: str
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
    moves: list[str] = Field(default_factory=list)
    clocks: list[float] = Field(default_factory=list)
    time_spent: list[float] = Field(default_factory=list)
    ply_count: int = 0
    moves_count: int = 0
    duration_seconds: float | None = None


class DailyStatRow(BaseModel):
    """Aggregates for one calendar date and one format.

    Counts and duration are ``None`` on dates without games in the format;
    ``rating`` then repeats the most recent known value.
    """

    date: dt.date
    format: str
    wins: int | None = None
    losses: int | None = None
    draws: int | None = None
    duration_seconds: float | None = None
    rating: int | None = None


class CallbackRow(BaseModel):
    """Best-effort per-game details from the callback endpoint.

    A reported rating change of exactly 0 is stored as ``None``; the
    endpoint reports 0 when the change is not known.
    """

    game_id: str
    my_rating_change: int | None = None
    opp_rating_change: int | None = None
    my_rating_before: int | None = None
    opp_rating_before: int | None = None
    opp_country: str | None = None
    opp_membership: str | None = None
    fetched_at: dt.datetime
