"""Models for games received from the Chess.com archive API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RawPlayer(BaseModel):
    """One side of a raw archive game.

    Attributes:
        username: Account name as reported by the API.
        rating: Rating after the game.
        result: Per-side result code (``win``, ``checkmated``, ``agreed``...).
        profile: Player profile URL (the API's ``@id``).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    username: str | None = None
    rating: int | None = None
    result: str | None = None
    profile: str | None = Field(default=None, alias="@id")
    uuid: str | None = None


class RawGame(BaseModel):
    """A game record exactly as served by a monthly archive.

    Example:
        >>> RawGame.model_validate({"url": "https://www.chess.com/game/live/1", "end_time": 1})
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: str = ""
    end_time: int | None = None
    pgn: str | None = None
    time_control: str | None = None
    time_class: str | None = None
    rules: str | None = "chess"
    rated: bool | None = None
    start_time: int | None = None
    eco: str | None = None
    tournament: str | None = None
    match: str | None = None
    uuid: str | None = None
    accuracies: dict[str, float] | None = None
    white: RawPlayer | None = None
    black: RawPlayer | None = None

    @property
    def game_id(self) -> str:
        return game_id_from_url(self.url)


def game_id_from_url(url: str | None) -> str:
    """Return the trailing path segment of a game URL."""
    if not url:
        return ""
    return url.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0]
