"""Time control parsing helpers."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from chesstrack.utils.to_int import to_int

DAILY_TIME_CLASS = "daily"
_STANDARD_RULES = "chess"
_RULES_SUFFIXES = {
    "chess960": "960",
}


class TimeControlKind(StrEnum):
    LIVE = "live"
    DAILY = "daily"


class TimeControlSpec(BaseModel):
    """Structured time control.

    Live controls carry ``base_seconds`` and ``increment_seconds``; daily
    (correspondence) controls carry ``correspondence_seconds``, the per-move
    budget. The other kind's fields stay ``None``.
    """

    model_config = ConfigDict(frozen=True)

    kind: TimeControlKind
    base_seconds: int | None = None
    increment_seconds: int | None = None
    correspondence_seconds: int | None = None

    @property
    def is_daily(self) -> bool:
        return self.kind == TimeControlKind.DAILY

    def as_str(self) -> str:
        """Return the compact descriptor for this time control."""
        if self.is_daily:
            return f"1/{self.correspondence_seconds if self.correspondence_seconds is not None else ''}"
        if self.increment_seconds:
            return f"{self.base_seconds}+{self.increment_seconds}"
        return str(self.base_seconds if self.base_seconds is not None else "")

    def __str__(self) -> str:
        return self.as_str()


def parse_time_control(descriptor: str | None, time_class: str | None = None) -> TimeControlSpec:
    """Normalize a compact time-control descriptor.

    Rules, in priority order: ``/`` means a daily control whose per-move
    budget follows the slash; ``+`` splits base and increment of a live
    control; a bare integer is a live control without increment.
    Unparseable fragments become ``None`` rather than raising.

    Example:
        >>> parse_time_control("180+2").increment_seconds
        2
    """
    value = (descriptor or "").strip()
    if not value or value == "-":
        return _empty_spec(time_class)
    if "/" in value:
        return _parse_daily(value)
    if "+" in value:
        return _parse_live_with_increment(value)
    return TimeControlSpec(
        kind=TimeControlKind.LIVE,
        base_seconds=to_int(value),
        increment_seconds=0,
    )


def _parse_daily(value: str) -> TimeControlSpec:
    _, budget = value.split("/", 1)
    return TimeControlSpec(
        kind=TimeControlKind.DAILY,
        correspondence_seconds=to_int(budget),
    )


def _parse_live_with_increment(value: str) -> TimeControlSpec:
    base, increment = value.split("+", 1)
    return TimeControlSpec(
        kind=TimeControlKind.LIVE,
        base_seconds=to_int(base),
        increment_seconds=to_int(increment),
    )


def _empty_spec(time_class: str | None) -> TimeControlSpec:
    if (time_class or "").strip().lower() == DAILY_TIME_CLASS:
        return TimeControlSpec(kind=TimeControlKind.DAILY)
    return TimeControlSpec(kind=TimeControlKind.LIVE)


def game_format(time_class: str | None, rules: str | None) -> str:
    """Build the statistics bucket for a game, e.g. ``blitz`` or ``daily960``."""
    time_label = (time_class or "unknown").strip().lower() or "unknown"
    rules_label = (rules or _STANDARD_RULES).strip().lower() or _STANDARD_RULES
    if rules_label == _STANDARD_RULES:
        return time_label
    return f"{time_label}{_RULES_SUFFIXES.get(rules_label, rules_label)}"


__all__ = [
    "TimeControlKind",
    "TimeControlSpec",
    "game_format",
    "parse_time_control",
]
