"""Move, clock, and duration extraction from PGN move text."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import UTC, datetime
from io import StringIO

import chess.pgn

from chesstrack.models.move_data import DerivedMoveData
from chesstrack.utils.logger import get_logger
from chesstrack.utils.to_int import to_float

logger = get_logger(__name__)

MIN_TIME_SPENT_SECONDS = 0.1
# Seconds per clock component, rightmost first: S, M, H, D.
CLOCK_UNITS = (1, 60, 3600, 86400)

_SAN = (
    r"(?:O-O-O|O-O"
    r"|[KQRBN][a-h]?[1-8]?x?[a-h][1-8]"
    r"|[a-h](?:x[a-h])?[1-8](?:=?[QRBN])?)"
    r"[+#]?"
)
SAN_PATTERN = re.compile(rf"(?<![\w=-]){_SAN}(?![\w-])")
MOVE_CLOCK_PATTERN = re.compile(
    rf"(?<![\w=-])(?P<move>{_SAN})(?![\w-])\s*(?:[!?]+\s*)?"
    r"\{[^}]*?\[%clk\s+(?P<clock>[^\]\s]+)\s*\][^}]*\}"
)
HEADER_LINE_RE = re.compile(r"^\s*\[[A-Za-z0-9_]+\s+\"[^\"]*\"\]\s*$", re.MULTILINE)
_COMMENT_RE = re.compile(r"\{[^}]*\}")
_VARIATION_RE = re.compile(r"\([^()]*\)")
_NAG_RE = re.compile(r"\$\d+")
_DATETIME_FORMATS = ("%Y.%m.%d %H:%M:%S", "%Y-%m-%d %H:%M:%S")


def extract_move_data(
    pgn: str | None,
    base_seconds: float | None,
    increment_seconds: float | None,
    *,
    resets_each_move: bool = False,
) -> DerivedMoveData:
    """Derive moves, clock readings, and per-move time spent from PGN text.

    Each ``SAN {[%clk H:MM:SS]}`` pair yields one move. Time spent on a move is
    the same player's previous clock minus this clock plus the increment,
    never below 0.1 seconds. Both players start from ``base_seconds``; with
    ``resets_each_move`` (daily games) the previous value is reset to
    ``base_seconds`` before every move.

    Malformed text never raises: the sequences come back empty and the
    duration ``None``.

    Args:
        pgn: Full PGN text including headers.
        base_seconds: Starting clock for both players.
        increment_seconds: Per-move increment; ``None`` counts as 0.
        resets_each_move: Treat ``base_seconds`` as a per-move budget.

    Returns:
        The derived move data.
    """

    text = pgn or ""
    movetext = _movetext(text)
    moves, clocks = _scan_moves_with_clocks(movetext)
    time_spent = _time_spent(clocks, base_seconds, increment_seconds or 0, resets_each_move)
    ply_count = count_plies(movetext)
    headers = read_pgn_headers(text)
    start_time = _header_datetime(headers, "UTCDate", "UTCTime")
    end_time = _header_datetime(headers, "EndDate", "EndTime")
    return DerivedMoveData(
        moves=tuple(moves),
        clocks=tuple(clocks),
        time_spent=tuple(time_spent),
        ply_count=ply_count,
        moves_count=math.ceil(ply_count / 2),
        eco=_header_value(headers, "ECO"),
        start_time=start_time,
        end_time=end_time,
        duration_seconds=_duration_seconds(start_time, end_time),
    )


def _movetext(pgn: str) -> str:
    return HEADER_LINE_RE.sub("", pgn).strip()


def _scan_moves_with_clocks(movetext: str) -> tuple[list[str], list[float]]:
    moves: list[str] = []
    clocks: list[float] = []
    for match in MOVE_CLOCK_PATTERN.finditer(movetext):
        moves.append(match.group("move"))
        clocks.append(clock_to_seconds(match.group("clock")))
    return moves, clocks


def _time_spent(
    clocks: list[float],
    base_seconds: float | None,
    increment_seconds: float,
    resets_each_move: bool,
) -> list[float]:
    previous: list[float | None] = [base_seconds, base_seconds]
    spent: list[float] = []
    for ply, clock in enumerate(clocks):
        side = ply % 2
        prior = base_seconds if resets_each_move else previous[side]
        if prior is None:
            prior = clock
        value = round(prior - clock + increment_seconds, 3)
        spent.append(max(value, MIN_TIME_SPENT_SECONDS))
        previous[side] = clock
    return spent


def clock_to_seconds(token: str) -> float:
    """Convert a ``[[D:]H:]MM:SS[.d]`` clock token to seconds.

    Components are read from the right; a four-part token leads with days.
    Non-numeric components count as 0. Components beyond the fourth from
    the right are ignored.
    """

    parts = (token or "").strip().split(":")
    total = 0.0
    for part, unit in zip(reversed(parts), CLOCK_UNITS):
        total += (to_float(part) or 0.0) * unit
    return round(total, 3)


def count_plies(movetext: str) -> int:
    """Count SAN move tokens, ignoring comments, variations, and NAGs."""

    cleaned = _COMMENT_RE.sub(" ", movetext)
    previous = None
    while previous != cleaned:
        previous = cleaned
        cleaned = _VARIATION_RE.sub(" ", cleaned)
    cleaned = _NAG_RE.sub(" ", cleaned)
    return len(SAN_PATTERN.findall(cleaned))


def read_pgn_headers(pgn: str) -> Mapping[str, str]:
    """Return the PGN header tags, or an empty mapping when unreadable."""

    if not pgn.lstrip().startswith("["):
        return {}
    try:
        headers = chess.pgn.read_headers(StringIO(pgn))
    except ValueError as exc:
        logger.debug("Unreadable PGN headers: %s", exc)
        return {}
    return headers or {}


def _header_value(headers: Mapping[str, str], name: str) -> str | None:
    value = (headers.get(name) or "").strip()
    if not value or value == "?":
        return None
    return value


def _header_datetime(
    headers: Mapping[str, str], date_key: str, time_key: str
) -> datetime | None:
    date_value = _header_value(headers, date_key)
    time_value = _header_value(headers, time_key)
    if not date_value or not time_value:
        return None
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(f"{date_value} {time_value}", fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return None


def _duration_seconds(start: datetime | None, end: datetime | None) -> float | None:
    if start is None or end is None:
        return None
    seconds = (end - start).total_seconds()
    if seconds < 0:
        logger.debug("Ignoring negative game duration: start=%s end=%s", start, end)
        return None
    return seconds


__all__ = [
    "MIN_TIME_SPENT_SECONDS",
    "MOVE_CLOCK_PATTERN",
    "clock_to_seconds",
    "count_plies",
    "extract_move_data",
    "read_pgn_headers",
]
