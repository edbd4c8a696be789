"""Per-date, per-format aggregates extended from the stored games."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from chesstrack.config import Settings
from chesstrack.infra.unit_of_work import unit_of_work
from chesstrack.models.rows import DailyStatRow, GameRow
from chesstrack.ports.repositories import GameStore
from chesstrack.utils.logger import get_logger

logger = get_logger(__name__)


def extend_daily(
    games: Iterable[GameRow],
    durations: Mapping[str, float | None],
    last_processed_date: date | None,
    seed_ratings: Mapping[str, int | None],
    formats: Iterable[str],
) -> list[DailyStatRow]:
    """Build daily rows for every date after ``last_processed_date``.

    The window runs from the day after ``last_processed_date`` (or the first
    game date) through the last game date. Every date in it gets one row per
    format, with or without games. Dates without games in a format keep
    ``None`` counts and repeat the latest known rating.

    Args:
        games: Stored game rows; any order.
        durations: ``{game_id: duration_seconds}`` from the derived rows.
        last_processed_date: Last date already aggregated, if any.
        seed_ratings: Rating per format from the last aggregated date.
        formats: Formats always reported, in output order.

    Returns:
        New rows ordered by date, then by format.
    """

    ordered = sorted(games, key=lambda row: (row.end_date, row.end_timestamp, row.row_id or 0))
    if not ordered:
        logger.info("Daily aggregation: no new dates (no games stored)")
        return []
    start = last_processed_date + timedelta(days=1) if last_processed_date else ordered[0].end_date
    end = ordered[-1].end_date
    if start > end:
        logger.info("Daily aggregation: no new dates after %s", last_processed_date)
        return []

    by_day: dict[tuple[date, str], list[GameRow]] = defaultdict(list)
    for row in ordered:
        if start <= row.end_date <= end:
            by_day[(row.end_date, row.format)].append(row)
    columns = _format_columns(formats, seed_ratings, (fmt for _, fmt in by_day))

    ratings = dict(seed_ratings)
    rows: list[DailyStatRow] = []
    day = start
    while day <= end:
        for fmt in columns:
            day_games = by_day.get((day, fmt))
            if day_games:
                rows.append(_summarize(day, fmt, day_games, durations, ratings))
            else:
                rows.append(DailyStatRow(date=day, format=fmt, rating=ratings.get(fmt)))
        day += timedelta(days=1)
    logger.info("Daily aggregation: %s rows for %s through %s", len(rows), start, end)
    return rows


def _format_columns(
    formats: Iterable[str],
    seed_ratings: Mapping[str, int | None],
    played: Iterable[str],
) -> list[str]:
    columns = list(dict.fromkeys(formats))
    extra = (set(seed_ratings) | set(played)) - set(columns)
    return columns + sorted(extra)


def _summarize(
    day: date,
    fmt: str,
    games: list[GameRow],
    durations: Mapping[str, float | None],
    ratings: dict[str, int | None],
) -> DailyStatRow:
    known = [durations[g.game_id] for g in games if durations.get(g.game_id) is not None]
    for game in games:
        if game.my_rating is not None:
            ratings[fmt] = game.my_rating
    return DailyStatRow(
        date=day,
        format=fmt,
        wins=sum(1 for g in games if g.outcome == "win"),
        losses=sum(1 for g in games if g.outcome == "loss"),
        draws=sum(1 for g in games if g.outcome == "draw"),
        duration_seconds=sum(known) if known else None,  # type: ignore[arg-type]
        rating=ratings.get(fmt),
    )


def refresh_daily(store: GameStore, settings: Settings) -> list[DailyStatRow]:
    """Recompute the latest stored date, then extend through the last game date.

    Games can still finish on the latest stored date, so its rows are
    replaced rather than kept.

    Returns:
        The rows written, the recomputed latest date included.
    """

    with unit_of_work(store):
        reopened = store.daily.last_date()
        if reopened is not None:
            store.daily.clear(since=reopened)
        rows = _extend_stored(store, settings)
    return rows


def rebuild_daily(store: GameStore, settings: Settings) -> list[DailyStatRow]:
    """Drop every daily row and aggregate the whole game history again."""

    with unit_of_work(store):
        removed = store.daily.clear()
        rows = _extend_stored(store, settings)
    logger.info("Daily rebuild: replaced %s rows with %s", removed, len(rows))
    return rows


def _extend_stored(store: GameStore, settings: Settings) -> list[DailyStatRow]:
    last_date = store.daily.last_date()
    seeds: dict[str, int | None] = {}
    if last_date is not None:
        seeds = {row.format: row.rating for row in store.daily.rows_for_date(last_date)}
    rows = extend_daily(
        store.games.scan(),
        store.derived.durations(),
        last_date,
        seeds,
        settings.tracked_formats,
    )
    store.daily.append(rows)
    return rows


__all__ = ["extend_daily", "rebuild_daily", "refresh_daily"]
