"""Deduplicate fetched games and append Games/Derived rows in time order."""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Mapping

from chesstrack.config import Settings
from chesstrack.errors import IssueKind
from chesstrack.infra.error_reporter import LoggingErrorReporter
from chesstrack.infra.unit_of_work import unit_of_work
from chesstrack.models.move_data import DerivedMoveData
from chesstrack.models.normalized_game import NormalizedGame
from chesstrack.models.raw_game import RawGame
from chesstrack.models.rows import DerivedRow, GameRow
from chesstrack.normalizer import normalize_games
from chesstrack.notation import extract_move_data
from chesstrack.ports.error_reporter import ErrorReporter
from chesstrack.ports.repositories import GameStore
from chesstrack.time_control import TimeControlSpec, parse_time_control
from chesstrack.utils.logger import get_logger

logger = get_logger(__name__)

RatingHistory = dict[str, list[tuple[int, int]]]


def ingest_games(
    candidates: Iterable[Mapping[str, object] | RawGame],
    store: GameStore,
    settings: Settings,
    *,
    reporter: ErrorReporter | None = None,
) -> list[GameRow]:
    """Append the candidates that are not stored yet.

    The set of stored identifiers is read once. Survivors are processed in
    ascending end time so each game's ``last_rating`` sees every earlier
    game of its format, whether stored before or earlier in this batch.

    Game and derived rows are committed together or not at all.

    Args:
        candidates: Raw games as fetched.
        store: Destination collections.
        settings: Supplies the tracked username and calendar timezone.
        reporter: Receives skipped records; defaults to a logging reporter.

    Returns:
        The newly appended game rows in end-time order.
    """

    reporter = reporter or LoggingErrorReporter()
    known_ids = store.games.game_ids()
    fresh = _select_new_games(
        normalize_games(candidates, settings.user, reporter=reporter), known_ids, reporter
    )
    if not fresh:
        logger.info("No new games to ingest (%s already stored)", len(known_ids))
        return []

    history = build_rating_history(store.games.scan())
    game_rows: list[GameRow] = []
    derived_rows: list[DerivedRow] = []
    for game in fresh:
        timestamp = game.end_timestamp or 0
        game_rows.append(
            build_game_row(game, settings, prior_rating(history, game.format, timestamp))
        )
        derived_rows.append(build_derived_row(game))
        if game.my_rating is not None:
            record_rating(history, game.format, timestamp, game.my_rating)

    with unit_of_work(store):
        store.games.append(game_rows)
        store.derived.append(derived_rows)
    logger.info("Ingested %s new games", len(game_rows))
    return game_rows


def _select_new_games(
    games: Iterable[NormalizedGame],
    known_ids: set[str],
    reporter: ErrorReporter,
) -> list[NormalizedGame]:
    seen = set(known_ids)
    fresh: list[NormalizedGame] = []
    for game in games:
        if not game.game_id or game.end_time is None:
            reporter.report_issue(
                IssueKind.VALIDATION,
                "game identifier or end time is missing",
                game_id=game.game_id or None,
                url=game.url or None,
            )
            continue
        if game.game_id in seen:
            logger.debug("Skipping already stored game %s", game.game_id)
            continue
        seen.add(game.game_id)
        fresh.append(game)
    fresh.sort(key=lambda game: game.end_timestamp or 0)
    return fresh


def build_rating_history(rows: Iterable[GameRow]) -> RatingHistory:
    """Return ``{format: [(end_timestamp, my_rating), ...]}`` sorted by time."""

    history: RatingHistory = {}
    for row in rows:
        if row.my_rating is None:
            continue
        history.setdefault(row.format, []).append((row.end_timestamp, row.my_rating))
    for entries in history.values():
        entries.sort()
    return history


def prior_rating(history: RatingHistory, fmt: str, timestamp: int) -> int | None:
    """Return my rating in the latest game of ``fmt`` strictly before ``timestamp``."""

    entries = history.get(fmt)
    if not entries:
        return None
    index = bisect.bisect_left(entries, (timestamp,))
    if index == 0:
        return None
    return entries[index - 1][1]


def record_rating(history: RatingHistory, fmt: str, timestamp: int, rating: int) -> None:
    bisect.insort(history.setdefault(fmt, []), (timestamp, rating))


def build_game_row(
    game: NormalizedGame, settings: Settings, last_rating: int | None = None
) -> GameRow:
    if game.end_time is None:
        raise ValueError(f"game {game.game_id} has no end time")
    local_end = game.end_time.astimezone(settings.tzinfo)
    return GameRow(
        game_id=game.game_id,
        url=game.url,
        end_date=local_end.date(),
        end_time_of_day=local_end.strftime("%H:%M:%S"),
        end_timestamp=game.end_timestamp or 0,
        my_color=game.played_as,
        opponent=game.opp_username,
        outcome=game.outcome,
        termination=game.termination,
        format=game.format,
        my_rating=game.my_rating,
        opp_rating=game.opp_rating,
        last_rating=last_rating,
    )


def build_derived_row(game: NormalizedGame) -> DerivedRow:
    """Combine the normalized game with its parsed time control and move data."""

    if game.end_time is None:
        raise ValueError(f"game {game.game_id} has no end time")
    control = parse_time_control(game.time_control, game.time_class)
    move_data = _move_data(game.pgn, control)
    return DerivedRow(
        game_id=game.game_id,
        url=game.url,
        time_control=game.time_control,
        time_control_kind=str(control.kind),
        base_seconds=control.base_seconds,
        increment_seconds=control.increment_seconds,
        correspondence_seconds=control.correspondence_seconds,
        time_class=game.time_class,
        rules=game.rules,
        format=game.format,
        rated=game.rated,
        eco=move_data.eco,
        eco_url=game.eco_url,
        tournament=game.tournament,
        match=game.match,
        start_time=game.start_time or move_data.start_time,
        end_time=game.end_time,
        result=game.result,
        played_as=game.played_as,
        my_username=game.my_username,
        my_rating=game.my_rating,
        my_result=game.my_result,
        my_accuracy=game.my_accuracy,
        my_profile=game.my_profile,
        opp_username=game.opp_username,
        opp_rating=game.opp_rating,
        opp_result=game.opp_result,
        opp_accuracy=game.opp_accuracy,
        opp_profile=game.opp_profile,
        moves=list(move_data.moves),
        clocks=list(move_data.clocks),
        time_spent=list(move_data.time_spent),
        ply_count=move_data.ply_count,
        moves_count=move_data.moves_count,
        duration_seconds=move_data.duration_seconds,
    )


def _move_data(pgn: str | None, control: TimeControlSpec) -> DerivedMoveData:
    if control.is_daily:
        return extract_move_data(pgn, control.correspondence_seconds, 0, resets_each_move=True)
    return extract_move_data(pgn, control.base_seconds, control.increment_seconds)


def remove_duplicate_games(store: GameStore) -> int:
    """Remove later rows repeating a stored game identifier.

    The first occurrence and the relative order of the remaining rows are
    kept. Running it again removes nothing.

    Returns:
        The number of game rows removed.
    """

    with unit_of_work(store):
        removed = store.games.remove_duplicates()
        derived_removed = store.derived.remove_duplicates()
    if removed or derived_removed:
        logger.info(
            "Removed %s duplicate game rows and %s duplicate derived rows",
            removed,
            derived_removed,
        )
    return removed


def mark_games(
    store: GameStore,
    game_ids: Iterable[str],
    *,
    analyzed: bool | None = None,
    callback_fetched: bool | None = None,
) -> int:
    """Set the ``analyzed`` and/or ``callback_fetched`` markers; return games touched."""

    touched = store.games.update_markers(
        game_ids, analyzed=analyzed, callback_fetched=callback_fetched
    )
    logger.debug("Updated markers on %s games", touched)
    return touched


__all__ = [
    "build_derived_row",
    "build_game_row",
    "build_rating_history",
    "ingest_games",
    "mark_games",
    "prior_rating",
    "remove_duplicate_games",
]
