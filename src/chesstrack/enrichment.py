"""Best-effort per-game details from the Chess.com callback endpoint."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

import requests

from chesstrack.config import Settings
from chesstrack.errors import IssueKind
from chesstrack.infra.error_reporter import LoggingErrorReporter
from chesstrack.infra.unit_of_work import unit_of_work
from chesstrack.ingestion import mark_games
from chesstrack.models.rows import CallbackRow, GameRow
from chesstrack.ports.callback_source import CallbackSource
from chesstrack.ports.error_reporter import ErrorReporter
from chesstrack.ports.repositories import GameStore
from chesstrack.time_control import DAILY_TIME_CLASS
from chesstrack.utils.logger import get_logger
from chesstrack.utils.now import Now
from chesstrack.utils.to_int import to_int

logger = get_logger(__name__)


def parse_callback(
    payload: Mapping[str, object], game: GameRow, fetched_at: datetime
) -> CallbackRow:
    """Map a callback payload onto a row from my side of ``game``.

    A rating change of exactly 0 is stored as ``None``.
    """

    details = _mapping(payload.get("game"))
    players = _mapping(payload.get("players"))
    mine, theirs = _split_players(players, game.my_color)
    opp_color = "black" if game.my_color == "white" else "white"
    my_change = _rating_change(details, game.my_color)
    opp_change = _rating_change(details, opp_color)
    return CallbackRow(
        game_id=game.game_id,
        my_rating_change=my_change,
        opp_rating_change=opp_change,
        my_rating_before=_rating_before(to_int(mine.get("rating")) or game.my_rating, my_change),
        opp_rating_before=_rating_before(
            to_int(theirs.get("rating")) or game.opp_rating, opp_change
        ),
        opp_country=_text(theirs.get("countryName")),
        opp_membership=_text(theirs.get("membershipCode") or theirs.get("membershipLevel")),
        fetched_at=fetched_at,
    )


def _mapping(value: object) -> Mapping[str, object]:
    return value if isinstance(value, Mapping) else {}


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _split_players(
    players: Mapping[str, object], my_color: str
) -> tuple[Mapping[str, object], Mapping[str, object]]:
    top = _mapping(players.get("top"))
    bottom = _mapping(players.get("bottom"))
    if str(top.get("color") or "").lower() == my_color:
        return top, bottom
    return bottom, top


def _rating_change(details: Mapping[str, object], color: str) -> int | None:
    key = "ratingChangeWhite" if color == "white" else "ratingChangeBlack"
    change = to_int(details.get(key))
    return change or None


def _rating_before(rating_after: int | None, change: int | None) -> int | None:
    if rating_after is None or change is None:
        return None
    return rating_after - change


def pending_games(
    rows: Iterable[GameRow],
    game_ids: Iterable[str] | None = None,
    limit: int | None = None,
) -> list[GameRow]:
    """Return games whose callback has not been fetched, first occurrence only."""

    wanted = set(game_ids) if game_ids is not None else None
    seen: set[str] = set()
    pending: list[GameRow] = []
    for row in rows:
        if row.callback_fetched or row.game_id in seen:
            continue
        if wanted is not None and row.game_id not in wanted:
            continue
        seen.add(row.game_id)
        pending.append(row)
        if limit is not None and len(pending) >= limit:
            break
    return pending


def enrich_games(
    store: GameStore,
    client: CallbackSource,
    settings: Settings,
    *,
    game_ids: Iterable[str] | None = None,
    reporter: ErrorReporter | None = None,
) -> list[CallbackRow]:
    """Fetch callback details for up to ``settings.callback_batch_size`` games.

    A failure for one game is reported as a transport issue and the rest of
    the batch continues. Successful games get ``callback_fetched`` set.

    Returns:
        The appended callback rows.
    """

    reporter = reporter or LoggingErrorReporter()
    targets = pending_games(store.games.scan(), game_ids, settings.callback_batch_size)
    rows: list[CallbackRow] = []
    for game in targets:
        daily = game.format.startswith(DAILY_TIME_CLASS)
        try:
            payload = client.fetch_callback(game.game_id, daily=daily)
        except requests.RequestException as exc:
            reporter.report_issue(IssueKind.TRANSPORT, str(exc), game_id=game.game_id, url=game.url)
            continue
        rows.append(parse_callback(payload, game, Now.as_datetime()))

    with unit_of_work(store):
        store.callbacks.append(rows)
        mark_games(store, [row.game_id for row in rows], callback_fetched=True)
    logger.info("Enriched %s of %s games from callbacks", len(rows), len(targets))
    return rows


__all__ = ["enrich_games", "parse_callback", "pending_games"]
