"""Turn raw archive games into player-centric normalized games."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import ValidationError

from chesstrack.errors import GameNormalizationError, IssueKind
from chesstrack.models.normalized_game import NormalizedGame, Outcome
from chesstrack.models.raw_game import RawGame, RawPlayer, game_id_from_url
from chesstrack.ports.error_reporter import ErrorReporter
from chesstrack.time_control import game_format
from chesstrack.utils.logger import funclogger, get_logger
from chesstrack.utils.now import Now

logger = get_logger(__name__)

WIN_CODE = "win"
DRAW_CODES = frozenset(
    {"agreed", "repetition", "stalemate", "insufficient", "50move", "timevsinsufficient"}
)
LOSS_CODES = frozenset({"lose", "checkmated", "timeout", "resigned", "abandoned"})

WHITE_WINS = "1-0"
BLACK_WINS = "0-1"
DRAWN = "1/2-1/2"


def result_string(white_result: str | None, black_result: str | None) -> str | None:
    """Return the canonical result string, or ``None`` while undetermined."""
    if white_result == WIN_CODE:
        return WHITE_WINS
    if black_result == WIN_CODE:
        return BLACK_WINS
    if white_result in DRAW_CODES or black_result in DRAW_CODES:
        return DRAWN
    return None


def did_i_win(my_result: str | None) -> bool | None:
    """Classify my result code; draws and unhandled codes stay unknown."""
    if my_result == WIN_CODE:
        return True
    if my_result in LOSS_CODES:
        return False
    return None


def resolve_outcome(my_result: str | None, result: str | None) -> Outcome | None:
    won = did_i_win(my_result)
    if won is True:
        return "win"
    if won is False:
        return "loss"
    if result == DRAWN:
        return "draw"
    return None


def resolve_termination(my_result: str | None, opp_result: str | None) -> str | None:
    """Return how the game ended from my side.

    When I won the opponent's code says how (``checkmated``, ``resigned``);
    otherwise my own code does.
    """
    if my_result == WIN_CODE:
        return opp_result
    return my_result


def normalize_game(
    raw: Mapping[str, object] | RawGame | None,
    perspective: str | None,
    *,
    reporter: ErrorReporter | None = None,
) -> NormalizedGame | None:
    """Normalize one raw game from the perspective of ``perspective``.

    Invalid records (missing fields, missing players, perspective not among
    the players) return ``None`` and are reported, never raised.
    """
    try:
        return _normalize(raw, perspective)
    except GameNormalizationError as exc:
        _report(reporter, exc, raw)
        return None


def normalize_games(
    raws: Iterable[Mapping[str, object] | RawGame],
    perspective: str | None,
    *,
    reporter: ErrorReporter | None = None,
) -> list[NormalizedGame]:
    """Normalize a batch, dropping failures and keeping survivor order."""
    games: list[NormalizedGame] = []
    for raw in raws:
        game = normalize_game(raw, perspective, reporter=reporter)
        if game is not None:
            games.append(game)
    return games


def _normalize(
    raw: Mapping[str, object] | RawGame | None,
    perspective: str | None,
) -> NormalizedGame:
    if raw is None:
        raise GameNormalizationError(IssueKind.VALIDATION, "raw game is missing")
    if not perspective or not perspective.strip():
        raise GameNormalizationError(IssueKind.VALIDATION, "perspective username is missing")
    game = _coerce_raw_game(raw)
    if game.white is None or game.black is None:
        raise GameNormalizationError(
            IssueKind.VALIDATION, "player record is missing", url=game.url
        )
    played_as = _resolve_played_as(game, perspective)
    me, opp = (game.white, game.black) if played_as == "white" else (game.black, game.white)
    result = result_string(game.white.result, game.black.result)
    accuracies = game.accuracies or {}
    opp_color = "black" if played_as == "white" else "white"
    return NormalizedGame(
        game_id=game_id_from_url(game.url),
        url=game.url,
        my_username=me.username or perspective,
        my_rating=me.rating,
        my_result=me.result,
        my_accuracy=accuracies.get(played_as),
        my_profile=me.profile,
        opp_username=opp.username or "",
        opp_rating=opp.rating,
        opp_result=opp.result,
        opp_accuracy=accuracies.get(opp_color),
        opp_profile=opp.profile,
        time_control=game.time_control,
        time_class=game.time_class,
        rules=game.rules,
        rated=game.rated,
        eco_url=game.eco,
        tournament=game.tournament,
        match=game.match,
        start_time=Now.from_epoch(game.start_time),
        end_time=Now.from_epoch(game.end_time),
        result=result,
        played_as=played_as,
        did_i_win=did_i_win(me.result),
        outcome=resolve_outcome(me.result, result),
        termination=resolve_termination(me.result, opp.result),
        format=game_format(game.time_class, game.rules),
        pgn=game.pgn,
    )


def _coerce_raw_game(raw: Mapping[str, object] | RawGame) -> RawGame:
    if isinstance(raw, RawGame):
        return raw
    try:
        return RawGame.model_validate(raw)
    except ValidationError as exc:
        url = raw.get("url") if isinstance(raw, Mapping) else None
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise GameNormalizationError(
            IssueKind.VALIDATION,
            f"invalid raw game fields: {', '.join(fields)}",
            url=url if isinstance(url, str) else None,
        ) from exc


@funclogger
def _resolve_played_as(game: RawGame, perspective: str) -> str:
    me = perspective.strip().lower()
    if _username(game.white) == me:
        return "white"
    if _username(game.black) == me:
        return "black"
    raise GameNormalizationError(
        IssueKind.CONSISTENCY,
        f"perspective '{perspective}' is neither player",
        url=game.url,
    )


def _username(player: RawPlayer | None) -> str:
    return (player.username or "").strip().lower() if player else ""


def _report(
    reporter: ErrorReporter | None,
    exc: GameNormalizationError,
    raw: Mapping[str, object] | RawGame | None,
) -> None:
    url = exc.url
    if url is None and isinstance(raw, RawGame):
        url = raw.url
    game_id = game_id_from_url(url) or None
    if reporter is None:
        logger.warning("Skipping game %s: %s", game_id or "<unknown>", exc.reason)
        return
    reporter.report_issue(exc.kind, exc.reason, game_id=game_id, url=url)


__all__ = [
    "DRAW_CODES",
    "LOSS_CODES",
    "did_i_win",
    "normalize_game",
    "normalize_games",
    "resolve_outcome",
    "resolve_termination",
    "result_string",
]
