"""Top-level sync operations: fetch, ingest, persist the cursor, extend daily stats."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from chesstrack.chess_clients.base_chess_client import BaseChessClient
from chesstrack.chess_clients.chess_fetch_result import ChessFetchResult
from chesstrack.chess_clients.chesscom_client import ChesscomClient, ChesscomClientContext
from chesstrack.config import Settings
from chesstrack.daily import rebuild_daily, refresh_daily
from chesstrack.db.duckdb_store import open_store
from chesstrack.infra.cursor_store import FileCursorStore
from chesstrack.infra.error_reporter import LoggingErrorReporter
from chesstrack.ingestion import ingest_games
from chesstrack.ports.cursor_store import CursorStore
from chesstrack.ports.repositories import GameStore
from chesstrack.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[dict[str, object]], None]


@dataclass(slots=True)
class SyncContext:
    """Collaborators shared by the sync operations.

    Attributes:
        settings: Active settings.
        client: Archive client.
        store: Destination collections.
        cursor_store: Persistence for the ingestion cursor.
        reporter: Collects skipped records for the run summary.
        progress: Optional callback receiving step payloads.
    """

    settings: Settings
    client: BaseChessClient
    store: GameStore
    cursor_store: CursorStore
    reporter: LoggingErrorReporter = field(default_factory=LoggingErrorReporter)
    progress: ProgressCallback | None = None


def build_chess_client(settings: Settings) -> ChesscomClient:
    return ChesscomClient(ChesscomClientContext(settings=settings, logger=logger))


def build_sync_context(
    settings: Settings,
    *,
    client: BaseChessClient | None = None,
    store: GameStore | None = None,
    cursor_store: CursorStore | None = None,
    progress: ProgressCallback | None = None,
) -> SyncContext:
    """Assemble a context, opening the DuckDB store and cursor file from settings when omitted."""
    return SyncContext(
        settings=settings,
        client=client or build_chess_client(settings),
        store=store or open_store(settings),
        cursor_store=cursor_store or FileCursorStore(settings.cursor_path),
        progress=progress,
    )


def _emit(context: SyncContext, payload: dict[str, object]) -> None:
    if context.progress is not None:
        context.progress(payload)


def run_initial_sync(context: SyncContext) -> dict[str, object]:
    """Fetch the whole history, ingest it and mark the full sync complete."""
    _emit(context, {"step": "start", "mode": "initial", "user": context.settings.user})
    result = context.client.initial_sync()
    return _complete_sync(context, "initial", result)


def run_incremental_sync(context: SyncContext) -> dict[str, object]:
    """Fetch only games newer than the stored cursor and ingest them."""
    cursor = context.cursor_store.read()
    _emit(context, {"step": "start", "mode": "incremental", "cursor": cursor.last_url})
    result = context.client.incremental_sync(cursor)
    return _complete_sync(context, "incremental", result)


def run_sync(context: SyncContext) -> dict[str, object]:
    """Run the initial sync until it has completed once, incremental syncs afterwards."""
    if context.cursor_store.read().full_sync_complete:
        return run_incremental_sync(context)
    return run_initial_sync(context)


def run_daily_refresh(context: SyncContext) -> dict[str, object]:
    rows = refresh_daily(context.store, context.settings)
    _emit(context, {"step": "daily", "rows": len(rows)})
    return {"daily_rows": len(rows)}


def run_daily_rebuild(context: SyncContext) -> dict[str, object]:
    """Recompute every daily row from the stored games."""
    rows = rebuild_daily(context.store, context.settings)
    _emit(context, {"step": "daily", "rows": len(rows), "rebuilt": True})
    return {"daily_rows": len(rows)}


def _complete_sync(
    context: SyncContext, mode: str, result: ChessFetchResult
) -> dict[str, object]:
    _emit(context, {"step": "fetched", "mode": mode, "games": len(result.games)})
    new_rows = ingest_games(
        result.games, context.store, context.settings, reporter=context.reporter
    )
    context.cursor_store.write(result.cursor)
    _emit(context, {"step": "ingested", "mode": mode, "games": len(new_rows)})
    daily_rows = refresh_daily(context.store, context.settings)
    summary: dict[str, object] = {
        "mode": mode,
        "fetched_games": len(result.games),
        "new_games": len(new_rows),
        "skipped": context.reporter.counts(),
        "daily_rows": len(daily_rows),
        "not_modified": list(result.not_modified),
        "cursor": result.cursor.model_dump(),
    }
    logger.info(
        "%s sync complete: fetched=%s new=%s daily_rows=%s",
        mode.capitalize(),
        len(result.games),
        len(new_rows),
        len(daily_rows),
    )
    _emit(context, {"step": "complete", **summary})
    return summary


__all__ = [
    "ProgressCallback",
    "SyncContext",
    "build_chess_client",
    "build_sync_context",
    "run_daily_rebuild",
    "run_daily_refresh",
    "run_incremental_sync",
    "run_initial_sync",
    "run_sync",
]
