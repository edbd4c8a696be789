from __future__ import annotations

from datetime import date
from threading import Lock

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from chesstrack import __version__
from chesstrack.config import Settings, get_settings
from chesstrack.db.duckdb_store import open_store
from chesstrack.enrichment import enrich_games
from chesstrack.errors import ArchiveFetchError
from chesstrack.infra.error_reporter import LoggingErrorReporter
from chesstrack.ingestion import remove_duplicate_games
from chesstrack.pipeline import (
    build_chess_client,
    build_sync_context,
    run_daily_rebuild,
    run_daily_refresh,
    run_initial_sync,
    run_sync,
)
from chesstrack.utils.logger import get_logger, set_level

logger = get_logger(__name__)

_PUBLIC_PATHS = frozenset({"/api/health"})
_STORE_WRITE_LOCK = Lock()


def _extract_api_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    api_key = request.headers.get("x-api-key")
    if api_key:
        return api_key.strip()
    return None


def require_api_token(request: Request) -> None:
    if request.url.path in _PUBLIC_PATHS:
        return
    expected = get_settings().api_token
    supplied = _extract_api_token(request)
    if not supplied or supplied != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


app = FastAPI(
    title="chesstrack",
    version=__version__,
    dependencies=[Depends(require_api_token)],
)


class EnrichRequest(BaseModel):
    game_ids: list[str] | None = None


@app.exception_handler(ArchiveFetchError)
def archive_fetch_failed(_request: Request, exc: ArchiveFetchError) -> JSONResponse:
    logger.error("Archive fetch failed: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"status": "error", "url": exc.url, "upstream_status": exc.status_code},
    )


def _settings() -> Settings:
    settings = get_settings()
    set_level(settings.log_level)
    return settings


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "chesstrack", "version": __version__}


@app.post("/api/sync")
def trigger_sync() -> dict[str, object]:
    settings = _settings()
    with _STORE_WRITE_LOCK, open_store(settings) as store:
        context = build_sync_context(
            settings, client=build_chess_client(settings), store=store
        )
        result = run_sync(context)
    return {"status": "ok", "result": result}


@app.post("/api/sync/full")
def trigger_full_sync() -> dict[str, object]:
    settings = _settings()
    with _STORE_WRITE_LOCK, open_store(settings) as store:
        context = build_sync_context(
            settings, client=build_chess_client(settings), store=store
        )
        result = run_initial_sync(context)
    return {"status": "ok", "result": result}


@app.post("/api/daily/refresh")
def trigger_daily_refresh() -> dict[str, object]:
    settings = _settings()
    with _STORE_WRITE_LOCK, open_store(settings) as store:
        context = build_sync_context(
            settings, client=build_chess_client(settings), store=store
        )
        result = run_daily_refresh(context)
    return {"status": "ok", "result": result}


@app.post("/api/daily/rebuild")
def trigger_daily_rebuild() -> dict[str, object]:
    settings = _settings()
    with _STORE_WRITE_LOCK, open_store(settings) as store:
        context = build_sync_context(
            settings, client=build_chess_client(settings), store=store
        )
        result = run_daily_rebuild(context)
    return {"status": "ok", "result": result}


@app.post("/api/games/dedupe")
def dedupe_games() -> dict[str, object]:
    settings = _settings()
    with _STORE_WRITE_LOCK, open_store(settings) as store:
        removed = remove_duplicate_games(store)
    return {"status": "ok", "removed": removed}


@app.post("/api/games/enrich")
def enrich(request: EnrichRequest | None = None) -> dict[str, object]:
    settings = _settings()
    reporter = LoggingErrorReporter()
    with _STORE_WRITE_LOCK, open_store(settings) as store:
        rows = enrich_games(
            store,
            build_chess_client(settings),
            settings,
            game_ids=request.game_ids if request else None,
            reporter=reporter,
        )
    return {
        "status": "ok",
        "enriched": [row.game_id for row in rows],
        "failed": reporter.counts(),
    }


@app.get("/api/daily")
def daily_stats(
    start: date | None = Query(None),
    end: date | None = Query(None),
) -> dict[str, object]:
    settings = _settings()
    with open_store(settings) as store:
        rows = store.daily.between(start, end)
    return {"status": "ok", "rows": [row.model_dump(mode="json") for row in rows]}


@app.get("/api/games/{game_id}")
def game_detail(game_id: str) -> dict[str, object]:
    settings = _settings()
    with open_store(settings) as store:
        game = store.games.find_by_id(game_id)
        if game is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
        derived = store.derived.find_by_id(game_id)
        callback = store.callbacks.find_by_id(game_id)
    return {
        "game": game.model_dump(mode="json"),
        "derived": derived.model_dump(mode="json") if derived else None,
        "callback": callback.model_dump(mode="json") if callback else None,
    }
