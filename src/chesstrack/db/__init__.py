"""DuckDB storage for games, derived fields, daily aggregates, and callbacks."""

from chesstrack.db.duckdb_callback_repository import DuckDbCallbackRepository
from chesstrack.db.duckdb_daily_repository import DuckDbDailyRepository
from chesstrack.db.duckdb_derived_repository import DuckDbDerivedRepository
from chesstrack.db.duckdb_game_repository import DuckDbGameRepository
from chesstrack.db.duckdb_store import DuckDbStore, get_connection, init_schema, open_store

__all__ = [
    "DuckDbCallbackRepository",
    "DuckDbDailyRepository",
    "DuckDbDerivedRepository",
    "DuckDbGameRepository",
    "DuckDbStore",
    "get_connection",
    "init_schema",
    "open_store",
]
