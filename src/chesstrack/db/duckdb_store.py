from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import duckdb

from chesstrack.config import Settings
from chesstrack.db.duckdb_callback_repository import DuckDbCallbackRepository
from chesstrack.db.duckdb_daily_repository import DuckDbDailyRepository
from chesstrack.db.duckdb_derived_repository import DuckDbDerivedRepository
from chesstrack.db.duckdb_game_repository import DuckDbGameRepository
from chesstrack.utils.logger import get_logger

logger = get_logger(__name__)


GAMES_SCHEMA = """
CREATE TABLE IF NOT EXISTS games (
    row_id BIGINT,
    game_id TEXT,
    url TEXT,
    end_date DATE,
    end_time_of_day TEXT,
    end_timestamp BIGINT,
    my_color TEXT,
    opponent TEXT,
    outcome TEXT,
    termination TEXT,
    format TEXT,
    my_rating INTEGER,
    opp_rating INTEGER,
    last_rating INTEGER,
    analyzed BOOLEAN DEFAULT FALSE,
    callback_fetched BOOLEAN DEFAULT FALSE
);
"""

DERIVED_SCHEMA = """
CREATE TABLE IF NOT EXISTS derived_games (
    row_id BIGINT,
    game_id TEXT,
    url TEXT,
    time_control TEXT,
    time_control_kind TEXT,
    base_seconds INTEGER,
    increment_seconds INTEGER,
    correspondence_seconds INTEGER,
    time_class TEXT,
    rules TEXT,
    format TEXT,
    rated BOOLEAN,
    eco TEXT,
    eco_url TEXT,
    tournament TEXT,
    match TEXT,
    start_time TIMESTAMP,
    end_time TIMESTAMP,
    result TEXT,
    played_as TEXT,
    my_username TEXT,
    my_rating INTEGER,
    my_result TEXT,
    my_accuracy DOUBLE,
    my_profile TEXT,
    opp_username TEXT,
    opp_rating INTEGER,
    opp_result TEXT,
    opp_accuracy DOUBLE,
    opp_profile TEXT,
    moves VARCHAR[],
    clocks DOUBLE[],
    time_spent DOUBLE[],
    ply_count INTEGER,
    moves_count INTEGER,
    duration_seconds DOUBLE
);
"""

DAILY_SCHEMA = """
CREATE TABLE IF NOT EXISTS daily_stats (
    date DATE,
    format TEXT,
    wins INTEGER,
    losses INTEGER,
    draws INTEGER,
    duration_seconds DOUBLE,
    rating INTEGER
);
"""

CALLBACK_SCHEMA = """
CREATE TABLE IF NOT EXISTS callback_data (
    game_id TEXT,
    my_rating_change INTEGER,
    opp_rating_change INTEGER,
    my_rating_before INTEGER,
    opp_rating_before INTEGER,
    opp_country TEXT,
    opp_membership TEXT,
    fetched_at TIMESTAMP
);
"""

_SCHEMAS = (GAMES_SCHEMA, DERIVED_SCHEMA, DAILY_SCHEMA, CALLBACK_SCHEMA)


def get_connection(db_path: Path) -> duckdb.DuckDBPyConnection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Opening DuckDB at %s", db_path)
    return duckdb.connect(str(db_path))


def init_schema(conn: duckdb.DuckDBPyConnection) -> None:
    for schema in _SCHEMAS:
        conn.execute(schema)


@dataclass(slots=True)
class DuckDbStore:
    """The four collections of one DuckDB database, sharing a connection."""

    conn: duckdb.DuckDBPyConnection
    games: DuckDbGameRepository
    derived: DuckDbDerivedRepository
    daily: DuckDbDailyRepository
    callbacks: DuckDbCallbackRepository
    _active: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_connection(cls, conn: duckdb.DuckDBPyConnection) -> DuckDbStore:
        init_schema(conn)
        return cls(
            conn=conn,
            games=DuckDbGameRepository(conn),
            derived=DuckDbDerivedRepository(conn),
            daily=DuckDbDailyRepository(conn),
            callbacks=DuckDbCallbackRepository(conn),
        )

    def begin(self) -> None:
        if not self._active:
            self.conn.execute("BEGIN")
            self._active = True

    def commit(self) -> None:
        if not self._active:
            return
        self.conn.execute("COMMIT")
        self._active = False

    def rollback(self) -> None:
        if not self._active:
            return
        self.conn.execute("ROLLBACK")
        self._active = False

    def close(self) -> None:
        if self._active:
            self.rollback()
        self.conn.close()

    def __enter__(self) -> DuckDbStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_store(settings: Settings) -> DuckDbStore:
    """Open (creating if needed) the store at ``settings.duckdb_path``."""
    db_path = settings.duckdb_path or settings.data_dir / "chesstrack.duckdb"
    return DuckDbStore.from_connection(get_connection(Path(db_path)))


__all__ = [
    "DuckDbStore",
    "get_connection",
    "init_schema",
    "open_store",
]
