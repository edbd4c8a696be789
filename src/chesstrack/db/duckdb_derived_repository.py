"""DuckDB repository for per-game derived fields."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import duckdb

from chesstrack.db.query_helpers import (
    column_list,
    from_db_timestamp,
    next_row_id,
    remove_duplicate_rows,
    rows_to_dicts,
    to_db_timestamp,
)
from chesstrack.models.rows import DerivedRow
from chesstrack.ports.repositories import DerivedRepository

_FIELDS = tuple(DerivedRow.model_fields)
_TIMESTAMP_FIELDS = frozenset({"start_time", "end_time"})
_LIST_CASTS = {"moves": "?::VARCHAR[]", "clocks": "?::DOUBLE[]", "time_spent": "?::DOUBLE[]"}
_SELECT = f"SELECT {column_list(_FIELDS)} FROM derived_games"  # noqa: S608


def _to_params(row: DerivedRow) -> list[object]:
    params: list[object] = []
    for name in _FIELDS:
        value = getattr(row, name)
        if name in _TIMESTAMP_FIELDS:
            value = to_db_timestamp(value)
        params.append(value)
    return params


def _from_record(record: dict[str, object]) -> DerivedRow:
    for name in _TIMESTAMP_FIELDS:
        record[name] = from_db_timestamp(record.get(name))  # type: ignore[arg-type]
    for name in _LIST_CASTS:
        record[name] = list(record.get(name) or [])  # type: ignore[call-overload]
    return DerivedRow.model_validate(record)


class DuckDbDerivedRepository(DerivedRepository):
    """Persist derived rows, including move/clock lists, in DuckDB."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def append(self, rows: Iterable[DerivedRow]) -> int:
        rows_list = list(rows)
        if not rows_list:
            return 0
        start = next_row_id(self._conn, "derived_games")
        placeholders = ", ".join(["?", *(_LIST_CASTS.get(name, "?") for name in _FIELDS)])
        self._conn.executemany(
            f"INSERT INTO derived_games (row_id, {column_list(_FIELDS)}) "  # noqa: S608
            f"VALUES ({placeholders})",
            [[start + offset, *_to_params(row)] for offset, row in enumerate(rows_list)],
        )
        return len(rows_list)

    def scan(self) -> Iterator[DerivedRow]:
        result = self._conn.execute(f"{_SELECT} ORDER BY row_id")
        for record in rows_to_dicts(result):
            yield _from_record(record)

    def find_by_id(self, game_id: str) -> DerivedRow | None:
        result = self._conn.execute(
            f"{_SELECT} WHERE game_id = ? ORDER BY row_id LIMIT 1", [game_id]
        )
        records = rows_to_dicts(result)
        return _from_record(records[0]) if records else None

    def durations(self) -> dict[str, float | None]:
        """Return ``{game_id: duration_seconds}`` keeping the first row per game."""
        rows = self._conn.execute(
            "SELECT game_id, duration_seconds FROM derived_games ORDER BY row_id DESC"
        ).fetchall()
        return {str(game_id): duration for game_id, duration in rows}

    def remove_duplicates(self) -> int:
        return remove_duplicate_rows(self._conn, "derived_games")


__all__ = ["DuckDbDerivedRepository"]
