"""DuckDB repository for callback enrichment rows."""

from __future__ import annotations

from collections.abc import Iterable

import duckdb

from chesstrack.db.query_helpers import (
    column_list,
    from_db_timestamp,
    rows_to_dicts,
    to_db_timestamp,
)
from chesstrack.models.rows import CallbackRow
from chesstrack.ports.repositories import CallbackRepository

_FIELDS = tuple(CallbackRow.model_fields)


class DuckDbCallbackRepository(CallbackRepository):
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def append(self, rows: Iterable[CallbackRow]) -> int:
        rows_list = list(rows)
        if not rows_list:
            return 0
        self._conn.executemany(
            f"INSERT INTO callback_data ({column_list(_FIELDS)}) "  # noqa: S608
            f"VALUES ({', '.join('?' for _ in _FIELDS)})",
            [
                tuple(
                    to_db_timestamp(row.fetched_at) if name == "fetched_at" else getattr(row, name)
                    for name in _FIELDS
                )
                for row in rows_list
            ],
        )
        return len(rows_list)

    def find_by_id(self, game_id: str) -> CallbackRow | None:
        result = self._conn.execute(
            f"SELECT {column_list(_FIELDS)} FROM callback_data "  # noqa: S608
            "WHERE game_id = ? ORDER BY fetched_at DESC LIMIT 1",
            [game_id],
        )
        records = rows_to_dicts(result)
        if not records:
            return None
        record = records[0]
        record["fetched_at"] = from_db_timestamp(record["fetched_at"])  # type: ignore[arg-type]
        return CallbackRow.model_validate(record)


__all__ = ["DuckDbCallbackRepository"]
