"""DuckDB repository for the Games collection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import duckdb

from chesstrack.db.query_helpers import (
    column_list,
    next_row_id,
    remove_duplicate_rows,
    rows_to_dicts,
)
from chesstrack.models.rows import GameRow
from chesstrack.ports.repositories import GameRepository

_COLUMNS = (
    "row_id",
    "game_id",
    "url",
    "end_date",
    "end_time_of_day",
    "end_timestamp",
    "my_color",
    "opponent",
    "outcome",
    "termination",
    "format",
    "my_rating",
    "opp_rating",
    "last_rating",
    "analyzed",
    "callback_fetched",
)
_SELECT = f"SELECT {column_list(_COLUMNS)} FROM games"  # noqa: S608


class DuckDbGameRepository(GameRepository):
    """Persist game rows in DuckDB in insertion order."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def append(self, rows: Iterable[GameRow]) -> int:
        """Append rows after the current last row and return the appended count."""
        rows_list = list(rows)
        if not rows_list:
            return 0
        start = next_row_id(self._conn, "games")
        placeholders = ", ".join("?" for _ in _COLUMNS)
        self._conn.executemany(
            f"INSERT INTO games ({column_list(_COLUMNS)}) VALUES ({placeholders})",  # noqa: S608
            [
                tuple(
                    start + offset if column == "row_id" else getattr(row, column)
                    for column in _COLUMNS
                )
                for offset, row in enumerate(rows_list)
            ],
        )
        return len(rows_list)

    def scan(self) -> Iterator[GameRow]:
        result = self._conn.execute(f"{_SELECT} ORDER BY row_id")
        for row in rows_to_dicts(result):
            yield GameRow.model_validate(row)

    def find_by_id(self, game_id: str) -> GameRow | None:
        result = self._conn.execute(
            f"{_SELECT} WHERE game_id = ? ORDER BY row_id LIMIT 1", [game_id]
        )
        rows = rows_to_dicts(result)
        return GameRow.model_validate(rows[0]) if rows else None

    def game_ids(self) -> set[str]:
        rows = self._conn.execute("SELECT DISTINCT game_id FROM games").fetchall()
        return {str(row[0]) for row in rows if row[0] is not None}

    def remove_duplicates(self) -> int:
        return remove_duplicate_rows(self._conn, "games")

    def update_markers(
        self,
        game_ids: Iterable[str],
        *,
        analyzed: bool | None = None,
        callback_fetched: bool | None = None,
    ) -> int:
        """Set the given markers on every row of ``game_ids``; return touched games."""
        ids = sorted(set(game_ids))
        assignments: list[str] = []
        params: list[object] = []
        if analyzed is not None:
            assignments.append("analyzed = ?")
            params.append(analyzed)
        if callback_fetched is not None:
            assignments.append("callback_fetched = ?")
            params.append(callback_fetched)
        if not ids or not assignments:
            return 0
        present = self._conn.execute(
            f"SELECT COUNT(DISTINCT game_id) FROM games WHERE game_id IN ({', '.join('?' for _ in ids)})",  # noqa: E501, S608
            ids,
        ).fetchone()
        self._conn.execute(
            f"UPDATE games SET {', '.join(assignments)} "  # noqa: S608
            f"WHERE game_id IN ({', '.join('?' for _ in ids)})",
            [*params, *ids],
        )
        return int(present[0]) if present else 0


__all__ = ["DuckDbGameRepository"]
