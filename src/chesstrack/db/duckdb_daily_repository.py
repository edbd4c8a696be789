"""DuckDB repository for daily aggregate rows."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date

import duckdb

from chesstrack.db.query_helpers import column_list, count_rows, rows_to_dicts
from chesstrack.models.rows import DailyStatRow
from chesstrack.ports.repositories import DailyRepository

_FIELDS = ("date", "format", "wins", "losses", "draws", "duration_seconds", "rating")
_SELECT = f"SELECT {column_list(_FIELDS)} FROM daily_stats"  # noqa: S608
_ORDER = 'ORDER BY "date", "format"'


class DuckDbDailyRepository(DailyRepository):
    """Persist one row per date and format."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def append(self, rows: Iterable[DailyStatRow]) -> int:
        rows_list = list(rows)
        if not rows_list:
            return 0
        self._conn.executemany(
            f"INSERT INTO daily_stats ({column_list(_FIELDS)}) "  # noqa: S608
            f"VALUES ({', '.join('?' for _ in _FIELDS)})",
            [tuple(getattr(row, name) for name in _FIELDS) for row in rows_list],
        )
        return len(rows_list)

    def scan(self) -> Iterator[DailyStatRow]:
        result = self._conn.execute(f"{_SELECT} {_ORDER}")
        for record in rows_to_dicts(result):
            yield DailyStatRow.model_validate(record)

    def last_date(self) -> date | None:
        row = self._conn.execute('SELECT MAX("date") FROM daily_stats').fetchone()
        return row[0] if row else None

    def rows_for_date(self, day: date) -> list[DailyStatRow]:
        result = self._conn.execute(f'{_SELECT} WHERE "date" = ? {_ORDER}', [day])
        return [DailyStatRow.model_validate(record) for record in rows_to_dicts(result)]

    def clear(self, since: date | None = None) -> int:
        before = count_rows(self._conn, "daily_stats")
        if since is None:
            self._conn.execute("DELETE FROM daily_stats")
        else:
            self._conn.execute('DELETE FROM daily_stats WHERE "date" >= ?', [since])
        return before - count_rows(self._conn, "daily_stats")

    def between(self, start: date | None = None, end: date | None = None) -> list[DailyStatRow]:
        """Return rows in ``[start, end]``; open bounds when ``None``."""
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append('"date" >= ?')
            params.append(start)
        if end is not None:
            clauses.append('"date" <= ?')
            params.append(end)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        result = self._conn.execute(f"{_SELECT}{where} {_ORDER}", params)
        return [DailyStatRow.model_validate(record) for record in rows_to_dicts(result)]


__all__ = ["DuckDbDailyRepository"]
