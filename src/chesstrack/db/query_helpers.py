"""Shared helpers for DuckDB reads and writes."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

import duckdb


def rows_to_dicts(
    result: duckdb.DuckDBPyConnection | duckdb.DuckDBPyRelation,
) -> list[dict[str, object]]:
    """Return rows as a list of dictionaries."""
    columns = [desc[0] for desc in result.description]
    return [dict(zip(columns, row, strict=True)) for row in result.fetchall()]


def to_db_timestamp(value: datetime | None) -> datetime | None:
    """Return ``value`` as a naive UTC datetime for ``TIMESTAMP`` columns."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.replace(tzinfo=None)


def from_db_timestamp(value: datetime | None) -> datetime | None:
    """Attach UTC to a naive ``TIMESTAMP`` value read back from DuckDB."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def next_row_id(conn: duckdb.DuckDBPyConnection, table: str) -> int:
    row = conn.execute(f"SELECT COALESCE(MAX(row_id), 0) FROM {table}").fetchone()  # noqa: S608
    return int(row[0]) + 1 if row else 1


def count_rows(conn: duckdb.DuckDBPyConnection, table: str) -> int:
    row = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()  # noqa: S608
    return int(row[0]) if row else 0


def remove_duplicate_rows(conn: duckdb.DuckDBPyConnection, table: str) -> int:
    """Keep the lowest ``row_id`` per ``game_id`` in ``table``; return removed count."""
    before = count_rows(conn, table)
    conn.execute(
        f"""
        DELETE FROM {table}
        WHERE row_id NOT IN (
            SELECT MIN(row_id) FROM {table} GROUP BY game_id
        )
        """  # noqa: S608
    )
    return before - count_rows(conn, table)


def column_list(columns: Iterable[str]) -> str:
    """Return a comma-separated list of quoted column identifiers."""
    return ", ".join(f'"{column}"' for column in columns)
