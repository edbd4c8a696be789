"""Repository port interfaces for the Games, Derived, Daily, and callback collections."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date
from typing import Protocol

from chesstrack.models.rows import CallbackRow, DailyStatRow, DerivedRow, GameRow
from chesstrack.ports.unit_of_work import UnitOfWork


class GameRepository(Protocol):
    """Append-mostly storage of normalized game rows."""

    def append(self, rows: Iterable[GameRow]) -> int:
        """Append rows at the end and return the appended count."""

    def scan(self) -> Iterator[GameRow]:
        """Yield every row in store order."""

    def find_by_id(self, game_id: str) -> GameRow | None:
        """Return the first row with ``game_id``."""

    def game_ids(self) -> set[str]:
        """Return every stored game identifier."""

    def remove_duplicates(self) -> int:
        """Drop later rows repeating an earlier ``game_id``; return removed count."""

    def update_markers(
        self,
        game_ids: Iterable[str],
        *,
        analyzed: bool | None = None,
        callback_fetched: bool | None = None,
    ) -> int:
        """Set marker flags on the given games and return the touched count."""


class DerivedRepository(Protocol):
    """Storage of per-game derived notation and normalization fields."""

    def append(self, rows: Iterable[DerivedRow]) -> int:
        """Append rows and return the appended count."""

    def scan(self) -> Iterator[DerivedRow]:
        """Yield every derived row in store order."""

    def find_by_id(self, game_id: str) -> DerivedRow | None:
        """Return the derived row for ``game_id``."""

    def durations(self) -> dict[str, float | None]:
        """Return ``{game_id: duration_seconds}``."""

    def remove_duplicates(self) -> int:
        """Drop later rows repeating an earlier ``game_id``; return removed count."""


class DailyRepository(Protocol):
    """Storage of per-date, per-format aggregates."""

    def append(self, rows: Iterable[DailyStatRow]) -> int:
        """Append rows and return the appended count."""

    def scan(self) -> Iterator[DailyStatRow]:
        """Yield rows ordered by date and format."""

    def last_date(self) -> date | None:
        """Return the most recent aggregated date."""

    def rows_for_date(self, day: date) -> list[DailyStatRow]:
        """Return the rows of one date."""

    def clear(self, since: date | None = None) -> int:
        """Delete rows dated on or after ``since`` (all rows when ``None``); return the count."""


class CallbackRepository(Protocol):
    """Storage of callback enrichment details."""

    def append(self, rows: Iterable[CallbackRow]) -> int:
        """Append rows and return the appended count."""

    def find_by_id(self, game_id: str) -> CallbackRow | None:
        """Return the callback row for ``game_id``."""


class GameStore(UnitOfWork, Protocol):
    """The four collections handled together by ingestion and aggregation.

    Writes spanning several collections run inside one unit of work.
    """

    games: GameRepository
    derived: DerivedRepository
    daily: DailyRepository
    callbacks: CallbackRepository
