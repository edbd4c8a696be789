"""Unit of work port abstraction."""

from __future__ import annotations

from typing import Protocol


class UnitOfWork(Protocol):
    """Define the transaction boundary for store writes."""

    def begin(self) -> None:
        """Start a unit of work."""

    def commit(self) -> None:
        """Commit the active unit of work."""

    def rollback(self) -> None:
        """Roll back the active unit of work."""
