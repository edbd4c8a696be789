"""Run a block of store writes as one unit of work."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from chesstrack.ports.unit_of_work import UnitOfWork


@contextmanager
def unit_of_work(uow: UnitOfWork) -> Iterator[None]:
    """Commit the block's writes together, or roll all of them back on error."""
    uow.begin()
    try:
        yield
    except BaseException:
        uow.rollback()
        raise
    uow.commit()


__all__ = ["unit_of_work"]
