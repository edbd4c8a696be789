"""Port interface for surfacing non-fatal, per-record problems."""

# pylint: disable=too-few-public-methods

from __future__ import annotations

from typing import Protocol

from chesstrack.errors import IssueKind


class ErrorReporter(Protocol):
    """Receive typed issues; the caller decides whether a batch continues."""

    def report_issue(
        self,
        kind: IssueKind,
        reason: str,
        *,
        game_id: str | None = None,
        url: str | None = None,
    ) -> None:
        """Record one non-fatal issue."""
