"""Error reporter that logs issues and keeps them for run summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chesstrack.errors import IngestionIssue, IssueKind
from chesstrack.ports.error_reporter import ErrorReporter
from chesstrack.utils.logger import get_logger


@dataclass
class LoggingErrorReporter(ErrorReporter):
    """Log each issue at WARNING and collect it."""

    logger: logging.Logger = field(default_factory=lambda: get_logger("issues"))
    issues: list[IngestionIssue] = field(default_factory=list)

    def report_issue(
        self,
        kind: IssueKind,
        reason: str,
        *,
        game_id: str | None = None,
        url: str | None = None,
    ) -> None:
        issue = IngestionIssue(kind=kind, reason=reason, game_id=game_id, url=url)
        self.issues.append(issue)
        self.logger.warning(
            "Skipped %s (%s): %s",
            game_id or url or "<unknown game>",
            kind,
            reason,
        )

    def counts(self) -> dict[str, int]:
        """Return issue counts keyed by kind."""
        totals: dict[str, int] = {}
        for issue in self.issues:
            totals[str(issue.kind)] = totals.get(str(issue.kind), 0) + 1
        return totals
