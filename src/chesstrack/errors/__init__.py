"""Custom error types and non-fatal issue records used in chesstrack."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

import requests

from chesstrack.utils.now import Now


class ArchiveFetchError(requests.HTTPError):
    """Non-success HTTP status from the remote archive API.

    Raised for anything other than 2xx or 304. Fatal for the current sync.
    """

    def __init__(
        self,
        url: str,
        status_code: int,
        *,
        reason: str | None = None,
        response: requests.Response | None = None,
    ) -> None:
        message = f"HTTP {status_code} fetching {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, response=response)
        self.url = url
        self.status_code = status_code


class GameNormalizationError(ValueError):
    """A raw game record cannot be turned into a normalized game."""

    def __init__(self, kind: IssueKind, reason: str, *, url: str | None = None) -> None:
        super().__init__(reason)
        self.kind = kind
        self.reason = reason
        self.url = url


class IssueKind(StrEnum):
    """Classification of non-fatal problems met while processing a batch."""

    VALIDATION = "validation"
    CONSISTENCY = "consistency"
    PARSE = "parse"
    TRANSPORT = "transport"


@dataclass(frozen=True, slots=True)
class IngestionIssue:
    """A non-fatal problem tied to a single record."""

    kind: IssueKind
    reason: str
    game_id: str | None = None
    url: str | None = None
    reported_at: datetime = field(default_factory=Now.as_datetime, compare=False)

    def as_dict(self) -> dict[str, object]:
        return {
            "kind": str(self.kind),
            "reason": self.reason,
            "game_id": self.game_id,
            "url": self.url,
        }


__all__ = [
    "ArchiveFetchError",
    "GameNormalizationError",
    "IngestionIssue",
    "IssueKind",
]
