from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import requests


@dataclass(slots=True)
class FakeResponse:
    status_code: int = 200
    json_data: dict | None = None
    headers: dict = field(default_factory=dict)

    def json(self) -> dict:
        if self.json_data is None:
            raise requests.JSONDecodeError("Expecting value", "", 0)
        return self.json_data


def make_fake_get(
    responses: Iterable[FakeResponse],
    *,
    captured_urls: list[str] | None = None,
    captured_headers: list[dict] | None = None,
) -> Callable[..., FakeResponse]:
    queue = list(responses)

    def _fake_get(url: str, *_args, **kwargs) -> FakeResponse:
        if captured_urls is not None:
            captured_urls.append(url)
        if captured_headers is not None:
            captured_headers.append(dict(kwargs.get("headers") or {}))
        return queue.pop(0)

    return _fake_get


def routed_get(
    routes: dict[str, FakeResponse | list[FakeResponse]],
    *,
    captured_urls: list[str] | None = None,
    captured_headers: list[dict] | None = None,
) -> Callable[..., FakeResponse]:
    """Answer by URL; a list answers successive calls to the same URL."""

    def _fake_get(url: str, *_args, **kwargs) -> FakeResponse:
        if captured_urls is not None:
            captured_urls.append(url)
        if captured_headers is not None:
            captured_headers.append(dict(kwargs.get("headers") or {}))
        if url not in routes:
            return FakeResponse(status_code=404, json_data={"message": "not found"})
        answer = routes[url]
        if isinstance(answer, list):
            return answer.pop(0)
        return answer

    return _fake_get
