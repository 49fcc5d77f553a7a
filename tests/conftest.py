from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from core.client import UpstreamClient
from core.config import Settings


class RecordingHandler:
    """httpx.MockTransport handler: replies from a route table and records every request.

    Routes map (method, path) to (status, payload).  A str payload is sent as
    plain text, anything else as JSON.
    """

    def __init__(self, routes: dict[tuple[str, str], tuple[int, Any]] | None = None) -> None:
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"error": f"no route for {key}"})
        status, payload = self.routes[key]
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_body(self) -> Any:
        return json.loads(self.last.content)

    def last_query(self) -> dict[str, str]:
        return dict(self.last.url.params)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="sk_test", base_url="https://api.suarify.test")


@pytest.fixture
def make_client(settings: Settings) -> Callable[[Callable[[httpx.Request], httpx.Response]], UpstreamClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> UpstreamClient:
        return UpstreamClient(settings, transport=httpx.MockTransport(handler))

    return _make
