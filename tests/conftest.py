"""Shared fixtures: route httpx traffic to in-process handlers."""

from unittest.mock import patch

import httpx
import pytest

_RealClient = httpx.Client


class MockHTTP:
    """Records requests and answers them with a configurable handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = lambda request: httpx.Response(404)

    def respond(self, handler) -> None:
        self._handler = handler

    def respond_json(self, payload, status_code: int = 200) -> None:
        self._handler = lambda request: httpx.Response(status_code, json=payload)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture
def mock_http():
    """Every httpx.Client created while active uses a MockTransport."""
    http = MockHTTP()

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(http)
        return _RealClient(*args, **kwargs)

    with patch("httpx.Client", side_effect=factory):
        yield http
