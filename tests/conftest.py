"""Root conftest for the acmedns-client test suite."""

from __future__ import annotations

import os
from collections.abc import Callable

import httpx
import pytest

from acmedns_client import AcmeDnsApiClient, Credentials

BASE_URL = "https://auth.example.org/"
TOKEN = "a" * 43


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Drop any ACME_DNS_* variable and run from an empty directory (no .env)."""
    for key in list(os.environ):
        if key.upper().startswith("ACME_DNS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Mock transport
# ---------------------------------------------------------------------------


class MockServer:
    """Records every request and answers with a per-path handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def route(self, method: str, path: str, response: httpx.Response | Callable[[httpx.Request], httpx.Response]) -> None:
        if isinstance(response, httpx.Response):
            fixed = response
            self._routes[(method, path)] = lambda _request: fixed
        else:
            self._routes[(method, path)] = response

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture()
def server() -> MockServer:
    return MockServer()


@pytest.fixture()
def client(server: MockServer) -> AcmeDnsApiClient:
    return AcmeDnsApiClient(BASE_URL, transport=server.transport)


@pytest.fixture()
def credentials() -> Credentials:
    return Credentials(
        username="u1",
        password="p1",
        subdomain="sub1",
        fulldomain="sub1.acme-dns.io",
        allowfrom=[],
    )


@pytest.fixture()
def registration_payload() -> dict:
    return {
        "username": "u1",
        "password": "p1",
        "subdomain": "sub1",
        "fulldomain": "sub1.acme-dns.io",
        "allowfrom": [],
    }
