"""
Pytest fixtures for Backend Redeem tests.

Uses a temporary SQLite DB for code storage and httpx.MockTransport in place of
the Solana RPC provider.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

import httpx
import pytest

from backend_redeem.config import Settings
from backend_redeem.config.env import DEFAULT_PDA_ADDRESS
from backend_redeem.txstats import SignatureFetcher

PDA_ADDRESS = DEFAULT_PDA_ADDRESS
RPC_URL = "https://devnet.helius-rpc.com/?api-key=test-key"


def _make_page(size: int, *, page: int = 1, block_time: int | None = 1_700_000_000) -> list[dict[str, Any]]:
    """One getSignaturesForAddress result page with unique signatures."""
    return [
        {"signature": f"sig-{page}-{i}", "slot": 1000 + i, "err": None, "blockTime": block_time}
        for i in range(size)
    ]


class FakeRpc:
    """
    Serves pre-built result pages in order, one per request, and records each
    JSON-RPC body. fail_on=N makes the Nth request raise a transport error.
    """

    def __init__(self, pages: list[Any], *, fail_on: int | None = None) -> None:
        self.pages = list(pages)
        self.fail_on = fail_on
        self.calls: list[dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.calls.append(body)
        n = len(self.calls)
        if self.fail_on == n:
            raise httpx.ConnectError("connection refused", request=request)
        page = self.pages[n - 1] if n - 1 < len(self.pages) else []
        if isinstance(page, httpx.Response):
            return page
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": page})

    def fetcher(self, **kwargs: Any) -> SignatureFetcher:
        client = httpx.Client(transport=httpx.MockTransport(self.handler))
        return SignatureFetcher(RPC_URL, client=client, **kwargs)


@pytest.fixture
def make_page():
    """Factory: make_page(size, page=1, block_time=...) -> result list."""
    return _make_page


@pytest.fixture
def fake_rpc():
    """Factory: fake_rpc(pages, fail_on=None) -> FakeRpc."""
    return FakeRpc


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_host="127.0.0.1",
        api_port=3001,
        cors_origins=("*",),
        solana_network="devnet",
        rpc_url=None,
        pda_address=PDA_ADDRESS,
        refresh_interval_sec=3600.0,
        request_timeout_sec=5.0,
        log_level="info",
    )


@pytest.fixture
def codes_db(tmp_path, monkeypatch):
    """
    Point code storage at a temporary SQLite DB and init tables.
    Resets engine cache so each test gets a fresh DB. Unset DATABASE_URL so we use SQLite.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_CONNECTION_STRING", raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "redeem.db"))

    import backend_redeem.database.codes as db

    db.reset_engine_for_test()
    db.init_db()
    yield db
    db.reset_engine_for_test()


@pytest.fixture
def make_client(codes_db, settings):
    """Factory: make_client(fetcher=None, **settings_overrides) -> TestClient with lifespan running."""
    from fastapi.testclient import TestClient

    from backend_redeem.api_server.server import create_app

    clients: list[TestClient] = []

    def _make(fetcher: SignatureFetcher | None = None, **overrides: Any) -> TestClient:
        app = create_app(dataclasses.replace(settings, **overrides), fetcher=fetcher)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)
