"""Root conftest — shared fixtures and an in-memory ClickHouse client."""

from __future__ import annotations

import pytest

from chlens.adapters._base import ConnectionCredentials
from chlens.driver import ClickHouseDriver


class FakeClickHouseClient:
    """Stands in for ClickHouseClient. Outcomes are matched by SQL substring."""

    def __init__(self, credentials: ConnectionCredentials, responses: list) -> None:
        self.credentials = credentials
        self._responses = responses
        self.executed: list[str] = []
        self.settings: list[dict[str, str] | None] = []
        self.closed = False

    async def execute(self, sql, *, settings=None):
        self.executed.append(sql)
        self.settings.append(settings)
        for needle, outcome in self._responses:
            if needle in sql:
                if isinstance(outcome, BaseException):
                    raise outcome
                return outcome
        return []

    async def aclose(self) -> None:
        self.closed = True


class FakeClientFactory:
    """Client factory that records every client it builds."""

    def __init__(self) -> None:
        self.responses: list = []
        self.clients: list[FakeClickHouseClient] = []

    def respond(self, needle: str, outcome) -> None:
        self.responses.append((needle, outcome))

    def __call__(self, credentials: ConnectionCredentials) -> FakeClickHouseClient:
        client = FakeClickHouseClient(credentials, self.responses)
        self.clients.append(client)
        return client

    @property
    def executed(self) -> list[str]:
        return [sql for c in self.clients for sql in c.executed]


@pytest.fixture
def credentials() -> ConnectionCredentials:
    return ConnectionCredentials(name="test", host="ch.local", database="analytics")


@pytest.fixture
def client_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def driver(credentials, client_factory) -> ClickHouseDriver:
    return ClickHouseDriver(credentials, client_factory=client_factory)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    """Keep connection files and query logs out of the real home directory."""
    monkeypatch.setattr("chlens.connections._CONNECTIONS_FILE", tmp_path / "connections.toml")
    monkeypatch.setattr("chlens.querylog._LOG_ROOT", tmp_path / "logs")
