"""CLI fixtures: route every driver the CLI builds to the in-memory client."""

from __future__ import annotations

import pytest


@pytest.fixture
def cli_clients(monkeypatch, client_factory):
    monkeypatch.setattr("chlens.cli._shared.ClickHouseClient", client_factory)
    return client_factory
