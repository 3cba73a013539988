"""CLI tests for `chlens schema` and `chlens search`."""

from __future__ import annotations

import json

from click.testing import CliRunner

from chlens import queries
from chlens.adapters._base import ClickHouseError, SchemaRef, TableRef
from chlens.cli import main

CONN = "host=ch.local,database=analytics"

TABLE_ROWS = [
    {"label": "events", "type": "table", "schema": "analytics", "engine": "MergeTree",
     "detail": "MergeTree"},
    {"label": "users", "type": "table", "schema": "analytics", "engine": "ReplacingMergeTree",
     "detail": "ReplacingMergeTree"},
]

COLUMN_ROWS = [
    {"label": "id", "type": "column", "schema": "analytics", "table": "users",
     "data_type": "UInt64", "detail": "UInt64"},
    {"label": "email", "type": "column", "schema": "analytics", "table": "users",
     "data_type": "Nullable(String)", "detail": "Nullable(String)"},
]


class TestSchemaLs:
    def test_resource_groups(self, cli_clients) -> None:
        result = CliRunner().invoke(main, ["schema", "ls", "--conn", CONN])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [i["label"] for i in data["items"]] == ["Tables", "Views"]
        assert [i["child_type"] for i in data["items"]] == ["table", "view"]
        assert cli_clients.executed == []

    def test_list_tables_json(self, cli_clients) -> None:
        cli_clients.respond("FROM system.tables", TABLE_ROWS)
        result = CliRunner().invoke(main, ["schema", "ls", "tables", "--conn", CONN])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [i["label"] for i in data["items"]] == ["events", "users"]
        assert cli_clients.executed == [queries.fetch_tables(SchemaRef("analytics"))]

    def test_list_views_other_database(self, cli_clients) -> None:
        result = CliRunner().invoke(main, [
            "schema", "ls", "views", "--conn", CONN, "--database", "shop", "--format", "text",
        ])
        assert result.exit_code == 0
        assert "No views in 'shop'." in result.output
        assert cli_clients.executed == [queries.fetch_views(SchemaRef("shop"))]

    def test_list_tables_text(self, cli_clients) -> None:
        cli_clients.respond("FROM system.tables", TABLE_ROWS)
        result = CliRunner().invoke(main, [
            "schema", "ls", "tables", "--conn", CONN, "--format", "text",
        ])
        assert result.exit_code == 0
        assert "users  ReplacingMergeTree" in result.output


class TestSchemaShow:
    def test_show_columns(self, cli_clients) -> None:
        cli_clients.respond("FROM system.columns", COLUMN_ROWS)
        result = CliRunner().invoke(main, ["schema", "show", "users", "--conn", CONN])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [c["label"] for c in data["items"]] == ["id", "email"]
        assert data["items"][1]["detail"] == "Nullable(String)"
        assert cli_clients.executed == [queries.fetch_columns(TableRef("analytics", "users"))]

    def test_show_qualified_table(self, cli_clients) -> None:
        result = CliRunner().invoke(main, ["schema", "show", "shop.orders", "--conn", CONN])
        assert cli_clients.executed == [queries.fetch_columns(TableRef("shop", "orders"))]
        assert result.exit_code == 1

    def test_show_failed_catalog_query(self, cli_clients) -> None:
        cli_clients.respond("FROM system.columns", ClickHouseError("Code: 497. Not enough privileges"))
        result = CliRunner().invoke(main, ["schema", "show", "users", "--conn", CONN])
        assert result.exit_code == 1
        assert "no columns found for 'users'" in result.output


class TestSearch:
    def test_search_tables(self, cli_clients) -> None:
        cli_clients.respond("FROM system.tables", TABLE_ROWS[:1])
        result = CliRunner().invoke(main, ["search", "table", "ev", "--conn", CONN])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["items"][0]["label"] == "events"
        assert cli_clients.executed == [queries.search_tables("ev")]

    def test_search_columns_scoped(self, cli_clients) -> None:
        cli_clients.respond("FROM system.columns", COLUMN_ROWS[1:])
        result = CliRunner().invoke(main, [
            "search", "column", "mail", "--table", "users", "--conn", CONN, "--format", "text",
        ])
        assert result.exit_code == 0
        assert "analytics.users.email" in result.output
        assert cli_clients.executed == [queries.search_columns("mail", table="users")]

    def test_table_search_rejects_column_scope(self, cli_clients) -> None:
        result = CliRunner().invoke(main, [
            "search", "table", "ev", "--table", "users", "--conn", CONN,
        ])
        assert result.exit_code == 2
        assert cli_clients.executed == []
