"""Catalog queries over ClickHouse system tables.

Pure builders: descriptor in, SQL text out. String values are rendered as
ClickHouse literals by sqlglot, so names containing quotes stay inert.
"""

from __future__ import annotations

from sqlglot import exp

from chlens.adapters._base import SchemaRef, TableRef

DIALECT = "clickhouse"
DEFAULT_SEARCH_LIMIT = 100

VIEW_ENGINES = ("View", "MaterializedView", "LiveView", "WindowView")
SYSTEM_DATABASES = ("system", "information_schema", "INFORMATION_SCHEMA")


def _literal(value: str) -> str:
    return exp.Literal.string(value).sql(dialect=DIALECT)


def _literal_list(values: tuple[str, ...]) -> str:
    return ", ".join(_literal(v) for v in values)


def _contains_pattern(search: str) -> str:
    # LIKE wildcards inside `search` stay active.
    return _literal(f"%{search}%")


def _limit(limit: int) -> int:
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
    return limit


def _fetch_relations(schema: SchemaRef, *, kind: str, views: bool) -> str:
    op = "IN" if views else "NOT IN"
    return (
        "SELECT name AS label, "
        f"{_literal(kind)} AS type, "
        "database AS schema, "
        "engine, "
        "engine AS detail "
        "FROM system.tables "
        f"WHERE database = {_literal(schema.database)} "
        f"AND engine {op} ({_literal_list(VIEW_ENGINES)}) "
        "ORDER BY name"
    )


def fetch_tables(schema: SchemaRef) -> str:
    return _fetch_relations(schema, kind="table", views=False)


def fetch_views(schema: SchemaRef) -> str:
    return _fetch_relations(schema, kind="view", views=True)


def fetch_columns(table: TableRef) -> str:
    return (
        "SELECT name AS label, "
        "'column' AS type, "
        "database AS schema, "
        "table, "
        "type AS data_type, "
        "startsWith(type, 'Nullable(') AS is_nullable, "
        "is_in_primary_key AS is_pk, "
        "default_kind, "
        "comment, "
        "type AS detail "
        "FROM system.columns "
        f"WHERE database = {_literal(table.database)} "
        f"AND table = {_literal(table.table)} "
        "ORDER BY position"
    )


def search_tables(search: str, *, limit: int = DEFAULT_SEARCH_LIMIT) -> str:
    return (
        "SELECT name AS label, "
        "'table' AS type, "
        "database AS schema, "
        "engine AS detail "
        "FROM system.tables "
        f"WHERE database NOT IN ({_literal_list(SYSTEM_DATABASES)}) "
        f"AND name ILIKE {_contains_pattern(search)} "
        "ORDER BY database, name "
        f"LIMIT {_limit(limit)}"
    )


def search_columns(
    search: str,
    *,
    table: str | None = None,
    schema: str | None = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> str:
    """Columns whose name contains `search`, optionally within one table/database."""
    conditions = [f"name ILIKE {_contains_pattern(search)}"]
    if schema is not None:
        conditions.append(f"database = {_literal(schema)}")
    else:
        conditions.append(f"database NOT IN ({_literal_list(SYSTEM_DATABASES)})")
    if table is not None:
        conditions.append(f"table = {_literal(table)}")

    return (
        "SELECT name AS label, "
        "'column' AS type, "
        "database AS schema, "
        "table, "
        "type AS data_type, "
        "type AS detail "
        "FROM system.columns "
        f"WHERE {' AND '.join(conditions)} "
        "ORDER BY database, table, position "
        f"LIMIT {_limit(limit)}"
    )


def probe_database(database: str) -> str:
    """Connectivity probe: one row back iff the configured database exists."""
    return f"SHOW DATABASES LIKE {_literal(database)}"
