"""Schema tree and autocomplete resolution over catalog queries."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import assert_never

from chlens import queries
from chlens.adapters._base import (
    ContextValue,
    Row,
    SchemaRef,
    SearchItem,
    TableRef,
    TreeNode,
)

logger = logging.getLogger(__name__)

CatalogRunner = Callable[[str], Awaitable[list[Row]]]

_RESOURCE_GROUPS: tuple[tuple[str, ContextValue], ...] = (
    ("Tables", ContextValue.TABLE),
    ("Views", ContextValue.VIEW),
)


class SchemaExplorer:
    """Maps tree-node and search requests onto catalog queries.

    Stateless between calls: every request runs its catalog query afresh and
    builds new nodes.
    """

    def __init__(self, run_catalog_query: CatalogRunner, *, default_database: str) -> None:
        self._run = run_catalog_query
        self._default_database = default_database

    async def children(self, item: TreeNode, parent: TreeNode | None = None) -> list[TreeNode]:
        kind = item.type
        if kind is ContextValue.CONNECTION or kind is ContextValue.CONNECTED_CONNECTION:
            return self._resource_groups(item)
        if kind is ContextValue.TABLE or kind is ContextValue.VIEW:
            return await self._columns(item, parent)
        if kind is ContextValue.RESOURCE_GROUP:
            return await self._group_children(item, parent)
        if kind is ContextValue.COLUMN:
            return []
        assert_never(kind)

    async def search(
        self,
        item_type: ContextValue,
        search: str,
        extra_params: dict[str, object] | None = None,
    ) -> list[SearchItem]:
        if item_type is ContextValue.TABLE:
            sql = queries.search_tables(search)
        elif item_type is ContextValue.COLUMN:
            scope = _column_scope(extra_params or {})
            if scope is None:
                return []
            sql = queries.search_columns(search, **scope)  # type: ignore[arg-type]
        else:
            return []

        rows = await self._run(sql)
        return [
            SearchItem(type=item_type, label=str(row.get("label", "")), fields=row)
            for row in rows
        ]

    # -- Internals -------------------------------------------------------------

    def _schema_for(self, item: TreeNode, parent: TreeNode | None) -> str:
        if item.schema:
            return item.schema
        if parent is not None and parent.schema:
            return parent.schema
        return self._default_database

    def _resource_groups(self, item: TreeNode) -> list[TreeNode]:
        schema = item.schema or self._default_database
        return [
            TreeNode(
                type=ContextValue.RESOURCE_GROUP,
                label=label,
                icon_id="folder",
                child_type=child_type,
                parent=item,
                schema=schema,
            )
            for label, child_type in _RESOURCE_GROUPS
        ]

    async def _group_children(self, item: TreeNode, parent: TreeNode | None) -> list[TreeNode]:
        ref = SchemaRef(database=self._schema_for(item, parent))
        kind = item.child_type
        if kind is ContextValue.TABLE:
            sql = queries.fetch_tables(ref)
        elif kind is ContextValue.VIEW:
            sql = queries.fetch_views(ref)
        else:
            return []

        rows = await self._run(sql)
        return _to_nodes(
            rows,
            kind=kind,
            parent=item,
            default_schema=ref.database,
            child_type=ContextValue.COLUMN,
        )

    async def _columns(self, item: TreeNode, parent: TreeNode | None) -> list[TreeNode]:
        ref = TableRef(
            database=self._schema_for(item, parent),
            table=item.table or item.label,
        )
        rows = await self._run(queries.fetch_columns(ref))
        return _to_nodes(
            rows,
            kind=ContextValue.COLUMN,
            parent=item,
            default_schema=ref.database,
            default_table=ref.table,
        )


_COLUMN_SCOPE_KEYS = ("table", "schema", "limit")


def _column_scope(extra_params: dict[str, object]) -> dict[str, object] | None:
    """Reduce host search params to what search_columns accepts.

    A ``tables`` list (``[{"label": ..., "database": ...}]``) scopes to its
    first entry. Unknown keys are dropped. Returns None for an unusable limit.
    """
    scope: dict[str, object] = {}
    tables = extra_params.get("tables")
    if isinstance(tables, list) and tables and isinstance(tables[0], dict):
        first = tables[0]
        if first.get("label"):
            scope["table"] = str(first["label"])
        if first.get("database"):
            scope["schema"] = str(first["database"])

    for key in _COLUMN_SCOPE_KEYS:
        value = extra_params.get(key)
        if value is not None:
            scope[key] = value if key == "limit" else str(value)

    ignored = sorted(set(extra_params) - set(_COLUMN_SCOPE_KEYS) - {"tables"})
    if ignored:
        logger.debug("ignoring column search params: %s", ", ".join(ignored))

    if "limit" in scope:
        limit = scope["limit"]
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            logger.debug("ignoring column search with unusable limit %r", limit)
            return None
    return scope


def _to_nodes(
    rows: list[Row],
    *,
    kind: ContextValue,
    parent: TreeNode,
    default_schema: str,
    default_table: str | None = None,
    child_type: ContextValue | None = None,
) -> list[TreeNode]:
    """Reshape catalog rows into child nodes, skipping rows without a label."""
    nodes: list[TreeNode] = []
    for row in rows:
        label = row.get("label")
        if label is None or label == "":
            logger.debug("skipping catalog row without label: %r", row)
            continue
        label = str(label)
        if kind is ContextValue.COLUMN:
            table = str(row.get("table") or default_table)
        else:
            table = label
        detail = row.get("detail")
        nodes.append(
            TreeNode(
                type=kind,
                label=label,
                icon_id=kind.value,
                child_type=child_type,
                parent=parent,
                schema=str(row.get("schema") or default_schema),
                table=table,
                detail=str(detail) if detail is not None else None,
                fields=row,
            )
        )
    return nodes
