"""ClickHouse driver — connection lifecycle, query execution, schema explorer."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from chlens import queries
from chlens.adapters._base import (
    ConnectionCredentials,
    ContextValue,
    ResultEnvelope,
    Row,
    SearchItem,
    TreeNode,
    VerificationError,
)
from chlens.adapters.clickhouse import ClickHouseClient
from chlens.explorer import SchemaExplorer
from chlens.normalize import resolve_error, resolve_query_results

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ConnectionCredentials], ClickHouseClient]


class ClickHouseDriver:
    """Driver for one ClickHouse connection.

    Holds at most one client handle. The handle is created lazily by ``open()``
    (or by any operation needing it) and released by ``close()``.
    """

    def __init__(
        self,
        credentials: ConnectionCredentials,
        *,
        client_factory: ClientFactory = ClickHouseClient,
    ) -> None:
        self.credentials = credentials
        self._client_factory = client_factory
        self._client: ClickHouseClient | None = None
        self.explorer = SchemaExplorer(
            self.query_results, default_database=credentials.database
        )

    @property
    def connection_id(self) -> str:
        return self.credentials.name

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def open(self) -> ClickHouseClient:
        # No await between the check and the assignment: concurrent callers
        # on one event loop all get the first handle.
        if self._client is not None:
            return self._client
        self._client = self._client_factory(self.credentials)
        logger.debug("opened connection %s to %s", self.connection_id, self.credentials.base_url)
        return self._client

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()
        logger.debug("closed connection %s", self.connection_id)

    async def query(
        self, sql: str, *, settings: dict[str, str] | None = None
    ) -> list[ResultEnvelope]:
        """Execute `sql` and return a one-element list holding its envelope.

        Never raises for execution failures; inspect ``envelope.error``.
        """
        client = await self.open()
        t0 = time.monotonic()
        try:
            rows = await client.execute(sql, settings=settings)
        except Exception as e:
            duration_ms = (time.monotonic() - t0) * 1000
            logger.debug("query failed on %s: %s", self.connection_id, e)
            return [resolve_error(e, sql, conn_id=self.connection_id, duration_ms=duration_ms)]
        duration_ms = (time.monotonic() - t0) * 1000
        return [
            resolve_query_results(
                rows, sql, conn_id=self.connection_id, duration_ms=duration_ms
            )
        ]

    async def query_results(self, sql: str) -> list[Row]:
        """Rows of a catalog query. An errored query yields no rows."""
        envelope = (await self.query(sql))[0]
        if envelope.error is not None:
            logger.warning("catalog query failed on %s: %s", self.connection_id, envelope.error)
        return envelope.rows

    async def test_connection(self) -> None:
        """Open, confirm the configured database exists, close again.

        Raises VerificationError when the probe fails or the database is not
        matched exactly once.
        """
        await self.open()
        database = self.credentials.database
        try:
            found = (await self.query(queries.probe_database(database)))[0]
            if found.error is not None:
                raise VerificationError(f"Cannot get database list: {found.error}")
            if found.row_count != 1:
                raise VerificationError(f"Cannot find {database} database")
        finally:
            await self.close()

    async def get_children_for_item(
        self, item: TreeNode, parent: TreeNode | None = None
    ) -> list[TreeNode]:
        return await self.explorer.children(item, parent)

    async def search_items(
        self,
        item_type: ContextValue,
        search: str,
        extra_params: dict[str, object] | None = None,
    ) -> list[SearchItem]:
        return await self.explorer.search(item_type, search, extra_params)

    async def get_static_completions(self) -> dict[str, object]:
        return {}

    def root_node(self) -> TreeNode:
        """Tree node for this connection, scoped to its configured database."""
        return TreeNode(
            type=ContextValue.CONNECTION,
            label=self.connection_id,
            icon_id="database",
            schema=self.credentials.database,
        )
