"""The `schema` command: drill-down browsing (Tables/Views → tables → columns)."""

from __future__ import annotations

import asyncio
import dataclasses

import click

from chlens.adapters._base import ConnectionCredentials, ContextValue, TreeNode
from chlens.cli._output import format_nodes
from chlens.cli._shared import CONN_HELP, make_driver, parse_conn

_GROUPS = {"tables": ContextValue.TABLE, "views": ContextValue.VIEW}


async def _list_children(credentials: ConnectionCredentials, group: str | None) -> list[TreeNode]:
    driver = make_driver(credentials)
    try:
        nodes = await driver.get_children_for_item(driver.root_node())
        if group is None:
            return nodes
        child_type = _GROUPS[group]
        group_node = next(n for n in nodes if n.child_type is child_type)
        return await driver.get_children_for_item(group_node)
    finally:
        await driver.close()


async def _list_columns(
    credentials: ConnectionCredentials, table: str, database: str | None
) -> list[TreeNode]:
    driver = make_driver(credentials)
    try:
        node = TreeNode(
            type=ContextValue.TABLE,
            label=table,
            table=table,
            schema=database or credentials.database,
        )
        return await driver.get_children_for_item(node)
    finally:
        await driver.close()


@click.group("schema")
def schema() -> None:
    """Browse tables, views and columns."""


@schema.command("ls")
@click.argument("group", required=False, default=None, type=click.Choice(sorted(_GROUPS)))
@click.option("--conn", required=True, envvar="CHLENS_CONN", help=CONN_HELP)
@click.option("--database", default=None, help="Database to browse (default: the connection's).")
@click.option("--format", "output_format", type=click.Choice(["json", "text"]), default="json")
def ls(group: str | None, conn: str, database: str | None, output_format: str) -> None:
    """List the resource groups, or the tables/views in one of them."""
    credentials = parse_conn(conn)
    if database:
        credentials = dataclasses.replace(credentials, database=database)

    nodes = asyncio.run(_list_children(credentials, group))
    if output_format == "text" and not nodes:
        click.echo(f"No {group or 'items'} in '{credentials.database}'.")
        return
    click.echo(format_nodes(nodes, output_format=output_format))


@schema.command("show")
@click.argument("table_ref")
@click.option("--conn", required=True, envvar="CHLENS_CONN", help=CONN_HELP)
@click.option("--format", "output_format", type=click.Choice(["json", "text"]), default="json")
def show(table_ref: str, conn: str, output_format: str) -> None:
    """Show columns of a table. TABLE_REF is database.table or just table."""
    credentials = parse_conn(conn)

    if "." in table_ref:
        database, table = table_ref.split(".", 1)
    else:
        database, table = None, table_ref

    columns = asyncio.run(_list_columns(credentials, table, database))
    if not columns:
        # Missing table and failed catalog query look the same from here.
        click.echo(f"error: no columns found for '{table_ref}'", err=True)
        raise SystemExit(1)
    click.echo(format_nodes(columns, output_format=output_format))
