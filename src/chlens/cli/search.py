"""The `search` command: name lookup for tables and columns."""

from __future__ import annotations

import asyncio

import click

from chlens.adapters._base import ConnectionCredentials, ContextValue, SearchItem
from chlens.cli._output import format_search
from chlens.cli._shared import CONN_HELP, make_driver, parse_conn

_KINDS = {"table": ContextValue.TABLE, "column": ContextValue.COLUMN}


async def _search(
    credentials: ConnectionCredentials,
    item_type: ContextValue,
    fragment: str,
    extra_params: dict[str, object],
) -> list[SearchItem]:
    driver = make_driver(credentials)
    try:
        return await driver.search_items(item_type, fragment, extra_params)
    finally:
        await driver.close()


@click.command()
@click.argument("kind", type=click.Choice(sorted(_KINDS)))
@click.argument("fragment")
@click.option("--conn", required=True, envvar="CHLENS_CONN", help=CONN_HELP)
@click.option("--table", default=None, help="Restrict column search to one table.")
@click.option("--database", default=None, help="Restrict column search to one database.")
@click.option("--format", "output_format", type=click.Choice(["json", "text"]), default="json")
def search(
    kind: str,
    fragment: str,
    conn: str,
    table: str | None,
    database: str | None,
    output_format: str,
) -> None:
    """Find tables or columns whose name contains FRAGMENT."""
    credentials = parse_conn(conn)
    item_type = _KINDS[kind]

    extra: dict[str, object] = {}
    if item_type is ContextValue.COLUMN:
        if table:
            extra["table"] = table
        if database:
            extra["schema"] = database
    elif table or database:
        raise click.UsageError("--table/--database only apply to column search.")

    items = asyncio.run(_search(credentials, item_type, fragment, extra))
    if output_format == "text" and not items:
        click.echo(f"No {kind}s matching '{fragment}'.")
        return
    click.echo(format_search(items, output_format=output_format))
