"""The `connect` command group: manage and verify named ClickHouse connections."""

from __future__ import annotations

import asyncio

import click

from chlens.adapters._base import ConnectionCredentials, DriverError
from chlens.cli._shared import make_driver, parse_conn, parse_key_values
from chlens.connections import list_connections, remove_connection, save_connection

_SECRET_KEYS = {"password"}


def _mask_secrets(key: str, value: str) -> str:
    return "****" if key in _SECRET_KEYS and value else value


@click.group()
def connect() -> None:
    """Manage named connections (~/.chlens/connections.toml)."""


@connect.command("add")
@click.argument("name")
@click.argument("params", nargs=-1, required=True)
def connect_add(name: str, params: tuple[str, ...]) -> None:
    """Add a named connection.

    \b
    Examples:
      chlens connect add local host=localhost port=8123 database=default
      chlens connect add prod host=ch.internal port=8443 protocol=https user=reader password=s3cret
    """
    parsed = parse_key_values(params, param_hint="PARAMS")
    try:
        path = save_connection(name, parsed)
    except DriverError as e:
        raise click.BadParameter(str(e), param_hint="PARAMS") from e
    click.echo(f"Saved connection '{name}' to {path}")


@connect.command("list")
def connect_list() -> None:
    """List all named connections."""
    connections = list_connections()
    if not connections:
        click.echo("No connections configured.")
        click.echo("Add one: chlens connect add <name> host=<host> database=<db>")
        return

    for name, entry in connections.items():
        param_str = ", ".join(
            f"{k}={_mask_secrets(k, str(v))}" for k, v in entry.items()
        )
        click.echo(f"  {name}: {param_str}")


@connect.command("remove")
@click.argument("name")
def connect_remove(name: str) -> None:
    """Remove a named connection."""
    if not remove_connection(name):
        click.echo(f"Connection '{name}' not found.", err=True)
        raise SystemExit(1)
    click.echo(f"Removed connection '{name}'.")


async def _test(credentials: ConnectionCredentials) -> None:
    await make_driver(credentials).test_connection()


@connect.command("test")
@click.argument("conn")
def connect_test(conn: str) -> None:
    """Check that CONN is reachable and its database exists."""
    credentials = parse_conn(conn)
    try:
        asyncio.run(_test(credentials))
    except DriverError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from None
    click.echo(f"Connection '{credentials.name}' OK ({credentials.base_url}/{credentials.database})")
