"""Shared helpers for CLI commands."""

from __future__ import annotations

import sys

import click

from chlens.adapters._base import ConnectionCredentials, DriverError
from chlens.adapters.clickhouse import ClickHouseClient
from chlens.connections import get_connection
from chlens.driver import ClickHouseDriver

CONN_HELP = "Connection name or key=val,key=val params."


def resolve_sql_stdin(sql: str | None, from_stdin: bool) -> str:
    """Resolve SQL from positional argument or stdin. Exactly one source required."""
    if sql and from_stdin:
        raise click.UsageError("Provide SQL as an argument or --from-stdin, not both.")
    if from_stdin:
        if sys.stdin.isatty():
            raise click.UsageError("--from-stdin requires piped input (stdin is a terminal).")
        text = sys.stdin.read().strip()
        if not text:
            raise click.UsageError("--from-stdin: stdin was empty.")
        return text
    if not sql:
        raise click.UsageError("Missing argument 'SQL'. Provide SQL or use --from-stdin.")
    return sql


def parse_key_values(pairs: list[str] | tuple[str, ...], *, param_hint: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for part in pairs:
        if "=" not in part:
            raise click.BadParameter(f"Expected key=value pair, got '{part}'", param_hint=param_hint)
        k, v = part.split("=", 1)
        params[k.strip()] = v.strip()
    return params


def parse_conn(value: str) -> ConnectionCredentials:
    """Resolve --conn value: try named connection first, fall back to 'key=val,...' format."""
    try:
        credentials = get_connection(value)
    except DriverError as e:
        raise click.BadParameter(f"Connection '{value}': {e}", param_hint="'--conn'") from e
    if credentials is not None:
        return credentials

    if "=" not in value:
        raise click.BadParameter(
            f"Connection '{value}' not found in ~/.chlens/connections.toml "
            f"and not in 'key=val,key=val' format.\n"
            f"  Add it: chlens connect add {value} host=<host> database=<db>",
            param_hint="'--conn'",
        )

    params = parse_key_values(value.split(","), param_hint="'--conn'")
    host = params.get("host", "localhost")
    try:
        return ConnectionCredentials.from_params(host, params)
    except DriverError as e:
        raise click.BadParameter(str(e), param_hint="'--conn'") from e


def make_driver(credentials: ConnectionCredentials) -> ClickHouseDriver:
    return ClickHouseDriver(credentials, client_factory=ClickHouseClient)
