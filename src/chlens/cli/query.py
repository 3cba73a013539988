"""The `query` command: run SQL and print the result envelope."""

from __future__ import annotations

import asyncio

import click

from chlens.adapters._base import ConnectionCredentials, ResultEnvelope
from chlens.cli._output import format_envelope
from chlens.cli._shared import (
    CONN_HELP,
    make_driver,
    parse_conn,
    parse_key_values,
    resolve_sql_stdin,
)
from chlens.querylog import cleanup_old_logs, log_query


async def _run_query(
    sql: str, credentials: ConnectionCredentials, settings: dict[str, str]
) -> ResultEnvelope:
    driver = make_driver(credentials)
    try:
        results = await driver.query(sql, settings=settings or None)
    finally:
        await driver.close()
    return results[0]


@click.command()
@click.argument("sql", required=False)
@click.option("--conn", required=True, envvar="CHLENS_CONN", help=CONN_HELP)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin.")
@click.option(
    "--setting", "settings", multiple=True, metavar="KEY=VAL",
    help="ClickHouse setting for this query (repeatable).",
)
@click.option("--format", "output_format", type=click.Choice(["json", "text"]), default="json")
def query(
    sql: str | None,
    conn: str,
    from_stdin: bool,
    settings: tuple[str, ...],
    output_format: str,
) -> None:
    """Execute SQL against ClickHouse."""
    sql = resolve_sql_stdin(sql, from_stdin)
    credentials = parse_conn(conn)
    parsed_settings = parse_key_values(settings, param_hint="'--setting'")

    result = asyncio.run(_run_query(sql, credentials, parsed_settings))

    log_query(
        result,
        host=credentials.host,
        database=credentials.database,
        settings=parsed_settings or None,
    )
    cleanup_old_logs()

    output = format_envelope(result, output_format=output_format)
    if result.error is not None and output_format == "text":
        click.echo(output, err=True)
    else:
        click.echo(output)
    if result.error is not None:
        raise SystemExit(1)
