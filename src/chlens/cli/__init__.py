"""CLI entry point."""

from __future__ import annotations

import logging

import click

from chlens.cli.connect import connect
from chlens.cli.query import query
from chlens.cli.schema import schema
from chlens.cli.search import search


@click.group()
@click.version_option(package_name="chlens")
@click.option("-v", "--verbose", is_flag=True, help="Log driver activity to stderr.")
def main(verbose: bool) -> None:
    """chlens: browse and query ClickHouse."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


main.add_command(connect)
main.add_command(query)
main.add_command(schema)
main.add_command(search)
