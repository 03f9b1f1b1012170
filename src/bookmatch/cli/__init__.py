# ABOUTME: CLI package for Bookmatch, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from bookmatch.cli.commands import match_cmd, recommend_cmd, search_cmd, validate_cmd


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="bookmatch")
@click.option("-v", "--verbose", count=True, help="Show progress logs (-vv for debug).")
def cli(verbose: int) -> None:
    """Bookmatch - match noisy book text to a catalog and recommend books."""
    _configure_logging(verbose)


cli.add_command(search_cmd.search)
cli.add_command(validate_cmd.validate)
cli.add_command(match_cmd.match)
cli.add_command(recommend_cmd.recommend)
