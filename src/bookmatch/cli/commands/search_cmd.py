# ABOUTME: The `bookmatch search` command for free-text catalog search.
# ABOUTME: Prints catalog results in relevance order as a Rich table.

import asyncio

import click
from rich.console import Console

from bookmatch.cli.options import api_options, create_kit
from bookmatch.cli.render import candidate_table
from bookmatch.config import MatchConfig
from bookmatch.core.kit import BookMatchKit
from bookmatch.errors import BookMatchError
from bookmatch.metadata.types import CatalogCandidate


async def _search(kit: BookMatchKit, query: str, limit: int) -> list[CatalogCandidate]:
    async with kit:
        return await kit.search(query, limit)


@click.command("search")
@click.argument("query")
@click.option(
    "-n",
    "--limit",
    type=click.IntRange(1, 100),
    default=10,
    show_default=True,
    help="Maximum number of results.",
)
@api_options
def search(
    query: str,
    limit: int,
    naver_client_id: str,
    naver_client_secret: str,
    openai_api_key: str,
) -> None:
    """Search the book catalog by title, author, or any text."""
    console = Console()
    kit = create_kit(naver_client_id, naver_client_secret, openai_api_key, MatchConfig())

    try:
        results = asyncio.run(_search(kit, query, limit))
    except BookMatchError as exc:
        raise click.ClickException(str(exc)) from exc

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    console.print(candidate_table(results))
    console.print(f"\n[dim]{len(results)} result(s)[/dim]")
