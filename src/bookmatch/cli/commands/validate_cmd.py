# ABOUTME: The `bookmatch validate` command for resolving one book description.
# ABOUTME: Runs the retry state machine and reports the verdict with the best candidate.

import asyncio

import click
from rich.console import Console

from bookmatch.cli.options import api_options, build_config, create_kit, match_options
from bookmatch.cli.render import print_book
from bookmatch.core.kit import BookMatchKit
from bookmatch.errors import BookMatchError
from bookmatch.metadata.types import RawBook, ValidationResult


async def _validate(kit: BookMatchKit, raw: RawBook) -> ValidationResult:
    async with kit:
        return await kit.validate_book(raw)


@click.command("validate")
@click.argument("title")
@click.option("-a", "--author", default=None, help="Author name, if known.")
@match_options
@api_options
def validate(
    title: str,
    author: str | None,
    title_threshold: float,
    author_threshold: float,
    title_weight: float,
    max_retries: int,
    naver_client_id: str,
    naver_client_secret: str,
    openai_api_key: str,
) -> None:
    """Check whether TITLE (and optional author) resolves to a real catalog book."""
    console = Console()
    config = build_config(title_threshold, author_threshold, title_weight, max_retries)
    kit = create_kit(naver_client_id, naver_client_secret, openai_api_key, config)

    try:
        result = asyncio.run(_validate(kit, RawBook(title=title, author=author)))
    except BookMatchError as exc:
        raise click.ClickException(str(exc)) from exc

    if result.is_matching:
        console.print(f"[green]Matched[/green] (similarity {result.similarity:.0%}):")
        print_book(console, result.book)
        return

    console.print(
        f"[yellow]No match[/yellow] after {result.attempts} search"
        f"{'es' if result.attempts != 1 else ''}."
    )
    if result.book is not None:
        console.print(f"[dim]Closest candidate ({result.similarity:.0%}):[/dim]")
        print_book(console, result.book)
    raise SystemExit(1)
