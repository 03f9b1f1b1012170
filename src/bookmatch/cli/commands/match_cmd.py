# ABOUTME: The `bookmatch match` command for resolving OCR text lines to one book.
# ABOUTME: Reads lines from arguments or a file and runs longest-first progressive matching.

import asyncio
from pathlib import Path

import click
from rich.console import Console

from bookmatch.cli.options import api_options, build_config, create_kit, match_options
from bookmatch.cli.render import print_book
from bookmatch.core.kit import BookMatchKit
from bookmatch.errors import BookMatchError
from bookmatch.metadata.types import CatalogCandidate


async def _match(kit: BookMatchKit, lines: list[str]) -> CatalogCandidate | None:
    async with kit:
        return await kit.match_from_lines(lines)


def _read_lines(lines: tuple[str, ...], lines_file: Path | None) -> list[str]:
    collected = list(lines)
    if lines_file is not None:
        collected.extend(lines_file.read_text(encoding="utf-8").splitlines())
    return [line for line in collected if line.strip()]


@click.command("match")
@click.argument("lines", nargs=-1)
@click.option(
    "-f",
    "--lines-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File with one OCR text line per line.",
)
@match_options
@api_options
def match(
    lines: tuple[str, ...],
    lines_file: Path | None,
    title_threshold: float,
    author_threshold: float,
    title_weight: float,
    max_retries: int,
    naver_client_id: str,
    naver_client_secret: str,
    openai_api_key: str,
) -> None:
    """Match OCR text LINES from one book spine or cover to a catalog book."""
    console = Console()
    text_lines = _read_lines(lines, lines_file)
    if not text_lines:
        raise click.UsageError("Provide at least one text line or --lines-file.")

    config = build_config(title_threshold, author_threshold, title_weight, max_retries)
    kit = create_kit(naver_client_id, naver_client_secret, openai_api_key, config)

    try:
        book = asyncio.run(_match(kit, text_lines))
    except BookMatchError as exc:
        raise click.ClickException(str(exc)) from exc

    if book is None:
        console.print(f"[yellow]No match[/yellow] for {len(text_lines)} line(s).")
        raise SystemExit(1)

    console.print("[green]Matched:[/green]")
    print_book(console, book)
