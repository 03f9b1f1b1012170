# ABOUTME: The `bookmatch recommend` command for owned-shelf and question recommendations.
# ABOUTME: Loads the owned-book list from JSON and prints validated recommendations.

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console

from bookmatch.cli.options import api_options, build_config, create_kit, match_options
from bookmatch.cli.render import candidate_table
from bookmatch.core.kit import BookMatchKit
from bookmatch.errors import BookMatchError
from bookmatch.metadata.types import CatalogCandidate, OwnedBook, RecommendationOutput


def load_owned_books(path: Path) -> list[OwnedBook]:
    """Load owned books from a JSON list of {"isbn", "title", "author"} objects."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise click.BadParameter(f"Cannot read owned books: {exc}", param_hint="--owned") from exc

    if not isinstance(data, list):
        raise click.BadParameter("Owned books file must hold a JSON list", param_hint="--owned")

    books: list[OwnedBook] = []
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("isbn") or not entry.get("title"):
            raise click.BadParameter(
                f"Each owned book needs 'isbn' and 'title': {entry!r}", param_hint="--owned"
            )
        books.append(
            OwnedBook(
                isbn=str(entry["isbn"]),
                title=str(entry["title"]),
                author=str(entry.get("author") or ""),
            )
        )
    return books


async def _recommend_from_owned(
    kit: BookMatchKit, owned: list[OwnedBook]
) -> list[CatalogCandidate]:
    async with kit:
        return await kit.recommend_from_owned(owned)


async def _recommend_for_question(
    kit: BookMatchKit, question: str, owned: list[OwnedBook]
) -> RecommendationOutput:
    async with kit:
        return await kit.recommend_for_question(question, owned)


@click.command("recommend")
@click.option(
    "-o",
    "--owned",
    "owned_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="JSON file listing owned books.",
)
@click.option("-q", "--question", default=None, help="Question to answer with recommendations.")
@match_options
@api_options
def recommend(
    owned_path: Path,
    question: str | None,
    title_threshold: float,
    author_threshold: float,
    title_weight: float,
    max_retries: int,
    naver_client_id: str,
    naver_client_secret: str,
    openai_api_key: str,
) -> None:
    """Recommend books from the owned shelf, optionally answering a QUESTION."""
    console = Console()
    owned = load_owned_books(owned_path)
    if question is not None and not question.strip():
        raise click.BadParameter("Question must not be blank.", param_hint="--question")
    if not openai_api_key:
        raise click.UsageError("Recommendations need an OpenAI key (--openai-api-key).")

    config = build_config(title_threshold, author_threshold, title_weight, max_retries)
    kit = create_kit(naver_client_id, naver_client_secret, openai_api_key, config)

    try:
        if question is None:
            books = asyncio.run(_recommend_from_owned(kit, owned))
            output = RecommendationOutput(new_books=books)
        else:
            output = asyncio.run(_recommend_for_question(kit, question, owned))
    except BookMatchError as exc:
        raise click.ClickException(str(exc)) from exc

    if output.owned_isbns:
        on_shelf = [book for book in owned if book.isbn in output.owned_isbns]
        console.print("[bold]From your shelf:[/bold]")
        for book in on_shelf:
            console.print(f"  {book.title} [dim]({book.author or 'unknown'}, {book.isbn})[/dim]")

    if output.new_books:
        console.print(candidate_table(output.new_books, title="New books"))
    elif not output.owned_isbns:
        console.print("[yellow]No recommendations could be verified.[/yellow]")
        raise SystemExit(1)

    if output.description:
        console.print(f"\n{output.description}")
