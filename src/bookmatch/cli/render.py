# ABOUTME: Rich rendering helpers shared by Bookmatch CLI commands.
# ABOUTME: Candidate tables and single-book panels for search, match, and recommend output.

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from bookmatch.metadata.types import CatalogCandidate


def candidate_table(candidates: Sequence[CatalogCandidate], title: str | None = None) -> Table:
    """Build a table of catalog candidates in the order given."""
    table = Table(title=title)
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Publisher")
    table.add_column("ISBN", style="dim", no_wrap=True)

    for i, candidate in enumerate(candidates, start=1):
        table.add_row(
            str(i),
            candidate.title,
            candidate.author or "[dim]unknown[/dim]",
            candidate.publisher or "-",
            candidate.isbn,
        )
    return table


def print_book(console: Console, book: CatalogCandidate) -> None:
    """Print one catalog record as labelled lines."""
    console.print(f"  [bold]{book.title}[/bold]")
    console.print(f"  Author: {book.author or 'unknown'}")
    if book.publisher:
        console.print(f"  Publisher: {book.publisher}")
    console.print(f"  ISBN: {book.isbn}")
    if book.link:
        console.print(f"  [dim]{book.link}[/dim]")
