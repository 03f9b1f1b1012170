# ABOUTME: Parsing functions for Naver Book Search API JSON responses.
# ABOUTME: Converts Naver items into CatalogCandidate instances.

import html
import re
from typing import Any

from bookmatch.errors import SearchFailed
from bookmatch.metadata.types import CatalogCandidate, normalize_isbn

_TAG_RE = re.compile(r"<[^>]+>")


def clean_text(value: Any) -> str:
    """Strip highlight markup (<b>...</b>) and HTML entities from a Naver field."""
    if not value:
        return ""
    return html.unescape(_TAG_RE.sub("", str(value))).strip()


def select_isbn(value: str) -> str:
    """Pick the preferred ISBN from Naver's combined field.

    Naver returns "ISBN10 ISBN13" (either may be missing). Prefer the 13-digit
    form; fall back to whatever token is present.
    """
    tokens = [normalize_isbn(t) for t in value.split() if t.strip()]
    for token in tokens:
        if len(token) == 13:
            return token
    return tokens[0] if tokens else ""


def parse_item(item: dict[str, Any]) -> CatalogCandidate | None:
    """Parse one Naver item; returns None for items without title or ISBN."""
    title = clean_text(item.get("title"))
    isbn = select_isbn(clean_text(item.get("isbn")))
    if not title or not isbn:
        return None

    return CatalogCandidate(
        isbn=isbn,
        title=title,
        author=clean_text(item.get("author")),
        publisher=clean_text(item.get("publisher")),
        description=clean_text(item.get("description")),
        image_url=str(item.get("image") or ""),
        link=str(item.get("link") or ""),
        discount=clean_text(item.get("discount")) or None,
        pubdate=clean_text(item.get("pubdate")) or None,
    )


def parse_search_response(data: Any) -> list[CatalogCandidate]:
    """Parse a Naver Book Search response into CatalogCandidates.

    Raises:
        SearchFailed: If the payload does not carry an "items" list.
    """
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise SearchFailed("Malformed Naver search response: missing 'items' list")

    results: list[CatalogCandidate] = []
    for item in data["items"]:
        if not isinstance(item, dict):
            continue
        candidate = parse_item(item)
        if candidate is not None:
            results.append(candidate)
    return results
