# ABOUTME: Parsing of language-model reply text into book suggestions.
# ABOUTME: Tolerates code fences and stray prose, rejects anything else with LLMResponseError.

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from bookmatch.errors import LLMResponseError
from bookmatch.llm.provider import QuestionRecommendation
from bookmatch.metadata.scoring import normalize_text
from bookmatch.metadata.types import OwnedBook, RawBook

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def parse_json_object(content: str) -> dict[str, Any]:
    """Decode a JSON object from model output, ignoring fences and surrounding prose."""
    text = _FENCE_RE.sub("", content.strip())
    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        raise LLMResponseError(f"No JSON object in model reply: {content[:80]!r}")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"Invalid JSON in model reply: {exc}") from exc
    if not isinstance(data, dict):
        raise LLMResponseError("Model reply JSON is not an object")
    return data


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise LLMResponseError(f"Expected a list under {key!r}")
    return [item for item in value if isinstance(item, str) and item.strip()]


def _parse_books(entries: list[str]) -> list[RawBook]:
    books: list[RawBook] = []
    for entry in entries:
        try:
            books.append(RawBook.parse(entry))
        except LLMResponseError:
            logger.warning("Skipping unparseable suggestion: %r", entry)
    return books


def parse_recommendations(content: str) -> list[RawBook]:
    """Parse {"recommendations": ["title-author", ...]}."""
    data = parse_json_object(content)
    return _parse_books(_string_list(data, "recommendations"))


def _find_owned(book: RawBook, owned: Sequence[OwnedBook]) -> OwnedBook | None:
    title = normalize_text(book.title)
    author = normalize_text(book.author)
    for candidate in owned:
        if normalize_text(candidate.title) != title:
            continue
        if not author or normalize_text(candidate.author) == author:
            return candidate
    return None


def parse_question_recommendation(
    content: str, owned: Sequence[OwnedBook]
) -> QuestionRecommendation:
    """Parse {"recommendationOwned": [...], "recommendationNew": [...]}.

    Owned picks are resolved against the caller's owned list by title and
    author; picks that do not correspond to an owned book are dropped.
    """
    data = parse_json_object(content)

    owned_books: list[OwnedBook] = []
    for pick in _parse_books(_string_list(data, "recommendationOwned")):
        match = _find_owned(pick, owned)
        if match is None:
            logger.warning("Model picked %r as owned, but it is not on the shelf", pick.display())
            continue
        if match not in owned_books:
            owned_books.append(match)

    new_books = _parse_books(_string_list(data, "recommendationNew"))
    return QuestionRecommendation(owned_books=owned_books, new_books=new_books)


def parse_additional_book(content: str) -> RawBook:
    """Parse a single 'title-author' line, using the first non-empty line."""
    for line in content.splitlines():
        line = line.strip().lstrip("-*• ").strip()
        if line:
            return RawBook.parse(line)
    raise LLMResponseError("Model reply contains no book line")
