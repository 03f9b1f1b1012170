# ABOUTME: Core data structures that flow through search, validation, and recommendation.
# ABOUTME: RawBook is unverified input; CatalogCandidate is an authoritative catalog record.

import re
from dataclasses import dataclass, field
from enum import Enum

from bookmatch.errors import LLMResponseError

_ISBN_STRIP_RE = re.compile(r"[\s-]")
_TITLE_AUTHOR_SEPARATOR = "-"


def normalize_isbn(isbn: str) -> str:
    """Strip hyphens and spaces from a single ISBN for comparison."""
    return _ISBN_STRIP_RE.sub("", isbn)


def isbn_keys(value: str | None) -> frozenset[str]:
    """Split an ISBN field into normalized tokens.

    Catalog records sometimes carry both ISBN-10 and ISBN-13 separated by a
    space ("8966260950 9788966260959"); either token identifies the book.
    """
    if not value:
        return frozenset()
    return frozenset(normalize_isbn(token) for token in value.split() if token.strip("-"))


@dataclass(frozen=True)
class RawBook:
    """An unverified book description from OCR text or an LLM suggestion.

    Only the title is required, and even that may be truncated or garbled.
    """

    title: str
    author: str | None = None
    publisher: str | None = None

    @property
    def has_author(self) -> bool:
        return bool(self.author and self.author.strip())

    @property
    def query(self) -> str:
        """Search query text: title followed by author when known."""
        if self.has_author:
            return f"{self.title} {self.author}".strip()
        return self.title.strip()

    def display(self) -> str:
        """Render as the 'title-author' line format exchanged with the LLM."""
        if self.has_author:
            return f"{self.title}{_TITLE_AUTHOR_SEPARATOR}{self.author}"
        return self.title

    @classmethod
    def parse(cls, text: str) -> "RawBook":
        """Parse a 'title-author' line into a RawBook.

        Splits on the last hyphen so hyphenated titles survive. A line with no
        hyphen is treated as a bare title.

        Raises:
            LLMResponseError: If no title can be recovered.
        """
        line = text.strip().strip("\"'").strip()
        if _TITLE_AUTHOR_SEPARATOR in line:
            title, author = line.rsplit(_TITLE_AUTHOR_SEPARATOR, 1)
            title, author = title.strip(), author.strip()
        else:
            title, author = line, ""
        if not title:
            raise LLMResponseError(f"Cannot parse a book title from {text!r}")
        return cls(title=title, author=author or None)


@dataclass(frozen=True)
class CatalogCandidate:
    """One record returned by the book catalog search.

    Immutable once returned; the ISBN is the stable identifier used for
    ownership checks and deduplication.
    """

    isbn: str
    title: str
    author: str = ""
    publisher: str = ""
    description: str = ""
    image_url: str = ""
    link: str = ""
    discount: str | None = None
    pubdate: str | None = None

    @property
    def isbn_keys(self) -> frozenset[str]:
        return isbn_keys(self.isbn)

    def to_raw_book(self) -> RawBook:
        return RawBook(title=self.title, author=self.author or None, publisher=self.publisher or None)


@dataclass(frozen=True)
class OwnedBook:
    """A book the user already owns, keyed by ISBN."""

    isbn: str
    title: str
    author: str = ""

    @property
    def isbn_keys(self) -> frozenset[str]:
        return isbn_keys(self.isbn)

    @classmethod
    def from_candidate(cls, candidate: CatalogCandidate) -> "OwnedBook":
        return cls(isbn=candidate.isbn, title=candidate.title, author=candidate.author)

    def to_raw_book(self) -> RawBook:
        return RawBook(title=self.title, author=self.author or None)


class MatchState(str, Enum):
    """States of the validate-with-retry state machine."""

    SEARCHING = "searching"
    SCORING = "scoring"
    MATCHED = "matched"
    RETRYING = "retrying"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a RawBook against the catalog.

    When is_matching is False, book may hold a near miss (the title passed
    but the author did not) and similarity its combined score; callers must
    not present it as a match.
    """

    is_matching: bool
    book: CatalogCandidate | None
    similarity: float
    state: MatchState = MatchState.EXHAUSTED
    attempts: int = 0

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity <= 1.0:
            msg = f"similarity must be between 0.0 and 1.0, got {self.similarity}"
            raise ValueError(msg)


@dataclass
class RecommendationOutput:
    """Recommendations split into books the user owns and books to acquire.

    new_books never repeats an ISBN, and never contains an owned ISBN.
    """

    owned_isbns: set[str] = field(default_factory=set)
    new_books: list[CatalogCandidate] = field(default_factory=list)
    description: str = ""
