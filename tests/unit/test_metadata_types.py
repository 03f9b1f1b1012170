# ABOUTME: Unit tests for the core data types.
# ABOUTME: Covers RawBook parsing and display, ISBN keys, and ValidationResult bounds.

import pytest

from bookmatch.errors import LLMResponseError
from bookmatch.metadata.types import (
    CatalogCandidate,
    MatchState,
    OwnedBook,
    RawBook,
    RecommendationOutput,
    ValidationResult,
    isbn_keys,
    normalize_isbn,
)


class TestRawBook:
    """Tests for RawBook."""

    def test_query_with_author(self) -> None:
        """The search query joins title and author."""
        assert RawBook(title="Dune", author="Frank Herbert").query == "Dune Frank Herbert"

    def test_query_without_author(self) -> None:
        assert RawBook(title=" Dune ").query == "Dune"

    def test_blank_author_is_absent(self) -> None:
        book = RawBook(title="Dune", author="  ")
        assert book.has_author is False
        assert book.query == "Dune"

    def test_display_format(self) -> None:
        """display() renders the 'title-author' line format."""
        assert RawBook(title="클린 코드", author="로버트 C. 마틴").display() == "클린 코드-로버트 C. 마틴"
        assert RawBook(title="Dune").display() == "Dune"

    def test_parse_title_author(self) -> None:
        book = RawBook.parse("Clean Code-Robert C. Martin")
        assert book == RawBook(title="Clean Code", author="Robert C. Martin")

    def test_parse_splits_on_last_hyphen(self) -> None:
        """Hyphenated titles survive parsing."""
        book = RawBook.parse("Spider-Man-Stan Lee")
        assert book.title == "Spider-Man"
        assert book.author == "Stan Lee"

    def test_parse_bare_title(self) -> None:
        """A line with no hyphen is a title without author."""
        book = RawBook.parse("Dune")
        assert book.title == "Dune"
        assert book.author is None

    def test_parse_strips_quotes(self) -> None:
        assert RawBook.parse('"Dune-Frank Herbert"').author == "Frank Herbert"

    def test_parse_trailing_hyphen(self) -> None:
        """A trailing hyphen leaves the author empty."""
        assert RawBook.parse("Dune-").author is None

    def test_parse_without_title_raises(self) -> None:
        with pytest.raises(LLMResponseError):
            RawBook.parse("-Frank Herbert")

    def test_parse_blank_raises(self) -> None:
        with pytest.raises(LLMResponseError):
            RawBook.parse("   ")


class TestIsbnKeys:
    """Tests for ISBN normalization and key sets."""

    def test_normalize_strips_hyphens(self) -> None:
        assert normalize_isbn("978-0-13-235088-4") == "9780132350884"

    def test_combined_field(self) -> None:
        """Both tokens of a combined ISBN field become keys."""
        assert isbn_keys("8966260950 9788966260959") == {"8966260950", "9788966260959"}

    def test_empty(self) -> None:
        assert isbn_keys("") == frozenset()
        assert isbn_keys(None) == frozenset()

    def test_candidate_and_owned_share_keys(self) -> None:
        """A combined catalog ISBN overlaps an owned ISBN-13."""
        candidate = CatalogCandidate(isbn="8966260950 9788966260959", title="클린 코드")
        owned = OwnedBook(isbn="978-8966260959", title="클린 코드")
        assert candidate.isbn_keys & owned.isbn_keys


class TestConversions:
    """Tests for conversions between record types."""

    def test_candidate_to_raw_book(self) -> None:
        candidate = CatalogCandidate(isbn="1", title="Dune", author="Frank Herbert")
        assert candidate.to_raw_book() == RawBook(title="Dune", author="Frank Herbert")

    def test_candidate_without_author(self) -> None:
        assert CatalogCandidate(isbn="1", title="Dune").to_raw_book().author is None

    def test_owned_from_candidate(self) -> None:
        candidate = CatalogCandidate(isbn="1", title="Dune", author="Frank Herbert")
        assert OwnedBook.from_candidate(candidate) == OwnedBook("1", "Dune", "Frank Herbert")


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_similarity_bounds(self) -> None:
        """Similarity outside [0, 1] is rejected."""
        with pytest.raises(ValueError):
            ValidationResult(is_matching=False, book=None, similarity=1.5)

    def test_defaults_to_exhausted(self) -> None:
        result = ValidationResult(is_matching=False, book=None, similarity=0.0)
        assert result.state is MatchState.EXHAUSTED
        assert result.attempts == 0


class TestRecommendationOutput:
    """Tests for RecommendationOutput defaults."""

    def test_defaults_are_independent(self) -> None:
        """Each output gets its own collections."""
        first = RecommendationOutput()
        second = RecommendationOutput()
        first.owned_isbns.add("1")
        assert second.owned_isbns == set()
        assert first.new_books is not second.new_books
