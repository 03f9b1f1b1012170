# ABOUTME: Unit tests for similarity scoring between raw books and catalog candidates.
# ABOUTME: Validates symmetry, normalization, parenthesis stripping, weighting, and best-pick ties.

import pytest

from bookmatch.config import MatchConfig
from bookmatch.metadata.scoring import (
    ScoreBreakdown,
    normalize_text,
    score_candidate,
    select_best,
    similarity,
    strip_parentheses,
    title_similarity,
)
from bookmatch.metadata.types import CatalogCandidate, RawBook
from tests.fixtures.fakes import make_candidate


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_lowercases_and_collapses_whitespace(self) -> None:
        """Case and runs of whitespace do not matter."""
        assert normalize_text("  The   Name\tof the ROSE ") == "the name of the rose"

    def test_punctuation_becomes_space(self) -> None:
        """Punctuation runs are replaced by a single space."""
        assert normalize_text("Clean-Code: A Handbook!") == "clean code a handbook"

    def test_fullwidth_forms_are_folded(self) -> None:
        """NFKC folds full-width Latin letters to ASCII."""
        assert normalize_text("ＣＬＥＡＮ") == "clean"

    def test_none_and_empty(self) -> None:
        """None and empty strings normalize to an empty string."""
        assert normalize_text(None) == ""
        assert normalize_text("") == ""

    def test_hangul_is_preserved(self) -> None:
        """Hangul syllables survive normalization."""
        assert normalize_text("클린  코드") == "클린 코드"


class TestStripParentheses:
    """Tests for strip_parentheses."""

    def test_removes_original_title(self) -> None:
        """A parenthesised original-language title is removed."""
        assert strip_parentheses("클린 코드(Clean Code)") == "클린 코드"

    def test_removes_brackets(self) -> None:
        """Square-bracketed edition notes are removed too."""
        assert strip_parentheses("리팩터링 [2판]") == "리팩터링"

    def test_removes_nested_groups(self) -> None:
        """Nested groups are removed from the inside out."""
        assert normalize_text(strip_parentheses("Dune (Book (1)) Deluxe")) == "dune deluxe"

    def test_keeps_text_that_would_become_empty(self) -> None:
        """A title that is entirely parenthesised is returned unchanged."""
        assert strip_parentheses("(Untitled)") == "(Untitled)"

    def test_no_parentheses_is_noop(self) -> None:
        """Text without parentheses is returned stripped."""
        assert strip_parentheses("Dune") == "Dune"


class TestSimilarity:
    """Tests for the symmetric similarity metric."""

    def test_identical_strings_score_one(self) -> None:
        """A string is fully similar to itself."""
        assert similarity("The Name of the Rose", "The Name of the Rose") == 1.0

    def test_equal_after_normalization_scores_one(self) -> None:
        """Strings equal after normalization score exactly 1.0."""
        assert similarity("CLEAN code!", "clean   code") == 1.0

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("War and Peace", "Kokoro"),
            ("클린 코드", "클린 아키텍처"),
            ("abc", "abcd"),
            ("Refactoring", "Refactorings 2nd ed."),
        ],
    )
    def test_symmetric(self, a: str, b: str) -> None:
        """similarity(a, b) equals similarity(b, a)."""
        assert similarity(a, b) == similarity(b, a)

    def test_single_substitution_bounded(self) -> None:
        """One substituted character moves the score by at most 1/len."""
        a, b = "abcdef", "abcxef"
        assert 1.0 - similarity(a, b) <= 1.0 / len(a) + 1e-9

    def test_range(self) -> None:
        """Scores always fall in [0.0, 1.0]."""
        for a, b in [("a", "zzzzzz"), ("", "x"), ("same", "same"), ("x", "")]:
            assert 0.0 <= similarity(a, b) <= 1.0

    def test_one_side_empty_scores_zero(self) -> None:
        """An empty side against a non-empty one scores 0.0."""
        assert similarity("", "Dune") == 0.0
        assert similarity(None, "Dune") == 0.0

    def test_unrelated_strings_score_low(self) -> None:
        """Completely different titles score well below the title threshold."""
        assert similarity("aaaaaaaa", "Kokoro") < 0.4


class TestTitleSimilarity:
    """Tests for title_similarity."""

    def test_ignores_parenthesised_segments(self) -> None:
        """A parenthesised original title does not lower the score."""
        assert title_similarity("클린 코드", "클린 코드(Clean Code)") == 1.0

    def test_symmetric(self) -> None:
        """Stripping applies to both sides, so the score stays symmetric."""
        a, b = "클린 코드(Clean Code)", "클린 코드 완벽판"
        assert title_similarity(a, b) == title_similarity(b, a)


class TestScoreCandidate:
    """Tests for score_candidate weighting."""

    def test_exact_title_and_author(self, config: MatchConfig) -> None:
        """Exact title and author produce a perfect combined score."""
        raw = RawBook(title="클린 코드", author="로버트 C. 마틴")
        candidate = make_candidate("클린 코드(Clean Code)", author="로버트 C. 마틴")
        score = score_candidate(raw, candidate, config)
        assert score.title == 1.0
        assert score.author == 1.0
        assert score.combined == pytest.approx(1.0)

    def test_weights_applied(self, config: MatchConfig) -> None:
        """Combined score is title_weight * title + author_weight * author."""
        raw = RawBook(title="Dune", author="Frank Herbert")
        candidate = make_candidate("Dune", author="Someone Else Entirely")
        score = score_candidate(raw, candidate, config)
        expected = config.title_weight * score.title + config.author_weight * score.author
        assert score.combined == pytest.approx(expected)
        assert score.title == 1.0
        assert score.author < 1.0

    def test_absent_author_uses_title_only(self, config: MatchConfig) -> None:
        """Without an author, combined equals the title score and author is None."""
        raw = RawBook(title="Dune")
        candidate = make_candidate("Dune", author="Frank Herbert")
        score = score_candidate(raw, candidate, config)
        assert score.author is None
        assert score.combined == score.title == 1.0

    def test_blank_author_counts_as_absent(self, config: MatchConfig) -> None:
        """A whitespace-only author is treated as missing."""
        raw = RawBook(title="Dune", author="   ")
        score = score_candidate(raw, make_candidate("Dune", author="Frank Herbert"), config)
        assert score.author is None


class TestScoreBreakdownPasses:
    """Tests for the match decision on a score breakdown."""

    def test_passes_when_both_thresholds_met(self, config: MatchConfig) -> None:
        assert ScoreBreakdown(title=0.5, author=0.9, combined=0.58).passes(config)

    def test_fails_on_low_title(self, config: MatchConfig) -> None:
        """A title below the threshold fails even with a perfect author."""
        assert not ScoreBreakdown(title=0.3, author=1.0, combined=0.44).passes(config)

    def test_fails_on_low_author(self, config: MatchConfig) -> None:
        """An author below the threshold fails even with a perfect title."""
        assert not ScoreBreakdown(title=1.0, author=0.5, combined=0.9).passes(config)

    def test_absent_author_skips_author_threshold(self, config: MatchConfig) -> None:
        assert ScoreBreakdown(title=0.4, author=None, combined=0.4).passes(config)


class TestSelectBest:
    """Tests for select_best."""

    def test_empty_candidates(self, config: MatchConfig) -> None:
        """No candidates means no best pick."""
        assert select_best(RawBook(title="Dune"), [], config) is None

    def test_picks_highest_combined(self, config: MatchConfig) -> None:
        """The candidate with the highest combined score wins."""
        raw = RawBook(title="클린 코드", author="로버트 C. 마틴")
        candidates = [
            make_candidate("클린 아키텍처", author="로버트 C. 마틴", isbn="1"),
            make_candidate("클린 코드(Clean Code)", author="로버트 C. 마틴", isbn="2"),
        ]
        best = select_best(raw, candidates, config)
        assert best is not None
        assert best[0].isbn == "2"

    def test_ties_keep_earliest(self, config: MatchConfig) -> None:
        """Equal scores keep the provider's relevance order."""
        raw = RawBook(title="Dune")
        candidates: list[CatalogCandidate] = [
            make_candidate("Dune", isbn="first"),
            make_candidate("Dune", isbn="second"),
        ]
        best = select_best(raw, candidates, config)
        assert best is not None
        assert best[0].isbn == "first"
