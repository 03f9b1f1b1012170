# ABOUTME: Similarity scoring between raw book descriptions and catalog candidates.
# ABOUTME: Normalized Levenshtein similarity, weighted across title and author.

import re
import unicodedata
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from bookmatch.config import MatchConfig
from bookmatch.metadata.types import CatalogCandidate, RawBook

# Any run of characters that is neither a word character nor whitespace.
_PUNCTUATION_RE = re.compile(r"[^\w\s]+|_+")
_WHITESPACE_RE = re.compile(r"\s+")
_PARENTHESES_RE = re.compile(r"\([^()]*\)|\[[^\[\]]*\]")


def normalize_text(text: str | None) -> str:
    """Lowercase, fold compatibility forms, and collapse punctuation and whitespace."""
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text).lower()
    text = _PUNCTUATION_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_parentheses(text: str) -> str:
    """Remove parenthesised segments such as an original-language subtitle.

    Nested groups are removed from the inside out. Returns the input unchanged
    when stripping would leave nothing.
    """
    stripped = text
    while True:
        reduced = _PARENTHESES_RE.sub(" ", stripped)
        if reduced == stripped:
            break
        stripped = reduced
    stripped = stripped.strip()
    return stripped if stripped else text


def similarity(a: str | None, b: str | None) -> float:
    """Symmetric string similarity in [0.0, 1.0].

    1.0 exactly when both strings are equal after normalization. Computed as
    1 - levenshtein(a, b) / max(len(a), len(b)), so a single substituted
    character moves the score by at most 1 / max length.
    """
    left = normalize_text(a)
    right = normalize_text(b)
    if left == right:
        return 1.0
    if not left or not right:
        return 0.0
    return Levenshtein.normalized_similarity(left, right)


def title_similarity(a: str | None, b: str | None) -> float:
    """Title similarity that ignores parenthesised segments on both sides."""
    return similarity(strip_parentheses(a or ""), strip_parentheses(b or ""))


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-field and combined similarity for one candidate.

    author is None when the raw book carried no author; in that case the
    weights are renormalized over the title alone and combined == title.
    """

    title: float
    author: float | None
    combined: float

    def passes(self, config: MatchConfig) -> bool:
        """Whether both field scores reach the configured thresholds."""
        if self.title < config.title_similarity_threshold:
            return False
        if self.author is None:
            return True
        return self.author >= config.author_similarity_threshold


def score_candidate(raw: RawBook, candidate: CatalogCandidate, config: MatchConfig) -> ScoreBreakdown:
    """Score how well a catalog candidate matches a raw book description."""
    title_score = title_similarity(raw.title, candidate.title)

    if not raw.has_author:
        return ScoreBreakdown(title=title_score, author=None, combined=title_score)

    author_score = similarity(raw.author, candidate.author)
    combined = config.title_weight * title_score + config.author_weight * author_score
    return ScoreBreakdown(
        title=title_score,
        author=author_score,
        combined=max(0.0, min(1.0, combined)),
    )


def select_best(
    raw: RawBook, candidates: list[CatalogCandidate], config: MatchConfig
) -> tuple[CatalogCandidate, ScoreBreakdown] | None:
    """Pick the candidate with the highest combined score.

    Ties keep the earlier candidate, so provider relevance order breaks them.
    Returns None for an empty candidate list.
    """
    best: tuple[CatalogCandidate, ScoreBreakdown] | None = None
    for candidate in candidates:
        breakdown = score_candidate(raw, candidate, config)
        if best is None or breakdown.combined > best[1].combined:
            best = (candidate, breakdown)
    return best
