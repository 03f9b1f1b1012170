# ABOUTME: Pre-search cleanup of OCR text lines (noise trimming, concatenated words).
# ABOUTME: Splits mangled Latin runs like "CleanCode" while leaving other scripts intact.

import re
from collections.abc import Iterable

import wordninja

# Minimum length for a spaceless Latin run to be considered "concatenated".
# Shorter strings (e.g. "Dune", "1984") are left alone.
_MIN_CONCAT_LENGTH = 8

_CAMEL_CASE_RE = re.compile(r"[a-z][A-Z]")
_CAMEL_LOWER_UPPER_RE = re.compile(r"([a-z\d])([A-Z])")
_CAMEL_UPPER_SEQUENCE_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LETTER_DIGIT_RE = re.compile(r"([a-zA-Z])(\d)")
_DIGIT_LETTER_RE = re.compile(r"(\d)([a-zA-Z])")
_WHITESPACE_RE = re.compile(r"\s+")
_LATIN_TOKEN_RE = re.compile(r"^[A-Za-z\d]+$")

# OCR frequently frames spine text with stray marks; trim them from both ends.
_EDGE_NOISE = " \t|_~`'\"*.,;:!?-=+<>/\\·•"


def _needs_splitting(token: str) -> bool:
    """Check whether a single Latin token looks like several words run together."""
    if not _LATIN_TOKEN_RE.match(token):
        return False
    if _CAMEL_CASE_RE.search(token):
        return True
    return token.islower() and len(token) >= _MIN_CONCAT_LENGTH


def _split_camel_case(text: str) -> list[str]:
    """Split a CamelCase string into individual words.

    Handles boundaries between lowercase and uppercase, uppercase sequences
    followed by a capitalised word ("HTMLParser"), and letter/digit edges.
    """
    result = _CAMEL_LOWER_UPPER_RE.sub(r"\1_SPLIT_\2", text)
    result = _CAMEL_UPPER_SEQUENCE_RE.sub(r"\1_SPLIT_\2", result)
    result = _LETTER_DIGIT_RE.sub(r"\1_SPLIT_\2", result)
    result = _DIGIT_LETTER_RE.sub(r"\1_SPLIT_\2", result)

    parts = [p for p in result.split("_SPLIT_") if p]
    return parts if parts else [text]


def _split_token(token: str) -> str:
    words: list[str] = []
    for part in _split_camel_case(token):
        if part.islower() and len(part) >= _MIN_CONCAT_LENGTH:
            words.extend(wordninja.split(part) or [part])
        else:
            words.append(part)
    return " ".join(words)


def split_concatenated(text: str) -> str:
    """Split concatenated Latin words inside a line, token by token."""
    return " ".join(
        _split_token(token) if _needs_splitting(token) else token for token in text.split()
    )


def normalize_ocr_line(text: str) -> str:
    """Clean a single OCR line into a usable search query.

    Collapses whitespace, trims punctuation noise at the edges, and splits
    run-together Latin words. Returns an empty string for pure noise.
    """
    line = _WHITESPACE_RE.sub(" ", text).strip(_EDGE_NOISE)
    if not line:
        return ""
    return split_concatenated(line)


def normalize_ocr_lines(lines: Iterable[str]) -> list[str]:
    """Normalize lines, dropping blanks and repeated lines while keeping order."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for raw in lines:
        line = normalize_ocr_line(raw)
        if not line or line in seen:
            continue
        seen.add(line)
        cleaned.append(line)
    return cleaned
