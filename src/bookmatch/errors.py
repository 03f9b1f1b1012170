# ABOUTME: Exception hierarchy shared by the catalog, LLM, and matching layers.
# ABOUTME: "No match" is a result state, not an exception, so it has no class here.


class BookMatchError(Exception):
    """Base class for every error raised by bookmatch."""


class FetchError(BookMatchError):
    """Raised when an HTTP request fails after transport-level retries."""


class SearchFailed(BookMatchError):
    """Raised when the book catalog cannot be queried or returns garbage.

    Distinct from an empty result: callers retry on failure but not on empty.
    """


class LLMFailed(BookMatchError):
    """Raised when the language model cannot be reached."""


class LLMResponseError(LLMFailed):
    """Raised when the language model answered in a format we cannot parse."""


class ConfigurationError(BookMatchError, ValueError):
    """Raised at construction time for invalid weights, thresholds, or credentials."""
