# ABOUTME: Shared Click options and kit construction for Bookmatch CLI commands.
# ABOUTME: Credentials fall back to environment variables; match tuning maps onto MatchConfig.

from collections.abc import Callable
from typing import Any

import click

from bookmatch.config import (
    NAVER_CLIENT_ID_ENV,
    NAVER_CLIENT_SECRET_ENV,
    OPENAI_API_KEY_ENV,
    ApiCredentials,
    MatchConfig,
)
from bookmatch.core.kit import BookMatchKit
from bookmatch.errors import ConfigurationError

_DEFAULTS = MatchConfig()

_API_OPTIONS = [
    click.option(
        "--naver-client-id",
        envvar=NAVER_CLIENT_ID_ENV,
        show_envvar=True,
        default="",
        help="Naver Open API client id.",
    ),
    click.option(
        "--naver-client-secret",
        envvar=NAVER_CLIENT_SECRET_ENV,
        show_envvar=True,
        default="",
        help="Naver Open API client secret.",
    ),
    click.option(
        "--openai-api-key",
        envvar=OPENAI_API_KEY_ENV,
        show_envvar=True,
        default="",
        help="OpenAI API key (enables title correction and recommendations).",
    ),
]

_MATCH_OPTIONS = [
    click.option(
        "--title-threshold",
        type=click.FloatRange(0.0, 1.0),
        default=_DEFAULTS.title_similarity_threshold,
        show_default=True,
        help="Minimum title similarity for a match.",
    ),
    click.option(
        "--author-threshold",
        type=click.FloatRange(0.0, 1.0),
        default=_DEFAULTS.author_similarity_threshold,
        show_default=True,
        help="Minimum author similarity for a match.",
    ),
    click.option(
        "--title-weight",
        type=click.FloatRange(0.0, 1.0),
        default=_DEFAULTS.title_weight,
        show_default=True,
        help="Weight of the title in the combined score; the author gets the rest.",
    ),
    click.option(
        "--max-retries",
        type=click.IntRange(min=0),
        default=_DEFAULTS.max_retries,
        show_default=True,
        help="LLM-assisted retries before giving up on a book.",
    ),
]


def _apply(options: list[Callable[[Any], Any]], func: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(options):
        func = option(func)
    return func


def api_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --naver-client-id, --naver-client-secret, and --openai-api-key."""
    return _apply(_API_OPTIONS, func)


def match_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --title-threshold, --author-threshold, --title-weight, and --max-retries."""
    return _apply(_MATCH_OPTIONS, func)


def build_config(
    title_threshold: float,
    author_threshold: float,
    title_weight: float,
    max_retries: int,
) -> MatchConfig:
    """Translate CLI tuning options into a MatchConfig."""
    try:
        return MatchConfig(
            title_similarity_threshold=title_threshold,
            author_similarity_threshold=author_threshold,
            title_weight=title_weight,
            author_weight=round(1.0 - title_weight, 10),
            max_retries=max_retries,
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc


def create_kit(
    naver_client_id: str,
    naver_client_secret: str,
    openai_api_key: str,
    config: MatchConfig,
) -> BookMatchKit:
    """Create the default kit (Naver search, optional OpenAI)."""
    try:
        credentials = ApiCredentials(
            naver_client_id=naver_client_id,
            naver_client_secret=naver_client_secret,
            openai_api_key=openai_api_key or None,
        )
    except ConfigurationError as exc:
        raise click.UsageError(
            f"{exc}. Pass --naver-client-id/--naver-client-secret or set "
            f"{NAVER_CLIENT_ID_ENV}/{NAVER_CLIENT_SECRET_ENV}."
        ) from exc
    return BookMatchKit.from_credentials(credentials, config)
