"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from app.domain.mentions import MentionType
from app.domain.platforms import PlatformKey
from app.domain.regions import DEFAULT_REGION_COUNT, REGIONS
from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value; empty strings count as unset.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class PlatformSettings:
    """
    Credential and endpoint specifics for one AI platform.

    A platform is usable only when `api_key` is set.
    """

    key: str
    api_key: str | None = None
    model: str = ""
    base_url: str = ""
    max_tokens: int = 1024


@dataclass(frozen=True)
class PlatformHTTPSettings:
    """
    Shared HTTP behavior for platform adapters. No retries are performed.
    """

    timeout_seconds: float = 60.0


@dataclass(frozen=True)
class ScanSettings:
    max_queries_per_region: int = 10
    max_keywords: int = 5
    default_region_codes: tuple[str, ...] = tuple(
        region.code for region in REGIONS[:DEFAULT_REGION_COUNT]
    )


@dataclass(frozen=True)
class ScraperSettings:
    timeout_seconds: float = 30.0
    max_redirects: int = 5
    max_body_chars: int = 5000
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )


def _default_mention_weights() -> dict[str, float]:
    return {
        MentionType.DIRECT_CITATION.value: 1.0,
        MentionType.RECOMMENDATION.value: 0.8,
        MentionType.BRAND_MENTION.value: 0.6,
        MentionType.PASSING_REFERENCE.value: 0.3,
        MentionType.NOT_MENTIONED.value: 0.0,
    }


def _default_platform_weights() -> dict[str, float]:
    return {
        PlatformKey.PERPLEXITY.value: 0.30,
        PlatformKey.OPENAI.value: 0.25,
        PlatformKey.GEMINI.value: 0.25,
        PlatformKey.ANTHROPIC.value: 0.20,
    }


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Weight tables used by the scoring engine.

    Injected rather than imported so scoring can be exercised with any policy.
    """

    mention_weights: dict[str, float] = field(default_factory=_default_mention_weights)
    platform_weights: dict[str, float] = field(default_factory=_default_platform_weights)
    default_platform_weight: float = 0.25

    def mention_weight(self, mention_type: str | None) -> float:
        key = mention_type or MentionType.NOT_MENTIONED.value
        return self.mention_weights.get(str(key), 0.0)

    def platform_weight(self, platform: str) -> float:
        return self.platform_weights.get(platform, self.default_platform_weight)


@lru_cache(maxsize=1)
def get_platform_http_settings() -> PlatformHTTPSettings:
    return PlatformHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("PLATFORM_HTTP_TIMEOUT_SECONDS", 60.0)),
    )


@lru_cache(maxsize=1)
def get_openai_settings() -> PlatformSettings:
    return PlatformSettings(
        key=PlatformKey.OPENAI.value,
        api_key=_get_optional_str_env("OPENAI_API_KEY"),
        model=_get_str_env("OPENAI_MODEL", "gpt-4o-mini"),
        base_url=_get_str_env("OPENAI_BASE_URL", ""),
        max_tokens=max(1, _get_int_env("OPENAI_MAX_TOKENS", 1024)),
    )


@lru_cache(maxsize=1)
def get_anthropic_settings() -> PlatformSettings:
    return PlatformSettings(
        key=PlatformKey.ANTHROPIC.value,
        api_key=_get_optional_str_env("ANTHROPIC_API_KEY"),
        model=_get_str_env("ANTHROPIC_MODEL", "claude-sonnet-4-5-20250929"),
        base_url=_get_str_env("ANTHROPIC_BASE_URL", "https://api.anthropic.com/v1/messages"),
        max_tokens=max(1, _get_int_env("ANTHROPIC_MAX_TOKENS", 1024)),
    )


@lru_cache(maxsize=1)
def get_gemini_settings() -> PlatformSettings:
    return PlatformSettings(
        key=PlatformKey.GEMINI.value,
        api_key=_get_optional_str_env("GOOGLE_GEMINI_API_KEY"),
        model=_get_str_env("GEMINI_MODEL", "gemini-2.0-flash"),
        base_url=_get_str_env(
            "GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta/models",
        ),
        max_tokens=max(1, _get_int_env("GEMINI_MAX_TOKENS", 1024)),
    )


@lru_cache(maxsize=1)
def get_perplexity_settings() -> PlatformSettings:
    return PlatformSettings(
        key=PlatformKey.PERPLEXITY.value,
        api_key=_get_optional_str_env("PERPLEXITY_API_KEY"),
        model=_get_str_env("PERPLEXITY_MODEL", "sonar"),
        base_url=_get_str_env("PERPLEXITY_BASE_URL", "https://api.perplexity.ai/chat/completions"),
        max_tokens=max(1, _get_int_env("PERPLEXITY_MAX_TOKENS", 1024)),
    )


@lru_cache(maxsize=1)
def get_scan_settings() -> ScanSettings:
    """
    Return cached scan pipeline settings from environment variables.
    """

    return ScanSettings(
        max_queries_per_region=max(1, _get_int_env("SCAN_MAX_QUERIES_PER_REGION", 10)),
        max_keywords=max(1, _get_int_env("SCAN_MAX_KEYWORDS", 5)),
    )


@lru_cache(maxsize=1)
def get_scraper_settings() -> ScraperSettings:
    return ScraperSettings(
        timeout_seconds=max(1.0, _get_float_env("SCRAPER_TIMEOUT_SECONDS", 30.0)),
        max_redirects=max(0, _get_int_env("SCRAPER_MAX_REDIRECTS", 5)),
        max_body_chars=max(500, _get_int_env("SCRAPER_MAX_BODY_CHARS", 5000)),
        user_agent=_get_str_env("SCRAPER_USER_AGENT", ScraperSettings.user_agent),
    )


@lru_cache(maxsize=1)
def get_scoring_policy() -> ScoringPolicy:
    return ScoringPolicy()
