"""
app/platforms/registry.py

Builds the fixed, ordered set of platform adapters from settings.
"""

from __future__ import annotations

from app.config import (
    get_anthropic_settings,
    get_gemini_settings,
    get_openai_settings,
    get_perplexity_settings,
    get_platform_http_settings,
)
from app.platforms.anthropic_platform import AnthropicPlatform
from app.platforms.base import PlatformAdapter
from app.platforms.gemini_platform import GeminiPlatform
from app.platforms.openai_platform import OpenAIPlatform
from app.platforms.perplexity_platform import PerplexityPlatform

PLATFORM_ENV_KEYS: tuple[str, ...] = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_GEMINI_API_KEY",
    "PERPLEXITY_API_KEY",
)


def build_platform_adapters() -> list[PlatformAdapter]:
    """
    Return every known adapter in fixed order, usable or not.
    """

    timeout_seconds = get_platform_http_settings().timeout_seconds
    return [
        OpenAIPlatform(get_openai_settings(), timeout_seconds=timeout_seconds),
        AnthropicPlatform(get_anthropic_settings(), timeout_seconds=timeout_seconds),
        GeminiPlatform(get_gemini_settings(), timeout_seconds=timeout_seconds),
        PerplexityPlatform(get_perplexity_settings(), timeout_seconds=timeout_seconds),
    ]


def get_usable_platforms(adapters: list[PlatformAdapter] | None = None) -> list[PlatformAdapter]:
    candidates = adapters if adapters is not None else build_platform_adapters()
    return [adapter for adapter in candidates if adapter.is_usable()]


def get_platform_by_key(key: str, adapters: list[PlatformAdapter] | None = None) -> PlatformAdapter | None:
    candidates = adapters if adapters is not None else build_platform_adapters()
    for adapter in candidates:
        if adapter.key == key:
            return adapter
    return None
