"""
app/platforms package marker.
"""

from app.platforms.anthropic_platform import AnthropicPlatform
from app.platforms.base import PlatformAdapter, extract_text_urls, merge_citations
from app.platforms.gemini_platform import GeminiPlatform
from app.platforms.openai_platform import OpenAIPlatform
from app.platforms.perplexity_platform import PerplexityPlatform
from app.platforms.registry import (
    PLATFORM_ENV_KEYS,
    build_platform_adapters,
    get_platform_by_key,
    get_usable_platforms,
)

__all__ = [
    "PlatformAdapter",
    "OpenAIPlatform",
    "AnthropicPlatform",
    "GeminiPlatform",
    "PerplexityPlatform",
    "PLATFORM_ENV_KEYS",
    "build_platform_adapters",
    "get_platform_by_key",
    "get_usable_platforms",
    "extract_text_urls",
    "merge_citations",
]
