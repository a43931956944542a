"""
app/domain/platforms.py

Platform identities and the normalized result every adapter returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PlatformKey(str, Enum):
    OPENAI = "OPENAI"
    ANTHROPIC = "ANTHROPIC"
    GEMINI = "GEMINI"
    PERPLEXITY = "PERPLEXITY"


PLATFORM_DISPLAY_NAMES: dict[str, str] = {
    PlatformKey.OPENAI.value: "ChatGPT",
    PlatformKey.ANTHROPIC.value: "Claude",
    PlatformKey.GEMINI.value: "Gemini",
    PlatformKey.PERPLEXITY.value: "Perplexity",
}


def display_name(platform: str) -> str:
    return PLATFORM_DISPLAY_NAMES.get(platform, platform)


@dataclass(frozen=True)
class PlatformQueryResult:
    """
    Provider answer normalized at the adapter boundary.
    """

    text: str
    citations: frozenset[str] = field(default_factory=frozenset)
    tokens_used: int = 0
    latency_ms: int = 0
