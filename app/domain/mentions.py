"""
app/domain/mentions.py

Mention classification types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MentionType(str, Enum):
    DIRECT_CITATION = "DIRECT_CITATION"
    RECOMMENDATION = "RECOMMENDATION"
    BRAND_MENTION = "BRAND_MENTION"
    # Reserved: no detector branch currently produces it.
    PASSING_REFERENCE = "PASSING_REFERENCE"
    NOT_MENTIONED = "NOT_MENTIONED"


@dataclass(frozen=True)
class MentionAnalysis:
    """
    How (and whether) one answer references the target site.
    """

    mentioned: bool
    mention_type: MentionType
    confidence: float
    excerpt: str | None = None
    citation_url: str | None = None

    @classmethod
    def not_mentioned(cls, confidence: float = 1.0) -> "MentionAnalysis":
        return cls(
            mentioned=False,
            mention_type=MentionType.NOT_MENTIONED,
            confidence=confidence,
        )
