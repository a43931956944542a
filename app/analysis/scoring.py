"""
app/analysis/scoring.py

Converts classified responses into per-platform and overall visibility scores.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from app.config import ScoringPolicy
from app.domain.mentions import MentionType
from app.domain.scan import ClassifiedResponse, PlatformScore

MIN_SCORE = 0
MAX_SCORE = 100


def round_half_up(value: float) -> int:
    """
    Round .5 upward, matching the rounding used across the product UI.
    """

    return int(math.floor(value + 0.5))


def _clamp(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def calculate_platform_score(
    responses: Iterable[ClassifiedResponse],
    policy: ScoringPolicy,
) -> PlatformScore:
    """
    Score one platform over its non-error responses.

    score = round(100 * mean(weight[mention_type] * confidence)); a missing
    confidence counts as 1.0. Error responses are excluded from every count.
    """

    considered = [response for response in responses if not response.is_error]
    total = len(considered)
    if total == 0:
        return PlatformScore(score=0, total_queries=0, mention_count=0, citation_count=0)

    weighted_sum = 0.0
    for response in considered:
        confidence = 1.0 if response.confidence is None else response.confidence
        weighted_sum += policy.mention_weight(response.mention_type) * confidence

    return PlatformScore(
        score=_clamp(round_half_up(weighted_sum / total * 100)),
        total_queries=total,
        mention_count=sum(1 for response in considered if response.mentioned),
        citation_count=sum(
            1 for response in considered if response.mention_type == MentionType.DIRECT_CITATION.value
        ),
    )


def calculate_overall_score(
    platform_scores: Sequence[tuple[str, int]],
    policy: ScoringPolicy,
) -> int:
    """
    Weighted mean of per-platform scores, renormalized over platforms present.
    """

    if not platform_scores:
        return 0

    weighted_sum = 0.0
    total_weight = 0.0
    for platform, score in platform_scores:
        weight = policy.platform_weight(platform)
        weighted_sum += score * weight
        total_weight += weight

    if total_weight <= 0:
        return 0
    return _clamp(round_half_up(weighted_sum / total_weight))
