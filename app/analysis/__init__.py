"""
app/analysis package marker.
"""

from app.analysis.keyword_discovery import discover_keywords
from app.analysis.mention_detector import bare_name, detect_mention, extract_excerpt
from app.analysis.opportunities import analyze_opportunities
from app.analysis.scoring import calculate_overall_score, calculate_platform_score, round_half_up

__all__ = [
    "analyze_opportunities",
    "bare_name",
    "calculate_overall_score",
    "calculate_platform_score",
    "detect_mention",
    "discover_keywords",
    "extract_excerpt",
    "round_half_up",
]
