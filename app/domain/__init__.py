"""
app/domain package marker.
"""

from app.domain.errors import (
    InvalidTransitionError,
    PipelineFatalError,
    ProviderCallError,
    ScanValidationError,
    ScrapeError,
)
from app.domain.mentions import MentionAnalysis, MentionType
from app.domain.platforms import PLATFORM_DISPLAY_NAMES, PlatformKey, PlatformQueryResult
from app.domain.regions import REGIONS, Region
from app.domain.scan import (
    ClassifiedResponse,
    DiscoveredKeyword,
    GeneratedQuery,
    Opportunity,
    PlatformScore,
    ProgressSnapshot,
    QueryResults,
    ScrapedSite,
)
from app.domain.scan_status import ALLOWED_TRANSITIONS, ScanStatus

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ClassifiedResponse",
    "DiscoveredKeyword",
    "GeneratedQuery",
    "InvalidTransitionError",
    "MentionAnalysis",
    "MentionType",
    "Opportunity",
    "PLATFORM_DISPLAY_NAMES",
    "PipelineFatalError",
    "PlatformKey",
    "PlatformQueryResult",
    "PlatformScore",
    "ProgressSnapshot",
    "ProviderCallError",
    "QueryResults",
    "REGIONS",
    "Region",
    "ScanStatus",
    "ScanValidationError",
    "ScrapeError",
    "ScrapedSite",
]
