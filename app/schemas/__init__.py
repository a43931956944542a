"""
app/schemas package marker.
"""

from app.schemas.scan import (
    DiscoveredKeywordSchema,
    HealthResponse,
    OpportunitySchema,
    PlatformInfo,
    PlatformResponseSchema,
    PlatformResultSchema,
    ScanAcceptedResponse,
    ScanCreateRequest,
    ScanDetailResponse,
    ScanListResponse,
    ScanProgressResponse,
    ScanQuerySchema,
    ScanSummaryResponse,
)

__all__ = [
    "DiscoveredKeywordSchema",
    "HealthResponse",
    "OpportunitySchema",
    "PlatformInfo",
    "PlatformResponseSchema",
    "PlatformResultSchema",
    "ScanAcceptedResponse",
    "ScanCreateRequest",
    "ScanDetailResponse",
    "ScanListResponse",
    "ScanProgressResponse",
    "ScanQuerySchema",
    "ScanSummaryResponse",
]
