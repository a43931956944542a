"""
Schemas for scan creation, progress polling and result endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ScanCreateRequest(BaseModel):
    url: str = Field(min_length=1, max_length=2048, description="Website to scan")
    regions: list[str] | None = Field(
        default=None,
        description="Region codes to scan; omitted means the default region set",
    )


class ScanAcceptedResponse(BaseModel):
    scan_id: UUID
    status: str


class ScanProgressResponse(BaseModel):
    status: str
    progress: int
    current_step: str | None = None
    overall_score: int | None = None
    error_message: str | None = None


class ScanSummaryResponse(BaseModel):
    scan_id: UUID
    url: str
    domain: str
    status: str
    progress: int
    overall_score: int | None = None
    regions: list[str] = Field(default_factory=list)
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None


class ScanListResponse(BaseModel):
    scans: list[ScanSummaryResponse] = Field(default_factory=list)


class PlatformResponseSchema(BaseModel):
    platform: str
    platform_name: str
    response_text: str
    citations: list[str] = Field(default_factory=list)
    tokens_used: int = 0
    latency_ms: int = 0
    is_error: bool = False
    mentioned: bool = False
    mention_type: str | None = None
    mention_excerpt: str | None = None
    citation_url: str | None = None
    confidence: float | None = None


class ScanQuerySchema(BaseModel):
    query_text: str
    keyword: str
    region: str
    region_label: str
    category: str | None = None
    responses: list[PlatformResponseSchema] = Field(default_factory=list)


class PlatformResultSchema(BaseModel):
    platform: str
    platform_name: str
    score: int
    total_queries: int
    mention_count: int
    citation_count: int


class OpportunitySchema(BaseModel):
    type: str
    priority: str
    title: str
    description: str
    suggested_action: str
    keyword: str | None = None
    region: str | None = None
    competitors: list[str] | None = None


class DiscoveredKeywordSchema(BaseModel):
    keyword: str
    frequency: int
    platforms: list[str] = Field(default_factory=list)
    sample_context: str = ""


class ScanDetailResponse(ScanSummaryResponse):
    current_step: str | None = None
    error_message: str | None = None
    site_title: str | None = None
    site_description: str | None = None
    industry: str | None = None
    keywords: list[str] = Field(default_factory=list)
    platform_results: list[PlatformResultSchema] = Field(default_factory=list)
    queries: list[ScanQuerySchema] = Field(default_factory=list)
    opportunities: list[OpportunitySchema] = Field(default_factory=list)
    discovered_keywords: list[DiscoveredKeywordSchema] = Field(default_factory=list)


class PlatformInfo(BaseModel):
    key: str
    name: str


class HealthResponse(BaseModel):
    status: str
    platforms: list[PlatformInfo] = Field(default_factory=list)
    platform_count: int = 0
