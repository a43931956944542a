"""
app/domain/scan.py

Plain data carriers passed between the scan pipeline stages.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScrapedSite:
    """
    Output of the website scraper collaborator.
    """

    url: str
    domain: str
    title: str = ""
    description: str = ""
    industry: str = ""
    keywords: list[str] = field(default_factory=list)
    headings: list[str] = field(default_factory=list)
    services: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GeneratedQuery:
    text: str
    keyword: str
    region: str
    region_label: str
    category: str


@dataclass(frozen=True)
class ClassifiedResponse:
    """
    One platform answer after classification, detached from the ORM.
    """

    platform: str
    response_text: str
    mentioned: bool
    mention_type: str | None = None
    mention_excerpt: str | None = None
    citation_url: str | None = None
    confidence: float | None = None
    is_error: bool = False


@dataclass(frozen=True)
class QueryResults:
    """
    One generated query with every platform answer it received.
    """

    text: str
    keyword: str
    region: str
    region_label: str
    category: str | None
    responses: list[ClassifiedResponse] = field(default_factory=list)


@dataclass(frozen=True)
class PlatformScore:
    score: int
    total_queries: int
    mention_count: int
    citation_count: int


@dataclass(frozen=True)
class ProgressSnapshot:
    """
    Pollable view of a running scan. Score fields stay None until completion.
    """

    status: str
    progress: int
    current_step: str | None
    overall_score: int | None
    error_message: str | None


@dataclass(frozen=True)
class Opportunity:
    """
    Advisory visibility gap. Computed on demand and never persisted.
    """

    type: str
    priority: str
    title: str
    description: str
    suggested_action: str
    keyword: str | None = None
    region: str | None = None
    competitors: list[str] | None = None


@dataclass(frozen=True)
class DiscoveredKeyword:
    keyword: str
    frequency: int
    platforms: list[str]
    sample_context: str
