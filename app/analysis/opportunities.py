"""
app/analysis/opportunities.py

Mines classified scan results for actionable visibility gaps.

Findings are advisory and recomputed on demand; nothing here is persisted.
Error responses are ignored by every rule.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import urlparse

from app.analysis.scoring import round_half_up
from app.domain.platforms import display_name
from app.domain.scan import Opportunity, QueryResults

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

COMPETITOR_URL_RE = re.compile(r"https?://(?:[a-z0-9][-a-z0-9]*\.)+[a-z]{2,}", re.IGNORECASE)
COMPETITOR_DOMAIN_RE = re.compile(
    r"\b([a-z0-9][-a-z0-9]*\.(?:com|io|org|net|co|ai|app|dev|xyz))\b",
    re.IGNORECASE,
)
MIN_COMPETITOR_COUNT = 2
MAX_COMPETITORS = 5
MAX_COMPETITOR_KEYWORDS = 5

REGION_RATE_FACTOR = 0.5
PLATFORM_RATE_FACTOR = 0.3
MIN_AVERAGE_RATE = 0.1

CATEGORY_SUGGESTIONS: dict[str, str] = {
    "brand_comparison": "Create detailed comparison pages showing how you stack up against alternatives.",
    "brand_evaluation": (
        "Build a reviews/testimonials page and encourage third-party reviews on authoritative sites."
    ),
    "recommendation": "Publish case studies and success stories that demonstrate your expertise.",
    "problem_solving": "Create how-to guides and solution-focused content addressing common problems.",
    "tool_discovery": "List your product on directories and build integration pages with popular tools.",
}


@dataclass
class _Tally:
    total: int = 0
    mentioned: int = 0
    label: str = ""

    @property
    def rate(self) -> float:
        return self.mentioned / self.total if self.total else 0.0


@dataclass
class _CompetitorTally:
    count: int = 0
    keywords: list[str] = field(default_factory=list)

    def add(self, keyword: str) -> None:
        self.count += 1
        if keyword not in self.keywords:
            self.keywords.append(keyword)


def _is_own_domain(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def _keyword_gaps(queries: Sequence[QueryResults], domain: str) -> list[Opportunity]:
    stats: dict[str, _Tally] = {}
    for query in queries:
        tally = stats.setdefault(query.keyword, _Tally())
        for response in query.responses:
            if response.is_error:
                continue
            tally.total += 1
            tally.mentioned += int(response.mentioned)

    findings: list[Opportunity] = []
    for keyword, tally in stats.items():
        if keyword == domain:
            continue
        if tally.total > 0 and tally.mentioned == 0:
            findings.append(
                Opportunity(
                    type="keyword_gap",
                    priority="high",
                    title=f'Not visible for "{keyword}"',
                    description=(
                        f'AI platforms were asked {tally.total} queries about "{keyword}" '
                        "and never mentioned your site."
                    ),
                    keyword=keyword,
                    suggested_action=(
                        f'Create in-depth content targeting "{keyword}": a comprehensive guide, '
                        "comparison, or resource page."
                    ),
                )
            )
    return findings


def _competitors(queries: Sequence[QueryResults], domain: str) -> list[Opportunity]:
    counts: dict[str, _CompetitorTally] = {}
    for query in queries:
        for response in query.responses:
            if response.mentioned or response.is_error:
                continue
            text = response.response_text

            for url in COMPETITOR_URL_RE.findall(text):
                try:
                    hostname = urlparse(url).hostname or ""
                except ValueError:
                    continue
                if hostname.startswith("www."):
                    hostname = hostname[4:]
                if not hostname or _is_own_domain(hostname, domain):
                    continue
                counts.setdefault(hostname, _CompetitorTally()).add(query.keyword)

            for match in COMPETITOR_DOMAIN_RE.finditer(text):
                candidate = match.group(1).lower()
                if _is_own_domain(candidate, domain):
                    continue
                counts.setdefault(candidate, _CompetitorTally()).add(query.keyword)

    # sorted() is stable, so ties keep first-seen order.
    top = sorted(
        ((name, tally) for name, tally in counts.items() if tally.count >= MIN_COMPETITOR_COUNT),
        key=lambda item: -item[1].count,
    )[:MAX_COMPETITORS]
    if not top:
        return []

    competitor_domains = [name for name, _ in top]
    keywords: list[str] = []
    for _, tally in top:
        for keyword in tally.keywords:
            if keyword not in keywords:
                keywords.append(keyword)
    keywords = keywords[:MAX_COMPETITOR_KEYWORDS]

    joined_keywords = '", "'.join(keywords)
    return [
        Opportunity(
            type="competitor_present",
            priority="high",
            title="Competitors are visible where you're not",
            description=(
                "These competitors appear in AI responses for your keywords: "
                f"{', '.join(competitor_domains)}. "
                f'They\'re being mentioned for topics like "{joined_keywords}".'
            ),
            competitors=competitor_domains,
            suggested_action=(
                "Analyze what content these competitors have that earns AI mentions, and create "
                "better, more comprehensive content on the same topics."
            ),
        )
    ]


def _low_visibility_regions(queries: Sequence[QueryResults]) -> list[Opportunity]:
    stats: dict[str, _Tally] = {}
    for query in queries:
        tally = stats.setdefault(query.region, _Tally(label=query.region_label))
        for response in query.responses:
            if response.is_error:
                continue
            tally.total += 1
            tally.mentioned += int(response.mentioned)

    scored = [(region, tally) for region, tally in stats.items() if tally.total > 0]
    if not scored:
        return []
    average = sum(tally.rate for _, tally in scored) / len(scored)

    findings: list[Opportunity] = []
    for region, tally in scored:
        if tally.rate < average * REGION_RATE_FACTOR and average > MIN_AVERAGE_RATE:
            findings.append(
                Opportunity(
                    type="low_visibility_region",
                    priority="medium",
                    title=f"Low visibility in {tally.label}",
                    description=(
                        f"Your mention rate in {tally.label} is {round_half_up(tally.rate * 100)}%, "
                        f"compared to the average of {round_half_up(average * 100)}%."
                    ),
                    region=region,
                    suggested_action=(
                        f"Create region-specific content for {tally.label}: local case studies, "
                        "pricing pages, or service pages targeting this market."
                    ),
                )
            )
    return findings


def _partial_platforms(queries: Sequence[QueryResults]) -> list[Opportunity]:
    stats: dict[str, _Tally] = {}
    for query in queries:
        for response in query.responses:
            if response.is_error:
                continue
            tally = stats.setdefault(response.platform, _Tally())
            tally.total += 1
            tally.mentioned += int(response.mentioned)

    scored = [(platform, tally) for platform, tally in stats.items() if tally.total > 0]
    if not scored:
        return []
    average = sum(tally.rate for _, tally in scored) / len(scored)

    findings: list[Opportunity] = []
    for platform, tally in scored:
        if tally.rate < average * PLATFORM_RATE_FACTOR and average > MIN_AVERAGE_RATE:
            name = display_name(platform)
            findings.append(
                Opportunity(
                    type="partial_platform",
                    priority="medium",
                    title=f"Low visibility on {name}",
                    description=(
                        f"{name} mentions your site {round_half_up(tally.rate * 100)}% of the time, "
                        f"compared to the average of {round_half_up(average * 100)}% across platforms."
                    ),
                    suggested_action=(
                        "Ensure your content is well-structured with clear headings, facts, and "
                        f"citations that {name} can easily reference."
                    ),
                )
            )
    return findings


def _content_suggestions(queries: Sequence[QueryResults]) -> list[Opportunity]:
    stats: dict[str, _Tally] = {}
    for query in queries:
        tally = stats.setdefault(query.category or "general", _Tally())
        for response in query.responses:
            if response.is_error:
                continue
            tally.total += 1
            tally.mentioned += int(response.mentioned)

    findings: list[Opportunity] = []
    for category, tally in stats.items():
        suggestion = CATEGORY_SUGGESTIONS.get(category)
        if suggestion is None or tally.total == 0 or tally.mentioned > 0:
            continue
        readable = category.replace("_", " ")
        findings.append(
            Opportunity(
                type="content_suggestion",
                priority="low",
                title=f'No visibility in "{readable}" queries',
                description=(
                    f'{tally.total} queries in the "{readable}" category returned no mentions of your site.'
                ),
                suggested_action=suggestion,
            )
        )
    return findings


def analyze_opportunities(queries: Sequence[QueryResults], domain: str) -> list[Opportunity]:
    """
    Return every finding, high priority first. Order within a priority follows
    rule order and then first-seen data order.
    """

    domain = (domain or "").lower()
    findings = [
        *_keyword_gaps(queries, domain),
        *_competitors(queries, domain),
        *_low_visibility_regions(queries),
        *_partial_platforms(queries),
        *_content_suggestions(queries),
    ]
    return sorted(findings, key=lambda finding: PRIORITY_ORDER[finding.priority])
