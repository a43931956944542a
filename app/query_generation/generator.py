"""
app/query_generation/generator.py

Deterministic expansion of scraped site data into search prompts.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from app.domain.regions import Region
from app.domain.scan import GeneratedQuery, ScrapedSite
from app.query_generation.templates import QUERY_TEMPLATES, QueryTemplate

BRAND_KEYWORD_LIMIT = 2

_WHITESPACE_RE = re.compile(r"\s+")


def render_template(template: QueryTemplate, *, domain: str, keyword: str, region: Region) -> str:
    text = (
        template.template.replace("{keyword}", keyword)
        .replace("{domain}", domain)
        .replace("{region}", region.suffix)
    )
    return _WHITESPACE_RE.sub(" ", text).strip()


def generate_queries(
    site: ScrapedSite,
    regions: Sequence[Region],
    *,
    max_queries_per_region: int = 10,
    max_keywords: int = 5,
) -> list[GeneratedQuery]:
    """
    Build the ordered prompt list for a scan.

    Per region, templates are walked in order until `max_queries_per_region`
    is reached. Domain-only templates fire once with the domain standing in as
    the keyword; domain+keyword templates use the top two keywords; the rest
    iterate every top keyword. No keywords means no queries.
    """

    top_keywords = [keyword for keyword in site.keywords if keyword][:max_keywords]
    if not top_keywords:
        return []

    queries: list[GeneratedQuery] = []
    for region in regions:
        region_count = 0
        for template in QUERY_TEMPLATES:
            if region_count >= max_queries_per_region:
                break

            if template.requires_domain and not template.requires_keyword:
                keywords = [site.domain]
            elif template.requires_domain:
                keywords = top_keywords[:BRAND_KEYWORD_LIMIT]
            else:
                keywords = top_keywords

            for keyword in keywords:
                if region_count >= max_queries_per_region:
                    break
                queries.append(
                    GeneratedQuery(
                        text=render_template(template, domain=site.domain, keyword=keyword, region=region),
                        keyword=keyword,
                        region=region.code,
                        region_label=region.label,
                        category=template.category,
                    )
                )
                region_count += 1
    return queries
