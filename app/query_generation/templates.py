"""
app/query_generation/templates.py

Ordered prompt templates. Brand templates come first so they survive the
per-region cap.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QueryTemplate:
    template: str
    category: str
    requires_keyword: bool
    requires_domain: bool


QUERY_TEMPLATES: tuple[QueryTemplate, ...] = (
    QueryTemplate(
        template="What do you know about {domain}?",
        category="brand_awareness",
        requires_keyword=False,
        requires_domain=True,
    ),
    QueryTemplate(
        template="Tell me about {domain} and what services they offer {region}",
        category="brand_awareness",
        requires_keyword=False,
        requires_domain=True,
    ),
    QueryTemplate(
        template="Is {domain} a good choice for {keyword} {region}?",
        category="brand_evaluation",
        requires_keyword=True,
        requires_domain=True,
    ),
    QueryTemplate(
        template="{domain} review - is it a reliable {keyword} provider {region}?",
        category="brand_evaluation",
        requires_keyword=True,
        requires_domain=True,
    ),
    QueryTemplate(
        template="Compare {domain} with other {keyword} providers {region}",
        category="brand_comparison",
        requires_keyword=True,
        requires_domain=True,
    ),
    QueryTemplate(
        template="What are the best {keyword} companies {region}?",
        category="recommendation",
        requires_keyword=True,
        requires_domain=False,
    ),
    QueryTemplate(
        template="Can you recommend a good {keyword} provider {region}?",
        category="recommendation",
        requires_keyword=True,
        requires_domain=False,
    ),
    QueryTemplate(
        template="What are the top {keyword} services {region}?",
        category="recommendation",
        requires_keyword=True,
        requires_domain=False,
    ),
    QueryTemplate(
        template="I need help with {keyword} {region}, who should I use?",
        category="problem_solving",
        requires_keyword=True,
        requires_domain=False,
    ),
    QueryTemplate(
        template="Best tools and services for {keyword} {region}",
        category="tool_discovery",
        requires_keyword=True,
        requires_domain=False,
    ),
)
