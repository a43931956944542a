"""
Frequency-based keyword, service and industry extraction from parsed HTML.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field

from app.scraping.html_parser import ParsedHtml

STOP_WORDS: frozenset[str] = frozenset(
    """
    the be to of and a in that have i it for not on with he as you do at this but his by
    from they we say her she or an will my one all would there their what so up out if
    about who get which go me when make can like time no just him know take people into
    year your good some could them see other than then now look only come its over think
    also back after use two how our work first well way even new want because any these
    give day most us are is was has more been were being had did does very may should
    must much own too here where why let keep still might while each every both such
    those since same through home contact menu page click read learn view privacy policy
    terms cookie cookies accept close search sign login register subscribe share follow
    """.split()
)

INDUSTRY_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Digital Marketing", ("marketing", "seo", "sem", "ppc", "advertising", "campaign")),
    ("Software Development", ("software", "development", "programming", "code", "developer", "app")),
    ("E-commerce", ("shop", "store", "ecommerce", "product", "buy", "cart", "checkout")),
    ("Healthcare", ("health", "medical", "doctor", "patient", "clinic", "hospital")),
    ("Finance", ("finance", "banking", "investment", "insurance", "loan", "credit")),
    ("Education", ("education", "learning", "course", "training", "school", "university")),
    ("Real Estate", ("real estate", "property", "house", "apartment", "rent", "mortgage")),
    ("Technology", ("technology", "tech", "digital", "cloud", "data", "ai", "automation")),
    ("Consulting", ("consulting", "consultant", "advisory", "strategy", "management")),
    ("Design", ("design", "creative", "branding", "graphic", "ui", "ux")),
    ("SaaS", ("saas", "platform", "tool", "subscription", "dashboard", "analytics")),
    ("Agency", ("agency", "services", "solutions", "partner", "client")),
)
DEFAULT_INDUSTRY = "General Business"

WORD_RE = re.compile(r"\b[a-z]{3,20}\b")
NON_ALPHA_RE = re.compile(r"[^a-z]")
MAX_FREQUENT_WORDS = 15
MAX_KEYWORDS = 20
MAX_SERVICES = 10
BODY_SAMPLE_CHARS = 2000


@dataclass(frozen=True)
class ExtractedContent:
    industry: str = DEFAULT_INDUSTRY
    keywords: list[str] = field(default_factory=list)
    services: list[str] = field(default_factory=list)


def infer_industry(text: str) -> str:
    best_match = DEFAULT_INDUSTRY
    best_score = 0
    for industry, patterns in INDUSTRY_PATTERNS:
        score = sum(
            len(re.findall(rf"\b{re.escape(pattern)}\b", text, re.IGNORECASE)) for pattern in patterns
        )
        if score > best_score:
            best_score = score
            best_match = industry
    return best_match


def _heading_phrases(parsed: ParsedHtml) -> list[str]:
    source = ". ".join([parsed.title, parsed.description, *parsed.headings]).lower()
    tokens = [NON_ALPHA_RE.sub("", token) for token in source.split()]
    phrases: list[str] = []
    for first, second in zip(tokens, tokens[1:]):
        if len(first) > 2 and len(second) > 2 and first not in STOP_WORDS and second not in STOP_WORDS:
            phrases.append(f"{first} {second}")
    return phrases


def extract_keywords_from_content(parsed: ParsedHtml, domain: str) -> ExtractedContent:
    """
    Rank keywords as: meta keywords, then two-word heading phrases, then the
    most frequent content words. Words contained in the domain are skipped.
    """

    all_text = " ".join(
        [parsed.title, parsed.description, *parsed.headings, parsed.body_text[:BODY_SAMPLE_CHARS]]
    ).lower()

    counts: Counter[str] = Counter(
        word for word in WORD_RE.findall(all_text) if word not in STOP_WORDS and word not in domain
    )
    frequent = [word for word, _ in counts.most_common(MAX_FREQUENT_WORDS)]

    ranked = [keyword.lower() for keyword in parsed.meta_keywords] + _heading_phrases(parsed) + frequent
    keywords = list(dict.fromkeys(ranked))[:MAX_KEYWORDS]

    services = [heading for heading in parsed.headings if 5 < len(heading) < 100][:MAX_SERVICES]

    return ExtractedContent(
        industry=infer_industry(all_text),
        keywords=keywords,
        services=services,
    )
