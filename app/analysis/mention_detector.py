"""
app/analysis/mention_detector.py

Classifies whether (and how) one AI answer references the target site.

The detector is a pure function of its inputs. Rules are evaluated in order
and the first match wins:

1. a returned citation URL points at the target domain or a subdomain;
2. the full URL or the domain appears in the answer text;
3. the bare brand name (domain minus TLD) appears as a whole word;
4. otherwise the target is not mentioned.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlparse

from app.domain.mentions import MentionAnalysis, MentionType

RECOMMENDATION_PHRASES: tuple[str, ...] = (
    "recommend",
    "suggest",
    "top choice",
    "best option",
    "highly rated",
    "worth considering",
    "great choice",
    "good option",
    "popular choice",
    "well-known",
    "leading",
    "notable",
)

# Longest suffixes first so "co.uk" wins over "uk".
KNOWN_TLDS: tuple[str, ...] = (
    "co.uk",
    "org.uk",
    "com.au",
    "co.nz",
    "co.jp",
    "com.br",
    "co.in",
    "com",
    "org",
    "net",
    "io",
    "co",
    "ai",
    "app",
    "dev",
    "xyz",
    "uk",
    "de",
    "fr",
    "us",
    "ca",
    "au",
    "in",
    "jp",
    "br",
    "eu",
)

RECOMMENDATION_WINDOW = 200
EXCERPT_WINDOW = 100
MIN_BARE_NAME_LENGTH = 4


def normalize_domain(domain: str) -> str:
    normalized = (domain or "").strip().lower()
    return normalized[4:] if normalized.startswith("www.") else normalized


def bare_name(domain: str) -> str:
    """
    Strip a known TLD suffix and return the last remaining label.

    `pixelrank.com` -> `pixelrank`, `shop.acme.co.uk` -> `acme`.
    """

    normalized = normalize_domain(domain)
    for tld in KNOWN_TLDS:
        suffix = "." + tld
        if normalized.endswith(suffix) and len(normalized) > len(suffix):
            return normalized[: -len(suffix)].split(".")[-1]
    labels = normalized.split(".")
    if len(labels) > 1:
        return labels[-2]
    return normalized


def extract_excerpt(text: str, term: str) -> str | None:
    """
    Return a window of text around the first case-insensitive occurrence of `term`.
    """

    if not text or not term:
        return None
    index = text.lower().find(term.lower())
    if index == -1:
        return None

    start = max(0, index - EXCERPT_WINDOW)
    end = min(len(text), index + len(term) + EXCERPT_WINDOW)
    excerpt = text[start:end].strip()
    if start > 0:
        excerpt = "..." + excerpt
    if end < len(text):
        excerpt = excerpt + "..."
    return excerpt


def is_recommendation(lowered_text: str, term: str) -> bool:
    index = lowered_text.find(term.lower())
    if index == -1:
        return False
    window = lowered_text[max(0, index - RECOMMENDATION_WINDOW) : index + RECOMMENDATION_WINDOW]
    return any(phrase in window for phrase in RECOMMENDATION_PHRASES)


def _citation_matches(citation: str, domain: str) -> bool:
    try:
        hostname = urlparse(citation).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return domain in citation.lower()
    hostname = normalize_domain(hostname)
    return hostname == domain or hostname.endswith("." + domain)


def detect_mention(
    text: str,
    target_url: str,
    target_domain: str,
    citations: Iterable[str] = (),
) -> MentionAnalysis:
    response_text = text or ""
    lowered = response_text.lower()
    domain = normalize_domain(target_domain)
    brand = bare_name(domain)

    if domain:
        # Sorted so the chosen citation does not depend on set iteration order.
        for citation in sorted(citations):
            if _citation_matches(citation, domain):
                return MentionAnalysis(
                    mentioned=True,
                    mention_type=MentionType.DIRECT_CITATION,
                    confidence=1.0,
                    excerpt=extract_excerpt(response_text, domain) or extract_excerpt(response_text, brand),
                    citation_url=citation,
                )

    url = (target_url or "").strip().lower()
    if (url and url in lowered) or (domain and domain in lowered):
        mention_type = (
            MentionType.RECOMMENDATION if is_recommendation(lowered, domain) else MentionType.DIRECT_CITATION
        )
        return MentionAnalysis(
            mentioned=True,
            mention_type=mention_type,
            confidence=1.0,
            excerpt=extract_excerpt(response_text, domain),
        )

    if len(brand) >= MIN_BARE_NAME_LENGTH and brand in lowered:
        if re.search(rf"\b{re.escape(brand)}\b", response_text, re.IGNORECASE):
            mention_type = (
                MentionType.RECOMMENDATION if is_recommendation(lowered, brand) else MentionType.BRAND_MENTION
            )
            return MentionAnalysis(
                mentioned=True,
                mention_type=mention_type,
                confidence=0.8,
                excerpt=extract_excerpt(response_text, brand),
            )

    return MentionAnalysis.not_mentioned()
