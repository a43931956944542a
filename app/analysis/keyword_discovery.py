"""
app/analysis/keyword_discovery.py

Surfaces terms AI platforms associate with the brand beyond the scraped keywords.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from app.domain.scan import DiscoveredKeyword, QueryResults

STOP_WORDS: frozenset[str] = frozenset(
    """
    the be to of and a in that have i it for not on with he as you do at this but his by
    from they we say her she or an will my one all would there their what so up out if
    about who get which go me when make can like time no just him know take into year
    your some could them see other than then now also back after use how our work first
    well way even new want any these been has more was were are is its most such here
    where may should does did very including however while both through between many
    those several various based using provide provides offering offers known often
    being over each
    """.split()
)

WORD_RE = re.compile(r"\b[a-z]{3,25}\b")
DOMAIN_BASE_RE = re.compile(r"\.(com|org|net|io|au|co|uk).*$")

MIN_WORD_LENGTH = 4
MIN_FREQUENCY = 2
MAX_DISCOVERED = 15
FALLBACK_TEXT_CHARS = 500
SAMPLE_CONTEXT_CHARS = 150


@dataclass
class _TermTally:
    context: str
    count: int = 0
    platforms: list[str] = field(default_factory=list)

    def add(self, platform: str) -> None:
        self.count += 1
        if platform not in self.platforms:
            self.platforms.append(platform)


def discover_keywords(
    queries: Sequence[QueryResults],
    domain: str,
    scraped_keywords: Sequence[str],
) -> list[DiscoveredKeyword]:
    """
    Count single words and adjacent word pairs in answers that mention the site.

    Only terms seen at least twice and not already scraped are kept; the top
    fifteen by frequency are returned.
    """

    domain = (domain or "").lower()
    domain_base = DOMAIN_BASE_RE.sub("", domain)
    scraped = {keyword.lower() for keyword in scraped_keywords}
    terms: dict[str, _TermTally] = {}

    for query in queries:
        for response in query.responses:
            if not response.mentioned or response.is_error:
                continue

            text = response.mention_excerpt or response.response_text[:FALLBACK_TEXT_CHARS]
            words = WORD_RE.findall(text.lower())
            context = text[:SAMPLE_CONTEXT_CHARS]

            for word in words:
                if word in STOP_WORDS or word == domain_base or word in domain or len(word) < MIN_WORD_LENGTH:
                    continue
                terms.setdefault(word, _TermTally(context=context)).add(response.platform)

            for first, second in zip(words, words[1:]):
                if first in STOP_WORDS or second in STOP_WORDS:
                    continue
                if first in domain or second in domain:
                    continue
                terms.setdefault(f"{first} {second}", _TermTally(context=context)).add(response.platform)

    discovered = [
        DiscoveredKeyword(
            keyword=term,
            frequency=tally.count,
            platforms=list(tally.platforms),
            sample_context=tally.context,
        )
        for term, tally in terms.items()
        if term not in scraped and tally.count >= MIN_FREQUENCY
    ]
    discovered.sort(key=lambda item: -item.frequency)
    return discovered[:MAX_DISCOVERED]
