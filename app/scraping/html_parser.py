"""
BeautifulSoup-based parsing layer for the target website's landing page.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup

NON_CONTENT_TAGS = ("script", "style", "nav", "footer", "header", "iframe", "noscript")
MAX_HEADINGS = 20
MAX_META_KEYWORDS = 20
MAX_BODY_CHARS = 5000

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedHtml:
    title: str = ""
    description: str = ""
    headings: list[str] = field(default_factory=list)
    body_text: str = ""
    meta_keywords: list[str] = field(default_factory=list)


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    content = tag.get("content")
    return content.strip() if isinstance(content, str) else ""


class HTMLParsingLayer:
    """
    Deterministic extraction of the page fields keyword discovery needs.
    """

    @classmethod
    def parse(cls, html: str, *, max_body_chars: int = MAX_BODY_CHARS) -> ParsedHtml:
        soup = BeautifulSoup(html or "", "html.parser")
        for element in soup(list(NON_CONTENT_TAGS)):
            element.decompose()

        title_tag = soup.find("title")
        title = (title_tag.get_text(strip=True) if title_tag else "") or _meta_content(soup, property="og:title")

        description = _meta_content(soup, name="description") or _meta_content(
            soup, property="og:description"
        )

        raw_keywords = _meta_content(soup, name="keywords")
        meta_keywords = [keyword.strip() for keyword in raw_keywords.split(",") if keyword.strip()]

        body = soup.find("body")
        body_text = body.get_text(" ") if body else ""
        body_text = _WHITESPACE_RE.sub(" ", body_text).strip()[:max_body_chars]

        return ParsedHtml(
            title=title,
            description=description,
            headings=cls.extract_headings(soup),
            body_text=body_text,
            meta_keywords=meta_keywords[:MAX_META_KEYWORDS],
        )

    @staticmethod
    def extract_headings(soup: BeautifulSoup) -> list[str]:
        headings: list[str] = []
        for node in soup.find_all(["h1", "h2", "h3"]):
            text = _WHITESPACE_RE.sub(" ", node.get_text(" ")).strip()
            if 2 < len(text) < 200:
                headings.append(text)
        return headings[:MAX_HEADINGS]
