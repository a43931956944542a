"""
tests/fakes.py

In-process stand-ins for platform adapters and the website scraper.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from app.domain.errors import ProviderCallError
from app.domain.platforms import PlatformQueryResult, display_name
from app.domain.scan import ScrapedSite


class FakePlatform:
    """
    In-process stand-in for a platform adapter.

    `answer` may be a fixed string or a callable of the prompt; `error`
    makes every call raise it.
    """

    def __init__(
        self,
        key: str,
        *,
        answer: str | Callable[[str], str] = "No relevant providers come to mind.",
        citations: Iterable[str] = (),
        error: Exception | None = None,
        usable: bool = True,
    ) -> None:
        self.key = key
        self.name = display_name(key)
        self._answer = answer
        self._citations = frozenset(citations)
        self._error = error
        self._usable = usable
        self.prompts: list[str] = []

    def is_usable(self) -> bool:
        return self._usable

    def query(self, prompt: str) -> PlatformQueryResult:
        self.prompts.append(prompt)
        if self._error is not None:
            raise self._error
        text = self._answer(prompt) if callable(self._answer) else self._answer
        return PlatformQueryResult(text=text, citations=self._citations, tokens_used=42, latency_ms=7)


class FakeScraper:
    def __init__(self, site: ScrapedSite | None = None, *, error: Exception | None = None) -> None:
        self._site = site
        self._error = error
        self.calls: list[str] = []

    def scrape(self, url: str) -> ScrapedSite:
        self.calls.append(url)
        if self._error is not None:
            raise self._error
        assert self._site is not None
        return self._site


def provider_error(platform: str, message: str = "HTTP 500: upstream unavailable") -> ProviderCallError:
    return ProviderCallError(platform, message)
