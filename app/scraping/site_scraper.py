"""
Fetches the target website and turns its landing page into scan input.
"""

from __future__ import annotations

import logging

import requests

from app.config import ScraperSettings
from app.domain.errors import ScrapeError
from app.domain.scan import ScrapedSite
from app.domain.urls import extract_domain
from app.logging_utils import log_event
from app.scraping.html_parser import HTMLParsingLayer
from app.scraping.keyword_extractor import extract_keywords_from_content

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class SiteScraper:
    """
    Single-page scraper. Any fetch or parse failure raises ScrapeError.
    """

    def __init__(
        self,
        settings: ScraperSettings,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.session.max_redirects = settings.max_redirects
        self.request_headers = {
            "User-Agent": settings.user_agent,
            "Accept": ACCEPT_HEADER,
            "Accept-Language": "en-US,en;q=0.5",
        }

    def scrape(self, url: str) -> ScrapedSite:
        domain = extract_domain(url)
        if not domain:
            raise ScrapeError(f"Cannot scrape url without a hostname: {url}")

        try:
            response = self.session.get(
                url,
                headers=self.request_headers,
                timeout=self.settings.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ScrapeError(f"Failed to fetch {url}: {exc}") from exc

        if response.status_code >= 400:
            raise ScrapeError(f"Failed to fetch {url}: HTTP {response.status_code}")

        try:
            parsed = HTMLParsingLayer.parse(response.text, max_body_chars=self.settings.max_body_chars)
        except Exception as exc:
            raise ScrapeError(f"Failed to parse {url}: {exc}") from exc
        extracted = extract_keywords_from_content(parsed, domain)

        log_event(
            logger,
            logging.INFO,
            "site_scraped",
            url=url,
            domain=domain,
            keyword_count=len(extracted.keywords),
            industry=extracted.industry,
        )
        return ScrapedSite(
            url=url,
            domain=domain,
            title=parsed.title,
            description=parsed.description,
            industry=extracted.industry,
            keywords=extracted.keywords,
            headings=parsed.headings,
            services=extracted.services,
        )
