"""
app/domain/urls.py

Target URL normalization used at scan creation and by the scraper.
"""

from __future__ import annotations

from urllib.parse import urlparse

from app.domain.errors import ScanValidationError


def normalize_target_url(raw_url: str) -> str:
    """
    Trim, default the scheme to https, and drop trailing slashes.

    Raises ScanValidationError when no hostname can be parsed.
    """

    url = (raw_url or "").strip()
    if not url:
        raise ScanValidationError("url must not be empty.")
    if not url.lower().startswith(("http://", "https://")):
        url = f"https://{url}"
    url = url.rstrip("/")

    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise ScanValidationError(f"Invalid url: {raw_url}") from exc
    hostname = parsed.hostname or ""
    if "." not in hostname or " " in url:
        raise ScanValidationError(f"Invalid url: {raw_url}")
    return url


def extract_domain(url: str) -> str:
    """
    Return the lower-cased hostname of `url`, or "" when it has none.
    """

    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""
