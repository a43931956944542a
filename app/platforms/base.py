"""
app/platforms/base.py

Platform adapter contract and shared HTTP/citation helpers.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

import requests

from app.domain.errors import ProviderCallError
from app.domain.platforms import PlatformQueryResult

logger = logging.getLogger(__name__)

URL_REGEX = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+")


@runtime_checkable
class PlatformAdapter(Protocol):
    """
    One AI answer engine. Adapters never share state with each other.
    """

    key: str
    name: str

    def is_usable(self) -> bool:
        ...

    def query(self, prompt: str) -> PlatformQueryResult:
        ...


def extract_text_urls(text: str) -> set[str]:
    """
    Return every http(s) URL literally present in `text`.
    """

    if not text:
        return set()
    return set(URL_REGEX.findall(text))


def merge_citations(text: str, *sources: Iterable[str | None]) -> frozenset[str]:
    """
    Union provider-supplied citation URLs with URLs found in the answer text.
    """

    merged = extract_text_urls(text)
    for source in sources:
        for url in source:
            if isinstance(url, str) and url.strip():
                merged.add(url.strip())
    return frozenset(merged)


def elapsed_ms(started_monotonic: float) -> int:
    return max(0, int((time.monotonic() - started_monotonic) * 1000))


def post_json(
    session: requests.Session,
    *,
    platform: str,
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    timeout: float,
) -> dict[str, Any]:
    """
    POST a JSON payload and return the decoded object body.

    Transport failures, non-2xx statuses and non-object bodies all surface as
    ProviderCallError so callers only handle one failure type.
    """

    try:
        response = session.post(url, headers=headers, json=payload, timeout=timeout)
    except requests.RequestException as exc:
        raise ProviderCallError(platform, f"request failed: {exc}") from exc

    if response.status_code < 200 or response.status_code >= 300:
        logger.warning(
            "Platform request rejected platform=%s status=%s",
            platform,
            response.status_code,
        )
        raise ProviderCallError(
            platform,
            f"HTTP {response.status_code}: {response.text[:300]}",
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise ProviderCallError(platform, "response was not valid JSON.") from exc

    if not isinstance(body, dict):
        raise ProviderCallError(platform, "response body was not a JSON object.")
    return body


def coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0
