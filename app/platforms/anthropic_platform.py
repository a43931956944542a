"""
app/platforms/anthropic_platform.py

Claude adapter over the Anthropic Messages HTTP API.
"""

from __future__ import annotations

import time

import requests

from app.config import PlatformSettings
from app.domain.platforms import PlatformKey, PlatformQueryResult, display_name
from app.platforms.base import coerce_int, elapsed_ms, merge_citations, post_json

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicPlatform:
    """
    No web search here, so citations are only URLs written into the answer.
    """

    key = PlatformKey.ANTHROPIC.value
    name = display_name(PlatformKey.ANTHROPIC.value)

    def __init__(
        self,
        settings: PlatformSettings,
        *,
        timeout_seconds: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def is_usable(self) -> bool:
        return bool(self._settings.api_key)

    def query(self, prompt: str) -> PlatformQueryResult:
        started = time.monotonic()
        body = post_json(
            self._session,
            platform=self.key,
            url=self._settings.base_url,
            headers={
                "x-api-key": self._settings.api_key or "",
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
            payload={
                "model": self._settings.model,
                "max_tokens": self._settings.max_tokens,
                "messages": [{"role": "user", "content": prompt}],
            },
            timeout=self._timeout_seconds,
        )
        latency_ms = elapsed_ms(started)

        text = "".join(
            str(block.get("text") or "")
            for block in body.get("content") or []
            if isinstance(block, dict) and block.get("type") == "text"
        )
        usage = body.get("usage") or {}
        return PlatformQueryResult(
            text=text,
            citations=merge_citations(text),
            tokens_used=coerce_int(usage.get("input_tokens")) + coerce_int(usage.get("output_tokens")),
            latency_ms=latency_ms,
        )
