"""
app/platforms/perplexity_platform.py

Perplexity adapter over its OpenAI-compatible chat completions endpoint.
"""

from __future__ import annotations

import time

import requests

from app.config import PlatformSettings
from app.domain.platforms import PlatformKey, PlatformQueryResult, display_name
from app.platforms.base import coerce_int, elapsed_ms, merge_citations, post_json


class PerplexityPlatform:
    """
    Perplexity returns a response-level `citations` list alongside the answer.
    """

    key = PlatformKey.PERPLEXITY.value
    name = display_name(PlatformKey.PERPLEXITY.value)

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
                "Authorization": f"Bearer {self._settings.api_key or ''}",
                "Content-Type": "application/json",
            },
            payload={
                "model": self._settings.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": self._settings.max_tokens,
            },
            timeout=self._timeout_seconds,
        )
        latency_ms = elapsed_ms(started)

        text = ""
        choices = body.get("choices") or []
        if choices and isinstance(choices[0], dict):
            message = choices[0].get("message") or {}
            text = str(message.get("content") or "")

        raw_citations = body.get("citations")
        provider_citations = raw_citations if isinstance(raw_citations, list) else []
        usage = body.get("usage") or {}
        return PlatformQueryResult(
            text=text,
            citations=merge_citations(text, provider_citations),
            tokens_used=coerce_int(usage.get("total_tokens")),
            latency_ms=latency_ms,
        )
