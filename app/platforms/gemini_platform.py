"""
app/platforms/gemini_platform.py

Gemini adapter over the generateContent REST endpoint with Google Search grounding.
"""

from __future__ import annotations

import time
from typing import Any

import requests

from app.config import PlatformSettings
from app.domain.platforms import PlatformKey, PlatformQueryResult, display_name
from app.platforms.base import coerce_int, elapsed_ms, merge_citations, post_json


def _grounding_uris(candidates: list[Any]) -> list[str]:
    uris: list[str] = []
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        metadata = candidate.get("groundingMetadata") or {}
        for chunk in metadata.get("groundingChunks") or []:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if isinstance(web, dict) and web.get("uri"):
                uris.append(str(web["uri"]))
    return uris


def _candidate_text(candidates: list[Any]) -> str:
    # Only the first candidate carries the answer; extra candidates are alternates.
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content") or {}
    return "".join(
        str(part.get("text") or "")
        for part in content.get("parts") or []
        if isinstance(part, dict)
    )


class GeminiPlatform:
    key = PlatformKey.GEMINI.value
    name = display_name(PlatformKey.GEMINI.value)

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
            url=f"{self._settings.base_url.rstrip('/')}/{self._settings.model}:generateContent",
            headers={
                "x-goog-api-key": self._settings.api_key or "",
                "Content-Type": "application/json",
            },
            payload={
                "contents": [{"parts": [{"text": prompt}]}],
                "tools": [{"google_search": {}}],
                "generationConfig": {"maxOutputTokens": self._settings.max_tokens},
            },
            timeout=self._timeout_seconds,
        )
        latency_ms = elapsed_ms(started)

        candidates = body.get("candidates") or []
        text = _candidate_text(candidates)
        usage = body.get("usageMetadata") or {}
        return PlatformQueryResult(
            text=text,
            citations=merge_citations(text, _grounding_uris(candidates)),
            tokens_used=coerce_int(usage.get("totalTokenCount")),
            latency_ms=latency_ms,
        )
