"""
app/platforms/openai_platform.py

ChatGPT adapter using the OpenAI Responses API with web search enabled.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from openai import OpenAI, OpenAIError

from app.config import PlatformSettings
from app.domain.errors import ProviderCallError
from app.domain.platforms import PlatformKey, PlatformQueryResult, display_name
from app.platforms.base import coerce_int, elapsed_ms, merge_citations

logger = logging.getLogger(__name__)


class OpenAIPlatform:
    """
    Adapter for OpenAI. Citations come from `url_citation` annotations on
    output text segments.
    """

    key = PlatformKey.OPENAI.value
    name = display_name(PlatformKey.OPENAI.value)

    def __init__(
        self,
        settings: PlatformSettings,
        *,
        timeout_seconds: float = 60.0,
        client: Any | None = None,
    ) -> None:
        self._settings = settings
        self._timeout_seconds = timeout_seconds
        self._client = client

    def is_usable(self) -> bool:
        return bool(self._settings.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            client_kwargs: dict[str, Any] = {
                "api_key": self._settings.api_key,
                "timeout": self._timeout_seconds,
                "max_retries": 0,
            }
            if self._settings.base_url:
                client_kwargs["base_url"] = self._settings.base_url
            self._client = OpenAI(**client_kwargs)
        return self._client

    def query(self, prompt: str) -> PlatformQueryResult:
        client = self._get_client()
        started = time.monotonic()
        try:
            response = client.responses.create(
                model=self._settings.model,
                input=prompt,
                tools=[{"type": "web_search"}],
                max_output_tokens=self._settings.max_tokens,
            )
        except OpenAIError as exc:
            raise ProviderCallError(self.key, f"OpenAI request failed: {exc}") from exc
        latency_ms = elapsed_ms(started)

        text_parts: list[str] = []
        annotated_urls: list[str] = []
        for item in getattr(response, "output", None) or []:
            if getattr(item, "type", None) != "message":
                continue
            for block in getattr(item, "content", None) or []:
                if getattr(block, "type", None) != "output_text":
                    continue
                text_parts.append(getattr(block, "text", "") or "")
                for annotation in getattr(block, "annotations", None) or []:
                    if getattr(annotation, "type", None) == "url_citation":
                        annotated_urls.append(getattr(annotation, "url", None))

        text = "".join(text_parts)
        usage = getattr(response, "usage", None)
        return PlatformQueryResult(
            text=text,
            citations=merge_citations(text, annotated_urls),
            tokens_used=coerce_int(getattr(usage, "total_tokens", 0)),
            latency_ms=latency_ms,
        )
