"""
Container health check for the scan API.

Exits 0 when /health answers {"status": "ok"}. With HEALTHCHECK_REQUIRE_PLATFORMS
set, at least one AI platform must also be configured.
"""

from __future__ import annotations

import json
import os
from urllib.error import URLError
from urllib.request import urlopen


def main() -> int:
    port = os.getenv("PORT", "8000")
    path = os.getenv("HEALTHCHECK_PATH", "/health")
    require_platforms = os.getenv("HEALTHCHECK_REQUIRE_PLATFORMS", "").strip().lower() in {"1", "true", "yes", "on"}
    url = f"http://127.0.0.1:{port}{path}"

    try:
        with urlopen(url, timeout=2) as response:
            if not 200 <= response.status < 400:
                return 1
            body = json.loads(response.read().decode("utf-8") or "{}")
    except (URLError, TimeoutError, ValueError):
        return 1

    if body.get("status") != "ok":
        return 1
    if require_platforms and int(body.get("platform_count") or 0) < 1:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
