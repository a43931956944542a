"""
app/logging_utils.py

JSON event lines for the scan pipeline, one per phase change or provider
failure, so a scan can be followed by grepping its scan_id.
"""

from __future__ import annotations

import json
import logging
from typing import Any

MAX_FIELD_CHARS = 500


def _compact(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
        return value[:MAX_FIELD_CHARS] + "..."
    return value


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log `event` with its non-None fields; long strings are cut to MAX_FIELD_CHARS."""
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {key: _compact(value) for key, value in fields.items() if value is not None}
    payload["event"] = event
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
