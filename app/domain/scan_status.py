"""
app/domain/scan_status.py

Scan lifecycle states and the transition table that guards them.
"""

from __future__ import annotations

from enum import Enum


class ScanStatus(str, Enum):
    PENDING = "PENDING"
    SCRAPING = "SCRAPING"
    GENERATING_QUERIES = "GENERATING_QUERIES"
    QUERYING_PLATFORMS = "QUERYING_PLATFORMS"
    ANALYZING = "ANALYZING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


TERMINAL_STATUSES: frozenset[ScanStatus] = frozenset({ScanStatus.COMPLETED, ScanStatus.FAILED})

# Valid successor states per status. Self-edges exist for the phases that
# report incremental progress without changing status.
ALLOWED_TRANSITIONS: dict[ScanStatus, frozenset[ScanStatus]] = {
    ScanStatus.PENDING: frozenset({ScanStatus.SCRAPING, ScanStatus.FAILED}),
    ScanStatus.SCRAPING: frozenset({ScanStatus.GENERATING_QUERIES, ScanStatus.FAILED}),
    ScanStatus.GENERATING_QUERIES: frozenset({ScanStatus.QUERYING_PLATFORMS, ScanStatus.FAILED}),
    ScanStatus.QUERYING_PLATFORMS: frozenset(
        {ScanStatus.QUERYING_PLATFORMS, ScanStatus.ANALYZING, ScanStatus.FAILED}
    ),
    ScanStatus.ANALYZING: frozenset({ScanStatus.ANALYZING, ScanStatus.COMPLETED, ScanStatus.FAILED}),
    ScanStatus.COMPLETED: frozenset(),
    ScanStatus.FAILED: frozenset(),
}

STEP_LABELS: dict[ScanStatus, str] = {
    ScanStatus.PENDING: "Waiting to start",
    ScanStatus.SCRAPING: "Analyzing website content...",
    ScanStatus.GENERATING_QUERIES: "Generating search queries...",
    ScanStatus.QUERYING_PLATFORMS: "Querying AI platforms...",
    ScanStatus.ANALYZING: "Analyzing AI responses...",
    ScanStatus.COMPLETED: "Scan complete",
    ScanStatus.FAILED: "Scan failed",
}


def is_terminal(status: ScanStatus | str) -> bool:
    return ScanStatus(status) in TERMINAL_STATUSES


def can_transition(current: ScanStatus | str, target: ScanStatus | str) -> bool:
    """
    Return True when `target` is a valid successor of `current`.
    """

    return ScanStatus(target) in ALLOWED_TRANSITIONS[ScanStatus(current)]
