"""
app/domain/errors.py

Exception taxonomy for scan creation and the scan pipeline.
"""

from __future__ import annotations


class ScanValidationError(ValueError):
    """
    Raised when scan creation input is malformed. The scan is never created.
    """


class ProviderCallError(RuntimeError):
    """
    Raised when one platform adapter call fails.

    Never escapes the per-call boundary of the orchestrator; it is downgraded
    to an error-marked NOT_MENTIONED response.
    """

    def __init__(self, platform: str, message: str) -> None:
        self.platform = platform
        self.message = message
        super().__init__(message)


class PipelineFatalError(RuntimeError):
    """
    Raised when the scan cannot continue (scrape failure, no queries, no platforms).
    """


class ScrapeError(PipelineFatalError):
    """
    Raised by the website scraper when the target page cannot be fetched or parsed.
    """


class InvalidTransitionError(RuntimeError):
    """
    Raised when a scan status/progress write violates the lifecycle rules.
    """
