"""
app/services package marker.
"""

from app.services.scan_orchestrator import ScanOrchestrator
from app.services.scan_service import (
    FastAPIBackgroundTaskExecutor,
    InlineTaskExecutor,
    ScanReport,
    ScanService,
    get_scan_service,
)

__all__ = [
    "FastAPIBackgroundTaskExecutor",
    "InlineTaskExecutor",
    "ScanOrchestrator",
    "ScanReport",
    "ScanService",
    "get_scan_service",
]
