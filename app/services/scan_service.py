"""
Scan creation, background dispatch, and read-side report assembly.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Protocol

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.analysis.keyword_discovery import discover_keywords
from app.analysis.opportunities import analyze_opportunities
from app.config import ScanSettings, get_scan_settings
from app.domain.errors import ScanValidationError
from app.domain.regions import filter_region_codes
from app.domain.scan import DiscoveredKeyword, Opportunity, ProgressSnapshot, QueryResults
from app.domain.scan_status import ScanStatus
from app.domain.urls import extract_domain, normalize_target_url
from app.services.scan_orchestrator import ScanOrchestrator, to_classified
from db.models.platform_result import PlatformResult
from db.models.scan import Scan
from db.models.scan_query import ScanQuery
from db.repositories.scan_repository import ScanRepository

logger = logging.getLogger(__name__)


class ScanTaskExecutor(Protocol):
    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        ...


class FastAPIBackgroundTaskExecutor:
    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self._background_tasks = background_tasks

    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        self._background_tasks.add_task(task, *args, **kwargs)


class InlineTaskExecutor:
    """
    Runs the task immediately on the calling thread (CLI use).
    """

    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        task(*args, **kwargs)


@dataclass(frozen=True)
class ScanReport:
    """
    Everything the dashboard needs for one scan. Advisory lists stay empty
    until the scan has completed.
    """

    scan: Scan
    platform_results: list[PlatformResult]
    queries: list[ScanQuery]
    opportunities: list[Opportunity] = field(default_factory=list)
    discovered_keywords: list[DiscoveredKeyword] = field(default_factory=list)


def to_query_results(rows: Sequence[ScanQuery]) -> list[QueryResults]:
    return [
        QueryResults(
            text=row.query_text,
            keyword=row.keyword,
            region=row.region,
            region_label=row.region_label,
            category=row.category,
            responses=[to_classified(response) for response in row.responses],
        )
        for row in rows
    ]


class ScanService:
    """
    Coordinates scan creation, background execution, and result lookup.
    """

    def __init__(
        self,
        *,
        orchestrator: ScanOrchestrator | None = None,
        scan_settings: ScanSettings | None = None,
    ) -> None:
        self._orchestrator = orchestrator or ScanOrchestrator()
        self._scan_settings = scan_settings or get_scan_settings()

    def resolve_region_codes(self, regions: Sequence[str] | None) -> list[str]:
        if regions is None:
            return list(self._scan_settings.default_region_codes)
        selected = filter_region_codes(regions)
        if not selected:
            raise ScanValidationError("At least one valid region is required.")
        return selected

    def create_scan(
        self,
        *,
        db: Session,
        executor: ScanTaskExecutor,
        url: str,
        regions: Sequence[str] | None = None,
    ) -> Scan:
        """
        Validate input, persist a PENDING scan, and schedule its orchestration.

        Raises ScanValidationError for a bad URL or when no region survives
        filtering; nothing is persisted in that case.
        """

        normalized_url = normalize_target_url(url)
        domain = extract_domain(normalized_url)
        region_codes = self.resolve_region_codes(regions)

        repository = ScanRepository(db)
        with db.begin():
            scan = repository.create_scan(url=normalized_url, domain=domain, regions=region_codes)

        try:
            executor.submit(self._orchestrator.run, scan.id)
        except Exception:
            logger.exception("Failed to schedule scan id=%s", scan.id)
            db.rollback()
            repository.mark_failed(scan_id=scan.id, error_message="Failed to schedule scan.")
            db.commit()
            raise

        logger.info("Scan accepted id=%s url=%s regions=%s", scan.id, normalized_url, region_codes)
        return scan

    def get_scan(self, *, db: Session, scan_id: uuid.UUID) -> Scan | None:
        return ScanRepository(db).get_scan(scan_id)

    def list_scans(self, *, db: Session, limit: int = 20, status: str | None = None) -> list[Scan]:
        return ScanRepository(db).list_scans(limit=limit, status=status)

    def get_progress(self, *, db: Session, scan_id: uuid.UUID) -> ProgressSnapshot | None:
        return ScanRepository(db).progress_snapshot(scan_id)

    def build_report(self, *, db: Session, scan: Scan) -> ScanReport:
        repository = ScanRepository(db)
        queries = repository.list_queries_with_responses(scan.id)
        platform_results = repository.list_platform_results(scan.id)

        if scan.status != ScanStatus.COMPLETED.value:
            return ScanReport(scan=scan, platform_results=platform_results, queries=queries)

        query_results = to_query_results(queries)
        return ScanReport(
            scan=scan,
            platform_results=platform_results,
            queries=queries,
            opportunities=analyze_opportunities(query_results, scan.domain),
            discovered_keywords=discover_keywords(query_results, scan.domain, scan.keywords or []),
        )


@lru_cache(maxsize=1)
def get_scan_service() -> ScanService:
    return ScanService()
