"""
Repository for scan lifecycle persistence, per-query responses and results.

All scan writes go through here so the transition table and progress
monotonicity are enforced in one place.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from app.domain.errors import InvalidTransitionError
from app.domain.mentions import MentionAnalysis
from app.domain.platforms import PlatformQueryResult
from app.domain.scan import GeneratedQuery, PlatformScore, ProgressSnapshot
from app.domain.scan_status import STEP_LABELS, ScanStatus, can_transition, is_terminal
from db.models.platform_response import PlatformResponse
from db.models.platform_result import PlatformResult
from db.models.scan import Scan
from db.models.scan_query import ScanQuery

MAX_ERROR_MESSAGE_LENGTH = 2000


def _clip(value: str | None, column: Any) -> str | None:
    """Cut `value` to the VARCHAR width of `column`; PostgreSQL rejects longer strings."""
    length = getattr(column.type, "length", None)
    if value is None or length is None:
        return value
    return value[:length]


class ScanRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_scan(self, *, url: str, domain: str, regions: Sequence[str]) -> Scan:
        scan = Scan(
            url=url,
            domain=domain,
            regions=list(regions),
            status=ScanStatus.PENDING.value,
            progress=0,
            current_step=STEP_LABELS[ScanStatus.PENDING],
        )
        self._session.add(scan)
        self._session.flush()
        self._session.refresh(scan)
        return scan

    def get_scan(self, scan_id: uuid.UUID) -> Scan | None:
        return self._session.get(Scan, scan_id)

    def list_scans(self, *, limit: int = 20, status: str | None = None) -> list[Scan]:
        stmt: Select[tuple[Scan]] = select(Scan)
        if status:
            stmt = stmt.where(Scan.status == status)
        stmt = stmt.order_by(Scan.created_at.desc()).limit(max(1, min(limit, 100)))
        return list(self._session.scalars(stmt).all())

    def transition(
        self,
        scan: Scan,
        *,
        status: ScanStatus,
        progress: int,
        current_step: str | None = None,
    ) -> Scan:
        """
        Move a scan to `status` with `progress`, rejecting illegal writes.

        Raises InvalidTransitionError when the edge is not in the transition
        table or when progress would decrease.
        """

        if not can_transition(scan.status, status):
            raise InvalidTransitionError(f"Scan {scan.id}: cannot transition {scan.status} -> {status.value}.")
        if progress < scan.progress:
            raise InvalidTransitionError(
                f"Scan {scan.id}: progress cannot decrease ({scan.progress} -> {progress})."
            )
        if progress >= 100 and status != ScanStatus.COMPLETED:
            raise InvalidTransitionError(f"Scan {scan.id}: progress 100 is reserved for COMPLETED.")

        if scan.status == ScanStatus.PENDING.value and scan.started_at is None:
            scan.started_at = datetime.now(timezone.utc)
        scan.status = status.value
        scan.progress = progress
        scan.current_step = current_step if current_step is not None else STEP_LABELS[status]
        return scan

    def record_site(
        self,
        scan: Scan,
        *,
        title: str,
        description: str,
        industry: str,
        keywords: Sequence[str],
        scraped_data: dict[str, Any],
    ) -> Scan:
        scan.site_title = _clip(title or None, Scan.__table__.c.site_title)
        scan.site_description = description or None
        scan.industry = _clip(industry or None, Scan.__table__.c.industry)
        scan.keywords = list(keywords)
        scan.scraped_data = scraped_data
        return scan

    def mark_completed(self, scan: Scan, *, overall_score: int) -> Scan:
        self.transition(scan, status=ScanStatus.COMPLETED, progress=100)
        scan.overall_score = overall_score
        scan.completed_at = datetime.now(timezone.utc)
        scan.error_message = None
        return scan

    def mark_failed(self, *, scan_id: uuid.UUID, error_message: str) -> Scan | None:
        """
        Move a non-terminal scan to FAILED, keeping its last progress value.
        """

        scan = self.get_scan(scan_id)
        if scan is None:
            return None
        if is_terminal(scan.status):
            return scan
        scan.status = ScanStatus.FAILED.value
        scan.current_step = STEP_LABELS[ScanStatus.FAILED]
        scan.error_message = error_message[:MAX_ERROR_MESSAGE_LENGTH]
        return scan

    def add_queries(self, scan: Scan, queries: Sequence[GeneratedQuery]) -> list[ScanQuery]:
        rows = [
            ScanQuery(
                scan_id=scan.id,
                position=index,
                query_text=query.text,
                keyword=_clip(query.keyword, ScanQuery.__table__.c.keyword),
                region=query.region,
                region_label=query.region_label,
                category=_clip(query.category, ScanQuery.__table__.c.category),
            )
            for index, query in enumerate(queries)
        ]
        self._session.add_all(rows)
        self._session.flush()
        return rows

    def add_response(
        self,
        query: ScanQuery,
        *,
        platform: str,
        result: PlatformQueryResult,
    ) -> PlatformResponse:
        response = PlatformResponse(
            query_id=query.id,
            platform=platform,
            response_text=result.text,
            citations=sorted(result.citations),
            tokens_used=result.tokens_used,
            latency_ms=result.latency_ms,
            is_error=False,
        )
        self._session.add(response)
        self._session.flush()
        return response

    def add_error_response(
        self,
        query: ScanQuery,
        *,
        platform: str,
        error_message: str,
    ) -> PlatformResponse:
        response = PlatformResponse(
            query_id=query.id,
            platform=platform,
            response_text=f"Error: {error_message}",
            citations=[],
            tokens_used=0,
            latency_ms=0,
            is_error=True,
            mentioned=False,
            mention_type="NOT_MENTIONED",
            confidence=0.0,
        )
        self._session.add(response)
        self._session.flush()
        return response

    def record_classification(self, response: PlatformResponse, analysis: MentionAnalysis) -> PlatformResponse:
        response.mentioned = analysis.mentioned
        response.mention_type = analysis.mention_type.value
        response.mention_excerpt = analysis.excerpt
        response.citation_url = _clip(analysis.citation_url, PlatformResponse.__table__.c.citation_url)
        response.confidence = analysis.confidence
        return response

    def add_platform_result(self, scan: Scan, *, platform: str, score: PlatformScore) -> PlatformResult:
        result = PlatformResult(
            scan_id=scan.id,
            platform=platform,
            score=score.score,
            total_queries=score.total_queries,
            mention_count=score.mention_count,
            citation_count=score.citation_count,
        )
        self._session.add(result)
        self._session.flush()
        return result

    def list_responses(self, scan_id: uuid.UUID) -> list[PlatformResponse]:
        stmt = (
            select(PlatformResponse)
            .join(ScanQuery, PlatformResponse.query_id == ScanQuery.id)
            .where(ScanQuery.scan_id == scan_id)
            .order_by(ScanQuery.position, PlatformResponse.platform)
        )
        return list(self._session.scalars(stmt).all())

    def list_queries_with_responses(self, scan_id: uuid.UUID) -> list[ScanQuery]:
        stmt = (
            select(ScanQuery)
            .where(ScanQuery.scan_id == scan_id)
            .options(selectinload(ScanQuery.responses))
            .order_by(ScanQuery.position)
        )
        return list(self._session.scalars(stmt).all())

    def list_platform_results(self, scan_id: uuid.UUID) -> list[PlatformResult]:
        stmt = select(PlatformResult).where(PlatformResult.scan_id == scan_id).order_by(PlatformResult.platform)
        return list(self._session.scalars(stmt).all())

    def progress_snapshot(self, scan_id: uuid.UUID) -> ProgressSnapshot | None:
        scan = self.get_scan(scan_id)
        if scan is None:
            return None
        completed = scan.status == ScanStatus.COMPLETED.value
        return ProgressSnapshot(
            status=scan.status,
            progress=scan.progress,
            current_step=scan.current_step,
            overall_score=scan.overall_score if completed else None,
            error_message=scan.error_message,
        )
