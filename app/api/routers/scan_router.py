"""
Scan creation, progress and result endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.domain.errors import ScanValidationError
from app.domain.platforms import display_name
from app.schemas.scan import (
    DiscoveredKeywordSchema,
    OpportunitySchema,
    PlatformResponseSchema,
    PlatformResultSchema,
    ScanAcceptedResponse,
    ScanCreateRequest,
    ScanDetailResponse,
    ScanListResponse,
    ScanProgressResponse,
    ScanQuerySchema,
    ScanSummaryResponse,
)
from app.services.scan_service import (
    FastAPIBackgroundTaskExecutor,
    ScanReport,
    ScanService,
    get_scan_service,
)
from db.models.scan import Scan
from db.session import get_db

router = APIRouter(tags=["scans"])


@router.post(
    "/scans",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ScanAcceptedResponse,
)
def create_scan(
    payload: ScanCreateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    service: ScanService = Depends(get_scan_service),
) -> ScanAcceptedResponse:
    try:
        scan = service.create_scan(
            db=db,
            executor=FastAPIBackgroundTaskExecutor(background_tasks),
            url=payload.url,
            regions=payload.regions,
        )
    except ScanValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    return ScanAcceptedResponse(scan_id=scan.id, status=scan.status)


@router.get("/scans", response_model=ScanListResponse)
def list_scans(
    status_filter: str | None = Query(default=None, alias="status", description="Optional status filter"),
    limit: int = Query(default=20, ge=1, le=100, description="Max scans returned, newest first"),
    db: Session = Depends(get_db),
    service: ScanService = Depends(get_scan_service),
) -> ScanListResponse:
    scans = service.list_scans(db=db, limit=limit, status=status_filter)
    return ScanListResponse(scans=[_to_summary(scan) for scan in scans])


@router.get("/scans/{scan_id}", response_model=ScanDetailResponse)
def get_scan(
    scan_id: UUID,
    db: Session = Depends(get_db),
    service: ScanService = Depends(get_scan_service),
) -> ScanDetailResponse:
    scan = service.get_scan(db=db, scan_id=scan_id)
    if scan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scan not found: {scan_id}",
        )
    return _to_detail(service.build_report(db=db, scan=scan))


@router.get("/scans/{scan_id}/progress", response_model=ScanProgressResponse)
def get_scan_progress(
    scan_id: UUID,
    db: Session = Depends(get_db),
    service: ScanService = Depends(get_scan_service),
) -> ScanProgressResponse:
    snapshot = service.get_progress(db=db, scan_id=scan_id)
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scan not found: {scan_id}",
        )
    return ScanProgressResponse(
        status=snapshot.status,
        progress=snapshot.progress,
        current_step=snapshot.current_step,
        overall_score=snapshot.overall_score,
        error_message=snapshot.error_message,
    )


def _to_summary(scan: Scan) -> ScanSummaryResponse:
    return ScanSummaryResponse(
        scan_id=scan.id,
        url=scan.url,
        domain=scan.domain,
        status=scan.status,
        progress=scan.progress,
        overall_score=scan.overall_score,
        regions=list(scan.regions or []),
        created_at=scan.created_at,
        started_at=scan.started_at,
        completed_at=scan.completed_at,
    )


def _to_detail(report: ScanReport) -> ScanDetailResponse:
    scan = report.scan
    return ScanDetailResponse(
        **_to_summary(scan).model_dump(),
        current_step=scan.current_step,
        error_message=scan.error_message,
        site_title=scan.site_title,
        site_description=scan.site_description,
        industry=scan.industry,
        keywords=list(scan.keywords or []),
        platform_results=[
            PlatformResultSchema(
                platform=result.platform,
                platform_name=display_name(result.platform),
                score=result.score,
                total_queries=result.total_queries,
                mention_count=result.mention_count,
                citation_count=result.citation_count,
            )
            for result in report.platform_results
        ],
        queries=[
            ScanQuerySchema(
                query_text=query.query_text,
                keyword=query.keyword,
                region=query.region,
                region_label=query.region_label,
                category=query.category,
                responses=[
                    PlatformResponseSchema(
                        platform=response.platform,
                        platform_name=display_name(response.platform),
                        response_text=response.response_text,
                        citations=list(response.citations or []),
                        tokens_used=response.tokens_used,
                        latency_ms=response.latency_ms,
                        is_error=response.is_error,
                        mentioned=response.mentioned,
                        mention_type=response.mention_type,
                        mention_excerpt=response.mention_excerpt,
                        citation_url=response.citation_url,
                        confidence=response.confidence,
                    )
                    for response in query.responses
                ],
            )
            for query in report.queries
        ],
        opportunities=[
            OpportunitySchema(
                type=item.type,
                priority=item.priority,
                title=item.title,
                description=item.description,
                suggested_action=item.suggested_action,
                keyword=item.keyword,
                region=item.region,
                competitors=item.competitors,
            )
            for item in report.opportunities
        ],
        discovered_keywords=[
            DiscoveredKeywordSchema(
                keyword=item.keyword,
                frequency=item.frequency,
                platforms=item.platforms,
                sample_context=item.sample_context,
            )
            for item in report.discovered_keywords
        ],
    )
