"""
Drives one scan end to end: scrape, generate queries, query platforms,
classify mentions, score, finalize.

Queries run one at a time. Within a query every usable platform is called
concurrently on a thread pool and the orchestrator waits for all of them to
settle before starting the next query. Only the orchestrating thread touches
the database session, so the scan row has a single writer.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Protocol

from sqlalchemy.orm import Session

from app.analysis.mention_detector import detect_mention
from app.analysis.scoring import calculate_overall_score, calculate_platform_score, round_half_up
from app.config import ScanSettings, ScoringPolicy, get_scan_settings, get_scoring_policy
from app.domain.errors import PipelineFatalError, ProviderCallError
from app.domain.platforms import PlatformQueryResult
from app.domain.regions import resolve_regions
from app.domain.scan import ClassifiedResponse, ScrapedSite
from app.domain.scan_status import ScanStatus
from app.logging_utils import log_event
from app.platforms.base import PlatformAdapter
from app.platforms.registry import PLATFORM_ENV_KEYS, build_platform_adapters
from app.query_generation.generator import generate_queries
from db.models.platform_response import PlatformResponse
from db.models.scan import Scan
from db.repositories.scan_repository import ScanRepository

logger = logging.getLogger(__name__)

SCRAPING_PROGRESS = 5
GENERATING_PROGRESS = 15
QUERYING_START_PROGRESS = 20
QUERYING_SPAN = 55
ANALYZING_PROGRESS = 80
SCORING_PROGRESS = 90

ANALYZING_STEP = "Analyzing AI responses..."
SCORING_STEP = "Calculating visibility scores..."

NO_QUERIES_MESSAGE = "Could not generate any queries from website content"
NO_PLATFORMS_MESSAGE = "No AI platforms configured. Set at least one of: " + ", ".join(PLATFORM_ENV_KEYS)


class SiteScraperLike(Protocol):
    def scrape(self, url: str) -> ScrapedSite:
        ...


def querying_progress(completed: int, total: int) -> int:
    if total <= 0:
        return QUERYING_START_PROGRESS
    return QUERYING_START_PROGRESS + round_half_up(QUERYING_SPAN * completed / total)


def call_platform(adapter: PlatformAdapter, prompt: str) -> PlatformQueryResult | ProviderCallError:
    """
    Run one adapter call and return its failure instead of raising it.

    Unexpected exceptions are wrapped so one platform can never abort the
    query, the scan, or the other platforms' calls.
    """

    try:
        return adapter.query(prompt)
    except ProviderCallError as exc:
        return exc
    except Exception as exc:
        return ProviderCallError(adapter.key, f"{type(exc).__name__}: {exc}")


def to_classified(response: PlatformResponse) -> ClassifiedResponse:
    return ClassifiedResponse(
        platform=response.platform,
        response_text=response.response_text,
        mentioned=response.mentioned,
        mention_type=response.mention_type,
        mention_excerpt=response.mention_excerpt,
        citation_url=response.citation_url,
        confidence=response.confidence,
        is_error=response.is_error,
    )


class ScanOrchestrator:
    """
    Sole mutator of a scan and its queries, responses and results while it runs.
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[], Session] | None = None,
        scraper: SiteScraperLike | None = None,
        adapters_provider: Callable[[], Sequence[PlatformAdapter]] | None = None,
        scoring_policy: ScoringPolicy | None = None,
        scan_settings: ScanSettings | None = None,
    ) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

        if scraper is None:
            from app.config import get_scraper_settings
            from app.scraping.site_scraper import SiteScraper

            scraper = SiteScraper(get_scraper_settings())
        self._scraper = scraper
        self._adapters_provider = adapters_provider or build_platform_adapters
        self._scoring_policy = scoring_policy or get_scoring_policy()
        self._scan_settings = scan_settings or get_scan_settings()

    def run(self, scan_id: uuid.UUID) -> None:
        with self._session_factory() as db:
            repository = ScanRepository(db)
            try:
                self._execute(db=db, repository=repository, scan_id=scan_id)
            except Exception as exc:
                self._mark_scan_failed(db=db, scan_id=scan_id, exc=exc)

    def _execute(self, *, db: Session, repository: ScanRepository, scan_id: uuid.UUID) -> None:
        scan = repository.get_scan(scan_id)
        if scan is None:
            raise RuntimeError(f"Scan not found: {scan_id}")
        log_event(logger, logging.INFO, "scan_started", scan_id=scan_id, url=scan.url, regions=scan.regions)

        self._phase(db, repository, scan, ScanStatus.SCRAPING, SCRAPING_PROGRESS)
        site = self._scraper.scrape(scan.url)
        repository.record_site(
            scan,
            title=site.title,
            description=site.description,
            industry=site.industry,
            keywords=site.keywords,
            scraped_data={"headings": site.headings, "services": site.services},
        )

        self._phase(db, repository, scan, ScanStatus.GENERATING_QUERIES, GENERATING_PROGRESS)
        generated = generate_queries(
            ScrapedSite(
                url=scan.url,
                domain=scan.domain,
                title=site.title,
                description=site.description,
                industry=site.industry,
                keywords=site.keywords,
            ),
            resolve_regions(scan.regions or []),
            max_queries_per_region=self._scan_settings.max_queries_per_region,
            max_keywords=self._scan_settings.max_keywords,
        )
        if not generated:
            raise PipelineFatalError(NO_QUERIES_MESSAGE)

        adapters = [adapter for adapter in self._adapters_provider() if adapter.is_usable()]
        if not adapters:
            raise PipelineFatalError(NO_PLATFORMS_MESSAGE)

        query_rows = repository.add_queries(scan, generated)
        total_pairs = len(query_rows) * len(adapters)
        self._phase(
            db,
            repository,
            scan,
            ScanStatus.QUERYING_PLATFORMS,
            QUERYING_START_PROGRESS,
            step=f"Queried 0/{total_pairs} platform responses...",
            platforms=[adapter.key for adapter in adapters],
            query_count=len(query_rows),
        )

        completed = 0
        with ThreadPoolExecutor(max_workers=len(adapters), thread_name_prefix="scan-platform") as pool:
            for query_row in query_rows:
                futures = {
                    pool.submit(call_platform, adapter, query_row.query_text): adapter for adapter in adapters
                }
                for future in as_completed(futures):
                    adapter = futures[future]
                    outcome = future.result()
                    if isinstance(outcome, ProviderCallError):
                        log_event(
                            logger,
                            logging.WARNING,
                            "platform_query_failed",
                            scan_id=scan.id,
                            query_id=query_row.id,
                            platform=adapter.key,
                            error=outcome.message,
                        )
                        repository.add_error_response(query_row, platform=adapter.key, error_message=outcome.message)
                    else:
                        repository.add_response(query_row, platform=adapter.key, result=outcome)

                    completed += 1
                    repository.transition(
                        scan,
                        status=ScanStatus.QUERYING_PLATFORMS,
                        progress=querying_progress(completed, total_pairs),
                        current_step=f"Queried {completed}/{total_pairs} platform responses...",
                    )
                    db.commit()

        self._phase(db, repository, scan, ScanStatus.ANALYZING, ANALYZING_PROGRESS, step=ANALYZING_STEP)
        responses = repository.list_responses(scan.id)
        for response in responses:
            if response.is_error:
                continue
            analysis = detect_mention(response.response_text, scan.url, scan.domain, response.citations or [])
            repository.record_classification(response, analysis)

        self._phase(db, repository, scan, ScanStatus.ANALYZING, SCORING_PROGRESS, step=SCORING_STEP)
        by_platform: dict[str, list[ClassifiedResponse]] = {adapter.key: [] for adapter in adapters}
        for response in responses:
            by_platform.setdefault(response.platform, []).append(to_classified(response))

        platform_scores: list[tuple[str, int]] = []
        for platform, classified in by_platform.items():
            score = calculate_platform_score(classified, self._scoring_policy)
            repository.add_platform_result(scan, platform=platform, score=score)
            platform_scores.append((platform, score.score))

        overall_score = calculate_overall_score(platform_scores, self._scoring_policy)
        repository.mark_completed(scan, overall_score=overall_score)
        db.commit()
        log_event(
            logger,
            logging.INFO,
            "scan_completed",
            scan_id=scan.id,
            overall_score=overall_score,
            platform_scores=dict(platform_scores),
            response_count=len(responses),
        )

    def _phase(
        self,
        db: Session,
        repository: ScanRepository,
        scan: Scan,
        status: ScanStatus,
        progress: int,
        *,
        step: str | None = None,
        **fields: object,
    ) -> None:
        repository.transition(scan, status=status, progress=progress, current_step=step)
        db.commit()
        log_event(
            logger,
            logging.INFO,
            "scan_phase",
            scan_id=scan.id,
            status=status.value,
            progress=progress,
            **fields,
        )

    def _mark_scan_failed(self, *, db: Session, scan_id: uuid.UUID, exc: Exception) -> None:
        repository = ScanRepository(db)
        if isinstance(exc, PipelineFatalError):
            error_message = str(exc)
        else:
            error_message = f"{type(exc).__name__}: {exc}"
        log_event(logger, logging.ERROR, "scan_failed", scan_id=scan_id, error=error_message)
        logger.exception("Scan failed id=%s error=%s", scan_id, error_message)
        try:
            db.rollback()
            failed_scan = repository.mark_failed(scan_id=scan_id, error_message=error_message)
            if failed_scan is None:
                logger.error("Unable to mark scan as failed because it was not found id=%s", scan_id)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to persist failed scan state id=%s", scan_id)
