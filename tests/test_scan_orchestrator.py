"""
tests/test_scan_orchestrator.py

End-to-end pipeline runs against in-memory SQLite with fake adapters.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable

import pytest
from sqlalchemy import event
from sqlalchemy.orm import Session

from app.config import ScanSettings
from app.domain.errors import ProviderCallError
from app.domain.scan import ScrapedSite
from app.services.scan_orchestrator import (
    NO_PLATFORMS_MESSAGE,
    NO_QUERIES_MESSAGE,
    ScanOrchestrator,
    call_platform,
    querying_progress,
)
from db.models.scan import Scan
from db.repositories.scan_repository import ScanRepository
from tests.fakes import FakePlatform, FakeScraper, provider_error


def _create_scan(db_session: Session, regions: list[str] | None = None) -> uuid.UUID:
    scan = ScanRepository(db_session).create_scan(
        url="https://example.com",
        domain="example.com",
        regions=regions or ["global"],
    )
    db_session.commit()
    return scan.id


def _reload(db_session: Session, scan_id: uuid.UUID) -> Scan:
    db_session.expire_all()
    scan = db_session.get(Scan, scan_id)
    assert scan is not None
    return scan


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    @pytest.mark.parametrize(("completed", "total", "expected"), [(0, 4, 20), (1, 4, 34), (2, 4, 48), (4, 4, 75)])
    def test_querying_progress(self, completed: int, total: int, expected: int) -> None:
        assert querying_progress(completed, total) == expected

    def test_call_platform_returns_provider_errors(self) -> None:
        error = provider_error("OPENAI")
        outcome = call_platform(FakePlatform("OPENAI", error=error), "q")

        assert outcome is error

    def test_call_platform_wraps_unexpected_errors(self) -> None:
        outcome = call_platform(FakePlatform("GEMINI", error=KeyError("candidates")), "q")

        assert isinstance(outcome, ProviderCallError)
        assert outcome.platform == "GEMINI"
        assert outcome.message.startswith("KeyError")


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------


class TestSuccessfulScan:
    def test_one_query_two_platforms_one_failure(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
        single_query_settings: ScanSettings,
    ) -> None:
        openai = FakePlatform("OPENAI", answer="I recommend example.com for SEO audits.")
        anthropic = FakePlatform("ANTHROPIC", error=provider_error("ANTHROPIC"))
        scan_id = _create_scan(db_session)

        make_orchestrator([openai, anthropic], scan_settings=single_query_settings).run(scan_id)

        scan = _reload(db_session, scan_id)
        assert scan.status == "COMPLETED"
        assert scan.progress == 100
        assert scan.completed_at is not None
        assert scan.started_at is not None
        assert scan.error_message is None
        assert scan.keywords == ["seo audits", "content strategy", "link building"]

        repository = ScanRepository(db_session)
        [query] = repository.list_queries_with_responses(scan_id)
        assert query.query_text == "What do you know about example.com?"
        assert openai.prompts == anthropic.prompts == [query.query_text]

        by_platform = {response.platform: response for response in query.responses}
        assert set(by_platform) == {"OPENAI", "ANTHROPIC"}
        assert by_platform["OPENAI"].is_error is False
        assert by_platform["OPENAI"].mention_type == "RECOMMENDATION"
        assert by_platform["OPENAI"].tokens_used == 42
        assert by_platform["ANTHROPIC"].is_error is True
        assert by_platform["ANTHROPIC"].response_text == "Error: HTTP 500: upstream unavailable"
        assert by_platform["ANTHROPIC"].mention_type == "NOT_MENTIONED"

        results = {result.platform: result for result in repository.list_platform_results(scan_id)}
        assert results["OPENAI"].score == 80
        assert results["ANTHROPIC"].score == 0
        assert results["ANTHROPIC"].total_queries == 0
        # (80 * 0.25 + 0 * 0.20) / 0.45
        assert scan.overall_score == 44

    def test_error_responses_do_not_dilute_platform_score(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
    ) -> None:
        def answer(prompt: str) -> str:
            if "know about" in prompt:
                raise provider_error("OPENAI", "HTTP 429: slow down")
            return "We recommend example.com."

        openai = FakePlatform("OPENAI", answer=answer)
        scan_id = _create_scan(db_session)

        make_orchestrator([openai], scan_settings=ScanSettings(max_queries_per_region=2)).run(scan_id)

        [result] = ScanRepository(db_session).list_platform_results(scan_id)
        assert result.score == 80
        assert result.total_queries == 1
        assert _reload(db_session, scan_id).overall_score == 80

    def test_every_query_reaches_every_usable_platform(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
    ) -> None:
        adapters = [
            FakePlatform("OPENAI"),
            FakePlatform("GEMINI", citations=["https://example.com/"]),
            FakePlatform("PERPLEXITY", usable=False),
        ]
        scan_id = _create_scan(db_session, regions=["us", "uk"])

        make_orchestrator(adapters, scan_settings=ScanSettings(max_queries_per_region=3)).run(scan_id)

        queries = ScanRepository(db_session).list_queries_with_responses(scan_id)
        assert len(queries) == 6
        assert [query.position for query in queries] == list(range(6))
        assert all(sorted(r.platform for r in query.responses) == ["GEMINI", "OPENAI"] for query in queries)
        assert adapters[2].prompts == []
        assert all(r.mention_type == "DIRECT_CITATION" for q in queries for r in q.responses if r.platform == "GEMINI")

    def test_progress_is_monotonic_and_hundred_only_at_completion(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
    ) -> None:
        seen: list[tuple[int, str]] = []

        def record(target: Scan, value: int, oldvalue: object, initiator: object) -> None:
            seen.append((value, target.status))

        scan_id = _create_scan(db_session)
        event.listen(Scan.progress, "set", record)
        try:
            make_orchestrator(
                [FakePlatform("OPENAI"), FakePlatform("GEMINI")],
                scan_settings=ScanSettings(max_queries_per_region=2),
            ).run(scan_id)
        finally:
            event.remove(Scan.progress, "set", record)

        values = [value for value, _ in seen]
        assert values == sorted(values)
        assert values[0] == 5
        assert values[-1] == 100
        assert [status for value, status in seen if value == 100] == ["COMPLETED"]
        assert {80, 90} <= set(values)


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestPlatformFanOut:
    def test_platforms_overlap_within_a_query_and_queries_run_one_at_a_time(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
    ) -> None:
        both_platforms_in_call = threading.Barrier(2, timeout=5)
        lock = threading.Lock()
        in_flight: list[str] = []
        distinct_prompts_seen: list[int] = []
        calls_seen: list[int] = []

        def answer(prompt: str) -> str:
            with lock:
                in_flight.append(prompt)
                distinct_prompts_seen.append(len(set(in_flight)))
                calls_seen.append(len(in_flight))
            try:
                both_platforms_in_call.wait()
            finally:
                with lock:
                    in_flight.remove(prompt)
            return "No relevant providers come to mind."

        adapters = [FakePlatform("OPENAI", answer=answer), FakePlatform("GEMINI", answer=answer)]
        scan_id = _create_scan(db_session)

        make_orchestrator(adapters, scan_settings=ScanSettings(max_queries_per_region=3)).run(scan_id)

        assert _reload(db_session, scan_id).status == "COMPLETED"
        queries = ScanRepository(db_session).list_queries_with_responses(scan_id)
        assert len(queries) == 3
        # A sequential fan-out would break the barrier and store error responses.
        assert not any(response.is_error for query in queries for response in query.responses)
        assert max(calls_seen) == 2
        assert max(distinct_prompts_seen) == 1
        assert adapters[0].prompts == adapters[1].prompts == [query.query_text for query in queries]


# ---------------------------------------------------------------------------
# Failed runs
# ---------------------------------------------------------------------------


class TestFailedScan:
    def test_no_usable_platforms_fails_before_persisting_queries(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
        single_query_settings: ScanSettings,
    ) -> None:
        adapters = [FakePlatform(key, usable=False) for key in ("OPENAI", "ANTHROPIC", "GEMINI", "PERPLEXITY")]
        scan_id = _create_scan(db_session)

        make_orchestrator(adapters, scan_settings=single_query_settings).run(scan_id)

        scan = _reload(db_session, scan_id)
        assert scan.status == "FAILED"
        assert scan.error_message == NO_PLATFORMS_MESSAGE
        assert "OPENAI_API_KEY" in NO_PLATFORMS_MESSAGE and "PERPLEXITY_API_KEY" in NO_PLATFORMS_MESSAGE
        assert scan.completed_at is None
        assert scan.overall_score is None
        assert ScanRepository(db_session).list_queries_with_responses(scan_id) == []

    def test_scrape_failure_fails_the_scan(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
        failing_scraper: FakeScraper,
    ) -> None:
        openai = FakePlatform("OPENAI")
        scan_id = _create_scan(db_session)

        make_orchestrator([openai], scraper=failing_scraper).run(scan_id)

        scan = _reload(db_session, scan_id)
        assert scan.status == "FAILED"
        assert scan.error_message == "Failed to fetch https://example.com: HTTP 503"
        assert scan.progress == 5
        assert scan.current_step == "Scan failed"
        assert openai.prompts == []

    def test_site_without_keywords_fails(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
    ) -> None:
        scraper = FakeScraper(ScrapedSite(url="https://example.com", domain="example.com", keywords=[]))
        scan_id = _create_scan(db_session)

        make_orchestrator([FakePlatform("OPENAI")], scraper=scraper).run(scan_id)

        scan = _reload(db_session, scan_id)
        assert scan.status == "FAILED"
        assert scan.error_message == NO_QUERIES_MESSAGE

    def test_unexpected_error_is_recorded_with_its_type(
        self,
        db_session: Session,
        make_orchestrator: Callable[..., ScanOrchestrator],
    ) -> None:
        scan_id = _create_scan(db_session)

        make_orchestrator([FakePlatform("OPENAI")], scraper=FakeScraper(error=RuntimeError("boom"))).run(scan_id)

        assert _reload(db_session, scan_id).error_message == "RuntimeError: boom"

    def test_unknown_scan_does_not_raise(self, make_orchestrator: Callable[..., ScanOrchestrator]) -> None:
        make_orchestrator([FakePlatform("OPENAI")]).run(uuid.uuid4())
