"""
tests/test_scan_lifecycle.py

Status transition table and the repository guards built on it.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.orm import Session

from app.domain.errors import InvalidTransitionError
from app.domain.platforms import PlatformQueryResult
from app.domain.scan import GeneratedQuery
from app.domain.scan_status import ALLOWED_TRANSITIONS, ScanStatus, can_transition, is_terminal
from db.repositories.scan_repository import MAX_ERROR_MESSAGE_LENGTH, ScanRepository


@pytest.fixture()
def repository(db_session: Session) -> ScanRepository:
    return ScanRepository(db_session)


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------


class TestTransitionTable:
    def test_terminal_states_have_no_successors(self) -> None:
        assert ALLOWED_TRANSITIONS[ScanStatus.COMPLETED] == frozenset()
        assert ALLOWED_TRANSITIONS[ScanStatus.FAILED] == frozenset()
        assert is_terminal("COMPLETED") and is_terminal("FAILED")
        assert not is_terminal("ANALYZING")

    @pytest.mark.parametrize("status", [s for s in ScanStatus if s not in (ScanStatus.COMPLETED, ScanStatus.FAILED)])
    def test_every_running_state_can_fail(self, status: ScanStatus) -> None:
        assert can_transition(status, ScanStatus.FAILED)

    def test_phases_cannot_be_skipped(self) -> None:
        assert not can_transition(ScanStatus.PENDING, ScanStatus.QUERYING_PLATFORMS)
        assert not can_transition(ScanStatus.SCRAPING, ScanStatus.COMPLETED)
        assert can_transition(ScanStatus.ANALYZING, ScanStatus.COMPLETED)


# ---------------------------------------------------------------------------
# Repository guards
# ---------------------------------------------------------------------------


class TestRepositoryTransitions:
    def test_new_scan_is_pending(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["us"])

        assert scan.status == "PENDING"
        assert scan.progress == 0
        assert scan.regions == ["us"]
        assert scan.overall_score is None
        assert scan.started_at is None

    def test_illegal_edge_is_rejected(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["us"])

        with pytest.raises(InvalidTransitionError):
            repository.transition(scan, status=ScanStatus.ANALYZING, progress=80)

    def test_progress_cannot_decrease(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["us"])
        repository.transition(scan, status=ScanStatus.SCRAPING, progress=5)
        repository.transition(scan, status=ScanStatus.GENERATING_QUERIES, progress=15)
        repository.transition(scan, status=ScanStatus.QUERYING_PLATFORMS, progress=40)

        with pytest.raises(InvalidTransitionError, match="cannot decrease"):
            repository.transition(scan, status=ScanStatus.QUERYING_PLATFORMS, progress=30)

    def test_hundred_is_reserved_for_completion(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["us"])
        for status, progress in ((ScanStatus.SCRAPING, 5), (ScanStatus.GENERATING_QUERIES, 15)):
            repository.transition(scan, status=status, progress=progress)
        repository.transition(scan, status=ScanStatus.QUERYING_PLATFORMS, progress=20)
        repository.transition(scan, status=ScanStatus.ANALYZING, progress=80)

        with pytest.raises(InvalidTransitionError):
            repository.transition(scan, status=ScanStatus.ANALYZING, progress=100)

        repository.mark_completed(scan, overall_score=61)
        assert (scan.status, scan.progress, scan.overall_score) == ("COMPLETED", 100, 61)
        assert scan.completed_at is not None

    def test_mark_failed_keeps_progress_and_truncates(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["us"])
        repository.transition(scan, status=ScanStatus.SCRAPING, progress=5)

        failed = repository.mark_failed(scan_id=scan.id, error_message="x" * 5000)

        assert failed is scan
        assert scan.status == "FAILED"
        assert scan.progress == 5
        assert scan.current_step == "Scan failed"
        assert len(scan.error_message or "") == MAX_ERROR_MESSAGE_LENGTH
        assert scan.completed_at is None

    def test_mark_failed_leaves_terminal_scan_alone(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["us"])
        repository.mark_failed(scan_id=scan.id, error_message="first")
        repository.mark_failed(scan_id=scan.id, error_message="second")

        assert scan.error_message == "first"

    def test_mark_failed_unknown_scan(self, repository: ScanRepository) -> None:
        assert repository.mark_failed(scan_id=uuid.uuid4(), error_message="x") is None


# ---------------------------------------------------------------------------
# Responses and snapshots
# ---------------------------------------------------------------------------


class TestRepositoryRecords:
    def test_error_response_shape(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["global"])
        [query] = repository.add_queries(
            scan,
            [GeneratedQuery(text="q", keyword="k", region="global", region_label="Worldwide", category="general")],
        )

        response = repository.add_error_response(query, platform="GEMINI", error_message="HTTP 500: down")

        assert response.response_text == "Error: HTTP 500: down"
        assert response.is_error is True
        assert response.mentioned is False
        assert response.mention_type == "NOT_MENTIONED"
        assert response.confidence == 0.0

    def test_success_response_stores_sorted_citations(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["global"])
        [query] = repository.add_queries(
            scan,
            [GeneratedQuery(text="q", keyword="k", region="global", region_label="Worldwide", category="general")],
        )

        response = repository.add_response(
            query,
            platform="OPENAI",
            result=PlatformQueryResult(text="t", citations=frozenset({"https://b.io", "https://a.io"}), tokens_used=9),
        )

        assert response.citations == ["https://a.io", "https://b.io"]
        assert response.tokens_used == 9
        assert response.is_error is False
        assert repository.list_responses(scan.id) == [response]

    def test_snapshot_hides_score_until_completed(self, repository: ScanRepository) -> None:
        scan = repository.create_scan(url="https://example.com", domain="example.com", regions=["us"])
        scan.overall_score = 40

        snapshot = repository.progress_snapshot(scan.id)

        assert snapshot is not None
        assert snapshot.status == "PENDING"
        assert snapshot.overall_score is None
        assert repository.progress_snapshot(uuid.uuid4()) is None
