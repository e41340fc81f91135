"""Tests for TriageStateMachine and the transition policy."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from alerto_triage.data_management import ReportStore
from alerto_triage.data_management.schemas import (
    CredibilityAnalysis,
    Recommendation,
    Report,
    ReportStatus,
)
from alerto_triage.errors import InvalidTransition, NotFound, StorageFailure, ValidationError
from alerto_triage.triage.state_machine import (
    SYSTEM_OPERATOR,
    TriageStateMachine,
    is_transition_allowed,
    status_for_recommendation,
)


class TickingClock:
    """Returns a later timestamp on every call."""

    def __init__(self) -> None:
        self.now = datetime(2025, 8, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def machine(report_store: ReportStore, clock: TickingClock) -> TriageStateMachine:
    return TriageStateMachine(report_store, clock=clock)


def make_analysis(report_id: str, recommendation: Recommendation, score: float = 0.5) -> CredibilityAnalysis:
    return CredibilityAnalysis(
        report_id=report_id,
        score=score,
        summary="summary",
        flags=["vague_location"],
        recommendation=recommendation,
    )


class TestPolicy:
    def test_every_named_transition_allowed(self):
        for current, new in itertools.product(ReportStatus, ReportStatus):
            assert is_transition_allowed(current, new)

    @pytest.mark.parametrize(
        "recommendation,status",
        [
            (Recommendation.APPROVE, ReportStatus.VERIFIED),
            (Recommendation.REJECT, ReportStatus.FALSE_REPORT),
            (Recommendation.PENDING, None),
        ],
    )
    def test_recommendation_mapping(self, recommendation, status):
        assert status_for_recommendation(recommendation) == status


class TestTransition:
    @pytest.mark.asyncio
    async def test_verify_records_operator_and_time(self, machine, stored_flood, clock):
        report = await machine.transition(stored_flood.report_id, ReportStatus.VERIFIED, "admin-1")
        assert report.status == ReportStatus.VERIFIED
        assert report.verified_by == "admin-1"
        assert report.verified_at == clock.now

    @pytest.mark.asyncio
    async def test_resolve_records_note(self, machine, stored_flood, report_store):
        await machine.transition(stored_flood.report_id, "resolved", "admin-2", "Water receded")
        report = await report_store.get_report(stored_flood.report_id)
        assert report.status == ReportStatus.RESOLVED
        assert report.resolution.resolved_by == "admin-2"
        assert report.resolution.resolved_at is not None
        assert report.resolution.description == "Water receded"

    @pytest.mark.asyncio
    async def test_resolve_without_note(self, machine, stored_flood):
        report = await machine.transition(stored_flood.report_id, ReportStatus.RESOLVED, "admin-2")
        assert report.resolution.description is None

    @pytest.mark.asyncio
    async def test_investigating_leaves_verification_fields(self, machine, stored_flood):
        report = await machine.transition(stored_flood.report_id, "investigating", "admin-1")
        assert report.status == ReportStatus.INVESTIGATING
        assert report.verified_by is None
        assert report.resolution is None

    @pytest.mark.asyncio
    async def test_reapplying_status_refreshes_timestamp(self, machine, stored_flood):
        first = await machine.transition(stored_flood.report_id, "verified", "admin-1")
        second = await machine.transition(stored_flood.report_id, "verified", "admin-2")
        assert second.status == first.status == ReportStatus.VERIFIED
        assert second.verified_by == "admin-2"
        assert second.verified_at > first.verified_at

    @pytest.mark.asyncio
    async def test_resolved_report_can_reopen(self, machine, stored_flood):
        await machine.transition(stored_flood.report_id, "resolved", "admin-1")
        report = await machine.transition(stored_flood.report_id, "pending", "admin-1")
        assert report.status == ReportStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, machine, stored_flood):
        with pytest.raises(ValidationError):
            await machine.transition(stored_flood.report_id, "archived", "admin-1")

    @pytest.mark.asyncio
    async def test_operator_required(self, machine, stored_flood):
        with pytest.raises(ValidationError):
            await machine.transition(stored_flood.report_id, "verified", "")

    @pytest.mark.asyncio
    async def test_missing_report(self, machine):
        with pytest.raises(NotFound):
            await machine.transition("nope", "verified", "admin-1")


class TestAtomicity:
    @pytest.mark.asyncio
    async def test_failed_write_leaves_report_untouched(self, tmp_path, clock):
        path = tmp_path / "reports.json"
        store = ReportStore(str(path))
        await store.save_report(Report(report_id="r1", title="Flood"))

        # Replace the file with a directory so the next write fails
        path.unlink()
        path.mkdir()

        machine = TriageStateMachine(store, clock=clock)
        with pytest.raises(StorageFailure):
            await machine.transition("r1", "verified", "admin-1")

        report = await store.get_report("r1")
        assert report.status == ReportStatus.PENDING
        assert report.verified_by is None
        assert report.verified_at is None

    @pytest.mark.asyncio
    async def test_guard_refusal_writes_nothing(self, report_store, stored_flood):
        with pytest.raises(InvalidTransition):
            await report_store.apply_status_change(
                stored_flood.report_id,
                ReportStatus.VERIFIED,
                "admin-1",
                datetime.now(timezone.utc),
                guard=lambda current, new: False,
            )
        report = await report_store.get_report(stored_flood.report_id)
        assert report.status == ReportStatus.PENDING


class TestApplyRecommendation:
    @pytest.mark.asyncio
    async def test_approve_verifies_as_system(self, machine, stored_flood):
        analysis = make_analysis(stored_flood.report_id, Recommendation.APPROVE, 0.9)
        report = await machine.apply_recommendation(stored_flood.report_id, analysis)
        assert report.status == ReportStatus.VERIFIED
        assert report.verified_by == SYSTEM_OPERATOR
        assert report.credibility_score == 0.9

    @pytest.mark.asyncio
    async def test_reject_marks_false_report(self, machine, stored_bare):
        analysis = make_analysis(stored_bare.report_id, Recommendation.REJECT, 0.05)
        report = await machine.apply_recommendation(stored_bare.report_id, analysis)
        assert report.status == ReportStatus.FALSE_REPORT

    @pytest.mark.asyncio
    async def test_pending_keeps_status_but_records_analysis(self, machine, stored_flood, report_store):
        await machine.transition(stored_flood.report_id, "investigating", "admin-1")
        analysis = make_analysis(stored_flood.report_id, Recommendation.PENDING, 0.6)
        report = await machine.apply_recommendation(stored_flood.report_id, analysis)
        assert report.status == ReportStatus.INVESTIGATING
        assert report.credibility_score == 0.6
        assert report.flags == ["vague_location"]
        assert report.ai_summary == "summary"

    @pytest.mark.asyncio
    async def test_analysis_fields_overwritten_not_merged(self, machine, stored_flood):
        first = make_analysis(stored_flood.report_id, Recommendation.PENDING, 0.6)
        first.flags = ["no_visual_evidence", "vague_location"]
        await machine.apply_recommendation(stored_flood.report_id, first)

        second = make_analysis(stored_flood.report_id, Recommendation.APPROVE, 0.9)
        second.flags = []
        report = await machine.apply_recommendation(stored_flood.report_id, second)
        assert report.flags == []
        assert report.credibility_score == 0.9
