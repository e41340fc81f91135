"""Shared fixtures: report snapshots, stores and operators."""

import pytest
import pytest_asyncio

from alerto_triage.data_management import (
    AnalysisStore,
    NotificationStore,
    OperatorStore,
    ReportStore,
)
from alerto_triage.data_management.schemas import Operator, Report, Role


@pytest.fixture
def flood_snapshot() -> dict:
    """Complete, specific, illustrated critical report."""
    return {
        "report_id": "rep-flood",
        "title": "Flood on Main St",
        "description": "Water rising fast near the bridge, 20 houses affected, ambulance needed",
        "images": [1],
        "location": {"barangay": "Poblacion", "city": "Batangas City"},
        "severity": "critical",
        "category": "flooding",
    }


@pytest.fixture
def bare_snapshot() -> dict:
    """Untitled one-word report with no images and no location."""
    return {
        "report_id": "rep-bare",
        "description": "bad",
        "images": [],
        "location": {},
        "severity": "critical",
    }


@pytest.fixture
def report_store() -> ReportStore:
    return ReportStore()


@pytest.fixture
def analysis_store() -> AnalysisStore:
    return AnalysisStore()


@pytest.fixture
def notification_store() -> NotificationStore:
    return NotificationStore()


@pytest_asyncio.fixture
async def operator_store() -> OperatorStore:
    store = OperatorStore()
    await store.add_operator(Operator(user_id="admin-1", name="Ana", role=Role.ADMIN))
    await store.add_operator(Operator(user_id="admin-2", name="Ben", role=Role.SUPER_ADMIN))
    await store.add_operator(Operator(user_id="user-1", name="Cris", role=Role.USER))
    return store


@pytest_asyncio.fixture
async def stored_flood(report_store: ReportStore, flood_snapshot: dict) -> Report:
    report = Report.model_validate(flood_snapshot)
    await report_store.save_report(report)
    return report


@pytest_asyncio.fixture
async def stored_bare(report_store: ReportStore, bare_snapshot: dict) -> Report:
    report = Report.model_validate(bare_snapshot)
    await report_store.save_report(report)
    return report
