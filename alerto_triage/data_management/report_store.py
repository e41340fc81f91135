"""Report storage with atomic status and analysis updates.

Usage:
    from alerto_triage.data_management.report_store import ReportStore

    store = ReportStore()
    await store.save_report(report)
    updated = await store.apply_status_change(
        report.report_id, ReportStatus.VERIFIED, "admin-1", datetime.now(timezone.utc)
    )
"""

from datetime import datetime
from typing import Optional

from alerto_triage.data_management.base_store import InMemoryStore
from alerto_triage.data_management.repositories import ReportRepository, TransitionGuard
from alerto_triage.data_management.schemas import (
    CredibilityAnalysis,
    Report,
    ReportCategory,
    ReportStatus,
    Resolution,
    Severity,
)
from alerto_triage.errors import InvalidTransition, NotFound


class ReportStore(InMemoryStore[Report], ReportRepository):
    """Reports keyed by report_id.

    Every mutation builds a new Report and commits it in one step under the
    lock, so readers never observe a status without its verifier/resolver
    fields.
    """

    record_type = Report

    async def save_report(self, report: Report) -> None:
        async with self._lock:
            self._commit(report.report_id, report.model_copy(deep=True))
            self._logger.debug("report_saved", report_id=report.report_id)

    async def get_report(self, report_id: str) -> Optional[Report]:
        async with self._lock:
            report = self._records.get(report_id)
            return report.model_copy(deep=True) if report else None

    async def apply_status_change(
        self,
        report_id: str,
        new_status: ReportStatus,
        operator_id: str,
        changed_at: datetime,
        resolution_note: Optional[str] = None,
        guard: Optional[TransitionGuard] = None,
    ) -> Report:
        async with self._lock:
            current = self._records.get(report_id)
            if current is None:
                raise NotFound(f"Report {report_id} not found")

            if guard is not None and not guard(current.status, new_status):
                raise InvalidTransition(
                    f"Transition {current.status.value} -> {new_status.value} is not allowed"
                )

            update: dict = {"status": new_status}
            if new_status == ReportStatus.VERIFIED:
                update["verified_by"] = operator_id
                update["verified_at"] = changed_at
            if new_status == ReportStatus.RESOLVED:
                resolution = current.resolution or Resolution()
                resolution_update: dict = {
                    "resolved_by": operator_id,
                    "resolved_at": changed_at,
                }
                if resolution_note:
                    resolution_update["description"] = resolution_note
                update["resolution"] = resolution.model_copy(update=resolution_update)

            updated = current.model_copy(update=update, deep=True)
            self._commit(report_id, updated)

            self._logger.info(
                "status_changed",
                report_id=report_id,
                previous=current.status.value,
                status=new_status.value,
                operator_id=operator_id,
            )
            return updated.model_copy(deep=True)

    async def apply_analysis(
        self,
        report_id: str,
        analysis: CredibilityAnalysis,
    ) -> Report:
        async with self._lock:
            current = self._records.get(report_id)
            if current is None:
                raise NotFound(f"Report {report_id} not found")

            updated = current.model_copy(
                update={
                    "credibility_score": analysis.score,
                    "flags": list(analysis.flags),
                    "ai_summary": analysis.summary,
                },
                deep=True,
            )
            self._commit(report_id, updated)
            self._logger.debug(
                "report_analysis_applied",
                report_id=report_id,
                score=analysis.score,
            )
            return updated.model_copy(deep=True)

    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        severity: Optional[Severity] = None,
        category: Optional[ReportCategory] = None,
    ) -> list[Report]:
        async with self._lock:
            reports = [
                r
                for r in self._records.values()
                if (status is None or r.status == status)
                and (severity is None or r.severity == severity)
                and (category is None or r.category == category)
            ]
            reports.sort(key=lambda r: r.created_at, reverse=True)
            return [r.model_copy(deep=True) for r in reports]
