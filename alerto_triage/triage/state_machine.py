"""Report status state machine.

Every status change, human or automated, goes through
``TriageStateMachine.transition`` so verifier/resolver bookkeeping and the
transition policy live in one place.

Policy: ``is_transition_allowed`` currently permits any move between named
statuses, including re-applying the current one (which refreshes the
verify/resolve timestamps) and reopening resolved reports. Tightening the
policy means changing that one function.
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Union

from loguru import logger

from alerto_triage.data_management.repositories import ReportRepository
from alerto_triage.data_management.schemas import (
    CredibilityAnalysis,
    Recommendation,
    Report,
    ReportStatus,
)
from alerto_triage.errors import ValidationError

# Acting operator recorded for scorer-driven transitions
SYSTEM_OPERATOR = "system:triage"

_RECOMMENDATION_STATUS: dict[Recommendation, Optional[ReportStatus]] = {
    Recommendation.APPROVE: ReportStatus.VERIFIED,
    Recommendation.REJECT: ReportStatus.FALSE_REPORT,
    Recommendation.PENDING: None,
}


def is_transition_allowed(current: ReportStatus, new: ReportStatus) -> bool:
    """Transition policy: every named status may move to every named status."""
    return isinstance(current, ReportStatus) and isinstance(new, ReportStatus)


def status_for_recommendation(recommendation: Recommendation) -> Optional[ReportStatus]:
    """Map a scorer recommendation to a status; None leaves the status as is."""
    return _RECOMMENDATION_STATUS[Recommendation(recommendation)]


def parse_status(value: Union[ReportStatus, str]) -> ReportStatus:
    try:
        return ReportStatus(value)
    except ValueError as e:
        raise ValidationError(f"Unknown report status: {value!r}") from e


class TriageStateMachine:
    """
    Applies status transitions to reports through the report repository.

    Usage:
        machine = TriageStateMachine(report_store)
        report = await machine.transition(report_id, "resolved", "admin-1", "Drained")
        report = await machine.apply_recommendation(report_id, analysis)
    """

    def __init__(
        self,
        report_store: ReportRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.report_store = report_store
        self.clock = clock
        self.logger = logger.bind(component="TriageStateMachine")

    async def transition(
        self,
        report_id: str,
        new_status: Union[ReportStatus, str],
        acting_operator: str,
        resolution_note: Optional[str] = None,
    ) -> Report:
        """
        Set a report's status.

        Verifying records the operator and a server timestamp; resolving
        records the operator, timestamp and optional note. Status, operator
        and timestamp are written together.

        Raises:
            ValidationError: Unknown status or missing operator
            NotFound: Report does not exist
            InvalidTransition: Policy refused the change
            StorageFailure: The write failed
        """
        status = parse_status(new_status)
        if not acting_operator:
            raise ValidationError("acting_operator is required")

        report = await self.report_store.apply_status_change(
            report_id,
            status,
            acting_operator,
            self.clock(),
            resolution_note=resolution_note,
            guard=is_transition_allowed,
        )
        self.logger.info(
            f"Report {report_id} -> {status.value}",
            operator=acting_operator,
        )
        return report

    async def apply_recommendation(
        self,
        report_id: str,
        analysis: CredibilityAnalysis,
    ) -> Report:
        """
        Automated path: record the analysis on the report, then map the
        recommendation to a status (approve -> verified, reject ->
        false_report, pending -> unchanged).

        Returns:
            The report as stored after the update
        """
        report = await self.report_store.apply_analysis(report_id, analysis)

        status = status_for_recommendation(analysis.recommendation)
        if status is None:
            self.logger.debug(f"Report {report_id} left {report.status.value}")
            return report

        return await self.transition(report_id, status, SYSTEM_OPERATOR)
