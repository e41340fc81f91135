"""Operator-facing analysis entry points: manual re-analysis and analysis lookup.

Re-analysis is advisory. It re-scores the report and replaces the stored
analysis (stamped with the operator), but never changes report status and
never notifies anyone.

Errors are structured so callers can tell them apart:
- Unauthenticated / Unauthorized: no identity, or identity without admin role
- ValidationError: missing report id
- NotFound: report does not exist (nothing is written)
- InternalError: a storage failure during the request
"""

from typing import Optional

from alerto_triage.data_management.repositories import AnalysisRepository, ReportRepository
from alerto_triage.data_management.schemas import (
    AnalysisLookup,
    CallerIdentity,
    CredibilityAnalysis,
)
from alerto_triage.errors import (
    InternalError,
    NotFound,
    StorageFailure,
    Unauthenticated,
    Unauthorized,
    ValidationError,
)
from alerto_triage.triage.credibility_scorer import CredibilityScorer
from alerto_triage.utils.logging import bind_triage_context, get_structured_logger


def require_authenticated(caller: Optional[CallerIdentity]) -> CallerIdentity:
    if caller is None:
        raise Unauthenticated("User must be authenticated")
    return caller


def require_admin(caller: Optional[CallerIdentity]) -> CallerIdentity:
    """Validate that the caller is authenticated and holds admin capability."""
    caller = require_authenticated(caller)
    if not caller.is_admin:
        raise Unauthorized(f"User {caller.user_id} is not an administrator")
    return caller


class ReanalysisService:
    """Synchronous, operator-initiated analysis requests."""

    def __init__(
        self,
        report_store: ReportRepository,
        analysis_store: AnalysisRepository,
        scorer: Optional[CredibilityScorer] = None,
    ) -> None:
        self.report_store = report_store
        self.analysis_store = analysis_store
        self.scorer = scorer or CredibilityScorer()
        self._logger = get_structured_logger("ReanalysisService")

    async def reanalyze(
        self,
        report_id: str,
        caller: Optional[CallerIdentity],
    ) -> CredibilityAnalysis:
        """Re-score an existing report and replace its analysis.

        Args:
            report_id: Report to re-analyse.
            caller: Authenticated caller; must be an administrator.

        Returns:
            The freshly stored analysis, with ``triggered_by`` set.
        """
        caller = require_admin(caller)
        if not report_id:
            raise ValidationError("reportId is required")

        log = bind_triage_context(self._logger, report_id).bind(operator_id=caller.user_id)
        try:
            report = await self.report_store.get_report(report_id)
            if report is None:
                raise NotFound("Report not found")

            analysis = self.scorer.analyze(
                report,
                report_id=report_id,
                triggered_by=caller.user_id,
            )
            await self.analysis_store.save_analysis(analysis)
        except StorageFailure as e:
            log.error("reanalysis_failed", error=str(e))
            raise InternalError(e.message) from e

        log.info(
            "report_reanalyzed",
            score=analysis.score,
            recommendation=analysis.recommendation.value,
        )
        return analysis

    async def get_analysis(
        self,
        report_id: str,
        caller: Optional[CallerIdentity],
    ) -> AnalysisLookup:
        """Read the current analysis of a report.

        Any authenticated caller may read. A missing analysis is returned as
        ``found=False``, not raised.
        """
        require_authenticated(caller)
        if not report_id:
            raise ValidationError("reportId is required")

        try:
            analysis = await self.analysis_store.get_analysis(report_id)
        except StorageFailure as e:
            self._logger.error("analysis_read_failed", report_id=report_id, error=str(e))
            raise InternalError(e.message) from e

        if analysis is None:
            return AnalysisLookup(
                report_id=report_id,
                found=False,
                message="No analysis found for this report",
            )
        return AnalysisLookup(report_id=report_id, found=True, analysis=analysis)
