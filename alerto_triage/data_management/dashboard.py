"""Dashboard aggregation over triage output.

Read-only: counts and averages for the admin panel. No triage decisions are
made here.
"""

from collections import Counter
from typing import Any, Optional

from alerto_triage.data_management.repositories import AnalysisRepository, ReportRepository
from alerto_triage.data_management.schemas import Recommendation, ReportStatus


async def compute_dashboard_stats(
    report_store: ReportRepository,
    analysis_store: AnalysisRepository,
) -> dict[str, Any]:
    """Summarise reports and their current analyses.

    Returns:
        Stats dict with totals by status, severity and recommendation, the
        average credibility score, per-flag counts and the number of reports
        still awaiting a decision.
    """
    reports = await report_store.list_reports()
    analyses = await analysis_store.list_analyses()

    by_status = Counter(r.status.value for r in reports)
    by_severity = Counter(r.severity.value for r in reports if r.severity is not None)
    by_recommendation = Counter(a.recommendation.value for a in analyses)
    flag_counts = Counter(flag for a in analyses for flag in a.flags)

    average_score: Optional[float] = None
    if analyses:
        average_score = round(sum(a.score for a in analyses) / len(analyses), 2)

    return {
        "total_reports": len(reports),
        "analyzed_reports": len(analyses),
        "by_status": {s.value: by_status.get(s.value, 0) for s in ReportStatus},
        "by_severity": dict(by_severity),
        "by_recommendation": {
            r.value: by_recommendation.get(r.value, 0) for r in Recommendation
        },
        "average_score": average_score,
        "flag_counts": dict(flag_counts),
        "awaiting_review": by_status.get(ReportStatus.PENDING.value, 0),
    }
