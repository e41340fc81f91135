"""Credibility analysis storage, one current record per report.

Saving replaces the previous record for the same report id in full; the last
write wins when an ingestion run and a manual re-analysis race.
"""

from typing import Optional

from alerto_triage.data_management.base_store import InMemoryStore
from alerto_triage.data_management.repositories import AnalysisRepository
from alerto_triage.data_management.schemas import CredibilityAnalysis


class AnalysisStore(InMemoryStore[CredibilityAnalysis], AnalysisRepository):
    record_type = CredibilityAnalysis

    async def save_analysis(self, analysis: CredibilityAnalysis) -> None:
        async with self._lock:
            replaced = analysis.report_id in self._records
            self._commit(analysis.report_id, analysis.model_copy(deep=True))
            self._logger.debug(
                "analysis_saved",
                report_id=analysis.report_id,
                score=analysis.score,
                recommendation=analysis.recommendation.value,
                replaced=replaced,
            )

    async def get_analysis(self, report_id: str) -> Optional[CredibilityAnalysis]:
        async with self._lock:
            analysis = self._records.get(report_id)
            return analysis.model_copy(deep=True) if analysis else None

    async def list_analyses(self) -> list[CredibilityAnalysis]:
        async with self._lock:
            return [a.model_copy(deep=True) for a in self._records.values()]
