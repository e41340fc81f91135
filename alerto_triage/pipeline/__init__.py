"""Pipeline entry points: automatic ingestion triage and operator re-analysis.

Usage:
    from alerto_triage.pipeline import IngestionTrigger, ReanalysisService
"""

from alerto_triage.pipeline.ingestion_trigger import IngestionTrigger, TriageOutcome
from alerto_triage.pipeline.reanalysis import ReanalysisService

__all__ = [
    "IngestionTrigger",
    "TriageOutcome",
    "ReanalysisService",
]
