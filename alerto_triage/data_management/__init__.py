"""Data management package for the triage pipeline.

Provides repository interfaces, in-memory stores and schemas for:
- Reports - community submissions and their lifecycle status
- Credibility analyses - one current record per report
- Notifications - one per administrator per triggering event
- Operators - the admin roster read by the fan-out

Storage adapters:
- ReportStore, AnalysisStore, NotificationStore, OperatorStore
"""

from alerto_triage.data_management.analysis_store import AnalysisStore
from alerto_triage.data_management.notification_store import NotificationStore
from alerto_triage.data_management.operator_store import OperatorStore
from alerto_triage.data_management.report_store import ReportStore

__all__ = [
    "AnalysisStore",
    "NotificationStore",
    "OperatorStore",
    "ReportStore",
]
