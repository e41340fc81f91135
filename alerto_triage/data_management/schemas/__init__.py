"""Pydantic schemas for reports, credibility analyses, notifications and operators.

Usage:
    from alerto_triage.data_management.schemas import Report, Severity
    report = Report(title="Flood on Main St", severity=Severity.CRITICAL)
"""

from alerto_triage.data_management.schemas.report_schema import (
    Coordinates,
    ImageRef,
    Location,
    Report,
    ReportCategory,
    ReportStatus,
    Resolution,
    Severity,
)
from alerto_triage.data_management.schemas.analysis_schema import (
    AnalysisLookup,
    CredibilityAnalysis,
    CredibilityFlag,
    Recommendation,
    RuleOutcome,
)
from alerto_triage.data_management.schemas.notification_schema import (
    Notification,
    NotificationType,
)
from alerto_triage.data_management.schemas.operator_schema import (
    CallerIdentity,
    Operator,
    Role,
)

__all__ = [
    "Coordinates",
    "ImageRef",
    "Location",
    "Report",
    "ReportCategory",
    "ReportStatus",
    "Resolution",
    "Severity",
    "AnalysisLookup",
    "CredibilityAnalysis",
    "CredibilityFlag",
    "Recommendation",
    "RuleOutcome",
    "Notification",
    "NotificationType",
    "CallerIdentity",
    "Operator",
    "Role",
]
