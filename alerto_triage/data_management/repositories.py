"""Repository interfaces the triage core depends on.

The core never knows how reports, analyses, notifications or operators are
stored. Production deployments back these with a database; the in-memory
stores in this package implement them for tests and local runs.

All methods raise ``StorageFailure`` when the backing store fails.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

from alerto_triage.data_management.schemas import (
    CredibilityAnalysis,
    Notification,
    Operator,
    Report,
    ReportCategory,
    ReportStatus,
    Severity,
)

# (current status, new status) -> allowed
TransitionGuard = Callable[[ReportStatus, ReportStatus], bool]


class ReportRepository(ABC):
    @abstractmethod
    async def save_report(self, report: Report) -> None:
        ...

    @abstractmethod
    async def get_report(self, report_id: str) -> Optional[Report]:
        ...

    @abstractmethod
    async def apply_status_change(
        self,
        report_id: str,
        new_status: ReportStatus,
        operator_id: str,
        changed_at: datetime,
        resolution_note: Optional[str] = None,
        guard: Optional[TransitionGuard] = None,
    ) -> Report:
        """Set status plus verifier/resolver fields in a single write.

        Raises NotFound for an unknown report and InvalidTransition when
        ``guard`` refuses the change. Either everything is written or nothing.
        """

    @abstractmethod
    async def apply_analysis(
        self,
        report_id: str,
        analysis: CredibilityAnalysis,
    ) -> Report:
        """Overwrite the report's score, flags and summary from an analysis."""

    @abstractmethod
    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        severity: Optional[Severity] = None,
        category: Optional[ReportCategory] = None,
    ) -> list[Report]:
        ...


class AnalysisRepository(ABC):
    @abstractmethod
    async def save_analysis(self, analysis: CredibilityAnalysis) -> None:
        """Store the analysis, replacing any previous one for the report."""

    @abstractmethod
    async def get_analysis(self, report_id: str) -> Optional[CredibilityAnalysis]:
        ...

    @abstractmethod
    async def list_analyses(self) -> list[CredibilityAnalysis]:
        ...


class NotificationRepository(ABC):
    @abstractmethod
    async def add_notification(self, notification: Notification) -> None:
        ...

    @abstractmethod
    async def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
    ) -> list[Notification]:
        ...

    @abstractmethod
    async def get_for_report(self, report_id: str) -> list[Notification]:
        ...

    @abstractmethod
    async def mark_read(self, notification_id: str) -> bool:
        ...


class OperatorDirectory(ABC):
    """Read side of the user store used by the fan-out."""

    @abstractmethod
    async def list_admins(self) -> list[Operator]:
        """Snapshot of operators currently holding admin capability."""

    @abstractmethod
    async def get_operator(self, user_id: str) -> Optional[Operator]:
        ...
