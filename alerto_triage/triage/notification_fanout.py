"""Administrator notification fan-out.

One notification per administrator in the roster snapshot, written
independently: a failed or slow write for one admin never blocks, fails or
rolls back another's. Writes run concurrently under a semaphore.
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from alerto_triage.config.settings import settings
from alerto_triage.data_management.repositories import (
    NotificationRepository,
    OperatorDirectory,
)
from alerto_triage.data_management.schemas import (
    CredibilityAnalysis,
    Notification,
    NotificationType,
    Operator,
    Report,
)


@dataclass
class FanoutResult:
    """Outcome of one fan-out.

    Attributes:
        created: Notifications written
        failed: Admin ids whose notification could not be written
    """

    created: List[Notification] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)


def build_notification(
    admin: Operator,
    report_id: str,
    report: Report,
    analysis: CredibilityAnalysis,
) -> Notification:
    severity = report.severity.value if report.severity else "unknown"
    return Notification(
        user_id=admin.user_id,
        type=NotificationType.NEW_HIGH_PRIORITY_REPORT,
        report_id=report_id,
        title=f"New {severity} Report",
        message=analysis.summary,
        credibility_score=analysis.score,
    )


class NotificationFanout:
    """
    Notifies every current administrator about a report.

    Usage:
        fanout = NotificationFanout(operator_directory, notification_store)
        count = await fanout.notify(report_id, report, analysis)

    Attributes:
        max_concurrency: Upper bound on concurrent notification writes
    """

    def __init__(
        self,
        operators: OperatorDirectory,
        notifications: NotificationRepository,
        max_concurrency: Optional[int] = None,
    ):
        self.operators = operators
        self.notifications = notifications
        self.max_concurrency = max_concurrency or settings.fanout_concurrency
        self.logger = logger.bind(component="NotificationFanout")

    async def notify(
        self,
        report_id: str,
        report: Report,
        analysis: CredibilityAnalysis,
    ) -> int:
        """Notify all admins; returns the number of notifications created."""
        result = await self.notify_detailed(report_id, report, analysis)
        return result.created_count

    async def notify_detailed(
        self,
        report_id: str,
        report: Report,
        analysis: CredibilityAnalysis,
    ) -> FanoutResult:
        """
        Notify all admins and report successes and failures separately.

        The admin roster is read once; admins added or removed during the
        fan-out are not reconciled.
        """
        admins = await self.operators.list_admins()
        if not admins:
            self.logger.warning(f"No admin users found to notify for report {report_id}")
            return FanoutResult()

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def notify_one(admin: Operator) -> Notification:
            async with semaphore:
                notification = build_notification(admin, report_id, report, analysis)
                await self.notifications.add_notification(notification)
                return notification

        raw_results = await asyncio.gather(
            *[notify_one(admin) for admin in admins],
            return_exceptions=True,
        )

        result = FanoutResult()
        for admin, outcome in zip(admins, raw_results):
            if isinstance(outcome, Notification):
                result.created.append(outcome)
            else:
                result.failed.append(admin.user_id)
                self.logger.error(
                    f"Failed to notify admin {admin.user_id} about report {report_id}: {outcome!r}"
                )

        self.logger.info(
            f"Notified {result.created_count}/{len(admins)} admins about report {report_id}",
            failed=len(result.failed),
        )
        return result
