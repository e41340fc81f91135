"""Automatic triage of newly created reports.

Runs after report creation has already succeeded, as a fire-and-forget task
with its own error boundary: a triage failure is logged and never surfaces
to the submitter.

Steps per report.created event:
1. Load the report snapshot (from the event, else from the report store)
2. Score it
3. Replace the stored analysis for the report
4. Apply the automated status mapping
5. Notify admins if score >= 0.7 and severity is high or critical

Re-delivery of the same event is safe: the analysis is fully replaced and the
status is set unconditionally. Admins may get a duplicate notification.

Usage:
    from alerto_triage.pipeline import IngestionTrigger

    trigger = IngestionTrigger(report_store, analysis_store, notification_store, operator_store)
    trigger.register(bus)                  # event-driven
    await trigger.process_new_report(rid)  # or direct
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from alerto_triage.communication.bus import REPORT_CREATED, MessageBus
from alerto_triage.config.settings import settings
from alerto_triage.data_management.repositories import (
    AnalysisRepository,
    NotificationRepository,
    OperatorDirectory,
    ReportRepository,
)
from alerto_triage.data_management.schemas import (
    CredibilityAnalysis,
    Report,
    ReportStatus,
    Severity,
)
from alerto_triage.triage.credibility_scorer import CredibilityScorer, coerce_report
from alerto_triage.triage.notification_fanout import NotificationFanout
from alerto_triage.triage.state_machine import TriageStateMachine
from alerto_triage.utils.logging import bind_triage_context, get_structured_logger


@dataclass
class TriageOutcome:
    """What one triage run did.

    Attributes:
        report_id: Report triaged
        analysis: Analysis stored for the report
        status: Report status after the automated mapping
        notified: Notifications created (0 if fan-out was not triggered)
    """

    report_id: str
    analysis: CredibilityAnalysis
    status: ReportStatus
    notified: int = 0


class IngestionTrigger:
    """Event handler that triages each newly created report."""

    def __init__(
        self,
        report_store: ReportRepository,
        analysis_store: AnalysisRepository,
        notification_store: NotificationRepository,
        operator_directory: OperatorDirectory,
        scorer: Optional[CredibilityScorer] = None,
        state_machine: Optional[TriageStateMachine] = None,
        fanout: Optional[NotificationFanout] = None,
        notify_min_score: Optional[float] = None,
        notify_severities: Optional[Iterable[Union[Severity, str]]] = None,
    ) -> None:
        """Initialize IngestionTrigger.

        Args:
            report_store: Report repository (reads snapshots, writes status).
            analysis_store: Analysis repository (one record per report).
            notification_store: Notification repository for the fan-out.
            operator_directory: Admin roster for the fan-out.
            scorer: Credibility scorer. Defaults to the standard rule table.
            state_machine: Status state machine over ``report_store``.
            fanout: Notification fan-out over the given stores.
            notify_min_score: Score threshold for notification (settings default).
            notify_severities: Severities eligible for notification (settings default).
        """
        self.report_store = report_store
        self.analysis_store = analysis_store
        self.scorer = scorer or CredibilityScorer()
        self.state_machine = state_machine or TriageStateMachine(report_store)
        self.fanout = fanout or NotificationFanout(operator_directory, notification_store)
        self.notify_min_score = (
            settings.notify_min_score if notify_min_score is None else notify_min_score
        )
        self.notify_severities = frozenset(
            Severity(s) for s in (notify_severities or settings.notify_severities)
        )
        self._tasks: set[asyncio.Task] = set()
        self._logger = get_structured_logger("IngestionTrigger")

    def should_notify(self, analysis: CredibilityAnalysis, report: Report) -> bool:
        return (
            analysis.score >= self.notify_min_score
            and report.severity in self.notify_severities
        )

    async def process_new_report(
        self,
        report_id: str,
        snapshot: Optional[Union[Report, Mapping]] = None,
    ) -> Optional[TriageOutcome]:
        """Triage one report; never raises.

        Args:
            report_id: Id of the created report.
            snapshot: Report as it was at creation. Loaded from the store if None.

        Returns:
            TriageOutcome on success, None if triage failed or the report is gone.
        """
        log = bind_triage_context(self._logger, report_id)
        try:
            return await self._triage(report_id, snapshot, log)
        except Exception:
            # Creation already succeeded; triage is best-effort enrichment
            log.exception("triage_failed")
            return None

    async def _triage(
        self,
        report_id: str,
        snapshot: Optional[Union[Report, Mapping]],
        log: Any,
    ) -> Optional[TriageOutcome]:
        if snapshot is None:
            report = await self.report_store.get_report(report_id)
            if report is None:
                log.warning("report_missing")
                return None
        else:
            report = coerce_report(snapshot)

        log.info("triage_started")

        analysis = self.scorer.analyze(report, report_id=report_id)
        await self.analysis_store.save_analysis(analysis)

        updated = await self.state_machine.apply_recommendation(report_id, analysis)

        notified = 0
        if self.should_notify(analysis, report):
            notified = await self.fanout.notify(report_id, report, analysis)

        log.info(
            "triage_completed",
            score=analysis.score,
            flags=analysis.flags,
            recommendation=analysis.recommendation.value,
            status=updated.status.value,
            notified=notified,
        )
        return TriageOutcome(
            report_id=report_id,
            analysis=analysis,
            status=updated.status,
            notified=notified,
        )

    def dispatch(
        self,
        report_id: str,
        snapshot: Optional[Union[Report, Mapping]] = None,
    ) -> asyncio.Task:
        """Start triage as a background task and return immediately."""
        task = asyncio.create_task(
            self.process_new_report(report_id, snapshot),
            name=f"triage-{report_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def on_report_created(self, message: dict[str, Any]) -> None:
        """Bus handler for report.created envelopes."""
        payload = message.get("payload") or {}
        report_id = payload.get("report_id")
        if not report_id:
            self._logger.warning("event_without_report_id", message_id=message.get("id"))
            return
        self.dispatch(report_id, payload.get("report"))

    def register(self, bus: MessageBus) -> None:
        """Subscribe to report.created on the bus."""
        bus.subscribe_to_pattern("ingestion_trigger", REPORT_CREATED, self.on_report_created)
        self._logger.info("ingestion_trigger_registered")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for all dispatched triage tasks to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
