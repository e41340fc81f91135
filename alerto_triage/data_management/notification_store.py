"""Administrator notification storage."""

from typing import Optional

from alerto_triage.data_management.base_store import InMemoryStore
from alerto_triage.data_management.repositories import NotificationRepository
from alerto_triage.data_management.schemas import Notification


class NotificationStore(InMemoryStore[Notification], NotificationRepository):
    """Notifications keyed by notification_id."""

    record_type = Notification

    async def add_notification(self, notification: Notification) -> None:
        async with self._lock:
            self._commit(notification.notification_id, notification.model_copy(deep=True))
            self._logger.debug(
                "notification_added",
                notification_id=notification.notification_id,
                user_id=notification.user_id,
                report_id=notification.report_id,
            )

    async def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
    ) -> list[Notification]:
        async with self._lock:
            items = [
                n
                for n in self._records.values()
                if n.user_id == user_id and not (unread_only and n.read)
            ]
            items.sort(key=lambda n: n.created_at, reverse=True)
            return [n.model_copy(deep=True) for n in items]

    async def get_for_report(self, report_id: str) -> list[Notification]:
        async with self._lock:
            return [
                n.model_copy(deep=True)
                for n in self._records.values()
                if n.report_id == report_id
            ]

    async def mark_read(self, notification_id: str) -> bool:
        """Mark a notification as read.

        Returns:
            True if marked, False if notification not found.
        """
        async with self._lock:
            current: Optional[Notification] = self._records.get(notification_id)
            if current is None:
                return False
            self._commit(notification_id, current.model_copy(update={"read": True}))
            return True
