"""Message bus implementation using aiopubsub for report lifecycle events."""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Set
import uuid

from aiopubsub import Hub, Key, Subscriber
from loguru import logger

from alerto_triage.data_management.schemas import Report

REPORT_CREATED = "report.created"

MessageCallback = Callable[[Dict[str, Any]], Awaitable[None]]


def to_key(pattern: str) -> Key:
    """Dotted routing key to aiopubsub Key; ``*`` segments are wildcards."""
    return Key(*pattern.split("."))


class MessageBus:
    """
    In-process pub/sub bus for pipeline events.

    Delivery is at-least-once from the consumer's point of view: handlers
    must tolerate seeing the same event twice.

    Key patterns:
    - "report.created" - a report was stored; payload carries the snapshot
    """

    def __init__(self):
        self.hub = Hub()
        self._subscribers: Dict[str, Subscriber] = {}
        self._active_subscriptions: Dict[str, Set[str]] = {}
        self._shutdown = False
        self.logger = logger.bind(component="MessageBus")

    async def publish(self, key: str, message: Any) -> str:
        """
        Publish a message to a routing key.

        Args:
            key: Routing key (e.g. "report.created")
            message: Payload passed to all matching subscribers

        Returns:
            Message id of the published envelope
        """
        if self._shutdown:
            self.logger.warning(f"Cannot publish to {key} - bus is shutting down")
            return ""

        envelope = {
            "id": str(uuid.uuid4()),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "key": key,
            "payload": message,
        }
        self.hub.publish(to_key(key), envelope)
        self.logger.debug(f"Published message to {key}", message_id=envelope["id"])
        return envelope["id"]

    async def publish_report_created(self, report: Report) -> str:
        """Announce a newly stored report with its full snapshot."""
        return await self.publish(
            REPORT_CREATED,
            {
                "report_id": report.report_id,
                "report": report.model_dump(mode="json"),
            },
        )

    def subscribe_to_pattern(
        self,
        subscriber_name: str,
        pattern: str,
        callback: MessageCallback,
    ) -> Subscriber:
        """
        Subscribe an async callback to a key pattern.

        Callback errors are logged and do not stop the subscription.

        Args:
            subscriber_name: Unique name for this subscriber
            pattern: Key pattern (e.g. "report.created", "report.*")
            callback: Async function receiving the message envelope
        """
        if self._shutdown:
            raise RuntimeError("Cannot subscribe - bus is shutting down")

        subscriber = self._subscribers.get(subscriber_name)
        if subscriber is None:
            subscriber = Subscriber(self.hub, subscriber_name)
            self._subscribers[subscriber_name] = subscriber
            self._active_subscriptions[subscriber_name] = set()

        async def message_handler(key_received: Key, message: Dict[str, Any]) -> None:
            try:
                await callback(message)
            except Exception:
                self.logger.exception(f"Subscriber {subscriber_name} callback error")

        subscriber.add_async_listener(to_key(pattern), message_handler)
        self._active_subscriptions[subscriber_name].add(pattern)

        self.logger.info(f"Subscriber {subscriber_name} subscribed to pattern: {pattern}")
        return subscriber

    def get_active_subscriptions(self) -> Dict[str, Set[str]]:
        return {name: set(patterns) for name, patterns in self._active_subscriptions.items()}

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.shutdown()

    async def shutdown(self) -> None:
        """Stop all listeners and refuse further publishes."""
        if self._shutdown:
            return

        self._shutdown = True
        self.logger.info("Shutting down MessageBus")

        for subscriber in self._subscribers.values():
            await subscriber.remove_all_listeners()
        self._subscribers.clear()
        self._active_subscriptions.clear()

        self.logger.info("MessageBus shutdown complete")
