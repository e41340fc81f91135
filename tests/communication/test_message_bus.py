"""Tests for the aiopubsub-backed MessageBus."""

import asyncio

import pytest

from alerto_triage.communication.bus import REPORT_CREATED, MessageBus
from alerto_triage.data_management.schemas import Report


async def wait_for(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.01)


class TestMessageBus:
    @pytest.mark.asyncio
    async def test_report_created_envelope(self):
        received = []

        async def handler(message):
            received.append(message)

        bus = MessageBus()
        bus.subscribe_to_pattern("test", REPORT_CREATED, handler)

        message_id = await bus.publish_report_created(Report(report_id="r1", title="Flood"))
        await wait_for(lambda: received)
        await bus.shutdown()

        assert len(received) == 1
        envelope = received[0]
        assert envelope["id"] == message_id
        assert envelope["key"] == REPORT_CREATED
        assert envelope["payload"]["report_id"] == "r1"
        assert envelope["payload"]["report"]["title"] == "Flood"

    @pytest.mark.asyncio
    async def test_handler_error_does_not_stop_subscription(self):
        received = []

        async def handler(message):
            received.append(message)
            if len(received) == 1:
                raise RuntimeError("boom")

        bus = MessageBus()
        bus.subscribe_to_pattern("test", REPORT_CREATED, handler)

        await bus.publish(REPORT_CREATED, {"report_id": "a"})
        await bus.publish(REPORT_CREATED, {"report_id": "b"})
        await wait_for(lambda: len(received) == 2)
        await bus.shutdown()

        assert [m["payload"]["report_id"] for m in received] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_publish_after_shutdown_is_dropped(self):
        bus = MessageBus()
        await bus.shutdown()
        assert await bus.publish(REPORT_CREATED, {}) == ""

    @pytest.mark.asyncio
    async def test_subscribe_after_shutdown_fails(self):
        bus = MessageBus()
        await bus.shutdown()

        async def handler(message):
            pass

        with pytest.raises(RuntimeError):
            bus.subscribe_to_pattern("late", REPORT_CREATED, handler)

    @pytest.mark.asyncio
    async def test_active_subscriptions(self):
        async def handler(message):
            pass

        bus = MessageBus()
        bus.subscribe_to_pattern("trigger", REPORT_CREATED, handler)
        assert bus.get_active_subscriptions() == {"trigger": {REPORT_CREATED}}
        await bus.shutdown()
