"""Tests for the alert monitor state machine.

**Feature: price-alerts**
"""

import asyncio
import logging
import sqlite3
from unittest.mock import patch

from hypothesis import given, settings
from hypothesis import strategies as st

from financeagent.alerts import CheckOutcome, format_notification
from financeagent.exceptions import PersistenceError, PriceFeedError
from financeagent.models import AlertCondition

from conftest import AlertHarness, ManualTimer


class TestTriggerScenario:
    """
    Create {XYZ, 10, above}. A first check at 8 keeps the alert active and
    schedules one wake-up; a second check at 11 deactivates it, delivers one
    notification and schedules nothing.
    """

    def test_two_check_scenario(self, harness: AlertHarness):
        async def scenario():
            result = await harness.service.create_alert("XYZ", 10, AlertCondition.ABOVE)
            alert_id = result["alert_id"]
            assert harness.timer.pending_for(alert_id) == 1

            harness.feed.push("XYZ", 8, 11)

            first = await harness.timer.fire(alert_id)
            assert first == CheckOutcome.RESCHEDULED
            assert (await harness.store.get(alert_id)).active is True
            assert harness.timer.pending_for(alert_id) == 1
            assert harness.notifier.messages == []

            second = await harness.timer.fire(alert_id)
            assert second == CheckOutcome.TRIGGERED
            return alert_id

        alert_id = asyncio.run(scenario())

        stored = asyncio.run(harness.store.get(alert_id))
        assert stored.active is False
        assert harness.timer.pending_for(alert_id) == 0
        assert len(harness.notifier.messages) == 1
        message = harness.notifier.messages[0]
        assert "XYZ" in message
        assert "above" in message
        assert "$10.00" in message
        assert "$11.00" in message

    def test_rescheduled_with_check_interval(self, temp_dir):
        harness = AlertHarness(temp_dir / "test.db", check_interval=42)

        async def scenario():
            result = await harness.service.create_alert("XYZ", 10, AlertCondition.BELOW)
            harness.feed.push("XYZ", 20)
            await harness.timer.fire(result["alert_id"])
            return result["alert_id"]

        alert_id = asyncio.run(scenario())
        assert harness.timer.requests == [(alert_id, 42)]


class TestDeletionWhilePending:
    """
    Deleting an alert while a wake-up is pending: the wake-up neither
    notifies nor reschedules.
    """

    def test_wakeup_after_delete_is_noop(self, harness: AlertHarness):
        async def scenario():
            result = await harness.service.create_alert("XYZ", 10, AlertCondition.ABOVE)
            alert_id = result["alert_id"]
            harness.feed.push("XYZ", 100)

            deleted = await harness.service.delete_alert(alert_id)
            assert deleted == {"found": True}

            return alert_id, await harness.timer.fire(alert_id)

        alert_id, outcome = asyncio.run(scenario())

        assert outcome == CheckOutcome.SKIPPED
        assert harness.notifier.messages == []
        assert harness.timer.pending_for(alert_id) == 0
        assert harness.feed.calls == []

    def test_stray_wakeup_for_triggered_alert_is_noop(self, harness: AlertHarness):
        async def scenario():
            alert = await harness.store.create("XYZ", 10, AlertCondition.ABOVE)
            await harness.store.mark_triggered(alert.id)
            return await harness.monitor.on_wakeup(alert.id)

        assert asyncio.run(scenario()) == CheckOutcome.SKIPPED
        assert harness.notifier.messages == []
        assert harness.timer.requests == []


class TestFeedFailure:
    """
    A feed failure leaves the alert dormant: still active, no wake-up
    pending, no notification and no retry.
    """

    def test_feed_failure_goes_dormant(self, harness: AlertHarness):
        async def scenario():
            result = await harness.service.create_alert("XYZ", 10, AlertCondition.ABOVE)
            alert_id = result["alert_id"]
            harness.feed.push("XYZ", PriceFeedError("XYZ", "timeout"))
            return alert_id, await harness.timer.fire(alert_id)

        alert_id, outcome = asyncio.run(scenario())

        assert outcome == CheckOutcome.DORMANT
        assert asyncio.run(harness.store.get(alert_id)).active is True
        assert harness.timer.pending_for(alert_id) == 0
        assert harness.notifier.messages == []
        assert harness.feed.calls == ["XYZ"]


class TestPersistenceFailure:
    def test_store_failure_during_check_is_absorbed(self, harness: AlertHarness):
        async def scenario():
            alert = await harness.store.create("XYZ", 10, AlertCondition.ABOVE)
            harness.feed.push("XYZ", 11)
            with patch.object(harness.data_store, "update_state",
                              side_effect=sqlite3.OperationalError("locked")):
                return alert.id, await harness.monitor.on_wakeup(alert.id)

        alert_id, outcome = asyncio.run(scenario())

        assert outcome == CheckOutcome.FAILED
        assert harness.notifier.messages == []
        assert asyncio.run(harness.store.get(alert_id)).active is True


class TestExactlyOnceNotification:
    """
    *For any* number of wake-ups delivered for the same triggered alert
    (at-least-once timer), exactly one notification is delivered.
    """

    @given(duplicates=st.integers(min_value=1, max_value=5))
    @settings(max_examples=10, deadline=None)
    def test_duplicate_wakeups_notify_once(self, duplicates: int):
        import tempfile
        from pathlib import Path

        with tempfile.TemporaryDirectory() as tmpdir:
            harness = AlertHarness(Path(tmpdir) / "test.db")

            async def scenario():
                alert = await harness.store.create("XYZ", 10, AlertCondition.BELOW)
                harness.feed.push("XYZ", *([5.0] * duplicates))
                return await asyncio.gather(*[
                    harness.monitor.on_wakeup(alert.id) for _ in range(duplicates)
                ])

            outcomes = asyncio.run(scenario())

            assert outcomes.count(CheckOutcome.TRIGGERED) == 1
            assert len(harness.notifier.messages) == 1
            assert harness.timer.requests == []


class TestIndependentAlerts:
    def test_alerts_checked_concurrently(self, harness: AlertHarness):
        async def scenario():
            up = await harness.store.create("AAA", 100, AlertCondition.ABOVE)
            down = await harness.store.create("BBB", 50, AlertCondition.BELOW)
            harness.feed.push("AAA", 100)
            harness.feed.push("BBB", 50.01)
            return up, down, await asyncio.gather(
                harness.monitor.on_wakeup(up.id),
                harness.monitor.on_wakeup(down.id),
            )

        up, down, outcomes = asyncio.run(scenario())

        assert outcomes == [CheckOutcome.TRIGGERED, CheckOutcome.RESCHEDULED]
        assert harness.timer.requests == [(down.id, 300)]
        assert [a.id for a in asyncio.run(harness.store.list_active())] == [down.id]


class TestNotificationText:
    def test_format_notification(self, harness: AlertHarness):
        alert = asyncio.run(harness.store.create("btc-usd", 50000, AlertCondition.BELOW))
        text = format_notification(alert, 49999.5)
        assert text.startswith("🔔 **PRICE ALERT TRIGGERED!**")
        assert "BTC-USD has gone below $50000.00!" in text
        assert "Current price: $49999.50" in text


class TestTimerBinding:
    def test_monitor_binds_itself_to_timer(self, harness: AlertHarness):
        assert isinstance(harness.timer, ManualTimer)
        assert harness.timer._callback == harness.monitor.on_wakeup


class TestUndeliveredNotification:
    """
    When delivery fails after the alert was marked triggered, the check
    reports FAILED and the undelivered text is logged at error level.
    """

    def test_failed_delivery_logs_text(self, harness: AlertHarness, caplog):
        async def scenario():
            alert = await harness.store.create("XYZ", 10, AlertCondition.ABOVE)
            harness.feed.push("XYZ", 12)
            failure = PersistenceError("transcript unavailable")
            with patch.object(harness.notifier, "deliver", side_effect=failure):
                return alert.id, await harness.monitor.on_wakeup(alert.id)

        with caplog.at_level(logging.ERROR, logger="financeagent.alerts.monitor"):
            alert_id, outcome = asyncio.run(scenario())

        assert outcome == CheckOutcome.FAILED
        assert asyncio.run(harness.store.get(alert_id)).active is False
        assert "not delivered" in caplog.text
        assert "XYZ has gone above $10.00!" in caplog.text
        assert harness.timer.requests == []
