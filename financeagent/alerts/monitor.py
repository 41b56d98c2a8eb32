"""Price alert monitor.

Each alert moves through a small state machine driven by timer wake-ups:

    Pending --wake-up--> Checking --+--> Pending   (price not reached)
                                    +--> Terminal  (triggered, deleted,
                                                    inactive or feed failure)

Every check schedules at most one successor wake-up, so an alert never has
more than one check in flight. A wake-up for a deleted or inactive alert is
a no-op.
"""

import logging
from enum import Enum

from financeagent.alerts.store import AlertStore
from financeagent.exceptions import PersistenceError, PriceFeedError
from financeagent.feeds.base import BasePriceFeed
from financeagent.models import Alert
from financeagent.notifiers.base import BaseNotifier
from financeagent.scheduling.timer import BaseTimer


logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 300


class CheckOutcome(str, Enum):
    """Result of handling one wake-up."""

    SKIPPED = "skipped"
    RESCHEDULED = "rescheduled"
    TRIGGERED = "triggered"
    DORMANT = "dormant"
    FAILED = "failed"


def format_notification(alert: Alert, price: float) -> str:
    """Build the message delivered when an alert fires."""
    return (
        "🔔 **PRICE ALERT TRIGGERED!**\n\n"
        f"{alert.symbol} has gone {alert.condition.value} ${alert.target_price:.2f}!\n\n"
        f"Current price: ${price:.2f}"
    )


class AlertMonitor:
    """Drives the check/reschedule cycle for alerts."""

    def __init__(
        self,
        store: AlertStore,
        feed: BasePriceFeed,
        notifier: BaseNotifier,
        timer: BaseTimer,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
    ):
        """Initialize the monitor and bind it to the timer.

        Args:
            store: Alert store for the session.
            feed: Price source queried on each check.
            notifier: Sink for triggered-alert messages.
            timer: Timer that delivers wake-ups to ``on_wakeup``.
            check_interval: Seconds between checks of one alert.
        """
        self.store = store
        self.feed = feed
        self.notifier = notifier
        self.timer = timer
        self.check_interval = check_interval
        self.timer.bind(self.on_wakeup)

    async def start(self, alert: Alert) -> None:
        """Schedule the first check for a newly created alert.

        Raises:
            PersistenceError: If the wake-up could not be recorded.
        """
        await self.timer.schedule_wakeup(alert.id, self.check_interval)

    async def on_wakeup(self, alert_id: str) -> CheckOutcome:
        """Handle one wake-up. Never raises for feed or store errors."""
        try:
            return await self._check(alert_id)
        except PriceFeedError as e:
            # No retry: the alert stays active but nothing will check it again
            logger.warning("Alert %s is dormant: %s", alert_id, e)
            return CheckOutcome.DORMANT
        except PersistenceError as e:
            logger.error("Check for alert %s failed: %s", alert_id, e)
            return CheckOutcome.FAILED

    async def _check(self, alert_id: str) -> CheckOutcome:
        alert = await self.store.get(alert_id)
        if alert is None or not alert.active:
            logger.debug("Skipping wake-up for missing or inactive alert %s", alert_id)
            return CheckOutcome.SKIPPED

        price = await self.feed.fetch_price(alert.symbol)

        if not alert.is_triggered(price):
            await self.timer.schedule_wakeup(alert_id, self.check_interval)
            logger.debug("%s at %.2f, target %s %s not reached", alert.symbol, price,
                         alert.condition.value, alert.target_price)
            return CheckOutcome.RESCHEDULED

        # Only the caller that flips the alert inactive gets to notify
        if not await self.store.mark_triggered(alert_id):
            logger.debug("Alert %s was resolved concurrently", alert_id)
            return CheckOutcome.SKIPPED

        text = format_notification(alert, price)
        try:
            await self.notifier.deliver(text)
        except Exception:
            # The alert is already inactive, so this text is the only record
            logger.error("Alert %s triggered but the notification was not delivered:\n%s",
                         alert_id, text)
            raise
        logger.info("Alert %s triggered: %s at %.2f", alert_id, alert.symbol, price)
        return CheckOutcome.TRIGGERED
