"""Notifier that fans out to several channels."""

import logging

from financeagent.notifiers.base import BaseNotifier


logger = logging.getLogger(__name__)


class MultiChannelNotifier(BaseNotifier):
    """Deliver each notification to every configured channel in order.

    A failing channel does not stop the others. Delivery succeeds if any
    channel delivered; if every channel failed the first error is raised.
    """

    def __init__(self, channels: list[BaseNotifier]):
        self.channels = list(channels)

    async def deliver(self, text: str) -> None:
        errors = []
        for channel in self.channels:
            try:
                await channel.deliver(text)
            except Exception as e:
                logger.error("%s failed to deliver notification: %s", type(channel).__name__, e)
                errors.append(e)

        if errors and len(errors) == len(self.channels):
            raise errors[0]
