"""Base notifier interface for FinanceAgent."""

from abc import ABC, abstractmethod


class BaseNotifier(ABC):
    """Abstract base class for notification sinks."""

    @abstractmethod
    async def deliver(self, text: str) -> None:
        """Surface a notification to the user.

        Args:
            text: Notification text.
        """
        pass
