"""Notifier implementations for FinanceAgent."""

from financeagent.notifiers.base import BaseNotifier
from financeagent.notifiers.console import ConsoleNotifier
from financeagent.notifiers.multi_channel import MultiChannelNotifier
from financeagent.notifiers.transcript import TranscriptNotifier

__all__ = [
    "BaseNotifier",
    "ConsoleNotifier",
    "MultiChannelNotifier",
    "TranscriptNotifier",
]
