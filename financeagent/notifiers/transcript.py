"""Notifier that appends alerts to the session transcript."""

import asyncio
import sqlite3

from financeagent.db.store import DataStore
from financeagent.exceptions import PersistenceError
from financeagent.models import Message
from financeagent.notifiers.base import BaseNotifier


class TranscriptNotifier(BaseNotifier):
    """Append notifications as assistant messages in a session transcript."""

    def __init__(self, data_store: DataStore, session_id: str):
        self.data_store = data_store
        self.session_id = session_id

    async def deliver(self, text: str) -> None:
        message = Message(session_id=self.session_id, role="assistant", text=text)
        try:
            await asyncio.to_thread(self.data_store.add_message, message)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save notification: {e}", e) from e
