"""Per-session alert state backed by the SQLite data store."""

import sqlite3
from typing import Callable, Optional

from pydantic import ValidationError

from financeagent.db.store import DataStore
from financeagent.exceptions import PersistenceError
from financeagent.models import AlertCollection


ALERTS_KEY = "alerts"


class SessionState:
    """Durable load/save of one session's alert collection.

    The collection is stored as a single versioned JSON document, so every
    save replaces the whole collection.
    """

    def __init__(self, data_store: DataStore, session_id: str):
        self.data_store = data_store
        self.session_id = session_id

    def _decode(self, raw: Optional[str]) -> AlertCollection:
        if raw is None:
            return AlertCollection()
        try:
            return AlertCollection.model_validate_json(raw)
        except ValidationError as e:
            raise PersistenceError(
                f"Stored alerts for session '{self.session_id}' are invalid", e
            ) from e

    def load(self) -> AlertCollection:
        """Load and validate the alert collection.

        Returns:
            The stored collection, or an empty one for a new session.

        Raises:
            PersistenceError: If the store is unreadable or the stored
                document does not validate.
        """
        try:
            raw = self.data_store.get_state(self.session_id, ALERTS_KEY)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load alerts: {e}", e) from e
        return self._decode(raw)

    def save(self, collection: AlertCollection) -> None:
        """Persist the full alert collection.

        Raises:
            PersistenceError: If the write fails.
        """
        try:
            self.data_store.set_state(
                self.session_id, ALERTS_KEY, collection.model_dump_json()
            )
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save alerts: {e}", e) from e

    def update(
        self,
        mutate: Callable[[AlertCollection], Optional[AlertCollection]],
    ) -> Optional[AlertCollection]:
        """Apply ``mutate`` to the stored collection in one transaction.

        Other processes writing the same session wait on the database lock,
        so no update is lost between the load and the save.

        Args:
            mutate: Receives the current collection and returns the new one,
                or None to leave it unchanged.

        Returns:
            The collection written, or None if ``mutate`` made no change.

        Raises:
            PersistenceError: If the transaction fails or the stored
                document does not validate.
        """
        written: Optional[AlertCollection] = None

        def apply(raw: Optional[str]) -> Optional[str]:
            nonlocal written
            written = mutate(self._decode(raw))
            return written.model_dump_json() if written is not None else None

        try:
            self.data_store.update_state(self.session_id, ALERTS_KEY, apply)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to update alerts: {e}", e) from e
        return written
