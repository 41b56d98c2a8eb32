"""Tests for the SQLite data store and session state.

**Feature: price-alerts**
"""

import sqlite3
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from financeagent.db.state import ALERTS_KEY, SessionState
from financeagent.db.store import DataStore
from financeagent.exceptions import PersistenceError
from financeagent.models import Alert, AlertCollection, AlertCondition, Message


class TestDatabaseSchemaCompleteness:
    """
    *For any* fresh database, all required tables (session_state,
    schedules, messages) should exist.
    """

    def test_schema_completeness(self, temp_db: DataStore):
        tables = temp_db.get_tables()
        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_reopening_keeps_data(self, temp_dir: Path):
        db_path = temp_dir / "test.db"
        DataStore(db_path).set_state("s", "k", "v")
        assert DataStore(db_path).get_state("s", "k") == "v"

    def test_stats_count_rows(self, temp_db: DataStore):
        temp_db.add_schedule("s", "alert-1", datetime.now())
        temp_db.add_message(Message(session_id="s", role="user", text="hi"))
        stats = temp_db.get_stats()
        assert stats == {"session_state": 0, "schedules": 1, "messages": 1}


class TestSessionState:
    """
    *For any* saved collection, loading returns an equal collection, and
    sessions never see each other's alerts.
    """

    def test_new_session_loads_empty(self, temp_db: DataStore):
        assert SessionState(temp_db, "fresh").load() == AlertCollection()

    @given(
        symbols=st.lists(
            st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=1, max_size=6),
            min_size=0,
            max_size=10,
        ),
    )
    @settings(max_examples=30)
    def test_save_then_load_preserves_alerts(self, symbols: list[str]):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            state = SessionState(store, "s1")
            collection = AlertCollection(alerts=[
                Alert(id=f"alert-{i}", symbol=s, target_price=10.0 + i,
                      condition=AlertCondition.BELOW)
                for i, s in enumerate(symbols)
            ])

            state.save(collection)

            assert state.load() == collection

    def test_sessions_are_isolated(self, temp_db: DataStore):
        alert = Alert(id="alert-1", symbol="XYZ", target_price=1, condition=AlertCondition.ABOVE)
        SessionState(temp_db, "one").save(AlertCollection(alerts=[alert]))

        assert SessionState(temp_db, "two").load().alerts == []

    def test_corrupt_document_raises_persistence_error(self, temp_db: DataStore):
        temp_db.set_state("s1", ALERTS_KEY, '{"alerts": [{"id": 5}]}')
        with pytest.raises(PersistenceError):
            SessionState(temp_db, "s1").load()

    def test_sqlite_failure_on_save_raises_persistence_error(self, temp_db: DataStore):
        state = SessionState(temp_db, "s1")
        with patch.object(temp_db, "set_state", side_effect=sqlite3.OperationalError("locked")):
            with pytest.raises(PersistenceError) as exc_info:
                state.save(AlertCollection())
        assert isinstance(exc_info.value.cause, sqlite3.OperationalError)


class TestAtomicStateUpdate:
    """
    A state update reads and writes inside one transaction: the new value
    is written, a None result leaves the row alone, and an error in the
    update function rolls the transaction back.
    """

    def test_update_writes_new_value(self, temp_db: DataStore):
        temp_db.set_state("s1", "k", "1")

        written = temp_db.update_state("s1", "k", lambda raw: str(int(raw) + 1))

        assert written == "2"
        assert temp_db.get_state("s1", "k") == "2"

    def test_update_sees_missing_key_as_none(self, temp_db: DataStore):
        seen = []

        def update(raw):
            seen.append(raw)
            return "first"

        temp_db.update_state("s1", "k", update)

        assert seen == [None]
        assert temp_db.get_state("s1", "k") == "first"

    def test_none_result_leaves_row_unchanged(self, temp_db: DataStore):
        temp_db.set_state("s1", "k", "keep")

        assert temp_db.update_state("s1", "k", lambda raw: None) is None
        assert temp_db.get_state("s1", "k") == "keep"

    def test_error_in_update_rolls_back(self, temp_db: DataStore):
        temp_db.set_state("s1", "k", "keep")

        def update(raw):
            raise ValueError("bad")

        with pytest.raises(ValueError):
            temp_db.update_state("s1", "k", update)

        assert temp_db.get_state("s1", "k") == "keep"
        # The write lock was released
        temp_db.set_state("s1", "k", "after")
        assert temp_db.get_state("s1", "k") == "after"

    def test_session_state_update(self, temp_db: DataStore):
        state = SessionState(temp_db, "s1")
        alert = Alert(
            id="alert-1", symbol="XYZ", target_price=10,
            condition=AlertCondition.ABOVE, created_at=datetime.now(),
        )

        written = state.update(lambda collection: collection.with_alert(alert))
        unchanged = state.update(lambda collection: None)

        assert written == AlertCollection(alerts=[alert])
        assert unchanged is None
        assert state.load() == written

    def test_session_state_update_rejects_corrupt_document(self, temp_db: DataStore):
        temp_db.set_state("s1", ALERTS_KEY, "not json")
        calls = []

        with pytest.raises(PersistenceError):
            SessionState(temp_db, "s1").update(lambda collection: calls.append(collection))

        assert calls == []
        assert temp_db.get_state("s1", ALERTS_KEY) == "not json"


class TestSchedules:
    def test_schedules_sorted_by_run_time(self, temp_db: DataStore):
        now = datetime.now()
        temp_db.add_schedule("s", "late", now + timedelta(minutes=10))
        temp_db.add_schedule("s", "early", now + timedelta(minutes=1))
        temp_db.add_schedule("other", "elsewhere", now)

        wakeups = temp_db.get_schedules("s")

        assert [w.alert_id for w in wakeups] == ["early", "late"]

    def test_delete_schedule(self, temp_db: DataStore):
        schedule_id = temp_db.add_schedule("s", "alert-1", datetime.now())
        temp_db.delete_schedule(schedule_id)
        assert temp_db.get_schedules("s") == []


class TestMessages:
    def test_messages_returned_oldest_first_with_limit(self, temp_db: DataStore):
        for i in range(5):
            temp_db.add_message(Message(session_id="s", role="user", text=f"m{i}"))

        messages = temp_db.get_messages("s", limit=3)

        assert [m.text for m in messages] == ["m2", "m3", "m4"]

    def test_role_filter(self, temp_db: DataStore):
        temp_db.add_message(Message(session_id="s", role="user", text="question"))
        temp_db.add_message(Message(session_id="s", role="assistant", text="answer"))

        messages = temp_db.get_messages("s", role="assistant")

        assert [m.text for m in messages] == ["answer"]
