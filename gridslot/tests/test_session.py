"""
Tests for session management.

Tests:
- Session lifecycle (create, get, end)
- Command execution bookkeeping
- Stale session cleanup
"""

import pytest

from ..engine_core import Catalog, Command, NoOpReason
from ..session import SessionManager


class TestSessionManager:
    """Tests for SessionManager."""

    @pytest.fixture
    def manager(self):
        return SessionManager()

    def test_create_session(self, manager):
        session = manager.create_session()

        assert session.session_id
        assert len(session.state) == 0
        assert manager.get_session(session.session_id) is session

    def test_sessions_are_isolated(self, manager):
        first = manager.create_session()
        second = manager.create_session()

        first.execute(Command.place("Card 1", 0))

        assert len(first.state) == 1
        assert len(second.state) == 0

    def test_end_session(self, manager):
        session = manager.create_session()

        assert manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_list_active_sessions(self, manager):
        ids = {manager.create_session().session_id for _ in range(3)}
        assert set(manager.list_active_sessions()) == ids

    def test_cleanup_stale_sessions(self, manager):
        idle = manager.create_session()
        busy = manager.create_session()
        idle.updated_at -= 5000

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == [idle.session_id]
        assert manager.get_session(busy.session_id) is busy

    def test_unknown_id_strategy_rejected(self, manager):
        with pytest.raises(ValueError, match="Unknown id strategy"):
            manager.create_session(id_strategy="bogus")

    def test_uuid_strategy(self, manager):
        session = manager.create_session(id_strategy="uuid")
        result = session.execute(Command.place("Card 1", 0))
        assert len(result.card_id) == 32

    def test_custom_catalog(self):
        manager = SessionManager(catalog=Catalog.from_titles(["Notes"]))
        session = manager.create_session()
        assert session.execute(Command.place("Notes", 0)).applied
        assert not session.execute(Command.place("Card 1", 0)).applied


class TestGridSession:
    """Tests for command execution on a session."""

    def test_execute_records_result(self):
        session = SessionManager().create_session()

        result = session.execute(Command.place("Card 1", 0))

        assert result.applied
        assert session.last_result is result
        assert session.commands_applied == 1

    def test_noop_not_counted(self):
        session = SessionManager().create_session()

        result = session.execute(Command.remove("ghost"))

        assert result.reason == NoOpReason.UNKNOWN_CARD
        assert session.commands_applied == 0
        assert session.last_result is result

    def test_execute_touches_updated_at(self):
        session = SessionManager().create_session()
        session.updated_at = 0.0
        session.execute(Command.toggle_expand("ghost"))
        assert session.updated_at > 0.0
