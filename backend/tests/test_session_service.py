"""
Session store tests.

Covers the two independent session axes, lazy expiry, explicit refresh
and the handling of corrupt records in client storage.
"""

from datetime import timedelta
from types import SimpleNamespace

from optistore.services.session_service import (
    STORE_SESSION_KEY,
    SUPER_ADMIN_SESSION_KEY,
    SessionStore,
    StoreSession,
    format_remaining,
)


STORE = SimpleNamespace(id="store-1", name="Alpha")


class TestSessionIndependence:
    """Logging out of one session never touches the other."""

    def test_store_logout_keeps_super_admin(self, sessions):
        sessions.create_store_session(STORE)
        sessions.create_super_admin_session("superadmin")

        sessions.logout_store()

        assert sessions.get_store_session() is None
        assert sessions.get_super_admin_session() is not None

    def test_super_admin_logout_keeps_store(self, sessions):
        sessions.create_store_session(STORE)
        sessions.create_super_admin_session("superadmin")

        sessions.logout_super_admin()

        assert sessions.get_super_admin_session() is None
        assert sessions.get_store_session().store_id == "store-1"

    def test_logout_all_clears_both(self, sessions, storage):
        sessions.create_store_session(STORE)
        sessions.create_super_admin_session("superadmin")

        sessions.logout_all()

        assert sessions.get_store_session() is None
        assert sessions.get_super_admin_session() is None
        assert STORE_SESSION_KEY not in storage
        assert SUPER_ADMIN_SESSION_KEY not in storage

    def test_records_use_distinct_keys(self, sessions, storage):
        sessions.create_store_session(STORE)
        sessions.create_super_admin_session("superadmin")

        assert storage[STORE_SESSION_KEY]["store_id"] == "store-1"
        assert storage[SUPER_ADMIN_SESSION_KEY]["username"] == "superadmin"
        assert storage[SUPER_ADMIN_SESSION_KEY]["role"] == "super_admin"

    def test_instances_do_not_share_state(self, clock):
        first = SessionStore({}, clock=clock)
        second = SessionStore({}, clock=clock)

        first.create_store_session(STORE)

        assert first.get_store_session() is not None
        assert second.get_store_session() is None


class TestSessionExpiry:
    """Expiry is detected lazily on the next check."""

    def test_store_session_valid_just_before_24h(self, sessions, clock):
        sessions.create_store_session(STORE)
        clock.advance(hours=23, minutes=59)

        assert sessions.get_store_session() is not None

    def test_store_session_expired_just_after_24h(self, sessions, storage, clock):
        sessions.create_store_session(STORE)
        clock.advance(hours=24, minutes=1)

        assert sessions.get_store_session() is None
        assert STORE_SESSION_KEY not in storage
        assert sessions.was_expired(STORE_SESSION_KEY)

    def test_super_admin_session_lasts_two_hours(self, sessions, clock):
        sessions.create_super_admin_session("superadmin")
        clock.advance(hours=1, minutes=59)
        assert sessions.get_super_admin_session() is not None

        clock.advance(minutes=2)
        assert sessions.get_super_admin_session() is None
        assert sessions.was_expired(SUPER_ADMIN_SESSION_KEY)

    def test_expired_store_session_leaves_super_admin(self, sessions, clock):
        sessions.create_store_session(STORE)
        clock.advance(hours=23)
        sessions.create_super_admin_session("superadmin")
        clock.advance(hours=1, minutes=30)

        assert sessions.get_store_session() is None
        assert sessions.get_super_admin_session() is not None

    def test_timeouts_are_configurable(self, clock):
        sessions = SessionStore({}, clock=clock, store_timeout=timedelta(minutes=5))
        sessions.create_store_session(STORE)
        clock.advance(minutes=6)

        assert sessions.get_store_session() is None

    def test_expires_at_is_persisted(self, sessions, storage):
        session = sessions.create_store_session(STORE)

        assert storage[STORE_SESSION_KEY]["expires_at"] == "2026-10-18T09:00:00Z"
        assert session.expires_at - session.timestamp == timedelta(hours=24)


class TestRefresh:
    def test_refresh_extends_window(self, sessions, clock):
        session = sessions.create_store_session(STORE)
        clock.advance(hours=20)

        renewed = sessions.refresh(session)
        clock.advance(hours=20)

        assert renewed is not None
        assert renewed.timestamp > session.timestamp
        assert sessions.get_store_session() is not None

    def test_refresh_of_expired_session_fails(self, sessions, clock):
        session = sessions.create_super_admin_session("superadmin")
        clock.advance(hours=3)

        assert sessions.refresh(session) is None
        assert sessions.get_super_admin_session() is None

    def test_refresh_after_logout_fails(self, sessions):
        session = sessions.create_store_session(STORE)
        sessions.logout_store()

        assert sessions.refresh(session) is None
        assert sessions.get_store_session() is None

    def test_refresh_of_replaced_session_fails(self, sessions):
        old = sessions.create_store_session(STORE)
        sessions.create_store_session(SimpleNamespace(id="store-2", name="Beta"))

        assert sessions.refresh(old) is None
        assert sessions.get_store_session().store_id == "store-2"


class TestCorruptRecords:
    def test_garbage_record_is_cleared(self, sessions, storage):
        storage[STORE_SESSION_KEY] = {"store_id": "store-1", "timestamp": "not-a-date"}

        assert sessions.get_store_session() is None
        assert STORE_SESSION_KEY not in storage

    def test_wrong_role_is_rejected(self, sessions, storage):
        sessions.create_super_admin_session("superadmin")
        storage[SUPER_ADMIN_SESSION_KEY]["role"] = "cashier"

        assert sessions.get_super_admin_session() is None

    def test_round_trip_through_record(self, sessions):
        session = sessions.create_store_session(STORE)

        restored = StoreSession.from_record(session.to_record())

        assert restored == session


class TestStatus:
    def test_time_remaining_formatting(self, sessions, clock):
        sessions.create_store_session(STORE)
        clock.advance(hours=20, minutes=48)

        assert sessions.format_time_remaining(STORE_SESSION_KEY) == "3h 12m remaining"

    def test_no_session_reports_expired(self, sessions):
        assert sessions.format_time_remaining(SUPER_ADMIN_SESSION_KEY) == "Session expired"

    def test_format_minutes_only(self):
        assert format_remaining(timedelta(minutes=45, seconds=30)) == "45m remaining"

    def test_auth_status(self, sessions):
        sessions.create_store_session(STORE)

        status = sessions.auth_status()

        assert status["is_store_authenticated"] is True
        assert status["is_super_admin"] is False
        assert status["has_any_auth"] is True
        assert status["can_manage_stores"] is False
        assert status["store"]["store_name"] == "Alpha"
