# Overview: Store and super admin session state kept in client-side storage.

"""
Session Store with two independent authentication axes

WHY: "Who is acting" has exactly two answers in this system: a store user
holding a store session (PIN login) and the super admin (credential login).
The two are independent. A client may hold neither, either, or both.

STORAGE: Records live in a mutable mapping supplied by the caller. In the
web app that mapping is Flask's signed cookie session; tests pass a plain
dict. Each record carries its own timestamp and explicit expires_at.

EXPIRY: Detected lazily. A stale record is removed the next time it is
read and the read returns None. There is no background eviction and no
automatic keep-alive; refresh() must be called explicitly.

SECURITY:
- Store sessions last 24 hours, super admin sessions 2 hours (configurable)
- A corrupt record is cleared and treated as absent
- Logging out of one axis never touches the other
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from datetime import datetime, timedelta

from optistore.time_utils import parse_iso_datetime, to_utc_z, utcnow


STORE_SESSION_KEY = "store_session"
SUPER_ADMIN_SESSION_KEY = "super_admin_session"

STORE_SESSION_TIMEOUT = timedelta(hours=24)
SUPER_ADMIN_SESSION_TIMEOUT = timedelta(hours=2)

SUPER_ADMIN_ROLE = "super_admin"


@dataclass(frozen=True)
class StoreSession:
    store_id: str
    store_name: str | None
    timestamp: datetime
    expires_at: datetime

    def to_record(self) -> dict:
        return {
            "store_id": self.store_id,
            "store_name": self.store_name,
            "timestamp": to_utc_z(self.timestamp),
            "expires_at": to_utc_z(self.expires_at),
        }

    @classmethod
    def from_record(cls, record: dict) -> "StoreSession":
        return cls(
            store_id=str(record["store_id"]),
            store_name=record.get("store_name"),
            timestamp=parse_iso_datetime(record["timestamp"]),
            expires_at=parse_iso_datetime(record["expires_at"]),
        )

    def to_dict(self) -> dict:
        return self.to_record()


@dataclass(frozen=True)
class SuperAdminSession:
    username: str
    timestamp: datetime
    expires_at: datetime
    role: str = SUPER_ADMIN_ROLE

    def to_record(self) -> dict:
        return {
            "username": self.username,
            "role": self.role,
            "timestamp": to_utc_z(self.timestamp),
            "expires_at": to_utc_z(self.expires_at),
        }

    @classmethod
    def from_record(cls, record: dict) -> "SuperAdminSession":
        return cls(
            username=str(record["username"]),
            role=record.get("role", SUPER_ADMIN_ROLE),
            timestamp=parse_iso_datetime(record["timestamp"]),
            expires_at=parse_iso_datetime(record["expires_at"]),
        )

    def to_dict(self) -> dict:
        return self.to_record()


def format_remaining(remaining: timedelta) -> str:
    """Render a remaining lifetime as '3h 12m remaining' / '45m remaining'."""
    seconds = int(remaining.total_seconds())
    if seconds <= 0:
        return "Session expired"
    hours, rest = divmod(seconds, 3600)
    minutes = rest // 60
    if hours > 0:
        return f"{hours}h {minutes}m remaining"
    return f"{minutes}m remaining"


class SessionStore:
    """
    Holds and validates the store session and the super admin session.

    Construct one per request (web) or per test. Nothing is shared between
    instances except the storage mapping they are given.
    """

    def __init__(
        self,
        storage: MutableMapping,
        *,
        clock: Callable[[], datetime] = utcnow,
        store_timeout: timedelta = STORE_SESSION_TIMEOUT,
        super_admin_timeout: timedelta = SUPER_ADMIN_SESSION_TIMEOUT,
    ):
        self.storage = storage
        self.clock = clock
        self.store_timeout = store_timeout
        self.super_admin_timeout = super_admin_timeout
        self._expired: set[str] = set()

    # ------------------------------------------------------------------
    # Store session
    # ------------------------------------------------------------------

    def create_store_session(self, store) -> StoreSession:
        """Make `store` the acting tenant until logout or expiry."""
        now = self.clock()
        session = StoreSession(
            store_id=store.id,
            store_name=getattr(store, "name", None),
            timestamp=now,
            expires_at=now + self.store_timeout,
        )
        self.storage[STORE_SESSION_KEY] = session.to_record()
        self._expired.discard(STORE_SESSION_KEY)
        return session

    def get_store_session(self) -> StoreSession | None:
        return self._load(STORE_SESSION_KEY, StoreSession)

    def logout_store(self) -> None:
        self.storage.pop(STORE_SESSION_KEY, None)

    # ------------------------------------------------------------------
    # Super admin session
    # ------------------------------------------------------------------

    def create_super_admin_session(self, username: str) -> SuperAdminSession:
        now = self.clock()
        session = SuperAdminSession(
            username=username,
            timestamp=now,
            expires_at=now + self.super_admin_timeout,
        )
        self.storage[SUPER_ADMIN_SESSION_KEY] = session.to_record()
        self._expired.discard(SUPER_ADMIN_SESSION_KEY)
        return session

    def get_super_admin_session(self) -> SuperAdminSession | None:
        session = self._load(SUPER_ADMIN_SESSION_KEY, SuperAdminSession)
        if session is not None and session.role != SUPER_ADMIN_ROLE:
            self.storage.pop(SUPER_ADMIN_SESSION_KEY, None)
            return None
        return session

    def logout_super_admin(self) -> None:
        self.storage.pop(SUPER_ADMIN_SESSION_KEY, None)

    # ------------------------------------------------------------------
    # Both
    # ------------------------------------------------------------------

    def logout_all(self) -> None:
        self.logout_store()
        self.logout_super_admin()

    def refresh(self, session):
        """
        Re-issue a live session with a fresh timestamp.

        Only the session currently held in storage can be refreshed. Returns
        the new session, or None when that session is gone or expired.
        """
        if isinstance(session, StoreSession):
            current = self.get_store_session()
            if current is None or current.store_id != session.store_id:
                return None
            now = self.clock()
            renewed = StoreSession(
                store_id=current.store_id,
                store_name=current.store_name,
                timestamp=now,
                expires_at=now + self.store_timeout,
            )
            self.storage[STORE_SESSION_KEY] = renewed.to_record()
            return renewed

        if isinstance(session, SuperAdminSession):
            current = self.get_super_admin_session()
            if current is None or current.username != session.username:
                return None
            return self.create_super_admin_session(current.username)

        return None

    def was_expired(self, key: str) -> bool:
        """True when this instance cleared a stale record for `key`."""
        return key in self._expired

    def time_remaining(self, key: str) -> timedelta:
        if key == STORE_SESSION_KEY:
            session = self.get_store_session()
        else:
            session = self.get_super_admin_session()
        if session is None:
            return timedelta(0)
        return max(timedelta(0), session.expires_at - self.clock())

    def format_time_remaining(self, key: str) -> str:
        return format_remaining(self.time_remaining(key))

    def auth_status(self) -> dict:
        store_session = self.get_store_session()
        super_admin = self.get_super_admin_session()
        return {
            "is_super_admin": super_admin is not None,
            "is_store_authenticated": store_session is not None,
            "store": store_session.to_dict() if store_session else None,
            "super_admin": super_admin.to_dict() if super_admin else None,
            "has_any_auth": store_session is not None or super_admin is not None,
            "can_manage_stores": super_admin is not None,
        }

    def _load(self, key: str, record_type):
        record = self.storage.get(key)
        if not record:
            return None

        try:
            session = record_type.from_record(record)
            if session.timestamp is None or session.expires_at is None:
                raise ValueError("Session record is missing timestamps")
        except (KeyError, TypeError, ValueError, AttributeError):
            self.storage.pop(key, None)
            return None

        if self.clock() >= session.expires_at:
            self.storage.pop(key, None)
            self._expired.add(key)
            return None

        return session
