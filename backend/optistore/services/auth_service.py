# Overview: PIN and super admin authentication; creates sessions on success.

"""
Authentication Service

WHY: Two ways in. A store user proves knowledge of the store's PIN and
gets a store session; the super admin proves the configured credential
pair and gets a super admin session. Both paths end in the SessionStore.

SECURITY NOTES:
- PINs and the super admin password are compared against bcrypt hashes
- A failed login returns None: no session is created and nothing is raised
- PINs and passwords are never logged
"""

import hmac

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import Store
from .errors import ValidationError
from .schemas import validate_pin
from .session_service import SessionStore, StoreSession, SuperAdminSession
from .storage import storage_errors


class PinValidationError(ValidationError):
    """Raised when a PIN doesn't meet format requirements."""
    pass


class CredentialValidationError(ValidationError):
    """Raised when super admin credentials don't meet format requirements."""
    pass


def hash_secret(secret: str, rounds: int = 12) -> str:
    """Hash a PIN or password with bcrypt. Returned as str for storage."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(secret.encode("utf-8"), salt).decode("utf-8")


def verify_secret(secret: str, secret_hash: str | None) -> bool:
    """
    Verify a PIN or password against a bcrypt hash.

    WHY timing-safe: bcrypt.checkpw() compares in constant time.
    """
    if not secret or not secret_hash:
        return False
    try:
        return bcrypt.checkpw(secret.encode("utf-8"), secret_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def check_pin_format(pin) -> str:
    try:
        return validate_pin(pin)
    except ValidationError as exc:
        raise PinValidationError(exc.message, field="pin") from exc


def validate_super_admin_credentials(username: str | None, password: str | None) -> None:
    """
    Format check for the super admin credential pair.

    Requirements:
    - Both present
    - Username at least 3 characters
    - Password at least 6 characters
    """
    if not username or not password:
        raise CredentialValidationError("Username and password are required")
    if len(username) < 3:
        raise CredentialValidationError("Username must be at least 3 characters", field="username")
    if len(password) < 6:
        raise CredentialValidationError("Password must be at least 6 characters", field="password")


def authenticate_store(store_id: str, pin: str) -> Store | None:
    """
    Return the store if `pin` matches its PIN hash, None otherwise.

    Unknown stores and malformed PINs are indistinguishable from a wrong PIN.
    """
    if not store_id or not pin:
        return None
    try:
        check_pin_format(pin)
    except PinValidationError:
        return None

    with storage_errors("load store for login"):
        store = db.session.query(Store).filter_by(id=store_id).first()
    if not store:
        return None
    if not verify_secret(pin, store.pin_hash):
        return None
    return store


class AuthService:
    def __init__(
        self,
        sessions: SessionStore,
        *,
        super_admin_username: str,
        super_admin_password_hash: str,
    ):
        self.sessions = sessions
        self.super_admin_username = super_admin_username
        self.super_admin_password_hash = super_admin_password_hash

    def login_store(self, store_id: str, pin: str) -> StoreSession | None:
        store = authenticate_store(store_id, pin)
        if store is None:
            current_app.logger.warning("Store login failed: store_id=%s", store_id)
            return None

        session = self.sessions.create_store_session(store)
        current_app.logger.info("Store login: store_id=%s", store.id)
        return session

    def login_super_admin(self, username: str, password: str) -> SuperAdminSession | None:
        try:
            validate_super_admin_credentials(username, password)
        except CredentialValidationError:
            return None

        username_ok = hmac.compare_digest(username.encode("utf-8"), self.super_admin_username.encode("utf-8"))
        password_ok = verify_secret(password, self.super_admin_password_hash)
        if not (username_ok and password_ok):
            current_app.logger.warning("Super admin login failed")
            return None

        session = self.sessions.create_super_admin_session(self.super_admin_username)
        current_app.logger.info("Super admin login: username=%s", self.super_admin_username)
        return session

    def refresh_store(self) -> StoreSession | None:
        current = self.sessions.get_store_session()
        return self.sessions.refresh(current) if current else None

    def refresh_super_admin(self) -> SuperAdminSession | None:
        current = self.sessions.get_super_admin_session()
        return self.sessions.refresh(current) if current else None
