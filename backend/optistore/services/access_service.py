# Overview: Access-control gate consulted before every data operation.

"""
Access-Control Gate

WHY: One place decides whether the acting principal may perform an
operation and which store filter applies. Every service asks the gate
before it touches storage.

The gate is a pure decision function. It reads the SessionStore and
returns an AccessDecision; it never raises and never writes.

TENANT DATA (customers, checkups, orders):

    principal               read, no store   read, store S    write, store S
    super admin only        ALL              S                denied
    store session S         denied           S                S
    store session S, T!=S   denied           denied           denied
    neither                 denied           denied           denied
    both (store S + admin)  ALL              S or T           S only

STORE ROWS: writes (create/edit/delete) belong to the super admin only.
A store session may read its own store record and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .session_service import SessionStore


ALL_STORES = "ALL"


class Operation(str, Enum):
    READ = "read"
    WRITE = "write"


class Resource(str, Enum):
    TENANT_DATA = "tenant_data"
    STORE = "store"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    scope_filter: str | None
    reason: str | None = None

    @property
    def is_all_stores(self) -> bool:
        return self.allowed and self.scope_filter == ALL_STORES


def _allow(scope: str) -> AccessDecision:
    return AccessDecision(allowed=True, scope_filter=scope)


def _deny(reason: str) -> AccessDecision:
    return AccessDecision(allowed=False, scope_filter=None, reason=reason)


class AccessGate:
    def __init__(self, sessions: SessionStore):
        self.sessions = sessions

    def authorize(
        self,
        operation,
        target_store_id: str | None = None,
        resource=Resource.TENANT_DATA,
    ) -> AccessDecision:
        try:
            operation = Operation(operation)
            resource = Resource(resource)
        except ValueError:
            return _deny("Unknown operation")

        store_session = self.sessions.get_store_session()
        is_super_admin = self.sessions.get_super_admin_session() is not None
        session_store_id = store_session.store_id if store_session else None

        if resource is Resource.STORE:
            return self._authorize_store_rows(operation, target_store_id, session_store_id, is_super_admin)
        return self._authorize_tenant_data(operation, target_store_id, session_store_id, is_super_admin)

    def _authorize_tenant_data(
        self,
        operation: Operation,
        target_store_id: str | None,
        session_store_id: str | None,
        is_super_admin: bool,
    ) -> AccessDecision:
        if operation is Operation.WRITE:
            if not target_store_id:
                return _deny("A store is required for writes")
            if session_store_id is not None and session_store_id == target_store_id:
                return _allow(target_store_id)
            if is_super_admin:
                return _deny("Super admin cannot modify store data")
            if session_store_id is None:
                return _deny("Store login required")
            return _deny("Store session does not match the requested store")

        if not target_store_id:
            if is_super_admin:
                return _allow(ALL_STORES)
            if session_store_id is None:
                return _deny("Authentication required")
            return _deny("A store is required for store users")

        if session_store_id is not None and session_store_id == target_store_id:
            return _allow(target_store_id)
        if is_super_admin:
            return _allow(target_store_id)
        if session_store_id is None:
            return _deny("Authentication required")
        return _deny("Store session does not match the requested store")

    def _authorize_store_rows(
        self,
        operation: Operation,
        target_store_id: str | None,
        session_store_id: str | None,
        is_super_admin: bool,
    ) -> AccessDecision:
        if is_super_admin:
            return _allow(target_store_id or ALL_STORES)
        if operation is Operation.WRITE:
            return _deny("Only the super admin can manage stores")
        if target_store_id and session_store_id == target_store_id:
            return _allow(target_store_id)
        if session_store_id is None:
            return _deny("Authentication required")
        return _deny("Store users can only view their own store")
