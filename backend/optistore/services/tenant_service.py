"""
Tenant Scoping Helpers

WHY: There is no row-level security in the database. The store_id filter
on every query IS the security boundary, so it is applied in exactly one
place (with_store_scope) instead of being repeated per query.

SECURITY INVARIANTS:
1. Every service call asks the AccessGate before touching storage
2. A denied decision stops the call with AccessDenied (or SessionExpired)
3. Every query against store-owned rows goes through with_store_scope
4. Only an ALL_STORES decision (super admin read) skips the filter

USAGE:
    decision = self.require(Operation.READ, store_id)
    customers = with_store_scope(Customer.query, Customer, decision.scope_filter).all()
"""

from __future__ import annotations

from flask import current_app

from .access_service import ALL_STORES, AccessDecision, AccessGate, Operation, Resource
from .errors import AccessDenied, SessionExpired
from .session_service import STORE_SESSION_KEY, SUPER_ADMIN_SESSION_KEY


def with_store_scope(query, model, scope_filter: str | None):
    """
    Restrict `query` to rows of `model` owned by `scope_filter`.

    ALL_STORES leaves the query unfiltered. A missing scope is a programming
    error and raises instead of silently returning every store's rows.
    """
    if scope_filter is None:
        raise ValueError("with_store_scope requires a store scope")
    if scope_filter == ALL_STORES:
        return query
    return query.filter(model.store_id == scope_filter)


def require_access(
    gate: AccessGate,
    operation: Operation,
    store_id: str | None = None,
    resource: Resource = Resource.TENANT_DATA,
) -> AccessDecision:
    """
    Ask the gate and turn a denial into an exception.

    Raises SessionExpired when a session was found stale during this check,
    AccessDenied for every other refusal.
    """
    decision = gate.authorize(operation, store_id, resource)
    if decision.allowed:
        return decision

    sessions = gate.sessions
    expired = sessions.was_expired(STORE_SESSION_KEY) or sessions.was_expired(SUPER_ADMIN_SESSION_KEY)

    current_app.logger.warning(
        "Access denied: operation=%s resource=%s store_id=%s reason=%s expired=%s",
        operation.value if isinstance(operation, Operation) else operation,
        resource.value if isinstance(resource, Resource) else resource,
        store_id,
        decision.reason,
        expired,
    )

    if expired:
        raise SessionExpired()
    raise AccessDenied(f"Insufficient privileges: {decision.reason}")


class ScopedService:
    """Base for services whose every call is gated and store-scoped."""

    def __init__(self, gate: AccessGate):
        self.gate = gate

    def require(self, operation: Operation, store_id: str | None = None) -> AccessDecision:
        return require_access(self.gate, operation, store_id)

    def require_read(self, store_id: str | None = None) -> AccessDecision:
        return self.require(Operation.READ, store_id)

    def require_write(self, store_id: str) -> AccessDecision:
        return self.require(Operation.WRITE, store_id)

    def require_all_stores(self) -> AccessDecision:
        """Cross-store reads: only an unscoped (super admin) read passes."""
        decision = self.require(Operation.READ)
        if not decision.is_all_stores:
            raise AccessDenied("Insufficient privileges: cross-store view requires super admin")
        return decision
