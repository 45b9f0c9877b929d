from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Checkup, Customer, Order, OrderSequence, Store
from .access_service import AccessGate, Operation, Resource
from .auth_service import authenticate_store, hash_secret
from .errors import NotFound, ReferentialConflictError
from .schemas import StoreInput
from .storage import lock_for_update, storage_errors
from .tenant_service import require_access


class StoreService:
    """
    Store rows: written only by the super admin.

    A store session may read its own store through get_by_id. The public
    directory (id and name only) feeds the PIN login screen and needs no
    session.
    """

    def __init__(self, gate: AccessGate, *, bcrypt_rounds: int = 12):
        self.gate = gate
        self.bcrypt_rounds = bcrypt_rounds

    def _require(self, operation: Operation, store_id: str | None = None):
        return require_access(self.gate, operation, store_id, Resource.STORE)

    def create(self, data: dict) -> Store:
        self._require(Operation.WRITE)
        store_input = StoreInput.from_dict(data, require_pin=True)

        with storage_errors("create store"):
            store = Store(
                name=store_input.name,
                address=store_input.address,
                phone=store_input.phone,
                email=store_input.email,
                pin_hash=hash_secret(store_input.pin, self.bcrypt_rounds),
            )
            db.session.add(store)
            db.session.commit()

        current_app.logger.info("Store created: id=%s name=%r", store.id, store.name)
        return store

    def update(self, store_id: str, data: dict) -> Store:
        """Update store details. A blank PIN keeps the current one."""
        self._require(Operation.WRITE, store_id)
        store_input = StoreInput.from_dict(data, require_pin=False)

        with storage_errors("update store"):
            store = lock_for_update(db.session.query(Store).filter_by(id=store_id)).first()
            if not store:
                raise NotFound("Store not found")

            store.name = store_input.name
            store.address = store_input.address
            store.phone = store_input.phone
            store.email = store_input.email
            if store_input.pin is not None:
                store.pin_hash = hash_secret(store_input.pin, self.bcrypt_rounds)

            db.session.commit()
        return store

    def delete(self, store_id: str) -> None:
        """
        Delete a store that owns no data.

        Refused with ReferentialConflictError while customers, checkups or
        orders still reference it.
        """
        self._require(Operation.WRITE, store_id)

        with storage_errors("delete store"):
            store = db.session.query(Store).filter_by(id=store_id).first()
            if not store:
                raise NotFound("Store not found")

            counts = {
                "customers": db.session.query(Customer).filter_by(store_id=store_id).count(),
                "checkups": db.session.query(Checkup).filter_by(store_id=store_id).count(),
                "orders": db.session.query(Order).filter_by(store_id=store_id).count(),
            }
            total = sum(counts.values())
            if total:
                blockers = [f"{count} {table}" for table, count in counts.items() if count]
                raise ReferentialConflictError(
                    f"Store still has {', '.join(blockers)}",
                    count=total,
                    blockers=blockers,
                )

            db.session.query(OrderSequence).filter_by(store_id=store_id).delete()
            db.session.delete(store)
            db.session.commit()

        current_app.logger.info("Store deleted: id=%s", store_id)

    def get_all(self) -> list[Store]:
        self._require(Operation.READ)
        with storage_errors("list stores"):
            return db.session.query(Store).order_by(Store.created_at.desc()).all()

    def get_by_id(self, store_id: str) -> Store:
        self._require(Operation.READ, store_id)
        with storage_errors("load store"):
            store = db.session.query(Store).filter_by(id=store_id).first()
        if not store:
            raise NotFound("Store not found")
        return store

    def authenticate(self, store_id: str, pin: str) -> Store | None:
        """PIN check only; no session is created."""
        return authenticate_store(store_id, pin)

    def list_directory(self) -> list[dict]:
        with storage_errors("list store directory"):
            stores = db.session.query(Store).order_by(Store.name.asc()).all()
        return [store.to_directory_entry() for store in stores]
