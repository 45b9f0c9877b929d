# Overview: Store-scoped eye checkup records.

from __future__ import annotations

from ..extensions import db
from ..models import Checkup, Customer, Order
from optistore.time_utils import today
from .errors import NotFound, ReferentialConflictError
from .schemas import CheckupInput
from .storage import lock_for_update, storage_errors
from .tenant_service import ScopedService, with_store_scope


class CheckupService(ScopedService):
    def _scoped(self, decision):
        return with_store_scope(db.session.query(Checkup), Checkup, decision.scope_filter)

    def _require_customer(self, store_id: str, customer_id: str) -> Customer:
        customer = (
            db.session.query(Customer)
            .filter(Customer.store_id == store_id, Customer.id == customer_id)
            .first()
        )
        if not customer:
            raise NotFound("Customer not found")
        return customer

    def create(self, store_id: str, data: dict) -> Checkup:
        self.require_write(store_id)
        checkup_input = CheckupInput.from_dict(data, today=today())

        with storage_errors("create checkup"):
            self._require_customer(store_id, checkup_input.customer_id)

            checkup = Checkup(
                store_id=store_id,
                customer_id=checkup_input.customer_id,
                date=checkup_input.date,
                ipd_bridge=checkup_input.ipd_bridge,
                tested_by=checkup_input.tested_by,
                **checkup_input.measurements,
            )
            db.session.add(checkup)
            db.session.commit()
        return checkup

    def get_all(self, store_id: str) -> list[Checkup]:
        decision = self.require_read(store_id)
        with storage_errors("list checkups"):
            return (
                self._scoped(decision)
                .order_by(Checkup.date.desc(), Checkup.created_at.desc())
                .all()
            )

    def get_by_id(self, store_id: str, checkup_id: str) -> Checkup:
        decision = self.require_read(store_id)
        with storage_errors("load checkup"):
            checkup = self._scoped(decision).filter(Checkup.id == checkup_id).first()
        if not checkup:
            raise NotFound("Checkup not found")
        return checkup

    def get_by_customer_id(self, store_id: str, customer_id: str) -> list[Checkup]:
        decision = self.require_read(store_id)
        with storage_errors("list customer checkups"):
            return (
                self._scoped(decision)
                .filter(Checkup.customer_id == customer_id)
                .order_by(Checkup.date.desc(), Checkup.created_at.desc())
                .all()
            )

    def update(self, store_id: str, checkup_id: str, data: dict) -> Checkup:
        decision = self.require_write(store_id)

        with storage_errors("update checkup"):
            checkup = lock_for_update(
                self._scoped(decision).filter(Checkup.id == checkup_id)
            ).first()
            if not checkup:
                raise NotFound("Checkup not found")

            payload = {"customer_id": checkup.customer_id, **(data or {})}
            checkup_input = CheckupInput.from_dict(payload, today=checkup.date)
            if checkup_input.customer_id != checkup.customer_id:
                self._require_customer(store_id, checkup_input.customer_id)

            checkup.customer_id = checkup_input.customer_id
            checkup.date = checkup_input.date
            checkup.ipd_bridge = checkup_input.ipd_bridge
            checkup.tested_by = checkup_input.tested_by
            for name, value in checkup_input.measurements.items():
                setattr(checkup, name, value)

            db.session.commit()
        return checkup

    def delete(self, store_id: str, checkup_id: str) -> None:
        """
        Delete a checkup that no order references.

        Orders keep a pointer to the prescription they were made from, so a
        referenced checkup is refused (ReferentialConflictError) rather than
        cascaded. Nothing is changed in that case.
        """
        decision = self.require_write(store_id)

        with storage_errors("delete checkup"):
            checkup = self._scoped(decision).filter(Checkup.id == checkup_id).first()
            if not checkup:
                raise NotFound("Checkup not found")

            order_ids = [
                row.id
                for row in db.session.query(Order.id)
                .filter(Order.store_id == store_id, Order.checkup_id == checkup_id)
                .order_by(Order.id.asc())
                .all()
            ]
            if order_ids:
                raise ReferentialConflictError(
                    f"Cannot delete checkup: it is linked to {len(order_ids)} order(s)",
                    count=len(order_ids),
                    blockers=order_ids,
                )

            db.session.delete(checkup)
            db.session.commit()
