# Overview: Store-scoped customer records.

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Customer, Store
from .errors import DuplicateError, NotFound, ValidationError
from .schemas import CustomerInput
from .storage import lock_for_update, storage_errors
from .tenant_service import ScopedService, with_store_scope


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CustomerService(ScopedService):
    """
    Customers of one store.

    A phone number is unique within a store. Customers are not deleted, so
    their checkups and orders stay attached.
    """

    def _scoped(self, decision):
        return with_store_scope(db.session.query(Customer), Customer, decision.scope_filter)

    def _find_duplicate(self, store_id: str, phone: str, exclude_id: str | None = None) -> Customer | None:
        query = db.session.query(Customer).filter(
            Customer.store_id == store_id,
            Customer.phone == phone,
        )
        if exclude_id:
            query = query.filter(Customer.id != exclude_id)
        return query.first()

    @staticmethod
    def _duplicate_error(existing: Customer) -> DuplicateError:
        return DuplicateError(
            f"A customer with phone {existing.phone} already exists: {existing.name}",
            existing=existing.to_summary(),
        )

    def create(self, store_id: str, data: dict) -> Customer:
        self.require_write(store_id)
        customer_input = CustomerInput.from_dict(data)

        with storage_errors("create customer"):
            if not db.session.query(Store.id).filter_by(id=store_id).first():
                raise NotFound("Store not found")

            existing = self._find_duplicate(store_id, customer_input.phone)
            if existing:
                raise self._duplicate_error(existing)

            customer = Customer(
                store_id=store_id,
                name=customer_input.name,
                phone=customer_input.phone,
                address=customer_input.address,
                remarks=customer_input.remarks,
            )
            db.session.add(customer)
            try:
                db.session.commit()
            except IntegrityError:
                # Lost a race with another insert of the same phone
                db.session.rollback()
                existing = self._find_duplicate(store_id, customer_input.phone)
                if existing:
                    raise self._duplicate_error(existing)
                raise

        current_app.logger.info("Customer created: store_id=%s id=%s", store_id, customer.id)
        return customer

    def get_all(self, store_id: str) -> list[Customer]:
        decision = self.require_read(store_id)
        with storage_errors("list customers"):
            return self._scoped(decision).order_by(Customer.created_at.desc()).all()

    def get_by_id(self, store_id: str, customer_id: str) -> Customer:
        decision = self.require_read(store_id)
        with storage_errors("load customer"):
            customer = self._scoped(decision).filter(Customer.id == customer_id).first()
        if not customer:
            raise NotFound("Customer not found")
        return customer

    def find_by_phone(self, store_id: str, phone: str) -> Customer | None:
        decision = self.require_read(store_id)
        phone = (phone or "").strip()
        if not phone:
            return None
        with storage_errors("find customer by phone"):
            return self._scoped(decision).filter(Customer.phone == phone).first()

    def find_by_name(self, store_id: str, name: str) -> list[Customer]:
        """Case-insensitive substring match on the customer name."""
        decision = self.require_read(store_id)
        term = (name or "").strip()
        if not term:
            raise ValidationError("A search term is required", field="name")
        with storage_errors("search customers"):
            return (
                self._scoped(decision)
                .filter(Customer.name.ilike(f"%{_escape_like(term)}%", escape="\\"))
                .order_by(Customer.name.asc())
                .all()
            )

    def update(self, store_id: str, customer_id: str, data: dict) -> Customer:
        decision = self.require_write(store_id)
        customer_input = CustomerInput.from_dict(data)

        with storage_errors("update customer"):
            customer = lock_for_update(
                self._scoped(decision).filter(Customer.id == customer_id)
            ).first()
            if not customer:
                raise NotFound("Customer not found")

            existing = self._find_duplicate(store_id, customer_input.phone, exclude_id=customer.id)
            if existing:
                raise self._duplicate_error(existing)

            customer.name = customer_input.name
            customer.phone = customer_input.phone
            customer.address = customer_input.address
            customer.remarks = customer_input.remarks
            try:
                db.session.commit()
            except IntegrityError:
                db.session.rollback()
                existing = self._find_duplicate(store_id, customer_input.phone, exclude_id=customer_id)
                if existing:
                    raise self._duplicate_error(existing)
                raise

        return customer
