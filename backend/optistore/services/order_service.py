# Overview: Store-scoped glasses orders with per-store order numbers.

from __future__ import annotations

from flask import current_app
from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import ORDER_STATUSES, Checkup, Customer, Order
from optistore.time_utils import today
from .errors import NotFound, ValidationError
from .schemas import OrderInput
from .sequence_service import next_order_number
from .storage import lock_for_update, storage_errors
from .tenant_service import ScopedService, with_store_scope


DELIVERED = "delivered"


class OrderService(ScopedService):
    """
    Orders of one store.

    Order ids are per-store numbers allocated in the same transaction as
    the insert. The balance is stored as the caller computed it; when it is
    omitted it defaults to total - advance.
    """

    def _scoped(self, decision):
        query = db.session.query(Order).options(
            joinedload(Order.customer),
            joinedload(Order.checkup),
        )
        return with_store_scope(query, Order, decision.scope_filter)

    def _check_references(self, store_id: str, customer_id: str, checkup_id: str | None) -> None:
        customer = (
            db.session.query(Customer.id)
            .filter(Customer.store_id == store_id, Customer.id == customer_id)
            .first()
        )
        if not customer:
            raise NotFound("Customer not found")

        if checkup_id:
            checkup = (
                db.session.query(Checkup.id)
                .filter(Checkup.store_id == store_id, Checkup.id == checkup_id)
                .first()
            )
            if not checkup:
                raise NotFound("Checkup not found")

    def create(self, store_id: str, data: dict) -> Order:
        self.require_write(store_id)
        order_input = OrderInput.from_dict(data, today=today())

        with storage_errors("create order"):
            self._check_references(store_id, order_input.customer_id, order_input.checkup_id)

            delivered_date = order_input.delivered_date
            if order_input.status == DELIVERED and delivered_date is None:
                delivered_date = today()

            order = Order(
                store_id=store_id,
                id=next_order_number(store_id),
                customer_id=order_input.customer_id,
                checkup_id=order_input.checkup_id,
                order_date=order_input.order_date,
                expected_delivery_date=order_input.expected_delivery_date,
                delivered_date=delivered_date,
                frame=order_input.frame,
                lenses=order_input.lenses,
                total_amount=order_input.total_amount,
                advance_amount=order_input.advance_amount,
                balance_amount=order_input.balance_amount,
                status=order_input.status,
                notes=order_input.notes,
            )
            db.session.add(order)
            db.session.commit()

        current_app.logger.info("Order created: store_id=%s id=%s", store_id, order.id)
        return order

    def get_all(self, store_id: str) -> list[Order]:
        decision = self.require_read(store_id)
        with storage_errors("list orders"):
            return (
                self._scoped(decision)
                .order_by(Order.order_date.desc(), Order.created_at.desc())
                .all()
            )

    def get_by_id(self, store_id: str, order_id: str) -> Order:
        decision = self.require_read(store_id)
        with storage_errors("load order"):
            order = self._scoped(decision).filter(Order.id == order_id).first()
        if not order:
            raise NotFound("Order not found")
        return order

    def get_by_customer_id(self, store_id: str, customer_id: str) -> list[Order]:
        decision = self.require_read(store_id)
        with storage_errors("list customer orders"):
            return (
                self._scoped(decision)
                .filter(Order.customer_id == customer_id)
                .order_by(Order.order_date.desc(), Order.created_at.desc())
                .all()
            )

    def _load_for_write(self, decision, order_id: str) -> Order:
        order = lock_for_update(
            with_store_scope(db.session.query(Order), Order, decision.scope_filter)
            .filter(Order.id == order_id)
        ).first()
        if not order:
            raise NotFound("Order not found")
        return order

    def update(self, store_id: str, order_id: str, data: dict) -> Order:
        decision = self.require_write(store_id)

        with storage_errors("update order"):
            order = self._load_for_write(decision, order_id)

            payload = {"customer_id": order.customer_id, **(data or {})}
            order_input = OrderInput.from_dict(payload, today=order.order_date)
            self._check_references(store_id, order_input.customer_id, order_input.checkup_id)

            order.customer_id = order_input.customer_id
            order.checkup_id = order_input.checkup_id
            order.order_date = order_input.order_date
            order.expected_delivery_date = order_input.expected_delivery_date
            delivered_date = order_input.delivered_date
            if order_input.status == DELIVERED and delivered_date is None:
                delivered_date = order.delivered_date or today()
            order.delivered_date = delivered_date
            order.frame = order_input.frame
            order.lenses = order_input.lenses
            order.total_amount = order_input.total_amount
            order.advance_amount = order_input.advance_amount
            order.balance_amount = order_input.balance_amount
            order.status = order_input.status
            order.notes = order_input.notes

            db.session.commit()
        return order

    def update_status(self, store_id: str, order_id: str, status: str) -> Order:
        """
        Move an order to `status`.

        Delivering stamps today's date unless one is already recorded;
        moving away from delivered clears it.
        """
        decision = self.require_write(store_id)

        status = (status or "").strip().lower()
        if status not in ORDER_STATUSES:
            raise ValidationError(
                f"status must be one of: {', '.join(ORDER_STATUSES)}", field="status"
            )

        with storage_errors("update order status"):
            order = self._load_for_write(decision, order_id)

            if status == DELIVERED:
                if order.delivered_date is None:
                    order.delivered_date = today()
            else:
                order.delivered_date = None
            order.status = status

            db.session.commit()
        return order

    def delete(self, store_id: str, order_id: str) -> None:
        decision = self.require_write(store_id)

        with storage_errors("delete order"):
            order = self._load_for_write(decision, order_id)
            db.session.delete(order)
            db.session.commit()

        current_app.logger.info("Order deleted: store_id=%s id=%s", store_id, order_id)
