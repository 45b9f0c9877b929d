# Overview: Cross-store read-only views for the super admin.

"""
Cross-Store Aggregation

WHY: The super admin oversees every store but never edits store data. All
methods here are reads that require an unscoped (ALL_STORES) decision, so a
store session, even one held together with nothing else, is refused.

Rows are annotated with the owning store's name for display. The join is
for attribution only; it is not a security boundary.

STORE SUBSETS: store_ids=None means every store. An empty list means "no
stores selected" and yields an empty result, not everything.
"""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import Checkup, Customer, Order, Store, amount_to_float
from optistore.time_utils import to_iso_date
from .reporting_service import parse_range, sales_columns, sales_totals
from .storage import storage_errors
from .tenant_service import ScopedService, with_store_scope


def _store_name(row) -> str | None:
    return row.store.name if row.store else None


def _restrict_stores(query, model, store_ids: list[str] | None):
    if store_ids is None:
        return query
    return query.filter(model.store_id.in_(store_ids))


class AdminService(ScopedService):
    def get_all_customers(self) -> list[dict]:
        decision = self.require_all_stores()
        with storage_errors("list all customers"):
            customers = (
                with_store_scope(db.session.query(Customer), Customer, decision.scope_filter)
                .options(joinedload(Customer.store))
                .order_by(Customer.created_at.desc())
                .all()
            )
            return [{**customer.to_dict(), "store_name": _store_name(customer)} for customer in customers]

    def get_all_checkups(self) -> list[dict]:
        decision = self.require_all_stores()
        with storage_errors("list all checkups"):
            checkups = (
                with_store_scope(db.session.query(Checkup), Checkup, decision.scope_filter)
                .options(joinedload(Checkup.store), joinedload(Checkup.customer))
                .order_by(Checkup.date.desc(), Checkup.created_at.desc())
                .all()
            )
            return [
                {
                    **checkup.to_dict(),
                    "store_name": _store_name(checkup),
                    "customer_name": checkup.customer.name if checkup.customer else None,
                    "customer_phone": checkup.customer.phone if checkup.customer else None,
                }
                for checkup in checkups
            ]

    def _orders(self, decision):
        return (
            with_store_scope(db.session.query(Order), Order, decision.scope_filter)
            .options(
                joinedload(Order.store),
                joinedload(Order.customer),
                joinedload(Order.checkup),
            )
        )

    def get_all_orders(self) -> list[dict]:
        decision = self.require_all_stores()
        with storage_errors("list all orders"):
            orders = self._orders(decision).order_by(Order.order_date.desc(), Order.created_at.desc()).all()
            return [{**order.to_dict(include_customer=True), "store_name": _store_name(order)} for order in orders]

    def get_individual_orders_report(self, start, end, store_ids: list[str] | None = None) -> list[dict]:
        decision = self.require_all_stores()
        start_date, end_date = parse_range(start, end)
        if store_ids is not None and not store_ids:
            return []

        query = self._orders(decision).filter(
            Order.order_date >= start_date,
            Order.order_date <= end_date,
        )
        with storage_errors("build cross-store orders report"):
            orders = (
                _restrict_stores(query, Order, store_ids)
                .order_by(Order.order_date.desc(), Order.created_at.desc())
                .all()
            )
            return [{**order.to_dict(include_customer=True), "store_name": _store_name(order)} for order in orders]

    def sales_report_by_store(self, start, end, store_ids: list[str] | None = None) -> list[dict]:
        """Per store, per day totals; newest day first, then store name."""
        decision = self.require_all_stores()
        start_date, end_date = parse_range(start, end)
        if store_ids is not None and not store_ids:
            return []

        query = (
            db.session.query(
                Store.id.label("store_id"),
                Store.name.label("store_name"),
                Order.order_date.label("date"),
                *sales_columns(),
            )
            .select_from(Order)
            .join(Store, Store.id == Order.store_id)
            .filter(Order.order_date >= start_date, Order.order_date <= end_date)
        )
        query = _restrict_stores(with_store_scope(query, Order, decision.scope_filter), Order, store_ids)
        with storage_errors("build sales by store report"):
            rows = (
                query.group_by(Store.id, Store.name, Order.order_date)
                .order_by(Order.order_date.desc(), Store.name.asc())
                .all()
            )
        return [
            {
                "store_id": row.store_id,
                "store_name": row.store_name,
                "date": to_iso_date(row.date),
                **sales_totals(row),
            }
            for row in rows
        ]

    def consolidated_sales_report(self, start, end, store_ids: list[str] | None = None) -> list[dict]:
        """Per day totals over the selected stores combined."""
        decision = self.require_all_stores()
        start_date, end_date = parse_range(start, end)
        if store_ids is not None and not store_ids:
            return []

        query = db.session.query(Order.order_date.label("date"), *sales_columns()).filter(
            Order.order_date >= start_date,
            Order.order_date <= end_date,
        )
        query = _restrict_stores(with_store_scope(query, Order, decision.scope_filter), Order, store_ids)
        with storage_errors("build consolidated sales report"):
            rows = query.group_by(Order.order_date).order_by(Order.order_date.desc()).all()
        return [{"date": to_iso_date(row.date), **sales_totals(row)} for row in rows]

    def store_summaries(self) -> list[dict]:
        """Per store: customer, checkup and order counts plus order totals."""
        decision = self.require_all_stores()

        def counts(model) -> dict:
            query = db.session.query(model.store_id, func.count())
            rows = with_store_scope(query, model, decision.scope_filter).group_by(model.store_id).all()
            return {store_id: count for store_id, count in rows}

        with storage_errors("build store summaries"):
            customer_counts = counts(Customer)
            checkup_counts = counts(Checkup)
            order_query = db.session.query(Order.store_id.label("store_id"), *sales_columns())
            order_totals = {
                row.store_id: row
                for row in with_store_scope(order_query, Order, decision.scope_filter)
                .group_by(Order.store_id)
                .all()
            }
            stores = db.session.query(Store).order_by(Store.name.asc()).all()

        summaries = []
        for store in stores:
            totals = order_totals.get(store.id)
            summaries.append({
                "store_id": store.id,
                "store_name": store.name,
                "customer_count": customer_counts.get(store.id, 0),
                "checkup_count": checkup_counts.get(store.id, 0),
                "order_count": int(totals.total_orders) if totals else 0,
                "total_sales": amount_to_float(totals.total_sales) if totals else 0.0,
                "total_advance": amount_to_float(totals.total_advance) if totals else 0.0,
                "total_balance": amount_to_float(totals.total_balance) if totals else 0.0,
            })
        return summaries
