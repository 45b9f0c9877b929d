# Overview: Store-scoped sales reports and dashboard figures.

from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import func

from ..extensions import db
from ..models import Customer, Order, amount_to_float
from optistore.time_utils import parse_date, to_iso_date, today as utc_today
from .errors import ValidationError
from .storage import storage_errors
from .tenant_service import ScopedService, with_store_scope


RECENT_ORDERS_LIMIT = 5


def parse_range(start, end) -> tuple[date, date]:
    """Inclusive [start, end] date range; both ends are required."""
    try:
        start_date = parse_date(start)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("start must be a date (YYYY-MM-DD or DD/MM/YYYY)", field="start")
    try:
        end_date = parse_date(end)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("end must be a date (YYYY-MM-DD or DD/MM/YYYY)", field="end")

    if start_date is None:
        raise ValidationError("start date is required", field="start")
    if end_date is None:
        raise ValidationError("end date is required", field="end")
    if start_date > end_date:
        raise ValidationError("start date must not be after end date", field="start")
    return start_date, end_date


def sales_columns():
    return (
        func.count(Order.id).label("total_orders"),
        func.coalesce(func.sum(Order.total_amount), 0).label("total_sales"),
        func.coalesce(func.sum(Order.advance_amount), 0).label("total_advance"),
        func.coalesce(func.sum(Order.balance_amount), 0).label("total_balance"),
    )


def sales_totals(row) -> dict:
    return {
        "total_orders": int(row.total_orders or 0),
        "total_sales": amount_to_float(row.total_sales),
        "total_advance": amount_to_float(row.total_advance),
        "total_balance": amount_to_float(row.total_balance),
    }


def summarize(rows: list[dict]) -> dict:
    """
    Roll up report rows (per-day sales rows or individual order rows).

    Per-day rows carry total_orders/total_sales; order rows count as one
    order each and carry total_amount.
    """
    total_orders = 0
    total_sales = 0.0
    total_advance = 0.0
    total_balance = 0.0

    for row in rows:
        if "total_orders" in row:
            total_orders += int(row.get("total_orders") or 0)
            total_sales += float(row.get("total_sales") or 0)
            total_advance += float(row.get("total_advance") or 0)
            total_balance += float(row.get("total_balance") or 0)
        else:
            total_orders += 1
            total_sales += float(row.get("total_amount") or 0)
            total_advance += float(row.get("advance_amount") or 0)
            total_balance += float(row.get("balance_amount") or 0)

    average = round(total_sales / total_orders, 2) if total_orders else 0.0
    return {
        "total_orders": total_orders,
        "total_sales": round(total_sales, 2),
        "total_advance": round(total_advance, 2),
        "total_balance": round(total_balance, 2),
        "average_order_value": average,
    }


def week_bounds(day: date) -> tuple[date, date]:
    """Sunday to Saturday week containing `day`."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def month_bounds(day: date) -> tuple[date, date]:
    start = day.replace(day=1)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start, next_month - timedelta(days=1)


class ReportingService(ScopedService):
    """Reports over one store's orders. Readable by the store and the super admin."""

    def _orders(self, decision):
        return with_store_scope(db.session.query(Order), Order, decision.scope_filter)

    def sales_report(self, store_id: str, start, end) -> list[dict]:
        """Per-day totals, newest day first."""
        decision = self.require_read(store_id)
        start_date, end_date = parse_range(start, end)

        query = db.session.query(Order.order_date.label("date"), *sales_columns()).filter(
            Order.order_date >= start_date,
            Order.order_date <= end_date,
        )
        query = with_store_scope(query, Order, decision.scope_filter)
        with storage_errors("build sales report"):
            rows = query.group_by(Order.order_date).order_by(Order.order_date.desc()).all()

        return [{"date": to_iso_date(row.date), **sales_totals(row)} for row in rows]

    def individual_orders_report(self, store_id: str, start, end) -> list[dict]:
        decision = self.require_read(store_id)
        start_date, end_date = parse_range(start, end)

        with storage_errors("build orders report"):
            orders = (
                self._orders(decision)
                .filter(Order.order_date >= start_date, Order.order_date <= end_date)
                .order_by(Order.order_date.desc(), Order.created_at.desc())
                .all()
            )
            return [order.to_dict(include_customer=True) for order in orders]

    @staticmethod
    def summarize(rows: list[dict]) -> dict:
        return summarize(rows)

    def dashboard(self, store_id: str, day: date | None = None) -> dict:
        decision = self.require_read(store_id)
        day = day or utc_today()

        orders = self._orders(decision)
        week_start, week_end = week_bounds(day)
        month_start, month_end = month_bounds(day)

        def revenue(start: date, end: date) -> float:
            total = (
                orders.with_entities(func.coalesce(func.sum(Order.total_amount), 0))
                .filter(Order.order_date >= start, Order.order_date <= end)
                .scalar()
            )
            return amount_to_float(total)

        with storage_errors("build dashboard"):
            customer_count = with_store_scope(
                db.session.query(Customer), Customer, decision.scope_filter
            ).count()
            recent = (
                orders.order_by(Order.order_date.desc(), Order.created_at.desc())
                .limit(RECENT_ORDERS_LIMIT)
                .all()
            )

            return {
                "date": to_iso_date(day),
                "total_customers": customer_count,
                "today_orders": orders.filter(Order.order_date == day).count(),
                "weekly_revenue": revenue(week_start, week_end),
                "monthly_revenue": revenue(month_start, month_end),
                "pending_orders": orders.filter(Order.status == "pending").count(),
                "recent_orders": [order.to_dict(include_customer=True) for order in recent],
            }
