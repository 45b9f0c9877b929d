# Overview: Per-store order number allocation.

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import OrderSequence
from .errors import StorageError


ORDER_NUMBER_PAD = 3


def format_order_number(number: int, pad: int = ORDER_NUMBER_PAD) -> str:
    return f"{number:0{pad}d}"


def next_order_number(store_id: str) -> str:
    """
    Allocate the next order number for a store ("001", "002", ...).

    Runs inside the caller's transaction: the counter bump commits or rolls
    back together with the order that uses it. Numbers past 999 simply grow
    wider ("1000").
    """
    if not store_id:
        raise ValueError("store_id is required")

    stmt = (
        update(OrderSequence)
        .where(OrderSequence.store_id == store_id)
        .values(next_number=OrderSequence.next_number + 1)
    )

    result = db.session.execute(stmt)
    if result.rowcount:
        db.session.flush()
        current = (
            db.session.query(OrderSequence.next_number)
            .filter_by(store_id=store_id)
            .scalar()
        )
        return format_order_number(current - 1)

    # First order for this store: create the counter. A concurrent first
    # order may win the insert, in which case fall back to the update.
    try:
        with db.session.begin_nested():
            db.session.add(OrderSequence(store_id=store_id, next_number=2))
        return format_order_number(1)
    except IntegrityError:
        result = db.session.execute(stmt)
        if not result.rowcount:
            raise StorageError("Failed to allocate order number")
        db.session.flush()
        current = (
            db.session.query(OrderSequence.next_number)
            .filter_by(store_id=store_id)
            .scalar()
        )
        return format_order_number(current - 1)
