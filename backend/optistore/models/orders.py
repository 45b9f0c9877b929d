from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from optistore.time_utils import to_iso_date, to_utc_z, utcnow


ORDER_STATUSES = ("pending", "processing", "ready", "delivered", "cancelled")


def amount_to_float(value) -> float:
    if value is None:
        return 0.0
    return float(Decimal(str(value)))


class Order(db.Model):
    """
    Glasses order.

    The id is a short per-store number ("001") allocated from
    order_sequences, so the primary key is (store_id, id).

    balance_amount is supplied by the caller (normally total - advance);
    it is stored as given.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending', 'processing', 'ready', 'delivered', 'cancelled')",
            name="ck_orders_status",
        ),
        db.Index("ix_orders_store_order_date", "store_id", "order_date"),
        db.Index("ix_orders_store_customer", "store_id", "customer_id"),
        db.Index("ix_orders_store_checkup", "store_id", "checkup_id"),
    )

    store_id = db.Column(db.String(32), db.ForeignKey("stores.id"), primary_key=True)
    id = db.Column(db.String(16), primary_key=True)
    customer_id = db.Column(db.String(32), db.ForeignKey("customers.id"), nullable=False)
    checkup_id = db.Column(db.String(32), db.ForeignKey("checkups.id"), nullable=True)

    order_date = db.Column(db.Date, nullable=False)
    expected_delivery_date = db.Column(db.Date, nullable=True)
    delivered_date = db.Column(db.Date, nullable=True)

    frame = db.Column(db.String(255), nullable=True)
    lenses = db.Column(db.String(255), nullable=True)

    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    advance_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    balance_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    status = db.Column(db.String(16), nullable=False, default="pending", index=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    store = db.relationship("Store", backref=db.backref("orders", lazy=True))
    customer = db.relationship("Customer", backref=db.backref("orders", lazy=True))
    checkup = db.relationship("Checkup", backref=db.backref("orders", lazy=True))

    def __repr__(self) -> str:
        return f"<Order store_id={self.store_id} id={self.id} status={self.status}>"

    @property
    def has_checkup(self) -> bool:
        return self.checkup_id is not None and self.checkup is not None

    def to_dict(self, include_customer: bool = False) -> dict:
        data = {
            "id": self.id,
            "store_id": self.store_id,
            "customer_id": self.customer_id,
            "checkup_id": self.checkup_id,
            "order_date": to_iso_date(self.order_date),
            "expected_delivery_date": to_iso_date(self.expected_delivery_date),
            "delivered_date": to_iso_date(self.delivered_date),
            "frame": self.frame,
            "lenses": self.lenses,
            "total_amount": amount_to_float(self.total_amount),
            "advance_amount": amount_to_float(self.advance_amount),
            "balance_amount": amount_to_float(self.balance_amount),
            "status": self.status,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
        }
        if include_customer:
            data["customer_name"] = self.customer.name if self.customer else None
            data["customer_phone"] = self.customer.phone if self.customer else None
            data["has_checkup"] = self.has_checkup
        return data
