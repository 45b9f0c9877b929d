from __future__ import annotations

import uuid

from ..extensions import db
from optistore.time_utils import to_utc_z, utcnow


def generate_id() -> str:
    """Opaque identifier for stores, customers and checkups."""
    return uuid.uuid4().hex


class Store(db.Model):
    """
    An optical store: the tenant boundary.

    Every customer, checkup and order belongs to exactly one store. Stores
    are created, edited and deleted only by the super admin.

    SECURITY: the access PIN is kept as a bcrypt hash (pin_hash) and is
    never serialized by to_dict().
    """
    __tablename__ = "stores"
    __table_args__ = (
        db.Index("ix_stores_name", "name"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.Text, nullable=True)
    phone = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    pin_hash = db.Column(db.String(128), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Store id={self.id} name={self.name!r}>"

    def to_directory_entry(self) -> dict:
        return {"id": self.id, "name": self.name}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class OrderSequence(db.Model):
    """
    Durable per-store order counter.

    Order ids are short, customer-visible numbers ("001", "002", ...) that
    restart per store. The counter row is bumped in the same transaction as
    the order insert, so two orders can never be handed the same number.
    """
    __tablename__ = "order_sequences"

    store_id = db.Column(db.String(32), db.ForeignKey("stores.id"), primary_key=True)
    next_number = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    store = db.relationship("Store", backref=db.backref("order_sequence", uselist=False, lazy=True))

    def to_dict(self) -> dict:
        return {
            "store_id": self.store_id,
            "next_number": self.next_number,
            "updated_at": to_utc_z(self.updated_at),
        }
