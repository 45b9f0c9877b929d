from __future__ import annotations

from ..extensions import db
from .tenancy import generate_id
from optistore.time_utils import to_utc_z, utcnow


class Customer(db.Model):
    """
    Customer of a single store.

    A phone number is unique within a store but may repeat across stores.
    Customers are never deleted and never move to another store, so their
    checkup and order history is retained.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.UniqueConstraint("store_id", "phone", name="uq_customers_store_phone"),
        db.Index("ix_customers_store_created", "store_id", "created_at"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    store_id = db.Column(db.String(32), db.ForeignKey("stores.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    address = db.Column(db.Text, nullable=True)
    remarks = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    store = db.relationship("Store", backref=db.backref("customers", lazy=True))

    def __repr__(self) -> str:
        return f"<Customer id={self.id} store_id={self.store_id} phone={self.phone!r}>"

    def to_summary(self) -> dict:
        return {"id": self.id, "name": self.name, "phone": self.phone}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "store_id": self.store_id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "remarks": self.remarks,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
