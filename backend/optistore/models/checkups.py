from __future__ import annotations

from ..extensions import db
from .tenancy import generate_id
from optistore.time_utils import to_iso_date, to_utc_z, utcnow


# Refraction readings per eye: distance vision (dv), near vision (nv) and
# the reading addition.
MEASUREMENT_FIELDS = (
    "right_eye_spherical_dv",
    "right_eye_cylindrical_dv",
    "right_eye_axis_dv",
    "right_eye_add",
    "right_eye_spherical_nv",
    "right_eye_cylindrical_nv",
    "right_eye_axis_nv",
    "left_eye_spherical_dv",
    "left_eye_cylindrical_dv",
    "left_eye_axis_dv",
    "left_eye_add",
    "left_eye_spherical_nv",
    "left_eye_cylindrical_nv",
    "left_eye_axis_nv",
)


class Checkup(db.Model):
    """
    Eye examination record.

    The referenced customer must belong to the same store as the checkup.
    There is no foreign key spanning the store partition, so the service
    layer checks it on every create.
    """
    __tablename__ = "checkups"
    __table_args__ = (
        db.Index("ix_checkups_store_customer", "store_id", "customer_id"),
        db.Index("ix_checkups_store_date", "store_id", "date"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    store_id = db.Column(db.String(32), db.ForeignKey("stores.id"), nullable=False, index=True)
    customer_id = db.Column(db.String(32), db.ForeignKey("customers.id"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)

    right_eye_spherical_dv = db.Column(db.String(16), nullable=True)
    right_eye_cylindrical_dv = db.Column(db.String(16), nullable=True)
    right_eye_axis_dv = db.Column(db.String(16), nullable=True)
    right_eye_add = db.Column(db.String(16), nullable=True)
    right_eye_spherical_nv = db.Column(db.String(16), nullable=True)
    right_eye_cylindrical_nv = db.Column(db.String(16), nullable=True)
    right_eye_axis_nv = db.Column(db.String(16), nullable=True)
    left_eye_spherical_dv = db.Column(db.String(16), nullable=True)
    left_eye_cylindrical_dv = db.Column(db.String(16), nullable=True)
    left_eye_axis_dv = db.Column(db.String(16), nullable=True)
    left_eye_add = db.Column(db.String(16), nullable=True)
    left_eye_spherical_nv = db.Column(db.String(16), nullable=True)
    left_eye_cylindrical_nv = db.Column(db.String(16), nullable=True)
    left_eye_axis_nv = db.Column(db.String(16), nullable=True)

    ipd_bridge = db.Column(db.String(64), nullable=True)
    tested_by = db.Column(db.String(128), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    store = db.relationship("Store", backref=db.backref("checkups", lazy=True))
    customer = db.relationship("Customer", backref=db.backref("checkups", lazy=True))

    def __repr__(self) -> str:
        return f"<Checkup id={self.id} store_id={self.store_id} customer_id={self.customer_id}>"

    def measurements(self) -> dict:
        return {field: getattr(self, field) for field in MEASUREMENT_FIELDS}

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "store_id": self.store_id,
            "customer_id": self.customer_id,
            "date": to_iso_date(self.date),
        }
        data.update(self.measurements())
        data.update({
            "ipd_bridge": self.ipd_bridge,
            "tested_by": self.tested_by,
            "created_at": to_utc_z(self.created_at),
        })
        return data
