"""
Checkup service tests, including the delete guard for checkups that
orders still reference.
"""

from datetime import date

import pytest

from conftest import order_payload
from optistore.extensions import db
from optistore.models import Checkup, Order
from optistore.services.errors import NotFound, ReferentialConflictError, ValidationError


class TestCheckupCrud:
    def test_create_stores_measurements(self, alpha_checkup):
        assert alpha_checkup.date == date(2026, 10, 15)
        assert alpha_checkup.right_eye_spherical_dv == "-1.25"
        assert alpha_checkup.left_eye_axis_nv is None
        assert alpha_checkup.tested_by == "Dr. Rana"

    def test_date_accepts_slash_format(self, as_alpha, store_alpha, alpha_customer):
        checkup = as_alpha.checkups.create(
            store_alpha.id, {"customer_id": alpha_customer.id, "date": "03/02/2026"}
        )

        assert checkup.date == date(2026, 2, 3)

    def test_invalid_date_rejected(self, as_alpha, store_alpha, alpha_customer):
        with pytest.raises(ValidationError) as excinfo:
            as_alpha.checkups.create(store_alpha.id, {"customer_id": alpha_customer.id, "date": "soon"})
        assert excinfo.value.field == "date"

    def test_legacy_bifocal_details_maps_to_ipd(self, as_alpha, store_alpha, alpha_customer):
        checkup = as_alpha.checkups.create(
            store_alpha.id, {"customer_id": alpha_customer.id, "bifocal_details": "64/18"}
        )

        assert checkup.ipd_bridge == "64/18"

    def test_customer_required(self, as_alpha, store_alpha):
        with pytest.raises(ValidationError):
            as_alpha.checkups.create(store_alpha.id, {"date": "2026-10-15"})

    def test_unknown_customer_not_found(self, as_alpha, store_alpha):
        with pytest.raises(NotFound):
            as_alpha.checkups.create(store_alpha.id, {"customer_id": "nope"})

    def test_get_by_customer_id(self, as_alpha, store_alpha, alpha_customer, alpha_checkup):
        later = as_alpha.checkups.create(
            store_alpha.id, {"customer_id": alpha_customer.id, "date": "2026-10-16"}
        )

        checkups = as_alpha.checkups.get_by_customer_id(store_alpha.id, alpha_customer.id)

        assert [c.id for c in checkups] == [later.id, alpha_checkup.id]

    def test_update_replaces_readings(self, as_alpha, store_alpha, alpha_checkup):
        updated = as_alpha.checkups.update(
            store_alpha.id,
            alpha_checkup.id,
            {"date": "2026-10-16", "right_eye_spherical_dv": "-1.50"},
        )

        assert updated.date == date(2026, 10, 16)
        assert updated.right_eye_spherical_dv == "-1.50"
        assert updated.left_eye_spherical_dv is None
        assert updated.customer_id == alpha_checkup.customer_id

    def test_to_dict_has_all_fields(self, alpha_checkup):
        data = alpha_checkup.to_dict()

        assert data["date"] == "2026-10-15"
        assert "left_eye_add" in data
        assert "ipd_bridge" in data


class TestCheckupDeleteGuard:
    """A checkup referenced by an order cannot be deleted."""

    def test_delete_unreferenced_checkup(self, as_alpha, store_alpha, alpha_checkup):
        as_alpha.checkups.delete(store_alpha.id, alpha_checkup.id)

        assert db.session.query(Checkup).count() == 0

    def test_delete_blocked_then_allowed(self, as_alpha, store_alpha, alpha_customer, alpha_checkup):
        order = as_alpha.orders.create(
            store_alpha.id, order_payload(alpha_customer.id, checkup_id=alpha_checkup.id)
        )

        with pytest.raises(ReferentialConflictError) as excinfo:
            as_alpha.checkups.delete(store_alpha.id, alpha_checkup.id)

        assert excinfo.value.count == 1
        assert excinfo.value.blockers == [order.id]
        assert db.session.query(Checkup).filter_by(id=alpha_checkup.id).count() == 1
        assert db.session.query(Order).filter_by(store_id=store_alpha.id, id=order.id).one().checkup_id == alpha_checkup.id

        as_alpha.orders.delete(store_alpha.id, order.id)
        as_alpha.checkups.delete(store_alpha.id, alpha_checkup.id)

        assert db.session.query(Checkup).count() == 0

    def test_count_reports_every_linked_order(self, as_alpha, store_alpha, alpha_customer, alpha_checkup):
        for _ in range(3):
            as_alpha.orders.create(store_alpha.id, order_payload(alpha_customer.id, checkup_id=alpha_checkup.id))

        with pytest.raises(ReferentialConflictError) as excinfo:
            as_alpha.checkups.delete(store_alpha.id, alpha_checkup.id)

        assert excinfo.value.count == 3
        assert excinfo.value.blockers == ["001", "002", "003"]

    def test_delete_unknown_checkup(self, as_alpha, store_alpha):
        with pytest.raises(NotFound):
            as_alpha.checkups.delete(store_alpha.id, "missing")
