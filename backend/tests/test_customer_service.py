"""
Customer service tests: per-store phone uniqueness and lookups.
"""

import pytest

from optistore.services.errors import DuplicateError, NotFound, ValidationError


class TestPhoneUniqueness:
    """A phone number is unique within a store, not across stores."""

    def test_duplicate_phone_in_same_store_fails(self, as_alpha, store_alpha, alpha_customer):
        with pytest.raises(DuplicateError) as excinfo:
            as_alpha.customers.create(store_alpha.id, {"name": "Someone Else", "phone": "0300-1112222"})

        assert "Asif" in excinfo.value.message
        assert excinfo.value.existing["id"] == alpha_customer.id
        assert len(as_alpha.customers.get_all(store_alpha.id)) == 1

    def test_same_phone_in_other_store_succeeds(
        self, as_alpha, store_alpha, store_beta, alpha_customer, other_client_services
    ):
        other_client_services.sessions.create_store_session(store_beta)

        beta_customer = other_client_services.customers.create(
            store_beta.id, {"name": "Asif", "phone": "0300-1112222"}
        )

        assert beta_customer.store_id == store_beta.id
        assert beta_customer.id != alpha_customer.id

    def test_update_to_taken_phone_fails(self, as_alpha, store_alpha, alpha_customer):
        other = as_alpha.customers.create(store_alpha.id, {"name": "Sara", "phone": "0321-0000000"})

        with pytest.raises(DuplicateError):
            as_alpha.customers.update(store_alpha.id, other.id, {"name": "Sara", "phone": "0300-1112222"})

    def test_update_keeping_own_phone_succeeds(self, as_alpha, store_alpha, alpha_customer):
        updated = as_alpha.customers.update(
            store_alpha.id,
            alpha_customer.id,
            {"name": "Asif Khan", "phone": "0300-1112222", "remarks": "Prefers evening calls"},
        )

        assert updated.name == "Asif Khan"
        assert updated.remarks == "Prefers evening calls"


class TestCustomerValidation:
    def test_name_required(self, as_alpha, store_alpha):
        with pytest.raises(ValidationError) as excinfo:
            as_alpha.customers.create(store_alpha.id, {"phone": "0300-1"})
        assert excinfo.value.field == "name"

    def test_phone_required(self, as_alpha, store_alpha):
        with pytest.raises(ValidationError) as excinfo:
            as_alpha.customers.create(store_alpha.id, {"name": "No Phone", "phone": "   "})
        assert excinfo.value.field == "phone"

    def test_values_are_trimmed(self, as_alpha, store_alpha):
        customer = as_alpha.customers.create(store_alpha.id, {"name": "  Hina ", "phone": " 0333-4 "})

        assert customer.name == "Hina"
        assert customer.phone == "0333-4"


class TestCustomerLookups:
    def test_get_by_id_unknown(self, as_alpha, store_alpha):
        with pytest.raises(NotFound):
            as_alpha.customers.get_by_id(store_alpha.id, "missing")

    def test_find_by_phone(self, as_alpha, store_alpha, alpha_customer):
        assert as_alpha.customers.find_by_phone(store_alpha.id, "0300-1112222").id == alpha_customer.id
        assert as_alpha.customers.find_by_phone(store_alpha.id, "0000") is None

    def test_find_by_name_is_case_insensitive(self, as_alpha, store_alpha, alpha_customer):
        as_alpha.customers.create(store_alpha.id, {"name": "Zara", "phone": "0345-1"})

        matches = as_alpha.customers.find_by_name(store_alpha.id, "asi")

        assert [c.id for c in matches] == [alpha_customer.id]

    def test_find_by_name_requires_term(self, as_alpha, store_alpha):
        with pytest.raises(ValidationError):
            as_alpha.customers.find_by_name(store_alpha.id, "  ")

    def test_get_all_newest_first(self, as_alpha, store_alpha, alpha_customer):
        newer = as_alpha.customers.create(store_alpha.id, {"name": "Newer", "phone": "0345-2"})

        customers = as_alpha.customers.get_all(store_alpha.id)

        assert [c.id for c in customers] == [newer.id, alpha_customer.id]
