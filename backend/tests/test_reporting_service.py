"""
Store-scoped report and dashboard tests.
"""

from datetime import date

import pytest

from conftest import order_payload
from optistore.services.errors import AccessDenied, ValidationError
from optistore.services.reporting_service import month_bounds, parse_range, summarize, week_bounds


@pytest.fixture
def alpha_orders(as_alpha, store_alpha, alpha_customer):
    rows = [
        ("2026-10-11", "1500", "500", "pending"),   # Sunday
        ("2026-10-15", "2000", "2000", "delivered"),
        ("2026-10-15", "1000", "0", "pending"),
        ("2026-10-17", "3000", "1000", "ready"),    # Saturday
        ("2026-09-30", "9999", "0", "pending"),
    ]
    return [
        as_alpha.orders.create(
            store_alpha.id,
            order_payload(
                alpha_customer.id,
                order_date=day,
                total_amount=total,
                advance_amount=advance,
                status=status,
            ),
        )
        for day, total, advance, status in rows
    ]


class TestSalesReport:
    def test_groups_by_day_newest_first(self, as_alpha, store_alpha, alpha_orders):
        rows = as_alpha.reports.sales_report(store_alpha.id, "2026-10-01", "2026-10-31")

        assert [r["date"] for r in rows] == ["2026-10-17", "2026-10-15", "2026-10-11"]
        oct_15 = rows[1]
        assert oct_15["total_orders"] == 2
        assert oct_15["total_sales"] == 3000.0
        assert oct_15["total_advance"] == 2000.0
        assert oct_15["total_balance"] == 1000.0

    def test_summary_of_sales_rows(self, as_alpha, store_alpha, alpha_orders):
        rows = as_alpha.reports.sales_report(store_alpha.id, "2026-10-01", "2026-10-31")

        summary = as_alpha.reports.summarize(rows)

        assert summary["total_orders"] == 4
        assert summary["total_sales"] == 7500.0
        assert summary["average_order_value"] == 1875.0

    def test_individual_orders_report(self, as_alpha, store_alpha, alpha_orders):
        rows = as_alpha.reports.individual_orders_report(store_alpha.id, "2026-10-15", "2026-10-15")

        assert len(rows) == 2
        assert all(r["customer_name"] == "Asif" for r in rows)
        assert summarize(rows)["total_balance"] == 1000.0

    def test_other_store_cannot_read(self, other_client_services, store_beta, store_alpha, alpha_orders):
        other_client_services.sessions.create_store_session(store_beta)

        with pytest.raises(AccessDenied):
            other_client_services.reports.sales_report(store_alpha.id, "2026-10-01", "2026-10-31")


class TestDashboard:
    def test_dashboard_figures(self, as_alpha, store_alpha, alpha_orders):
        data = as_alpha.reports.dashboard(store_alpha.id, date(2026, 10, 15))

        assert data["total_customers"] == 1
        assert data["today_orders"] == 2
        # Week of Sunday 11th to Saturday 17th
        assert data["weekly_revenue"] == 7500.0
        assert data["monthly_revenue"] == 7500.0
        assert data["pending_orders"] == 3
        assert len(data["recent_orders"]) == 5
        assert data["recent_orders"][0]["order_date"] == "2026-10-17"

    def test_empty_store(self, as_alpha, store_alpha):
        data = as_alpha.reports.dashboard(store_alpha.id, date(2026, 10, 15))

        assert data["weekly_revenue"] == 0.0
        assert data["recent_orders"] == []


class TestCalendarHelpers:
    def test_week_starts_on_sunday(self):
        assert week_bounds(date(2026, 10, 15)) == (date(2026, 10, 11), date(2026, 10, 17))
        assert week_bounds(date(2026, 10, 11)) == (date(2026, 10, 11), date(2026, 10, 17))

    def test_month_bounds_december(self):
        assert month_bounds(date(2026, 12, 9)) == (date(2026, 12, 1), date(2026, 12, 31))

    def test_summarize_empty(self):
        assert summarize([])["average_order_value"] == 0.0

    def test_out_of_range_dates_are_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            parse_range("2026-10-01", "01/01/99999999999999999999")
        assert excinfo.value.field == "end"
