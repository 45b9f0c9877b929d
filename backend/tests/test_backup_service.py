"""
Backup export tests: SQL/CSV generators and scoped exports.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from conftest import SUPER_ADMIN_USERNAME, order_payload
from optistore.services.backup_service import (
    backup_filename,
    generate_insert_statements,
    rows_to_csv,
    sanitize_filename,
)
from optistore.services.errors import AccessDenied, NotFound, ValidationError


class TestGenerators:
    def test_insert_statements_escape_quotes(self):
        sql = generate_insert_statements("customers", [
            {"id": "c1", "name": "O'Brien", "remarks": None},
        ])

        assert sql == "INSERT INTO customers (id, name, remarks) VALUES ('c1', 'O''Brien', NULL);\n"

    def test_insert_statements_render_types(self):
        sql = generate_insert_statements("orders", [
            {"order_date": date(2026, 10, 15), "total_amount": Decimal("5000.00"), "created_at": datetime(2026, 10, 15, 9, 30)},
        ])

        assert "VALUES ('2026-10-15', 5000.00, '2026-10-15 09:30:00');" in sql

    def test_no_rows_no_statements(self):
        assert generate_insert_statements("stores", []) == ""

    def test_csv_quotes_when_needed(self):
        text = rows_to_csv([
            {"name": "Plain", "address": "Street 1, Block B", "notes": 'says "hi"'},
            {"name": "Empty", "address": None, "notes": "line\nbreak"},
        ])

        assert text.splitlines()[0] == "name,address,notes"
        assert '"Street 1, Block B"' in text
        assert '"says ""hi"""' in text
        assert 'Empty,,"line\nbreak"' in text

    def test_sanitize_filename(self):
        assert sanitize_filename("Alpha Optics & Co.") == "Alpha_Optics_Co_"
        assert sanitize_filename("main-store_2") == "main-store_2"

    def test_backup_filename(self):
        now = datetime(2026, 10, 17, 14, 5, 9)

        assert backup_filename("Alpha Optics", "sql", now) == "Alpha_Optics_backup_2026-10-17_140509.sql"
        assert backup_filename("all_stores", "csv", now) == "all_stores_backup_2026-10-17_140509.zip"


class TestStoreExport:
    def test_sql_export_contains_store_rows(self, as_alpha, store_alpha, alpha_customer, alpha_checkup):
        as_alpha.orders.create(store_alpha.id, order_payload(alpha_customer.id, checkup_id=alpha_checkup.id))

        result = as_alpha.backups.export_store_data(store_alpha.id, "sql")

        sql = result["data"]
        assert result["filename"] == "Alpha_backup_2026-10-17_090000.sql"
        assert sql.startswith("-- Database Backup for Alpha\n")
        assert "INSERT INTO stores" in sql
        assert "INSERT INTO customers" in sql
        assert "INSERT INTO checkups" in sql
        assert "INSERT INTO orders" in sql
        assert sql.index("INSERT INTO customers") < sql.index("INSERT INTO orders")

    def test_sql_export_excludes_other_stores(self, as_alpha, store_alpha, alpha_customer, other_client_services, store_beta):
        other_client_services.sessions.create_store_session(store_beta)
        other_client_services.customers.create(store_beta.id, {"name": "Bilal", "phone": "0311-9"})

        sql = as_alpha.backups.export_store_data(store_alpha.id, "sql")["data"]

        assert "Bilal" not in sql
        assert "Asif" in sql

    def test_csv_export_files(self, as_alpha, store_alpha, alpha_customer):
        result = as_alpha.backups.export_store_data(store_alpha.id, "CSV")

        files = result["data"]
        assert result["format"] == "csv"
        assert result["filename"].endswith(".zip")
        assert set(files) == {"store.csv", "customers.csv", "README.txt"}
        assert "pin_hash" not in files["store.csv"]
        assert "Asif" in files["customers.csv"]
        assert "Store Name: Alpha" in files["README.txt"]

    def test_unsupported_format(self, as_alpha, store_alpha):
        with pytest.raises(ValidationError):
            as_alpha.backups.export_store_data(store_alpha.id, "xml")

    def test_other_store_cannot_export(self, as_alpha, store_beta):
        with pytest.raises(AccessDenied):
            as_alpha.backups.export_store_data(store_beta.id, "sql")

    def test_backup_stats(self, as_alpha, store_alpha, alpha_customer, alpha_checkup):
        stats = as_alpha.backups.get_backup_stats(store_alpha.id)

        assert stats["customers"] == 1
        assert stats["checkups"] == 1
        assert stats["orders"] == 0
        assert stats["total_records"] == 2


class TestSuperAdminStoreExport:
    def test_exports_only_the_requested_store(self, services, store_alpha, store_beta, alpha_customer, other_client_services):
        other_client_services.sessions.create_store_session(store_beta)
        other_client_services.customers.create(store_beta.id, {"name": "Bilal", "phone": "0311-9"})
        services.sessions.create_super_admin_session(SUPER_ADMIN_USERNAME)

        sql = services.backups.export_store_data(store_beta.id, "sql")["data"]
        stats = services.backups.get_backup_stats(store_beta.id)

        assert "Bilal" in sql
        assert "Asif" not in sql
        assert stats["customers"] == 1
        assert stats["store_name"] == "Beta"

    def test_unknown_store(self, as_super_admin):
        with pytest.raises(NotFound):
            as_super_admin.backups.export_store_data("missing", "sql")


class TestFullExport:
    def test_requires_super_admin(self, as_alpha):
        with pytest.raises(AccessDenied):
            as_alpha.backups.export_all_data("sql")

    def test_exports_every_store(self, services, store_alpha, store_beta):
        services.sessions.create_super_admin_session(SUPER_ADMIN_USERNAME)

        result = services.backups.export_all_data("sql")

        assert result["scope"] == "all_stores"
        assert result["filename"] == "all_stores_backup_2026-10-17_090000.sql"
        assert result["data"].count("INSERT INTO stores") == 2

    def test_csv_and_stats(self, services, store_alpha, store_beta):
        services.sessions.create_super_admin_session(SUPER_ADMIN_USERNAME)

        files = services.backups.export_all_data("csv")["data"]
        stats = services.backups.get_all_backup_stats()

        assert set(files) == {"stores.csv", "README.txt"}
        assert stats == {"stores": 2, "customers": 0, "checkups": 0, "orders": 0, "total_records": 2}
