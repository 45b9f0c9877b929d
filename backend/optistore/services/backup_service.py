# Overview: SQL and CSV exports of store data.

"""
Backups

Two export formats:
- sql: one text file with INSERT statements, restorable into the schema
- csv: one CSV per table plus a README, returned as {filename: text} and
  zipped by the route

A store session exports its own store; the super admin may export any
store or everything. Exports are reads and never modify data.
"""

from __future__ import annotations

import csv
import io
import re
from datetime import date, datetime
from decimal import Decimal

from ..extensions import db
from ..models import Checkup, Customer, Order, Store
from optistore.time_utils import to_utc_z, utcnow
from .errors import NotFound, ValidationError
from .storage import storage_errors
from .tenant_service import ScopedService, with_store_scope


SUPPORTED_FORMATS = ("sql", "csv")

# Export order respects foreign keys on restore
EXPORT_TABLES = (
    ("customers", Customer),
    ("checkups", Checkup),
    ("orders", Order),
)

# Columns left out of spreadsheet exports
CSV_EXCLUDED_COLUMNS = {"stores": {"pin_hash"}}

TABLE_STRUCTURE_SQL = """-- Table Structure (for reference)
-- Note: These tables should already exist in your database

/*
CREATE TABLE IF NOT EXISTS stores (
  id VARCHAR(32) PRIMARY KEY,
  name VARCHAR(255) NOT NULL,
  address TEXT,
  phone VARCHAR(32),
  email VARCHAR(255),
  pin_hash VARCHAR(128) NOT NULL,
  created_at DATETIME NOT NULL,
  updated_at DATETIME NOT NULL
);

CREATE TABLE IF NOT EXISTS customers (
  id VARCHAR(32) PRIMARY KEY,
  store_id VARCHAR(32) NOT NULL REFERENCES stores (id),
  name VARCHAR(255) NOT NULL,
  phone VARCHAR(32) NOT NULL,
  address TEXT,
  remarks TEXT,
  created_at DATETIME NOT NULL,
  updated_at DATETIME NOT NULL,
  UNIQUE (store_id, phone)
);

CREATE TABLE IF NOT EXISTS checkups (
  id VARCHAR(32) PRIMARY KEY,
  store_id VARCHAR(32) NOT NULL REFERENCES stores (id),
  customer_id VARCHAR(32) NOT NULL REFERENCES customers (id),
  date DATE NOT NULL,
  right_eye_spherical_dv VARCHAR(16),
  right_eye_cylindrical_dv VARCHAR(16),
  right_eye_axis_dv VARCHAR(16),
  right_eye_add VARCHAR(16),
  right_eye_spherical_nv VARCHAR(16),
  right_eye_cylindrical_nv VARCHAR(16),
  right_eye_axis_nv VARCHAR(16),
  left_eye_spherical_dv VARCHAR(16),
  left_eye_cylindrical_dv VARCHAR(16),
  left_eye_axis_dv VARCHAR(16),
  left_eye_add VARCHAR(16),
  left_eye_spherical_nv VARCHAR(16),
  left_eye_cylindrical_nv VARCHAR(16),
  left_eye_axis_nv VARCHAR(16),
  ipd_bridge VARCHAR(64),
  tested_by VARCHAR(128),
  created_at DATETIME NOT NULL
);

CREATE TABLE IF NOT EXISTS orders (
  store_id VARCHAR(32) NOT NULL REFERENCES stores (id),
  id VARCHAR(16) NOT NULL,
  customer_id VARCHAR(32) NOT NULL REFERENCES customers (id),
  checkup_id VARCHAR(32) REFERENCES checkups (id),
  order_date DATE NOT NULL,
  expected_delivery_date DATE,
  delivered_date DATE,
  frame VARCHAR(255),
  lenses VARCHAR(255),
  total_amount NUMERIC(12, 2) NOT NULL,
  advance_amount NUMERIC(12, 2) NOT NULL,
  balance_amount NUMERIC(12, 2) NOT NULL,
  status VARCHAR(16) NOT NULL DEFAULT 'pending',
  notes TEXT,
  created_at DATETIME NOT NULL,
  PRIMARY KEY (store_id, id)
);
*/

"""


def sanitize_filename(name: str) -> str:
    """Replace anything outside [a-zA-Z0-9-_] with '_' and collapse runs."""
    cleaned = re.sub(r"[^a-zA-Z0-9\-_]", "_", name or "")
    return re.sub(r"_+", "_", cleaned)


def backup_timestamp(now: datetime) -> str:
    return now.strftime("%Y-%m-%d_%H%M%S")


def backup_filename(label: str, fmt: str, now: datetime) -> str:
    extension = "sql" if fmt == "sql" else "zip"
    return f"{sanitize_filename(label)}_backup_{backup_timestamp(now)}.{extension}"


def _sql_literal(value) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        value = value.isoformat(sep=" ")
    elif isinstance(value, date):
        value = value.isoformat()
    text = str(value).replace("'", "''")
    return f"'{text}'"


def generate_insert_statements(table: str, rows: list[dict]) -> str:
    """One INSERT per row; columns taken from the first row."""
    if not rows:
        return ""
    columns = list(rows[0].keys())
    lines = []
    for row in rows:
        values = ", ".join(_sql_literal(row.get(column)) for column in columns)
        lines.append(f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({values});\n")
    return "".join(lines)


def _csv_value(value):
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return value


def rows_to_csv(rows: list[dict]) -> str:
    """Header line plus one line per row. Values containing , " or newlines are quoted."""
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()), lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: _csv_value(value) for key, value in row.items()})
    return buffer.getvalue().rstrip("\n")


def model_rows(records) -> list[dict]:
    """Plain column dicts, in table column order."""
    rows = []
    for record in records:
        columns = record.__table__.columns
        rows.append({column.name: getattr(record, column.key) for column in columns})
    return rows


def _without(rows: list[dict], excluded: set[str]) -> list[dict]:
    if not excluded:
        return rows
    return [{key: value for key, value in row.items() if key not in excluded} for row in rows]


def _csv_readme(title: str, generated_at: str, details: list[str], files: list[str]) -> str:
    lines = [title, "=" * len(title), "", f"Generated on: {generated_at}"]
    lines.extend(details)
    lines.append("")
    lines.append("Files included:")
    lines.extend(f"- {name}" for name in files)
    lines.append("")
    lines.append("Note: These CSV files can be imported into Excel or other spreadsheet applications.")
    lines.append("To restore data to the system, use the SQL backup format instead.")
    return "\n".join(lines) + "\n"


def _check_format(fmt: str | None) -> str:
    fmt = (fmt or "sql").strip().lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValidationError(f"Unsupported export format: {fmt}", field="format")
    return fmt


class BackupService(ScopedService):
    def __init__(self, gate, *, clock=utcnow):
        super().__init__(gate)
        self.clock = clock

    def _tables(self, decision) -> list[tuple[str, list[dict]]]:
        tables = []
        for table, model in EXPORT_TABLES:
            query = with_store_scope(db.session.query(model), model, decision.scope_filter)
            if decision.is_all_stores:
                query = query.order_by(model.store_id.asc(), model.created_at.asc())
            else:
                query = query.order_by(model.created_at.asc())
            tables.append((table, model_rows(query.all())))
        return tables

    def _store(self, decision) -> Store:
        store = db.session.query(Store).filter_by(id=decision.scope_filter).first()
        if not store:
            raise NotFound("Store not found")
        return store

    def export_store_data(self, store_id: str, fmt: str = "sql") -> dict:
        decision = self.require_read(store_id)
        fmt = _check_format(fmt)

        with storage_errors("export store data"):
            store = self._store(decision)
            store_rows = model_rows([store])
            tables = self._tables(decision)

        now = self.clock()
        generated_at = to_utc_z(now)

        if fmt == "sql":
            parts = [
                f"-- Database Backup for {store.name}\n",
                f"-- Generated on: {generated_at}\n",
                f"-- Store ID: {store.id}\n\n",
                TABLE_STRUCTURE_SQL,
                "-- Store Data\n",
                generate_insert_statements("stores", store_rows),
                "\n",
            ]
            for table, rows in tables:
                if rows:
                    parts.append(f"-- {table.capitalize()} Data\n")
                    parts.append(generate_insert_statements(table, rows))
                    parts.append("\n")
            data = "".join(parts)
        else:
            data = {"store.csv": rows_to_csv(_without(store_rows, CSV_EXCLUDED_COLUMNS["stores"]))}
            for table, rows in tables:
                if rows:
                    data[f"{table}.csv"] = rows_to_csv(rows)
            data["README.txt"] = _csv_readme(
                f"Database Backup - {store.name}",
                generated_at,
                [f"Store ID: {store.id}", f"Store Name: {store.name}"],
                [
                    "store.csv: Store information",
                    "customers.csv: Customer records",
                    "checkups.csv: Eye checkup records",
                    "orders.csv: Order records",
                ],
            )

        return {
            "data": data,
            "filename": backup_filename(store.name, fmt, now),
            "store_name": store.name,
            "timestamp": generated_at,
            "format": fmt,
        }

    def export_all_data(self, fmt: str = "sql") -> dict:
        decision = self.require_all_stores()
        fmt = _check_format(fmt)

        with storage_errors("export all data"):
            store_rows = model_rows(db.session.query(Store).order_by(Store.created_at.asc()).all())
            tables = self._tables(decision)

        now = self.clock()
        generated_at = to_utc_z(now)

        if fmt == "sql":
            parts = [
                "-- Complete Database Backup - All Stores\n",
                f"-- Generated on: {generated_at}\n\n",
                TABLE_STRUCTURE_SQL,
            ]
            for table, rows in [("stores", store_rows), *tables]:
                if rows:
                    parts.append(f"-- All {table.capitalize()} Data\n")
                    parts.append(generate_insert_statements(table, rows))
                    parts.append("\n")
            data = "".join(parts)
        else:
            data = {}
            if store_rows:
                data["stores.csv"] = rows_to_csv(_without(store_rows, CSV_EXCLUDED_COLUMNS["stores"]))
            for table, rows in tables:
                if rows:
                    data[f"{table}.csv"] = rows_to_csv(rows)
            data["README.txt"] = _csv_readme(
                "Complete Database Backup - All Stores",
                generated_at,
                ["Scope: All stores and their data"],
                [
                    "stores.csv: All store information",
                    "customers.csv: All customer records",
                    "checkups.csv: All eye checkup records",
                    "orders.csv: All order records",
                ],
            )

        return {
            "data": data,
            "filename": backup_filename("all_stores", fmt, now),
            "timestamp": generated_at,
            "format": fmt,
            "scope": "all_stores",
        }

    def _counts(self, decision) -> dict:
        return {
            table: with_store_scope(db.session.query(model), model, decision.scope_filter).count()
            for table, model in EXPORT_TABLES
        }

    def get_backup_stats(self, store_id: str) -> dict:
        decision = self.require_read(store_id)
        with storage_errors("count store records"):
            store = self._store(decision)
            stats = {"store_id": store.id, "store_name": store.name, **self._counts(decision)}
        stats["total_records"] = sum(stats[table] for table, _ in EXPORT_TABLES)
        return stats

    def get_all_backup_stats(self) -> dict:
        decision = self.require_all_stores()
        with storage_errors("count all records"):
            stats = {"stores": db.session.query(Store).count(), **self._counts(decision)}
        stats["total_records"] = sum(stats.values())
        return stats
