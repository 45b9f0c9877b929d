# Overview: Flask CLI command groups for database bootstrap and store management.

# backend/optistore/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to optistore (PowerShell: $env:FLASK_APP="optistore").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Store management (runs as the configured super admin):
# - python -m flask stores list
#   List stores with customer/checkup/order counts.
# - python -m flask stores create --name "Main Street Optics" --pin 1234
#   Create a store (prompts for the PIN if omitted).
# - python -m flask stores set-pin --store-id <id> --pin 5678
#   Replace a store's PIN.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services.data_service import DataService
from .services.errors import ServiceError
from .services.session_service import SessionStore


def _super_admin_service() -> DataService:
    """A DataService holding a super admin session, for operator commands."""
    config = current_app.config
    sessions = SessionStore({})
    service = DataService(
        sessions,
        super_admin_username=config["SUPER_ADMIN_USERNAME"],
        super_admin_password_hash=config["SUPER_ADMIN_PASSWORD_HASH"],
        bcrypt_rounds=config["BCRYPT_ROUNDS"],
    )
    sessions.create_super_admin_session(config["SUPER_ADMIN_USERNAME"])
    return service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create any missing tables (existing data is kept)."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD  Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('stores')
def stores_group():
    """Store management commands."""


@stores_group.command('list')
@with_appcontext
def list_stores():
    """List all stores with their data counts."""
    service = _super_admin_service()
    summaries = service.admin.store_summaries()
    if not summaries:
        click.echo("No stores found")
        return

    for summary in summaries:
        click.echo(
            f"{summary['store_id']}  {summary['store_name']}  "
            f"customers={summary['customer_count']} "
            f"checkups={summary['checkup_count']} "
            f"orders={summary['order_count']}"
        )


@stores_group.command('create')
@click.option('--name', required=True, help='Store name')
@click.option('--pin', prompt=True, hide_input=True, confirmation_prompt=True, help='Store PIN (4-10 digits)')
@click.option('--address', default=None, help='Street address')
@click.option('--phone', default=None, help='Contact phone')
@click.option('--email', default=None, help='Contact email')
@with_appcontext
def create_store(name, pin, address, phone, email):
    """Create a store."""
    service = _super_admin_service()
    try:
        store = service.stores.create({
            "name": name,
            "pin": pin,
            "address": address,
            "phone": phone,
            "email": email,
        })
    except ServiceError as exc:
        raise click.ClickException(exc.message)

    click.echo(f"PASS Created store: {store.name} (ID: {store.id})")


@stores_group.command('set-pin')
@click.option('--store-id', required=True, help='Store ID')
@click.option('--pin', prompt=True, hide_input=True, confirmation_prompt=True, help='New PIN (4-10 digits)')
@with_appcontext
def set_store_pin(store_id, pin):
    """Replace a store's PIN."""
    service = _super_admin_service()
    try:
        store = service.stores.get_by_id(store_id)
        service.stores.update(store.id, {
            "name": store.name,
            "address": store.address,
            "phone": store.phone,
            "email": store.email,
            "pin": pin,
        })
    except ServiceError as exc:
        raise click.ClickException(exc.message)

    click.echo(f"PASS Updated PIN for store: {store.name}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(stores_group)
