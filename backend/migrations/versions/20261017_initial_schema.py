"""Initial schema: stores, customers, checkups, orders, order sequences

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_initial"
down_revision = None
branch_labels = None
depends_on = None


MEASUREMENT_COLUMNS = (
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


def upgrade():
    op.create_table(
        "stores",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("pin_hash", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("stores", schema=None) as batch_op:
        batch_op.create_index("ix_stores_name", ["name"], unique=False)

    op.create_table(
        "order_sequences",
        sa.Column("store_id", sa.String(32), nullable=False),
        sa.Column("next_number", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("store_id"),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("store_id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "phone", name="uq_customers_store_phone"),
    )
    with op.batch_alter_table("customers", schema=None) as batch_op:
        batch_op.create_index("ix_customers_store_id", ["store_id"], unique=False)
        batch_op.create_index("ix_customers_store_created", ["store_id", "created_at"], unique=False)

    op.create_table(
        "checkups",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("store_id", sa.String(32), nullable=False),
        sa.Column("customer_id", sa.String(32), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        *[sa.Column(name, sa.String(16), nullable=True) for name in MEASUREMENT_COLUMNS],
        sa.Column("ipd_bridge", sa.String(64), nullable=True),
        sa.Column("tested_by", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("checkups", schema=None) as batch_op:
        batch_op.create_index("ix_checkups_store_id", ["store_id"], unique=False)
        batch_op.create_index("ix_checkups_customer_id", ["customer_id"], unique=False)
        batch_op.create_index("ix_checkups_store_customer", ["store_id", "customer_id"], unique=False)
        batch_op.create_index("ix_checkups_store_date", ["store_id", "date"], unique=False)

    op.create_table(
        "orders",
        sa.Column("store_id", sa.String(32), nullable=False),
        sa.Column("id", sa.String(16), nullable=False),
        sa.Column("customer_id", sa.String(32), nullable=False),
        sa.Column("checkup_id", sa.String(32), nullable=True),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("expected_delivery_date", sa.Date(), nullable=True),
        sa.Column("delivered_date", sa.Date(), nullable=True),
        sa.Column("frame", sa.String(255), nullable=True),
        sa.Column("lenses", sa.String(255), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("advance_amount", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("balance_amount", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'processing', 'ready', 'delivered', 'cancelled')",
            name="ck_orders_status",
        ),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.ForeignKeyConstraint(["checkup_id"], ["checkups.id"]),
        sa.PrimaryKeyConstraint("store_id", "id"),
    )
    with op.batch_alter_table("orders", schema=None) as batch_op:
        batch_op.create_index("ix_orders_status", ["status"], unique=False)
        batch_op.create_index("ix_orders_store_order_date", ["store_id", "order_date"], unique=False)
        batch_op.create_index("ix_orders_store_customer", ["store_id", "customer_id"], unique=False)
        batch_op.create_index("ix_orders_store_checkup", ["store_id", "checkup_id"], unique=False)


def downgrade():
    op.drop_table("orders")
    op.drop_table("checkups")
    op.drop_table("customers")
    op.drop_table("order_sequences")
    op.drop_table("stores")
