"""initial schema

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "applications",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("secret_hash", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "boards",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "contestants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "fields",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "board_id",
            sa.Integer(),
            sa.ForeignKey("boards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("sort_descending", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("board_id", "name", name="uq_fields_board_name"),
    )
    op.create_index("ix_fields_board_id", "fields", ["board_id"])

    op.create_table(
        "entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "board_id",
            sa.Integer(),
            sa.ForeignKey("boards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "contestant_id",
            sa.Integer(),
            sa.ForeignKey("contestants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("context", sa.JSON(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("board_id", "contestant_id", name="uq_entries_board_contestant"),
    )
    op.create_index("ix_entries_board_id", "entries", ["board_id"])
    op.create_index("ix_entries_contestant_id", "entries", ["contestant_id"])

    op.create_table(
        "entry_values",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "entry_id",
            sa.Integer(),
            sa.ForeignKey("entries.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "field_id",
            sa.Integer(),
            sa.ForeignKey("fields.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("value", sa.Float(), nullable=False),
        sa.UniqueConstraint("entry_id", "field_id", name="uq_entry_values_entry_field"),
    )
    op.create_index("ix_entry_values_entry_id", "entry_values", ["entry_id"])
    op.create_index("ix_entry_values_field_id", "entry_values", ["field_id"])


def downgrade() -> None:
    op.drop_index("ix_entry_values_field_id", table_name="entry_values")
    op.drop_index("ix_entry_values_entry_id", table_name="entry_values")
    op.drop_table("entry_values")
    op.drop_index("ix_entries_contestant_id", table_name="entries")
    op.drop_index("ix_entries_board_id", table_name="entries")
    op.drop_table("entries")
    op.drop_index("ix_fields_board_id", table_name="fields")
    op.drop_table("fields")
    op.drop_table("contestants")
    op.drop_table("boards")
    op.drop_table("applications")
