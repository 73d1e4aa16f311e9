"""create land journey tables

Revision ID: 7b2e4c1d9a30
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7b2e4c1d9a30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create user_lands, land_stage_records and land_documents."""
    op.create_table(
        "user_lands",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("transaction_id", sa.String(length=255), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("region", sa.String(length=255), nullable=True),
        sa.Column("district", sa.String(length=255), nullable=True),
        sa.Column("locality", sa.String(length=255), nullable=True),
        sa.Column("plot_number", sa.String(length=255), nullable=True),
        sa.Column("land_size", sa.Float(), nullable=True),
        sa.Column("land_size_unit", sa.String(length=50), nullable=False, server_default="acres"),
        sa.Column("gps_address", sa.String(length=255), nullable=True),
        sa.Column("coordinates", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("purchase_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("purchase_price", sa.Float(), nullable=True),
        sa.Column("seller_name", sa.String(length=255), nullable=True),
        sa.Column("seller_contact", sa.String(length=255), nullable=True),
        sa.Column("current_stage", sa.String(length=50), nullable=False, server_default="LAND_ACQUIRED"),
        sa.Column("journey_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("transaction_id"),
    )
    op.create_index(op.f("ix_user_lands_user_id"), "user_lands", ["user_id"], unique=False)

    op.create_table(
        "land_stage_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("land_id", sa.Uuid(), nullable=False),
        sa.Column("stage", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("engagement_id", sa.String(length=255), nullable=True),
        sa.Column("professional_id", sa.String(length=255), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["land_id"], ["user_lands.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("land_id", "stage", name="uq_land_stage"),
    )
    op.create_index(op.f("ix_land_stage_records_land_id"), "land_stage_records", ["land_id"], unique=False)

    op.create_table(
        "land_documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("land_id", sa.Uuid(), nullable=False),
        sa.Column("stage", sa.String(length=50), nullable=False),
        sa.Column("document_type", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("mime_type", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["land_id"], ["user_lands.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_land_documents_land_id"), "land_documents", ["land_id"], unique=False)


def downgrade() -> None:
    """Drop the land journey tables."""
    op.drop_index(op.f("ix_land_documents_land_id"), table_name="land_documents")
    op.drop_table("land_documents")
    op.drop_index(op.f("ix_land_stage_records_land_id"), table_name="land_stage_records")
    op.drop_table("land_stage_records")
    op.drop_index(op.f("ix_user_lands_user_id"), table_name="user_lands")
    op.drop_table("user_lands")
