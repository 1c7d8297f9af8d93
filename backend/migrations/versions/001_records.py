"""Record tables

Revision ID: 001_records
Revises:
Create Date: 2026-10-18

Creates the tables owned by this service:
- interventions: field-maintenance activity records
- reclamations: station complaint/incident records

The identity tables (user, session, account, ...) belong to the
authentication service and are not managed here.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001_records"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # =========================
    # Interventions Table
    # =========================
    op.create_table(
        "interventions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False, server_default="N/A"),
        sa.Column("start_date", sa.DateTime, nullable=False),
        sa.Column("end_date", sa.DateTime, nullable=False),
        sa.Column("entreprise_name", sa.String(255), nullable=False),
        sa.Column("responsable", sa.String(255), nullable=False),
        sa.Column("team_members", postgresql.JSONB, nullable=False),
        sa.Column("site_name", sa.String(255), nullable=False),
        sa.Column("photo_url", sa.Text, nullable=True),
        sa.Column("recipient_emails", postgresql.JSONB, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.text("(NOW() AT TIME ZONE 'utc')"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.text("(NOW() AT TIME ZONE 'utc')"),
        ),
        sa.CheckConstraint("end_date >= start_date", name="ck_interventions_period"),
    )

    op.create_index("ix_interventions_user_id", "interventions", ["user_id"])
    op.create_index("ix_interventions_created_at", "interventions", ["created_at"])

    # =========================
    # Reclamations Table
    # =========================
    op.create_table(
        "reclamations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("date", sa.DateTime, nullable=False),
        sa.Column("station_name", sa.String(255), nullable=False),
        sa.Column("reclamation_type", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("photo_url", sa.Text, nullable=True),
        sa.Column("recipient_emails", postgresql.JSONB, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.text("(NOW() AT TIME ZONE 'utc')"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.text("(NOW() AT TIME ZONE 'utc')"),
        ),
    )

    op.create_index("ix_reclamations_user_id", "reclamations", ["user_id"])
    op.create_index("ix_reclamations_created_at", "reclamations", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_reclamations_created_at", table_name="reclamations")
    op.drop_index("ix_reclamations_user_id", table_name="reclamations")
    op.drop_table("reclamations")

    op.drop_index("ix_interventions_created_at", table_name="interventions")
    op.drop_index("ix_interventions_user_id", table_name="interventions")
    op.drop_table("interventions")
