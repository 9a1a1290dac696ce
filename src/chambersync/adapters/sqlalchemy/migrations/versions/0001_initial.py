"""Initial schema: chambers, member mirror, sync runs, claims, merchants.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamp(name: str, *, nullable: bool = False) -> sa.Column[object]:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def _enum(name: str) -> sa.Column[object]:
    return sa.Column(name, sa.String(32), nullable=False)


def upgrade() -> None:
    op.create_table(
        "chamber",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("chambermaster_association_id", sa.String(), nullable=True),
        sa.Column("chambermaster_api_key", sa.String(), nullable=True),
        sa.Column("chambermaster_base_url", sa.String(), nullable=True),
        sa.Column("chambermaster_sync_enabled", sa.Boolean(), nullable=False),
        _timestamp("chambermaster_last_sync_at", nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_chamber"),
        sa.UniqueConstraint("slug", name="uq_chamber_slug"),
    )

    op.create_table(
        "chamber_member",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chamber_id", sa.Uuid(), nullable=False),
        sa.Column("external_member_id", sa.String(), nullable=False),
        sa.Column("business_name", sa.String(), nullable=False),
        _enum("member_status"),
        sa.Column("member_status_code", sa.Integer(), nullable=True),
        sa.Column("contact_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("website_url", sa.String(), nullable=True),
        sa.Column("address_line1", sa.String(), nullable=True),
        sa.Column("address_line2", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("zip_code", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("is_claimed", sa.Boolean(), nullable=False),
        sa.Column("claimed_by", sa.Uuid(), nullable=True),
        _timestamp("claimed_at", nullable=True),
        _timestamp("last_synced_at", nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_chamber_member"),
        sa.ForeignKeyConstraint(
            ["chamber_id"],
            ["chamber.id"],
            name="fk_chamber_member_chamber_id_chamber",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "chamber_id",
            "external_member_id",
            name="uq_chamber_member_chamber_id_external_member_id",
        ),
    )

    op.create_table(
        "merchant",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chamber_id", sa.Uuid(), nullable=False),
        sa.Column("member_id", sa.Uuid(), nullable=True),
        sa.Column("business_name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("contact_email", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("website_url", sa.String(), nullable=True),
        sa.Column("address_line1", sa.String(), nullable=True),
        sa.Column("address_line2", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("zip_code", sa.String(), nullable=True),
        _enum("status"),
        _timestamp("approved_at", nullable=True),
        sa.Column("approved_by", sa.Uuid(), nullable=True),
        sa.Column("total_products", sa.Integer(), nullable=False),
        sa.Column("total_orders", sa.Integer(), nullable=False),
        sa.Column("total_revenue_cents", sa.Integer(), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_merchant"),
        sa.ForeignKeyConstraint(
            ["chamber_id"],
            ["chamber.id"],
            name="fk_merchant_chamber_id_chamber",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["chamber_member.id"],
            name="fk_merchant_member_id_chamber_member",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("slug", name="uq_merchant_slug"),
    )

    op.create_table(
        "profile",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        _enum("role"),
        sa.Column("chamber_id", sa.Uuid(), nullable=True),
        sa.Column("merchant_id", sa.Uuid(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_profile"),
        sa.ForeignKeyConstraint(
            ["chamber_id"],
            ["chamber.id"],
            name="fk_profile_chamber_id_chamber",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["merchant_id"],
            ["merchant.id"],
            name="fk_profile_merchant_id_merchant",
            ondelete="SET NULL",
        ),
    )

    op.create_table(
        "sync_run",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chamber_id", sa.Uuid(), nullable=False),
        _enum("sync_type"),
        _enum("status"),
        sa.Column("members_added", sa.Integer(), nullable=False),
        sa.Column("members_updated", sa.Integer(), nullable=False),
        sa.Column("members_deactivated", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        _timestamp("started_at"),
        _timestamp("completed_at", nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_sync_run"),
        sa.ForeignKeyConstraint(
            ["chamber_id"],
            ["chamber.id"],
            name="fk_sync_run_chamber_id_chamber",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_sync_run_chamber_started", "sync_run", ["chamber_id", "started_at"])

    op.create_table(
        "claim_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chamber_id", sa.Uuid(), nullable=False),
        sa.Column("member_id", sa.Uuid(), nullable=False),
        sa.Column("requested_by", sa.Uuid(), nullable=False),
        sa.Column("contact_name", sa.String(), nullable=False),
        sa.Column("contact_email", sa.String(), nullable=False),
        sa.Column("contact_phone", sa.String(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        _enum("status"),
        sa.Column("resolved_by", sa.Uuid(), nullable=True),
        _timestamp("resolved_at", nullable=True),
        sa.Column("denial_reason", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_claim_request"),
        sa.ForeignKeyConstraint(
            ["chamber_id"],
            ["chamber.id"],
            name="fk_claim_request_chamber_id_chamber",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["chamber_member.id"],
            name="fk_claim_request_member_id_chamber_member",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["requested_by"],
            ["profile.id"],
            name="fk_claim_request_requested_by_profile",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_claim_request_requested_by_status",
        "claim_request",
        ["requested_by", "status"],
    )

    op.create_table(
        "notification",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("recipient_id", sa.Uuid(), nullable=False),
        _enum("type"),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(), nullable=True),
        sa.Column("claim_id", sa.Uuid(), nullable=True),
        sa.Column("merchant_id", sa.Uuid(), nullable=True),
        _timestamp("created_at"),
        _timestamp("read_at", nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_notification"),
        sa.ForeignKeyConstraint(
            ["recipient_id"],
            ["profile.id"],
            name="fk_notification_recipient_id_profile",
            ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    op.drop_table("notification")
    op.drop_index("ix_claim_request_requested_by_status", table_name="claim_request")
    op.drop_table("claim_request")
    op.drop_index("ix_sync_run_chamber_started", table_name="sync_run")
    op.drop_table("sync_run")
    op.drop_table("profile")
    op.drop_table("merchant")
    op.drop_table("chamber_member")
    op.drop_table("chamber")
