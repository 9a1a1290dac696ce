"""SQLAlchemy mapping metadata for the chambersync domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from chambersync.domain.model import (
    Chamber,
    ChamberMember,
    ClaimRequest,
    ClaimStatus,
    MemberStatus,
    Merchant,
    MerchantStatus,
    Notification,
    NotificationType,
    Profile,
    SyncRun,
    SyncRunStatus,
    SyncType,
    UserRole,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Tenants and users -----------------------------------------------------------

chamber_table = Table(
    "chamber",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("slug", String, nullable=False, unique=True),
    Column("chambermaster_association_id", String, nullable=True),
    Column("chambermaster_api_key", String, nullable=True),
    Column("chambermaster_base_url", String, nullable=True),
    Column("chambermaster_sync_enabled", Boolean, nullable=False, default=False),
    Column("chambermaster_last_sync_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

profile_table = Table(
    "profile",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("email", String, nullable=False),
    Column("role", Enum(UserRole, native_enum=False, length=32), nullable=False),
    Column(
        "chamber_id",
        UUIDColumnType,
        ForeignKey("chamber.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "merchant_id",
        UUIDColumnType,
        ForeignKey("merchant.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False),
)

# Directory mirror ------------------------------------------------------------

chamber_member_table = Table(
    "chamber_member",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "chamber_id",
        UUIDColumnType,
        ForeignKey("chamber.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("external_member_id", String, nullable=False),
    Column("business_name", String, nullable=False),
    Column("member_status", Enum(MemberStatus, native_enum=False, length=32), nullable=False),
    Column("member_status_code", Integer, nullable=True),
    Column("contact_name", String, nullable=True),
    Column("email", String, nullable=True),
    Column("phone", String, nullable=True),
    Column("website_url", String, nullable=True),
    Column("address_line1", String, nullable=True),
    Column("address_line2", String, nullable=True),
    Column("city", String, nullable=True),
    Column("state", String, nullable=True),
    Column("zip_code", String, nullable=True),
    Column("category", String, nullable=True),
    Column("is_claimed", Boolean, nullable=False, default=False),
    # no FK to profile: profile -> merchant -> chamber_member would close a cycle
    Column("claimed_by", UUIDColumnType, nullable=True),
    Column("claimed_at", UTCDateTime(), nullable=True),
    Column("last_synced_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("chamber_id", "external_member_id"),
)

sync_run_table = Table(
    "sync_run",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "chamber_id",
        UUIDColumnType,
        ForeignKey("chamber.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("sync_type", Enum(SyncType, native_enum=False, length=32), nullable=False),
    Column("status", Enum(SyncRunStatus, native_enum=False, length=32), nullable=False),
    Column("members_added", Integer, nullable=False, default=0),
    Column("members_updated", Integer, nullable=False, default=0),
    Column("members_deactivated", Integer, nullable=False, default=0),
    Column("error_message", Text, nullable=True),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("completed_at", UTCDateTime(), nullable=True),
    Index("ix_sync_run_chamber_started", "chamber_id", "started_at"),
)

# Claims and merchants --------------------------------------------------------

merchant_table = Table(
    "merchant",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "chamber_id",
        UUIDColumnType,
        ForeignKey("chamber.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "member_id",
        UUIDColumnType,
        ForeignKey("chamber_member.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("business_name", String, nullable=False),
    Column("slug", String, nullable=False, unique=True),
    Column("contact_email", String, nullable=False),
    Column("phone", String, nullable=True),
    Column("website_url", String, nullable=True),
    Column("address_line1", String, nullable=True),
    Column("address_line2", String, nullable=True),
    Column("city", String, nullable=True),
    Column("state", String, nullable=True),
    Column("zip_code", String, nullable=True),
    Column("status", Enum(MerchantStatus, native_enum=False, length=32), nullable=False),
    Column("approved_at", UTCDateTime(), nullable=True),
    Column("approved_by", UUIDColumnType, nullable=True),
    Column("total_products", Integer, nullable=False, default=0),
    Column("total_orders", Integer, nullable=False, default=0),
    Column("total_revenue_cents", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False),
)

claim_request_table = Table(
    "claim_request",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "chamber_id",
        UUIDColumnType,
        ForeignKey("chamber.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "member_id",
        UUIDColumnType,
        ForeignKey("chamber_member.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "requested_by",
        UUIDColumnType,
        ForeignKey("profile.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("contact_name", String, nullable=False),
    Column("contact_email", String, nullable=False),
    Column("contact_phone", String, nullable=True),
    Column("message", Text, nullable=True),
    Column("status", Enum(ClaimStatus, native_enum=False, length=32), nullable=False),
    Column("resolved_by", UUIDColumnType, nullable=True),
    Column("resolved_at", UTCDateTime(), nullable=True),
    Column("denial_reason", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_claim_request_requested_by_status", "requested_by", "status"),
)

notification_table = Table(
    "notification",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "recipient_id",
        UUIDColumnType,
        ForeignKey("profile.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("type", Enum(NotificationType, native_enum=False, length=32), nullable=False),
    Column("title", String, nullable=False),
    Column("message", Text, nullable=False),
    Column("link", String, nullable=True),
    Column("claim_id", UUIDColumnType, nullable=True),
    Column("merchant_id", UUIDColumnType, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("read_at", UTCDateTime(), nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Chamber, chamber_table)
    mapper_registry.map_imperatively(Profile, profile_table)
    mapper_registry.map_imperatively(ChamberMember, chamber_member_table)
    mapper_registry.map_imperatively(SyncRun, sync_run_table)
    mapper_registry.map_imperatively(Merchant, merchant_table)
    mapper_registry.map_imperatively(ClaimRequest, claim_request_table)
    mapper_registry.map_imperatively(Notification, notification_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
