from __future__ import annotations

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from portal.database import Base, TimestampMixin, UpdatedAtMixin, UuidPrimaryKeyMixin
from portal.tenant.models import Tenant


class ReportWeekStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class ReportWeek(UuidPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "report_week"

    tenant_id = Column(
        UUID(as_uuid=True),
        ForeignKey("tenant.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    week_ending_date = Column(Date, nullable=False)
    period_start_at = Column(DateTime(timezone=True), nullable=False)
    period_end_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(
        Enum(
            ReportWeekStatus,
            name="report_week_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ReportWeekStatus.DRAFT,
    )
    published_at = Column(DateTime(timezone=True), nullable=True)
    published_by = Column(UUID(as_uuid=True), nullable=True)

    tenant = relationship(Tenant, back_populates="report_weeks")
    manual = relationship(
        "ReportWeekManual",
        back_populates="report_week",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        # Weeks of one tenant are derived from distinct Fridays in a single zone, so this is the
        # portable backstop for concurrent creates; PostgreSQL adds a gist exclusion on the range.
        UniqueConstraint("tenant_id", "week_ending_date", name="uq_report_week_tenant_week_ending"),
        CheckConstraint("period_start_at < period_end_at", name="ck_report_week_period_order"),
        CheckConstraint(
            "(status = 'published' AND published_at IS NOT NULL AND published_by IS NOT NULL)"
            " OR (status = 'draft' AND published_at IS NULL AND published_by IS NULL)",
            name="ck_report_week_publish_fields",
        ),
        Index("ix_report_week_status", "status"),
    )

    @property
    def is_draft(self) -> bool:
        return self.status == ReportWeekStatus.DRAFT


class ReportWeekManual(UuidPrimaryKeyMixin, UpdatedAtMixin, Base):
    __tablename__ = "report_week_manual"

    report_week_id = Column(
        UUID(as_uuid=True),
        ForeignKey("report_week.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    narrative = Column(Text, nullable=True)
    initiatives = Column(Text, nullable=True)
    needs = Column(Text, nullable=True)
    discovery_days = Column(Text, nullable=True)

    report_week = relationship(ReportWeek, back_populates="manual")
