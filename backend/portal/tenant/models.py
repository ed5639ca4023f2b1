from __future__ import annotations

import enum

from sqlalchemy import Column, Enum, String
from sqlalchemy.orm import relationship, validates

from portal.config import get_settings
from portal.database import Base, TimestampMixin, UuidPrimaryKeyMixin
from portal.report_week.periods import is_valid_timezone


def _default_timezone() -> str:
    return get_settings().default_timezone


class TenantStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Tenant(UuidPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "tenant"

    name = Column(String(255), nullable=False)
    timezone = Column(String(100), nullable=False, default=_default_timezone)
    status = Column(
        Enum(TenantStatus, name="tenant_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TenantStatus.ACTIVE,
    )

    report_weeks = relationship(
        "ReportWeek",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("timezone")
    def _validate_timezone(self, _key: str, value: str) -> str:
        # Zone names are checked once here so period calculation can trust them.
        if not is_valid_timezone(value):
            raise ValueError(f"Unknown IANA timezone: {value!r}")
        return value
