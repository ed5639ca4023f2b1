from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, computed_field, field_validator

from portal.common.schemas import CamelModel, OrmModel, PageResponse
from portal.common.time import ensure_utc
from portal.report_week.dates import week_period_label
from portal.report_week.models import ReportWeekStatus


class ReportWeekCreateRequest(CamelModel):
    # Parsed by the Friday gate in the service.
    week_ending_date: str = Field(..., min_length=1)


class ReportWeekUpdateRequest(CamelModel):
    week_ending_date: Optional[str] = None
    # Checked against ReportWeekStatus by the service.
    status: Optional[str] = None


class ReportWeekResponse(OrmModel):
    id: UUID
    tenant_id: UUID
    week_ending_date: date
    period_start_at: datetime
    period_end_at: datetime
    status: ReportWeekStatus
    published_at: datetime | None = None
    published_by: UUID | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("period_start_at", "period_end_at", "published_at", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @computed_field(alias="weekPeriod")
    @property
    def week_period(self) -> str:
        return week_period_label(self.week_ending_date)


class ReportWeekListResponse(PageResponse):
    items: list[ReportWeekResponse]


class ReportWeekManualUpdateRequest(CamelModel):
    narrative: Optional[str] = None
    initiatives: Optional[str] = None
    needs: Optional[str] = None
    discovery_days: Optional[str] = None

    def changes(self) -> dict[str, str | None]:
        # Only fields present in the payload are written; an explicit null clears the field.
        return self.model_dump(include=self.model_fields_set)


class ReportWeekManualResponse(OrmModel):
    report_week_id: UUID
    narrative: str | None = None
    initiatives: str | None = None
    needs: str | None = None
    discovery_days: str | None = None
    report_week_status: ReportWeekStatus
    updated_at: datetime

    @field_validator("updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
