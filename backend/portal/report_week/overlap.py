from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, exists, select
from sqlalchemy.orm import Session

from portal.report_week.models import ReportWeek


def periods_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open intervals `[start, end)` overlap iff each starts before the other ends.

    Back-to-back weeks (Friday 23:59:59 end, Monday 00:00:00 start) do not overlap.
    """
    return start_a < end_b and start_b < end_a


def has_overlap(
    db: Session,
    tenant_id: UUID,
    period_start: datetime,
    period_end: datetime,
    exclude_id: UUID | None = None,
) -> bool:
    conditions = [
        ReportWeek.tenant_id == tenant_id,
        ReportWeek.period_start_at < period_end,
        ReportWeek.period_end_at > period_start,
    ]
    # The record being edited must not collide with itself.
    if exclude_id is not None:
        conditions.append(ReportWeek.id != exclude_id)

    return bool(db.execute(select(exists().where(and_(*conditions)))).scalar())
