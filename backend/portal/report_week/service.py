from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import List
from uuid import UUID

from sqlalchemy import extract
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portal.common.exceptions import (
    ApiException,
    ConflictError,
    InternalError,
    NotFoundError,
    StateError,
    ValidationError,
)
from portal.common.time import utcnow
from portal.report_week.dates import parse_week_ending_date, week_ending_date_string
from portal.report_week.models import ReportWeek, ReportWeekManual, ReportWeekStatus
from portal.report_week.overlap import has_overlap
from portal.report_week.periods import Period, calculate_period
from portal.report_week.schemas import (
    ReportWeekListResponse,
    ReportWeekManualResponse,
    ReportWeekManualUpdateRequest,
    ReportWeekResponse,
    ReportWeekUpdateRequest,
)
from portal.tenant.service import TenantService

logger = logging.getLogger(__name__)

OVERLAP_MESSAGE = "A report week already exists that overlaps with this date range"


def parse_status(value: str | ReportWeekStatus, message: str = "Invalid status value") -> ReportWeekStatus:
    try:
        return ReportWeekStatus(value)
    except ValueError:
        raise ValidationError(message, details={"status": str(value)}) from None


def period_for(friday: date, timezone_name: str) -> Period:
    try:
        return calculate_period(friday, timezone_name)
    except OverflowError:
        # Monday 00:00 or Friday 23:59:59 local lands outside the representable UTC year range.
        raise ValidationError(
            "Selected date is out of range",
            details={"weekEndingDate": week_ending_date_string(friday)},
        ) from None


@contextmanager
def write_transaction(db: Session, action: str, *, conflict_message: str | None = None) -> Iterator[None]:
    """Commit the block as one unit or roll it back entirely.

    Business errors raised inside the block release the transaction unchanged.
    Constraint violations become `ConflictError` when `conflict_message` is
    given; any other persistence failure is logged and surfaced as an opaque
    `InternalError`.
    """
    try:
        yield
        db.commit()
    except ApiException:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is None:
            logger.exception("report_week_integrity_error action=%s", action)
            raise InternalError() from exc
        logger.warning("report_week_conflict action=%s error=%s", action, exc.orig)
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("report_week_persistence_error action=%s", action)
        raise InternalError() from exc


class ReportWeekService:
    def __init__(self, db: Session):
        self.db = db
        self.tenant_service = TenantService(db)

    def find_by_id(self, id: UUID, tenant_id: UUID | None = None, *, for_update: bool = False) -> ReportWeek:
        query = self.db.query(ReportWeek).filter(ReportWeek.id == id)
        if tenant_id is not None:
            query = query.filter(ReportWeek.tenant_id == tenant_id)
        if for_update:
            # Re-read under a row lock so publish and content edits serialize.
            query = query.with_for_update().populate_existing()
        report_week = query.first()
        if not report_week:
            raise NotFoundError(f"Report week not found: {id}")
        return report_week

    def list_report_weeks(
        self,
        tenant_id: UUID,
        *,
        status: str | ReportWeekStatus | None = None,
        year: int | None = None,
        month: int | None = None,
        page: int = 0,
        size: int = 20,
    ) -> ReportWeekListResponse:
        self.tenant_service.find_by_id(tenant_id)

        query = self.db.query(ReportWeek).filter(ReportWeek.tenant_id == tenant_id)
        if status is not None:
            query = query.filter(ReportWeek.status == parse_status(status, "Invalid status filter"))
        if year is not None:
            query = query.filter(extract("year", ReportWeek.week_ending_date) == year)
        if month is not None:
            if not 1 <= month <= 12:
                raise ValidationError("Invalid month filter", details={"month": month})
            query = query.filter(extract("month", ReportWeek.week_ending_date) == month)

        total = query.count()
        items = (
            query.order_by(ReportWeek.week_ending_date.desc())
            .offset(page * size)
            .limit(size)
            .all()
        )
        return ReportWeekListResponse(
            items=[ReportWeekResponse.model_validate(r) for r in items],
            total=total,
            page=page,
            size=size,
        )

    def list_published_years(self, tenant_id: UUID) -> List[int]:
        self.tenant_service.find_by_id(tenant_id)

        year = extract("year", ReportWeek.week_ending_date).label("year")
        rows = (
            self.db.query(year)
            .filter(
                ReportWeek.tenant_id == tenant_id,
                ReportWeek.status == ReportWeekStatus.PUBLISHED,
            )
            .distinct()
            .order_by(year.desc())
            .all()
        )
        return [int(row.year) for row in rows]

    def create(self, tenant_id: UUID, week_ending_date: str) -> ReportWeek:
        friday = parse_week_ending_date(week_ending_date)

        with write_transaction(self.db, "create", conflict_message=OVERLAP_MESSAGE):
            tenant = self.tenant_service.find_by_id(tenant_id)
            period = period_for(friday, tenant.timezone)

            # Fast path for a readable error; the unique constraint is the real guard.
            if has_overlap(self.db, tenant.id, period.start, period.end):
                raise ConflictError(OVERLAP_MESSAGE, details={"weekEndingDate": week_ending_date_string(friday)})

            report_week = ReportWeek(
                tenant_id=tenant.id,
                week_ending_date=friday,
                period_start_at=period.start,
                period_end_at=period.end,
                status=ReportWeekStatus.DRAFT,
            )
            self.db.add(report_week)
            self.db.flush()
            self.db.add(ReportWeekManual(report_week_id=report_week.id))
            self.db.flush()

        self.db.refresh(report_week)
        logger.info(
            "report_week_created tenant_id=%s id=%s week_ending_date=%s timezone=%s",
            tenant.id,
            report_week.id,
            friday,
            tenant.timezone,
        )
        return report_week

    def update(
        self,
        id: UUID,
        request: ReportWeekUpdateRequest,
        acting_user_id: UUID | None = None,
        tenant_id: UUID | None = None,
    ) -> ReportWeek:
        target_status = parse_status(request.status) if request.status is not None else None

        with write_transaction(self.db, "update", conflict_message=OVERLAP_MESSAGE):
            report_week = self.find_by_id(id, tenant_id, for_update=True)
            if request.week_ending_date is not None:
                self._apply_date_edit(report_week, request.week_ending_date)
            if target_status is not None:
                self._apply_status(report_week, target_status, acting_user_id)

        self.db.refresh(report_week)
        return report_week

    def _apply_date_edit(self, report_week: ReportWeek, week_ending_date: str) -> None:
        if not report_week.is_draft:
            raise StateError("Only draft report weeks can be edited")

        friday = parse_week_ending_date(week_ending_date)
        timezone_name = self.tenant_service.get_timezone(report_week.tenant_id)
        period = period_for(friday, timezone_name)
        if has_overlap(self.db, report_week.tenant_id, period.start, period.end, exclude_id=report_week.id):
            raise ConflictError(OVERLAP_MESSAGE, details={"weekEndingDate": week_ending_date_string(friday)})

        report_week.week_ending_date = friday
        report_week.period_start_at = period.start
        report_week.period_end_at = period.end

    def _apply_status(
        self,
        report_week: ReportWeek,
        target: ReportWeekStatus,
        acting_user_id: UUID | None,
    ) -> None:
        current = ReportWeekStatus(report_week.status)
        if current == target:
            return

        if target == ReportWeekStatus.PUBLISHED:
            if acting_user_id is None:
                raise ValidationError("An acting user is required to publish a report week")
            report_week.published_at = utcnow()
            report_week.published_by = acting_user_id
        else:
            report_week.published_at = None
            report_week.published_by = None
        report_week.status = target

        logger.info(
            "report_week_status_changed id=%s from=%s to=%s actor=%s",
            report_week.id,
            current.value,
            target.value,
            acting_user_id,
        )

    def delete(self, id: UUID, tenant_id: UUID | None = None) -> bool:
        with write_transaction(self.db, "delete"):
            report_week = self.find_by_id(id, tenant_id, for_update=True)
            if not report_week.is_draft:
                raise StateError("Only draft report weeks can be deleted")
            self.db.delete(report_week)

        logger.info("report_week_deleted id=%s", id)
        return True


class ReportWeekManualService:
    """Narrative sidecar of a report week; writable only while the week is a draft."""

    def __init__(self, db: Session):
        self.db = db
        self.week_service = ReportWeekService(db)

    def _find_for(self, report_week: ReportWeek) -> ReportWeekManual:
        manual = (
            self.db.query(ReportWeekManual)
            .filter(ReportWeekManual.report_week_id == report_week.id)
            .first()
        )
        if not manual:
            raise NotFoundError(f"Manual content not found for report week: {report_week.id}")
        return manual

    @staticmethod
    def _to_response(report_week: ReportWeek, manual: ReportWeekManual) -> ReportWeekManualResponse:
        return ReportWeekManualResponse(
            report_week_id=report_week.id,
            narrative=manual.narrative,
            initiatives=manual.initiatives,
            needs=manual.needs,
            discovery_days=manual.discovery_days,
            report_week_status=report_week.status,
            updated_at=manual.updated_at,
        )

    def get(self, report_week_id: UUID, tenant_id: UUID | None = None) -> ReportWeekManualResponse:
        report_week = self.week_service.find_by_id(report_week_id, tenant_id)
        return self._to_response(report_week, self._find_for(report_week))

    def update(
        self,
        report_week_id: UUID,
        request: ReportWeekManualUpdateRequest,
        tenant_id: UUID | None = None,
    ) -> ReportWeekManualResponse:
        changes = request.changes()

        with write_transaction(self.db, "manual_update"):
            # The draft check and the write share one transaction and the week's row lock.
            report_week = self.week_service.find_by_id(report_week_id, tenant_id, for_update=True)
            if not report_week.is_draft:
                raise StateError("Cannot edit content for published report weeks")
            manual = self._find_for(report_week)
            for field, value in changes.items():
                setattr(manual, field, value)

        self.db.refresh(manual)
        logger.info(
            "report_week_manual_updated report_week_id=%s fields=%s",
            report_week_id,
            ",".join(sorted(changes)) or "-",
        )
        return self._to_response(report_week, manual)
