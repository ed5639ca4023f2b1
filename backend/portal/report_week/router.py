from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from portal.common.actor import get_acting_user_id
from portal.common.responses import ApiResponse
from portal.config import get_settings
from portal.database import get_db
from portal.report_week.schemas import (
    ReportWeekCreateRequest,
    ReportWeekManualUpdateRequest,
    ReportWeekResponse,
    ReportWeekUpdateRequest,
)
from portal.report_week.service import ReportWeekManualService, ReportWeekService

router = APIRouter(prefix="/api/tenants/{tenant_id}/report-weeks", tags=["report-weeks"])


def _dump(report_week) -> dict:  # noqa: ANN001
    return ReportWeekResponse.model_validate(report_week).model_dump(mode="json", by_alias=True)


@router.get("", response_model=ApiResponse)
def list_report_weeks(
    tenant_id: UUID,
    status: str | None = None,
    year: int | None = Query(default=None, ge=1, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse:
    size = min(size, get_settings().report_week_max_page_size)
    service = ReportWeekService(db)
    result = service.list_report_weeks(
        tenant_id,
        status=status,
        year=year,
        month=month,
        page=page,
        size=size,
    )
    return ApiResponse.ok(result.model_dump(mode="json", by_alias=True))


@router.post("", response_model=ApiResponse, status_code=201)
def create_report_week(
    tenant_id: UUID,
    request: ReportWeekCreateRequest,
    db: Session = Depends(get_db),
) -> ApiResponse:
    service = ReportWeekService(db)
    report_week = service.create(tenant_id, request.week_ending_date)
    return ApiResponse.ok(_dump(report_week))


@router.get("/years", response_model=ApiResponse)
def list_published_years(tenant_id: UUID, db: Session = Depends(get_db)) -> ApiResponse:
    service = ReportWeekService(db)
    return ApiResponse.ok(service.list_published_years(tenant_id))


@router.get("/{report_week_id}", response_model=ApiResponse)
def get_report_week(tenant_id: UUID, report_week_id: UUID, db: Session = Depends(get_db)) -> ApiResponse:
    service = ReportWeekService(db)
    report_week = service.find_by_id(report_week_id, tenant_id)
    return ApiResponse.ok(_dump(report_week))


@router.patch("/{report_week_id}", response_model=ApiResponse)
def update_report_week(
    tenant_id: UUID,
    report_week_id: UUID,
    request: ReportWeekUpdateRequest,
    acting_user_id: UUID | None = Depends(get_acting_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse:
    service = ReportWeekService(db)
    report_week = service.update(
        report_week_id,
        request,
        acting_user_id=acting_user_id,
        tenant_id=tenant_id,
    )
    return ApiResponse.ok(_dump(report_week))


@router.delete("/{report_week_id}", response_model=ApiResponse)
def delete_report_week(tenant_id: UUID, report_week_id: UUID, db: Session = Depends(get_db)) -> ApiResponse:
    service = ReportWeekService(db)
    deleted = service.delete(report_week_id, tenant_id)
    return ApiResponse.ok({"deleted": deleted}, "Report week deleted successfully")


@router.get("/{report_week_id}/manual", response_model=ApiResponse)
def get_manual_content(tenant_id: UUID, report_week_id: UUID, db: Session = Depends(get_db)) -> ApiResponse:
    service = ReportWeekManualService(db)
    content = service.get(report_week_id, tenant_id)
    return ApiResponse.ok(content.model_dump(mode="json", by_alias=True))


@router.patch("/{report_week_id}/manual", response_model=ApiResponse)
def update_manual_content(
    tenant_id: UUID,
    report_week_id: UUID,
    request: ReportWeekManualUpdateRequest,
    db: Session = Depends(get_db),
) -> ApiResponse:
    service = ReportWeekManualService(db)
    content = service.update(report_week_id, request, tenant_id)
    return ApiResponse.ok(content.model_dump(mode="json", by_alias=True))
