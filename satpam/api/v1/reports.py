"""
Check-area report endpoints: photo submission and report listings.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session

from ...core.auth import ROLE_ADMIN, ROLE_SUPERVISOR, UserContext, require_identity, require_roles
from ...core.db import get_db
from ...core.errors import StorageError
from ...core.pagination import clamp_page_size, paginate, set_pagination_headers
from ...core.request_limits import enforce_upload_limit, read_upload_bytes_async
from ...models.check_area_report import CheckAreaReport
from ...schemas.report import ReportResponse
from ...services import reports as report_service
from ...services.checking_day import as_utc, checking_day_for_label, format_local


router = APIRouter(prefix="/api/v1/reports", tags=["reports"])
logger = logging.getLogger("reports")


def _to_response(
    report: CheckAreaReport,
    *,
    person_names: dict[str, str] | None = None,
    location_names: dict[str, str] | None = None,
) -> ReportResponse:
    return ReportResponse(
        id=report.id,
        person_id=report.person_id,
        person_name=(person_names or {}).get(report.person_id),
        location_id=report.location_id,
        location_name=(location_names or {}).get(report.location_id),
        photo_url=report.photo_url,
        created_at=as_utc(report.created_at),
        created_at_local=format_local(report.created_at),
    )


def _list_reports(
    db: Session,
    response: Response,
    *,
    person_id: str | None,
    location_id: str | None,
    checking_day: date | None,
    start_utc: datetime | None,
    end_utc: datetime | None,
    page: int,
    page_size: int,
) -> List[ReportResponse]:
    if checking_day is not None:
        day = checking_day_for_label(checking_day)
        start_utc, end_utc = day.window_start_utc, day.window_end_utc
    else:
        start_utc = as_utc(start_utc) if start_utc else None
        end_utc = as_utc(end_utc) if end_utc else None
    page_size = clamp_page_size(page_size)
    query = report_service.reports_query(
        db,
        person_id=person_id,
        location_id=location_id,
        start_utc=start_utc,
        end_utc=end_utc,
    )
    rows, total = paginate(query, page=page, page_size=page_size)
    set_pagination_headers(response, total=total, page=page, page_size=page_size)
    people = report_service.person_names(db, (r.person_id for r in rows))
    places = report_service.location_names(db, (r.location_id for r in rows))
    return [_to_response(r, person_names=people, location_names=places) for r in rows]


@router.post("", status_code=201, response_model=ReportResponse)
async def submit_report(
    photo: UploadFile = File(...),
    location_id: str | None = Form(None),
    qr_code_data: str | None = Form(None),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_identity),
    _limit=Depends(enforce_upload_limit),
) -> ReportResponse:
    try:
        location = report_service.resolve_location(db, location_id=location_id, qr_code_data=qr_code_data)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    data = await read_upload_bytes_async(photo)
    try:
        report = report_service.submit_report(
            db,
            person_id=user.user_id,
            location=location,
            data=data,
            content_type=photo.content_type,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except StorageError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return _to_response(
        report,
        person_names=report_service.person_names(db, [report.person_id]),
        location_names={location.id: location.name},
    )


@router.get("", response_model=List[ReportResponse])
def list_reports(
    response: Response,
    person_id: str | None = Query(None),
    location_id: str | None = Query(None),
    checking_day: date | None = Query(None, description="Checking-day label, 06:00 to 06:00 local"),
    start_utc: datetime | None = Query(None),
    end_utc: datetime | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN, ROLE_SUPERVISOR)),
) -> List[ReportResponse]:
    return _list_reports(
        db,
        response,
        person_id=person_id,
        location_id=location_id,
        checking_day=checking_day,
        start_utc=start_utc,
        end_utc=end_utc,
        page=page,
        page_size=page_size,
    )


@router.get("/mine", response_model=List[ReportResponse])
def list_my_reports(
    response: Response,
    checking_day: date | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_identity),
) -> List[ReportResponse]:
    return _list_reports(
        db,
        response,
        person_id=user.user_id,
        location_id=None,
        checking_day=checking_day,
        start_utc=None,
        end_utc=None,
        page=page,
        page_size=page_size,
    )
