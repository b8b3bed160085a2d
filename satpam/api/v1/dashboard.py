"""
Dashboard endpoints.

``/today`` is the guard's own view of the current checking day; ``/audit``
is the reviewer view of every location for a chosen checking-day label.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.auth import ROLE_ADMIN, ROLE_SUPERVISOR, UserContext, require_identity, require_roles
from ...core.db import get_db
from ...schemas.report import DashboardResponse, LocationStatusOut
from ...services import reports as report_service
from ...services.checking_day import resolve_checking_day


router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


def _to_response(board: report_service.Dashboard) -> DashboardResponse:
    items = [
        LocationStatusOut(
            location_id=s.location.id,
            location_name=s.location.name,
            building=s.location.building,
            is_checked=s.is_checked,
            last_checked_at=s.last_checked_at,
            last_checked_at_utc=s.last_checked_at_utc,
            evidence_url=s.evidence_ref,
            reported_by=s.reported_by,
            reported_by_name=board.reporter_names.get(s.reported_by) if s.reported_by else None,
        )
        for s in board.statuses
    ]
    return DashboardResponse(
        checking_day=board.day.label,
        window_start_utc=board.day.window_start_utc,
        window_end_utc=board.day.window_end_utc,
        total=len(items),
        checked=sum(1 for item in items if item.is_checked),
        locations=items,
    )


@router.get("/today", response_model=DashboardResponse)
def my_checking_day(
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_identity),
) -> DashboardResponse:
    board = report_service.guard_dashboard(db, user.user_id, datetime.now(timezone.utc))
    return _to_response(board)


@router.get("/audit", response_model=DashboardResponse)
def audit_checking_day(
    checking_day: date | None = Query(None, description="Defaults to the current checking day"),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN, ROLE_SUPERVISOR)),
) -> DashboardResponse:
    label = checking_day or resolve_checking_day(datetime.now(timezone.utc)).label
    return _to_response(report_service.supervisor_dashboard(db, label))
