"""
Health endpoint: liveness plus a database round trip.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.orm import Session

from ... import __version__
from ...core.config import get_app_env
from ...core.db import get_db
from ...core.errors import log_exception
from ...services.checking_day import resolve_checking_day


router = APIRouter(prefix="/api/v1/health", tags=["health"])
logger = logging.getLogger("health")


@router.get("")
def health(response: Response, db: Session = Depends(get_db)) -> dict:
    now = datetime.now(timezone.utc)
    db_ok = True
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        log_exception(logger, "Health DB ping failed", exc=exc)
        db_ok = False
        response.status_code = 503
    return {
        "status": "ok" if db_ok else "degraded",
        "database": db_ok,
        "env": get_app_env(),
        "version": __version__,
        "timestamp_utc": now.isoformat(),
        "checking_day": resolve_checking_day(now).label.isoformat(),
    }
