"""
Check location endpoints. Reads are open to every role; writes are admin only.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...core.auth import ROLE_ADMIN, UserContext, get_current_user, require_roles
from ...core.db import get_db
from ...models.location import Location
from ...schemas.location import LocationCreate, LocationResponse, LocationUpdate
from ...services import locations as location_service


router = APIRouter(prefix="/api/v1/locations", tags=["locations"])


@router.get("", response_model=List[LocationResponse])
def list_locations(
    building: str | None = Query(None),
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
) -> List[Location]:
    try:
        return location_service.list_locations(db, building=building)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/scan", response_model=LocationResponse)
def scan_location(
    qr: str = Query(..., min_length=1, description="Scanned QR payload"),
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
) -> Location:
    location = location_service.get_by_qr(db, qr)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.get("/{location_id}", response_model=LocationResponse)
def get_location(
    location_id: str,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
) -> Location:
    location = db.get(Location, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.post("", status_code=201, response_model=LocationResponse)
def create_location(
    payload: LocationCreate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> Location:
    try:
        return location_service.create_location(db, name=payload.name, building=payload.building)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{location_id}", response_model=LocationResponse)
def update_location(
    location_id: str,
    payload: LocationUpdate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> Location:
    location = db.get(Location, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    try:
        return location_service.update_location(db, location, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{location_id}")
def delete_location(
    location_id: str,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> dict:
    location = db.get(Location, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    location_service.delete_location(db, location)
    return {"status": "deleted", "id": location_id}
