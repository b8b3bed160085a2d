"""
Check location management.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..models.location import Location
from .schedule_planner import parse_building_tag

logger = logging.getLogger("locations")


def build_qr_payload(location_id: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.public_base_url or "").rstrip("/")
    return f"{base}/scan-location?id={location_id}"


def _normalize_building(value: Optional[str]) -> Optional[str]:
    tag = parse_building_tag(value)
    return tag.value if tag else None


def create_location(db: Session, *, name: str, building: Optional[str] = None) -> Location:
    name = (name or "").strip()
    if not name:
        raise ValueError("name is required")
    location_id = str(uuid.uuid4())
    location = Location(
        id=location_id,
        name=name,
        building=_normalize_building(building),
        qr_code_data=build_qr_payload(location_id),
    )
    db.add(location)
    db.commit()
    db.refresh(location)
    logger.info("Location created id=%s building=%s", location.id, location.building)
    return location


def update_location(db: Session, location: Location, updates: dict) -> Location:
    # the QR payload is printed on site; it never changes
    if "name" in updates and updates["name"] is not None:
        name = str(updates["name"]).strip()
        if not name:
            raise ValueError("name cannot be empty")
        location.name = name
    if "building" in updates:
        location.building = _normalize_building(updates["building"])
    db.add(location)
    db.commit()
    db.refresh(location)
    return location


def delete_location(db: Session, location: Location) -> None:
    db.delete(location)
    db.commit()
    logger.info("Location deleted id=%s", location.id)


def list_locations(db: Session, *, building: Optional[str] = None) -> list[Location]:
    query = db.query(Location)
    if building:
        query = query.filter(Location.building == _normalize_building(building))
    return query.order_by(Location.name.asc()).all()


def get_by_qr(db: Session, qr_code_data: str) -> Optional[Location]:
    payload = (qr_code_data or "").strip()
    if not payload:
        return None
    return db.query(Location).filter(Location.qr_code_data == payload).first()
