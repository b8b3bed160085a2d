"""
Personnel administration endpoints (admin only).
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ...core.auth import ROLE_ADMIN, ROLE_SUPERVISOR, UserContext, require_roles
from ...core.db import get_db
from ...core.pagination import clamp_page_size, paginate, set_pagination_headers
from ...models.person import Person
from ...schemas.person import PersonResponse, PersonUpdate
from ...services import personnel as personnel_service


router = APIRouter(prefix="/api/v1/personnel", tags=["personnel"])
logger = logging.getLogger("personnel")


@router.get("", response_model=List[PersonResponse])
def list_personnel(
    response: Response,
    role: str | None = Query(None),
    active_only: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN, ROLE_SUPERVISOR)),
) -> List[Person]:
    page_size = clamp_page_size(page_size)
    query = personnel_service.list_people(db, role=role, active_only=active_only)
    rows, total = paginate(query, page=page, page_size=page_size)
    set_pagination_headers(response, total=total, page=page, page_size=page_size)
    return rows


@router.get("/{person_id}", response_model=PersonResponse)
def get_person(
    person_id: str,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN, ROLE_SUPERVISOR)),
) -> Person:
    person = db.get(Person, person_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person


@router.put("/{person_id}", response_model=PersonResponse)
def update_person(
    person_id: str,
    payload: PersonUpdate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> Person:
    person = db.get(Person, person_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    try:
        return personnel_service.update_person(db, person, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{person_id}")
def delete_person(
    person_id: str,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> dict:
    person = db.get(Person, person_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    if user.user_id and user.user_id == person_id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    personnel_service.delete_person(db, person)
    return {"status": "deleted", "id": person_id}
