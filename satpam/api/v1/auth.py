"""
Authentication endpoints: login, registration and the caller's own profile.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...core.auth import ROLE_ADMIN, ROLE_GUARD, ROLES, UserContext, get_optional_user, require_identity
from ...core.db import get_db
from ...core.security import issue_access_token, verify_password
from ...models.person import Person
from ...schemas.person import PersonResponse, ProfileUpdate
from ...services import personnel as personnel_service


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class LoginIn(BaseModel):
    username: str
    password: str


class RegisterIn(BaseModel):
    username: str = Field(..., min_length=3, max_length=128)
    password: str = Field(..., min_length=6, max_length=256)
    first_name: str = Field("", max_length=128)
    last_name: str = Field("", max_length=128)
    id_number: str | None = Field(None, max_length=64)
    role: str | None = Field(default=None, max_length=32)


PRIVILEGED_ROLES = {"ADMIN", "SUPERVISOR"}


def _build_login_response(person: Person) -> dict:
    token = issue_access_token(user_id=person.id, username=person.username, role=person.role)
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": PersonResponse.model_validate(person).model_dump(mode="json"),
    }


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_db)) -> dict:
    username = payload.username.strip()
    if not username or not payload.password:
        raise HTTPException(status_code=400, detail="username and password are required")
    person = personnel_service.get_by_username(db, username)
    if not person or not person.is_active:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not verify_password(payload.password, person.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _build_login_response(person)


@router.post("/register")
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    requester: UserContext | None = Depends(get_optional_user),
) -> dict:
    username = payload.username.strip()
    if not username:
        raise HTTPException(status_code=400, detail="username is required")
    if " " in username:
        raise HTTPException(status_code=400, detail="username cannot contain spaces")

    if personnel_service.get_by_username(db, username):
        raise HTTPException(status_code=409, detail="Username already exists")

    total_people = db.query(func.count(Person.id)).scalar() or 0
    role = (payload.role or "").strip().upper() or ROLE_GUARD
    if role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role: {role}")

    # Bootstrap: first registered account becomes admin.
    if total_people == 0:
        role = ROLE_ADMIN
    elif role in PRIVILEGED_ROLES:
        if not requester or not requester.is_admin:
            raise HTTPException(status_code=403, detail="Only admin can create admin or supervisor users")

    person = personnel_service.create_person(
        db,
        username=username,
        password=payload.password,
        role=role,
        first_name=payload.first_name,
        last_name=payload.last_name,
        id_number=payload.id_number,
    )
    return _build_login_response(person)


def _load_self(db: Session, user: UserContext) -> Person:
    person = db.get(Person, user.user_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person


@router.get("/me", response_model=PersonResponse)
def get_me(db: Session = Depends(get_db), user: UserContext = Depends(require_identity)) -> Person:
    return _load_self(db, user)


@router.put("/me", response_model=PersonResponse)
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_identity),
) -> Person:
    person = _load_self(db, user)
    return personnel_service.update_profile(db, person, payload.model_dump(exclude_unset=True))
