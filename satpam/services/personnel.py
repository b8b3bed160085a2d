"""
Personnel accounts: profile edits and removal.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.auth import ROLES
from ..core.security import hash_password
from ..models.person import Person

logger = logging.getLogger("personnel")

PROFILE_FIELDS = ("first_name", "last_name", "id_number")


def get_by_username(db: Session, username: str) -> Optional[Person]:
    return db.query(Person).filter(func.lower(Person.username) == username.strip().lower()).first()


def create_person(
    db: Session,
    *,
    username: str,
    password: str,
    role: str,
    first_name: str = "",
    last_name: str = "",
    id_number: Optional[str] = None,
) -> Person:
    role = role.strip().upper()
    if role not in ROLES:
        raise ValueError(f"Invalid role: {role}")
    person = Person(
        username=username.strip(),
        password_hash=hash_password(password),
        first_name=(first_name or "").strip(),
        last_name=(last_name or "").strip(),
        id_number=(id_number or "").strip() or None,
        role=role,
        is_active=True,
    )
    db.add(person)
    db.commit()
    db.refresh(person)
    logger.info("Person created id=%s role=%s", person.id, person.role)
    return person


def list_people(db: Session, *, role: Optional[str] = None, active_only: bool = False):
    query = db.query(Person)
    if role:
        query = query.filter(Person.role == role.strip().upper())
    if active_only:
        query = query.filter(Person.is_active.is_(True))
    return query.order_by(Person.first_name.asc(), Person.last_name.asc())


def update_profile(db: Session, person: Person, updates: dict) -> Person:
    for key in PROFILE_FIELDS:
        if key in updates and updates[key] is not None:
            value = str(updates[key]).strip()
            setattr(person, key, value or (None if key == "id_number" else ""))
    db.add(person)
    db.commit()
    db.refresh(person)
    return person


def update_person(db: Session, person: Person, updates: dict) -> Person:
    if updates.get("role") is not None:
        role = str(updates["role"]).strip().upper()
        if role not in ROLES:
            raise ValueError(f"Invalid role: {role}")
        person.role = role
    if updates.get("is_active") is not None:
        person.is_active = bool(updates["is_active"])
    if updates.get("password"):
        person.password_hash = hash_password(updates["password"])
    return update_profile(db, person, updates)


def delete_person(db: Session, person: Person) -> None:
    """Remove the account; schedules and reports go with it."""
    db.delete(person)
    db.commit()
    logger.info("Person deleted id=%s", person.id)
