"""
Bootstrap seed for the first administrator account.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.auth import ROLE_ADMIN
from ..core.security import hash_password
from ..models.person import Person


def seed_admin_user(db: Session) -> None:
    logger = logging.getLogger("auth-seed")
    username = (os.getenv("SATPAM_ADMIN_USERNAME") or "admin").strip()
    password = (os.getenv("SATPAM_ADMIN_PASSWORD") or "").strip()

    if not username:
        logger.warning("Skipping admin seed: empty SATPAM_ADMIN_USERNAME")
        return
    if not password:
        logger.warning("Skipping admin seed: SATPAM_ADMIN_PASSWORD is empty")
        return

    existing = db.query(Person).filter(func.lower(Person.username) == username.lower()).first()
    if existing:
        if existing.role != ROLE_ADMIN or not existing.is_active:
            existing.role = ROLE_ADMIN
            existing.is_active = True
            db.add(existing)
            db.commit()
            logger.info("Restored admin role for %s", existing.username)
        return

    db.add(
        Person(
            username=username,
            password_hash=hash_password(password),
            first_name=(os.getenv("SATPAM_ADMIN_FIRST_NAME") or "Admin").strip(),
            last_name=(os.getenv("SATPAM_ADMIN_LAST_NAME") or "").strip(),
            role=ROLE_ADMIN,
            is_active=True,
        )
    )
    db.commit()
    logger.info("Seeded admin user %s", username)
