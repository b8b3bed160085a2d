import os
import tempfile
from pathlib import Path
from types import SimpleNamespace

# Lightweight local DB and storage; must be set before satpam is imported.
_TMP = Path(tempfile.mkdtemp(prefix="satpam-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite+pysqlite:///{_TMP / 'satpam_test.db'}")
os.environ.setdefault("AUTO_CREATE_DB", "true")
os.environ.setdefault("AUTO_RUN_MIGRATIONS", "false")
os.environ.setdefault("AUTO_SEED_ADMIN_USER", "false")
os.environ.setdefault("EVIDENCE_STORAGE_BACKEND", "local")
os.environ.setdefault("EVIDENCE_STORAGE_DIR", str(_TMP / "evidence"))
os.environ.setdefault("PUBLIC_BASE_URL", "https://satpam.example.test")
os.environ.setdefault("SATPAM_JWT_SECRET", "test-jwt-secret-strong-value-123456")
os.environ.setdefault("SATPAM_PASSWORD_HASH_ROUNDS", "1000")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from satpam.core.db import configure_sqlite, get_db
from satpam.core.security import hash_password
from satpam.main import create_app
from satpam.models import Base
from satpam.models.person import Person


@pytest.fixture()
def api():
    """A client bound to a private in-memory database."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    configure_sqlite(engine)
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    def _get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app = create_app()
    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as client:
        yield SimpleNamespace(client=client, Session=TestingSession)
    engine.dispose()


def add_person(Session, *, username, role="GUARD", first_name="", last_name="", password="secret123", is_active=True):
    with Session() as db:
        person = Person(
            username=username,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=is_active,
        )
        db.add(person)
        db.commit()
        return person.id


def as_user(person_id, role):
    """Dev-mode identity headers (SATPAM_AUTH_DISABLED=true)."""
    return {"X-User-Id": person_id, "X-User-Role": role}
