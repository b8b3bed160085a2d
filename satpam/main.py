"""
Entry point for the Satpam area-check backend.

This module creates the FastAPI application, includes all API routers
and mounts local evidence storage. Run with:

    uvicorn satpam.main:app --reload

"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .core.db import engine, SessionLocal
from .core.logging_config import setup_logging
from .models import Base
from .services.auth_seed import seed_admin_user
from .services.storage import LOCAL_MEDIA_PREFIX, default_local_root
from .scripts.run_migrations import run_migrations_to_head

from . import __version__
from .api import api_router
from .core.config import settings, get_app_env
from .core.errors import log_exception


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Satpam Area Check Backend", version=__version__)
    app.include_router(api_router)
    evidence_root = Path(settings.evidence_storage_dir).expanduser() if settings.evidence_storage_dir else default_local_root()
    if (settings.evidence_storage_backend or "local").lower() != "s3":
        app.mount(LOCAL_MEDIA_PREFIX, StaticFiles(directory=evidence_root, check_dir=False), name="evidence")

    @app.on_event("startup")
    def _init_db() -> None:
        logger = logging.getLogger("startup")
        env = get_app_env()
        evidence_root.mkdir(parents=True, exist_ok=True)
        if settings.auto_create_db:
            try:
                Base.metadata.create_all(bind=engine)
            except Exception as exc:
                log_exception(logger, "DB create_all failed", exc=exc)
                if env == "prod":
                    raise
        if settings.auto_run_migrations:
            try:
                run_migrations_to_head()
            except Exception as exc:
                log_exception(logger, "DB migrations failed", exc=exc)
                if env == "prod":
                    raise
        if settings.auto_seed_admin_user:
            try:
                with SessionLocal() as db:
                    seed_admin_user(db)
            except Exception as exc:
                log_exception(logger, "Seed admin user failed", exc=exc)
                if env == "prod":
                    raise
        logger.info("Startup complete env=%s storage=%s", env, settings.evidence_storage_backend)

    return app


app = create_app()
