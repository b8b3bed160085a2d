"""
ORM model for check locations.

Each location carries a QR payload bound to it at creation time. The
payload is never regenerated, so printed codes stay valid for the
lifetime of the location.
"""

from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from . import Base


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255))
    building: Mapped[str | None] = mapped_column(String(32), nullable=True)  # West Building / East Building
    qr_code_data: Mapped[str] = mapped_column(String(512), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
