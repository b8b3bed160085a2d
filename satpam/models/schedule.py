"""
ORM model for daily guard schedules.

One row means "this person must check this location on this date".
Rows for a (person, date) pair are written together by a single planner
entry. ``location_id`` deliberately has no foreign key: deleting a
location leaves its schedule rows behind as orphans.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import Base


class ScheduleEntry(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        UniqueConstraint("schedule_date", "person_id", "location_id", name="uq_schedules_date_person_location"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    schedule_date: Mapped[date] = mapped_column(Date, index=True)
    person_id: Mapped[str] = mapped_column(String(36), ForeignKey("persons.id", ondelete="CASCADE"), index=True)
    location_id: Mapped[str] = mapped_column(String(36), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    person: Mapped["Person"] = relationship("Person", back_populates="schedules")
