"""
SQLAlchemy model base class for the Satpam backend.

This package defines ORM models for personnel, check locations, daily
schedules and check-area reports. All models inherit from the
declarative `Base` defined here.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


from .person import Person  # noqa: E402,F401
from .location import Location  # noqa: E402,F401
from .schedule import ScheduleEntry  # noqa: E402,F401
from .check_area_report import CheckAreaReport  # noqa: E402,F401

__all__ = [
    "Base",
    "Person",
    "Location",
    "ScheduleEntry",
    "CheckAreaReport",
]
