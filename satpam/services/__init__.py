"""
Service layer for the Satpam backend.

The checking-day window, schedule planner, attendance reconciler and
personnel directory are pure; the remaining modules wrap them with
database and storage I/O.
"""

from .attendance import reconcile
from .checking_day import checking_day_for_label, resolve_checking_day
from .directory import build_index
from .schedule_planner import plan

__all__ = ["reconcile", "checking_day_for_label", "resolve_checking_day", "build_index", "plan"]
