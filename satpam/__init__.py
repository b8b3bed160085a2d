"""Satpam area-check backend: guard schedules, QR check-ins and compliance review."""

__version__ = "0.1.0"
