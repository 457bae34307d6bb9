"""Attendance reconciliation between an official roster and meeting screenshots."""

__version__ = "0.1.0"
