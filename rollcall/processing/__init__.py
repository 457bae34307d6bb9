"""Ordering, name resolution and the reconciliation engine."""

from .collation import collation_key, sort_attendees, sort_names
from .name_resolution import resolve_name
from .reconciliation import ReconciliationEngine

__all__ = [
    "collation_key",
    "sort_attendees",
    "sort_names",
    "resolve_name",
    "ReconciliationEngine",
]
