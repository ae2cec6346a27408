"""Well-known event names emitted by records and indexed sets."""

from __future__ import annotations

CHANGE = "change"
PERSIST = "persist"
APPEND = "append"
REMOVE = "remove"


def field_change(field_name: str) -> str:
    """Return the per-field change event name, e.g. ``change:pk``."""
    return f"{CHANGE}:{field_name}"
