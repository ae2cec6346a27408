"""Event primitives shared by records and indexed sets."""

from .bus import Callback, EventBus, Observable, is_observable
from .names import APPEND, CHANGE, PERSIST, REMOVE, field_change

__all__ = [
    "APPEND",
    "CHANGE",
    "PERSIST",
    "REMOVE",
    "Callback",
    "EventBus",
    "Observable",
    "field_change",
    "is_observable",
]
