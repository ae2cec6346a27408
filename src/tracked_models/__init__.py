"""Top-level package for tracked-models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import apply_config, load_config
    from .entity import Entity
    from .events import EventBus, Observable
    from .exceptions import (
        ConfigValidationError,
        DuplicateKeyError,
        IndexOutOfRangeError,
        NotFoundError,
        SchemaError,
        TrackedModelsError,
        TriggerDepthExceededError,
        UnknownFieldError,
    )
    from .fields import UNSET, FieldSpec
    from .indexed_set import IndexedSet
    from .logging_utils import configure_logging
    from .record import Record
    from .serialization import export_json, to_serializable
    from .state import EntityState

__all__ = [
    "ConfigValidationError",
    "DuplicateKeyError",
    "Entity",
    "EntityState",
    "EventBus",
    "FieldSpec",
    "IndexOutOfRangeError",
    "IndexedSet",
    "NotFoundError",
    "Observable",
    "Record",
    "SchemaError",
    "TrackedModelsError",
    "TriggerDepthExceededError",
    "UNSET",
    "UnknownFieldError",
    "apply_config",
    "configure_logging",
    "export_json",
    "load_config",
    "to_serializable",
]

_EXCEPTION_NAMES = {
    "ConfigValidationError",
    "DuplicateKeyError",
    "IndexOutOfRangeError",
    "NotFoundError",
    "SchemaError",
    "TrackedModelsError",
    "TriggerDepthExceededError",
    "UnknownFieldError",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols so pydantic/structlog load only when configuring."""
    if name in _EXCEPTION_NAMES:
        from . import exceptions

        return getattr(exceptions, name)
    if name in {"EventBus", "Observable"}:
        from . import events

        return getattr(events, name)
    if name == "Entity":
        from .entity import Entity

        return Entity
    if name == "EntityState":
        from .state import EntityState

        return EntityState
    if name in {"FieldSpec", "UNSET"}:
        from . import fields

        return getattr(fields, name)
    if name == "Record":
        from .record import Record

        return Record
    if name == "IndexedSet":
        from .indexed_set import IndexedSet

        return IndexedSet
    if name in {"export_json", "to_serializable"}:
        from . import serialization

        return getattr(serialization, name)
    if name in {"apply_config", "load_config"}:
        from . import config

        return getattr(config, name)
    if name == "configure_logging":
        from .logging_utils import configure_logging

        return configure_logging
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
