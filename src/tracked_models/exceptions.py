"""Domain exception hierarchy for tracked models."""

from __future__ import annotations


class TrackedModelsError(RuntimeError):
    """Base class for all tracked-model errors."""


class UnknownFieldError(TrackedModelsError):
    """Raised when a field name was never declared on the record type."""


class NotFoundError(TrackedModelsError):
    """Raised when no member matches the requested primary key."""


class IndexOutOfRangeError(TrackedModelsError):
    """Raised when positional access falls outside the current bounds."""


class DuplicateKeyError(TrackedModelsError):
    """Raised when two members of an indexed set would share a primary key."""


class SchemaError(TrackedModelsError):
    """Raised when a record type declares an invalid field schema."""


class TriggerDepthExceededError(TrackedModelsError):
    """Raised when nested event delivery exceeds the configured depth."""


class ConfigValidationError(TrackedModelsError):
    """Raised when configuration cannot be validated safely."""
