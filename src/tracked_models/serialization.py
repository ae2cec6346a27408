"""Rendering helpers for the record/indexed-set serialization contract."""

from __future__ import annotations

import json
from typing import Any


def to_serializable(value: Any) -> Any:
    """Recursively convert entities inside ``value`` to plain data.

    Anything exposing ``to_serializable()`` is delegated to; lists, tuples and
    dicts are walked so entities nested inside them are converted as well.
    """
    convert = getattr(value, "to_serializable", None)
    if callable(convert) and not isinstance(value, type):
        return convert()
    if isinstance(value, (list, tuple)):
        return [to_serializable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_serializable(item) for key, item in value.items()}
    return value


def export_json(value: Any) -> str:
    """Render ``value`` as compact JSON with stable field ordering."""
    return json.dumps(
        to_serializable(value), ensure_ascii=False, separators=(",", ":"), sort_keys=False
    )
