"""Clean/dirty state machine shared by records and indexed sets."""

from __future__ import annotations

from enum import Enum


class EntityState(str, Enum):
    """Persistence state of an entity.

    Entities start DIRTY. Any mutation moves them to DIRTY; only a persist
    from DIRTY moves them to CLEAN.
    """

    CLEAN = "CLEAN"
    DIRTY = "DIRTY"
