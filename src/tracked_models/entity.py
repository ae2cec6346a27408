"""Base capability for event-emitting, persistable entities."""

from __future__ import annotations

import logging

from .events.bus import Callback, EventBus
from .events.names import PERSIST
from .state import EntityState

LOGGER = logging.getLogger(__name__)


class Entity:
    """Emit events through a private bus and track the clean/dirty state.

    Subclasses implement ``_snapshot`` to capture their current state as the
    persisted baseline.
    """

    def __init__(self) -> None:
        self._events = EventBus()
        self._dirty = True

    def on(self, name: str, callback: Callback) -> int:
        """Subscribe to an event on this entity and return the handle."""
        return self._events.on(name, callback)

    def off(self, name: str, handle: int) -> None:
        """Release a subscription obtained from ``on``."""
        self._events.off(name, handle)

    def trigger(self, name: str) -> None:
        """Emit ``name`` on this entity."""
        self._events.trigger(name)

    @property
    def dirty(self) -> bool:
        """Return True while there are changes since the last persist."""
        return self._dirty

    @property
    def state(self) -> EntityState:
        return EntityState.DIRTY if self._dirty else EntityState.CLEAN

    def _mark_dirty(self) -> None:
        self._dirty = True

    def _snapshot(self) -> None:
        raise NotImplementedError

    def persist(self) -> bool:
        """Capture the current state as the persisted baseline.

        Returns False without emitting anything when already clean. This only
        flips local state; storing the data anywhere is up to the caller.
        """
        if not self._dirty:
            return False

        self._snapshot()
        self._dirty = False
        LOGGER.debug(
            "entity.persisted", extra={"entity": type(self).__name__}
        )
        self.trigger(PERSIST)
        return True
