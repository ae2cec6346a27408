"""Name-keyed event bus with numeric subscription handles.

Usage:
    bus = EventBus()

    handle = bus.on("change", lambda: print("changed"))
    bus.trigger("change")
    bus.off("change", handle)

Callbacks receive no payload; consumers read state from the emitting entity.
"""

from __future__ import annotations

from collections.abc import Callable
import itertools
import logging
from typing import Protocol, runtime_checkable

from ..exceptions import TriggerDepthExceededError

LOGGER = logging.getLogger(__name__)

Callback = Callable[[], None]

DEFAULT_MAX_TRIGGER_DEPTH = 64


@runtime_checkable
class Observable(Protocol):
    """Anything that exposes the on/off/trigger notification contract."""

    def on(self, name: str, callback: Callback) -> int: ...

    def off(self, name: str, handle: int) -> None: ...

    def trigger(self, name: str) -> None: ...


def is_observable(value: object) -> bool:
    """Return True when ``value`` is an instance implementing ``Observable``."""
    return not isinstance(value, type) and isinstance(value, Observable)


class EventBus:
    """Synchronous publish/subscribe registry.

    Handles are drawn from a per-instance counter and never reused. Delivery
    iterates over a snapshot of the subscriber list taken when ``trigger``
    starts, so callbacks added mid-delivery wait for the next trigger while
    callbacks removed mid-delivery are skipped.
    """

    default_max_depth: int = DEFAULT_MAX_TRIGGER_DEPTH

    def __init__(self, max_depth: int | None = None) -> None:
        self.max_depth = max(1, max_depth or self.default_max_depth)
        self._handles = itertools.count(1)
        self._subscriptions: dict[str, list[int]] = {}
        self._callbacks: dict[int, Callback] = {}
        self._depth = 0

    @classmethod
    def set_default_max_depth(cls, max_depth: int) -> None:
        """Change the nesting limit used by buses created afterwards."""
        cls.default_max_depth = max(1, int(max_depth))

    def on(self, name: str, callback: Callback) -> int:
        """Register ``callback`` under ``name`` and return its handle."""
        handle = next(self._handles)
        self._subscriptions.setdefault(name, []).append(handle)
        self._callbacks[handle] = callback
        LOGGER.debug(
            "events.subscribed", extra={"event_name": name, "handle": handle}
        )
        return handle

    def off(self, name: str, handle: int) -> None:
        """Remove a subscription. Unknown names and handles are ignored."""
        handles = self._subscriptions.get(name)
        if not handles or handle not in handles:
            return
        handles.remove(handle)
        if not handles:
            del self._subscriptions[name]
        self._callbacks.pop(handle, None)
        LOGGER.debug(
            "events.unsubscribed", extra={"event_name": name, "handle": handle}
        )

    def trigger(self, name: str) -> None:
        """Call every callback registered for ``name``, in subscription order."""
        handles = list(self._subscriptions.get(name, ()))
        if not handles:
            return

        if self._depth >= self.max_depth:
            LOGGER.warning(
                "events.trigger.depth_exceeded",
                extra={"event_name": name, "max_depth": self.max_depth},
            )
            raise TriggerDepthExceededError(
                f"Nested trigger of {name!r} exceeded depth {self.max_depth}; "
                "check for cyclic subscriptions."
            )

        self._depth += 1
        try:
            for handle in handles:
                callback = self._callbacks.get(handle)
                if callback is None:
                    continue
                callback()
        finally:
            self._depth -= 1

    def has_subscribers(self, name: str) -> bool:
        """Return True when at least one callback listens on ``name``."""
        return bool(self._subscriptions.get(name))

    def subscriber_count(self, name: str) -> int:
        """Return the number of callbacks registered under ``name``."""
        return len(self._subscriptions.get(name, ()))

    def clear(self, name: str | None = None) -> None:
        """Drop subscriptions for ``name``, or every subscription when None."""
        if name is None:
            self._subscriptions.clear()
            self._callbacks.clear()
            return
        for handle in self._subscriptions.pop(name, []):
            self._callbacks.pop(handle, None)
