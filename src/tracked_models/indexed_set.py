"""Ordered, primary-key indexed collections of records.

Naming of the convenience methods:
- ``at``: select by position.
- ``get`` / ``*_by_key``: select by primary key.
- ``filter`` / ``*_where``: select with a ``(record) -> bool`` predicate.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
import logging
from typing import Any, Generic, TypeVar

from .entity import Entity
from .events.names import APPEND, CHANGE, REMOVE, field_change
from .exceptions import DuplicateKeyError, IndexOutOfRangeError, NotFoundError
from .record import Record
from .serialization import to_serializable

LOGGER = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


@dataclass
class _IndexEntry:
    """Position of a member plus the subscriptions the set holds on it."""

    record: Record
    position: int
    key: Any
    change_handle: int = 0
    pk_change_handle: int = 0


class IndexedSet(Entity, Generic[RecordT]):
    """Ordered set of records with O(1) lookup by primary key.

    A member's ``change`` marks the set dirty and is re-emitted as the set's
    own ``change``; a member's ``change:pk`` re-keys the index. The persisted
    snapshot covers membership only: each member keeps its own dirty state.
    """

    def __init__(self, records: Iterable[RecordT] = ()) -> None:
        super().__init__()
        self._items: list[RecordT] = []
        self._index: dict[Any, _IndexEntry] = {}
        self._persisted_keys: list[Any] = []
        for record in records:
            self.add(record)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(list(self._items))

    def __contains__(self, record: object) -> bool:
        if not isinstance(record, Record):
            return False
        entry = self._index.get(record.pk)
        return entry is not None and entry.record is record

    def __repr__(self) -> str:
        return f"{type(self).__name__}({[record.pk for record in self._items]!r})"

    @property
    def changed(self) -> list[Any]:
        """Member pks that were not present, unchanged, at the last persist."""
        return [
            record.pk
            for record in self._items
            if record.pk not in self._persisted_keys
        ]

    @property
    def persisted_keys(self) -> list[Any]:
        return list(self._persisted_keys)

    def all(self) -> list[RecordT]:
        """Return the members in order."""
        return list(self._items)

    def get(self, pk: Any) -> RecordT:
        """Return the member whose primary key is ``pk``."""
        return self._items[self._lookup(pk).position]

    def at(self, index: int) -> RecordT:
        """Return the member at ``index``; negative indices are rejected."""
        if not 0 <= index < len(self._items):
            raise IndexOutOfRangeError(
                f"Index {index} is outside [0, {len(self._items)})."
            )
        return self._items[index]

    def index_of(self, record: RecordT) -> int:
        return self._entry_for(record).position

    def filter(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        return [record for record in self._items if predicate(record)]

    def add(self, record: RecordT) -> Any:
        """Append ``record`` and return its primary key."""
        pk = record.pk
        if pk in self._index:
            LOGGER.warning(
                "indexed_set.add.duplicate_key",
                extra={"collection": type(self).__name__, "pk": repr(pk)},
            )
            raise DuplicateKeyError(f"{type(self).__name__} already holds pk {pk!r}.")

        entry = _IndexEntry(record=record, position=len(self._items), key=pk)
        entry.change_handle = record.on(CHANGE, self._member_change_handler(entry))
        entry.pk_change_handle = record.on(field_change("pk"), self._rebuild_index)
        self._items.append(record)
        self._index[pk] = entry
        self._mark_dirty()
        LOGGER.debug(
            "indexed_set.added",
            extra={"collection": type(self).__name__, "pk": repr(pk)},
        )

        self.trigger(CHANGE)
        self.trigger(APPEND)
        return pk

    def _member_change_handler(self, entry: _IndexEntry) -> Callable[[], None]:
        def handle_member_change() -> None:
            self._mark_dirty()
            # On a rename, entry.key still holds the pk the index knows.
            self._drop_persisted_key(entry.key)
            self.trigger(CHANGE)

        return handle_member_change

    def remove(self, record: RecordT) -> None:
        """Remove ``record``, releasing the subscriptions held on it."""
        entry = self._entry_for(record)
        remaining = [item for item in self._items if item is not record]

        # Later members shifted down by one.
        self._rebuild_index(remaining)
        self._drop_persisted_key(entry.key)
        record.off(CHANGE, entry.change_handle)
        record.off(field_change("pk"), entry.pk_change_handle)
        self._mark_dirty()
        LOGGER.debug(
            "indexed_set.removed",
            extra={"collection": type(self).__name__, "pk": repr(record.pk)},
        )

        self.trigger(CHANGE)
        self.trigger(REMOVE)

    def remove_at(self, index: int) -> None:
        self.remove(self.at(index))

    def remove_by_key(self, pk: Any) -> None:
        self.remove(self.get(pk))

    def remove_where(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        """Remove every member matching ``predicate`` and return them.

        Targets are resolved before anything is removed. A target that a
        ``change``/``remove`` subscriber already took out is skipped.
        """
        targets = self.filter(predicate)
        for record in targets:
            if record in self:
                self.remove(record)
        return targets

    def clear(self) -> None:
        """Remove every member, emitting the usual events for each."""
        for record in list(self._items):
            self.remove(record)

    def move(self, record: RecordT, offset: int) -> None:
        self.move_at(self.index_of(record), offset)

    def move_by_key(self, pk: Any, offset: int) -> None:
        self.move_at(self._lookup(pk).position, offset)

    def move_at(self, index: int, offset: int) -> None:
        """Move the member at ``index`` by ``offset`` places.

        The target is clamped to the bounds, so an oversized offset lands the
        member first or last instead of failing. Members in between shift by
        one; this is a reorder, not a swap.
        """
        record = self.at(index)
        target = min(max(index + offset, 0), len(self._items) - 1)

        reordered = list(self._items)
        del reordered[index]
        reordered.insert(target, record)
        self._rebuild_index(reordered)
        self._mark_dirty()
        LOGGER.debug(
            "indexed_set.moved",
            extra={
                "collection": type(self).__name__,
                "pk": repr(record.pk),
                "from_index": index,
                "to_index": target,
            },
        )

        self.trigger(CHANGE)

    def _snapshot(self) -> None:
        self._persisted_keys = [record.pk for record in self._items]

    def to_serializable(self) -> list[Any]:
        return [to_serializable(record) for record in self._items]

    def _lookup(self, pk: Any) -> _IndexEntry:
        try:
            return self._index[pk]
        except KeyError:
            raise NotFoundError(
                f"{type(self).__name__} has no member with pk {pk!r}."
            ) from None

    def _entry_for(self, record: RecordT) -> _IndexEntry:
        entry = self._index.get(record.pk)
        if entry is not None and entry.record is record:
            return entry
        # The pk may have changed without the index catching up yet.
        for entry in self._index.values():
            if entry.record is record:
                return entry
        raise NotFoundError(f"{record!r} is not a member of {type(self).__name__}.")

    def _drop_persisted_key(self, key: Any) -> None:
        if key in self._persisted_keys:
            self._persisted_keys.remove(key)

    def _rebuild_index(self, items: list[RecordT] | None = None) -> None:
        """Re-key the index from ``items`` and make them the member order.

        ``items`` defaults to the current order. Entries are matched to
        members by identity, so a member whose pk changed any number of
        times since the last rebuild keeps its subscriptions. A pk collision
        raises before anything is assigned, leaving order and index as they
        were.
        """
        if items is None:
            items = self._items
        entries = {id(entry.record): entry for entry in self._index.values()}
        rebuilt: dict[Any, _IndexEntry] = {}
        positions: list[tuple[_IndexEntry, int]] = []
        for position, record in enumerate(items):
            pk = record.pk
            if pk in rebuilt:
                LOGGER.warning(
                    "indexed_set.rebuild.duplicate_key",
                    extra={"collection": type(self).__name__, "pk": repr(pk)},
                )
                raise DuplicateKeyError(
                    f"{type(self).__name__} would hold pk {pk!r} twice."
                )
            entry = entries[id(record)]
            rebuilt[pk] = entry
            positions.append((entry, position))

        for entry, position in positions:
            entry.position = position
            entry.key = entry.record.pk
        self._items = items
        self._index = rebuilt
        LOGGER.debug(
            "indexed_set.index_rebuilt",
            extra={"collection": type(self).__name__, "size": len(rebuilt)},
        )
