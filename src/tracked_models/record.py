"""Records: named, change-tracked fields with a persisted snapshot.

Record types declare their fields explicitly:

    class Song(Record):
        fields = (
            FieldSpec("title"),
            FieldSpec("plays", default=0),
        )

    song = Song("s-1", title="Intro")
    song.plays += 1           # same as song.set("plays", song.get("plays") + 1)
    song.changed_fields       # ['pk', 'title', 'plays']
    song.persist()            # True, and song.changed_fields == []

Every record carries a ``pk`` field, declared first. Assigning an observable
value (an ``IndexedSet`` or another ``Record``) makes the record listen to
that value's ``change`` event, so nested mutations mark the owner dirty and
re-emit ``change`` and ``change:<field>`` on it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from .entity import Entity
from .events.bus import is_observable
from .events.names import CHANGE, field_change
from .exceptions import SchemaError, UnknownFieldError
from .fields import UNSET, FieldSpec
from .serialization import to_serializable


def _field_property(name: str) -> property:
    def getter(self: Record) -> Any:
        return self.get(name)

    def setter(self: Record, value: Any) -> None:
        self.set(name, value)

    return property(getter, setter, doc=f"Tracked field {name!r}.")


def _differs(current: Any, persisted: Any) -> bool:
    if current is persisted:
        return False
    if current is UNSET or persisted is UNSET:
        return True
    # Nested entities compare by reference, never structurally.
    if is_observable(current) or is_observable(persisted):
        return True
    return bool(current != persisted)


class Record(Entity):
    """A single tracked entity with a declared field schema."""

    fields: ClassVar[tuple[FieldSpec, ...]] = ()
    _schema: ClassVar[tuple[FieldSpec, ...]] = (FieldSpec("pk"),)

    pk = _field_property("pk")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declared = tuple(cls.__dict__.get("fields", ()))
        inherited = next(
            base._schema for base in cls.__mro__[1:] if issubclass(base, Record)
        )

        known = {spec.name for spec in inherited}
        for spec in declared:
            if not isinstance(spec, FieldSpec):
                raise SchemaError(
                    f"{cls.__name__}.fields entries must be FieldSpec, got {spec!r}."
                )
            if spec.name in known:
                raise SchemaError(f"{cls.__name__} declares field {spec.name!r} twice.")
            if hasattr(cls, spec.name):
                raise SchemaError(
                    f"{cls.__name__} field {spec.name!r} shadows an existing attribute."
                )
            known.add(spec.name)
            setattr(cls, spec.name, _field_property(spec.name))

        cls._schema = inherited + declared

    def __init__(self, pk: Any, **values: Any) -> None:
        super().__init__()
        self._fields: dict[str, Any] = {}
        self._persisted: dict[str, Any] = {}
        self._field_subscriptions: dict[str, int] = {}

        for spec in self._schema:
            self._fields[spec.name] = UNSET
            self._persisted[spec.name] = UNSET
            self._bind(spec.name, spec.make_default())

        unknown = sorted(name for name in values if name not in self._fields)
        if unknown:
            raise UnknownFieldError(
                f"{type(self).__name__} has no field(s) {', '.join(map(repr, unknown))}."
            )

        self.set("pk", pk)
        for name, value in values.items():
            self.set(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pk={self._fields['pk']!r})"

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Return declared field names in declaration order, ``pk`` first."""
        return tuple(spec.name for spec in cls._schema)

    def get(self, name: str) -> Any:
        """Return the current value of ``name``."""
        try:
            return self._fields[name]
        except KeyError:
            raise UnknownFieldError(
                f"{type(self).__name__} has no field {name!r}."
            ) from None

    def set(self, name: str, value: Any) -> None:
        """Assign ``name`` and emit ``change`` then ``change:<name>``.

        There is no equality short-circuit: assigning the current value again
        still marks the record dirty and emits both events.
        """
        if name not in self._fields:
            raise UnknownFieldError(f"{type(self).__name__} has no field {name!r}.")

        self._bind(name, value)
        self._mark_dirty()

        self.trigger(CHANGE)
        self.trigger(field_change(name))

    def _bind(self, name: str, value: Any) -> None:
        """Store ``value``, moving the nested change subscription with it."""
        current = self._fields[name]
        handle = self._field_subscriptions.pop(name, None)
        if handle is not None and is_observable(current):
            current.off(CHANGE, handle)

        if is_observable(value):
            self._field_subscriptions[name] = value.on(
                CHANGE, self._nested_change_handler(name)
            )
        self._fields[name] = value

    def _nested_change_handler(self, name: str) -> Callable[[], None]:
        def handle_nested_change() -> None:
            self._mark_dirty()
            self.trigger(CHANGE)
            self.trigger(field_change(name))

        return handle_nested_change

    @property
    def changed_fields(self) -> list[str]:
        """Field names whose value differs from the persisted snapshot."""
        return [
            name
            for name, value in self._fields.items()
            if _differs(value, self._persisted[name])
        ]

    @property
    def persisted_fields(self) -> dict[str, Any]:
        """Return a copy of the last persisted snapshot."""
        return dict(self._persisted)

    def _snapshot(self) -> None:
        self._persisted = dict(self._fields)

    def release(self) -> None:
        """Stop listening to every nested entity held in a field.

        Call this before dropping a record that holds nested entities which
        outlive it. Field values are kept; only the subscriptions go away.
        """
        for name, handle in list(self._field_subscriptions.items()):
            self._fields[name].off(CHANGE, handle)
        self._field_subscriptions.clear()

    def to_serializable(self) -> dict[str, Any]:
        """Return current values in declaration order, skipping unset fields."""
        return {
            name: to_serializable(value)
            for name, value in self._fields.items()
            if value is not UNSET
        }
