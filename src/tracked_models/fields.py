"""Explicit field declarations for record types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final

from .exceptions import SchemaError


class _Unset:
    """Marker for a field that has never been given a value."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Unset:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Unset:
        return self


UNSET: Final = _Unset()


@dataclass(frozen=True)
class FieldSpec:
    """Declare one record field.

    ``default_factory`` is called once per record, which is how a record gets
    its own nested ``IndexedSet`` or list instead of sharing one.
    """

    name: str
    default: Any = UNSET
    default_factory: Callable[[], Any] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise SchemaError(f"Field name must be an identifier, got {self.name!r}.")
        if self.default is not UNSET and self.default_factory is not None:
            raise SchemaError(
                f"Field {self.name!r} cannot declare both default and default_factory."
            )

    def make_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default
