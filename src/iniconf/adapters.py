"""Scalar type adapters and the registry of persistable types.

Every type that can appear as a single ini value has a :class:`TypeAdapter`
registered in :data:`TYPE_REGISTRY`.  The registry doubles as the lookup
table for type identifiers written in front of dynamic values, so a value
stored as ``builtins.int:42`` is resolved without importing anything by
name.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Protocol

from .errors import ConversionError, UnknownTypeError
from .geometry import Color, Point, Rectangle, Size

PACKAGE_QUALIFIER = __name__.split(".")[0]


class UInt(int):
    """Marker type for unsigned integer properties.

    Values are plain :class:`int` objects; the marker only selects the
    adapter that rejects negative numbers.
    """


####################
##### ADAPTERS #####
####################

class TypeAdapter(Protocol):
    """Adapter for a scalar type.

    ``parse`` receives non-empty text and raises :class:`ValueError` (or
    :class:`ConversionError`) when it is malformed.  ``serialize`` is the
    inverse.
    """

    def parse(self, raw: str) -> Any:
        """Parse *raw* text into a Python value."""

    def serialize(self, value: Any) -> str:
        """Serialise *value* into text for storage."""


class StringAdapter:
    def parse(self, raw: str) -> str:  # pragma: no cover - trivial
        return raw

    def serialize(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError("expected str")
        return value


class BooleanAdapter:
    """Adapter for booleans written as ``True``/``False``.

    Parsing is case-insensitive so files written by hand with ``true`` load
    as well.
    """

    def parse(self, raw: str) -> bool:
        lowered = raw.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise ConversionError(f"invalid boolean: {raw!r}")

    def serialize(self, value: Any) -> str:
        if not isinstance(value, bool):
            raise TypeError("expected bool")
        return "True" if value else "False"


class IntegerAdapter:
    def __init__(self, *, unsigned: bool = False) -> None:
        self.unsigned = unsigned

    def parse(self, raw: str) -> int:
        try:
            value = int(raw.strip())
        except ValueError as exc:
            raise ConversionError(f"invalid integer: {raw!r}") from exc
        if self.unsigned and value < 0:
            raise ConversionError(f"negative value for unsigned integer: {raw!r}")
        return value

    def serialize(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("expected int")
        return str(int(value))


class NumberAdapter:
    def parse(self, raw: str) -> float:
        try:
            return float(raw.strip())
        except ValueError as exc:
            raise ConversionError(f"invalid number: {raw!r}") from exc

    def serialize(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise TypeError("expected number")
        return repr(float(value))


def _split_ints(raw: str, count: int, type_name: str) -> list[int]:
    parts = raw.split(",")
    if len(parts) != count:
        raise ConversionError(
            f"{type_name} needs {count} comma separated values, got {raw!r}"
        )
    try:
        return [int(p.strip()) for p in parts]
    except ValueError as exc:
        raise ConversionError(f"invalid {type_name}: {raw!r}") from exc


class CompositeAdapter:
    """Adapter for value types made of a fixed sequence of integers.

    ``fields`` lists the attribute names in the order they are written,
    which is also the constructor's positional order.
    """

    def __init__(self, cls: type, fields: tuple[str, ...]) -> None:
        self.cls = cls
        self.fields = fields

    def parse(self, raw: str) -> Any:
        values = _split_ints(raw, len(self.fields), self.cls.__name__)
        try:
            return self.cls(*values)
        except ValueError as exc:
            raise ConversionError(str(exc)) from exc

    def serialize(self, value: Any) -> str:
        if not isinstance(value, self.cls):
            raise TypeError(f"expected {self.cls.__name__}")
        return ",".join(str(getattr(value, f)) for f in self.fields)


class EnumAdapter:
    """Adapter for :class:`enum.Enum` members stored by member name."""

    def __init__(self, cls: type[enum.Enum]) -> None:
        self.cls = cls

    def parse(self, raw: str) -> enum.Enum:
        try:
            return self.cls[raw]
        except KeyError as exc:
            raise ConversionError(
                f"{raw!r} is not a member of {self.cls.__name__}"
            ) from exc

    def serialize(self, value: Any) -> str:
        if not isinstance(value, self.cls):
            raise TypeError(f"expected {self.cls.__name__}")
        return value.name


@dataclass(frozen=True)
class FieldType:
    """Metadata describing a registered scalar type."""

    adapter: TypeAdapter
    tag: str


TYPE_REGISTRY: dict[type, FieldType] = {}
_TAGS: dict[str, type] = {}


def type_tag(cls: type) -> str:
    """Return the identifier written in front of a dynamic value of *cls*.

    Built-in types use ``builtins.<name>``.  Types from this package get the
    package name appended after a comma; other types use their dotted path.
    """

    module = cls.__module__
    name = f"{module}.{cls.__qualname__}"
    if module.split(".")[0] == PACKAGE_QUALIFIER:
        return f"{name},{PACKAGE_QUALIFIER}"
    return name


def register_type(cls: type, adapter: TypeAdapter | None = None) -> type:
    """Register *cls* as a persistable scalar and return it.

    Enum subclasses get an :class:`EnumAdapter` when no adapter is given, so
    the function also works as a class decorator for enums that must be
    usable inside dynamic values before any section declares them.
    """

    if adapter is None:
        if isinstance(cls, type) and issubclass(cls, enum.Enum):
            adapter = EnumAdapter(cls)
        else:
            raise TypeError(f"no adapter given for {cls!r}")
    tag = type_tag(cls)
    TYPE_REGISTRY[cls] = FieldType(adapter, tag)
    _TAGS[tag.split(",", 1)[0]] = cls
    return cls


def lookup(cls: type) -> FieldType:
    """Return the registered :class:`FieldType` for *cls*.

    Enum subclasses are registered on first use.
    """

    ft = TYPE_REGISTRY.get(cls)
    if ft is None:
        if isinstance(cls, type) and issubclass(cls, enum.Enum):
            register_type(cls)
            return TYPE_REGISTRY[cls]
        raise UnknownTypeError(f"unsupported type: {cls!r}")
    return ft


def resolve_tag(identifier: str) -> type:
    """Resolve a dynamic value's type identifier.

    Anything after the first comma is an assembly style qualifier and is
    ignored for the lookup.
    """

    bare = identifier.split(",", 1)[0].strip()
    try:
        return _TAGS[bare]
    except KeyError:
        raise UnknownTypeError(f"unknown type identifier: {identifier!r}") from None


register_type(str, StringAdapter())
register_type(bool, BooleanAdapter())
register_type(int, IntegerAdapter())
register_type(UInt, IntegerAdapter(unsigned=True))
register_type(float, NumberAdapter())
register_type(Point, CompositeAdapter(Point, ("x", "y")))
register_type(Size, CompositeAdapter(Size, ("width", "height")))
register_type(Rectangle, CompositeAdapter(Rectangle, ("x", "y", "width", "height")))
register_type(Color, CompositeAdapter(Color, ("a", "r", "g", "b")))
