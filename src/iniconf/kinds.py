"""Field kinds: the closed set of shapes a persisted property can take."""

from __future__ import annotations

from dataclasses import dataclass
from types import UnionType
from typing import Any, Union, get_args, get_origin

from . import adapters
from .errors import SchemaError, UnknownTypeError


@dataclass(frozen=True)
class Scalar:
    """A single value handled by a registered adapter."""

    type: type


@dataclass(frozen=True)
class Nullable:
    inner: FieldKind


@dataclass(frozen=True)
class ListOf:
    """Comma separated sequence stored on one line."""

    item: FieldKind


@dataclass(frozen=True)
class MapOf:
    """Mapping stored as ``name.key=value`` lines."""

    key: FieldKind
    value: FieldKind


@dataclass(frozen=True)
class Dynamic:
    """Value of any registered type, stored as ``TypeIdentifier:value``."""


FieldKind = Union[Scalar, Nullable, ListOf, MapOf, Dynamic]

_KIND_CLASSES = (Scalar, Nullable, ListOf, MapOf, Dynamic)


def _unwrap_optional(tp: Any) -> tuple[bool, Any]:
    origin = get_origin(tp)
    if origin in (Union, UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return True, args[0]
        raise SchemaError(f"unions other than Optional are not supported: {tp!r}")
    return False, tp


def kind_for(declared: Any) -> FieldKind:
    """Return the :data:`FieldKind` for a type annotation.

    *declared* may also be a kind instance, which is returned unchanged.
    """

    if isinstance(declared, _KIND_CLASSES):
        return declared
    optional, base = _unwrap_optional(declared)
    if optional:
        return Nullable(kind_for(base))
    if base is object or base is Any:
        return Dynamic()
    origin = get_origin(base)
    if origin is list:
        (item,) = get_args(base)
        return ListOf(kind_for(item))
    if origin is dict:
        key, value = get_args(base)
        return MapOf(kind_for(key), kind_for(value))
    if origin is not None or not isinstance(base, type):
        raise SchemaError(f"unsupported property type: {declared!r}")
    try:
        adapters.lookup(base)
    except UnknownTypeError as exc:
        raise SchemaError(str(exc)) from exc
    return Scalar(base)


def describe_kind(kind: FieldKind) -> str:
    """Return a short readable name such as ``list[int]`` for log messages."""

    if isinstance(kind, Scalar):
        return kind.type.__name__
    if isinstance(kind, Nullable):
        return f"{describe_kind(kind.inner)} | None"
    if isinstance(kind, ListOf):
        return f"list[{describe_kind(kind.item)}]"
    if isinstance(kind, MapOf):
        return f"dict[{describe_kind(kind.key)}, {describe_kind(kind.value)}]"
    return "object"
