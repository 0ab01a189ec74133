"""Conversion between raw ini text and typed values.

``to_typed`` and ``to_text`` dispatch on the :mod:`iniconf.kinds` variant of
a property.  Absent input always yields ``None`` so that callers can fall
back to a default; malformed input raises :class:`ConversionError`.
Mappings span several raw properties and are handled by
:func:`mapping_from_properties` and :func:`mapping_to_lines`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from . import adapters
from .errors import ConversionError
from .kinds import Dynamic, FieldKind, ListOf, MapOf, Nullable, Scalar, describe_kind

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ","
TYPE_SEPARATOR = ":"
MAP_KEY_SEPARATOR = "."


def to_typed(kind: FieldKind, raw: str | None) -> Any:
    """Convert *raw* text into a value of *kind*.

    Returns ``None`` when *raw* is ``None`` or, for anything but strings,
    blank.  Lists that end up without elements are also ``None``.
    """

    if raw is None:
        return None
    if isinstance(kind, Scalar):
        if kind.type is not str and raw.strip() == "":
            return None
        return adapters.lookup(kind.type).adapter.parse(raw)
    if isinstance(kind, Nullable):
        return to_typed(kind.inner, raw)
    if isinstance(kind, ListOf):
        return _list_from_text(kind, raw)
    if isinstance(kind, Dynamic):
        return _dynamic_from_text(raw)
    if isinstance(kind, MapOf):
        raise ConversionError("mappings are read from several properties")
    raise TypeError(f"unknown field kind: {kind!r}")


def _list_from_text(kind: ListOf, raw: str) -> list[Any] | None:
    items: list[Any] = []
    for token in raw.split(LIST_SEPARATOR):
        if not token:
            continue
        try:
            value = to_typed(kind.item, token)
        except ConversionError as exc:
            logger.error(
                "Problem converting %r to %s: %s", token, describe_kind(kind.item), exc
            )
            continue
        if value is not None:
            items.append(value)
    return items or None


def _dynamic_from_text(raw: str) -> Any:
    if raw.strip() == "":
        return None
    identifier, sep, text = raw.partition(TYPE_SEPARATOR)
    if not sep:
        raise ConversionError(f"dynamic value without type identifier: {raw!r}")
    cls = adapters.resolve_tag(identifier)
    logger.debug("Parsing dynamic value %r as %s", text, cls.__name__)
    return to_typed(Scalar(cls), text)


def to_text(kind: FieldKind, value: Any) -> str:
    """Render *value* of *kind* as raw text; ``None`` renders as ``""``."""

    if value is None:
        return ""
    if isinstance(kind, Scalar):
        return adapters.lookup(kind.type).adapter.serialize(value)
    if isinstance(kind, Nullable):
        return to_text(kind.inner, value)
    if isinstance(kind, ListOf):
        return LIST_SEPARATOR.join(to_text(kind.item, item) for item in value)
    if isinstance(kind, Dynamic):
        ft = adapters.lookup(type(value))
        return f"{ft.tag}{TYPE_SEPARATOR}{ft.adapter.serialize(value)}"
    if isinstance(kind, MapOf):
        raise ConversionError("mappings are written as several properties")
    raise TypeError(f"unknown field kind: {kind!r}")


def mapping_from_properties(
    kind: MapOf, properties: Mapping[str, str], name: str
) -> dict[Any, Any] | None:
    """Collect every ``name.<key>`` entry of *properties* into a dict.

    Entries whose key or value cannot be converted are logged and skipped.
    Returns ``None`` when no entry matched.
    """

    prefix = name + MAP_KEY_SEPARATOR
    result: dict[Any, Any] = {}
    for key, raw in properties.items():
        if not key.startswith(prefix):
            continue
        sub_key = key[len(prefix):]
        try:
            typed_key = to_typed(kind.key, sub_key)
            typed_value = to_typed(kind.value, raw)
        except ConversionError as exc:
            logger.error("Problem converting %s=%r: %s", key, raw, exc)
            continue
        if typed_key is None:
            logger.error("Ignoring %s: empty mapping key", key)
            continue
        result[typed_key] = typed_value
    return result or None


def mapping_to_lines(
    kind: MapOf, name: str, value: Mapping[Any, Any]
) -> list[tuple[str, str]]:
    """Return ``(property, text)`` pairs for a mapping, in mapping order."""

    return [
        (f"{name}{MAP_KEY_SEPARATOR}{to_text(kind.key, k)}", to_text(kind.value, v))
        for k, v in value.items()
    ]


def has_mapping_entries(properties: Mapping[str, str], name: str) -> bool:
    prefix = name + MAP_KEY_SEPARATOR
    return any(key.startswith(prefix) for key in properties)


def unwrap(kind: FieldKind) -> FieldKind:
    """Strip any :class:`Nullable` wrappers from *kind*."""

    while isinstance(kind, Nullable):
        kind = kind.inner
    return kind


def read_field(
    kind: FieldKind,
    properties: Mapping[str, str],
    name: str,
    default: str | None = None,
) -> Any:
    """Return the typed value for property *name* of a raw section.

    *default* is used as the raw text when the property is missing.  Mapping
    properties ignore *default*; they are built from their ``name.`` entries.
    """

    base = unwrap(kind)
    if isinstance(base, MapOf):
        return mapping_from_properties(base, properties, name)
    return to_typed(kind, properties.get(name, default))
