"""Declarative description of ini sections.

A section is a subclass of :class:`IniSection` decorated with
:func:`ini_section`; each persisted attribute is declared with
:func:`ini_property`::

    @ini_section("Core", description="Core settings")
    class CoreConfiguration(IniSection):
        language = ini_property("Language", str, default="en-US")
        window = ini_property("WindowRect", Rectangle | None)

:func:`describe` turns such a class into a :class:`SectionSchema` once and
caches it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import SchemaError
from .kinds import FieldKind, kind_for

_SECTION_ATTR = "__ini_section__"


@dataclass(frozen=True)
class FieldSchema:
    """Description of one persisted property."""

    attr: str
    name: str
    kind: FieldKind
    default: str | None = None
    description: str = ""


@dataclass(frozen=True)
class SectionSchema:
    """Description of one section class."""

    name: str
    description: str
    fields: tuple[FieldSchema, ...]

    def field(self, name: str) -> FieldSchema:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


class IniSection:
    """Base class for all section classes.

    ``is_dirty`` is set when a property had to fall back to its declared
    default because the files did not contain it.
    """

    is_dirty: bool = False

    def get_default(self, property_name: str) -> Any:
        """Supply a value that cannot be written as a default text.

        Called for every property still ``None`` after reading the files and
        the declared default.
        """
        return None

    def __repr__(self) -> str:
        try:
            schema = describe(type(self))
        except SchemaError:
            return super().__repr__()
        values = ", ".join(f"{f.attr}={getattr(self, f.attr)!r}" for f in schema.fields)
        return f"{type(self).__name__}({values})"


class IniProperty:
    """Data descriptor declaring a persisted property.

    Values live in the instance ``__dict__``; an unset property reads as
    ``None``.
    """

    def __init__(
        self,
        name: str,
        declared: Any,
        *,
        default: str | None = None,
        description: str = "",
    ) -> None:
        if not name:
            raise SchemaError("property name must not be empty")
        if default is not None and not isinstance(default, str):
            raise SchemaError(f"default for {name!r} must be text, got {default!r}")
        self.name = name
        self.kind = kind_for(declared)
        self.default = default
        self.description = description
        self.attr: str | None = None

    def __set_name__(self, owner: type, attr: str) -> None:
        self.attr = attr

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.__dict__.get(self.attr)

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self.attr] = value

    def to_schema(self) -> FieldSchema:
        if self.attr is None:
            raise SchemaError(f"property {self.name!r} is not bound to a class attribute")
        return FieldSchema(
            attr=self.attr,
            name=self.name,
            kind=self.kind,
            default=self.default,
            description=self.description,
        )


def ini_property(
    name: str,
    declared: Any,
    *,
    default: str | None = None,
    description: str = "",
) -> Any:
    """Declare a property stored under *name* with the given type.

    *declared* is a type annotation (``int``, ``list[str]``,
    ``dict[str, int]``, ``Color | None``, ``object`` ...) or a kind from
    :mod:`iniconf.kinds`.  *default* is raw text, parsed like file content.
    """

    return IniProperty(name, declared, default=default, description=description)


def ini_section(name: str, *, description: str = ""):
    """Class decorator linking an :class:`IniSection` subclass to ``[name]``."""

    if not name:
        raise SchemaError("section name must not be empty")

    def decorate(cls: type) -> type:
        if not (isinstance(cls, type) and issubclass(cls, IniSection)):
            raise SchemaError(f"{cls!r} must subclass IniSection")
        setattr(cls, _SECTION_ATTR, (name, description))
        _SCHEMAS.pop(cls, None)
        return cls

    return decorate


_SCHEMAS: dict[type, SectionSchema] = {}


def _collect_properties(cls: type) -> list[IniProperty]:
    props: dict[str, IniProperty] = {}
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            if isinstance(value, IniProperty):
                props[attr] = value
    return list(props.values())


def describe(cls: type) -> SectionSchema:
    """Return the cached :class:`SectionSchema` for section class *cls*."""

    schema = _SCHEMAS.get(cls)
    if schema is not None:
        return schema
    meta = cls.__dict__.get(_SECTION_ATTR)
    if meta is None:
        raise SchemaError(f"{cls.__name__} is not decorated with @ini_section")
    name, description = meta
    fields = tuple(p.to_schema() for p in _collect_properties(cls))
    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            raise SchemaError(f"duplicate property {f.name!r} in section {name!r}")
        seen.add(f.name)
    schema = SectionSchema(name=name, description=description, fields=fields)
    _SCHEMAS[cls] = schema
    return schema
