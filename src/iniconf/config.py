"""The configuration context: raw properties plus typed section instances."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Protocol, TypeVar

from . import adapters
from .codec import RawPropertyTable, parse_text, read_text_file, render_sections, write_text_file
from .converter import has_mapping_entries, read_field, unwrap
from .errors import ConversionError, PropertyNotFoundError, SchemaError
from .kinds import MapOf
from .schema import IniSection, SectionSchema, describe

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=IniSection)


####################
##### SOURCES ######
####################

class ConfigSource(Protocol):
    """Where the defaults and main file contents come from.

    Either text may be ``None`` when the file does not exist.
    """

    def read_defaults(self) -> str | None:
        ...

    def read_main(self) -> str | None:
        ...

    def write_main(self, text: str) -> None:
        ...


class FileSource:
    """:class:`ConfigSource` backed by two files on disk."""

    def __init__(self, main_path: Path, defaults_path: Path | None = None) -> None:
        self.main_path = Path(main_path)
        self.defaults_path = Path(defaults_path) if defaults_path is not None else None

    def read_defaults(self) -> str | None:
        if self.defaults_path is None:
            return None
        return read_text_file(self.defaults_path)

    def read_main(self) -> str | None:
        return read_text_file(self.main_path)

    def write_main(self, text: str) -> None:
        logger.info("Saving configuration to: %s", self.main_path)
        write_text_file(self.main_path, text)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"FileSource({self.main_path!s}, defaults={self.defaults_path!s})"


class MemorySource:
    """Simple :class:`ConfigSource` keeping both texts in memory.

    Every save replaces :attr:`main` and is appended to :attr:`saved`.
    """

    def __init__(self, main: str | None = None, defaults: str | None = None) -> None:
        self.main = main
        self.defaults = defaults
        self.saved: list[str] = []

    def read_defaults(self) -> str | None:
        return self.defaults

    def read_main(self) -> str | None:
        return self.main

    def write_main(self, text: str) -> None:
        self.main = text
        self.saved.append(text)


####################
##### CONTEXT ######
####################

class IniConfig:
    """Typed access to one defaults file layered under one main file.

    Sections are materialised lazily by :meth:`get_section`, at most one
    instance per section, and :meth:`save` writes them back together with
    every raw section nobody asked for.  The object is not thread safe;
    callers sharing it across threads must serialise access themselves.
    """

    def __init__(self, source: ConfigSource) -> None:
        self.source = source
        self._properties: RawPropertyTable = {}
        self._sections: dict[str, IniSection] = {}
        self._schemas: dict[str, SectionSchema] = {}
        self.load()

    @classmethod
    def from_files(cls, main_path: Path, defaults_path: Path | None = None) -> IniConfig:
        return cls(FileSource(main_path, defaults_path))

    @classmethod
    def from_text(cls, main: str | None = None, defaults: str | None = None) -> IniConfig:
        return cls(MemorySource(main, defaults))

    def load(self) -> None:
        """Read the defaults text, then the main text, into the raw table."""

        for text in (self.source.read_defaults(), self.source.read_main()):
            if text is not None:
                parse_text(text, self._properties)

    # ----- typed sections -----

    def get_section(self, section_type: type[S]) -> S:
        """Return the instance for *section_type*, creating it on first use."""

        schema = describe(section_type)
        logger.debug("Trying to find section for: %s", schema.name)
        cached = self._sections.get(schema.name)
        if cached is not None:
            if type(cached) is not section_type:
                raise SchemaError(
                    f"section {schema.name!r} already claimed by {type(cached).__name__}"
                )
            return cached  # type: ignore[return-value]

        section = section_type()
        self._sections[schema.name] = section
        self._schemas[schema.name] = schema
        properties = self._properties.get(schema.name, {})
        for field in schema.fields:
            if isinstance(unwrap(field.kind), MapOf):
                present = has_mapping_entries(properties, field.name)
            else:
                present = field.name in properties
            # defaults from the defaults file count as present
            if not present and field.default is not None:
                section.is_dirty = True
                logger.debug("Passing default: %s=%s", field.name, field.default)

            value = None
            try:
                value = read_field(field.kind, properties, field.name, field.default)
            except ConversionError as exc:
                logger.warning("Couldn't parse field: %s.%s: %s", schema.name, field.name, exc)

            if value is None:
                value = section.get_default(field.name)
            setattr(section, field.attr, value)
        return section

    @property
    def sections(self) -> Mapping[str, IniSection]:
        """Read-only view of the materialised sections by name."""
        return MappingProxyType(self._sections)

    def unclaimed_sections(self) -> dict[str, dict[str, str]]:
        return {
            name: dict(props)
            for name, props in self._properties.items()
            if name not in self._sections
        }

    # ----- raw properties -----

    def has_property(self, section: str, name: str) -> bool:
        props = self._properties.get(section)
        return props is not None and name in props

    def get_property(self, section: str, name: str) -> str | None:
        props = self._properties.get(section)
        if props is None:
            return None
        return props.get(name)

    def get_property_as_array(self, section: str, name: str) -> list[str] | None:
        """Return the property split on ``,`` or ``None`` when it is missing."""
        value = self.get_property(section, name)
        if value is None:
            return None
        return value.split(",")

    def _require(self, section: str, name: str) -> str:
        value = self.get_property(section, name)
        if value is None:
            raise PropertyNotFoundError(f"{section}.{name}")
        return value

    def get_bool_property(self, section: str, name: str) -> bool:
        """Return a boolean property.

        Unlike :meth:`get_section` this does not forgive bad data:
        :class:`ValueError` is raised if the stored value is not a boolean.
        """
        return adapters.lookup(bool).adapter.parse(self._require(section, name))

    def get_int_property(self, section: str, name: str) -> int:
        """Return an int property, raising :class:`ValueError` on bad data."""
        return adapters.lookup(int).adapter.parse(self._require(section, name))

    def set_property(self, section: str | None, name: str, value: str) -> None:
        """Store a raw property, creating the section when needed."""
        if section is None:
            logger.debug("Property without section: %s", name)
            return
        self._properties.setdefault(section, {})[name] = value
        logger.debug("Added property %s with value %s to section: %s", name, value, section)

    def change_property(self, section: str | None, name: str, value: str) -> None:
        """Overwrite a raw property of an existing section."""
        if section is None:
            logger.debug("Property without section: %s", name)
            return
        try:
            props = self._properties[section]
        except KeyError:
            raise PropertyNotFoundError(f"unknown section: {section}") from None
        props[name] = value
        logger.debug("Changed property %s to section: %s", name, section)

    # ----- saving -----

    def render(self) -> str:
        """Return the text :meth:`save` would write."""
        typed = [(self._schemas[name], section) for name, section in self._sections.items()]
        return render_sections(typed, self.unclaimed_sections())

    def save(self) -> None:
        """Write every section to the main file and clear the dirty flags.

        A field holding a value its type cannot serialise raises
        :class:`ConversionError` before anything is written.
        """
        text = self.render()
        self.source.write_main(text)
        for section in self._sections.values():
            section.is_dirty = False
