"""Reading and writing the section based ``key=value`` text format."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .converter import mapping_to_lines, to_text, unwrap
from .errors import ConversionError, IniIOError
from .kinds import ListOf, MapOf
from .schema import FieldSchema, SectionSchema

logger = logging.getLogger(__name__)

# Returns mapping: section -> mapping(key -> value)
RawPropertyTable = dict[str, dict[str, str]]

COMMENT_PREFIX = ";"
# only CR, LF and CRLF end a line; str.splitlines also breaks on U+2028 and friends
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
UNCLAIMED_COMMENT = (
    "; The section {0} is not registered, maybe a plugin hasn't claimed it due "
    "to errors or some functionality isn't used yet."
)


def parse_text(text: str, table: RawPropertyTable | None = None) -> RawPropertyTable:
    """Parse ini *text* into *table* and return it.

    Entries already in *table* are overwritten by entries of *text* with the
    same section and key, which is how a main file is layered over a
    defaults file.  Malformed lines are skipped.
    """

    if table is None:
        table = {}
    section: str | None = None
    for line in _LINE_BREAK.split(text):
        current = line.lstrip()
        if current.startswith("["):
            end = current.find("]")
            if end < 0:
                logger.debug("Skipping malformed section header: %r", line)
                section = None
                continue
            section = current[1:end]
            table.setdefault(section, {})
            logger.debug("Found section: %s", section)
            continue
        if current.startswith(COMMENT_PREFIX) or current.find("=") <= 0:
            continue
        name, value = current.split("=", 1)
        name = name.strip()
        if not name:
            continue
        if section is None:
            logger.debug("Property without section: %s", name)
            continue
        table[section][name] = value
    return table


def read_text_file(path: Path) -> str | None:
    """Return the content of *path*, or ``None`` when it does not exist."""

    path = Path(path)
    if not path.is_file():
        logger.info("Can't find file: %s", path)
        return None
    logger.info("Reading ini-properties from file: %s", path)
    try:
        # utf-8-sig also accepts files written with a byte order mark
        text = path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        raise IniIOError(f"cannot read {path}: {exc}") from exc
    if "\ufffd" in text:
        logger.warning("Invalid UTF-8 in %s was replaced with U+FFFD", path)
    return text


def write_text_file(path: Path, text: str) -> None:
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        tmp.replace(path)
    except OSError as exc:
        raise IniIOError(f"cannot write {path}: {exc}") from exc


def _field_lines(field: FieldSchema, value: Any) -> list[str]:
    if value is None:
        return [f"{field.name}={field.default or ''}"]
    kind = unwrap(field.kind)
    if isinstance(kind, MapOf):
        return [f"{key}={text}" for key, text in mapping_to_lines(kind, field.name, value)]
    if isinstance(kind, ListOf):
        # an empty list is written as an empty value and reads back as None
        return [f"{field.name}={to_text(kind, list(value))}"]
    return [f"{field.name}={to_text(kind, value)}"]


def render_section(schema: SectionSchema, section: Any) -> list[str]:
    lines: list[str] = []
    if schema.description:
        lines.append(f"{COMMENT_PREFIX} {schema.description}")
    lines.append(f"[{schema.name}]")
    for field in schema.fields:
        if field.description:
            lines.append(f"{COMMENT_PREFIX} {field.description}")
        value = getattr(section, field.attr)
        try:
            lines.extend(_field_lines(field, value))
        except (TypeError, ValueError) as exc:
            logger.error("Couldn't write field: %s.%s=%r: %s", schema.name, field.name, value, exc)
            raise ConversionError(f"{schema.name}.{field.name}: {exc}") from exc
    lines.append("")
    return lines


def render_raw_section(name: str, properties: Mapping[str, str]) -> list[str]:
    lines = [UNCLAIMED_COMMENT.format(name), f"[{name}]"]
    lines.extend(f"{key}={value}" for key, value in properties.items())
    lines.append("")
    return lines


def render_sections(
    sections: Iterable[tuple[SectionSchema, Any]],
    leftovers: Mapping[str, Mapping[str, str]],
) -> str:
    """Render typed sections followed by unclaimed raw sections."""

    lines: list[str] = []
    for schema, section in sections:
        lines.extend(render_section(schema, section))
    lines.append("")
    for name, properties in leftovers.items():
        lines.extend(render_raw_section(name, properties))
    return "\n".join(lines) + "\n"
