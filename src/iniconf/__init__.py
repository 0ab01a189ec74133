from .adapters import UInt, register_type
from .config import ConfigSource, FileSource, IniConfig, MemorySource
from .errors import (
    ConversionError,
    IniConfError,
    IniIOError,
    PropertyNotFoundError,
    SchemaError,
    UnknownTypeError,
)
from .geometry import Color, Point, Rectangle, Size
from .locations import config_for
from .schema import IniSection, describe, ini_property, ini_section


__all__ = [
    "IniConfig",
    "ConfigSource",
    "FileSource",
    "MemorySource",
    "IniSection",
    "ini_section",
    "ini_property",
    "describe",
    "config_for",
    "register_type",
    "UInt",
    "Point",
    "Size",
    "Rectangle",
    "Color",
    "IniConfError",
    "ConversionError",
    "IniIOError",
    "UnknownTypeError",
    "SchemaError",
    "PropertyNotFoundError",
]
