class IniConfError(Exception):
    """Base class for iniconf errors."""


class ConversionError(IniConfError, ValueError):
    """Raised when raw text cannot be converted to a declared type."""


class UnknownTypeError(ConversionError):
    """Raised when a dynamic value names a type that is not registered."""


class SchemaError(IniConfError):
    """Raised when a section class or property declaration is malformed."""


class PropertyNotFoundError(IniConfError, KeyError):
    """Raised when a raw property or section is not present."""


class IniIOError(IniConfError):
    """Raised when an ini file cannot be read or written."""
