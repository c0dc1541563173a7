"""propbind: bind properties files into annotated Python records.

propbind logs through loguru and leaves handler setup to the application. To
apply the ``logging`` section of the library configuration (``config/propbind.yaml``
plus ``PROPBIND__LOGGING__*`` overrides), call it once at startup:

    from propbind.utils.logging_config import configure_logging_from_config

    configure_logging_from_config()
"""

from propbind.exceptions import (
    BindingError,
    ConfigurationError,
    ErrorCode,
    FieldWriteFailureError,
    InvalidParserReferenceError,
    NoResourceLocatorError,
    ParseFailureError,
    PropBindError,
    ResourceNotFoundError,
    ResourceReadError,
    UnknownEnumValueError,
    UnresolvedPlaceholderError,
)
from propbind.metadata import (
    BindingDirective,
    PropertyKey,
    configuration,
    property_key,
    read_directives,
    read_locator,
)
from propbind.parsers import (
    BrowserType,
    BrowserTypeParser,
    DefaultValueParser,
    EnumParser,
    Float32,
    ParserRegistry,
    ValueParser,
)
from propbind.reader import ConfigurationReader, PropertiesReader
from propbind.resources import FileSystemResourceLoader, ResourceLoader
from propbind.utils.placeholders import (
    PlaceholderResolver,
    clear_property,
    get_property,
    resolve_placeholders,
    set_property,
)


__version__ = "0.1.0"

__all__ = [
    "BindingDirective",
    "BindingError",
    "BrowserType",
    "BrowserTypeParser",
    "ConfigurationError",
    "ConfigurationReader",
    "DefaultValueParser",
    "EnumParser",
    "ErrorCode",
    "FieldWriteFailureError",
    "FileSystemResourceLoader",
    "Float32",
    "InvalidParserReferenceError",
    "NoResourceLocatorError",
    "ParseFailureError",
    "ParserRegistry",
    "PlaceholderResolver",
    "PropBindError",
    "PropertiesReader",
    "PropertyKey",
    "ResourceLoader",
    "ResourceNotFoundError",
    "ResourceReadError",
    "UnknownEnumValueError",
    "UnresolvedPlaceholderError",
    "ValueParser",
    "clear_property",
    "configuration",
    "get_property",
    "property_key",
    "read_directives",
    "read_locator",
    "resolve_placeholders",
    "set_property",
]
