from .core import load, load_file, load_or_default, from_string, from_node, default_of
from .domain import (
    MISSING,
    FieldDescriptor,
    ConfigMeta,
    LoadResult,
    LoaderOptions,
    SoftFailure,
    ResolutionContext
)
from .errors import (
    ConfigError,
    ConfigFileError,
    DocumentParseError,
    ConfigWriteError,
    SchemaDefinitionError,
    MissingFieldError,
    CoercionError,
    missing_field
)
from .document import NodeKind, kind_of, parse_document, render_document
from .schema import config, setting, fields_of, get_descriptor, is_config, meta_of, replace_config, describe
from .coercion import register_type, unregister_type
from .extern import ExternResolver, ExternResult, ExternLocator, FileSystemLocator, InMemoryLocator
from .resolver import resolve_field, coerce_field
from .materializer import materialize, materialize_enum, new_context
from .serializer import to_node, to_string, write_file
from .types import UInt8, UInt16, UInt32, UInt64, Int8, Int16, Int32, Int64
from .presets import DisplayConfig, LoggingConfig

__all__ = [
    "load",
    "load_file",
    "load_or_default",
    "from_string",
    "from_node",
    "default_of",
    "MISSING",
    "FieldDescriptor",
    "ConfigMeta",
    "LoadResult",
    "LoaderOptions",
    "SoftFailure",
    "ResolutionContext",
    "ConfigError",
    "ConfigFileError",
    "DocumentParseError",
    "ConfigWriteError",
    "SchemaDefinitionError",
    "MissingFieldError",
    "CoercionError",
    "missing_field",
    "NodeKind",
    "kind_of",
    "parse_document",
    "render_document",
    "config",
    "setting",
    "fields_of",
    "get_descriptor",
    "is_config",
    "meta_of",
    "replace_config",
    "describe",
    "register_type",
    "unregister_type",
    "ExternResolver",
    "ExternResult",
    "ExternLocator",
    "FileSystemLocator",
    "InMemoryLocator",
    "resolve_field",
    "coerce_field",
    "materialize",
    "materialize_enum",
    "new_context",
    "to_node",
    "to_string",
    "write_file",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "DisplayConfig",
    "LoggingConfig"
]
