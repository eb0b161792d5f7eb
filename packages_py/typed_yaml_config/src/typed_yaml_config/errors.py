from pathlib import Path
from typing import Any, Optional, Union


class ConfigError(Exception):
    """Base exception for hard configuration errors."""
    pass


class ConfigFileError(ConfigError):
    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        msg = f"Unable to read config file '{path}'"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)
        self.path = Path(path)
        self.cause = cause


class DocumentParseError(ConfigError):
    def __init__(self, path: Optional[Union[str, Path]], cause: BaseException):
        where = f"'{path}'" if path is not None else "<string>"
        super().__init__(f"YAML parsing error in {where}: {cause}")
        self.path = Path(path) if path is not None else None
        self.cause = cause


class ConfigWriteError(ConfigError):
    def __init__(self, path: Union[str, Path], cause: BaseException):
        super().__init__(f"Unable to write config file '{path}': {cause}")
        self.path = Path(path)
        self.cause = cause


class SchemaDefinitionError(ConfigError):
    """Raised when a schema declaration is invalid."""
    pass


class MissingFieldError(SchemaDefinitionError):
    def __init__(self, schema_name: str, field_name: str):
        super().__init__(f"Schema '{schema_name}' has no field named '{field_name}'")
        self.schema_name = schema_name
        self.field_name = field_name


class CoercionError(Exception):
    """Soft failure: a node could not be converted to the declared type.

    Never escapes the resolver; the field falls back to its default.
    """
    pass


def missing_field(schema: Any, field_name: str) -> MissingFieldError:
    """Build the error for a field name that has no descriptor in ``schema``."""
    schema_name = schema if isinstance(schema, str) else getattr(schema, "__name__", repr(schema))
    return MissingFieldError(schema_name, field_name)
