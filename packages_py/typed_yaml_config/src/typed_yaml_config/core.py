"""Loading config schemas from YAML files and strings."""

import logging
from pathlib import Path
from typing import Any, Optional, Tuple, Type, TypeVar, Union

import yaml

from .document import parse_document
from .domain import LoaderOptions, LoadResult
from .errors import ConfigFileError, DocumentParseError
from .extern import ExternLocator, FileSystemLocator
from .materializer import materialize, new_context

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _reader(locator: Optional[ExternLocator], options: Optional[LoaderOptions]) -> ExternLocator:
    if locator is not None:
        return locator
    return FileSystemLocator(options or LoaderOptions.from_env())


def load_file(
    schema_cls: Type[T],
    path: Union[str, Path],
    options: Optional[LoaderOptions] = None,
    locator: Optional[ExternLocator] = None
) -> Tuple[T, LoadResult]:
    """Load ``schema_cls`` from a YAML file and report what happened.

    Raises ``ConfigFileError`` if the file cannot be read and
    ``DocumentParseError`` if it is not valid YAML. Everything below the
    document root degrades to defaults instead of failing.
    """
    path = Path(path)
    reader = _reader(locator, options)
    options = options or reader.options

    try:
        text = reader.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Config file not readable: {path}: {e}")
        raise ConfigFileError(path, e)

    try:
        root = parse_document(text)
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {path}: {e}")
        raise DocumentParseError(path, e)

    context = new_context(source=path, locator=reader, options=options)
    context.result.files_loaded.append(str(path))
    instance = materialize(schema_cls, root, context)

    result = context.result
    logger.info(
        f"Loaded {schema_cls.__name__} from {path}. "
        f"Files: {len(result.files_loaded)}, defaulted fields: {len(result.soft_failures)}"
    )
    return instance, result


def load(
    schema_cls: Type[T],
    path: Union[str, Path],
    options: Optional[LoaderOptions] = None,
    locator: Optional[ExternLocator] = None
) -> T:
    """Load ``schema_cls`` from a YAML file."""
    instance, _ = load_file(schema_cls, path, options=options, locator=locator)
    return instance


def load_or_default(
    schema_cls: Type[T],
    path: Union[str, Path],
    options: Optional[LoaderOptions] = None,
    locator: Optional[ExternLocator] = None
) -> T:
    """Like ``load``, but a missing file yields the defaults."""
    path = Path(path)
    reader = _reader(locator, options)
    if not reader.exists(path):
        logger.info(f"Config file {path} does not exist; using defaults for {schema_cls.__name__}")
        return default_of(schema_cls)
    return load(schema_cls, path, options=options, locator=reader)


def from_string(
    schema_cls: Type[T],
    text: str,
    base_dir: Optional[Union[str, Path]] = None,
    options: Optional[LoaderOptions] = None,
    locator: Optional[ExternLocator] = None
) -> T:
    """Load ``schema_cls`` from YAML text. Externs resolve against ``base_dir``."""
    try:
        root = parse_document(text)
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in config string: {e}")
        raise DocumentParseError(None, e)

    context = new_context(
        base_dir=Path(base_dir) if base_dir is not None else None,
        locator=locator,
        options=options,
    )
    return materialize(schema_cls, root, context)


def from_node(schema_cls: Type[T], node: Any, base_dir: Optional[Union[str, Path]] = None) -> T:
    """Materialize an already parsed document node."""
    context = new_context(base_dir=Path(base_dir) if base_dir is not None else None)
    return materialize(schema_cls, node, context)


def default_of(schema_cls: Type[T]) -> T:
    """The all-defaults instance of ``schema_cls``."""
    return schema_cls()
