"""Serialization of config values back to YAML, including extern write-back."""

import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from .coercion import get_dumper
from .document import NodeKind, kind_of, render_document
from .domain import DEFAULT_ENCODING, DEFAULT_SENTINEL, ConfigMeta, LoaderOptions
from .errors import ConfigError, ConfigWriteError
from .schema import META_ATTR, fields_of, is_config

logger = logging.getLogger(__name__)


def _meta(instance: Any) -> Optional[ConfigMeta]:
    return instance.__dict__.get(META_ATTR)


def to_node(value: Any, *, inline_externs: bool = False, sentinel: str = DEFAULT_SENTINEL) -> Any:
    """Convert a typed value into a document node.

    Fields read from an extern file are emitted as the sentinel unless
    ``inline_externs`` is set.
    """
    if is_config(value) and not isinstance(value, type):
        meta = _meta(value)
        node = {}
        for descriptor in fields_of(value):
            if not inline_externs and meta is not None and meta.is_extern(descriptor.name):
                node[descriptor.name] = sentinel
            else:
                node[descriptor.name] = to_node(
                    getattr(value, descriptor.name), inline_externs=inline_externs, sentinel=sentinel
                )
        return node

    dumper = get_dumper(type(value))
    if dumper is not None:
        return to_node(dumper(value), inline_externs=inline_externs, sentinel=sentinel)

    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (list, tuple)):
        return [to_node(item, inline_externs=inline_externs, sentinel=sentinel) for item in value]
    if isinstance(value, dict):
        return {
            to_node(k, inline_externs=inline_externs, sentinel=sentinel):
                to_node(v, inline_externs=inline_externs, sentinel=sentinel)
            for k, v in value.items()
        }
    kind = kind_of(value)
    # plain builtins only; the YAML dumper rejects scalar subclasses
    if kind is NodeKind.INTEGER:
        return int(value)
    if kind is NodeKind.FLOAT:
        return float(value)
    if kind is NodeKind.STRING:
        return str(value)
    if kind is not None:
        return value

    raise ConfigError(
        f"Cannot serialize value of type {type(value).__name__}; register a dumper with register_type()"
    )


def to_string(value: Any, *, inline_externs: bool = False, sentinel: str = DEFAULT_SENTINEL) -> str:
    """Render a config value as YAML text.

    A string field whose value equals the sentinel is written as-is and reads
    back as an extern reference, not as the literal string.
    """
    return render_document(to_node(value, inline_externs=inline_externs, sentinel=sentinel))


def extern_writes(value: Any, sentinel: str = DEFAULT_SENTINEL) -> List[Tuple[Path, str]]:
    """Companion files for every extern-sourced field reachable from ``value``."""
    writes: List[Tuple[Path, str]] = []
    _collect_extern_writes(value, sentinel, writes)
    return writes


def _collect_extern_writes(value: Any, sentinel: str, writes: List[Tuple[Path, str]]) -> None:
    if is_config(value) and not isinstance(value, type):
        meta = _meta(value)
        for descriptor in fields_of(value):
            child = getattr(value, descriptor.name)
            if meta is not None and meta.is_extern(descriptor.name):
                writes.append((meta.externs[descriptor.name], to_string(child, sentinel=sentinel)))
            _collect_extern_writes(child, sentinel, writes)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _collect_extern_writes(item, sentinel, writes)
    elif isinstance(value, dict):
        for item in value.values():
            _collect_extern_writes(item, sentinel, writes)


def write_file(
    value: Any,
    path: Union[str, Path],
    options: Optional[LoaderOptions] = None
) -> List[Path]:
    """Write ``value`` to ``path`` plus one file per extern-sourced field.

    Returns every path written, primary file first.
    """
    options = options or LoaderOptions()
    path = Path(path)

    written = [path]
    _atomic_write(path, to_string(value, sentinel=options.sentinel), options.encoding)
    for extern_path, text in extern_writes(value, options.sentinel):
        _atomic_write(extern_path, text, options.encoding)
        written.append(extern_path)

    logger.info(f"Wrote config to {path} ({len(written) - 1} extern files)")
    return written


def _atomic_write(path: Path, text: str, encoding: str = DEFAULT_ENCODING) -> None:
    directory = path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=directory, text=True)
        try:
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(text)
            os.replace(temp_path, path)
        except Exception:
            os.unlink(temp_path)
            raise
    except OSError as e:
        logger.error(f"Failed writing {path}: {e}")
        raise ConfigWriteError(path, e)
