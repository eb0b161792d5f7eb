"""Assemble schema instances and enum members from document nodes."""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from .coercion import describe_node
from .document import NodeKind, kind_of
from .domain import MISSING, ConfigMeta, LoaderOptions, ResolutionContext
from .extern import ExternLocator, ExternResolver
from .resolver import resolve_field
from .schema import fields_of, set_meta

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


def new_context(
    base_dir: Optional[Path] = None,
    source: Optional[Path] = None,
    locator: Optional[ExternLocator] = None,
    options: Optional[LoaderOptions] = None,
) -> ResolutionContext:
    """Fresh resolution state for one load."""
    options = options or (locator.options if locator else LoaderOptions.from_env())
    if base_dir is None:
        base_dir = source.parent if source is not None else Path.cwd()
    return ResolutionContext(
        current_dir=base_dir,
        extern_resolver=ExternResolver(locator=locator, options=options),
        options=options,
        source=source,
    )


def materialize(schema_cls: Type[T], root_node: Any, context: Optional[ResolutionContext] = None) -> T:
    """Build a fully populated ``schema_cls`` instance from ``root_node``.

    Each field resolves independently: dereference an extern sentinel, then
    coerce. Fields that are absent or fail to coerce take their default.
    """
    if context is None:
        context = new_context()

    if kind_of(root_node) is NodeKind.MAPPING:
        mapping: Dict[Any, Any] = root_node
    else:
        mapping = {}
        if root_node is not None and root_node is not MISSING:
            context.record_failure(
                f"expected mapping for {schema_cls.__name__}, got {describe_node(root_node)}"
            )

    values: Dict[str, Any] = {}
    externs: Dict[str, Path] = {}

    for descriptor in fields_of(schema_cls):
        field_context = context.child(descriptor.name)
        node = mapping.get(descriptor.name, MISSING)

        deref = context.extern_resolver.maybe_dereference(node, descriptor.name, context.current_dir)
        if deref.found:
            externs[descriptor.name] = deref.path
            context.result.externs_resolved[field_context.path] = str(deref.path)
            context.result.files_loaded.append(str(deref.path))
            field_context = field_context.enter_file(deref.path)
        elif deref.is_extern:
            field_context.record_failure("extern file not found")

        values[descriptor.name] = resolve_field(descriptor, deref.node, field_context)

    instance = schema_cls(**values)
    set_meta(instance, ConfigMeta(path=context.source, externs=externs))
    return instance


def materialize_enum(enum_cls: Type[E], node: Any, default: Optional[E] = None) -> E:
    """Match ``node`` against the member names of ``enum_cls`` (case-sensitive).

    Any other node yields ``default`` (the first member when not given).
    """
    if default is None:
        default = next(iter(enum_cls))
    if isinstance(node, str) and node in enum_cls.__members__:
        return enum_cls.__members__[node]
    logger.debug(f"'{node}' is not a {enum_cls.__name__} option; using {default.name}")
    return default
