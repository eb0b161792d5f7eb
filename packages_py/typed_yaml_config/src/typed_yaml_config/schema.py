"""Schema declaration surface.

A schema is a class decorated with ``@config``: every annotated attribute is a
field with a mandatory default. The decorator turns the class into a
dataclass and stores its ordered ``FieldDescriptor`` tuple on the class.

    @config
    class DisplayConfig:
        title: str = "Amethyst game"
        brightness: float = setting(1.0, doc="Screen brightness, 0.0 to 1.0")
"""

import dataclasses
import inspect
import logging
import typing
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .coercion import CONFIG_FIELDS_ATTR, build_loader, is_config_class
from .domain import ConfigMeta, FieldDescriptor, deepcopy_factory
from .errors import SchemaDefinitionError, missing_field

logger = logging.getLogger(__name__)

META_ATTR = "_meta"
DOC_KEY = "doc"


def setting(
    default: Any = dataclasses.MISSING,
    *,
    default_factory: Any = dataclasses.MISSING,
    doc: Optional[str] = None,
) -> Any:
    """Declare a field with documentation."""
    metadata = {DOC_KEY: doc} if doc else {}
    if default is not dataclasses.MISSING and not _is_hashable(default):
        default_factory, default = deepcopy_factory(default), dataclasses.MISSING
    return dataclasses.field(default=default, default_factory=default_factory, metadata=metadata)


def config(cls: Optional[type] = None):
    """Declare a configuration schema. Usable as ``@config`` or ``@config()``."""
    def wrap(cls: type) -> type:
        if issubclass(cls, Enum):
            _check_enum(cls)
            return cls
        return _build_schema(cls)

    if cls is None:
        return wrap
    return wrap(cls)


def is_config(obj: Any) -> bool:
    """True for schema classes and their instances."""
    return is_config_class(obj if isinstance(obj, type) else type(obj))


def fields_of(schema: Any) -> Tuple[FieldDescriptor, ...]:
    cls = schema if isinstance(schema, type) else type(schema)
    if not is_config_class(cls):
        raise SchemaDefinitionError(f"{cls.__name__} is not a config schema; decorate it with @config")
    return cls.__dict__[CONFIG_FIELDS_ATTR]


def get_descriptor(schema: Any, name: str) -> FieldDescriptor:
    for descriptor in fields_of(schema):
        if descriptor.name == name:
            return descriptor
    raise missing_field(schema if isinstance(schema, type) else type(schema), name)


def meta_of(instance: Any) -> ConfigMeta:
    """Provenance record of a config instance, created on first access."""
    meta = instance.__dict__.get(META_ATTR)
    if meta is None:
        meta = ConfigMeta()
        object.__setattr__(instance, META_ATTR, meta)
    return meta


def set_meta(instance: Any, meta: ConfigMeta) -> None:
    object.__setattr__(instance, META_ATTR, meta)


def replace_config(instance: Any, **changes: Any) -> Any:
    """``dataclasses.replace`` that keeps the provenance record.

    Extern fields stay extern, so ``write_file`` writes them back to their files.
    """
    fields_of(instance)
    updated = dataclasses.replace(instance, **changes)
    meta = instance.__dict__.get(META_ATTR)
    if meta is not None:
        set_meta(updated, ConfigMeta(path=meta.path, externs=dict(meta.externs)))
    return updated


def describe(schema: Any) -> str:
    """Human-readable listing of a schema's fields."""
    lines = []
    for descriptor in fields_of(schema):
        line = f"{descriptor.name}: {type_name(descriptor.type)} = {descriptor.default()!r}"
        if descriptor.documentation:
            line = f"{line}  # {descriptor.documentation}"
        lines.append(line)
    return "\n".join(lines)


def type_name(tp: Any) -> str:
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp.__name__
    return repr(tp).replace("typing.", "")


# ========== Internals ==========

def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _check_enum(cls: type) -> None:
    if not cls.__members__:
        raise SchemaDefinitionError(f"Enum {cls.__name__} declares no options")


def _build_schema(cls: type) -> type:
    annotations = inspect.get_annotations(cls)
    for name, annotation in annotations.items():
        if name.startswith("__") or "ClassVar" in str(annotation):
            continue
        if name not in cls.__dict__:
            raise SchemaDefinitionError(f"{cls.__name__}.{name} needs a default value")
        value = cls.__dict__[name]
        # dataclasses rejects unhashable defaults; hand out deep copies instead
        if not isinstance(value, dataclasses.Field) and not _is_hashable(value):
            setattr(cls, name, dataclasses.field(default_factory=deepcopy_factory(value)))

    cls = dataclasses.dataclass(cls)

    try:
        hints: Dict[str, Any] = typing.get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise SchemaDefinitionError(f"Cannot resolve field types of {cls.__name__}: {e}") from e

    descriptors = []
    for f in dataclasses.fields(cls):
        if f.default is not dataclasses.MISSING:
            default_factory = deepcopy_factory(f.default)
        elif f.default_factory is not dataclasses.MISSING:
            default_factory = f.default_factory
        else:
            raise SchemaDefinitionError(f"{cls.__name__}.{f.name} needs a default value")

        tp = hints[f.name]
        try:
            loader = build_loader(tp)
        except SchemaDefinitionError as e:
            raise SchemaDefinitionError(f"{cls.__name__}.{f.name}: {e}") from e

        descriptors.append(FieldDescriptor(
            name=f.name,
            type=tp,
            default_factory=default_factory,
            loader=loader,
            documentation=f.metadata.get(DOC_KEY),
        ))

    setattr(cls, CONFIG_FIELDS_ATTR, tuple(descriptors))
    logger.debug(f"Declared config schema {cls.__name__} with {len(descriptors)} fields")
    return cls
