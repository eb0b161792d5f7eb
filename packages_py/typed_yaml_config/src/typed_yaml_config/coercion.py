"""Per-type loaders converting document nodes into typed values.

``build_loader`` compiles a declared type into a loader once, when a schema
is declared. A loader is total: it either returns a value of the declared
type or raises ``CoercionError``.
"""

import logging
import types
from enum import Enum
from typing import Annotated, Any, Callable, Dict, Literal, Optional, Tuple, Union, get_args, get_origin

from pydantic import ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .document import NodeKind, kind_of
from .domain import Loader, ResolutionContext
from .errors import CoercionError, SchemaDefinitionError

logger = logging.getLogger(__name__)

CONFIG_FIELDS_ATTR = "__config_fields__"

_STRICT = ConfigDict(strict=True)

# Custom type registry: type -> (load, dump)
_custom_types: Dict[Any, Tuple[Callable[[Any], Any], Optional[Callable[[Any], Any]]]] = {}


def register_type(
    tp: Any,
    load: Callable[[Any], Any],
    dump: Optional[Callable[[Any], Any]] = None,
) -> None:
    """Register a loader (and optional dumper) for a type the engine does not know.

    ``load`` receives the raw node and should raise ``CoercionError`` (or
    ``ValueError``/``TypeError``) when the node does not fit.
    """
    if _is_registered(tp):
        logger.warning(f"Overwriting registered loader for {tp!r}")
    _custom_types[tp] = (load, dump)


def unregister_type(tp: Any) -> None:
    _custom_types.pop(tp, None)


def _is_registered(tp: Any) -> bool:
    try:
        return tp in _custom_types
    except TypeError:
        # unhashable annotations (e.g. Annotated with field constraints)
        return False


def get_dumper(tp: Any) -> Optional[Callable[[Any], Any]]:
    """Dumper registered for ``tp`` or its nearest registered base class."""
    for klass in getattr(tp, "__mro__", (tp,)):
        if _is_registered(klass):
            return _custom_types[klass][1]
    return None


def is_config_class(tp: Any) -> bool:
    return isinstance(tp, type) and CONFIG_FIELDS_ATTR in tp.__dict__


def describe_node(node: Any) -> str:
    kind = kind_of(node)
    return kind.value if kind else type(node).__name__


# ========== Scalars ==========

def _load_bool(node: Any, context: Optional[ResolutionContext]) -> bool:
    if kind_of(node) is not NodeKind.BOOL:
        raise CoercionError(f"expected bool, got {describe_node(node)}")
    return node


def _load_int(node: Any, context: Optional[ResolutionContext]) -> int:
    if kind_of(node) is not NodeKind.INTEGER:
        raise CoercionError(f"expected integer, got {describe_node(node)}")
    return node


def _load_float(node: Any, context: Optional[ResolutionContext]) -> float:
    if kind_of(node) not in (NodeKind.FLOAT, NodeKind.INTEGER):
        raise CoercionError(f"expected float, got {describe_node(node)}")
    try:
        return float(node)
    except OverflowError as e:
        raise CoercionError("integer too large for float") from e


def _load_str(node: Any, context: Optional[ResolutionContext]) -> str:
    if kind_of(node) is not NodeKind.STRING:
        raise CoercionError(f"expected string, got {describe_node(node)}")
    return node


def _load_any(node: Any, context: Optional[ResolutionContext]) -> Any:
    return node


def _load_none(node: Any, context: Optional[ResolutionContext]) -> None:
    if node is not None:
        raise CoercionError(f"expected null, got {describe_node(node)}")
    return None


_SCALAR_LOADERS: Dict[Any, Loader] = {
    bool: _load_bool,
    int: _load_int,
    float: _load_float,
    str: _load_str,
    Any: _load_any,
    object: _load_any,
    type(None): _load_none,
    None: _load_none,
}


def _validated(tp: Any, base: Loader) -> Loader:
    """Wrap ``base`` with strict pydantic validation of ``tp`` (constraints, literals)."""
    adapter = TypeAdapter(tp, config=_STRICT)

    def load(node: Any, context: Optional[ResolutionContext]) -> Any:
        value = base(node, context)
        try:
            return adapter.validate_python(value)
        except PydanticValidationError as e:
            errors = "; ".join(err["msg"] for err in e.errors())
            raise CoercionError(errors) from e

    return load


# ========== Containers ==========

def _optional_loader(inner: Loader) -> Loader:
    def load(node: Any, context: Optional[ResolutionContext]) -> Any:
        if node is None:
            return None
        return inner(node, context)
    return load


def _union_loader(members: Tuple[Loader, ...]) -> Loader:
    def load(node: Any, context: Optional[ResolutionContext]) -> Any:
        reasons = []
        for member in members:
            try:
                return member(node, context)
            except CoercionError as e:
                reasons.append(str(e))
        raise CoercionError(f"no union member matched ({'; '.join(reasons)})")
    return load


def _tuple_loader(items: Tuple[Loader, ...]) -> Loader:
    def load(node: Any, context: Optional[ResolutionContext]) -> tuple:
        if kind_of(node) is not NodeKind.SEQUENCE:
            raise CoercionError(f"expected sequence, got {describe_node(node)}")
        if len(node) != len(items):
            raise CoercionError(f"expected sequence of length {len(items)}, got {len(node)}")
        return tuple(item(value, context) for item, value in zip(items, node))
    return load


def _sequence_loader(item: Loader, container: type) -> Loader:
    def load(node: Any, context: Optional[ResolutionContext]) -> Any:
        if kind_of(node) is not NodeKind.SEQUENCE:
            raise CoercionError(f"expected sequence, got {describe_node(node)}")
        return container(item(value, context) for value in node)
    return load


def _mapping_loader(key: Loader, value: Loader) -> Loader:
    def load(node: Any, context: Optional[ResolutionContext]) -> dict:
        if kind_of(node) is not NodeKind.MAPPING:
            raise CoercionError(f"expected mapping, got {describe_node(node)}")
        return {key(k, context): value(v, context) for k, v in node.items()}
    return load


def _enum_loader(enum_cls: type) -> Loader:
    def load(node: Any, context: Optional[ResolutionContext]) -> Enum:
        if kind_of(node) is not NodeKind.STRING:
            raise CoercionError(f"expected {enum_cls.__name__} label, got {describe_node(node)}")
        member = enum_cls.__members__.get(node)
        if member is None:
            raise CoercionError(
                f"'{node}' is not one of {enum_cls.__name__}: {list(enum_cls.__members__)}"
            )
        return member
    return load


def _config_loader(config_cls: type) -> Loader:
    def load(node: Any, context: Optional[ResolutionContext]) -> Any:
        if kind_of(node) is not NodeKind.MAPPING:
            raise CoercionError(f"expected mapping for {config_cls.__name__}, got {describe_node(node)}")
        # Deferred: materializer depends on this module
        from .materializer import materialize
        return materialize(config_cls, node, context)
    return load


def _custom_loader(tp: Any) -> Loader:
    # bound at declaration; later unregister_type() calls do not affect it
    loader, _ = _custom_types[tp]

    def load(node: Any, context: Optional[ResolutionContext]) -> Any:
        try:
            return loader(node)
        except CoercionError:
            raise
        except (ValueError, TypeError) as e:
            raise CoercionError(str(e)) from e
    return load


# ========== Compilation ==========

def build_loader(tp: Any) -> Loader:
    """Compile the loader for declared type ``tp``.

    Raises ``SchemaDefinitionError`` for types the engine cannot load.
    """
    if _is_registered(tp):
        return _custom_loader(tp)

    if is_config_class(tp):
        return _config_loader(tp)

    if isinstance(tp, type) and issubclass(tp, Enum):
        return _enum_loader(tp)

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        base = args[0]
        return _validated(tp, build_loader(base))

    if origin is Literal:
        return _validated(tp, _load_any)

    if origin is Union or origin is types.UnionType:
        non_null = tuple(arg for arg in args if arg is not type(None))
        if len(non_null) == 1 and len(non_null) != len(args):
            return _optional_loader(build_loader(non_null[0]))
        return _union_loader(tuple(build_loader(arg) for arg in args))

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return _sequence_loader(build_loader(args[0]), tuple)
        if args == ((),):
            return _tuple_loader(())
        return _tuple_loader(tuple(build_loader(arg) for arg in args))

    if origin is list:
        return _sequence_loader(build_loader(args[0] if args else Any), list)

    if origin is dict:
        key_type, value_type = args if args else (Any, Any)
        return _mapping_loader(build_loader(key_type), build_loader(value_type))

    # Bare containers behave like their unparameterized generics
    if tp is tuple:
        return _sequence_loader(_load_any, tuple)
    if tp is list:
        return _sequence_loader(_load_any, list)
    if tp is dict:
        return _mapping_loader(_load_any, _load_any)

    try:
        return _SCALAR_LOADERS[tp]
    except (KeyError, TypeError):
        pass

    raise SchemaDefinitionError(
        f"Unsupported field type {tp!r}; register it with register_type()"
    )
