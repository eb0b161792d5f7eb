"""Field resolution: one descriptor plus one (possibly absent) node."""

import logging
from typing import Any, Optional

from .domain import MISSING, FieldDescriptor, ResolutionContext
from .errors import CoercionError

logger = logging.getLogger(__name__)


def coerce_field(
    descriptor: FieldDescriptor,
    node: Any = MISSING,
    context: Optional[ResolutionContext] = None
) -> Any:
    """Convert ``node`` with the descriptor's loader.

    An absent node yields the default. Raises ``CoercionError`` when the node
    does not fit the declared type.
    """
    if node is MISSING:
        return descriptor.default()
    return descriptor.loader(node, context)


def resolve_field(
    descriptor: FieldDescriptor,
    node: Any = MISSING,
    context: Optional[ResolutionContext] = None
) -> Any:
    """Resolve a field, substituting the default for any soft failure."""
    try:
        return coerce_field(descriptor, node, context)
    except CoercionError as e:
        where = context.path if context and context.path else descriptor.name
        logger.debug(f"Field '{where}' defaulted: {e}")
        if context is not None:
            context.record_failure(str(e))
        return descriptor.default()
