"""Required-field and component policy.

Decides which properties of an object schema are listed in its
``required`` array:

1. Only keys whose value is non-empty are candidates (see
   ``Value.is_empty``).
2. A component (a mapping with a boolean ``enabled`` key) whose
   ``enabled`` is false requires only ``enabled`` itself.
3. Otherwise every candidate is required, in mapping order.

The policy is applied per object and never looks at parents or
children, so a disabled child component still counts as a candidate
at its parent's level.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from valet.schema.values import Value, ValueKind

if TYPE_CHECKING:
    from valet.schema.nodes import SchemaNode

logger = logging.getLogger(__name__)

ENABLED_KEY = "enabled"


def required_fields(mapping: Value, properties: dict[str, SchemaNode]) -> list[str]:
    """Compute the ``required`` list for an object schema.

    Args:
        mapping: The mapping the object schema was inferred from.
        properties: Already-inferred child schemas, keyed like ``mapping``.

    Returns:
        Required property names in the mapping's key order.
    """
    if mapping.kind is not ValueKind.MAPPING:
        raise TypeError("required_fields expects a mapping")

    if mapping.component_enabled() is False:
        logger.debug("Component has enabled=false, requiring only %r", ENABLED_KEY)
        return [ENABLED_KEY]

    required: list[str] = []
    for key, child in mapping.entries.items():
        if key not in properties:
            continue
        if child.is_empty():
            logger.debug("Skipping field %r because it has an empty default (%s)", key, child.kind)
            continue
        required.append(key)
    return required
