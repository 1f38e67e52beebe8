"""Schema inference from decoded values.

``infer_schema`` walks a Value tree and returns the matching SchemaNode
tree. Object nodes get their ``required`` list from the required-field
policy once their properties are built.
"""

from __future__ import annotations

from collections.abc import Callable

from valet.schema.nodes import SchemaNode
from valet.schema.required import required_fields
from valet.schema.values import Value, ValueKind

RequiredPolicy = Callable[[Value, dict[str, SchemaNode]], list[str]]


def infer_schema(value: Value, *, policy: RequiredPolicy = required_fields) -> SchemaNode:
    """Infer a schema node from a value.

    Arrays take their item schema from the first element only; later
    elements never widen it. Empty arrays carry no item schema.

    Args:
        value: Decoded value (usually the merged values mapping).
        policy: Function computing an object's required list.

    Returns:
        The inferred schema node.
    """
    kind = value.kind
    if kind is ValueKind.NULL:
        return SchemaNode(type=kind)
    if kind is ValueKind.SEQUENCE:
        return _infer_array(value, policy)
    if kind is ValueKind.MAPPING:
        return _infer_object(value, policy)
    # boolean, integer, number, string
    return SchemaNode(type=kind, default=value)


def _infer_array(value: Value, policy: RequiredPolicy) -> SchemaNode:
    items = value.items
    item_schema = infer_schema(items[0], policy=policy) if items else None
    return SchemaNode(type=ValueKind.SEQUENCE, default=value, items=item_schema)


def _infer_object(value: Value, policy: RequiredPolicy) -> SchemaNode:
    properties = {key: infer_schema(child, policy=policy) for key, child in value.entries.items()}
    return SchemaNode(
        type=ValueKind.MAPPING,
        default=value,
        properties=properties,
        required=policy(value, properties),
    )
