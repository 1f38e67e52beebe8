"""In-memory JSON Schema fragments produced by inference."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from valet.schema.values import Value, ValueKind


@dataclass
class SchemaNode:
    """One JSON Schema fragment.

    Attributes:
        type: JSON Schema type name, taken from the source value's kind.
        default: Source value, absent for null.
        properties: Child schemas keyed by property name (objects only).
        required: Required property names in mapping order (objects only).
        items: Item schema (arrays only, absent for empty arrays).
    """

    type: ValueKind
    default: Value | None = None
    properties: dict[str, SchemaNode] | None = None
    required: list[str] | None = None
    items: SchemaNode | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        result: dict[str, Any] = {"type": str(self.type)}
        if self.default is not None:
            result["default"] = self.default.to_python()
        if self.properties is not None:
            result["properties"] = {name: child.to_dict() for name, child in self.properties.items()}
        if self.required is not None:
            result["required"] = list(self.required)
        if self.items is not None:
            result["items"] = self.items.to_dict()
        return result
