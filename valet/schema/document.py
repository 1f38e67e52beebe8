"""Schema document assembly."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from valet.exceptions import InvalidRootError
from valet.schema.inference import RequiredPolicy, infer_schema
from valet.schema.nodes import SchemaNode
from valet.schema.required import required_fields
from valet.schema.values import Value, ValueKind

SCHEMA_URI = "http://json-schema.org/schema#"


@dataclass
class SchemaDocument:
    """A root object schema plus its ``$schema`` header."""

    root: SchemaNode
    schema_uri: str = SCHEMA_URI

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary, ``$schema`` first."""
        return {"$schema": self.schema_uri, **self.root.to_dict()}


def assemble_document(root: Value, *, policy: RequiredPolicy = required_fields) -> SchemaDocument:
    """Infer the root schema and wrap it in a document.

    Args:
        root: Merged values mapping.
        policy: Required-field policy passed through to inference.

    Returns:
        The assembled SchemaDocument.

    Raises:
        InvalidRootError: If ``root`` is not a mapping.
    """
    if root.kind is not ValueKind.MAPPING:
        raise InvalidRootError(f"Schema root must be a mapping, got {root.kind}")
    return SchemaDocument(root=infer_schema(root, policy=policy))
