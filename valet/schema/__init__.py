"""Value merging and JSON Schema inference.

Usage::

    from valet.schema import Value, assemble_document, deep_merge

    merged = deep_merge(base, overrides)
    document = assemble_document(merged)
    print(document.to_dict()["required"])
"""

from valet.schema.document import SCHEMA_URI, SchemaDocument, assemble_document
from valet.schema.inference import infer_schema
from valet.schema.merge import deep_merge
from valet.schema.nodes import SchemaNode
from valet.schema.required import required_fields
from valet.schema.values import Value, ValueKind

__all__ = [
    "SCHEMA_URI",
    "SchemaDocument",
    "SchemaNode",
    "Value",
    "ValueKind",
    "assemble_document",
    "deep_merge",
    "infer_schema",
    "required_fields",
]
