"""Schema document serialization."""

import json
import logging
from pathlib import Path
from typing import Any

from valet.exceptions import WriteError
from valet.schema.document import SchemaDocument

logger = logging.getLogger(__name__)


def render_schema(document: SchemaDocument) -> str:
    """Render a schema document as indented JSON text.

    Raises:
        WriteError: If a default is NaN or infinite, which JSON cannot hold.
    """
    try:
        text = json.dumps(document.to_dict(), indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise WriteError(f"schema contains a value JSON cannot represent (.nan or .inf): {exc}") from exc
    return text + "\n"


def write_schema(document: SchemaDocument, path: str | Path) -> int:
    """Write a schema document to disk.

    Args:
        document: Assembled schema document.
        path: Destination file.

    Returns:
        Number of bytes written.

    Raises:
        WriteError: If the file cannot be written.
    """
    data = render_schema(document).encode("utf-8")
    target = Path(path)
    try:
        target.write_bytes(data)
    except OSError as exc:
        raise WriteError(f"error writing {target}: {exc}", path=target) from exc
    logger.debug("Wrote %s (%d bytes)", target, len(data))
    return len(data)


def count_schema_fields(schema: dict[str, Any]) -> int:
    """Count properties in a schema dictionary, recursively.

    Array item schemas are not descended into.
    """
    count = 0
    properties = schema.get("properties")
    if isinstance(properties, dict):
        count += len(properties)
        for prop in properties.values():
            if isinstance(prop, dict):
                count += count_schema_fields(prop)
    return count
