"""Schema generation pipeline.

Wires the loader, the merge/inference core and the writer together.
Collaborators are passed explicitly so callers (and tests) can swap
them out.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from valet.exceptions import NotFoundError
from valet.loader import find_values_file, load_values
from valet.schema import SchemaDocument, Value, assemble_document, deep_merge
from valet.settings import DEFAULT_OUTPUT
from valet.writer import count_schema_fields, write_schema

logger = logging.getLogger(__name__)

Loader = Callable[[Path], Value]
Writer = Callable[[SchemaDocument, Path], object]


@dataclass
class GenerateResult:
    """Outcome of a generate run."""

    output_path: Path
    message: str
    field_count: int
    document: SchemaDocument


def generate_from_values(base: Value, overrides: Value | None = None) -> SchemaDocument:
    """Merge overrides into base and build the schema document.

    Args:
        base: Values mapping.
        overrides: Optional overrides mapping.

    Returns:
        The assembled schema document.

    Raises:
        InvalidRootError: If the merged root is not a mapping.
    """
    merged = deep_merge(base, overrides) if overrides is not None else base
    return assemble_document(merged)


def generate(
    context_dir: str | Path,
    overrides: str | None = None,
    output: str | Path = DEFAULT_OUTPUT,
    *,
    loader: Loader = load_values,
    writer: Writer = write_schema,
) -> GenerateResult:
    """Generate ``values.schema.json`` for a local chart directory.

    Args:
        context_dir: Directory holding values.yaml (or values.yml).
        overrides: Overrides file name, relative to ``context_dir``.
        output: Output file; relative paths resolve against ``context_dir``.
        loader: Values loader.
        writer: Schema writer.

    Returns:
        GenerateResult describing the written schema.

    Raises:
        NotFoundError: If the values or overrides file is missing.
        ParseError: If a file is not valid YAML.
        NotAMappingError: If a file's top level is not a mapping.
        WriteError: If the schema cannot be written.
    """
    directory = Path(context_dir)
    values_path = find_values_file(directory)
    base = loader(values_path)
    log_component_summary(values_path, base)

    override_values: Value | None = None
    if overrides:
        overrides_path = directory / overrides
        if not overrides_path.is_file():
            raise NotFoundError(
                f"overrides file {overrides} not found in {directory}",
                path=overrides_path,
            )
        override_values = loader(overrides_path)
        logger.debug("Merging %s into %s", overrides_path, values_path.name)

    document = generate_from_values(base, override_values)

    output_path = Path(output)
    if not output_path.is_absolute():
        output_path = directory / output_path
    writer(document, output_path)

    field_count = count_schema_fields(document.to_dict())
    logger.debug("Schema for %s has %d fields", values_path, field_count)

    if overrides:
        message = f"Generated {output_path} by merging {overrides} into {values_path.name}"
    else:
        message = f"Generated {output_path} from {values_path.name}"
    return GenerateResult(
        output_path=output_path,
        message=message,
        field_count=field_count,
        document=document,
    )


def log_component_summary(source: str | Path, values: Value) -> None:
    """Log enabled/disabled top-level components at DEBUG level."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    entries = values.entries
    logger.debug("Values loaded from %s: %d top-level keys", source, len(entries))
    enabled_count = 0
    disabled_count = 0
    for key, child in entries.items():
        enabled = child.component_enabled()
        if enabled is None:
            continue
        if enabled:
            enabled_count += 1
        else:
            disabled_count += 1
        logger.debug("Component %s enabled=%s", key, enabled)
    logger.debug("Components: %d enabled, %d disabled", enabled_count, disabled_count)
