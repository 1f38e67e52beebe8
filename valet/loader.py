"""Values file loading.

Reads YAML values documents from disk (or from in-memory bytes for
remote charts) and decodes them into Value mappings.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from valet.exceptions import NotAMappingError, NotFoundError, ParseError, ReadError
from valet.schema.values import Value, ValueKind

logger = logging.getLogger(__name__)

VALUES_FILENAMES = ("values.yaml", "values.yml")


class ValuesLoader(yaml.SafeLoader):
    """SafeLoader that also reads YAML 1.2 floats such as ``1e3``.

    The YAML 1.1 float rule used by PyYAML requires a decimal point, so
    exponent-only literals would otherwise decode as strings.
    """


ValuesLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(
        r"""^(?:[-+]?[0-9][0-9_]*\.[0-9_]*(?:[eE][-+]?[0-9]+)?
        |[-+]?[0-9][0-9_]*[eE][-+]?[0-9]+
        |[-+]?\.[0-9_]+(?:[eE][-+]?[0-9]+)?
        |[-+]?[0-9][0-9_]*(?::[0-5]?[0-9])+\.[0-9_]*
        |[-+]?\.(?:inf|Inf|INF)
        |\.(?:nan|NaN|NAN))$""",
        re.X,
    ),
    list("-+0123456789."),
)


def load_yaml(data: bytes | str) -> Any:
    """Decode one YAML document with ``ValuesLoader``."""
    return yaml.load(data, Loader=ValuesLoader)  # noqa: S506


def find_values_file(context_dir: str | Path) -> Path:
    """Locate the values file in a chart directory.

    Args:
        context_dir: Chart or context directory.

    Returns:
        Path to ``values.yaml``, or ``values.yml`` when only that exists.

    Raises:
        NotFoundError: If neither file exists.
    """
    directory = Path(context_dir)
    for name in VALUES_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    raise NotFoundError(f"no values.yaml or values.yml found in {directory}", path=directory)


def decode_values(data: bytes | str, source: str | Path = "<memory>") -> Value:
    """Decode a YAML document into a mapping Value.

    An empty document decodes to an empty mapping.

    Args:
        data: Raw YAML bytes or text.
        source: File or chart identity for error messages.

    Returns:
        Mapping Value.

    Raises:
        ParseError: If the data is not valid YAML.
        NotAMappingError: If the top-level node is not a mapping.
    """
    try:
        decoded = load_yaml(data)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        raise ParseError(f"invalid YAML in {source}: {exc}", line=line, path=source) from exc

    if decoded is None:
        return Value.mapping()

    value = Value.from_python(decoded)
    if value.kind is not ValueKind.MAPPING:
        raise NotAMappingError(
            f"expected a YAML mapping at the top of {source}, got {value.kind}",
            found=str(value.kind),
            path=source,
        )
    return value


def load_values(path: str | Path) -> Value:
    """Load a values document from disk.

    Args:
        path: YAML file path.

    Returns:
        Mapping Value.

    Raises:
        NotFoundError: If the file does not exist.
        ReadError: If the path is a directory or cannot be read.
        ParseError: If the file is not valid YAML.
        NotAMappingError: If the top-level node is not a mapping.
    """
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except FileNotFoundError as exc:
        raise NotFoundError(f"file not found: {file_path}", path=file_path) from exc
    except OSError as exc:
        raise ReadError(f"cannot read {file_path}: {exc.strerror or exc}", path=file_path) from exc

    logger.debug("Loaded %s (%d bytes)", file_path, len(data))
    return decode_values(data, source=file_path)
