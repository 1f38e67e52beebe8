"""Chart archive model and loader."""

from __future__ import annotations

import io
import tarfile
from dataclasses import dataclass, field

import yaml

from valet.exceptions import ChartError, ChartTooLargeError
from valet.loader import load_yaml

CHART_FILE = "Chart.yaml"
VALUES_FILE = "values.yaml"
SCHEMA_FILE = "values.schema.json"

DEFAULT_MAX_UNPACKED_SIZE = 10 * 1024 * 1024


@dataclass
class Chart:
    """A loaded chart archive.

    Attributes:
        name: Chart name from Chart.yaml.
        version: Chart version from Chart.yaml.
        files: File contents keyed by path relative to the chart root.
    """

    name: str
    version: str
    files: dict[str, bytes] = field(default_factory=dict)

    @property
    def size(self) -> int:
        """Total size of all files in bytes."""
        return sum(len(data) for data in self.files.values())

    @property
    def has_schema(self) -> bool:
        return SCHEMA_FILE in self.files

    def get_file(self, name: str) -> bytes | None:
        return self.files.get(name)


def load_archive(data: bytes, *, ref: str = "", max_unpacked_size: int = DEFAULT_MAX_UNPACKED_SIZE) -> Chart:
    """Load a gzipped chart tarball.

    Paths inside the archive are stripped of their leading chart
    directory (``mychart/values.yaml`` becomes ``values.yaml``).

    Args:
        data: Raw ``.tgz`` bytes.
        ref: Chart reference for error messages.
        max_unpacked_size: Largest total size of the extracted files.

    Returns:
        The loaded Chart.

    Raises:
        ChartError: If the archive is unreadable or has no Chart.yaml.
        ChartTooLargeError: If the extracted files exceed ``max_unpacked_size``.
    """
    files: dict[str, bytes] = {}
    unpacked = 0
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
            for member in archive:
                if not member.isfile():
                    continue
                _, _, relative = member.name.partition("/")
                if not relative:
                    continue
                unpacked += member.size
                if unpacked > max_unpacked_size:
                    raise ChartTooLargeError(
                        f"chart {ref} unpacks to more than {format_bytes(max_unpacked_size)}",
                        size=unpacked,
                        limit=max_unpacked_size,
                        chart=ref,
                    )
                extracted = archive.extractfile(member)
                if extracted is None:
                    continue
                files[relative] = extracted.read()
    except (tarfile.TarError, OSError, EOFError) as exc:
        raise ChartError(
            f"failed to load chart archive for {ref}: {exc}\n\n"
            "Possible causes:\n"
            "- The downloaded file is not a valid Helm chart archive\n"
            "- The chart archive is corrupted or incomplete\n"
            f"- Downloaded size: {format_bytes(len(data))}",
            chart=ref,
        ) from exc

    if CHART_FILE not in files:
        raise ChartError(f"chart archive for {ref} has no {CHART_FILE}", chart=ref)

    try:
        metadata = load_yaml(files[CHART_FILE]) or {}
    except yaml.YAMLError as exc:
        raise ChartError(f"invalid {CHART_FILE} in {ref}: {exc}", chart=ref) from exc
    if not isinstance(metadata, dict):
        raise ChartError(f"invalid {CHART_FILE} in {ref}: expected a mapping", chart=ref)

    return Chart(
        name=str(metadata.get("name", "")),
        version=str(metadata.get("version", "")),
        files=files,
    )


def format_bytes(size: int) -> str:
    """Format a byte count for humans (``1.5 KiB``)."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    value = float(size)
    for suffix in ("KiB", "MiB", "GiB", "TiB"):
        value /= unit
        if value < unit:
            return f"{value:.1f} {suffix}"
    return f"{value:.1f} PiB"
