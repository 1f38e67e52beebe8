"""Shared test fixtures for Valet.

Provides common fixtures used across unit and integration tests.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from valet.schema import Value

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# =============================================================================
# VALUES
# =============================================================================


@pytest.fixture
def value() -> Callable[[Any], Value]:
    """Build a Value from plain Python data."""
    return Value.from_python


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write YAML (text or data) under tmp_path and return the path."""

    def _write(name: str, content: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else yaml.safe_dump(content, sort_keys=False)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# =============================================================================
# CHARTS
# =============================================================================


@pytest.fixture
def sample_chart_dir() -> Path:
    """Directory holding the sample chart's values.yaml."""
    return FIXTURES_DIR / "sample-chart"


@pytest.fixture
def chart_dir(tmp_path: Path) -> Path:
    """A chart directory with a small values.yaml."""
    directory = tmp_path / "chart"
    directory.mkdir()
    (directory / "values.yaml").write_text(
        "replicaCount: 3\n"
        "image:\n"
        "  repository: nginx\n"
        "  tag: stable\n"
        "env:\n"
        "  - name: LOG_LEVEL\n"
        "    value: debug\n",
        encoding="utf-8",
    )
    return directory
