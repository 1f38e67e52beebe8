"""Integration-test conftest.

Integration tests run the full pipeline against the sample chart in
``tests/fixtures``. They copy it into ``tmp_path`` so generated files
never land in the source tree.
"""

import os
import shutil
from pathlib import Path

import pytest


@pytest.fixture
def sample_chart(sample_chart_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A writable copy of the sample chart, with cwd set to tmp_path."""
    target = tmp_path / "sample-chart"
    shutil.copytree(sample_chart_dir, target)
    for name in list(os.environ):
        if name.upper().startswith("VALET_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return target
