"""Unit-test conftest: environment and network isolation.

Provides ``autouse`` fixtures so unit tests never pick up a developer's
``VALET_*`` environment, ``.valet.yaml`` or ``.env`` from the working
directory, and never reach a real chart registry.

Tests that talk to a registry pass an ``httpx.MockTransport`` to the
client; any request through the default transport fails loudly.
"""

from __future__ import annotations

import os
from pathlib import Path

import httpx
import pytest

from valet import settings as settings_mod


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test in an empty directory with no VALET_ variables."""
    for name in list(os.environ):
        if name.upper().startswith("VALET_"):
            monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    settings_mod.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _block_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make the real httpx transport raise on use."""

    def _guarded_handle_request(self, request):
        raise RuntimeError(
            f"Unit test attempted a real HTTP request to {request.url}. "
            "Pass an httpx.MockTransport to HelmClient instead."
        )

    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _guarded_handle_request)
