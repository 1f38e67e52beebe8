"""Helpers for building chart archives and mock registries in tests."""

import io
import tarfile
from collections.abc import Callable

import httpx


def build_chart_archive(
    name: str = "mychart",
    version: str = "1.0.0",
    files: dict[str, str | bytes] | None = None,
    *,
    include_chart_yaml: bool = True,
) -> bytes:
    """Build a gzipped chart tarball with files under ``{name}/``."""
    contents: dict[str, str | bytes] = {}
    if include_chart_yaml:
        contents["Chart.yaml"] = f"apiVersion: v2\nname: {name}\nversion: {version}\n"
    contents.update(files or {})

    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for path, data in contents.items():
            raw = data.encode("utf-8") if isinstance(data, str) else data
            info = tarfile.TarInfo(name=f"{name}/{path}")
            info.size = len(raw)
            archive.addfile(info, io.BytesIO(raw))
    return buffer.getvalue()


def registry_transport(
    archives: dict[str, bytes],
    *,
    requests: list[httpx.Request] | None = None,
    status_code: int = 404,
) -> httpx.MockTransport:
    """Mock transport serving archives keyed by URL path.

    Unknown paths answer ``status_code``. Every request is appended to
    ``requests`` when given.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        data = archives.get(request.url.path)
        if data is None:
            return httpx.Response(status_code)
        return httpx.Response(200, content=data)

    return httpx.MockTransport(handler)


def failing_transport(exc_factory: Callable[[httpx.Request], Exception]) -> httpx.MockTransport:
    """Mock transport whose every request raises."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return httpx.MockTransport(handler)
