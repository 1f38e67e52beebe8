"""Helm chart repository client.

Downloads chart archives from HTTP(S) chart repositories, caches them,
and exposes the files the generator needs: ``values.yaml`` and an
existing ``values.schema.json``.
"""

from __future__ import annotations

import logging
import ssl
from pathlib import Path
from typing import Any

import httpx

from valet.exceptions import ChartError, ChartTooLargeError, SchemaNotFoundError, WriteError
from valet.helm.cache import DEFAULT_MAX_CACHE_ENTRIES, DEFAULT_MAX_CACHE_SIZE, CacheStats, ChartCache
from valet.helm.chart import (
    DEFAULT_MAX_UNPACKED_SIZE,
    SCHEMA_FILE,
    VALUES_FILE,
    Chart,
    format_bytes,
    load_archive,
)
from valet.loader import decode_values
from valet.schema import Value
from valet.settings import HelmChart, RegistryType

logger = logging.getLogger(__name__)

# Matches the etcd object size limit
DEFAULT_MAX_CHART_SIZE = 1 * 1024 * 1024
DEFAULT_TIMEOUT = 30.0


class HelmClient:
    """Client for HTTP and HTTPS chart repositories.

    Args:
        max_chart_size: Largest archive accepted, in bytes.
        max_unpacked_size: Largest total size of the extracted files.
        max_cache_size: Total cached chart size, in bytes.
        max_cache_entries: Number of charts kept in the cache.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used in tests).
    """

    def __init__(
        self,
        *,
        max_chart_size: int = DEFAULT_MAX_CHART_SIZE,
        max_unpacked_size: int = DEFAULT_MAX_UNPACKED_SIZE,
        max_cache_size: int = DEFAULT_MAX_CACHE_SIZE,
        max_cache_entries: int = DEFAULT_MAX_CACHE_ENTRIES,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.max_chart_size = max_chart_size if max_chart_size > 0 else DEFAULT_MAX_CHART_SIZE
        self.max_unpacked_size = max_unpacked_size if max_unpacked_size > 0 else DEFAULT_MAX_UNPACKED_SIZE
        self.timeout = timeout
        self._transport = transport
        self._cache = ChartCache(max_size=max_cache_size, max_entries=max_cache_entries)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load_chart(self, chart: HelmChart) -> Chart:
        """Return the chart, from cache when possible.

        Raises:
            ChartError: If the chart cannot be downloaded or loaded.
        """
        key = cache_key(chart)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Chart cache hit for %s", chart.ref)
            return cached

        logger.debug("Chart cache miss for %s", chart.ref)
        loaded = self._download_chart(chart)
        self._cache.put(key, loaded)
        return loaded

    def has_schema(self, chart: HelmChart) -> bool:
        """Whether the chart ships a values.schema.json."""
        known = self._cache.has_schema(cache_key(chart))
        if known is not None:
            logger.debug("Metadata cache hit for %s (has_schema=%s)", chart.ref, known)
            return known
        return self.load_chart(chart).has_schema

    def get_schema_bytes(self, chart: HelmChart) -> bytes:
        """Return the chart's values.schema.json content.

        Raises:
            SchemaNotFoundError: If the chart has no schema file.
        """
        data = self.load_chart(chart).get_file(SCHEMA_FILE)
        if data is None:
            raise SchemaNotFoundError(
                f"no {SCHEMA_FILE} found in chart {chart.ref}\n\n"
                "This chart does not include a JSON schema file.\n"
                "You may need to:\n"
                "- Generate a schema from the chart's values.yaml with 'valet generate'\n"
                "- Check if a newer version of the chart includes a schema\n"
                "- Contact the chart maintainer to request a schema be added",
                chart=chart.ref,
            )
        return data

    def download_schema(self, chart: HelmChart, dest: str | Path) -> Path:
        """Save the chart's values.schema.json to ``dest``.

        Raises:
            SchemaNotFoundError: If the chart has no schema file.
            WriteError: If the file cannot be written.
        """
        data = self.get_schema_bytes(chart)
        target = Path(dest)
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise WriteError(f"error writing {target}: {exc}", path=target) from exc
        logger.debug("Saved schema for %s to %s", chart.ref, target)
        return target

    def load_values(self, chart: HelmChart) -> Value:
        """Decode the chart's values.yaml.

        A chart without values.yaml yields an empty mapping.
        """
        data = self.load_chart(chart).get_file(VALUES_FILE)
        if data is None:
            logger.debug("Chart %s has no %s", chart.ref, VALUES_FILE)
            return Value.mapping()
        return decode_values(data, source=f"{chart.ref}/{VALUES_FILE}")

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def _download_chart(self, chart: HelmChart) -> Chart:
        registry = chart.registry
        if registry.type is RegistryType.OCI:
            raise ChartError(
                f"OCI registries are not supported (chart {chart.ref} at {registry.url})",
                chart=chart.ref,
            )

        url = chart_url(chart)
        logger.debug("Downloading chart %s from %s", chart.ref, url)

        try:
            with httpx.Client(**self._client_options(chart)) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    data = self._read_limited(response, chart)
        except httpx.HTTPError as exc:
            raise ChartError(_download_error(chart, url, exc), chart=chart.ref) from exc

        logger.debug("Downloaded chart %s (%s)", chart.ref, format_bytes(len(data)))
        return load_archive(data, ref=chart.ref, max_unpacked_size=self.max_unpacked_size)

    def _read_limited(self, response: httpx.Response, chart: HelmChart) -> bytes:
        declared = response.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_chart_size:
            raise self._too_large(chart, int(declared))

        buffer = bytearray()
        for chunk in response.iter_bytes():
            buffer.extend(chunk)
            if len(buffer) > self.max_chart_size:
                raise self._too_large(chart, len(buffer))
        return bytes(buffer)

    def _too_large(self, chart: HelmChart, size: int) -> ChartTooLargeError:
        return ChartTooLargeError(
            f"chart size ({format_bytes(size)}) exceeds maximum allowed size "
            f"({format_bytes(self.max_chart_size)})",
            size=size,
            limit=self.max_chart_size,
            chart=chart.ref,
        )

    def _client_options(self, chart: HelmChart) -> dict[str, Any]:
        registry = chart.registry
        options: dict[str, Any] = {"timeout": self.timeout, "follow_redirects": True}

        auth = registry.auth
        if auth.username and auth.password.get_secret_value():
            options["auth"] = (auth.username, auth.password.get_secret_value())
        elif auth.token.get_secret_value():
            options["headers"] = {"Authorization": f"Bearer {auth.token.get_secret_value()}"}

        if self._transport is not None:
            options["transport"] = self._transport
            return options

        tls = registry.tls
        if registry.insecure or tls.insecure_skip_tls_verify:
            options["verify"] = False
        elif tls.ca_file or tls.cert_file:
            # ssl.SSLError is an OSError
            try:
                context = ssl.create_default_context(cafile=tls.ca_file or None)
                if tls.cert_file:
                    context.load_cert_chain(tls.cert_file, tls.key_file or None)
            except OSError as exc:
                raise ChartError(
                    f"failed to set up TLS for registry {registry.url}: {exc}\n\n"
                    "Check that the CA and client certificate files exist and are PEM encoded.",
                    chart=chart.ref,
                ) from exc
            options["verify"] = context
        return options


def chart_url(chart: HelmChart) -> str:
    """Archive URL for a chart: ``{registry}/{name}-{version}.tgz``."""
    return f"{chart.registry.url.rstrip('/')}/{chart.name}-{chart.version}.tgz"


def cache_key(chart: HelmChart) -> str:
    return f"{chart.registry.url}/{chart.name}@{chart.version}"


def _download_error(chart: HelmChart, url: str, exc: httpx.HTTPError) -> str:
    registry = chart.registry
    lines = [
        f"failed to download chart from {url}: {exc}",
        "",
        f"Troubleshooting hints for {registry.type} registry:",
        f"- Verify the registry URL is correct: {registry.url}",
        f"- Check if the chart exists: {chart.ref}",
        "- Ensure the registry is accessible from your network",
    ]
    auth = registry.auth
    if auth.username or auth.token.get_secret_value():
        lines.append("- Verify your authentication credentials are correct")
    if registry.type is RegistryType.HTTPS and registry.insecure:
        lines.append("- You're using insecure HTTPS, ensure the registry supports this")
    return "\n".join(lines)
