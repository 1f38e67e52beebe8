"""Size- and count-bounded LRU cache for loaded charts."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass

from valet.helm.chart import Chart, format_bytes

logger = logging.getLogger(__name__)

DEFAULT_MAX_CACHE_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_CACHE_ENTRIES = 50


@dataclass
class CacheStats:
    """Snapshot of cache counters."""

    entries: int = 0
    size_bytes: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    metadata_entries: int = 0
    metadata_hits: int = 0
    metadata_misses: int = 0

    @property
    def hit_rate(self) -> float:
        """Chart cache hit rate as a percentage."""
        total = self.hits + self.misses
        return self.hits / total * 100 if total else 0.0


class ChartCache:
    """Thread-safe LRU cache of charts plus a has-schema metadata cache.

    Charts are evicted least-recently-used first until both the total
    size and the entry count are within limits. The metadata cache
    holds twice as many entries as the chart cache.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_CACHE_SIZE,
        max_entries: int = DEFAULT_MAX_CACHE_ENTRIES,
    ) -> None:
        self.max_size = max_size if max_size > 0 else DEFAULT_MAX_CACHE_SIZE
        self.max_entries = max_entries if max_entries > 0 else DEFAULT_MAX_CACHE_ENTRIES
        self._lock = threading.Lock()
        self._charts: OrderedDict[str, Chart] = OrderedDict()
        self._metadata: OrderedDict[str, bool] = OrderedDict()
        self._size = 0
        self._stats = CacheStats()

    def get(self, key: str) -> Chart | None:
        with self._lock:
            chart = self._charts.get(key)
            if chart is None:
                self._stats.misses += 1
                return None
            self._charts.move_to_end(key)
            self._stats.hits += 1
            return chart

    def put(self, key: str, chart: Chart) -> None:
        """Cache a chart, evicting LRU entries as needed.

        A chart larger than ``max_size`` is not cached; only its
        has-schema answer is remembered.
        """
        size = chart.size
        with self._lock:
            if size > self.max_size:
                logger.warning(
                    "Chart %s too large to cache (%s, limit %s)",
                    key,
                    format_bytes(size),
                    format_bytes(self.max_size),
                )
                self._remember_schema(key, chart.has_schema)
                return
            existing = self._charts.pop(key, None)
            if existing is not None:
                self._size -= existing.size
            while self._charts and (
                self._size + size > self.max_size or len(self._charts) >= self.max_entries
            ):
                self._evict_oldest()
            self._charts[key] = chart
            self._size += size
            self._remember_schema(key, chart.has_schema)

    def has_schema(self, key: str) -> bool | None:
        """Cached has-schema answer, or None when unknown."""
        with self._lock:
            known = self._metadata.get(key)
            if known is None:
                self._stats.metadata_misses += 1
                return None
            self._metadata.move_to_end(key)
            self._stats.metadata_hits += 1
            return known

    def clear(self) -> None:
        with self._lock:
            self._charts.clear()
            self._metadata.clear()
            self._size = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                entries=len(self._charts),
                size_bytes=self._size,
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                metadata_entries=len(self._metadata),
                metadata_hits=self._stats.metadata_hits,
                metadata_misses=self._stats.metadata_misses,
            )

    # Callers hold self._lock.

    def _evict_oldest(self) -> None:
        key, chart = self._charts.popitem(last=False)
        self._size -= chart.size
        self._stats.evictions += 1
        logger.debug(
            "Evicted chart %s from cache (%s, %d evictions)",
            key,
            format_bytes(chart.size),
            self._stats.evictions,
        )

    def _remember_schema(self, key: str, has_schema: bool) -> None:
        self._metadata[key] = has_schema
        self._metadata.move_to_end(key)
        while len(self._metadata) > self.max_entries * 2:
            self._metadata.popitem(last=False)
