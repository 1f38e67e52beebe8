"""Remote Helm chart retrieval.

Usage::

    from valet.helm import HelmClient

    client = HelmClient()
    values = client.load_values(settings.remote_chart)
"""

from valet.helm.cache import CacheStats, ChartCache
from valet.helm.chart import Chart, load_archive
from valet.helm.client import HelmClient, chart_url

__all__ = [
    "CacheStats",
    "Chart",
    "ChartCache",
    "HelmClient",
    "chart_url",
    "load_archive",
]
