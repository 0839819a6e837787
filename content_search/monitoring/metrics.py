"""
Metrics Collection for Content Search

This module collects refresh and search metrics with prometheus_client. Each
MetricsManager owns its own registry, so several search services can run in one process
without clashing metric names.

Metric Categories:
1. Refresh Metrics:
   - Refresh attempts by status
   - Mirror failures
   - Callback failures
   - Cached record count
   - Refresh latency

2. Search Metrics:
   - Queries by resolving tier
   - Scoring errors
   - Search latency

Example Usage:
    from content_search.monitoring.metrics import MetricsManager

    metrics = MetricsManager()
    metrics.increment_counter("refreshes", labels={"status": "success"})
    metrics.set_gauge("cached_records", 1200)
    metrics.serve(9100)
"""

import logging
from typing import Dict, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

logger = logging.getLogger(__name__)


class MetricsManager:
    """Metrics manager."""

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """Initialize metrics manager.

        Args:
            registry: Registry to register metrics in (defaults to a private one)
        """
        self.registry = registry or CollectorRegistry()
        self.port: Optional[int] = None
        self.counters: Dict[str, Counter] = {}
        self.gauges: Dict[str, Gauge] = {}
        self.histograms: Dict[str, Histogram] = {}
        self._initialize_metrics()

    def _initialize_metrics(self) -> None:
        """Initialize metrics."""
        # Counters
        self.counters["refreshes"] = Counter(
            "refreshes_total",
            "Total number of completed refresh attempts",
            ["status"],
            registry=self.registry,
        )
        self.counters["mirror_failures"] = Counter(
            "mirror_failures_total",
            "Total number of failed mirror requests",
            registry=self.registry,
        )
        self.counters["callback_failures"] = Counter(
            "callback_failures_total",
            "Total number of failed refresh callbacks",
            registry=self.registry,
        )
        self.counters["queries"] = Counter(
            "queries_total",
            "Total number of queries",
            ["tier"],
            registry=self.registry,
        )
        self.counters["scoring_errors"] = Counter(
            "scoring_errors_total",
            "Total number of ranked fields that failed to score",
            registry=self.registry,
        )

        # Gauges
        self.gauges["cached_records"] = Gauge(
            "cached_records",
            "Number of records in the cache",
            registry=self.registry,
        )

        # Histograms
        self.histograms["refresh_latency"] = Histogram(
            "refresh_latency_seconds",
            "Refresh latency in seconds",
            registry=self.registry,
        )
        self.histograms["search_latency"] = Histogram(
            "search_latency_seconds",
            "Search latency in seconds",
            registry=self.registry,
        )

    def serve(self, port: int) -> None:
        """Expose the registry over HTTP.

        Args:
            port: Port to listen on
        """
        try:
            start_http_server(port, registry=self.registry)
            self.port = port
            logger.info(f"Started Prometheus metrics server on port {port}")
        except OSError as e:
            logger.error(f"Failed to start metrics server on port {port}: {e}")
            raise

    def increment_counter(
        self, name: str, value: int = 1, labels: Optional[Dict] = None
    ) -> None:
        """Increment counter.

        Args:
            name: Counter name
            value: Value to increment by
            labels: Counter labels
        """
        try:
            counter = self.counters.get(name)
            if not counter:
                logger.error(f"Counter {name} not found")
                return

            if labels:
                counter.labels(**labels).inc(value)
            else:
                counter.inc(value)

        except Exception as e:
            logger.error(f"Failed to increment counter {name}: {e}")

    def set_gauge(self, name: str, value: float) -> None:
        """Set gauge value.

        Args:
            name: Gauge name
            value: Value to set
        """
        try:
            gauge = self.gauges.get(name)
            if not gauge:
                logger.error(f"Gauge {name} not found")
                return

            gauge.set(value)

        except Exception as e:
            logger.error(f"Failed to set gauge {name}: {e}")

    def observe_value(self, name: str, value: float) -> None:
        """Observe histogram value.

        Args:
            name: Histogram name
            value: Value to observe
        """
        try:
            histogram = self.histograms.get(name)
            if not histogram:
                logger.error(f"Histogram {name} not found")
                return

            histogram.observe(value)

        except Exception as e:
            logger.error(f"Failed to observe value for {name}: {e}")

    def get_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Read a sample from the registry.

        Args:
            name: Sample name, e.g. ``refreshes_total``
            labels: Sample labels

        Returns:
            Sample value, 0.0 if the sample does not exist yet
        """
        value = self.registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0
