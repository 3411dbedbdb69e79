"""
Monitoring and metrics collection for the crawler.
"""

import time
import logging
from typing import Dict, Optional, Any
from dataclasses import dataclass, field

from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest
from prometheus_client import start_http_server


SKIP_REASONS = ('depth', 'deadline', 'ignored', 'duplicate')


@dataclass
class CrawlStats:
    """In-process statistics for one crawl."""
    start_time: float = field(default_factory=time.monotonic)
    pages_parsed: int = 0
    parse_errors: int = 0
    skipped: Dict[str, int] = field(default_factory=lambda: {reason: 0 for reason in SKIP_REASONS})

    @property
    def elapsed_time(self) -> float:
        return time.monotonic() - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pages_parsed': self.pages_parsed,
            'parse_errors': self.parse_errors,
            'skipped': dict(self.skipped),
            'elapsed_time': round(self.elapsed_time, 3),
        }


class CrawlMetrics:
    """
    Prometheus metrics for crawl activity.

    Each instance owns its registry so several engines (or tests) can
    coexist in one process without duplicate registration.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.logger = logging.getLogger(__name__)
        self.registry = registry or CollectorRegistry()

        self.pages_parsed = Counter(
            'crawler_pages_parsed_total',
            'Total number of pages fetched and parsed',
            registry=self.registry
        )
        self.urls_skipped = Counter(
            'crawler_urls_skipped_total',
            'URLs not processed, by reason',
            ['reason'],
            registry=self.registry
        )
        self.parse_errors = Counter(
            'crawler_parse_errors_total',
            'Total number of pages that failed to fetch or parse',
            registry=self.registry
        )
        self.parse_seconds = Histogram(
            'crawler_parse_seconds',
            'Time spent fetching and parsing a page',
            registry=self.registry
        )

    def record_parsed(self, duration: float):
        self.pages_parsed.inc()
        self.parse_seconds.observe(duration)

    def record_skipped(self, reason: str):
        if reason not in SKIP_REASONS:
            raise ValueError(f"Unknown skip reason: {reason}")
        self.urls_skipped.labels(reason=reason).inc()

    def record_error(self):
        self.parse_errors.inc()

    def get_sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Read the current value of a sample, 0.0 if never recorded."""
        value = self.registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)


def start_metrics_server(metrics: CrawlMetrics, port: int):
    """Expose the metrics registry over HTTP."""
    start_http_server(port, registry=metrics.registry)
    metrics.logger.info(f"Prometheus metrics server started on port {port}")
