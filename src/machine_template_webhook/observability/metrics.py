"""
Prometheus metrics for the machine template webhook.

This module provides admission decision metrics and a small HTTP server
exposing them for scraping.
"""

import logging

# aiohttp is already required by kopf for its webhook server; reusing it
# keeps the metrics server on the same HTTP stack.
from aiohttp.web import (
    Application,
    AppRunner,
    Request,
    Response,
    TCPSite,
)
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from machine_template_webhook.models.admission import Decision

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: CollectorRegistry | None = None

ADMISSION_TOTAL = Counter(
    "machine_template_webhook_admission_total",
    "Total number of admission requests by outcome",
    ["operation", "result"],
    registry=None,
)

ADMISSION_DURATION = Histogram(
    "machine_template_webhook_admission_duration_seconds",
    "Time spent evaluating admission requests",
    ["operation"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
    registry=None,
)

DIAGNOSTICS_TOTAL = Counter(
    "machine_template_webhook_diagnostics_total",
    "Total number of diagnostics emitted by kind",
    ["kind"],
    registry=None,
)


def get_metrics_registry() -> CollectorRegistry:
    """Get or create the global metrics registry."""
    global _metrics_registry

    if _metrics_registry is None:
        _metrics_registry = CollectorRegistry()
        for metric in [ADMISSION_TOTAL, ADMISSION_DURATION, DIAGNOSTICS_TOTAL]:
            _metrics_registry.register(metric)

    return _metrics_registry


def record_admission(operation: str, decision: Decision, duration: float) -> None:
    """Record the outcome of one admission request."""
    ADMISSION_TOTAL.labels(operation=operation, result=decision.result).inc()
    ADMISSION_DURATION.labels(operation=operation).observe(duration)
    for diagnostic in decision.diagnostics:
        DIAGNOSTICS_TOTAL.labels(kind=diagnostic.kind.value).inc()


class MetricsServer:
    """HTTP server for exposing Prometheus metrics."""

    def __init__(self, port: int = 8081, host: str = "0.0.0.0"):
        """
        Initialize metrics server.

        Args:
            port: Port to serve metrics on
            host: Host interface to bind to
        """
        self.port = port
        self.host = host
        self.app = Application()
        self.runner: AppRunner | None = None
        self.site: TCPSite | None = None
        self.app.router.add_get("/metrics", self._metrics_handler)
        self.app.router.add_get("/healthz", self._healthz_handler)

    async def _metrics_handler(self, request: Request) -> Response:
        """Handle /metrics endpoint for Prometheus scraping."""
        try:
            metrics_data = generate_latest(get_metrics_registry())
            return Response(body=metrics_data, content_type=CONTENT_TYPE_LATEST)
        except Exception as e:
            logger.error(f"Failed to generate metrics: {e}")
            return Response(
                text=f"Error generating metrics: {type(e).__name__}. Check logs for details.",
                status=500,
            )

    async def _healthz_handler(self, request: Request) -> Response:
        """Handle /healthz endpoint for Kubernetes probes."""
        return Response(text="ok")

    async def start(self) -> None:
        """Start the metrics server."""
        self.runner = AppRunner(self.app)
        await self.runner.setup()

        self.site = TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        logger.info(f"Metrics available at http://{self.host}:{self.port}/metrics")

    async def stop(self) -> None:
        """Stop the metrics server."""
        if self.site:
            await self.site.stop()
            self.site = None

        if self.runner:
            await self.runner.cleanup()
            self.runner = None

        logger.info("Metrics server stopped")
