#!/usr/bin/env python3
"""
Machine template webhook - Main entry point for the Kopf-based admission server.

Usage:
    python -m machine_template_webhook.operator
    # Or with kopf directly:
    kopf run -m machine_template_webhook.operator --all-namespaces

Environment Variables:
    WATCH_NAMESPACES: Comma-separated list of namespaces to serve
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    ENABLE_WEBHOOKS: Set to 'false' to run without the admission server
"""

import logging
import sys

import kopf

from machine_template_webhook.observability.logging import setup_structured_logging
from machine_template_webhook.observability.metrics import MetricsServer
from machine_template_webhook.settings import settings as operator_settings

# Kopf refuses to start when admission handlers are registered without an
# admission server, so the handlers are only imported when webhooks are on.
if operator_settings.enable_webhooks:
    from machine_template_webhook.webhooks import (  # noqa: F401
        machine_template as machine_template_webhook,
    )

# Global reference to metrics server for cleanup
_global_metrics_server: MetricsServer | None = None


def configure_logging() -> None:
    """Configure structured logging based on operator_settings."""
    setup_structured_logging(
        log_level=operator_settings.log_level.upper(),
        enable_json_formatting=operator_settings.json_logs,
        correlation_id_enabled=operator_settings.correlation_ids,
        log_health_probes=operator_settings.log_health_probes,
        webhook_log_level=operator_settings.webhook_log_level,
    )


def build_operator_settings() -> kopf.OperatorSettings:
    """
    Build kopf settings with the admission server configuration.

    Webhook configurations are managed by the Helm chart, so kopf only
    serves the endpoints and never registers configurations itself.
    """
    settings_obj = kopf.OperatorSettings()
    settings_obj.admission.managed = None

    if operator_settings.enable_webhooks:
        cert_dir = operator_settings.webhook_cert_dir
        settings_obj.admission.server = kopf.WebhookServer(
            port=operator_settings.webhook_port,
            host=operator_settings.webhook_host,
            certfile=f"{cert_dir}/tls.crt",
            pkeyfile=f"{cert_dir}/tls.key",
        )
        logging.info(
            f"Admission webhooks ENABLED on port {operator_settings.webhook_port} "
            f"using certificates from {cert_dir}"
        )
    else:
        settings_obj.admission.server = None
        logging.info("Admission webhooks DISABLED")

    return settings_obj


@kopf.on.startup()
async def startup_handler(settings: kopf.OperatorSettings, **_) -> None:
    """Start the metrics server. kopf performs its own cluster login."""
    logging.info("Starting machine template webhook...")

    global _global_metrics_server
    try:
        metrics_server = MetricsServer(
            port=operator_settings.metrics_port, host=operator_settings.metrics_host
        )
        await metrics_server.start()
        _global_metrics_server = metrics_server
    except OSError as e:
        logging.error(f"Failed to start metrics server: {e}")
        logging.warning("Continuing without metrics server")


@kopf.on.cleanup()
async def cleanup_handler(**_) -> None:
    """Stop the metrics server on shutdown."""
    logging.info("Shutting down machine template webhook...")

    global _global_metrics_server
    if _global_metrics_server:
        await _global_metrics_server.stop()
        _global_metrics_server = None


def main() -> None:
    """
    Main entry point for the webhook.

    This function:
    1. Configures logging
    2. Configures the admission server (must be before kopf.run())
    3. Runs kopf for the configured namespaces
    """
    configure_logging()
    settings_obj = build_operator_settings()

    watched_namespaces = operator_settings.watched_namespaces
    try:
        if watched_namespaces:
            kopf.run(
                namespaces=watched_namespaces,
                liveness_endpoint="http://0.0.0.0:8080/healthz",
                settings=settings_obj,
            )
        else:
            kopf.run(
                clusterwide=True,
                liveness_endpoint="http://0.0.0.0:8080/healthz",
                settings=settings_obj,
            )
    except KeyboardInterrupt:
        logging.info("Received shutdown signal")
        sys.exit(0)


if __name__ == "__main__":
    main()
