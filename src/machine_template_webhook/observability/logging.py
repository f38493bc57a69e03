"""
Structured logging utilities for the machine template webhook.

This module provides correlation ID tracking, structured log formatting,
and admission decision logging for production troubleshooting.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

# Context variable for tracking correlation IDs across async operations
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Paths that should be filtered from access logs (health probes)
HEALTH_PROBE_PATHS = frozenset({"/healthz", "/metrics"})

STRUCTURED_FIELDS = (
    "resource_type",
    "resource_name",
    "namespace",
    "operation",
    "decision",
    "diagnostics",
    "duration",
    "error_type",
)


class HealthProbeFilter(logging.Filter):
    """
    Logging filter that suppresses health probe and metrics endpoint logs.

    These endpoints are hit frequently by Kubernetes probes and monitoring
    systems, generating excessive noise in logs during debugging.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return all(path not in message for path in HEALTH_PROBE_PATHS)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add correlation ID to the log record.

        Args:
            record: The log record to process

        Returns:
            True to allow the record to be processed
        """
        current_correlation_id = correlation_id.get()
        if not current_correlation_id:
            current_correlation_id = generate_correlation_id()
            correlation_id.set(current_correlation_id)

        record.correlation_id = current_correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as structured JSON for better parsing and analysis
    in production monitoring systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields are set as record attributes by logging's `extra=`
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """
    Generate a new correlation ID.

    Returns:
        Unique correlation ID string
    """
    return str(uuid.uuid4())[:8]


def set_correlation_id(corr_id: str) -> str:
    """Set the correlation ID for the current context."""
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    """Get the current correlation ID, or empty string if none set."""
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
    log_health_probes: bool = False,
    webhook_log_level: str = "INFO",
) -> None:
    """
    Set up structured logging for the webhook.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
        log_health_probes: Whether to log health probe requests (default: False)
        webhook_log_level: Log level for webhook-related loggers
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter: logging.Formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    if not log_health_probes:
        handler.addFilter(HealthProbeFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Set specific logger levels for third-party libraries
    logging.getLogger("kopf").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.server").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.web").setLevel(logging.WARNING)

    webhook_level = getattr(logging, webhook_log_level.upper(), logging.INFO)
    logging.getLogger("machine_template_webhook.webhooks").setLevel(webhook_level)


class OperatorLogger:
    """
    Logger for admission events with structured logging support.

    Instances are handed to the request dispatcher at construction so the
    decision logic never reaches for a process-wide logger itself.
    """

    def __init__(self, name: str):
        """
        Initialize operator logger.

        Args:
            name: Logger name (usually the module name)
        """
        self.logger = logging.getLogger(name)

    def log_admission_request(
        self,
        operation: str,
        resource_name: str,
        resource_type: str,
        namespace: str | None = None,
    ) -> None:
        self.logger.info(
            f"{operation.lower()} {resource_type} {resource_name}",
            extra={
                "resource_type": resource_type,
                "resource_name": resource_name,
                "namespace": namespace,
                "operation": operation,
            },
        )

    def log_admission_decision(
        self,
        operation: str,
        resource_name: str,
        resource_type: str,
        accepted: bool,
        diagnostics: list[str],
        namespace: str | None = None,
        duration: float | None = None,
    ) -> None:
        """
        Log the outcome of an admission request.

        Args:
            operation: Admission operation (CREATE, UPDATE, DELETE)
            resource_name: Name of the resource
            resource_type: Kind of the resource
            accepted: Whether the request was admitted
            diagnostics: Rendered diagnostics of a rejection
            namespace: Namespace of the resource
            duration: Evaluation time in seconds
        """
        level = logging.INFO if accepted else logging.WARNING
        outcome = "accepted" if accepted else "rejected"
        message = f"{operation} {resource_type} {resource_name} {outcome}"
        if diagnostics:
            message = f"{message}: {'; '.join(diagnostics)}"

        extra_data = {
            "resource_type": resource_type,
            "resource_name": resource_name,
            "namespace": namespace,
            "operation": operation,
            "decision": outcome,
            "diagnostics": diagnostics,
        }
        if duration is not None:
            extra_data["duration"] = duration

        self.logger.log(level, message, extra=extra_data)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with extra data."""
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with extra data."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with extra data."""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with extra data."""
        self.logger.error(message, exc_info=exc_info, extra=kwargs)
