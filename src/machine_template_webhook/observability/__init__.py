"""
Observability utilities for the machine template webhook.

This module provides metrics and structured logging capabilities for
production monitoring and troubleshooting.
"""

from .logging import OperatorLogger, setup_structured_logging
from .metrics import MetricsServer, get_metrics_registry, record_admission

__all__ = [
    "MetricsServer",
    "get_metrics_registry",
    "record_admission",
    "OperatorLogger",
    "setup_structured_logging",
]
