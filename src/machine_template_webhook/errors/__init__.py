"""
Error handling module for the machine template webhook.

This module provides the error hierarchy that integrates with kopf's
admission error reporting.
"""

from .operator_errors import (
    AdmissionRejectedError,
    NormalizationError,
    OperatorError,
)

__all__ = [
    "OperatorError",
    "NormalizationError",
    "AdmissionRejectedError",
]
