"""
Webhook error hierarchy with categorization.

This module defines the error types used throughout the machine template
webhook, providing clear categorization and integration with kopf's
admission error reporting.
"""

import kopf

from machine_template_webhook.constants import (
    ADMISSION_INTERNAL_ERROR_CODE,
    ADMISSION_INVALID_CODE,
)
from machine_template_webhook.models.admission import Decision


class OperatorError(Exception):
    """
    Base error class for all webhook-related exceptions.

    Provides categorization, retry behavior, and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        retryable: bool = False,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize operator error.

        Args:
            message: Human-readable error description
            category: Error category (validation, internal)
            retryable: Whether resubmitting the same request can succeed
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.category = category
        self.retryable = retryable
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class NormalizationError(OperatorError):
    """An object could not be converted into its comparable form."""

    def __init__(self, message: str, cause: Exception | None = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message=message, category="internal", cause=cause)


class AdmissionRejectedError(OperatorError):
    """An admission request was rejected with one or more diagnostics."""

    def __init__(self, decision: Decision):
        if decision.accepted:
            raise ValueError("cannot build a rejection from an accepted decision")
        super().__init__(
            message=decision.error_message(),
            category="internal" if decision.has_internal_error else "validation",
        )
        self.decision = decision

    @property
    def code(self) -> int:
        if self.decision.has_internal_error:
            return ADMISSION_INTERNAL_ERROR_CODE
        return ADMISSION_INVALID_CODE

    def as_kopf_error(self) -> kopf.AdmissionError:
        """Convert to the kopf exception that denies the admission request."""
        return kopf.AdmissionError(str(self), code=self.code)
