"""
Pydantic models for admission requests and decisions.

An admission request carries the operation and the object(s) under
validation. A decision is either accepted (optionally with warnings) or
rejected with one or more field-level diagnostics, rendered the same way
the Kubernetes API server renders field errors.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from machine_template_webhook.constants import TEMPLATE_GROUP, TEMPLATE_KIND


class Operation(str, Enum):
    """Admission operation, using the admission protocol's spelling."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"


class DiagnosticKind(str, Enum):
    """Severity class of a diagnostic."""

    INVALID = "Invalid"  # Content fails a grammar constraint
    FORBIDDEN = "Forbidden"  # Well-formed content violates a policy
    INTERNAL_ERROR = "InternalError"  # Policy could not be evaluated


class Diagnostic(BaseModel):
    """A single validation failure bound to a field path."""

    model_config = {"frozen": True}

    path: str | None = Field(
        ..., description="Dotted/indexed field path, or None when not field-bound"
    )
    kind: DiagnosticKind = Field(..., description="Severity class")
    value: Any = Field(None, description="Rejected value (Invalid only)")
    message: str = Field(..., description="Human-readable detail")

    @classmethod
    def invalid(cls, path: str, value: Any, message: str) -> "Diagnostic":
        return cls(path=path, kind=DiagnosticKind.INVALID, value=value, message=message)

    @classmethod
    def forbidden(cls, path: str, message: str) -> "Diagnostic":
        return cls(path=path, kind=DiagnosticKind.FORBIDDEN, message=message)

    @classmethod
    def internal_error(cls, path: str | None, error: Exception) -> "Diagnostic":
        return cls(path=path, kind=DiagnosticKind.INTERNAL_ERROR, message=str(error))

    def error_message(self) -> str:
        """Render as a Kubernetes field error string."""
        if self.kind is DiagnosticKind.INVALID:
            value = f'"{self.value}"' if isinstance(self.value, str) else self.value
            body = f"Invalid value: {value}: {self.message}"
        elif self.kind is DiagnosticKind.FORBIDDEN:
            body = f"Forbidden: {self.message}"
        else:
            body = f"Internal error: {self.message}"

        if self.path:
            return f"{self.path}: {body}"
        return body

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "kind": self.kind.value,
            "value": self.value,
            "message": self.message,
        }


class Decision(BaseModel):
    """
    Outcome of a single admission request.

    A rejected decision carries the resource kind and name so the caller can
    attribute the error when rendering the admission response.
    """

    model_config = {"frozen": True}

    accepted: bool = Field(..., description="Whether the request is admitted")
    warnings: list[str] = Field(
        default_factory=list, description="Warnings returned to the client"
    )
    diagnostics: list[Diagnostic] = Field(
        default_factory=list, description="Collected validation failures"
    )
    kind: str = Field(TEMPLATE_KIND, description="Kind of the validated resource")
    name: str = Field("", description="Name of the validated resource")

    @classmethod
    def accept(cls, name: str = "", warnings: list[str] | None = None) -> "Decision":
        return cls(accepted=True, name=name, warnings=warnings or [])

    @classmethod
    def from_diagnostics(
        cls,
        name: str,
        diagnostics: list[Diagnostic],
        warnings: list[str] | None = None,
    ) -> "Decision":
        """Accept when no diagnostics were collected, reject otherwise."""
        return cls(
            accepted=not diagnostics,
            name=name,
            warnings=warnings or [],
            diagnostics=diagnostics,
        )

    @property
    def has_internal_error(self) -> bool:
        return any(d.kind is DiagnosticKind.INTERNAL_ERROR for d in self.diagnostics)

    @property
    def result(self) -> str:
        """Short label used for metrics and logs."""
        if self.accepted:
            return "accepted"
        if self.has_internal_error:
            return "error"
        return "rejected"

    def error_message(self) -> str:
        """
        Render a rejected decision the way the API server renders an Invalid status.

        Example:
            YandexMachineTemplate.infrastructure.cluster.x-k8s.io "Ab" is invalid:
            metadata.name: Invalid value: "Ab": ...
        """
        errors = [d.error_message() for d in self.diagnostics]
        if len(errors) == 1:
            details = errors[0]
        else:
            details = "[" + ", ".join(errors) + "]"
        return f'{self.kind}.{TEMPLATE_GROUP} "{self.name}" is invalid: {details}'

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the caller-facing decision shape."""
        return {
            "accepted": self.accepted,
            "warnings": list(self.warnings),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class AdmissionRequest(BaseModel):
    """
    Envelope for one admission call.

    ``object`` and ``old_object`` are either parsed ``YandexMachineTemplate``
    models or the raw resource bodies delivered by the admission server.
    ``old_object`` is only set for updates.
    """

    model_config = {"arbitrary_types_allowed": True}

    operation: Operation = Field(..., description="Admission operation")
    object: Any = Field(None, description="Candidate object")
    old_object: Any = Field(None, description="Previously persisted object")
