"""
Admission decision logic for YandexMachineTemplate resources.

The dispatcher routes create, update and delete requests to the checks
that apply to them and folds every diagnostic into a single Decision:

    Operation | Checks                          | Decision
    ----------+---------------------------------+-------------------------------
    CREATE    | providerID guard, name grammar  | accepted iff no diagnostics
    UPDATE    | spec immutability               | accepted iff specs are equal
    DELETE    | none                            | always accepted

Handlers are pure functions of their arguments: the dispatcher keeps no
state between requests and can be shared by concurrent admission calls.
Expected validation failures are returned as diagnostics, never raised.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import ValidationError

from machine_template_webhook.constants import TEMPLATE_KIND
from machine_template_webhook.errors import NormalizationError
from machine_template_webhook.models.admission import (
    AdmissionRequest,
    Decision,
    Diagnostic,
    Operation,
)
from machine_template_webhook.models.template import YandexMachineTemplate
from machine_template_webhook.observability.logging import OperatorLogger
from machine_template_webhook.utils.normalization import compare_specs
from machine_template_webhook.utils.validation import (
    check_provider_id_unset,
    validate_template_name,
)


class Defaulter(Protocol):
    """Capability of applying defaults to an object before validation."""

    def on_default(self, obj: Any) -> Any: ...


class Validator(Protocol):
    """Capability of deciding create, update and delete admission requests."""

    def on_create(self, obj: Any) -> Decision: ...

    def on_update(self, old_obj: Any, new_obj: Any) -> Decision: ...

    def on_delete(self, obj: Any) -> Decision: ...


def _object_name(obj: Any) -> str:
    """Best-effort name lookup that never fails on malformed input."""
    if isinstance(obj, YandexMachineTemplate):
        return obj.name
    if isinstance(obj, Mapping):
        metadata = obj.get("metadata")
        if isinstance(metadata, Mapping) and isinstance(metadata.get("name"), str):
            return metadata["name"]
    return ""


class RequestDispatcher:
    """Decides admission requests for YandexMachineTemplate resources."""

    def __init__(self, logger: OperatorLogger | None = None):
        self.logger = logger or OperatorLogger(__name__)

    def on_default(self, obj: Any) -> Any:
        """Defaulting step; templates have no defaults, the object is returned as is."""
        self.logger.info(
            f"default {TEMPLATE_KIND} {_object_name(obj)}",
            resource_type=TEMPLATE_KIND,
            resource_name=_object_name(obj),
            operation="DEFAULT",
        )
        return obj

    def on_create(self, obj: Any) -> Decision:
        """
        Validate a template being created.

        Both the providerID guard and the name grammar run, so a request
        with several problems gets all of them back in one response.
        """
        name = _object_name(obj)
        self.logger.log_admission_request("CREATE", name, TEMPLATE_KIND)

        try:
            template = (
                obj
                if isinstance(obj, YandexMachineTemplate)
                else YandexMachineTemplate.model_validate(obj)
            )
        except ValidationError as e:
            error = NormalizationError(
                f"failed to parse {TEMPLATE_KIND} under creation", cause=e
            )
            diagnostics = [Diagnostic.internal_error(None, error)]
            name_diagnostic = validate_template_name(name)
            if name_diagnostic is not None:
                diagnostics.append(name_diagnostic)
            return self._decide("CREATE", name, diagnostics)

        diagnostics = [
            diagnostic
            for diagnostic in (
                check_provider_id_unset(template),
                validate_template_name(template.name),
            )
            if diagnostic is not None
        ]
        return self._decide("CREATE", template.name, diagnostics)

    def on_update(self, old_obj: Any, new_obj: Any) -> Decision:
        """Validate an update: the template spec must be unchanged."""
        name = _object_name(new_obj)
        self.logger.log_admission_request("UPDATE", name, TEMPLATE_KIND)

        diagnostic = compare_specs(old_obj, new_obj)
        return self._decide("UPDATE", name, [diagnostic] if diagnostic else [])

    def on_delete(self, obj: Any) -> Decision:
        """Deletion is not gated; the request is only logged."""
        name = _object_name(obj)
        self.logger.log_admission_request("DELETE", name, TEMPLATE_KIND)
        return Decision.accept(name=name)

    def dispatch(self, request: AdmissionRequest) -> Decision:
        """Route an admission request to the matching handler."""
        match request.operation:
            case Operation.CREATE:
                return self.on_create(request.object)
            case Operation.UPDATE:
                return self.on_update(request.old_object, request.object)
            case Operation.DELETE:
                return self.on_delete(request.object)
            case _:
                # Other operations are not registered for this resource
                return Decision.accept(name=_object_name(request.object))

    def _decide(
        self, operation: str, name: str, diagnostics: list[Diagnostic]
    ) -> Decision:
        decision = Decision.from_diagnostics(name, diagnostics)
        self.logger.log_admission_decision(
            operation,
            name,
            TEMPLATE_KIND,
            accepted=decision.accepted,
            diagnostics=[d.error_message() for d in decision.diagnostics],
        )
        return decision
