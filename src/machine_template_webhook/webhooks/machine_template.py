"""
Admission webhooks for YandexMachineTemplate resources.

Binds the request dispatcher to kopf's admission server:
- A mutating webhook running the (no-op) defaulting step
- A validating webhook for create, update and delete requests

Registration mirrors the webhook configuration shipped with the Helm chart:
failurePolicy=Fail, sideEffects=None, admissionReviewVersions=v1.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

import kopf

from machine_template_webhook.constants import (
    MUTATING_WEBHOOK_ID,
    TEMPLATE_GROUP,
    TEMPLATE_PLURAL,
    TEMPLATE_VERSION,
    VALIDATING_WEBHOOK_ID,
)
from machine_template_webhook.errors import AdmissionRejectedError
from machine_template_webhook.models.admission import AdmissionRequest, Operation
from machine_template_webhook.observability.logging import (
    OperatorLogger,
    generate_correlation_id,
    set_correlation_id,
)
from machine_template_webhook.observability.metrics import record_admission
from machine_template_webhook.webhooks.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

dispatcher = RequestDispatcher(OperatorLogger(__name__))


def _plain(obj: Any) -> Any:
    """Unwrap kopf's body views into plain dicts."""
    if isinstance(obj, Mapping):
        return dict(obj)
    return obj


def build_admission_request(
    operation: str, body: Any, old: Any = None
) -> AdmissionRequest:
    """Translate kopf handler arguments into an AdmissionRequest."""
    return AdmissionRequest(
        operation=Operation(operation),
        object=_plain(body),
        old_object=_plain(old) if operation == Operation.UPDATE else None,
    )


@kopf.on.mutate(
    TEMPLATE_GROUP, TEMPLATE_VERSION, TEMPLATE_PLURAL, id=MUTATING_WEBHOOK_ID
)
async def default_machine_template(body: kopf.Body, **kwargs) -> dict:
    """Run the defaulting step; templates have no defaults, so nothing is patched."""
    dispatcher.on_default(_plain(body))
    return {}


@kopf.on.validate(
    TEMPLATE_GROUP, TEMPLATE_VERSION, TEMPLATE_PLURAL, id=VALIDATING_WEBHOOK_ID
)
async def validate_machine_template(
    body: Any,
    operation: str,
    name: str | None = None,
    namespace: str | None = None,
    old: Any = None,
    warnings: list[str] | None = None,
    dryrun: bool = False,
    **kwargs,
) -> dict:
    """
    Validate a YandexMachineTemplate admission request.

    Args:
        body: Candidate resource body
        operation: CREATE, UPDATE or DELETE
        name: Resource name
        namespace: Resource namespace
        old: Previously persisted body (UPDATE only)
        warnings: kopf's list of warnings returned to the client
        dryrun: Whether this is a dry-run request

    Returns:
        Empty dict when the request is admitted

    Raises:
        kopf.AdmissionError: If the decision is a rejection
    """
    set_correlation_id(generate_correlation_id())
    logger.debug(
        f"Admission request for {name} in namespace {namespace} "
        f"(operation: {operation}, dryrun: {dryrun})"
    )

    start = time.perf_counter()
    decision = dispatcher.dispatch(build_admission_request(operation, body, old))
    record_admission(operation, decision, time.perf_counter() - start)

    if warnings is not None:
        warnings.extend(decision.warnings)

    if not decision.accepted:
        raise AdmissionRejectedError(decision).as_kopf_error()

    return {}
