"""
Validation utilities for YandexMachineTemplate resources.

This module provides the create-time checks for machine templates:

- Template name grammar, sized so that generated machine names fit the
  63-character limit
- Forbidden per-instance fields inside the template

Each check returns a Diagnostic on failure and None otherwise, so callers
can aggregate every problem of a request in one pass.
"""

import logging
import re

from machine_template_webhook.constants import (
    PROVIDER_ID_FORBIDDEN_MESSAGE,
    TEMPLATE_NAME_MESSAGE,
    TEMPLATE_NAME_PATTERN,
)
from machine_template_webhook.models.admission import Diagnostic
from machine_template_webhook.models.template import YandexMachineTemplate
from machine_template_webhook.utils.field_path import (
    METADATA_NAME_PATH,
    PROVIDER_ID_PATH,
)

logger = logging.getLogger(__name__)

_TEMPLATE_NAME_RE = re.compile(TEMPLATE_NAME_PATTERN)


def is_valid_template_name(name: str) -> bool:
    """
    Check a template name against the naming grammar.

    The name must start with a lowercase letter, may continue with up to 55
    lowercase letters, digits or hyphens, and must not end with a hyphen.
    The whole string must match; a trailing newline is rejected.
    """
    return _TEMPLATE_NAME_RE.fullmatch(name) is not None


def validate_template_name(name: str) -> Diagnostic | None:
    """
    Validate a YandexMachineTemplate name.

    Args:
        name: Candidate resource name

    Returns:
        An Invalid diagnostic at metadata.name, or None if the name is valid
    """
    if is_valid_template_name(name):
        logger.debug(f"Validated template name: {name}")
        return None

    return Diagnostic.invalid(str(METADATA_NAME_PATH), name, TEMPLATE_NAME_MESSAGE)


def check_provider_id_unset(template: YandexMachineTemplate) -> Diagnostic | None:
    """
    Ensure the template does not carry a provider-assigned instance ID.

    Args:
        template: Parsed template under creation

    Returns:
        A Forbidden diagnostic at spec.template.spec.providerID, or None
    """
    if template.spec.template.spec.provider_id is None:
        return None

    return Diagnostic.forbidden(str(PROVIDER_ID_PATH), PROVIDER_ID_FORBIDDEN_MESSAGE)
