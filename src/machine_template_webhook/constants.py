"""
Constants used throughout the machine template webhook.

This module defines all constant values used by the webhook including:
- Resource group, version and kind identifiers
- Naming constraints for template names
- Field paths and messages used in admission diagnostics
"""

# Resource identification
TEMPLATE_GROUP = "infrastructure.cluster.x-k8s.io"
TEMPLATE_VERSION = "v1alpha1"
TEMPLATE_KIND = "YandexMachineTemplate"
TEMPLATE_PLURAL = "yandexmachinetemplates"

# Webhook handler ids (also used as the registered webhook names)
MUTATING_WEBHOOK_ID = "default-yandexmachinetemplate"
VALIDATING_WEBHOOK_ID = "validate-yandexmachinetemplate"

# Naming constraints
# Machines are named "<template-name>-xxxxx", so the template name leaves
# room for a 6-character suffix within the 63-character name limit.
GENERATED_NAME_MAX_LENGTH = 63
GENERATED_NAME_SUFFIX_LENGTH = 6
TEMPLATE_NAME_MAX_LENGTH = GENERATED_NAME_MAX_LENGTH - GENERATED_NAME_SUFFIX_LENGTH
TEMPLATE_NAME_PATTERN = (
    rf"[a-z]([-a-z0-9]{{0,{TEMPLATE_NAME_MAX_LENGTH - 2}}}[a-z0-9])?"
)

# Diagnostic messages
TEMPLATE_NAME_MESSAGE = (
    "may contain lowercase Latin letters, digits, and hyphens. "
    "The first character must be a letter, and the hyphen cannot be the last "
    f"character, max {TEMPLATE_NAME_MAX_LENGTH} symbols"
)
PROVIDER_ID_FORBIDDEN_MESSAGE = "cannot be set in templates"
SPEC_IMMUTABLE_MESSAGE = "cannot be modified"

# Admission response codes
ADMISSION_INVALID_CODE = 422
ADMISSION_INTERNAL_ERROR_CODE = 500

# Default server configuration
DEFAULT_WEBHOOK_PORT = 9443
DEFAULT_WEBHOOK_CERT_DIR = "/tmp/k8s-webhook-server/serving-certs"
DEFAULT_METRICS_PORT = 8081
