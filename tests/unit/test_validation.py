"""
Unit tests for template validation utilities.

These tests verify the naming grammar for machine templates and the
create-time guard against per-instance fields.
"""

from machine_template_webhook.constants import TEMPLATE_NAME_MAX_LENGTH
from machine_template_webhook.models.admission import DiagnosticKind
from machine_template_webhook.models.template import YandexMachineTemplate
from machine_template_webhook.utils.validation import (
    check_provider_id_unset,
    is_valid_template_name,
    validate_template_name,
)


class TestTemplateNameValidation:
    """Test cases for the template naming grammar."""

    def test_valid_template_names(self):
        """Test that valid template names pass validation."""
        valid_names = [
            "a",
            "ab-3",
            "my-template-9",
            "a1",
            "a--b",
            "a" * TEMPLATE_NAME_MAX_LENGTH,
        ]

        for name in valid_names:
            assert is_valid_template_name(name), name
            assert validate_template_name(name) is None

    def test_invalid_template_names(self):
        """Test that invalid template names are rejected."""
        invalid_names = [
            "",  # Empty
            "Ab",  # Uppercase
            "-abc",  # Starts with hyphen
            "abc-",  # Ends with hyphen
            "1abc",  # Starts with digit
            "a_b",  # Underscore
            "a.b",  # Dot
            "abc\n",  # Trailing newline
            "a" * (TEMPLATE_NAME_MAX_LENGTH + 1),  # Too long
        ]

        for name in invalid_names:
            assert not is_valid_template_name(name), repr(name)

    def test_max_length_leaves_room_for_machine_suffix(self):
        """Template names plus a '-xxxxx' suffix fit the 63-character limit."""
        assert TEMPLATE_NAME_MAX_LENGTH == 57
        assert len("a" * TEMPLATE_NAME_MAX_LENGTH + "-abcde") == 63

    def test_invalid_name_diagnostic(self):
        """Test that a rejected name yields an Invalid diagnostic at metadata.name."""
        diagnostic = validate_template_name("Ab")

        assert diagnostic is not None
        assert diagnostic.kind is DiagnosticKind.INVALID
        assert diagnostic.path == "metadata.name"
        assert diagnostic.value == "Ab"
        assert "max 57 symbols" in diagnostic.message


class TestProviderIdGuard:
    """Test cases for the providerID guard."""

    def test_unset_provider_id_passes(self, template_body):
        template = YandexMachineTemplate.model_validate(template_body)
        assert check_provider_id_unset(template) is None

    def test_null_provider_id_passes(self, template_body, machine_spec):
        machine_spec["providerID"] = None
        template = YandexMachineTemplate.model_validate(template_body)
        assert check_provider_id_unset(template) is None

    def test_set_provider_id_is_forbidden(self, template_body, machine_spec):
        machine_spec["providerID"] = "yandex://fhm1abcdef"
        template = YandexMachineTemplate.model_validate(template_body)

        diagnostic = check_provider_id_unset(template)

        assert diagnostic is not None
        assert diagnostic.kind is DiagnosticKind.FORBIDDEN
        assert diagnostic.path == "spec.template.spec.providerID"
        assert diagnostic.message == "cannot be set in templates"

    def test_empty_provider_id_is_forbidden(self, template_body, machine_spec):
        """Any non-null value counts, including an empty string."""
        machine_spec["providerID"] = ""
        template = YandexMachineTemplate.model_validate(template_body)
        assert check_provider_id_unset(template) is not None
