"""
Unit tests for spec normalization and comparison.

Covers the tagged node representation, structural equality semantics and
the immutability check applied on update.
"""

import copy

import pytest

from machine_template_webhook.errors import NormalizationError
from machine_template_webhook.models.admission import DiagnosticKind
from machine_template_webhook.models.template import YandexMachineTemplate
from machine_template_webhook.utils.normalization import (
    RecordNode,
    ScalarNode,
    SequenceNode,
    changed_paths,
    compare_specs,
    normalize,
    structurally_equal,
    to_unstructured,
)


class TestNormalize:
    """Test cases for building normalized trees."""

    def test_scalars_are_tagged_with_their_type(self):
        assert normalize("x") == ScalarNode("string", "x")
        assert normalize(1) == ScalarNode("int", 1)
        assert normalize(1.5) == ScalarNode("float", 1.5)
        assert normalize(True) == ScalarNode("bool", True)

    def test_nested_structures(self):
        node = normalize({"a": [1, {"b": "c"}]})

        assert isinstance(node, RecordNode)
        sequence = node.fields["a"]
        assert isinstance(sequence, SequenceNode)
        assert sequence.items[0] == ScalarNode("int", 1)
        assert isinstance(sequence.items[1], RecordNode)

    def test_none_values_are_dropped(self):
        assert normalize({"a": None, "b": 1}).fields.keys() == {"b"}

    def test_unsupported_value_raises(self):
        with pytest.raises(NormalizationError) as exc_info:
            normalize({"a": [object()]})
        assert "a[0]" in str(exc_info.value)

    def test_non_string_key_raises(self):
        with pytest.raises(NormalizationError):
            normalize({1: "a"})


class TestStructuralEquality:
    """Test cases for deep structural equality."""

    def test_record_key_order_is_ignored(self):
        a = normalize({"x": 1, "y": {"p": "q", "r": "s"}})
        b = normalize({"y": {"r": "s", "p": "q"}, "x": 1})
        assert structurally_equal(a, b)

    def test_sequence_order_matters(self):
        assert not structurally_equal(normalize([1, 2]), normalize([2, 1]))

    def test_sequence_length_matters(self):
        assert not structurally_equal(normalize([1]), normalize([1, 1]))

    def test_value_type_matters(self):
        assert not structurally_equal(normalize(1), normalize(True))
        assert not structurally_equal(normalize(1), normalize(1.0))
        assert not structurally_equal(normalize("1"), normalize(1))

    def test_added_field_matters(self):
        assert not structurally_equal(normalize({"a": 1}), normalize({"a": 1, "b": 2}))

    def test_shape_matters(self):
        assert not structurally_equal(normalize({"a": 1}), normalize([1]))


class TestChangedPaths:
    """Test cases for listing changed field paths."""

    def test_reports_leaf_changes(self):
        old = normalize({"template": {"spec": {"zoneID": "a", "cores": 2}}})
        new = normalize({"template": {"spec": {"zoneID": "b", "cores": 2}}})
        assert changed_paths(old, new) == ["spec.template.spec.zoneID"]

    def test_reports_added_and_removed_fields(self):
        old = normalize({"a": 1, "b": 2})
        new = normalize({"b": 2, "c": 3})
        assert changed_paths(old, new) == ["spec.a", "spec.c"]

    def test_reports_sequence_items(self):
        old = normalize({"items": [{"id": "x"}, {"id": "y"}]})
        new = normalize({"items": [{"id": "x"}, {"id": "z"}]})
        assert changed_paths(old, new) == ["spec.items[1].id"]

    def test_equal_trees_have_no_changes(self):
        tree = normalize({"a": [1, 2]})
        assert changed_paths(tree, tree) == []


class TestToUnstructured:
    """Test cases for converting templates to unstructured mappings."""

    def test_model_and_body_convert_identically(self, template_body):
        model = YandexMachineTemplate.model_validate(template_body)
        assert to_unstructured(model) == to_unstructured(template_body)

    def test_uses_api_field_names(self, template_body):
        spec = to_unstructured(template_body)["spec"]["template"]["spec"]
        assert spec["bootDisk"]["imageID"] == "fd8a0b1c2d3e4f5g6h7i"
        assert "providerID" not in spec

    def test_malformed_body_raises(self, template_body, machine_spec):
        machine_spec["resources"]["cores"] = "many"
        with pytest.raises(NormalizationError) as exc_info:
            to_unstructured(template_body)
        assert "failed to convert YandexMachineTemplate" in str(exc_info.value)


class TestCompareSpecs:
    """Test cases for the spec immutability check."""

    def test_identical_specs_pass(self, template_body):
        assert compare_specs(template_body, copy.deepcopy(template_body)) is None

    def test_reordered_fields_pass(self, template_body, machine_spec):
        new = copy.deepcopy(template_body)
        new_spec = new["spec"]["template"]["spec"]
        new["spec"]["template"]["spec"] = dict(reversed(list(new_spec.items())))

        assert compare_specs(template_body, new) is None

    def test_metadata_changes_pass(self, template_body):
        new = copy.deepcopy(template_body)
        new["metadata"]["labels"]["team"] = "platform"
        new["metadata"]["annotations"] = {"note": "changed"}

        assert compare_specs(template_body, new) is None

    def test_explicit_null_equals_absent(self, template_body):
        new = copy.deepcopy(template_body)
        new["spec"]["template"]["spec"]["providerID"] = None

        assert compare_specs(template_body, new) is None

    @pytest.mark.parametrize(
        "mutate",
        [
            pytest.param(
                lambda s: s["resources"].update(cores=4), id="leaf-value"
            ),
            pytest.param(
                lambda s: s.update(serviceAccountID="aje1sa"), id="added-field"
            ),
            pytest.param(lambda s: s.pop("labels"), id="removed-field"),
            pytest.param(
                lambda s: s["networkInterfaces"].reverse(), id="sequence-order"
            ),
            pytest.param(
                lambda s: s["networkInterfaces"][1].update(hasPublicIP=False),
                id="optional-set",
            ),
        ],
    )
    def test_changed_spec_is_forbidden(self, template_body, mutate):
        new = copy.deepcopy(template_body)
        mutate(new["spec"]["template"]["spec"])

        diagnostic = compare_specs(template_body, new)

        assert diagnostic is not None
        assert diagnostic.kind is DiagnosticKind.FORBIDDEN
        assert diagnostic.path == "spec"
        assert diagnostic.message == "cannot be modified"

    def test_malformed_new_object_is_internal_error(self, template_body):
        new = copy.deepcopy(template_body)
        new["spec"]["template"]["spec"]["resources"]["cores"] = "many"

        diagnostic = compare_specs(template_body, new)

        assert diagnostic is not None
        assert diagnostic.kind is DiagnosticKind.INTERNAL_ERROR
        assert diagnostic.path is None
        assert "failed to convert new YandexMachineTemplate" in diagnostic.message

    def test_malformed_old_object_is_internal_error(self, template_body):
        diagnostic = compare_specs({"spec": "not-a-mapping"}, template_body)

        assert diagnostic is not None
        assert diagnostic.kind is DiagnosticKind.INTERNAL_ERROR
        assert "failed to convert old YandexMachineTemplate" in diagnostic.message

    @pytest.mark.parametrize(
        ("section", "key", "value"),
        [
            pytest.param("resources", "cores", "2", id="int-to-string"),
            pytest.param("resources", "cores", 2.0, id="int-to-float"),
            pytest.param("resources", "coreFraction", True, id="int-to-bool"),
            pytest.param(
                "networkInterfaces", "hasPublicIP", "true", id="bool-to-string"
            ),
        ],
    )
    def test_scalar_type_change_is_never_accepted(
        self, template_body, section, key, value
    ):
        new = copy.deepcopy(template_body)
        target = new["spec"]["template"]["spec"][section]
        if isinstance(target, list):
            target = target[0]
        target[key] = value

        diagnostic = compare_specs(template_body, new)

        assert diagnostic is not None
        assert diagnostic.kind in (
            DiagnosticKind.FORBIDDEN,
            DiagnosticKind.INTERNAL_ERROR,
        )

    def test_quantity_switching_representation_is_forbidden(self, template_body):
        new = copy.deepcopy(template_body)
        new["spec"]["template"]["spec"]["resources"]["memory"] = 8589934592

        diagnostic = compare_specs(template_body, new)

        assert diagnostic is not None
        assert diagnostic.kind is DiagnosticKind.FORBIDDEN

    def test_out_of_range_values_compare_as_values(self, template_body):
        resources = template_body["spec"]["template"]["spec"]["resources"]
        resources.update(cores=0, coreFraction=150)

        assert compare_specs(template_body, copy.deepcopy(template_body)) is None
