"""
Normalization and structural comparison of template specifications.

Both versions of a template are converted to their unstructured form
through the YandexMachineTemplate model and then into a tree of tagged
nodes:

- ScalarNode: a leaf carrying its type tag and value
- SequenceNode: ordered items
- RecordNode: named fields, compared independently of insertion order

Two trees are equal only if they have the same shape, the same field
names, the same sequence order and the same scalar types and values.
The model never converts scalars, so a value whose type changed (say
``cores: 2`` sent back as ``"2"``) fails conversion instead of comparing
equal.
``None`` values are dropped during conversion, so an unset optional field
and an explicit null are the same thing.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from pydantic import ValidationError

from machine_template_webhook.constants import (
    SPEC_IMMUTABLE_MESSAGE,
    TEMPLATE_KIND,
)
from machine_template_webhook.errors import NormalizationError
from machine_template_webhook.models.admission import Diagnostic
from machine_template_webhook.models.template import YandexMachineTemplate
from machine_template_webhook.utils.field_path import SPEC_PATH, FieldPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalarNode:
    type_name: str
    value: str | int | float | bool


@dataclass(frozen=True)
class SequenceNode:
    items: tuple["Node", ...] = ()


@dataclass(frozen=True)
class RecordNode:
    fields: dict[str, "Node"] = field(default_factory=dict)


Node: TypeAlias = ScalarNode | SequenceNode | RecordNode


def to_unstructured(obj: Any) -> dict[str, Any]:
    """
    Convert a template (model or raw body) to its unstructured mapping.

    Raises:
        NormalizationError: If the object does not fit the template schema
    """
    try:
        if isinstance(obj, YandexMachineTemplate):
            template = obj
        else:
            template = YandexMachineTemplate.model_validate(obj)
        return template.model_dump(by_alias=True, exclude_none=True)
    except ValidationError as e:
        raise NormalizationError(
            f"failed to convert {TEMPLATE_KIND} to unstructured object", cause=e
        ) from e


def normalize(value: Any, path: FieldPath = FieldPath()) -> Node:
    """
    Build the tagged node tree for an unstructured value.

    Args:
        value: Unstructured value (mappings, lists and JSON scalars)
        path: Location of the value, used in error messages

    Raises:
        NormalizationError: If the value contains anything but JSON-like data
    """
    # bool is checked before int since it is an int subclass
    if isinstance(value, bool):
        return ScalarNode("bool", value)
    if isinstance(value, int):
        return ScalarNode("int", value)
    if isinstance(value, float):
        return ScalarNode("float", value)
    if isinstance(value, str):
        return ScalarNode("string", value)

    if isinstance(value, Mapping):
        fields: dict[str, Node] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise NormalizationError(
                    f"non-string key {key!r} at {str(path) or '<root>'}"
                )
            if item is None:
                continue
            fields[key] = normalize(item, path.child(key))
        return RecordNode(fields)

    if isinstance(value, list | tuple):
        return SequenceNode(
            tuple(normalize(item, path.index(i)) for i, item in enumerate(value))
        )

    raise NormalizationError(
        f"unsupported value of type {type(value).__name__} at {str(path) or '<root>'}"
    )


def structurally_equal(a: Node, b: Node) -> bool:
    """Compare two normalized trees for deep structural equality."""
    match a, b:
        case ScalarNode(), ScalarNode():
            return a.type_name == b.type_name and a.value == b.value
        case SequenceNode(), SequenceNode():
            if len(a.items) != len(b.items):
                return False
            return all(structurally_equal(x, y) for x, y in zip(a.items, b.items))
        case RecordNode(), RecordNode():
            if a.fields.keys() != b.fields.keys():
                return False
            return all(structurally_equal(a.fields[k], b.fields[k]) for k in a.fields)
        case _:
            return False


def changed_paths(a: Node, b: Node, path: FieldPath = SPEC_PATH) -> list[str]:
    """
    List the field paths at which two normalized trees differ.

    Paths stop at the first differing node: a changed sequence length is
    reported at the sequence, a changed field type at the field.
    """
    match a, b:
        case RecordNode(), RecordNode():
            changes = []
            for key in sorted(a.fields.keys() | b.fields.keys()):
                if key not in a.fields or key not in b.fields:
                    changes.append(str(path.child(key)))
                else:
                    changes.extend(
                        changed_paths(a.fields[key], b.fields[key], path.child(key))
                    )
            return changes
        case SequenceNode(), SequenceNode() if len(a.items) == len(b.items):
            changes = []
            for i, (x, y) in enumerate(zip(a.items, b.items)):
                changes.extend(changed_paths(x, y, path.index(i)))
            return changes
        case _:
            return [] if structurally_equal(a, b) else [str(path)]


def _normalized_spec(obj: Any, label: str) -> Node:
    try:
        unstructured = to_unstructured(obj)
        return normalize(unstructured.get("spec", {}), SPEC_PATH)
    except NormalizationError as e:
        raise NormalizationError(
            f"failed to convert {label} {TEMPLATE_KIND} to unstructured object",
            cause=e.cause or e,
        ) from e


def compare_specs(old: Any, new: Any) -> Diagnostic | None:
    """
    Check that the template specification did not change.

    Only the ``spec`` subtree is compared; metadata changes pass.

    Args:
        old: Previously persisted template (model or raw body)
        new: Updated template (model or raw body)

    Returns:
        A Forbidden diagnostic at spec if the specifications differ, an
        InternalError diagnostic if either object cannot be normalized,
        or None if they are equal
    """
    try:
        new_spec = _normalized_spec(new, "new")
        old_spec = _normalized_spec(old, "old")
    except NormalizationError as e:
        logger.warning(f"Failed to normalize {TEMPLATE_KIND} for comparison: {e}")
        return Diagnostic.internal_error(None, e)

    if structurally_equal(old_spec, new_spec):
        return None

    logger.debug(
        f"{TEMPLATE_KIND} spec changed at: {', '.join(changed_paths(old_spec, new_spec))}"
    )
    return Diagnostic.forbidden(str(SPEC_PATH), SPEC_IMMUTABLE_MESSAGE)
