"""
Field path builder for admission diagnostics.

Paths render the way Kubernetes renders them in field errors, e.g.
``spec.template.spec.providerID`` or ``spec.networkInterfaces[0].subnetID``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldPath:
    """An immutable path into a resource."""

    segments: tuple[str | int, ...] = ()

    @classmethod
    def new(cls, *names: str) -> "FieldPath":
        return cls(tuple(names))

    def child(self, name: str, *more: str) -> "FieldPath":
        return FieldPath(self.segments + (name, *more))

    def index(self, i: int) -> "FieldPath":
        return FieldPath(self.segments + (i,))

    def __str__(self) -> str:
        rendered = ""
        for segment in self.segments:
            if isinstance(segment, int):
                rendered += f"[{segment}]"
            elif rendered:
                rendered += f".{segment}"
            else:
                rendered = segment
        return rendered


METADATA_NAME_PATH = FieldPath.new("metadata", "name")
SPEC_PATH = FieldPath.new("spec")
PROVIDER_ID_PATH = SPEC_PATH.child("template", "spec", "providerID")
