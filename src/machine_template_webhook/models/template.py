"""
Pydantic models for YandexMachineTemplate resources.

This module defines type-safe data models for the machine template
specification. A template is a blueprint stamped out into YandexMachine
resources, so per-instance fields such as ``providerID`` exist in the schema
but must never be set on a template.

The schema describes shape only. Scalars under ``spec`` use strict types so
a value is never converted on the way in (``"2"`` stays a string and is
rejected where an integer is expected), and no field is required or
range-checked. Unknown fields are ignored, matching the pruning the API
server applies for a structural CRD schema.
"""

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr

# Resource quantities arrive as either "8Gi" or a bare integer byte count.
Quantity = StrictInt | StrictStr


class ObjectMeta(BaseModel):
    """Subset of Kubernetes ObjectMeta relevant to admission."""

    model_config = {"populate_by_name": True}

    name: str = Field("", description="Resource name")
    namespace: str | None = Field(None, description="Resource namespace")
    labels: dict[str, str] | None = Field(None, description="Resource labels")
    annotations: dict[str, str] | None = Field(
        None, description="Resource annotations"
    )
    generation: int | None = Field(None, description="Resource generation")
    resource_version: str | None = Field(
        None, alias="resourceVersion", description="Storage resource version"
    )


class TemplateObjectMeta(BaseModel):
    """Metadata propagated to machines created from the template."""

    labels: dict[StrictStr, StrictStr] | None = Field(
        None, description="Machine labels"
    )
    annotations: dict[StrictStr, StrictStr] | None = Field(
        None, description="Machine annotations"
    )


class YandexMachineResources(BaseModel):
    """Compute resources of a machine."""

    model_config = {"populate_by_name": True}

    memory: Quantity | None = Field(
        None, description="Memory size as a resource quantity"
    )
    cores: StrictInt | None = Field(None, description="Number of vCPU cores")
    core_fraction: StrictInt | None = Field(
        None, alias="coreFraction", description="Guaranteed vCPU share in percent"
    )
    gpus: StrictInt | None = Field(None, description="Number of GPUs")


class YandexMachineBootDisk(BaseModel):
    """Boot disk of a machine."""

    model_config = {"populate_by_name": True}

    type_id: StrictStr | None = Field(None, alias="typeID", description="Disk type")
    size: Quantity | None = Field(None, description="Disk size as a resource quantity")
    image_id: StrictStr | None = Field(
        None, alias="imageID", description="Boot image ID"
    )


class YandexMachineNetworkInterface(BaseModel):
    """Network interface attached to a machine."""

    model_config = {"populate_by_name": True}

    subnet_id: StrictStr | None = Field(None, alias="subnetID", description="Subnet ID")
    has_public_ip: StrictBool | None = Field(
        None, alias="hasPublicIP", description="Assign a public IPv4 address"
    )


class YandexMachineSchedulingPolicy(BaseModel):
    """Scheduling policy of a machine."""

    preemptible: StrictBool | None = Field(None, description="Create a preemptible VM")


class YandexMachineSpec(BaseModel):
    """Desired state of a single YandexMachine."""

    model_config = {"populate_by_name": True}

    provider_id: StrictStr | None = Field(
        None,
        alias="providerID",
        description="Cloud instance ID; assigned per machine, never in templates",
    )
    zone_id: StrictStr | None = Field(
        None, alias="zoneID", description="Availability zone"
    )
    platform_id: StrictStr | None = Field(
        None, alias="platformID", description="Hardware platform"
    )
    resources: YandexMachineResources | None = Field(
        None, description="Compute resources"
    )
    boot_disk: YandexMachineBootDisk | None = Field(
        None, alias="bootDisk", description="Boot disk"
    )
    network_interfaces: list[YandexMachineNetworkInterface] | None = Field(
        None, alias="networkInterfaces", description="Network interfaces"
    )
    labels: dict[StrictStr, StrictStr] | None = Field(
        None, description="Cloud resource labels"
    )
    metadata: dict[StrictStr, StrictStr] | None = Field(
        None, description="Instance metadata passed to the VM"
    )
    service_account_id: StrictStr | None = Field(
        None, alias="serviceAccountID", description="Service account for the VM"
    )
    target_group_id: StrictStr | None = Field(
        None, alias="targetGroupID", description="Load balancer target group"
    )
    scheduling_policy: YandexMachineSchedulingPolicy | None = Field(
        None, alias="schedulingPolicy", description="Scheduling policy"
    )


class YandexMachineTemplateResource(BaseModel):
    """Machine blueprint embedded in a template."""

    metadata: TemplateObjectMeta | None = Field(
        None, description="Metadata for created machines"
    )
    spec: YandexMachineSpec = Field(
        default_factory=YandexMachineSpec, description="Machine specification"
    )


class YandexMachineTemplateSpec(BaseModel):
    """Specification of a YandexMachineTemplate."""

    template: YandexMachineTemplateResource = Field(
        default_factory=YandexMachineTemplateResource,
        description="Machine blueprint",
    )


class YandexMachineTemplate(BaseModel):
    """A complete YandexMachineTemplate resource."""

    model_config = {"populate_by_name": True}

    api_version: str | None = Field(None, alias="apiVersion")
    kind: str | None = Field(None)
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: YandexMachineTemplateSpec = Field(default_factory=YandexMachineTemplateSpec)

    @property
    def name(self) -> str:
        return self.metadata.name
