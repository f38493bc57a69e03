"""Shared pytest fixtures for machine template webhook tests."""

import copy

import pytest

SAMPLE_TEMPLATE = {
    "apiVersion": "infrastructure.cluster.x-k8s.io/v1alpha1",
    "kind": "YandexMachineTemplate",
    "metadata": {
        "name": "control-plane",
        "namespace": "default",
        "labels": {"cluster.x-k8s.io/cluster-name": "demo"},
    },
    "spec": {
        "template": {
            "spec": {
                "zoneID": "ru-central1-a",
                "platformID": "standard-v3",
                "resources": {"memory": "8Gi", "cores": 2, "coreFraction": 100},
                "bootDisk": {
                    "typeID": "network-ssd",
                    "size": "100Gi",
                    "imageID": "fd8a0b1c2d3e4f5g6h7i",
                },
                "networkInterfaces": [
                    {"subnetID": "e9b1subnet0001", "hasPublicIP": True},
                    {"subnetID": "e9b1subnet0002"},
                ],
                "labels": {"role": "control-plane"},
            }
        }
    },
}


@pytest.fixture
def template_body():
    """A fresh, valid YandexMachineTemplate body per test."""
    return copy.deepcopy(SAMPLE_TEMPLATE)


@pytest.fixture
def machine_spec(template_body):
    """The machine spec inside ``template_body``, for in-place edits."""
    return template_body["spec"]["template"]["spec"]
