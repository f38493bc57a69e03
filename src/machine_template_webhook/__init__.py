"""
YandexMachineTemplate admission webhook - a Kopf-based validation gate.

This package validates YandexMachineTemplate resources before they are
persisted by the Kubernetes API server:
- Naming constraints for generated machine names
- Forbidden per-instance fields in templates
- Immutability of the template specification
"""

__version__ = "0.1.0"
