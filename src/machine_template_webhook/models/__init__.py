"""
Models package - Pydantic models for type-safe resource handling.

Defines data models for:
- YandexMachineTemplate resources
- Admission requests, diagnostics and decisions
"""
