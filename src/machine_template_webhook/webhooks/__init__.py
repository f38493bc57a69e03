"""
Admission webhooks for the machine template webhook.

This package provides the decision logic for YandexMachineTemplate
admission requests and its kopf bindings. Webhooks validate resources
before they are accepted by Kubernetes, providing immediate feedback and
preventing invalid templates from being stored.

Webhooks are served by Kopf's built-in HTTPS server using certificates
provisioned outside of the operator.
"""
