"""Domain-Oriented Observability for the landing zone domain layer.

Probes for descriptor validation and planning following Domain-Oriented
Observability patterns.
"""

from landing_zone.domain.observability.deployment_probe import (
    DefaultDeploymentProbe,
    DeploymentProbe,
)

__all__ = [
    "DefaultDeploymentProbe",
    "DeploymentProbe",
]
