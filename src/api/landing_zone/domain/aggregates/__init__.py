"""Domain aggregates for the landing zone context.

Aggregates hold the declared organization, the shared permission set and
the team descriptors. They enforce invariants without depending on the
remote services that realise them.
"""

from landing_zone.domain.aggregates.deployment import (
    DeploymentDescriptor,
    EmailClaim,
    ParameterNames,
    build_organization,
)
from landing_zone.domain.aggregates.organization import (
    OrganizationalUnitSpec,
    OrganizationTree,
)
from landing_zone.domain.aggregates.permission_set import (
    ADMINISTRATOR_ACCESS_POLICY_ARN,
    PermissionSetDefinition,
)
from landing_zone.domain.aggregates.team import StandaloneAccount, TeamDescriptor

__all__ = [
    "ADMINISTRATOR_ACCESS_POLICY_ARN",
    "DeploymentDescriptor",
    "EmailClaim",
    "OrganizationalUnitSpec",
    "OrganizationTree",
    "ParameterNames",
    "PermissionSetDefinition",
    "StandaloneAccount",
    "TeamDescriptor",
    "build_organization",
]
