"""Application-level observability for the landing zone context.

Domain probes for the application services, following Domain-Oriented
Observability patterns.
"""

from landing_zone.application.observability.account_factory_probe import (
    AccountFactoryProbe,
    DefaultAccountFactoryProbe,
)
from landing_zone.application.observability.landing_zone_service_probe import (
    DefaultLandingZoneServiceProbe,
    LandingZoneServiceProbe,
)
from landing_zone.application.observability.organization_service_probe import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from landing_zone.application.observability.parameter_resolver_probe import (
    DefaultParameterResolverProbe,
    ParameterResolverProbe,
)
from landing_zone.application.observability.permission_set_registry_probe import (
    DefaultPermissionSetRegistryProbe,
    PermissionSetRegistryProbe,
)
from landing_zone.application.observability.team_provisioner_probe import (
    DefaultTeamProvisionerProbe,
    TeamProvisionerProbe,
)

__all__ = [
    "AccountFactoryProbe",
    "DefaultAccountFactoryProbe",
    "DefaultLandingZoneServiceProbe",
    "DefaultOrganizationServiceProbe",
    "DefaultParameterResolverProbe",
    "DefaultPermissionSetRegistryProbe",
    "DefaultTeamProvisionerProbe",
    "LandingZoneServiceProbe",
    "OrganizationServiceProbe",
    "ParameterResolverProbe",
    "PermissionSetRegistryProbe",
    "TeamProvisionerProbe",
]
