"""Application services for the landing zone bounded context.

Application services orchestrate the domain model and the remote service
ports to fulfil use cases. LandingZoneService is the front door; the other
services are the components it composes for each run.
"""

from landing_zone.application.services.account_factory import AccountFactory
from landing_zone.application.services.landing_zone_service import (
    LandingZoneService,
)
from landing_zone.application.services.organization_service import (
    OrganizationService,
)
from landing_zone.application.services.parameter_resolver import ParameterResolver
from landing_zone.application.services.permission_set_registry import (
    PermissionSetRegistry,
)
from landing_zone.application.services.team_provisioner import TeamProvisioner

__all__ = [
    "AccountFactory",
    "LandingZoneService",
    "OrganizationService",
    "ParameterResolver",
    "PermissionSetRegistry",
    "TeamProvisioner",
]
