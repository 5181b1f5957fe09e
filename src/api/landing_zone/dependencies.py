"""Dependency wiring for the landing zone bounded context.

Builds the boto3 adapters and the LandingZoneService from settings. The
FastAPI routes and the CLI both obtain their service from here; planning
needs only the DeploymentPlanner and never builds a client.
"""

from __future__ import annotations

from functools import lru_cache

from infrastructure.aws import GLOBAL_REGION, create_client
from infrastructure.settings import (
    ParameterSettings,
    ProvisioningSettings,
    get_parameter_settings,
    get_permission_set_settings,
    get_provisioning_settings,
)
from landing_zone.application.services import LandingZoneService
from landing_zone.application.value_objects import PollPolicy
from landing_zone.domain.aggregates import ParameterNames, PermissionSetDefinition
from landing_zone.domain.plan import DeploymentPlanner
from landing_zone.infrastructure import (
    IdentityCenterApiClient,
    IdentityStoreApiClient,
    OrganizationsApiClient,
    SsmParameterStore,
)
from landing_zone.infrastructure.descriptor_loader import DescriptorDefaults


def parameter_poll_policy(settings: ParameterSettings) -> PollPolicy | None:
    """Backoff for parameters that may not be visible yet, if enabled."""
    if not settings.poll_until_present:
        return None
    return PollPolicy(
        max_attempts=settings.max_attempts,
        initial_delay_seconds=settings.initial_delay_seconds,
        max_delay_seconds=settings.max_delay_seconds,
    )


def account_poll_policy(settings: ProvisioningSettings) -> PollPolicy:
    return PollPolicy.fixed(
        attempts=settings.account_poll_attempts,
        interval_seconds=settings.account_poll_interval_seconds,
    )


def get_descriptor_defaults() -> DescriptorDefaults:
    """Descriptor defaults taken from settings.

    Returns:
        DescriptorDefaults with the configured permission set, parameter
        names and teams OU key
    """
    permission_set = get_permission_set_settings()
    parameters = get_parameter_settings()
    return DescriptorDefaults(
        permission_set=PermissionSetDefinition.create(
            name=permission_set.name,
            session_duration=permission_set.session_duration,
            managed_policy_arns=permission_set.managed_policy_arns,
            description=permission_set.description,
        ),
        parameters=ParameterNames(
            sso_instance_id=parameters.sso_id_name,
            identity_store_id=parameters.identity_store_id_name,
        ),
        teams_ou_key=get_provisioning_settings().teams_ou_key,
    )


def get_deployment_planner() -> DeploymentPlanner:
    """Planner for dry runs; needs no AWS clients."""
    return DeploymentPlanner()


def build_landing_zone_service() -> LandingZoneService:
    """Create a LandingZoneService backed by boto3 clients.

    Organizations is served from the global region; SSM, Identity Center
    and the identity store from the configured region.
    """
    provisioning = get_provisioning_settings()
    return LandingZoneService(
        parameter_store=SsmParameterStore(create_client("ssm")),
        organizations=OrganizationsApiClient(
            create_client("organizations", region_name=GLOBAL_REGION)
        ),
        identity_center=IdentityCenterApiClient(create_client("sso-admin")),
        identity_store=IdentityStoreApiClient(create_client("identitystore")),
        parameter_poll=parameter_poll_policy(get_parameter_settings()),
        account_poll=account_poll_policy(provisioning),
        team_concurrency=provisioning.team_concurrency,
    )


@lru_cache
def get_landing_zone_service() -> LandingZoneService:
    """Get the cached LandingZoneService instance.

    The service keeps no per-run state, so one instance serves every
    request.
    """
    return build_landing_zone_service()
