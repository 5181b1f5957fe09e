"""Landing zone application service.

The front door of the landing zone context: turns a deployment descriptor
into a plan, and applies it against the remote services.
"""

from __future__ import annotations

import asyncio

from ulid import ULID

from landing_zone.application.observability import (
    DefaultLandingZoneServiceProbe,
    DefaultOrganizationServiceProbe,
    DefaultParameterResolverProbe,
    DefaultPermissionSetRegistryProbe,
    LandingZoneServiceProbe,
)
from landing_zone.application.services.account_factory import AccountFactory
from landing_zone.application.services.organization_service import (
    OrganizationService,
)
from landing_zone.application.services.parameter_resolver import ParameterResolver
from landing_zone.application.services.permission_set_registry import (
    PermissionSetRegistry,
)
from landing_zone.application.services.team_provisioner import TeamProvisioner
from landing_zone.application.value_objects import (
    AccountOutcome,
    DeploymentReport,
    PollPolicy,
    TeamProvisioningContext,
    TeamProvisioningResult,
)
from landing_zone.domain.aggregates import (
    DeploymentDescriptor,
    EmailClaim,
    StandaloneAccount,
    TeamDescriptor,
)
from landing_zone.domain.exceptions import ProvisioningError
from landing_zone.domain.plan import DeploymentPlanner, ProvisioningPlan, StepAction
from landing_zone.domain.value_objects import OrganizationalUnitRef
from landing_zone.ports.clients import (
    IdentityCenterClient,
    IdentityStoreClient,
    OrganizationsClient,
    ParameterStore,
)
from landing_zone.ports.exceptions import DuplicateAccountEmailError
from shared_kernel.observability_context import ObservationContext


class LandingZoneService:
    """Application service for whole-deployment runs.

    A run validates the descriptor and derives its plan before any remote
    request, then resolves parameters, ensures the organization and its
    OUs, gets the shared permission set once and provisions every team
    concurrently. Teams are independent: a failed team is reported and
    never affects the others. An account whose email an earlier account of
    the descriptor owns is reported as failed without any request.
    Parameter or OU failures abort the run because every team depends on
    them.

    Per-run state (parameter cache, OU lookups, the permission set handle)
    lives in objects created for each run, so one service can serve many
    deployments.
    """

    def __init__(
        self,
        parameter_store: ParameterStore,
        organizations: OrganizationsClient,
        identity_center: IdentityCenterClient,
        identity_store: IdentityStoreClient,
        parameter_poll: PollPolicy | None = None,
        account_poll: PollPolicy | None = None,
        team_concurrency: int = 4,
        planner: DeploymentPlanner | None = None,
        probe: LandingZoneServiceProbe | None = None,
    ):
        """Initialize LandingZoneService with dependencies.

        Args:
            parameter_store: Parameter store client
            organizations: Organization API client
            identity_center: SSO API client
            identity_store: Identity store client
            parameter_poll: Backoff for missing parameters; None fails at once
            account_poll: Polling policy for account creation status
            team_concurrency: Maximum number of teams provisioned in parallel
            planner: Optional plan builder
            probe: Optional domain probe for observability
        """
        if team_concurrency < 1:
            raise ValueError("team_concurrency must be at least 1")

        self._parameter_store = parameter_store
        self._organizations = organizations
        self._identity_center = identity_center
        self._parameter_poll = parameter_poll
        self._team_concurrency = team_concurrency
        self._planner = planner or DeploymentPlanner()
        self._probe = probe or DefaultLandingZoneServiceProbe()
        self._account_factory = AccountFactory(organizations, poll=account_poll)
        self._team_provisioner = TeamProvisioner(
            account_factory=self._account_factory,
            identity_center=identity_center,
            identity_store=identity_store,
        )

    def plan(self, descriptor: DeploymentDescriptor) -> ProvisioningPlan:
        """Derive the request graph of a deployment without remote calls.

        Raises:
            DeploymentDescriptorError: If local validation fails
        """
        return self._planner.build(descriptor)

    async def deploy(self, descriptor: DeploymentDescriptor) -> DeploymentReport:
        """Apply a deployment descriptor.

        Args:
            descriptor: The deployment to apply

        Returns:
            DeploymentReport with per-team and per-assignment outcomes

        Raises:
            DeploymentDescriptorError: If local validation fails (nothing sent)
            ParameterNotFoundError, ParameterResolutionTimeoutError: If a
                parameter cannot be resolved (nothing created)
            OrganizationApiUnavailableError: If the organization, an OU or the
                permission set cannot be ensured
        """
        plan = self.plan(descriptor)
        claims = descriptor.duplicate_email_claims()

        observation = ObservationContext(deployment_id=str(ULID()))
        probe = self._probe.with_context(observation)
        team_units = descriptor.team_units()
        requested_teams = [t for t in team_units if t.account_name not in claims]
        probe.deployment_started(
            teams=len(team_units),
            accounts=plan.count(StepAction.CREATE_ACCOUNT),
            steps=len(plan),
        )

        try:
            resolver = ParameterResolver(
                self._parameter_store,
                poll=self._parameter_poll,
                probe=DefaultParameterResolverProbe().with_context(observation),
            )
            parameters = await resolver.resolve_deployment(descriptor.parameters)

            organization = OrganizationService(
                self._organizations,
                probe=DefaultOrganizationServiceProbe().with_context(observation),
            )
            organizational_units = await organization.ensure_tree(descriptor.organization)

            permission_set = None
            if requested_teams:
                registry = PermissionSetRegistry(
                    self._identity_center,
                    descriptor.permission_set,
                    probe=DefaultPermissionSetRegistryProbe().with_context(observation),
                )
                permission_set = await registry.get_or_create(parameters.sso_instance_arn)
        except ProvisioningError as e:
            probe.deployment_aborted(error=str(e))
            raise

        semaphore = asyncio.Semaphore(self._team_concurrency)
        provisioned: dict[str, TeamProvisioningResult] = {}
        if permission_set is not None:
            context = TeamProvisioningContext(
                organizational_units=organizational_units,
                teams_ou_key=descriptor.teams_ou_key,
                permission_set=permission_set,
                sso_instance_arn=parameters.sso_instance_arn,
                identity_store_id=parameters.identity_store_id,
            )
            results = await asyncio.gather(
                *(
                    self._run_team(team, context, observation, semaphore)
                    for team in requested_teams
                )
            )
            provisioned = {result.account_name: result for result in results}

        teams: list[TeamProvisioningResult] = []
        for team in team_units:
            claim = claims.get(team.account_name)
            if claim is None:
                teams.append(provisioned[team.account_name])
                continue
            teams.append(
                TeamProvisioningResult(
                    team_name=team.team_name,
                    account_name=team.account_name,
                    error=self._reject_claim(claim, probe),
                )
            )

        accounts = list(
            await asyncio.gather(
                *(
                    self._run_account(
                        account,
                        organizational_units[account.organizational_unit_key],
                        claims.get(account.account_name),
                        probe,
                        semaphore,
                    )
                    for account in descriptor.accounts
                )
            )
        )

        report = DeploymentReport(
            deployment_id=observation.deployment_id or "",
            organizational_units=organizational_units,
            permission_set=permission_set,
            teams=teams,
            accounts=accounts,
        )
        probe.deployment_completed(
            succeeded=report.succeeded,
            failed_teams=[t.team_name for t in report.failed_teams],
        )
        return report

    async def _run_team(
        self,
        team: TeamDescriptor,
        context: TeamProvisioningContext,
        observation: ObservationContext,
        semaphore: asyncio.Semaphore,
    ) -> TeamProvisioningResult:
        async with semaphore:
            return await self._team_provisioner.provision_team(team, context, observation)

    @staticmethod
    def _reject_claim(claim: EmailClaim, probe: LandingZoneServiceProbe) -> str:
        """Report an account whose email another account owns; nothing is sent."""
        error = str(DuplicateAccountEmailError(claim.email, claim.owner))
        probe.account_email_already_claimed(
            account_name=claim.account_name, email=claim.email, owner=claim.owner
        )
        return error

    async def _run_account(
        self,
        account: StandaloneAccount,
        organizational_unit: OrganizationalUnitRef,
        claim: EmailClaim | None,
        probe: LandingZoneServiceProbe,
        semaphore: asyncio.Semaphore,
    ) -> AccountOutcome:
        if claim is not None:
            return AccountOutcome(
                account_name=account.account_name,
                error=self._reject_claim(claim, probe),
            )

        async with semaphore:
            try:
                ref = await self._account_factory.provision(
                    name=account.account_name,
                    email=account.email,
                    organizational_unit=organizational_unit,
                )
            except ProvisioningError as e:
                probe.standalone_account_failed(
                    account_name=account.account_name, error=str(e)
                )
                return AccountOutcome(account_name=account.account_name, error=str(e))
            return AccountOutcome(account_name=account.account_name, account=ref)
