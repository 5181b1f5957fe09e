"""Team provisioning unit for the landing zone context.

Composes one team's bundle: the isolated account in its OU and one
assignment of the shared permission set per member principal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from landing_zone.application.observability import (
    DefaultTeamProvisionerProbe,
    TeamProvisionerProbe,
)
from landing_zone.application.services.account_factory import AccountFactory
from landing_zone.application.value_objects import (
    AssignmentOutcome,
    AssignmentStatus,
    TeamProvisioningContext,
    TeamProvisioningResult,
)
from landing_zone.domain.assignments import unique_principals
from landing_zone.domain.exceptions import ProvisioningError
from landing_zone.domain.value_objects import Principal
from landing_zone.ports.clients import IdentityCenterClient, IdentityStoreClient
from landing_zone.ports.exceptions import PrincipalNotFoundError

if TYPE_CHECKING:
    from landing_zone.domain.aggregates import TeamDescriptor
    from shared_kernel.observability_context import ObservationContext


class TeamProvisioner:
    """Application service provisioning one team at a time.

    Workflow for a team:
    1. Create (or reuse) the account in the team's OU and wait until it is
       active. If this fails the team stops here and no assignment is sent.
    2. Collapse repeated member ids, keeping declaration order.
    3. For every principal: skip it when the assignment already exists,
       otherwise verify it in the identity store and request the
       assignment. A failing principal is reported and the remaining
       principals still proceed.

    Nothing is rolled back: an account whose assignments partly failed
    stays in place, and cleanup is an explicit operator decision.
    """

    def __init__(
        self,
        account_factory: AccountFactory,
        identity_center: IdentityCenterClient,
        identity_store: IdentityStoreClient,
        probe: TeamProvisionerProbe | None = None,
    ):
        """Initialize TeamProvisioner.

        Args:
            account_factory: Factory creating and placing accounts
            identity_center: SSO API client for assignments
            identity_store: Identity store client for principal lookups
            probe: Optional domain probe for observability
        """
        self._accounts = account_factory
        self._identity_center = identity_center
        self._identity_store = identity_store
        self._probe = probe or DefaultTeamProvisionerProbe()

    async def provision_team(
        self,
        descriptor: TeamDescriptor,
        context: TeamProvisioningContext,
        observation: ObservationContext | None = None,
    ) -> TeamProvisioningResult:
        """Provision one team's account and assignments.

        Args:
            descriptor: The team to provision
            context: Shared OU references, permission set and SSO identifiers
            observation: Optional run context bound to every log event

        Returns:
            TeamProvisioningResult with the account and one outcome per
            unique principal, or the error that stopped the account step
        """
        probe = self._probe
        accounts = self._accounts
        if observation is not None:
            scoped = observation.with_team(descriptor.team_name, descriptor.account_name)
            probe = probe.with_context(scoped)
            accounts = accounts.with_probe(accounts.probe.with_context(scoped))

        principals = unique_principals(descriptor.principals)
        probe.team_provisioning_started(
            team_name=descriptor.team_name, members=len(principals)
        )

        organizational_unit = context.ou_for(descriptor.organizational_unit_key)
        try:
            account = await accounts.provision(
                name=descriptor.account_name,
                email=descriptor.email,
                organizational_unit=organizational_unit,
            )
        except ProvisioningError as e:
            probe.team_provisioning_failed(team_name=descriptor.team_name, error=str(e))
            return TeamProvisioningResult(
                team_name=descriptor.team_name,
                account_name=descriptor.account_name,
                error=str(e),
            )

        assert account.account_id is not None

        if not principals:
            probe.team_provisioned(
                team_name=descriptor.team_name,
                account_id=account.account_id,
                assignments=0,
                failed=0,
            )
            return TeamProvisioningResult(
                team_name=descriptor.team_name,
                account_name=descriptor.account_name,
                account=account,
            )

        try:
            existing = await self._identity_center.list_assigned_principal_ids(
                instance_arn=context.sso_instance_arn,
                account_id=account.account_id,
                permission_set_arn=context.permission_set.arn,
            )
        except ProvisioningError as e:
            probe.team_provisioning_failed(team_name=descriptor.team_name, error=str(e))
            return TeamProvisioningResult(
                team_name=descriptor.team_name,
                account_name=descriptor.account_name,
                account=account,
                error=str(e),
            )

        outcomes = [
            await self._assign(
                principal, account.account_id, context, existing, probe
            )
            for principal in principals
        ]
        failed = sum(1 for outcome in outcomes if not outcome.succeeded)
        probe.team_provisioned(
            team_name=descriptor.team_name,
            account_id=account.account_id,
            assignments=len(outcomes),
            failed=failed,
        )
        return TeamProvisioningResult(
            team_name=descriptor.team_name,
            account_name=descriptor.account_name,
            account=account,
            assignments=outcomes,
        )

    async def _assign(
        self,
        principal: Principal,
        account_id: str,
        context: TeamProvisioningContext,
        existing: set[str],
        probe: TeamProvisionerProbe,
    ) -> AssignmentOutcome:
        if principal.id in existing:
            probe.assignment_already_present(
                account_id=account_id, principal_id=principal.id
            )
            return AssignmentOutcome(principal=principal, status=AssignmentStatus.EXISTING)

        try:
            found = await self._identity_store.principal_exists(
                identity_store_id=context.identity_store_id,
                principal_id=principal.id,
                principal_type=principal.type,
            )
            if not found:
                raise PrincipalNotFoundError(principal.id, context.identity_store_id)

            request_id = await self._identity_center.create_account_assignment(
                instance_arn=context.sso_instance_arn,
                account_id=account_id,
                permission_set_arn=context.permission_set.arn,
                principal_id=principal.id,
                principal_type=principal.type,
            )
        except ProvisioningError as e:
            probe.assignment_failed(
                account_id=account_id, principal_id=principal.id, error=str(e)
            )
            return AssignmentOutcome(
                principal=principal,
                status=AssignmentStatus.FAILED,
                error=str(e),
            )

        probe.assignment_created(
            account_id=account_id, principal_id=principal.id, request_id=request_id
        )
        return AssignmentOutcome(
            principal=principal,
            status=AssignmentStatus.CREATED,
            request_id=request_id,
        )
