"""Deployment descriptor aggregate for the landing zone context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from landing_zone.domain.aggregates.organization import (
    OrganizationalUnitSpec,
    OrganizationTree,
)
from landing_zone.domain.aggregates.permission_set import PermissionSetDefinition
from landing_zone.domain.aggregates.team import StandaloneAccount, TeamDescriptor
from landing_zone.domain.exceptions import (
    DeploymentDescriptorError,
    OrganizationTreeError,
)
from landing_zone.domain.observability import DefaultDeploymentProbe

if TYPE_CHECKING:
    from landing_zone.domain.observability import DeploymentProbe


@dataclass(frozen=True)
class ParameterNames:
    """Names of the parameter-store entries the deployment depends on."""

    sso_instance_id: str = "sso-id"
    identity_store_id: str = "identity-store-id"


@dataclass(frozen=True)
class EmailClaim:
    """An account declared with an email another account already owns."""

    account_name: str
    email: str
    owner: str


@dataclass
class DeploymentDescriptor:
    """The complete description of one landing zone deployment.

    This is the sole configuration surface: OUs, the shared permission set,
    the teams and any standalone accounts. Each team descriptor is the unit
    of change.

    Business rules:
    - The OU declarations form a strict tree
    - The teams OU and every OU a team or account references is declared
    - An account email belongs to the first account declaring it; later
      accounts with the same email fail on their own, without a request
    - Two team descriptors may name the same account only if they agree on
      email, OU and principal type; their members are then merged
    """

    organization: OrganizationTree
    permission_set: PermissionSetDefinition
    teams: list[TeamDescriptor] = field(default_factory=list)
    accounts: list[StandaloneAccount] = field(default_factory=list)
    teams_ou_key: str = "teams"
    parameters: ParameterNames = field(default_factory=ParameterNames)
    _probe: DeploymentProbe = field(default_factory=DefaultDeploymentProbe, repr=False)

    def team_ou_key(self, team: TeamDescriptor) -> str:
        return team.organizational_unit_key or self.teams_ou_key

    def validate(self) -> None:
        """Run every local check before any remote request is emitted.

        Raises:
            DeploymentDescriptorError: With all problems found
        """
        problems: list[str] = []

        if self.parameters.sso_instance_id == self.parameters.identity_store_id:
            problems.append(
                "SSO instance and identity store parameters must have distinct names"
            )

        if self.teams and self.teams_ou_key not in self.organization:
            problems.append(f"Teams OU {self.teams_ou_key!r} is not declared")

        for team in self.teams:
            ou_key = self.team_ou_key(team)
            if team.organizational_unit_key and ou_key not in self.organization:
                problems.append(
                    f"Team {team.team_name} references unknown OU {ou_key!r}"
                )

        for account in self.accounts:
            if account.organizational_unit_key not in self.organization:
                problems.append(
                    f"Account {account.account_name} references unknown OU "
                    f"{account.organizational_unit_key!r}"
                )

        problems.extend(self._account_identity_problems())

        if problems:
            raise DeploymentDescriptorError(problems)

    def _account_identity_problems(self) -> list[str]:
        problems: list[str] = []
        first_team: dict[str, TeamDescriptor] = {}

        for team in self.teams:
            previous = first_team.get(team.account_name)
            if previous is not None:
                if previous.email.lower() != team.email.lower():
                    problems.append(
                        f"Account {team.account_name} is declared with two emails: "
                        f"{previous.email}, {team.email}"
                    )
                if self.team_ou_key(previous) != self.team_ou_key(team):
                    problems.append(
                        f"Account {team.account_name} is placed in two OUs"
                    )
                if previous.principal_type != team.principal_type:
                    problems.append(
                        f"Account {team.account_name} mixes principal types across "
                        f"teams {previous.team_name}, {team.team_name}"
                    )
                continue

            first_team[team.account_name] = team

        for account in self.accounts:
            if account.account_name in first_team:
                problems.append(
                    f"Account {account.account_name} is declared as both a team "
                    f"and a standalone account"
                )

        return problems

    def duplicate_email_claims(self) -> dict[str, EmailClaim]:
        """Accounts whose email an earlier declaration already uses.

        The first account to declare an email owns it, teams before
        standalone accounts. Every later account with the same email is
        returned here, keyed by account name. Those accounts are never
        requested; the owner and every other account proceed.
        """
        owners: dict[str, str] = {}
        claims: dict[str, EmailClaim] = {}
        team_accounts: set[str] = set()

        declared: list[tuple[str, str]] = []
        for team in self.teams:
            if team.account_name not in team_accounts:
                team_accounts.add(team.account_name)
                declared.append((team.account_name, team.email))
        declared.extend(
            (account.account_name, account.email)
            for account in self.accounts
            if account.account_name not in team_accounts
        )

        for account_name, email in declared:
            owner = owners.setdefault(email.lower(), account_name)
            if owner != account_name:
                claims[account_name] = EmailClaim(
                    account_name=account_name, email=email, owner=owner
                )
        return claims

    def team_units(self) -> list[TeamDescriptor]:
        """One descriptor per account, merging descriptors that share an account.

        Naming the same account from two descriptors is a configuration
        error, but the intent is unambiguous: the members are merged and
        the duplicates collapse later in the assignment set.
        """
        merged: dict[str, TeamDescriptor] = {}
        for team in self.teams:
            existing = merged.get(team.account_name)
            if existing is None:
                merged[team.account_name] = team
                continue

            self._probe.team_descriptors_merged(
                account_name=team.account_name,
                team_names=[existing.team_name, team.team_name],
            )
            merged[team.account_name] = TeamDescriptor(
                team_name=f"{existing.team_name}+{team.team_name}",
                account_name=existing.account_name,
                email=existing.email,
                member_principal_ids=(
                    existing.member_principal_ids + team.member_principal_ids
                ),
                principal_type=existing.principal_type,
                organizational_unit_key=existing.organizational_unit_key,
            )
        return list(merged.values())


def build_organization(units: list[OrganizationalUnitSpec]) -> OrganizationTree:
    """Build an OrganizationTree, reporting tree errors as descriptor errors."""
    try:
        return OrganizationTree(units=list(units))
    except OrganizationTreeError as e:
        raise DeploymentDescriptorError([str(e)]) from e
