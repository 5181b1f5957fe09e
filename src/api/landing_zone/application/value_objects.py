"""Application-layer value objects for the landing zone context.

These are read-only results and shared handles passed between services:
the resolved parameters, the context every team unit receives, and the
per-team and per-assignment outcomes reported back to the operator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from landing_zone.domain.value_objects import (
    AccountRef,
    OrganizationalUnitRef,
    PermissionSetRef,
    Principal,
)

SSO_INSTANCE_ARN_TEMPLATE = "arn:aws:sso:::instance/{sso_id}"


class AssignmentStatus(StrEnum):
    """Outcome of one assignment request."""

    CREATED = "created"
    EXISTING = "existing"
    FAILED = "failed"


@dataclass(frozen=True)
class ResolvedParameters:
    """Parameters resolved once per deployment run.

    Attributes:
        sso_instance_id: Identity Center instance id (e.g. "ssoins-...")
        identity_store_id: Identity store id (e.g. "d-...")
    """

    sso_instance_id: str
    identity_store_id: str

    @property
    def sso_instance_arn(self) -> str:
        return SSO_INSTANCE_ARN_TEMPLATE.format(sso_id=self.sso_instance_id)


@dataclass(frozen=True)
class TeamProvisioningContext:
    """Everything team units share, computed once and passed by reference.

    Attributes:
        organizational_units: Resolved OU references by descriptor key
        teams_ou_key: Key of the OU teams land in by default
        permission_set: The single shared permission set handle
        sso_instance_arn: Identity Center instance ARN
        identity_store_id: Identity store principals are resolved against
    """

    organizational_units: dict[str, OrganizationalUnitRef]
    teams_ou_key: str
    permission_set: PermissionSetRef
    sso_instance_arn: str
    identity_store_id: str

    def ou_for(self, key: str | None) -> OrganizationalUnitRef:
        return self.organizational_units[key or self.teams_ou_key]


@dataclass(frozen=True)
class AssignmentOutcome:
    """What happened to one (account, principal) assignment."""

    principal: Principal
    status: AssignmentStatus
    request_id: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status != AssignmentStatus.FAILED


@dataclass(frozen=True)
class TeamProvisioningResult:
    """Account reference and per-assignment outcomes of one team.

    A team whose account could not be created carries the error and no
    assignments; a team with some failed assignments still carries the
    account and every successful assignment.
    """

    team_name: str
    account_name: str
    account: AccountRef | None = None
    assignments: list[AssignmentOutcome] = field(default_factory=list)
    error: str | None = None

    @property
    def failed_assignments(self) -> list[AssignmentOutcome]:
        return [a for a in self.assignments if not a.succeeded]

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.failed_assignments


@dataclass(frozen=True)
class AccountOutcome:
    """Result of provisioning a standalone account."""

    account_name: str
    account: AccountRef | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DeploymentReport:
    """Everything a deployment run did, for the operator."""

    deployment_id: str
    organizational_units: dict[str, OrganizationalUnitRef]
    permission_set: PermissionSetRef | None
    teams: list[TeamProvisioningResult] = field(default_factory=list)
    accounts: list[AccountOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(t.succeeded for t in self.teams) and all(
            a.succeeded for a in self.accounts
        )

    @property
    def failed_teams(self) -> list[TeamProvisioningResult]:
        return [t for t in self.teams if not t.succeeded]


@dataclass(frozen=True)
class PollPolicy:
    """Bounded backoff used when polling an eventually consistent service.

    Attributes:
        max_attempts: Total number of reads before giving up
        initial_delay_seconds: Delay after the first miss
        max_delay_seconds: Ceiling for any single delay
        multiplier: Growth factor between consecutive delays
    """

    max_attempts: int = 5
    initial_delay_seconds: float = 0.5
    max_delay_seconds: float = 8.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given (1-based) failed attempt."""
        delay = self.initial_delay_seconds * self.multiplier ** (attempt - 1)
        return min(delay, self.max_delay_seconds)

    @classmethod
    def fixed(cls, attempts: int, interval_seconds: float) -> PollPolicy:
        """A policy that polls at a constant interval."""
        return cls(
            max_attempts=attempts,
            initial_delay_seconds=interval_seconds,
            max_delay_seconds=interval_seconds,
            multiplier=1.0,
        )
