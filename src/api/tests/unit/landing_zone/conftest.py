"""In-memory stand-ins for the landing zone ports.

The fakes keep just enough state to behave like the remote services
(accounts by email, OUs by parent, assignments by account) and record
every call so tests can count requests.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

import pytest

from landing_zone.domain.aggregates import (
    DeploymentDescriptor,
    OrganizationalUnitSpec,
    PermissionSetDefinition,
    TeamDescriptor,
    build_organization,
)
from landing_zone.domain.value_objects import (
    AccountCreationState,
    OrganizationalUnitRef,
    PrincipalType,
)
from landing_zone.ports.clients import (
    CreateAccountStatus,
    ExistingAccount,
    PermissionSetDetails,
)
from landing_zone.ports.exceptions import (
    DuplicateAccountEmailError,
    OrganizationApiUnavailableError,
)


@dataclass
class FakeParameterStore:
    values: dict[str, str] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def get_parameter(self, name: str) -> str | None:
        self.calls.append(name)
        return self.values.get(name)


@dataclass
class FakeOrganizations:
    root_id: str | None = "r-root"
    units: dict[str, list[OrganizationalUnitRef]] = field(default_factory=dict)
    accounts: dict[str, ExistingAccount] = field(default_factory=dict)
    parents: dict[str, str] = field(default_factory=dict)
    requests: dict[str, CreateAccountStatus] = field(default_factory=dict)
    failure_reasons: dict[str, str] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def _call(self, name: str) -> None:
        self.calls.append(name)

    def count(self, name: str) -> int:
        return self.calls.count(name)

    async def describe_root_id(self) -> str | None:
        self._call("describe_root_id")
        return self.root_id

    async def create_organization(self) -> None:
        self._call("create_organization")
        self.root_id = "r-created"

    async def list_organizational_units(
        self, parent_id: str
    ) -> list[OrganizationalUnitRef]:
        self._call("list_organizational_units")
        return list(self.units.get(parent_id, []))

    async def create_organizational_unit(
        self, parent_id: str, name: str
    ) -> OrganizationalUnitRef:
        self._call("create_organizational_unit")
        unit = OrganizationalUnitRef(
            id=f"ou-{next(self._ids)}", name=name, parent_id=parent_id
        )
        self.units.setdefault(parent_id, []).append(unit)
        return unit

    async def find_account_by_email(self, email: str) -> ExistingAccount | None:
        self._call("find_account_by_email")
        return self.accounts.get(email.lower())

    async def find_account_by_name(self, name: str) -> ExistingAccount | None:
        self._call("find_account_by_name")
        for account in self.accounts.values():
            if account.name == name:
                return account
        return None

    async def find_account_parent(self, account_id: str) -> str:
        self._call("find_account_parent")
        return self.parents[account_id]

    async def create_account(self, name: str, email: str) -> CreateAccountStatus:
        self._call("create_account")
        if email.lower() in self.accounts:
            raise DuplicateAccountEmailError(email, name)

        request_id = f"car-{next(self._ids)}"
        reason = self.failure_reasons.get(name)
        if reason is not None:
            status = CreateAccountStatus(
                request_id=request_id,
                state=AccountCreationState.FAILED,
                failure_reason=reason,
            )
        else:
            account_id = f"{next(self._ids):012d}"
            self.accounts[email.lower()] = ExistingAccount(
                id=account_id, name=name, email=email
            )
            self.parents[account_id] = self.root_id or "r-root"
            status = CreateAccountStatus(
                request_id=request_id,
                state=AccountCreationState.SUCCEEDED,
                account_id=account_id,
            )
        self.requests[request_id] = status
        return CreateAccountStatus(
            request_id=request_id, state=AccountCreationState.IN_PROGRESS
        )

    async def describe_create_account_status(
        self, request_id: str
    ) -> CreateAccountStatus:
        self._call("describe_create_account_status")
        return self.requests[request_id]

    async def move_account(
        self,
        account_id: str,
        source_parent_id: str,
        destination_parent_id: str,
    ) -> None:
        self._call("move_account")
        self.parents[account_id] = destination_parent_id


@dataclass
class FakeIdentityCenter:
    permission_sets: dict[str, str] = field(default_factory=dict)
    policies: dict[str, list[str]] = field(default_factory=dict)
    session_durations: dict[str, str] = field(default_factory=dict)
    descriptions: dict[str, str] = field(default_factory=dict)
    assignments: set[tuple[str, str, str]] = field(default_factory=set)
    failing_policies: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def count(self, name: str) -> int:
        return self.calls.count(name)

    async def find_permission_set_by_name(
        self, instance_arn: str, name: str
    ) -> str | None:
        self.calls.append("find_permission_set_by_name")
        return self.permission_sets.get(name)

    async def create_permission_set(
        self,
        instance_arn: str,
        name: str,
        session_duration: str,
        description: str,
    ) -> str:
        self.calls.append("create_permission_set")
        arn = f"{instance_arn}/ps-{next(self._ids)}"
        self.permission_sets[name] = arn
        self.session_durations[arn] = session_duration
        self.descriptions[arn] = description
        return arn

    async def attach_managed_policy(
        self,
        instance_arn: str,
        permission_set_arn: str,
        managed_policy_arn: str,
    ) -> None:
        self.calls.append("attach_managed_policy")
        if managed_policy_arn in self.failing_policies:
            raise OrganizationApiUnavailableError(
                f"AttachManagedPolicyToPermissionSet failed for {managed_policy_arn}"
            )
        attached = self.policies.setdefault(permission_set_arn, [])
        if managed_policy_arn not in attached:
            attached.append(managed_policy_arn)

    async def describe_permission_set(
        self, instance_arn: str, permission_set_arn: str
    ) -> PermissionSetDetails:
        self.calls.append("describe_permission_set")
        name = next(n for n, a in self.permission_sets.items() if a == permission_set_arn)
        return PermissionSetDetails(
            arn=permission_set_arn,
            name=name,
            session_duration=self.session_durations.get(permission_set_arn),
            description=self.descriptions.get(permission_set_arn, ""),
        )

    async def list_managed_policies(
        self, instance_arn: str, permission_set_arn: str
    ) -> set[str]:
        self.calls.append("list_managed_policies")
        return set(self.policies.get(permission_set_arn, []))

    async def detach_managed_policy(
        self,
        instance_arn: str,
        permission_set_arn: str,
        managed_policy_arn: str,
    ) -> None:
        self.calls.append("detach_managed_policy")
        attached = self.policies.get(permission_set_arn, [])
        if managed_policy_arn in attached:
            attached.remove(managed_policy_arn)

    async def update_permission_set(
        self,
        instance_arn: str,
        permission_set_arn: str,
        session_duration: str,
        description: str,
    ) -> None:
        self.calls.append("update_permission_set")
        self.session_durations[permission_set_arn] = session_duration
        self.descriptions[permission_set_arn] = description

    async def is_provisioned(self, instance_arn: str, permission_set_arn: str) -> bool:
        self.calls.append("is_provisioned")
        return any(arn == permission_set_arn for _, arn, _ in self.assignments)

    async def provision_permission_set(
        self, instance_arn: str, permission_set_arn: str
    ) -> str:
        self.calls.append("provision_permission_set")
        return f"req-{next(self._ids)}"

    async def list_assigned_principal_ids(
        self,
        instance_arn: str,
        account_id: str,
        permission_set_arn: str,
    ) -> set[str]:
        self.calls.append("list_assigned_principal_ids")
        return {
            principal
            for account, arn, principal in self.assignments
            if account == account_id and arn == permission_set_arn
        }

    async def create_account_assignment(
        self,
        instance_arn: str,
        account_id: str,
        permission_set_arn: str,
        principal_id: str,
        principal_type: PrincipalType,
    ) -> str:
        self.calls.append("create_account_assignment")
        self.assignments.add((account_id, permission_set_arn, principal_id))
        return f"req-{next(self._ids)}"


@dataclass
class FakeIdentityStore:
    known: set[str] | None = None
    calls: list[str] = field(default_factory=list)

    async def principal_exists(
        self,
        identity_store_id: str,
        principal_id: str,
        principal_type: PrincipalType,
    ) -> bool:
        self.calls.append(principal_id)
        return self.known is None or principal_id in self.known


@pytest.fixture
def parameter_store() -> FakeParameterStore:
    return FakeParameterStore(
        values={"sso-id": "ssoins-1234", "identity-store-id": "d-1234"}
    )


@pytest.fixture
def organizations() -> FakeOrganizations:
    return FakeOrganizations()


@pytest.fixture
def identity_center() -> FakeIdentityCenter:
    return FakeIdentityCenter()


@pytest.fixture
def identity_store() -> FakeIdentityStore:
    return FakeIdentityStore()


@pytest.fixture
def permission_set() -> PermissionSetDefinition:
    return PermissionSetDefinition.administrator_access()


def _make_descriptor(
    teams: list[TeamDescriptor],
    permission_set: PermissionSetDefinition | None = None,
    units: list[OrganizationalUnitSpec] | None = None,
    **kwargs,
) -> DeploymentDescriptor:
    """Descriptor with a teams OU under the root unless units are given."""
    if units is None:
        units = [OrganizationalUnitSpec(key="teams", name="OU - AWS Teams")]
    return DeploymentDescriptor(
        organization=build_organization(units),
        permission_set=permission_set or PermissionSetDefinition.administrator_access(),
        teams=teams,
        **kwargs,
    )


def _make_team(
    name: str, members: list[str], email: str | None = None, **kwargs
) -> TeamDescriptor:
    return TeamDescriptor(
        team_name=name,
        account_name=kwargs.pop("account_name", name),
        email=email or f"{name}@example.com",
        member_principal_ids=tuple(members),
        **kwargs,
    )


@pytest.fixture
def make_descriptor():
    """Factory for deployment descriptors with a teams OU."""
    return _make_descriptor


@pytest.fixture
def make_team():
    """Factory for team descriptors; the account name defaults to the team name."""
    return _make_team
