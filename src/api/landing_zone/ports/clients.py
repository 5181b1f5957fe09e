"""Client protocols (ports) for the remote services.

The organization, SSO, identity-store and parameter-store APIs are
idempotent request/response services. These protocols describe only the
calls the landing zone makes; implementations live in
landing_zone.infrastructure and tests substitute autospec mocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from landing_zone.domain.value_objects import (
    AccountCreationState,
    OrganizationalUnitRef,
    PrincipalType,
)


@dataclass(frozen=True)
class CreateAccountStatus:
    """Status of an asynchronous account creation request.

    Attributes:
        request_id: Id of the creation request
        state: IN_PROGRESS, SUCCEEDED or FAILED
        account_id: Set once the request succeeded
        failure_reason: Remote failure reason code when FAILED
    """

    request_id: str
    state: AccountCreationState
    account_id: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class PermissionSetDetails:
    """Current settings of a permission set as the SSO API reports them."""

    arn: str
    name: str
    session_duration: str | None = None
    description: str = ""


@dataclass(frozen=True)
class ExistingAccount:
    """An account already present in the organization."""

    id: str
    name: str
    email: str


@runtime_checkable
class ParameterStore(Protocol):
    """Key-value store holding deployment parameters."""

    async def get_parameter(self, name: str) -> str | None:
        """Read the current value of a parameter.

        Returns:
            The value, or None when no parameter exists under the name
        """
        ...


@runtime_checkable
class OrganizationsClient(Protocol):
    """Organization API: root, OUs and accounts."""

    async def describe_root_id(self) -> str | None:
        """Return the organization root id, or None if no organization exists."""
        ...

    async def create_organization(self) -> None:
        """Create the organization with all features enabled."""
        ...

    async def list_organizational_units(
        self, parent_id: str
    ) -> list[OrganizationalUnitRef]:
        """List the OUs directly below a parent."""
        ...

    async def create_organizational_unit(
        self, parent_id: str, name: str
    ) -> OrganizationalUnitRef:
        """Create an OU below a parent.

        Raises:
            OrganizationApiUnavailableError: If the request fails
        """
        ...

    async def find_account_by_email(self, email: str) -> ExistingAccount | None:
        """Look up an account of the organization by its root email."""
        ...

    async def find_account_by_name(self, name: str) -> ExistingAccount | None:
        """Look up an account of the organization by its name."""
        ...

    async def find_account_parent(self, account_id: str) -> str:
        """Return the id of the OU (or root) that currently owns an account."""
        ...

    async def create_account(self, name: str, email: str) -> CreateAccountStatus:
        """Request creation of an account.

        Raises:
            DuplicateAccountEmailError: If the email is already used
            AccountQuotaExceededError: If the organization is full
            OrganizationApiUnavailableError: For any other failure
        """
        ...

    async def describe_create_account_status(
        self, request_id: str
    ) -> CreateAccountStatus:
        """Poll an account creation request."""
        ...

    async def move_account(
        self,
        account_id: str,
        source_parent_id: str,
        destination_parent_id: str,
    ) -> None:
        """Move an account between OUs."""
        ...


@runtime_checkable
class IdentityCenterClient(Protocol):
    """SSO API: permission sets and account assignments."""

    async def find_permission_set_by_name(
        self, instance_arn: str, name: str
    ) -> str | None:
        """Return the ARN of the permission set with this name, if any."""
        ...

    async def create_permission_set(
        self,
        instance_arn: str,
        name: str,
        session_duration: str,
        description: str,
    ) -> str:
        """Create a permission set and return its ARN."""
        ...

    async def attach_managed_policy(
        self,
        instance_arn: str,
        permission_set_arn: str,
        managed_policy_arn: str,
    ) -> None:
        """Attach a managed policy; attaching an attached policy is a no-op."""
        ...

    async def describe_permission_set(
        self, instance_arn: str, permission_set_arn: str
    ) -> PermissionSetDetails:
        """Read the session duration and description of a permission set."""
        ...

    async def list_managed_policies(
        self, instance_arn: str, permission_set_arn: str
    ) -> set[str]:
        """ARNs of the managed policies attached to a permission set."""
        ...

    async def detach_managed_policy(
        self,
        instance_arn: str,
        permission_set_arn: str,
        managed_policy_arn: str,
    ) -> None:
        """Detach a managed policy; detaching a detached policy is a no-op."""
        ...

    async def update_permission_set(
        self,
        instance_arn: str,
        permission_set_arn: str,
        session_duration: str,
        description: str,
    ) -> None:
        """Overwrite the session duration and description of a permission set."""
        ...

    async def is_provisioned(self, instance_arn: str, permission_set_arn: str) -> bool:
        """Whether the permission set is provisioned to at least one account."""
        ...

    async def provision_permission_set(
        self, instance_arn: str, permission_set_arn: str
    ) -> str:
        """Push the current permission set to every account it is provisioned to.

        Returns:
            The id of the provisioning request
        """
        ...

    async def list_assigned_principal_ids(
        self,
        instance_arn: str,
        account_id: str,
        permission_set_arn: str,
    ) -> set[str]:
        """Principal ids already assigned the permission set on an account."""
        ...

    async def create_account_assignment(
        self,
        instance_arn: str,
        account_id: str,
        permission_set_arn: str,
        principal_id: str,
        principal_type: PrincipalType,
    ) -> str:
        """Request an assignment and return the request id.

        Raises:
            AssignmentConflictError: If the assignment already exists
            OrganizationApiUnavailableError: For any other failure
        """
        ...


@runtime_checkable
class IdentityStoreClient(Protocol):
    """Identity store lookups for assignable principals."""

    async def principal_exists(
        self,
        identity_store_id: str,
        principal_id: str,
        principal_type: PrincipalType,
    ) -> bool:
        """Check whether a user or group id exists in the identity store."""
        ...
