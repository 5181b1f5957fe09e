"""Ports (interfaces) for the landing zone bounded context.

Ports define the contracts for the remote organization, SSO, identity
store and parameter store services without specifying how they are
reached. This keeps the provisioning model independent of boto3.
"""

from landing_zone.ports.clients import (
    CreateAccountStatus,
    ExistingAccount,
    IdentityCenterClient,
    IdentityStoreClient,
    OrganizationsClient,
    ParameterStore,
    PermissionSetDetails,
)
from landing_zone.ports.exceptions import (
    AccountEmailMismatchError,
    AccountNotReadyError,
    AccountQuotaExceededError,
    AssignmentConflictError,
    DuplicateAccountEmailError,
    OrganizationApiUnavailableError,
    ParameterNotFoundError,
    ParameterResolutionTimeoutError,
    PrincipalNotFoundError,
)

__all__ = [
    "AccountEmailMismatchError",
    "AccountNotReadyError",
    "AccountQuotaExceededError",
    "AssignmentConflictError",
    "CreateAccountStatus",
    "DuplicateAccountEmailError",
    "ExistingAccount",
    "IdentityCenterClient",
    "IdentityStoreClient",
    "OrganizationApiUnavailableError",
    "OrganizationsClient",
    "ParameterNotFoundError",
    "ParameterResolutionTimeoutError",
    "ParameterStore",
    "PermissionSetDetails",
    "PrincipalNotFoundError",
]
