"""boto3 adapters implementing the landing zone ports."""

from landing_zone.infrastructure.identity_center_client import IdentityCenterApiClient
from landing_zone.infrastructure.identity_store_client import IdentityStoreApiClient
from landing_zone.infrastructure.organizations_client import OrganizationsApiClient
from landing_zone.infrastructure.ssm_parameter_store import SsmParameterStore

__all__ = [
    "IdentityCenterApiClient",
    "IdentityStoreApiClient",
    "OrganizationsApiClient",
    "SsmParameterStore",
]
