"""Identity store implementation of the IdentityStoreClient port."""

from __future__ import annotations

import asyncio
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from landing_zone.domain.value_objects import PrincipalType
from landing_zone.infrastructure.aws_errors import error_code, unavailable
from landing_zone.infrastructure.observability import (
    AwsClientProbe,
    DefaultAwsClientProbe,
)

SERVICE = "identitystore"


class IdentityStoreApiClient:
    """Adapter over the boto3 "identitystore" client."""

    def __init__(self, client: Any, probe: AwsClientProbe | None = None):
        """Initialize IdentityStoreApiClient.

        Args:
            client: boto3 "identitystore" client
            probe: Optional domain probe for observability
        """
        self._client = client
        self._probe = probe or DefaultAwsClientProbe()

    async def principal_exists(
        self,
        identity_store_id: str,
        principal_id: str,
        principal_type: PrincipalType,
    ) -> bool:
        """Check a user or group id against the identity store.

        Raises:
            OrganizationApiUnavailableError: If the lookup fails for any
                reason other than the principal being absent
        """
        if principal_type == PrincipalType.GROUP:
            operation = "DescribeGroup"
            method = self._client.describe_group
            kwargs = {"IdentityStoreId": identity_store_id, "GroupId": principal_id}
        else:
            operation = "DescribeUser"
            method = self._client.describe_user
            kwargs = {"IdentityStoreId": identity_store_id, "UserId": principal_id}

        try:
            await asyncio.to_thread(method, **kwargs)
        except ClientError as e:
            if error_code(e) == "ResourceNotFoundException":
                return False
            raise unavailable(SERVICE, operation, e, self._probe) from e
        except BotoCoreError as e:
            raise unavailable(SERVICE, operation, e, self._probe) from e

        return True
