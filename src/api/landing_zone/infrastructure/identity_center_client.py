"""IAM Identity Center ("sso-admin") implementation of the IdentityCenterClient port."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from botocore.exceptions import BotoCoreError, ClientError

from landing_zone.domain.value_objects import PrincipalType
from landing_zone.infrastructure.aws_errors import error_code, unavailable
from landing_zone.infrastructure.observability import (
    AwsClientProbe,
    DefaultAwsClientProbe,
)
from landing_zone.ports.clients import PermissionSetDetails
from landing_zone.ports.exceptions import (
    AssignmentConflictError,
    OrganizationApiUnavailableError,
)

SERVICE = "sso-admin"


class IdentityCenterApiClient:
    """Adapter over the boto3 "sso-admin" client."""

    def __init__(self, client: Any, probe: AwsClientProbe | None = None):
        """Initialize IdentityCenterApiClient.

        Args:
            client: boto3 "sso-admin" client
            probe: Optional domain probe for observability
        """
        self._client = client
        self._probe = probe or DefaultAwsClientProbe()

    async def _call(self, operation: str, method: Callable[..., Any], **kwargs: Any) -> Any:
        """Run a boto3 call in a thread, translating transport failures."""
        try:
            return await asyncio.to_thread(method, **kwargs)
        except BotoCoreError as e:
            raise unavailable(SERVICE, operation, e, self._probe) from e

    def _find_by_name(self, instance_arn: str, name: str) -> str | None:
        paginator = self._client.get_paginator("list_permission_sets")
        for page in paginator.paginate(InstanceArn=instance_arn):
            for arn in page["PermissionSets"]:
                described = self._client.describe_permission_set(
                    InstanceArn=instance_arn, PermissionSetArn=arn
                )
                if described["PermissionSet"]["Name"] == name:
                    return arn
        return None

    async def find_permission_set_by_name(
        self, instance_arn: str, name: str
    ) -> str | None:
        try:
            return await self._call(
                "ListPermissionSets",
                self._find_by_name,
                instance_arn=instance_arn,
                name=name,
            )
        except ClientError as e:
            raise unavailable(SERVICE, "ListPermissionSets", e, self._probe) from e

    async def create_permission_set(
        self,
        instance_arn: str,
        name: str,
        session_duration: str,
        description: str,
    ) -> str:
        request: dict[str, Any] = {
            "InstanceArn": instance_arn,
            "Name": name,
            "SessionDuration": session_duration,
        }
        if description:
            request["Description"] = description

        try:
            response = await self._call(
                "CreatePermissionSet", self._client.create_permission_set, **request
            )
        except ClientError as e:
            if error_code(e) == "ConflictException":
                arn = await self.find_permission_set_by_name(instance_arn, name)
                if arn is not None:
                    self._probe.idempotent_conflict_absorbed(
                        service=SERVICE,
                        operation="CreatePermissionSet",
                        error_code=error_code(e),
                    )
                    return arn
            raise unavailable(SERVICE, "CreatePermissionSet", e, self._probe) from e

        return response["PermissionSet"]["PermissionSetArn"]

    async def attach_managed_policy(
        self,
        instance_arn: str,
        permission_set_arn: str,
        managed_policy_arn: str,
    ) -> None:
        try:
            await self._call(
                "AttachManagedPolicyToPermissionSet",
                self._client.attach_managed_policy_to_permission_set,
                InstanceArn=instance_arn,
                PermissionSetArn=permission_set_arn,
                ManagedPolicyArn=managed_policy_arn,
            )
        except ClientError as e:
            if error_code(e) == "ConflictException":
                self._probe.idempotent_conflict_absorbed(
                    service=SERVICE,
                    operation="AttachManagedPolicyToPermissionSet",
                    error_code=error_code(e),
                )
                return
            raise unavailable(
                SERVICE, "AttachManagedPolicyToPermissionSet", e, self._probe
            ) from e

    async def describe_permission_set(
        self, instance_arn: str, permission_set_arn: str
    ) -> PermissionSetDetails:
        try:
            response = await self._call(
                "DescribePermissionSet",
                self._client.describe_permission_set,
                InstanceArn=instance_arn,
                PermissionSetArn=permission_set_arn,
            )
        except ClientError as e:
            raise unavailable(SERVICE, "DescribePermissionSet", e, self._probe) from e

        described = response["PermissionSet"]
        return PermissionSetDetails(
            arn=described["PermissionSetArn"],
            name=described["Name"],
            session_duration=described.get("SessionDuration"),
            description=described.get("Description", ""),
        )

    def _attached_policies(self, instance_arn: str, permission_set_arn: str) -> set[str]:
        attached: set[str] = set()
        paginator = self._client.get_paginator("list_managed_policies_in_permission_set")
        for page in paginator.paginate(
            InstanceArn=instance_arn, PermissionSetArn=permission_set_arn
        ):
            attached.update(p["Arn"] for p in page["AttachedManagedPolicies"])
        return attached

    async def list_managed_policies(
        self, instance_arn: str, permission_set_arn: str
    ) -> set[str]:
        try:
            return await self._call(
                "ListManagedPoliciesInPermissionSet",
                self._attached_policies,
                instance_arn=instance_arn,
                permission_set_arn=permission_set_arn,
            )
        except ClientError as e:
            raise unavailable(
                SERVICE, "ListManagedPoliciesInPermissionSet", e, self._probe
            ) from e

    async def detach_managed_policy(
        self,
        instance_arn: str,
        permission_set_arn: str,
        managed_policy_arn: str,
    ) -> None:
        try:
            await self._call(
                "DetachManagedPolicyFromPermissionSet",
                self._client.detach_managed_policy_from_permission_set,
                InstanceArn=instance_arn,
                PermissionSetArn=permission_set_arn,
                ManagedPolicyArn=managed_policy_arn,
            )
        except ClientError as e:
            if error_code(e) == "ResourceNotFoundException":
                self._probe.idempotent_conflict_absorbed(
                    service=SERVICE,
                    operation="DetachManagedPolicyFromPermissionSet",
                    error_code=error_code(e),
                )
                return
            raise unavailable(
                SERVICE, "DetachManagedPolicyFromPermissionSet", e, self._probe
            ) from e

    async def update_permission_set(
        self,
        instance_arn: str,
        permission_set_arn: str,
        session_duration: str,
        description: str,
    ) -> None:
        request: dict[str, Any] = {
            "InstanceArn": instance_arn,
            "PermissionSetArn": permission_set_arn,
            "SessionDuration": session_duration,
        }
        if description:
            request["Description"] = description

        try:
            await self._call(
                "UpdatePermissionSet", self._client.update_permission_set, **request
            )
        except ClientError as e:
            raise unavailable(SERVICE, "UpdatePermissionSet", e, self._probe) from e

    def _has_provisioned_accounts(self, instance_arn: str, permission_set_arn: str) -> bool:
        paginator = self._client.get_paginator(
            "list_accounts_for_provisioned_permission_set"
        )
        for page in paginator.paginate(
            InstanceArn=instance_arn, PermissionSetArn=permission_set_arn
        ):
            if page.get("AccountIds"):
                return True
        return False

    async def is_provisioned(self, instance_arn: str, permission_set_arn: str) -> bool:
        try:
            return await self._call(
                "ListAccountsForProvisionedPermissionSet",
                self._has_provisioned_accounts,
                instance_arn=instance_arn,
                permission_set_arn=permission_set_arn,
            )
        except ClientError as e:
            raise unavailable(
                SERVICE, "ListAccountsForProvisionedPermissionSet", e, self._probe
            ) from e

    async def provision_permission_set(
        self, instance_arn: str, permission_set_arn: str
    ) -> str:
        try:
            response = await self._call(
                "ProvisionPermissionSet",
                self._client.provision_permission_set,
                InstanceArn=instance_arn,
                PermissionSetArn=permission_set_arn,
                TargetType="ALL_PROVISIONED_ACCOUNTS",
            )
        except ClientError as e:
            raise unavailable(SERVICE, "ProvisionPermissionSet", e, self._probe) from e

        status = response["PermissionSetProvisioningStatus"]
        if status.get("Status") == "FAILED":
            raise OrganizationApiUnavailableError(
                f"Provisioning of permission set {permission_set_arn} failed: "
                f"{status.get('FailureReason', 'unknown reason')}"
            )
        return status["RequestId"]

    def _assigned_principals(
        self, instance_arn: str, account_id: str, permission_set_arn: str
    ) -> set[str]:
        principals: set[str] = set()
        paginator = self._client.get_paginator("list_account_assignments")
        for page in paginator.paginate(
            InstanceArn=instance_arn,
            AccountId=account_id,
            PermissionSetArn=permission_set_arn,
        ):
            principals.update(a["PrincipalId"] for a in page["AccountAssignments"])
        return principals

    async def list_assigned_principal_ids(
        self,
        instance_arn: str,
        account_id: str,
        permission_set_arn: str,
    ) -> set[str]:
        try:
            return await self._call(
                "ListAccountAssignments",
                self._assigned_principals,
                instance_arn=instance_arn,
                account_id=account_id,
                permission_set_arn=permission_set_arn,
            )
        except ClientError as e:
            raise unavailable(SERVICE, "ListAccountAssignments", e, self._probe) from e

    async def create_account_assignment(
        self,
        instance_arn: str,
        account_id: str,
        permission_set_arn: str,
        principal_id: str,
        principal_type: PrincipalType,
    ) -> str:
        try:
            response = await self._call(
                "CreateAccountAssignment",
                self._client.create_account_assignment,
                InstanceArn=instance_arn,
                TargetId=account_id,
                TargetType="AWS_ACCOUNT",
                PermissionSetArn=permission_set_arn,
                PrincipalType=principal_type.value,
                PrincipalId=principal_id,
            )
        except ClientError as e:
            if error_code(e) == "ConflictException":
                self._probe.api_call_failed(
                    service=SERVICE,
                    operation="CreateAccountAssignment",
                    error_code=error_code(e),
                    error=str(e),
                )
                raise AssignmentConflictError(
                    f"Assignment of {principal_id} on {account_id} conflicts: {e}"
                ) from e
            raise unavailable(SERVICE, "CreateAccountAssignment", e, self._probe) from e

        status = response["AccountAssignmentCreationStatus"]
        if status.get("Status") == "FAILED":
            raise OrganizationApiUnavailableError(
                f"Assignment of {principal_id} on {account_id} failed: "
                f"{status.get('FailureReason', 'unknown reason')}"
            )
        return status["RequestId"]
