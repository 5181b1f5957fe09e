"""AWS Organizations implementation of the OrganizationsClient port.

boto3 is synchronous; every call runs in a worker thread so concurrently
provisioned teams do not block each other.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from botocore.exceptions import BotoCoreError, ClientError

from landing_zone.domain.value_objects import (
    AccountCreationState,
    OrganizationalUnitRef,
)
from landing_zone.infrastructure.aws_errors import error_code, error_reason, unavailable
from landing_zone.infrastructure.observability import (
    AwsClientProbe,
    DefaultAwsClientProbe,
)
from landing_zone.ports.clients import CreateAccountStatus, ExistingAccount
from landing_zone.ports.exceptions import (
    AccountQuotaExceededError,
    DuplicateAccountEmailError,
)

SERVICE = "organizations"

_QUOTA_REASONS = {"ACCOUNT_NUMBER_LIMIT_EXCEEDED", "OU_NUMBER_LIMIT_EXCEEDED"}


def _status_from_response(status: dict[str, Any]) -> CreateAccountStatus:
    return CreateAccountStatus(
        request_id=status["Id"],
        state=AccountCreationState(status["State"]),
        account_id=status.get("AccountId"),
        failure_reason=status.get("FailureReason"),
    )


class OrganizationsApiClient:
    """Adapter over the boto3 "organizations" client."""

    def __init__(self, client: Any, probe: AwsClientProbe | None = None):
        """Initialize OrganizationsApiClient.

        Args:
            client: boto3 "organizations" client
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

    def _paginate(self, paginator_name: str, key: str, **kwargs: Any) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        for page in self._client.get_paginator(paginator_name).paginate(**kwargs):
            items.extend(page[key])
        return items

    async def describe_root_id(self) -> str | None:
        try:
            response = await self._call("ListRoots", self._client.list_roots)
        except ClientError as e:
            if error_code(e) == "AWSOrganizationsNotInUseException":
                return None
            raise unavailable(SERVICE, "ListRoots", e, self._probe) from e

        roots = response.get("Roots", [])
        return roots[0]["Id"] if roots else None

    async def create_organization(self) -> None:
        try:
            await self._call(
                "CreateOrganization", self._client.create_organization, FeatureSet="ALL"
            )
        except ClientError as e:
            if error_code(e) == "AlreadyInOrganizationException":
                self._probe.idempotent_conflict_absorbed(
                    service=SERVICE,
                    operation="CreateOrganization",
                    error_code=error_code(e),
                )
                return
            raise unavailable(SERVICE, "CreateOrganization", e, self._probe) from e

    async def list_organizational_units(
        self, parent_id: str
    ) -> list[OrganizationalUnitRef]:
        try:
            units = await self._call(
                "ListOrganizationalUnitsForParent",
                self._paginate,
                paginator_name="list_organizational_units_for_parent",
                key="OrganizationalUnits",
                ParentId=parent_id,
            )
        except ClientError as e:
            raise unavailable(
                SERVICE, "ListOrganizationalUnitsForParent", e, self._probe
            ) from e

        return [
            OrganizationalUnitRef(id=unit["Id"], name=unit["Name"], parent_id=parent_id)
            for unit in units
        ]

    async def create_organizational_unit(
        self, parent_id: str, name: str
    ) -> OrganizationalUnitRef:
        try:
            response = await self._call(
                "CreateOrganizationalUnit",
                self._client.create_organizational_unit,
                ParentId=parent_id,
                Name=name,
            )
        except ClientError as e:
            if error_code(e) == "DuplicateOrganizationalUnitException":
                self._probe.idempotent_conflict_absorbed(
                    service=SERVICE,
                    operation="CreateOrganizationalUnit",
                    error_code=error_code(e),
                )
                for unit in await self.list_organizational_units(parent_id):
                    if unit.name == name:
                        return unit
            if error_code(e) == "ConstraintViolationException" and (
                error_reason(e) in _QUOTA_REASONS
            ):
                raise AccountQuotaExceededError(str(e)) from e
            raise unavailable(SERVICE, "CreateOrganizationalUnit", e, self._probe) from e

        unit = response["OrganizationalUnit"]
        return OrganizationalUnitRef(id=unit["Id"], name=unit["Name"], parent_id=parent_id)

    async def _list_accounts(self) -> list[ExistingAccount]:
        try:
            accounts = await self._call(
                "ListAccounts",
                self._paginate,
                paginator_name="list_accounts",
                key="Accounts",
            )
        except ClientError as e:
            raise unavailable(SERVICE, "ListAccounts", e, self._probe) from e

        return [
            ExistingAccount(id=a["Id"], name=a["Name"], email=a["Email"])
            for a in accounts
        ]

    async def find_account_by_email(self, email: str) -> ExistingAccount | None:
        wanted = email.lower()
        for account in await self._list_accounts():
            if account.email.lower() == wanted:
                return account
        return None

    async def find_account_by_name(self, name: str) -> ExistingAccount | None:
        for account in await self._list_accounts():
            if account.name == name:
                return account
        return None

    async def find_account_parent(self, account_id: str) -> str:
        try:
            response = await self._call(
                "ListParents", self._client.list_parents, ChildId=account_id
            )
        except ClientError as e:
            raise unavailable(SERVICE, "ListParents", e, self._probe) from e

        return response["Parents"][0]["Id"]

    async def create_account(self, name: str, email: str) -> CreateAccountStatus:
        try:
            response = await self._call(
                "CreateAccount",
                self._client.create_account,
                Email=email,
                AccountName=name,
                IamUserAccessToBilling="DENY",
            )
        except ClientError as e:
            code = error_code(e)
            if code == "DuplicateAccountException":
                raise DuplicateAccountEmailError(email, name) from e
            if code == "ConstraintViolationException" and error_reason(e) in _QUOTA_REASONS:
                raise AccountQuotaExceededError(
                    f"Organization account limit reached while creating {name}"
                ) from e
            raise unavailable(SERVICE, "CreateAccount", e, self._probe) from e

        return _status_from_response(response["CreateAccountStatus"])

    async def describe_create_account_status(
        self, request_id: str
    ) -> CreateAccountStatus:
        try:
            response = await self._call(
                "DescribeCreateAccountStatus",
                self._client.describe_create_account_status,
                CreateAccountRequestId=request_id,
            )
        except ClientError as e:
            raise unavailable(
                SERVICE, "DescribeCreateAccountStatus", e, self._probe
            ) from e

        return _status_from_response(response["CreateAccountStatus"])

    async def move_account(
        self,
        account_id: str,
        source_parent_id: str,
        destination_parent_id: str,
    ) -> None:
        try:
            await self._call(
                "MoveAccount",
                self._client.move_account,
                AccountId=account_id,
                SourceParentId=source_parent_id,
                DestinationParentId=destination_parent_id,
            )
        except ClientError as e:
            if error_code(e) == "DuplicateAccountException":
                # Already in the destination.
                self._probe.idempotent_conflict_absorbed(
                    service=SERVICE, operation="MoveAccount", error_code=error_code(e)
                )
                return
            raise unavailable(SERVICE, "MoveAccount", e, self._probe) from e
