"""Account factory for the landing zone context.

Requests isolated accounts and places them under their organizational unit.
"""

from __future__ import annotations

import asyncio

from landing_zone.application.observability import (
    AccountFactoryProbe,
    DefaultAccountFactoryProbe,
)
from landing_zone.application.value_objects import PollPolicy
from landing_zone.domain.exceptions import ProvisioningError
from landing_zone.domain.value_objects import (
    AccountCreationState,
    AccountRef,
    OrganizationalUnitRef,
)
from landing_zone.ports.clients import CreateAccountStatus, OrganizationsClient
from landing_zone.ports.exceptions import (
    AccountEmailMismatchError,
    AccountNotReadyError,
    AccountQuotaExceededError,
    DuplicateAccountEmailError,
    OrganizationApiUnavailableError,
)

EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
ACCOUNT_LIMIT_EXCEEDED = "ACCOUNT_LIMIT_EXCEEDED"


def creation_failure(
    account_name: str, email: str, failure_reason: str | None
) -> ProvisioningError:
    """Map a remote account-creation failure reason onto the error taxonomy."""
    if failure_reason == EMAIL_ALREADY_EXISTS:
        return DuplicateAccountEmailError(email, account_name)
    if failure_reason == ACCOUNT_LIMIT_EXCEEDED:
        return AccountQuotaExceededError(
            f"Organization account limit reached while creating {account_name}"
        )
    return OrganizationApiUnavailableError(
        f"Account {account_name} creation failed: {failure_reason or 'unknown reason'}"
    )


class AccountFactory:
    """Application service that creates accounts under an OU.

    Account creation is asynchronous at the organization API. create_account
    returns as soon as the request is accepted; await_account polls the
    request until the account is active and moves it into its OU (new
    accounts always start under the root). Nothing downstream may assume an
    account is usable before await_account returned.

    Accounts are identified by email. An existing account with the same
    email and name is reused (and moved if it sits in another OU); the same
    email under a different name is a DuplicateAccountEmailError, and the
    same name under a different email is an AccountEmailMismatchError.
    """

    def __init__(
        self,
        organizations: OrganizationsClient,
        poll: PollPolicy | None = None,
        probe: AccountFactoryProbe | None = None,
    ):
        """Initialize AccountFactory.

        Args:
            organizations: Organization API client
            poll: Status polling policy (default: 60 checks, 10 seconds apart)
            probe: Optional domain probe for observability
        """
        self._organizations = organizations
        self._poll = poll or PollPolicy.fixed(attempts=60, interval_seconds=10.0)
        self._probe = probe or DefaultAccountFactoryProbe()

    @property
    def probe(self) -> AccountFactoryProbe:
        return self._probe

    def with_probe(self, probe: AccountFactoryProbe) -> AccountFactory:
        """Create a factory sharing the client and policy with another probe."""
        return AccountFactory(self._organizations, poll=self._poll, probe=probe)

    async def create_account(
        self,
        name: str,
        email: str,
        organizational_unit: OrganizationalUnitRef,
    ) -> AccountRef:
        """Request an account under an OU.

        Args:
            name: Account name
            email: Account root email
            organizational_unit: Target OU

        Returns:
            AccountRef; IN_PROGRESS for new requests, SUCCEEDED for reused accounts

        Raises:
            DuplicateAccountEmailError: If the email belongs to another account
            AccountEmailMismatchError: If the name belongs to an account with
                another email
            AccountQuotaExceededError: If the organization is full
            OrganizationApiUnavailableError: If the organization API fails
        """
        try:
            existing = await self._organizations.find_account_by_email(email)
            if existing is not None:
                if existing.name != name:
                    raise DuplicateAccountEmailError(email, existing.name)
                await self._place(name, existing.id, organizational_unit)
                self._probe.account_reused(account_name=name, account_id=existing.id)
                return AccountRef(
                    name=name,
                    email=email,
                    organizational_unit_id=organizational_unit.id,
                    state=AccountCreationState.SUCCEEDED,
                    account_id=existing.id,
                    existing=True,
                )

            named = await self._organizations.find_account_by_name(name)
            if named is not None:
                raise AccountEmailMismatchError(name, email, named.email)

            status = await self._organizations.create_account(name=name, email=email)
            if status.state == AccountCreationState.FAILED:
                raise creation_failure(name, email, status.failure_reason)

        except ProvisioningError as e:
            self._probe.account_creation_failed(
                account_name=name, email=email, error=str(e)
            )
            raise

        self._probe.account_creation_requested(
            account_name=name, email=email, request_id=status.request_id
        )
        return self._ref_from_status(name, email, organizational_unit, status)

    async def await_account(
        self,
        account: AccountRef,
        organizational_unit: OrganizationalUnitRef,
    ) -> AccountRef:
        """Wait until a requested account is active and placed in its OU.

        Args:
            account: Reference returned by create_account
            organizational_unit: OU the account belongs in

        Returns:
            AccountRef in state SUCCEEDED with the account id

        Raises:
            AccountNotReadyError: If the account is still being created after
                the last status check
            DuplicateAccountEmailError, AccountQuotaExceededError,
            OrganizationApiUnavailableError: If the creation request failed
        """
        if account.existing:
            return account

        if account.request_id is None:
            raise ValueError(f"Account {account.name} has no creation request id")

        try:
            status = await self._wait_for(account)
            if status.state == AccountCreationState.FAILED:
                raise creation_failure(account.name, account.email, status.failure_reason)
            if status.account_id is None:
                raise OrganizationApiUnavailableError(
                    f"Account {account.name} succeeded without an account id"
                )
            await self._place(account.name, status.account_id, organizational_unit)

        except ProvisioningError as e:
            self._probe.account_creation_failed(
                account_name=account.name, email=account.email, error=str(e)
            )
            raise

        self._probe.account_active(account_name=account.name, account_id=status.account_id)
        return self._ref_from_status(
            account.name, account.email, organizational_unit, status
        )

    async def provision(
        self,
        name: str,
        email: str,
        organizational_unit: OrganizationalUnitRef,
    ) -> AccountRef:
        """Create an account and wait until it is active in its OU."""
        account = await self.create_account(name, email, organizational_unit)
        return await self.await_account(account, organizational_unit)

    async def _wait_for(self, account: AccountRef) -> CreateAccountStatus:
        assert account.request_id is not None
        for attempt in range(1, self._poll.max_attempts + 1):
            status = await self._organizations.describe_create_account_status(
                account.request_id
            )
            if status.state != AccountCreationState.IN_PROGRESS:
                return status

            self._probe.account_pending(
                account_name=account.name,
                request_id=account.request_id,
                attempt=attempt,
            )
            if attempt < self._poll.max_attempts:
                await asyncio.sleep(self._poll.delay_for(attempt))

        raise AccountNotReadyError(
            account.name, account.request_id, self._poll.max_attempts
        )

    async def _place(
        self,
        name: str,
        account_id: str,
        organizational_unit: OrganizationalUnitRef,
    ) -> None:
        """Move an account into its OU unless it is already there."""
        parent_id = await self._organizations.find_account_parent(account_id)
        if parent_id == organizational_unit.id:
            return

        await self._organizations.move_account(
            account_id=account_id,
            source_parent_id=parent_id,
            destination_parent_id=organizational_unit.id,
        )
        self._probe.account_moved(
            account_name=name,
            account_id=account_id,
            source=parent_id,
            destination=organizational_unit.id,
        )

    @staticmethod
    def _ref_from_status(
        name: str,
        email: str,
        organizational_unit: OrganizationalUnitRef,
        status: CreateAccountStatus,
    ) -> AccountRef:
        return AccountRef(
            name=name,
            email=email,
            organizational_unit_id=organizational_unit.id,
            state=status.state,
            account_id=status.account_id,
            request_id=status.request_id,
        )
