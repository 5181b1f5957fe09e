"""Exceptions raised at the boundary with the remote services.

Adapters translate service-specific failures into these types so the
application layer can decide what halts a team and what is only reported.
None of them trigger a rollback: resources that were already created stay
in place and cleanup is an explicit operator decision.
"""

from landing_zone.domain.exceptions import ProvisioningError


class ParameterNotFoundError(ProvisioningError):
    """Raised when a named parameter has no value in the parameter store.

    Fatal to composition: ARNs such as the SSO instance ARN are built from
    resolved parameters.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Parameter {name!r} not found")


class ParameterResolutionTimeoutError(ProvisioningError):
    """Raised when a parameter is still missing after the last poll attempt."""

    def __init__(self, name: str, attempts: int):
        self.name = name
        self.attempts = attempts
        super().__init__(
            f"Parameter {name!r} still missing after {attempts} attempts"
        )


class DuplicateAccountEmailError(ProvisioningError):
    """Raised when an account email is already used in the organization."""

    def __init__(self, email: str, account_name: str | None = None):
        self.email = email
        self.account_name = account_name
        super().__init__(f"Account email {email} is already in use")


class AccountEmailMismatchError(ProvisioningError):
    """Raised when an account with the name exists under a different email.

    No second account is requested: the descriptor or the existing account
    has to be corrected first.
    """

    def __init__(self, account_name: str, email: str, existing_email: str):
        self.account_name = account_name
        self.email = email
        self.existing_email = existing_email
        super().__init__(
            f"Account {account_name} already exists with email {existing_email}, "
            f"not {email}"
        )


class AccountQuotaExceededError(ProvisioningError):
    """Raised when the organization has reached its account limit."""

    pass


class OrganizationApiUnavailableError(ProvisioningError):
    """Raised when the organization or SSO API fails or throttles.

    Also used for account creation failures without a more specific reason.
    """

    pass


class AccountNotReadyError(ProvisioningError):
    """Raised when an account is still being created after the last status poll.

    Assignments for the account are not attempted; the orchestration
    layer is expected to re-run the deployment once the account is active.
    """

    def __init__(self, account_name: str, request_id: str | None, attempts: int):
        self.account_name = account_name
        self.request_id = request_id
        self.attempts = attempts
        super().__init__(
            f"Account {account_name} not active after {attempts} status checks "
            f"(request {request_id})"
        )


class AssignmentConflictError(ProvisioningError):
    """Raised when the SSO service rejects an assignment as a duplicate."""

    pass


class PrincipalNotFoundError(ProvisioningError):
    """Raised when a principal id is unknown to the identity store."""

    def __init__(self, principal_id: str, identity_store_id: str):
        self.principal_id = principal_id
        self.identity_store_id = identity_store_id
        super().__init__(
            f"Principal {principal_id} not found in identity store {identity_store_id}"
        )
