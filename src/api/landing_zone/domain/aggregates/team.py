"""Team and account descriptors for the landing zone context."""

from __future__ import annotations

from dataclasses import dataclass, field

from landing_zone.domain.value_objects import Principal, PrincipalType


def _validate_account_fields(account_name: str, email: str) -> None:
    if not account_name or len(account_name) > 50:
        raise ValueError("Account name must be between 1 and 50 characters")
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValueError(f"Invalid account email: {email!r}")


@dataclass(frozen=True)
class TeamDescriptor:
    """Everything needed to stand up one team's isolated account.

    Supplied once when the deployment is composed and never mutated.

    Attributes:
        team_name: Logical team name
        account_name: Name of the account the team owns
        email: Root email of the account (globally unique in the organization)
        member_principal_ids: Identity-store ids granted the shared permission
            set, in declaration order (duplicates allowed here, collapsed later)
        principal_type: Whether the ids are users or groups
        organizational_unit_key: OU the account is placed in; None means the
            deployment's teams OU
    """

    team_name: str
    account_name: str
    email: str
    member_principal_ids: tuple[str, ...] = field(default_factory=tuple)
    principal_type: PrincipalType = PrincipalType.USER
    organizational_unit_key: str | None = None

    def __post_init__(self) -> None:
        if not self.team_name:
            raise ValueError("Team name must not be empty")
        _validate_account_fields(self.account_name, self.email)
        if any(not principal_id for principal_id in self.member_principal_ids):
            raise ValueError(f"Team {self.team_name} lists an empty principal id")

    @property
    def principals(self) -> list[Principal]:
        """Member principals in declaration order, duplicates included."""
        return [
            Principal(id=principal_id, type=self.principal_type)
            for principal_id in self.member_principal_ids
        ]


@dataclass(frozen=True)
class StandaloneAccount:
    """An account placed in an OU without any team access.

    Used for payer or proof-of-concept accounts that live in the
    organization but receive no permission set assignments.
    """

    account_name: str
    email: str
    organizational_unit_key: str

    def __post_init__(self) -> None:
        _validate_account_fields(self.account_name, self.email)
