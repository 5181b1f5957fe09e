"""Value objects for the landing zone domain.

Value objects are immutable descriptors for the remote resources the
landing zone provisions. Identifiers are issued by the remote organization
and SSO services, so these types carry them verbatim rather than
generating their own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum

ROOT_KEY = "root"

_DURATION_PATTERN = re.compile(r"^PT(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?$")
_MIN_SESSION = timedelta(hours=1)
_MAX_SESSION = timedelta(hours=12)


class PrincipalType(StrEnum):
    """Kinds of identity-store principals an assignment can target."""

    USER = "USER"
    GROUP = "GROUP"


class AccountCreationState(StrEnum):
    """States reported by the organization API for account creation requests."""

    IN_PROGRESS = "IN_PROGRESS"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class SessionDuration:
    """ISO-8601 session duration accepted by Identity Center.

    Only the hour/minute subset is supported, bounded to 1-12 hours.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @property
    def as_timedelta(self) -> timedelta:
        """Duration as a timedelta."""
        match = _DURATION_PATTERN.match(self.value)
        assert match is not None  # validated in parse()
        return timedelta(
            hours=int(match.group("hours") or 0),
            minutes=int(match.group("minutes") or 0),
        )

    @classmethod
    def parse(cls, value: str) -> SessionDuration:
        """Create a SessionDuration from an ISO-8601 string.

        Args:
            value: Duration such as "PT1H" or "PT1H30M"

        Returns:
            SessionDuration instance

        Raises:
            ValueError: If the value is malformed or outside 1-12 hours
        """
        match = _DURATION_PATTERN.match(value or "")
        if match is None or not (match.group("hours") or match.group("minutes")):
            raise ValueError(f"Invalid ISO-8601 session duration: {value!r}")

        duration = cls(value=value)
        if not _MIN_SESSION <= duration.as_timedelta <= _MAX_SESSION:
            raise ValueError(
                f"Session duration {value} must be between PT1H and PT12H"
            )
        return duration


@dataclass(frozen=True)
class OrganizationalUnitRef:
    """Reference to an organizational unit (or the organization root)."""

    id: str
    name: str
    parent_id: str | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True)
class AccountRef:
    """Reference to an account creation request or an existing account.

    A freshly requested account only carries the request id; account_id is
    known once the organization reports SUCCEEDED.
    """

    name: str
    email: str
    organizational_unit_id: str
    state: AccountCreationState
    account_id: str | None = None
    request_id: str | None = None
    existing: bool = False

    @property
    def is_active(self) -> bool:
        return self.state == AccountCreationState.SUCCEEDED and self.account_id is not None


@dataclass(frozen=True)
class PermissionSetRef:
    """Read-only handle to the shared permission set."""

    arn: str
    name: str
    instance_arn: str


@dataclass(frozen=True)
class Principal:
    """An identity-store principal addressed by an assignment."""

    id: str
    type: PrincipalType = PrincipalType.USER

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.type.value.lower()}:{self.id}"
