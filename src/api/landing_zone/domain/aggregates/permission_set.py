"""Permission set definition for the landing zone context."""

from __future__ import annotations

from dataclasses import dataclass

from landing_zone.domain.value_objects import SessionDuration

ADMINISTRATOR_ACCESS_POLICY_ARN = "arn:aws:iam::aws:policy/AdministratorAccess"


@dataclass(frozen=True)
class PermissionSetDefinition:
    """The single administrative permission set shared by all team accounts.

    This is version-controlled configuration: it is never derived per team,
    and every team assignment references the one instance created from it.
    """

    name: str
    session_duration: SessionDuration
    managed_policy_arns: tuple[str, ...]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name or len(self.name) > 32:
            raise ValueError("Permission set name must be between 1 and 32 characters")
        if not self.managed_policy_arns:
            raise ValueError(f"Permission set {self.name} attaches no managed policy")
        if len(set(self.managed_policy_arns)) != len(self.managed_policy_arns):
            raise ValueError(f"Permission set {self.name} lists a policy twice")

    @classmethod
    def create(
        cls,
        name: str,
        session_duration: str,
        managed_policy_arns: list[str] | tuple[str, ...],
        description: str = "",
    ) -> PermissionSetDefinition:
        """Build a definition from raw configuration values.

        Managed policies are treated as a set: duplicates are dropped and the
        remaining ARNs are sorted so the definition compares equal regardless
        of declaration order.

        Raises:
            ValueError: If the session duration or name is invalid
        """
        return cls(
            name=name,
            session_duration=SessionDuration.parse(session_duration),
            managed_policy_arns=tuple(sorted(set(managed_policy_arns))),
            description=description,
        )

    @classmethod
    def administrator_access(cls) -> PermissionSetDefinition:
        """The default team administrator permission set."""
        return cls.create(
            name="Cloud-Team-AdministratorAccess",
            session_duration="PT1H",
            managed_policy_arns=[ADMINISTRATOR_ACCESS_POLICY_ARN],
        )
