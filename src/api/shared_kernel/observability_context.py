"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures run-scoped and domain-relevant metadata that should be included
    with all instrumentation events, so the log lines of concurrently
    provisioned teams can be told apart.

    Attributes:
        deployment_id: Unique identifier of the current deployment run.
        team_name: Team being provisioned (if applicable).
        account_name: Account being provisioned (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(deployment_id="01J...", team_name="nord-neo")
        probe = DefaultTeamProvisionerProbe().with_context(context)
    """

    deployment_id: str | None = None
    team_name: str | None = None
    account_name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.deployment_id is not None:
            result["deployment_id"] = self.deployment_id
        if self.team_name is not None:
            result["team_name"] = self.team_name
        if self.account_name is not None:
            result["account_name"] = self.account_name
        result.update(self.extra)
        return result

    def with_team(self, team_name: str, account_name: str) -> ObservationContext:
        """Create a new context scoped to one team unit."""
        return replace(self, team_name=team_name, account_name=account_name)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
