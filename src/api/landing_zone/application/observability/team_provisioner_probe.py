"""Protocol for team provisioning observability.

Defines the interface for domain probes that capture the per-team workflow:
account provisioning and the fan-out of assignments to member principals.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TeamProvisionerProbe(Protocol):
    """Domain probe for team provisioning operations."""

    def team_provisioning_started(self, team_name: str, members: int) -> None:
        """Record that provisioning of a team began."""
        ...

    def assignment_created(
        self, account_id: str, principal_id: str, request_id: str
    ) -> None:
        """Record that an assignment request was accepted."""
        ...

    def assignment_already_present(self, account_id: str, principal_id: str) -> None:
        """Record that an assignment existed and no request was sent."""
        ...

    def assignment_failed(self, account_id: str, principal_id: str, error: str) -> None:
        """Record that one assignment failed; siblings continue."""
        ...

    def team_provisioned(
        self, team_name: str, account_id: str, assignments: int, failed: int
    ) -> None:
        """Record the outcome of a team whose account is active."""
        ...

    def team_provisioning_failed(self, team_name: str, error: str) -> None:
        """Record that a team's account step failed and assignments were skipped."""
        ...

    def with_context(self, context: ObservationContext) -> TeamProvisionerProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTeamProvisionerProbe:
    """Default implementation of TeamProvisionerProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self, *explicit: str) -> dict[str, Any]:
        """Get context metadata as kwargs for logging.

        Keys in explicit are supplied by the event itself and take precedence.
        """
        if self._context is None:
            return {}
        return {
            key: value
            for key, value in self._context.as_dict().items()
            if key not in explicit
        }

    def with_context(self, context: ObservationContext) -> DefaultTeamProvisionerProbe:
        """Create a new probe with observation context bound."""
        return DefaultTeamProvisionerProbe(logger=self._logger, context=context)

    def team_provisioning_started(self, team_name: str, members: int) -> None:
        """Record that provisioning of a team began."""
        self._logger.info(
            "team_provisioning_started",
            team_name=team_name,
            members=members,
            **self._get_context_kwargs("team_name"),
        )

    def assignment_created(
        self, account_id: str, principal_id: str, request_id: str
    ) -> None:
        """Record that an assignment request was accepted."""
        self._logger.info(
            "assignment_created",
            account_id=account_id,
            principal_id=principal_id,
            request_id=request_id,
            **self._get_context_kwargs(),
        )

    def assignment_already_present(self, account_id: str, principal_id: str) -> None:
        """Record that an assignment existed and no request was sent."""
        self._logger.debug(
            "assignment_already_present",
            account_id=account_id,
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def assignment_failed(self, account_id: str, principal_id: str, error: str) -> None:
        """Record that one assignment failed; siblings continue."""
        self._logger.error(
            "assignment_failed",
            account_id=account_id,
            principal_id=principal_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def team_provisioned(
        self, team_name: str, account_id: str, assignments: int, failed: int
    ) -> None:
        """Record the outcome of a team whose account is active."""
        log = self._logger.warning if failed else self._logger.info
        log(
            "team_provisioned",
            team_name=team_name,
            account_id=account_id,
            assignments=assignments,
            failed=failed,
            **self._get_context_kwargs("team_name"),
        )

    def team_provisioning_failed(self, team_name: str, error: str) -> None:
        """Record that a team's account step failed and assignments were skipped."""
        self._logger.error(
            "team_provisioning_failed",
            team_name=team_name,
            error=error,
            **self._get_context_kwargs("team_name"),
        )
