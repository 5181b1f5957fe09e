"""Protocol for landing zone deployment observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class LandingZoneServiceProbe(Protocol):
    """Domain probe for whole-deployment runs."""

    def deployment_started(self, teams: int, accounts: int, steps: int) -> None:
        """Record that a deployment run began."""
        ...

    def deployment_completed(self, succeeded: bool, failed_teams: list[str]) -> None:
        """Record the outcome of a deployment run."""
        ...

    def deployment_aborted(self, error: str) -> None:
        """Record that a run stopped before any team was provisioned."""
        ...

    def standalone_account_failed(self, account_name: str, error: str) -> None:
        """Record that a standalone account could not be provisioned."""
        ...

    def account_email_already_claimed(
        self, account_name: str, email: str, owner: str
    ) -> None:
        """Record that an account was not requested because another owns its email."""
        ...

    def with_context(self, context: ObservationContext) -> LandingZoneServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultLandingZoneServiceProbe:
    """Default implementation of LandingZoneServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self, *explicit: str) -> dict[str, Any]:
        if self._context is None:
            return {}
        return {
            key: value
            for key, value in self._context.as_dict().items()
            if key not in explicit
        }

    def with_context(
        self, context: ObservationContext
    ) -> DefaultLandingZoneServiceProbe:
        return DefaultLandingZoneServiceProbe(logger=self._logger, context=context)

    def deployment_started(self, teams: int, accounts: int, steps: int) -> None:
        self._logger.info(
            "deployment_started",
            teams=teams,
            accounts=accounts,
            steps=steps,
            **self._get_context_kwargs(),
        )

    def deployment_completed(self, succeeded: bool, failed_teams: list[str]) -> None:
        log = self._logger.info if succeeded else self._logger.error
        log(
            "deployment_completed",
            succeeded=succeeded,
            failed_teams=failed_teams,
            **self._get_context_kwargs(),
        )

    def deployment_aborted(self, error: str) -> None:
        self._logger.error(
            "deployment_aborted",
            error=error,
            **self._get_context_kwargs(),
        )

    def standalone_account_failed(self, account_name: str, error: str) -> None:
        self._logger.error(
            "standalone_account_failed",
            account_name=account_name,
            error=error,
            **self._get_context_kwargs("account_name"),
        )

    def account_email_already_claimed(
        self, account_name: str, email: str, owner: str
    ) -> None:
        self._logger.error(
            "account_email_already_claimed",
            account_name=account_name,
            email=email,
            owner=owner,
            **self._get_context_kwargs("account_name"),
        )
