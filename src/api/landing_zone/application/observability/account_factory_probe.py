"""Protocol for account factory observability.

Defines the interface for domain probes that capture account creation
requests, status polling and placement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AccountFactoryProbe(Protocol):
    """Domain probe for account factory operations."""

    def account_creation_requested(
        self, account_name: str, email: str, request_id: str
    ) -> None:
        """Record that the organization accepted a creation request."""
        ...

    def account_reused(self, account_name: str, account_id: str) -> None:
        """Record that an existing account matched the requested one."""
        ...

    def account_active(self, account_name: str, account_id: str) -> None:
        """Record that an account finished creation."""
        ...

    def account_pending(self, account_name: str, request_id: str, attempt: int) -> None:
        """Record that an account is still being created."""
        ...

    def account_moved(
        self, account_name: str, account_id: str, source: str, destination: str
    ) -> None:
        """Record that an account was moved into its target OU."""
        ...

    def account_creation_failed(self, account_name: str, email: str, error: str) -> None:
        """Record that account creation failed."""
        ...

    def with_context(self, context: ObservationContext) -> AccountFactoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAccountFactoryProbe:
    """Default implementation of AccountFactoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAccountFactoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultAccountFactoryProbe(logger=self._logger, context=context)

    def account_creation_requested(
        self, account_name: str, email: str, request_id: str
    ) -> None:
        """Record that the organization accepted a creation request."""
        self._logger.info(
            "account_creation_requested",
            account_name=account_name,
            email=email,
            request_id=request_id,
            **self._get_context_kwargs("account_name"),
        )

    def account_reused(self, account_name: str, account_id: str) -> None:
        """Record that an existing account matched the requested one."""
        self._logger.info(
            "account_reused",
            account_name=account_name,
            account_id=account_id,
            **self._get_context_kwargs("account_name"),
        )

    def account_active(self, account_name: str, account_id: str) -> None:
        """Record that an account finished creation."""
        self._logger.info(
            "account_active",
            account_name=account_name,
            account_id=account_id,
            **self._get_context_kwargs("account_name"),
        )

    def account_pending(self, account_name: str, request_id: str, attempt: int) -> None:
        """Record that an account is still being created."""
        self._logger.debug(
            "account_pending",
            account_name=account_name,
            request_id=request_id,
            attempt=attempt,
            **self._get_context_kwargs("account_name"),
        )

    def account_moved(
        self, account_name: str, account_id: str, source: str, destination: str
    ) -> None:
        """Record that an account was moved into its target OU."""
        self._logger.info(
            "account_moved",
            account_name=account_name,
            account_id=account_id,
            source=source,
            destination=destination,
            **self._get_context_kwargs("account_name"),
        )

    def account_creation_failed(self, account_name: str, email: str, error: str) -> None:
        """Record that account creation failed."""
        self._logger.error(
            "account_creation_failed",
            account_name=account_name,
            email=email,
            error=error,
            **self._get_context_kwargs("account_name"),
        )
