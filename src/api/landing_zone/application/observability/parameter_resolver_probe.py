"""Protocol for parameter resolver observability.

Defines the interface for domain probes that capture parameter lookups
made while a deployment is composed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ParameterResolverProbe(Protocol):
    """Domain probe for parameter resolution."""

    def parameter_resolved(self, name: str, attempts: int) -> None:
        """Record that a parameter was fetched from the store."""
        ...

    def parameter_missing(self, name: str, attempt: int, retry_in: float) -> None:
        """Record that a parameter was absent and will be polled again."""
        ...

    def parameter_resolution_failed(self, name: str, error: str) -> None:
        """Record that a parameter could not be resolved."""
        ...

    def with_context(self, context: ObservationContext) -> ParameterResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultParameterResolverProbe:
    """Default implementation of ParameterResolverProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultParameterResolverProbe:
        """Create a new probe with observation context bound."""
        return DefaultParameterResolverProbe(logger=self._logger, context=context)

    def parameter_resolved(self, name: str, attempts: int) -> None:
        """Record that a parameter was fetched from the store."""
        self._logger.info(
            "parameter_resolved",
            name=name,
            attempts=attempts,
            **self._get_context_kwargs(),
        )

    def parameter_missing(self, name: str, attempt: int, retry_in: float) -> None:
        """Record that a parameter was absent and will be polled again."""
        self._logger.warning(
            "parameter_missing",
            name=name,
            attempt=attempt,
            retry_in=retry_in,
            **self._get_context_kwargs(),
        )

    def parameter_resolution_failed(self, name: str, error: str) -> None:
        """Record that a parameter could not be resolved."""
        self._logger.error(
            "parameter_resolution_failed",
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )
