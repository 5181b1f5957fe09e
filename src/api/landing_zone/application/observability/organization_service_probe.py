"""Protocol for organization service observability.

Defines the interface for domain probes that capture organization root and
organizational unit operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OrganizationServiceProbe(Protocol):
    """Domain probe for organization service operations."""

    def organization_created(self, root_id: str) -> None:
        """Record that a new organization was created."""
        ...

    def organizational_unit_created(self, ou_id: str, name: str, parent_id: str) -> None:
        """Record that an OU was created."""
        ...

    def organizational_unit_reused(self, ou_id: str, name: str, parent_id: str) -> None:
        """Record that an existing OU was found and reused."""
        ...

    def organizational_unit_creation_failed(
        self, name: str, parent_id: str, error: str
    ) -> None:
        """Record that OU creation failed."""
        ...

    def with_context(self, context: ObservationContext) -> OrganizationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultOrganizationServiceProbe:
    """Default implementation of OrganizationServiceProbe using structlog."""

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
    ) -> DefaultOrganizationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultOrganizationServiceProbe(logger=self._logger, context=context)

    def organization_created(self, root_id: str) -> None:
        """Record that a new organization was created."""
        self._logger.info(
            "organization_created",
            root_id=root_id,
            **self._get_context_kwargs(),
        )

    def organizational_unit_created(self, ou_id: str, name: str, parent_id: str) -> None:
        """Record that an OU was created."""
        self._logger.info(
            "organizational_unit_created",
            ou_id=ou_id,
            name=name,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def organizational_unit_reused(self, ou_id: str, name: str, parent_id: str) -> None:
        """Record that an existing OU was found and reused."""
        self._logger.debug(
            "organizational_unit_reused",
            ou_id=ou_id,
            name=name,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def organizational_unit_creation_failed(
        self, name: str, parent_id: str, error: str
    ) -> None:
        """Record that OU creation failed."""
        self._logger.error(
            "organizational_unit_creation_failed",
            name=name,
            parent_id=parent_id,
            error=error,
            **self._get_context_kwargs(),
        )
