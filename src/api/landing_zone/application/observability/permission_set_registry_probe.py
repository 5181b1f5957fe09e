"""Protocol for permission set registry observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PermissionSetRegistryProbe(Protocol):
    """Domain probe for the shared permission set."""

    def permission_set_created(
        self, name: str, arn: str, managed_policy_arns: list[str]
    ) -> None:
        """Record that the permission set was created."""
        ...

    def permission_set_reused(self, name: str, arn: str) -> None:
        """Record that an existing permission set with the name was found."""
        ...

    def permission_set_reconciled(
        self,
        name: str,
        arn: str,
        attached: list[str],
        detached: list[str],
        settings_updated: bool,
        provisioning_request_id: str | None,
    ) -> None:
        """Record that an existing permission set was brought back to its definition."""
        ...

    def permission_set_creation_failed(self, name: str, error: str) -> None:
        """Record that the permission set could not be created."""
        ...

    def with_context(self, context: ObservationContext) -> PermissionSetRegistryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPermissionSetRegistryProbe:
    """Default implementation of PermissionSetRegistryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultPermissionSetRegistryProbe:
        return DefaultPermissionSetRegistryProbe(logger=self._logger, context=context)

    def permission_set_created(
        self, name: str, arn: str, managed_policy_arns: list[str]
    ) -> None:
        self._logger.info(
            "permission_set_created",
            name=name,
            arn=arn,
            managed_policy_arns=managed_policy_arns,
            **self._get_context_kwargs(),
        )

    def permission_set_reused(self, name: str, arn: str) -> None:
        self._logger.info(
            "permission_set_reused",
            name=name,
            arn=arn,
            **self._get_context_kwargs(),
        )

    def permission_set_reconciled(
        self,
        name: str,
        arn: str,
        attached: list[str],
        detached: list[str],
        settings_updated: bool,
        provisioning_request_id: str | None,
    ) -> None:
        self._logger.info(
            "permission_set_reconciled",
            name=name,
            arn=arn,
            attached=attached,
            detached=detached,
            settings_updated=settings_updated,
            provisioning_request_id=provisioning_request_id,
            **self._get_context_kwargs(),
        )

    def permission_set_creation_failed(self, name: str, error: str) -> None:
        self._logger.error(
            "permission_set_creation_failed",
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )
