"""Observability probe for the AWS client adapters.

Captures failed AWS API calls before they are translated into the
landing zone error taxonomy, so the original service error code is kept.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class AwsClientProbe(Protocol):
    """Protocol for AWS adapter observability probes."""

    def api_call_failed(
        self,
        service: str,
        operation: str,
        error_code: str,
        error: str,
    ) -> None:
        """Probe emitted when an AWS API call fails."""
        ...

    def idempotent_conflict_absorbed(
        self,
        service: str,
        operation: str,
        error_code: str,
    ) -> None:
        """Probe emitted when a conflict means the desired state already exists."""
        ...


class DefaultAwsClientProbe:
    """Default implementation of AwsClientProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._logger = logger or structlog.get_logger()

    def api_call_failed(
        self,
        service: str,
        operation: str,
        error_code: str,
        error: str,
    ) -> None:
        self._logger.error(
            "aws_api_call_failed",
            service=service,
            operation=operation,
            error_code=error_code,
            error=error,
        )

    def idempotent_conflict_absorbed(
        self,
        service: str,
        operation: str,
        error_code: str,
    ) -> None:
        self._logger.debug(
            "aws_idempotent_conflict_absorbed",
            service=service,
            operation=operation,
            error_code=error_code,
        )
