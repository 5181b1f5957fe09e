"""Helpers for translating botocore failures."""

from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError

from landing_zone.infrastructure.observability import AwsClientProbe
from landing_zone.ports.exceptions import OrganizationApiUnavailableError


def error_code(error: ClientError) -> str:
    """The service error code of a ClientError (e.g. "ConflictException")."""
    return error.response.get("Error", {}).get("Code", "")


def error_reason(error: ClientError) -> str:
    """The optional Reason field some services add to constraint violations."""
    return str(error.response.get("Reason", ""))


def unavailable(
    service: str,
    operation: str,
    error: ClientError | BotoCoreError,
    probe: AwsClientProbe,
) -> OrganizationApiUnavailableError:
    """Record a failed call and build the generic unavailability error."""
    code = error_code(error) if isinstance(error, ClientError) else type(error).__name__
    probe.api_call_failed(
        service=service,
        operation=operation,
        error_code=code,
        error=str(error),
    )
    return OrganizationApiUnavailableError(f"{service}:{operation} failed ({code}): {error}")
