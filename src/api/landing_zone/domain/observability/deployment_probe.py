"""Observability probes for the deployment descriptor and planner.

Domain probes following the Domain Oriented Observability pattern. They
surface configuration smells that local validation tolerates, such as two
team descriptors naming the same account.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import Protocol

import structlog


class DeploymentProbe(Protocol):
    """Protocol for deployment descriptor observability probes."""

    def team_descriptors_merged(
        self,
        account_name: str,
        team_names: list[str],
    ) -> None:
        """Probe emitted when two team descriptors target the same account.

        Args:
            account_name: The shared account name
            team_names: The team descriptors that were merged
        """
        ...

    def duplicate_principals_collapsed(
        self,
        account_name: str,
        collapsed: int,
    ) -> None:
        """Probe emitted when repeated principals are collapsed for an account.

        Args:
            account_name: The account the principals were assigned on
            collapsed: How many repeated requests were dropped
        """
        ...

    def account_email_already_claimed(
        self,
        account_name: str,
        email: str,
        owner: str,
    ) -> None:
        """Probe emitted when an account is left out of the plan for its email.

        Args:
            account_name: The account that is not requested
            email: The shared email
            owner: The account that declared the email first
        """
        ...

    def plan_built(
        self,
        steps: int,
        accounts: int,
        assignments: int,
    ) -> None:
        """Probe emitted when a provisioning plan has been derived."""
        ...


class DefaultDeploymentProbe:
    """Default implementation of DeploymentProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._logger = logger or structlog.get_logger()

    def team_descriptors_merged(
        self,
        account_name: str,
        team_names: list[str],
    ) -> None:
        """Log the merge as a warning; it usually means a copy-paste error."""
        self._logger.warning(
            "team_descriptors_merged",
            account_name=account_name,
            team_names=team_names,
        )

    def duplicate_principals_collapsed(
        self,
        account_name: str,
        collapsed: int,
    ) -> None:
        self._logger.info(
            "duplicate_principals_collapsed",
            account_name=account_name,
            collapsed=collapsed,
        )

    def account_email_already_claimed(
        self,
        account_name: str,
        email: str,
        owner: str,
    ) -> None:
        self._logger.warning(
            "account_email_already_claimed",
            account_name=account_name,
            email=email,
            owner=owner,
        )

    def plan_built(
        self,
        steps: int,
        accounts: int,
        assignments: int,
    ) -> None:
        self._logger.info(
            "provisioning_plan_built",
            steps=steps,
            accounts=accounts,
            assignments=assignments,
        )
