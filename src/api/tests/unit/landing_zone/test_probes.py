"""Unit tests for landing zone domain probes.

Tests that the default probes emit structlog events with their fields and
the bound observation context.
"""

from unittest.mock import MagicMock

import structlog

from landing_zone.application.observability import (
    DefaultAccountFactoryProbe,
    DefaultLandingZoneServiceProbe,
    DefaultParameterResolverProbe,
    DefaultPermissionSetRegistryProbe,
    DefaultTeamProvisionerProbe,
)
from landing_zone.domain.observability import DefaultDeploymentProbe
from landing_zone.infrastructure.observability import DefaultAwsClientProbe
from shared_kernel.observability_context import ObservationContext


def _logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestTeamProvisionerProbe:
    """Tests for DefaultTeamProvisionerProbe."""

    def test_default_probe_creates_with_default_logger(self):
        probe = DefaultTeamProvisionerProbe()
        assert probe._logger is not None

    def test_with_context_keeps_logger(self):
        logger = _logger()
        probe = DefaultTeamProvisionerProbe(logger=logger)

        scoped = probe.with_context(ObservationContext(deployment_id="01J000"))

        assert scoped is not probe
        assert scoped._logger is logger

    def test_team_scoped_context_does_not_duplicate_team_name(self):
        """Event fields win over context fields with the same name."""
        logger = _logger()
        context = ObservationContext(deployment_id="01J000").with_team("west", "west")
        probe = DefaultTeamProvisionerProbe(logger=logger).with_context(context)

        probe.team_provisioning_started(team_name="west", members=2)

        logger.info.assert_called_once_with(
            "team_provisioning_started",
            team_name="west",
            members=2,
            deployment_id="01J000",
            account_name="west",
        )

    def test_failed_assignments_log_a_warning(self):
        logger = _logger()
        probe = DefaultTeamProvisionerProbe(logger=logger)

        probe.team_provisioned(team_name="west", account_id="222222222222", assignments=2, failed=1)

        logger.warning.assert_called_once()
        logger.info.assert_not_called()

    def test_assignment_failed_logs_error(self):
        logger = _logger()
        probe = DefaultTeamProvisionerProbe(logger=logger)

        probe.assignment_failed(account_id="222222222222", principal_id="u-1", error="conflict")

        logger.error.assert_called_once_with(
            "assignment_failed",
            account_id="222222222222",
            principal_id="u-1",
            error="conflict",
        )


class TestAccountFactoryProbe:
    def test_account_reused_with_account_context(self):
        logger = _logger()
        context = ObservationContext(deployment_id="01J000").with_team("west", "west")
        probe = DefaultAccountFactoryProbe(logger=logger).with_context(context)

        probe.account_reused(account_name="west", account_id="222222222222")

        logger.info.assert_called_once_with(
            "account_reused",
            account_name="west",
            account_id="222222222222",
            deployment_id="01J000",
            team_name="west",
        )


class TestParameterResolverProbe:
    def test_parameter_resolved_logs_info(self):
        logger = _logger()
        probe = DefaultParameterResolverProbe(logger=logger)

        probe.parameter_resolved(name="sso-id", attempts=1)

        logger.info.assert_called_once_with("parameter_resolved", name="sso-id", attempts=1)


class TestPermissionSetRegistryProbe:
    def test_reconciled_logs_changes_with_context(self):
        logger = _logger()
        probe = DefaultPermissionSetRegistryProbe(logger=logger).with_context(
            ObservationContext(deployment_id="01J000")
        )

        probe.permission_set_reconciled(
            name="Cloud-Team-AdministratorAccess",
            arn="arn:ps-1",
            attached=["arn:aws:iam::aws:policy/ReadOnlyAccess"],
            detached=[],
            settings_updated=True,
            provisioning_request_id="req-1",
        )

        logger.info.assert_called_once_with(
            "permission_set_reconciled",
            name="Cloud-Team-AdministratorAccess",
            arn="arn:ps-1",
            attached=["arn:aws:iam::aws:policy/ReadOnlyAccess"],
            detached=[],
            settings_updated=True,
            provisioning_request_id="req-1",
            deployment_id="01J000",
        )


class TestLandingZoneServiceProbe:
    def test_completed_with_failures_logs_error(self):
        logger = _logger()
        probe = DefaultLandingZoneServiceProbe(logger=logger).with_context(
            ObservationContext(deployment_id="01J000")
        )

        probe.deployment_completed(succeeded=False, failed_teams=["west"])

        logger.error.assert_called_once_with(
            "deployment_completed",
            succeeded=False,
            failed_teams=["west"],
            deployment_id="01J000",
        )

    def test_completed_logs_info(self):
        logger = _logger()
        probe = DefaultLandingZoneServiceProbe(logger=logger)

        probe.deployment_completed(succeeded=True, failed_teams=[])

        logger.info.assert_called_once()


class TestDeploymentProbe:
    def test_team_descriptors_merged_logs_warning(self):
        logger = _logger()
        probe = DefaultDeploymentProbe(logger=logger)

        probe.team_descriptors_merged(account_name="west", team_names=["west", "west-2"])

        logger.warning.assert_called_once_with(
            "team_descriptors_merged",
            account_name="west",
            team_names=["west", "west-2"],
        )


class TestAwsClientProbe:
    def test_api_call_failed_logs_error(self):
        logger = _logger()
        probe = DefaultAwsClientProbe(logger=logger)

        probe.api_call_failed(
            service="organizations",
            operation="CreateAccount",
            error_code="TooManyRequestsException",
            error="slow down",
        )

        logger.error.assert_called_once_with(
            "aws_api_call_failed",
            service="organizations",
            operation="CreateAccount",
            error_code="TooManyRequestsException",
            error="slow down",
        )
