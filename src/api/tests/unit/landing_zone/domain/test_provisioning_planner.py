"""Unit tests for DeploymentPlanner."""

from unittest.mock import create_autospec

import pytest

from landing_zone.domain.aggregates import OrganizationalUnitSpec, StandaloneAccount
from landing_zone.domain.exceptions import DeploymentDescriptorError
from landing_zone.domain.observability import DeploymentProbe
from landing_zone.domain.plan import (
    DeploymentPlanner,
    PlanStep,
    ProvisioningPlan,
    StepAction,
)


@pytest.fixture
def mock_probe():
    return create_autospec(DeploymentProbe, instance=True)


@pytest.fixture
def planner(mock_probe) -> DeploymentPlanner:
    return DeploymentPlanner(probe=mock_probe)


class TestDeploymentPlanner:
    """Tests for plan derivation."""

    def test_two_teams_with_overlapping_members(
        self, planner, make_descriptor, make_team
    ):
        """Team A [P1, P2] and team B [P2, P3] share one permission set."""
        descriptor = make_descriptor(
            [make_team("a", ["P1", "P2"]), make_team("b", ["P2", "P3"])]
        )

        plan = planner.build(descriptor)

        assert plan.count(StepAction.CREATE_ACCOUNT) == 2
        assert plan.count(StepAction.CREATE_PERMISSION_SET) == 1
        assert {
            (s.properties["account"], s.properties["principal_id"])
            for s in plan.steps_of(StepAction.CREATE_ACCOUNT_ASSIGNMENT)
        } == {("a", "P1"), ("a", "P2"), ("b", "P2"), ("b", "P3")}

    def test_duplicate_principal_yields_one_step(
        self, planner, mock_probe, make_descriptor, make_team
    ):
        descriptor = make_descriptor([make_team("a", ["P1", "P1", "P2"])])

        plan = planner.build(descriptor)

        assert plan.count(StepAction.CREATE_ACCOUNT_ASSIGNMENT) == 2
        mock_probe.duplicate_principals_collapsed.assert_called_once_with(
            account_name="a", collapsed=1
        )

    def test_empty_member_list_plans_account_only(
        self, planner, make_descriptor, make_team
    ):
        plan = planner.build(make_descriptor([make_team("a", [])]))

        assert plan.count(StepAction.CREATE_ACCOUNT) == 1
        assert plan.count(StepAction.CREATE_ACCOUNT_ASSIGNMENT) == 0

    def test_merged_descriptors_plan_one_account(
        self, planner, make_descriptor, make_team
    ):
        descriptor = make_descriptor(
            [
                make_team("a", ["P1", "P2"], account_name="shared", email="s@example.com"),
                make_team("b", ["P2", "P3"], account_name="shared", email="s@example.com"),
            ]
        )

        plan = planner.build(descriptor)

        assert plan.count(StepAction.CREATE_ACCOUNT) == 1
        assert plan.count(StepAction.CREATE_ACCOUNT_ASSIGNMENT) == 3

    def test_steps_are_dependency_ordered(self, planner, make_descriptor, make_team):
        descriptor = make_descriptor(
            [make_team("a", ["P1"], organizational_unit_key="data")],
            units=[
                OrganizationalUnitSpec(key="data", name="Data", parent_key="teams"),
                OrganizationalUnitSpec(key="teams", name="OU - AWS Teams"),
            ],
        )

        plan = planner.build(descriptor)
        keys = [s.key for s in plan.steps]

        assert keys[:3] == ["parameter:sso-id", "parameter:identity-store-id", "organization"]
        assert keys.index("ou:teams") < keys.index("ou:data") < keys.index("account:a")
        assignment = plan.get("assignment:a:P1")
        assert assignment.depends_on == (
            "account:a",
            "permission-set:Cloud-Team-AdministratorAccess",
            "parameter:identity-store-id",
        )
        assert plan.get("account:a").depends_on == ("ou:data",)

    def test_permission_set_depends_on_sso_parameter(
        self, planner, make_descriptor, make_team
    ):
        plan = planner.build(make_descriptor([make_team("a", ["P1"])]))

        step = plan.get("permission-set:Cloud-Team-AdministratorAccess")
        assert step.depends_on == ("parameter:sso-id",)
        assert step.properties["session_duration"] == "PT1H"

    def test_standalone_accounts_only(self, planner, make_descriptor):
        descriptor = make_descriptor(
            [],
            units=[OrganizationalUnitSpec(key="consulting", name="PexonConsultingOU")],
            accounts=[
                StandaloneAccount("payer", "payer@example.com", "consulting"),
                StandaloneAccount("poc", "poc@example.com", "consulting"),
            ],
        )

        plan = planner.build(descriptor)

        assert plan.count(StepAction.CREATE_PERMISSION_SET) == 0
        assert plan.count(StepAction.CREATE_ACCOUNT) == 2
        assert plan.get("account:payer").depends_on == ("ou:consulting",)

    def test_account_under_root_depends_on_organization(self, planner, make_descriptor):
        descriptor = make_descriptor(
            [], accounts=[StandaloneAccount("payer", "payer@example.com", "root")]
        )

        plan = planner.build(descriptor)

        assert plan.get("account:payer").depends_on == ("organization",)

    def test_invalid_descriptor_produces_no_plan(
        self, planner, mock_probe, make_descriptor, make_team
    ):
        descriptor = make_descriptor(
            [make_team("a", ["P1"], organizational_unit_key="missing")]
        )

        with pytest.raises(DeploymentDescriptorError):
            planner.build(descriptor)

        mock_probe.plan_built.assert_not_called()

    def test_account_with_claimed_email_gets_no_steps(
        self, planner, mock_probe, make_descriptor, make_team
    ):
        descriptor = make_descriptor(
            [
                make_team("a", ["P1"], email="x@example.com"),
                make_team("b", ["P2"], email="x@example.com"),
            ]
        )

        plan = planner.build(descriptor)

        assert [s.properties["name"] for s in plan.steps_of(StepAction.CREATE_ACCOUNT)] == [
            "a"
        ]
        assert plan.count(StepAction.CREATE_ACCOUNT_ASSIGNMENT) == 1
        mock_probe.account_email_already_claimed.assert_called_once_with(
            account_name="b", email="x@example.com", owner="a"
        )

    def test_reports_plan_size(self, planner, mock_probe, make_descriptor, make_team):
        planner.build(make_descriptor([make_team("a", ["P1", "P2"])]))

        mock_probe.plan_built.assert_called_once_with(steps=8, accounts=1, assignments=2)


class TestProvisioningPlan:
    def test_rejects_forward_references(self):
        with pytest.raises(ValueError, match="depends on steps not planned"):
            ProvisioningPlan(
                steps=[
                    PlanStep(key="b", action=StepAction.CREATE_ACCOUNT, depends_on=("a",)),
                    PlanStep(key="a", action=StepAction.CREATE_ORGANIZATIONAL_UNIT),
                ]
            )

    def test_rejects_duplicate_keys(self):
        with pytest.raises(ValueError, match="twice"):
            ProvisioningPlan(
                steps=[
                    PlanStep(key="a", action=StepAction.ENSURE_ORGANIZATION),
                    PlanStep(key="a", action=StepAction.ENSURE_ORGANIZATION),
                ]
            )

    def test_get_unknown_step_raises(self):
        with pytest.raises(KeyError):
            ProvisioningPlan().get("missing")
