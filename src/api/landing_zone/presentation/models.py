"""Pydantic models for landing zone API responses.

Requests reuse DeploymentDescriptorDocument, the same schema the CLI
loads from YAML or JSON files.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from landing_zone.application.value_objects import (
    AccountOutcome,
    AssignmentOutcome,
    DeploymentReport,
    TeamProvisioningResult,
)
from landing_zone.domain.plan import PlanStep, ProvisioningPlan, StepAction
from landing_zone.domain.value_objects import AccountRef


class PlanStepResponse(BaseModel):
    """Response model for one plan step."""

    key: str = Field(..., description="Stable logical identifier")
    action: StepAction
    properties: dict[str, Any] = Field(default_factory=dict)
    depends_on: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, step: PlanStep) -> PlanStepResponse:
        return cls(
            key=step.key,
            action=step.action,
            properties=dict(step.properties),
            depends_on=list(step.depends_on),
        )


class PlanResponse(BaseModel):
    """Response model for a dry-run provisioning plan."""

    steps: list[PlanStepResponse]
    summary: dict[StepAction, int] = Field(
        ..., description="Number of steps per action"
    )

    @classmethod
    def from_domain(cls, plan: ProvisioningPlan) -> PlanResponse:
        """Convert a ProvisioningPlan to API response.

        Args:
            plan: The dependency-ordered plan

        Returns:
            PlanResponse listing every step in order
        """
        return cls(
            steps=[PlanStepResponse.from_domain(step) for step in plan.steps],
            summary={action: plan.count(action) for action in StepAction},
        )


class AccountResponse(BaseModel):
    name: str
    email: str
    account_id: str | None = None
    organizational_unit_id: str
    state: str
    existing: bool = False

    @classmethod
    def from_domain(cls, account: AccountRef) -> AccountResponse:
        return cls(
            name=account.name,
            email=account.email,
            account_id=account.account_id,
            organizational_unit_id=account.organizational_unit_id,
            state=account.state.value,
            existing=account.existing,
        )


class AssignmentResponse(BaseModel):
    principal_id: str
    principal_type: str
    status: str
    request_id: str | None = None
    error: str | None = None

    @classmethod
    def from_domain(cls, outcome: AssignmentOutcome) -> AssignmentResponse:
        return cls(
            principal_id=outcome.principal.id,
            principal_type=outcome.principal.type.value,
            status=outcome.status.value,
            request_id=outcome.request_id,
            error=outcome.error,
        )


class TeamResultResponse(BaseModel):
    """Response model for one team's account and assignments."""

    team_name: str
    account_name: str
    succeeded: bool
    account: AccountResponse | None = None
    assignments: list[AssignmentResponse] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_domain(cls, result: TeamProvisioningResult) -> TeamResultResponse:
        return cls(
            team_name=result.team_name,
            account_name=result.account_name,
            succeeded=result.succeeded,
            account=AccountResponse.from_domain(result.account) if result.account else None,
            assignments=[AssignmentResponse.from_domain(a) for a in result.assignments],
            error=result.error,
        )


class AccountResultResponse(BaseModel):
    account_name: str
    succeeded: bool
    account: AccountResponse | None = None
    error: str | None = None

    @classmethod
    def from_domain(cls, outcome: AccountOutcome) -> AccountResultResponse:
        return cls(
            account_name=outcome.account_name,
            succeeded=outcome.succeeded,
            account=AccountResponse.from_domain(outcome.account) if outcome.account else None,
            error=outcome.error,
        )


class DeploymentResponse(BaseModel):
    """Response model for a completed deployment run."""

    deployment_id: str = Field(..., description="Run ID (ULID format)")
    succeeded: bool
    organizational_units: dict[str, str] = Field(
        ..., description="OU ids by descriptor key"
    )
    permission_set_arn: str | None = None
    teams: list[TeamResultResponse] = Field(default_factory=list)
    accounts: list[AccountResultResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: DeploymentReport) -> DeploymentResponse:
        """Convert a DeploymentReport to API response.

        Args:
            report: Outcome of the deployment run

        Returns:
            DeploymentResponse with per-team and per-account outcomes
        """
        return cls(
            deployment_id=report.deployment_id,
            succeeded=report.succeeded,
            organizational_units={
                key: unit.id for key, unit in report.organizational_units.items()
            },
            permission_set_arn=report.permission_set.arn if report.permission_set else None,
            teams=[TeamResultResponse.from_domain(t) for t in report.teams],
            accounts=[AccountResultResponse.from_domain(a) for a in report.accounts],
        )
