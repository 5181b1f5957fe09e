"""Provisioning plan: the dependency-ordered request graph of a deployment.

The planner turns a validated DeploymentDescriptor into the exact set of
requests the remote services will receive, in an order where every step
comes after the steps it references. It performs no remote calls, so the
same plan serves dry runs and as the contract the orchestrator follows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from landing_zone.domain.assignments import AssignmentSet
from landing_zone.domain.observability import DefaultDeploymentProbe
from landing_zone.domain.value_objects import ROOT_KEY

if TYPE_CHECKING:
    from landing_zone.domain.aggregates import DeploymentDescriptor
    from landing_zone.domain.observability import DeploymentProbe


class StepAction(StrEnum):
    """Kinds of requests a plan can contain."""

    RESOLVE_PARAMETER = "resolve_parameter"
    ENSURE_ORGANIZATION = "ensure_organization"
    CREATE_ORGANIZATIONAL_UNIT = "create_organizational_unit"
    CREATE_PERMISSION_SET = "create_permission_set"
    CREATE_ACCOUNT = "create_account"
    CREATE_ACCOUNT_ASSIGNMENT = "create_account_assignment"


ORGANIZATION_STEP = "organization"


def parameter_step_key(name: str) -> str:
    return f"parameter:{name}"


def ou_step_key(ou_key: str) -> str:
    return ORGANIZATION_STEP if ou_key == ROOT_KEY else f"ou:{ou_key}"


def account_step_key(account_name: str) -> str:
    return f"account:{account_name}"


def permission_set_step_key(name: str) -> str:
    return f"permission-set:{name}"


def assignment_step_key(account_name: str, principal_id: str) -> str:
    return f"assignment:{account_name}:{principal_id}"


@dataclass(frozen=True)
class PlanStep:
    """One request in the provisioning graph.

    Attributes:
        key: Stable logical identifier of the resource
        action: What request the step issues
        properties: Request parameters (logical references, not remote ids)
        depends_on: Keys of steps that must complete first
    """

    key: str
    action: StepAction
    properties: dict[str, Any] = field(default_factory=dict)
    depends_on: tuple[str, ...] = ()


@dataclass
class ProvisioningPlan:
    """Ordered, deduplicated request graph for one deployment."""

    steps: list[PlanStep] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._validate_order()

    def _validate_order(self) -> None:
        seen: set[str] = set()
        for step in self.steps:
            if step.key in seen:
                raise ValueError(f"Plan contains step {step.key} twice")
            missing = [dep for dep in step.depends_on if dep not in seen]
            if missing:
                raise ValueError(
                    f"Step {step.key} depends on steps not planned before it: "
                    f"{', '.join(missing)}"
                )
            seen.add(step.key)

    def steps_of(self, action: StepAction) -> list[PlanStep]:
        return [step for step in self.steps if step.action == action]

    def get(self, key: str) -> PlanStep:
        for step in self.steps:
            if step.key == key:
                return step
        raise KeyError(key)

    def count(self, action: StepAction) -> int:
        return len(self.steps_of(action))

    def __len__(self) -> int:
        return len(self.steps)


class DeploymentPlanner:
    """Derives the provisioning plan from a deployment descriptor.

    Order of emission: parameters, organization, OUs (parents first), the
    single permission set, accounts, then assignments grouped per account.
    Team units for distinct accounts are independent: their only shared
    dependency is the permission set step. An account whose email an
    earlier account already declared gets no steps.
    """

    def __init__(self, probe: DeploymentProbe | None = None) -> None:
        self._probe = probe or DefaultDeploymentProbe()

    def build(self, descriptor: DeploymentDescriptor) -> ProvisioningPlan:
        """Validate the descriptor and emit its plan.

        Raises:
            DeploymentDescriptorError: If local validation fails
        """
        descriptor.validate()

        steps: list[PlanStep] = []
        parameters = descriptor.parameters
        sso_step = parameter_step_key(parameters.sso_instance_id)
        identity_store_step = parameter_step_key(parameters.identity_store_id)

        for name in (parameters.sso_instance_id, parameters.identity_store_id):
            steps.append(
                PlanStep(
                    key=parameter_step_key(name),
                    action=StepAction.RESOLVE_PARAMETER,
                    properties={"name": name},
                )
            )

        steps.append(PlanStep(key=ORGANIZATION_STEP, action=StepAction.ENSURE_ORGANIZATION))

        for unit in descriptor.organization.parents_first():
            steps.append(
                PlanStep(
                    key=ou_step_key(unit.key),
                    action=StepAction.CREATE_ORGANIZATIONAL_UNIT,
                    properties={"name": unit.name, "parent": unit.parent_key},
                    depends_on=(ou_step_key(unit.parent_key),),
                )
            )

        claims = descriptor.duplicate_email_claims()
        for claim in claims.values():
            self._probe.account_email_already_claimed(
                account_name=claim.account_name,
                email=claim.email,
                owner=claim.owner,
            )

        permission_set = descriptor.permission_set
        permission_set_step = permission_set_step_key(permission_set.name)
        team_units = [
            team for team in descriptor.team_units() if team.account_name not in claims
        ]
        if team_units:
            steps.append(
                PlanStep(
                    key=permission_set_step,
                    action=StepAction.CREATE_PERMISSION_SET,
                    properties={
                        "name": permission_set.name,
                        "session_duration": str(permission_set.session_duration),
                        "managed_policy_arns": list(permission_set.managed_policy_arns),
                    },
                    depends_on=(sso_step,),
                )
            )

        for team in team_units:
            steps.append(
                self._account_step(
                    team.account_name, team.email, descriptor.team_ou_key(team)
                )
            )
        for account in descriptor.accounts:
            if account.account_name in claims:
                continue
            steps.append(
                self._account_step(
                    account.account_name,
                    account.email,
                    account.organizational_unit_key,
                )
            )

        assignments = AssignmentSet(permission_set_name=permission_set.name)
        for team in team_units:
            collapsed = assignments.add_all(team.account_name, team.principals)
            if collapsed:
                self._probe.duplicate_principals_collapsed(
                    account_name=team.account_name,
                    collapsed=collapsed,
                )

        for assignment in assignments:
            steps.append(
                PlanStep(
                    key=assignment_step_key(
                        assignment.account_name, assignment.principal.id
                    ),
                    action=StepAction.CREATE_ACCOUNT_ASSIGNMENT,
                    properties={
                        "account": assignment.account_name,
                        "principal_id": assignment.principal.id,
                        "principal_type": assignment.principal.type.value,
                        "permission_set": assignment.permission_set_name,
                    },
                    depends_on=(
                        account_step_key(assignment.account_name),
                        permission_set_step,
                        identity_store_step,
                    ),
                )
            )

        plan = ProvisioningPlan(steps=steps)
        self._probe.plan_built(
            steps=len(plan),
            accounts=plan.count(StepAction.CREATE_ACCOUNT),
            assignments=len(assignments),
        )
        return plan

    @staticmethod
    def _account_step(account_name: str, email: str, ou_key: str) -> PlanStep:
        return PlanStep(
            key=account_step_key(account_name),
            action=StepAction.CREATE_ACCOUNT,
            properties={
                "name": account_name,
                "email": email,
                "organizational_unit": ou_key,
            },
            depends_on=(ou_step_key(ou_key),),
        )
