"""Loading deployment descriptors from YAML or JSON documents.

The document schema is a pydantic model; converting it to the domain
DeploymentDescriptor gathers every constructor error so the operator sees
all problems at once. Values the document omits (permission set,
parameter names, teams OU) come from settings via DescriptorDefaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from landing_zone.domain.aggregates import (
    ADMINISTRATOR_ACCESS_POLICY_ARN,
    DeploymentDescriptor,
    OrganizationalUnitSpec,
    ParameterNames,
    PermissionSetDefinition,
    StandaloneAccount,
    TeamDescriptor,
    build_organization,
)
from landing_zone.domain.exceptions import (
    DeploymentDescriptorError,
    OrganizationTreeError,
)
from landing_zone.domain.value_objects import ROOT_KEY, PrincipalType


@dataclass(frozen=True)
class DescriptorDefaults:
    """Values used where a descriptor document is silent."""

    permission_set: PermissionSetDefinition
    parameters: ParameterNames
    teams_ou_key: str = "teams"


class OrganizationalUnitDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str = Field(..., min_length=1, description="Stable logical key")
    name: str = Field(..., min_length=1, max_length=128)
    parent: str = Field(default=ROOT_KEY, description="Parent OU key or 'root'")


class PermissionSetDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=32)
    session_duration: str = Field(default="PT1H")
    managed_policy_arns: list[str] = Field(
        default_factory=lambda: [ADMINISTRATOR_ACCESS_POLICY_ARN], min_length=1
    )
    description: str = Field(default="", max_length=700)


class ParametersDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sso_instance_id: str | None = None
    identity_store_id: str | None = None


class TeamDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    account_name: str | None = Field(
        default=None, description="Defaults to the team name"
    )
    email: str
    members: list[str] = Field(default_factory=list)
    principal_type: PrincipalType = PrincipalType.USER
    organizational_unit: str | None = None


class AccountDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    email: str
    organizational_unit: str


class DeploymentDescriptorDocument(BaseModel):
    """Serialized form of a deployment descriptor."""

    model_config = ConfigDict(extra="forbid")

    organizational_units: list[OrganizationalUnitDocument] = Field(default_factory=list)
    teams_ou: str | None = None
    permission_set: PermissionSetDocument | None = None
    parameters: ParametersDocument = Field(default_factory=ParametersDocument)
    teams: list[TeamDocument] = Field(default_factory=list)
    accounts: list[AccountDocument] = Field(default_factory=list)

    def to_domain(self, defaults: DescriptorDefaults) -> DeploymentDescriptor:
        """Convert to the domain aggregate.

        Raises:
            DeploymentDescriptorError: With every field-level problem found
        """
        problems: list[str] = []

        units: list[OrganizationalUnitSpec] = []
        for unit in self.organizational_units:
            try:
                units.append(
                    OrganizationalUnitSpec(key=unit.key, name=unit.name, parent_key=unit.parent)
                )
            except OrganizationTreeError as e:
                problems.append(str(e))

        permission_set = defaults.permission_set
        if self.permission_set is not None:
            try:
                permission_set = PermissionSetDefinition.create(
                    name=self.permission_set.name,
                    session_duration=self.permission_set.session_duration,
                    managed_policy_arns=self.permission_set.managed_policy_arns,
                    description=self.permission_set.description,
                )
            except ValueError as e:
                problems.append(f"Permission set: {e}")

        teams: list[TeamDescriptor] = []
        for team in self.teams:
            try:
                teams.append(
                    TeamDescriptor(
                        team_name=team.name,
                        account_name=team.account_name or team.name,
                        email=team.email,
                        member_principal_ids=tuple(team.members),
                        principal_type=team.principal_type,
                        organizational_unit_key=team.organizational_unit,
                    )
                )
            except ValueError as e:
                problems.append(f"Team {team.name}: {e}")

        accounts: list[StandaloneAccount] = []
        for account in self.accounts:
            try:
                accounts.append(
                    StandaloneAccount(
                        account_name=account.name,
                        email=account.email,
                        organizational_unit_key=account.organizational_unit,
                    )
                )
            except ValueError as e:
                problems.append(f"Account {account.name}: {e}")

        if problems:
            raise DeploymentDescriptorError(problems)

        parameters = ParameterNames(
            sso_instance_id=self.parameters.sso_instance_id
            or defaults.parameters.sso_instance_id,
            identity_store_id=self.parameters.identity_store_id
            or defaults.parameters.identity_store_id,
        )

        return DeploymentDescriptor(
            organization=build_organization(units),
            permission_set=permission_set,
            teams=teams,
            accounts=accounts,
            teams_ou_key=self.teams_ou or defaults.teams_ou_key,
            parameters=parameters,
        )


def parse_document(data: Any) -> DeploymentDescriptorDocument:
    """Validate raw decoded data against the descriptor schema.

    Raises:
        DeploymentDescriptorError: If the data does not match the schema
    """
    if not isinstance(data, dict):
        raise DeploymentDescriptorError(["Descriptor must be a mapping at the top level"])
    try:
        return DeploymentDescriptorDocument.model_validate(data)
    except ValidationError as e:
        raise DeploymentDescriptorError(
            [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
        ) from e


def load_descriptor(path: str | Path, defaults: DescriptorDefaults) -> DeploymentDescriptor:
    """Read a descriptor file (".json", or YAML otherwise).

    Raises:
        DeploymentDescriptorError: If the file cannot be parsed or is invalid
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeploymentDescriptorError([f"Cannot read {path}: {e.strerror}"]) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DeploymentDescriptorError([f"Cannot parse {path}: {e}"]) from e

    return parse_document(data).to_domain(defaults)
