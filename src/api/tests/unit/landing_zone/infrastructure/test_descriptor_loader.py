"""Unit tests for loading deployment descriptors from files."""

import json

import pytest

from landing_zone.domain.aggregates import (
    ADMINISTRATOR_ACCESS_POLICY_ARN,
    ParameterNames,
    PermissionSetDefinition,
)
from landing_zone.domain.exceptions import DeploymentDescriptorError
from landing_zone.domain.value_objects import PrincipalType
from landing_zone.infrastructure.descriptor_loader import (
    DescriptorDefaults,
    load_descriptor,
    parse_document,
)

DESCRIPTOR_YAML = """
organizational_units:
  - key: teams
    name: OU - AWS Teams
  - key: consulting
    name: OU - Consulting
teams:
  - name: west-vader
    email: west-vader@example.com
    members: [u-1, u-2]
  - name: pre-sales
    account_name: presales
    email: pre-sales@example.com
    principal_type: GROUP
    members: [g-1]
accounts:
  - name: databricks-poc
    email: databricks-poc@example.com
    organizational_unit: consulting
"""


@pytest.fixture
def defaults() -> DescriptorDefaults:
    return DescriptorDefaults(
        permission_set=PermissionSetDefinition.administrator_access(),
        parameters=ParameterNames(),
    )


class TestLoadDescriptor:
    """Tests for reading descriptor files."""

    def test_loads_yaml(self, tmp_path, defaults):
        path = tmp_path / "landing-zone.yaml"
        path.write_text(DESCRIPTOR_YAML)

        descriptor = load_descriptor(path, defaults)

        assert [t.team_name for t in descriptor.teams] == ["west-vader", "pre-sales"]
        assert descriptor.teams[0].account_name == "west-vader"
        assert descriptor.teams[1].account_name == "presales"
        assert descriptor.teams[1].principal_type == PrincipalType.GROUP
        assert descriptor.accounts[0].organizational_unit_key == "consulting"
        assert descriptor.permission_set == defaults.permission_set
        assert descriptor.teams_ou_key == "teams"

    def test_loads_json(self, tmp_path, defaults):
        path = tmp_path / "landing-zone.json"
        path.write_text(
            json.dumps(
                {
                    "organizational_units": [{"key": "teams", "name": "OU - AWS Teams"}],
                    "teams": [{"name": "nord-neo", "email": "nord-neo@example.com"}],
                    "parameters": {"sso_instance_id": "/landing-zone/sso-id"},
                }
            )
        )

        descriptor = load_descriptor(path, defaults)

        assert descriptor.teams[0].member_principal_ids == ()
        assert descriptor.parameters.sso_instance_id == "/landing-zone/sso-id"
        assert descriptor.parameters.identity_store_id == "identity-store-id"

    def test_document_overrides_permission_set(self, tmp_path, defaults):
        path = tmp_path / "landing-zone.yaml"
        path.write_text(
            DESCRIPTOR_YAML
            + """
permission_set:
  name: Team-ReadOnly
  session_duration: PT4H
  managed_policy_arns: [arn:aws:iam::aws:policy/ReadOnlyAccess]
"""
        )

        descriptor = load_descriptor(path, defaults)

        assert descriptor.permission_set.name == "Team-ReadOnly"

    def test_permission_set_without_policies_gets_administrator_access(
        self, tmp_path, defaults
    ):
        path = tmp_path / "landing-zone.yaml"
        path.write_text(
            DESCRIPTOR_YAML
            + """
permission_set:
  name: Team-Admin
  session_duration: PT2H
"""
        )

        descriptor = load_descriptor(path, defaults)

        assert descriptor.permission_set.managed_policy_arns == (
            ADMINISTRATOR_ACCESS_POLICY_ARN,
        )

    def test_empty_policy_list_is_rejected(self, tmp_path, defaults):
        path = tmp_path / "landing-zone.yaml"
        path.write_text(
            DESCRIPTOR_YAML
            + """
permission_set:
  name: Team-Admin
  managed_policy_arns: []
"""
        )

        with pytest.raises(DeploymentDescriptorError) as exc_info:
            load_descriptor(path, defaults)

        assert exc_info.value.problems[0].startswith(
            "permission_set.managed_policy_arns:"
        )

    def test_missing_file(self, tmp_path, defaults):
        with pytest.raises(DeploymentDescriptorError) as exc_info:
            load_descriptor(tmp_path / "absent.yaml", defaults)

        assert "Cannot read" in exc_info.value.problems[0]

    def test_malformed_yaml(self, tmp_path, defaults):
        path = tmp_path / "broken.yaml"
        path.write_text("teams: [unclosed")

        with pytest.raises(DeploymentDescriptorError) as exc_info:
            load_descriptor(path, defaults)

        assert "Cannot parse" in exc_info.value.problems[0]


class TestParseDocument:
    """Tests for schema validation and problem aggregation."""

    def test_top_level_must_be_mapping(self):
        with pytest.raises(DeploymentDescriptorError):
            parse_document(["not", "a", "mapping"])

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(DeploymentDescriptorError) as exc_info:
            parse_document({"teams": [], "regions": ["eu-central-1"]})

        assert any(problem.startswith("regions") for problem in exc_info.value.problems)

    def test_schema_problems_carry_their_location(self):
        with pytest.raises(DeploymentDescriptorError) as exc_info:
            parse_document({"teams": [{"name": "west-vader"}]})

        assert exc_info.value.problems == ["teams.0.email: Field required"]

    def test_collects_every_invalid_team(self, defaults):
        document = parse_document(
            {
                "organizational_units": [{"key": "teams", "name": "OU - AWS Teams"}],
                "teams": [
                    {"name": "west-vader", "email": "not-an-email"},
                    {"name": "nord-neo", "email": "nord-neo@example"},
                    {"name": "sued-sora", "email": "sued-sora@example.com"},
                ],
            }
        )

        with pytest.raises(DeploymentDescriptorError) as exc_info:
            document.to_domain(defaults)

        assert len(exc_info.value.problems) == 2
        assert exc_info.value.problems[0].startswith("Team west-vader")
        assert exc_info.value.problems[1].startswith("Team nord-neo")
