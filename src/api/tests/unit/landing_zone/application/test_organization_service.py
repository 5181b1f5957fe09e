"""Unit tests for OrganizationService."""

from unittest.mock import create_autospec

import pytest

from landing_zone.application.observability import OrganizationServiceProbe
from landing_zone.application.services import OrganizationService
from landing_zone.domain.aggregates import OrganizationalUnitSpec, OrganizationTree
from landing_zone.domain.value_objects import OrganizationalUnitRef
from landing_zone.ports.exceptions import OrganizationApiUnavailableError


@pytest.fixture
def mock_probe():
    return create_autospec(OrganizationServiceProbe, instance=True)


@pytest.fixture
def service(organizations, mock_probe) -> OrganizationService:
    return OrganizationService(organizations, probe=mock_probe)


class TestEnsureRoot:
    @pytest.mark.asyncio
    async def test_uses_existing_organization(self, service, organizations, mock_probe):
        root = await service.ensure_root()

        assert root.id == "r-root"
        assert root.is_root
        assert organizations.count("create_organization") == 0
        mock_probe.organization_created.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_organization_when_missing(
        self, service, organizations, mock_probe
    ):
        organizations.root_id = None

        root = await service.ensure_root()

        assert root.id == "r-created"
        assert organizations.count("create_organization") == 1
        mock_probe.organization_created.assert_called_once_with(root_id="r-created")

    @pytest.mark.asyncio
    async def test_root_is_looked_up_once(self, service, organizations):
        await service.ensure_root()
        await service.ensure_root()

        assert organizations.count("describe_root_id") == 1

    @pytest.mark.asyncio
    async def test_raises_when_root_never_appears(self, organizations):
        organizations.root_id = None

        async def create_without_root() -> None:
            organizations.calls.append("create_organization")

        organizations.create_organization = create_without_root
        service = OrganizationService(organizations)

        with pytest.raises(OrganizationApiUnavailableError):
            await service.ensure_root()


class TestCreateOu:
    """Tests for idempotent OU creation keyed by (parent, name)."""

    @pytest.mark.asyncio
    async def test_creates_missing_unit(self, service, organizations, mock_probe):
        root = await service.ensure_root()

        unit = await service.create_ou("OU - AWS Teams", root)

        assert unit.parent_id == "r-root"
        assert organizations.count("create_organizational_unit") == 1
        mock_probe.organizational_unit_created.assert_called_once_with(
            ou_id=unit.id, name="OU - AWS Teams", parent_id="r-root"
        )

    @pytest.mark.asyncio
    async def test_reuses_existing_unit_by_name(self, service, organizations, mock_probe):
        existing = OrganizationalUnitRef(id="ou-existing", name="Teams", parent_id="r-root")
        organizations.units["r-root"] = [existing]
        root = await service.ensure_root()

        unit = await service.create_ou("Teams", root)

        assert unit == existing
        assert organizations.count("create_organizational_unit") == 0
        mock_probe.organizational_unit_reused.assert_called_once()

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_memo(self, service, organizations):
        root = await service.ensure_root()

        first = await service.create_ou("Teams", root)
        second = await service.create_ou("Teams", root)

        assert first == second
        assert organizations.count("list_organizational_units") == 1

    @pytest.mark.asyncio
    async def test_reports_creation_failure(self, organizations, mock_probe):
        async def failing_create(parent_id: str, name: str):
            raise OrganizationApiUnavailableError("throttled")

        organizations.create_organizational_unit = failing_create
        service = OrganizationService(organizations, probe=mock_probe)
        root = await service.ensure_root()

        with pytest.raises(OrganizationApiUnavailableError):
            await service.create_ou("Teams", root)

        mock_probe.organizational_unit_creation_failed.assert_called_once_with(
            name="Teams", parent_id="r-root", error="throttled"
        )


class TestEnsureTree:
    @pytest.mark.asyncio
    async def test_creates_nested_units_under_their_parents(self, service, organizations):
        tree = OrganizationTree(
            units=[
                OrganizationalUnitSpec(key="data", name="Data", parent_key="teams"),
                OrganizationalUnitSpec(key="teams", name="OU - AWS Teams"),
            ]
        )

        refs = await service.ensure_tree(tree)

        assert set(refs) == {"root", "teams", "data"}
        assert refs["data"].parent_id == refs["teams"].id
        assert refs["teams"].parent_id == refs["root"].id

    @pytest.mark.asyncio
    async def test_rerun_against_provisioned_organization_creates_nothing(
        self, organizations
    ):
        tree = OrganizationTree(units=[OrganizationalUnitSpec(key="teams", name="Teams")])
        await OrganizationService(organizations).ensure_tree(tree)

        await OrganizationService(organizations).ensure_tree(tree)

        assert organizations.count("create_organizational_unit") == 1
