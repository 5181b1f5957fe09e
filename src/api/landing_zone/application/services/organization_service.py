"""Organization service for the landing zone context.

Ensures the organization root and the declared organizational units exist.
"""

from __future__ import annotations

import asyncio

from landing_zone.application.observability import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from landing_zone.domain.aggregates import OrganizationTree
from landing_zone.domain.exceptions import ProvisioningError
from landing_zone.domain.value_objects import ROOT_KEY, OrganizationalUnitRef
from landing_zone.ports.clients import OrganizationsClient
from landing_zone.ports.exceptions import OrganizationApiUnavailableError


class OrganizationService:
    """Application service for the organization hierarchy.

    OUs are identified by (parent, name): before creating one the service
    lists the parent's children and reuses a unit with the same name, so
    re-running a deployment against a provisioned organization is a no-op.
    Within one service instance each OU is looked up at most once.

    The organization itself is only ever created, never deleted.
    """

    def __init__(
        self,
        organizations: OrganizationsClient,
        probe: OrganizationServiceProbe | None = None,
    ):
        """Initialize OrganizationService.

        Args:
            organizations: Organization API client
            probe: Optional domain probe for observability
        """
        self._organizations = organizations
        self._probe = probe or DefaultOrganizationServiceProbe()
        self._root: OrganizationalUnitRef | None = None
        self._units: dict[tuple[str, str], OrganizationalUnitRef] = {}
        self._lock = asyncio.Lock()

    async def ensure_root(self) -> OrganizationalUnitRef:
        """Return the organization root, creating the organization if needed.

        Raises:
            OrganizationApiUnavailableError: If no root exists after creation
        """
        async with self._lock:
            if self._root is not None:
                return self._root

            root_id = await self._organizations.describe_root_id()
            if root_id is None:
                await self._organizations.create_organization()
                root_id = await self._organizations.describe_root_id()
                if root_id is None:
                    raise OrganizationApiUnavailableError(
                        "Organization was created but reports no root"
                    )
                self._probe.organization_created(root_id=root_id)

            self._root = OrganizationalUnitRef(id=root_id, name="Root")
            return self._root

    async def create_ou(
        self, name: str, parent: OrganizationalUnitRef
    ) -> OrganizationalUnitRef:
        """Create an OU below a parent, or return the existing one.

        Args:
            name: OU name
            parent: Parent OU or the organization root

        Returns:
            Reference to the OU

        Raises:
            OrganizationApiUnavailableError: If the organization API fails
        """
        key = (parent.id, name)
        async with self._lock:
            if key in self._units:
                return self._units[key]

            for unit in await self._organizations.list_organizational_units(parent.id):
                if unit.name == name:
                    self._probe.organizational_unit_reused(
                        ou_id=unit.id, name=name, parent_id=parent.id
                    )
                    self._units[key] = unit
                    return unit

            try:
                unit = await self._organizations.create_organizational_unit(
                    parent_id=parent.id, name=name
                )
            except ProvisioningError as e:
                self._probe.organizational_unit_creation_failed(
                    name=name, parent_id=parent.id, error=str(e)
                )
                raise

            self._probe.organizational_unit_created(
                ou_id=unit.id, name=name, parent_id=parent.id
            )
            self._units[key] = unit
            return unit

    async def ensure_tree(
        self, tree: OrganizationTree
    ) -> dict[str, OrganizationalUnitRef]:
        """Ensure every declared OU exists, parents before children.

        Args:
            tree: The validated OU hierarchy

        Returns:
            References keyed by descriptor key, including "root"
        """
        refs: dict[str, OrganizationalUnitRef] = {ROOT_KEY: await self.ensure_root()}
        for unit in tree.parents_first():
            refs[unit.key] = await self.create_ou(unit.name, refs[unit.parent_key])
        return refs
