"""Organization tree aggregate for the landing zone context."""

from __future__ import annotations

from dataclasses import dataclass, field

from landing_zone.domain.exceptions import OrganizationTreeError
from landing_zone.domain.value_objects import ROOT_KEY


@dataclass(frozen=True)
class OrganizationalUnitSpec:
    """Declared organizational unit, keyed by a stable logical key.

    The key is what descriptors reference; the name is what the
    organization API sees. Keying by a stable name is what makes
    re-applying a descriptor a no-op instead of a duplicate creation.

    Attributes:
        key: Logical key used inside the descriptor (e.g. "teams")
        name: Display name of the OU (e.g. "OU - AWS Teams")
        parent_key: Key of the parent OU, or "root" for the organization root
    """

    key: str
    name: str
    parent_key: str = ROOT_KEY

    def __post_init__(self) -> None:
        if not self.key or self.key == ROOT_KEY:
            raise OrganizationTreeError(
                f"Invalid organizational unit key {self.key!r}"
            )
        if not self.name or len(self.name) > 128:
            raise OrganizationTreeError(
                "Organizational unit name must be between 1 and 128 characters"
            )


@dataclass
class OrganizationTree:
    """The declared OU hierarchy below the organization root.

    Business rules:
    - Every parent key resolves to a declared OU or the root
    - Keys are unique
    - Names are unique among siblings (the remote API keys OUs by name)
    - The hierarchy is a strict tree (no cycles)
    """

    units: list[OrganizationalUnitSpec] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._by_key: dict[str, OrganizationalUnitSpec] = {}
        for unit in self.units:
            if unit.key in self._by_key:
                raise OrganizationTreeError(
                    f"Duplicate organizational unit key: {unit.key}"
                )
            self._by_key[unit.key] = unit
        self._validate_parents()
        self._validate_sibling_names()
        self._ordered = self._parents_first()

    def _validate_parents(self) -> None:
        for unit in self.units:
            if unit.parent_key != ROOT_KEY and unit.parent_key not in self._by_key:
                raise OrganizationTreeError(
                    f"Organizational unit {unit.key!r} references unknown parent "
                    f"{unit.parent_key!r}"
                )

    def _validate_sibling_names(self) -> None:
        seen: set[tuple[str, str]] = set()
        for unit in self.units:
            sibling_key = (unit.parent_key, unit.name)
            if sibling_key in seen:
                raise OrganizationTreeError(
                    f"Two organizational units named {unit.name!r} under "
                    f"{unit.parent_key!r}"
                )
            seen.add(sibling_key)

    def _parents_first(self) -> list[OrganizationalUnitSpec]:
        """Order units so every parent precedes its children.

        Declaration order is kept among units whose parents are already
        placed, so the result is deterministic for a given descriptor.
        """
        placed: set[str] = {ROOT_KEY}
        ordered: list[OrganizationalUnitSpec] = []
        pending = list(self.units)

        while pending:
            ready = [u for u in pending if u.parent_key in placed]
            if not ready:
                cycle = ", ".join(sorted(u.key for u in pending))
                raise OrganizationTreeError(
                    f"Organizational units form a cycle: {cycle}"
                )
            for unit in ready:
                ordered.append(unit)
                placed.add(unit.key)
            pending = [u for u in pending if u.key not in placed]

        return ordered

    def __contains__(self, key: object) -> bool:
        return key == ROOT_KEY or key in self._by_key

    def get(self, key: str) -> OrganizationalUnitSpec:
        """Get a declared unit by key.

        Raises:
            KeyError: If the key is not declared (the root has no spec)
        """
        return self._by_key[key]

    def parents_first(self) -> list[OrganizationalUnitSpec]:
        """Units in creation order (parents before children)."""
        return list(self._ordered)

    def path(self, key: str) -> list[str]:
        """Names from the root down to the given unit."""
        names: list[str] = []
        current = key
        while current != ROOT_KEY:
            unit = self._by_key[current]
            names.append(unit.name)
            current = unit.parent_key
        return list(reversed(names))
