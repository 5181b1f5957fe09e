"""Account assignment derivation and deduplication.

The SSO service rejects a second request for an assignment that already
exists instead of treating it as an upsert, so every (account, principal)
pair has to be collapsed to a single request before anything is sent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from landing_zone.domain.value_objects import Principal


@dataclass(frozen=True)
class Assignment:
    """Binding of one principal to the shared permission set on one account.

    Accounts are addressed by their logical name because the remote account
    id is not known until account creation completes.
    """

    account_name: str
    principal: Principal
    permission_set_name: str

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the assignment within one permission set."""
        return (self.account_name, self.principal.id)


@dataclass
class AssignmentSet:
    """Ordered set of assignments, unique per (account, principal).

    Insertion order is preserved so plans are reproducible: the first
    appearance of a pair fixes its position, later repeats are dropped.
    """

    permission_set_name: str
    _assignments: dict[tuple[str, str], Assignment] = field(
        default_factory=dict, repr=False
    )

    def add(self, account_name: str, principal: Principal) -> bool:
        """Add an assignment unless the pair is already present.

        Returns:
            True if the assignment was new, False if it was collapsed
        """
        assignment = Assignment(
            account_name=account_name,
            principal=principal,
            permission_set_name=self.permission_set_name,
        )
        if assignment.key in self._assignments:
            return False
        self._assignments[assignment.key] = assignment
        return True

    def add_all(self, account_name: str, principals: Iterable[Principal]) -> int:
        """Add every principal for one account.

        Returns:
            Number of duplicates that were collapsed
        """
        return sum(0 if self.add(account_name, p) else 1 for p in principals)

    def for_account(self, account_name: str) -> list[Assignment]:
        """Assignments of one account in insertion order."""
        return [a for a in self._assignments.values() if a.account_name == account_name]

    def principals_for(self, account_name: str) -> list[Principal]:
        return [a.principal for a in self.for_account(account_name)]

    def accounts(self) -> list[str]:
        """Accounts with at least one assignment, in first-seen order."""
        return list(dict.fromkeys(a.account_name for a in self._assignments.values()))

    def __iter__(self) -> Iterator[Assignment]:
        return iter(self._assignments.values())

    def __len__(self) -> int:
        return len(self._assignments)

    def __contains__(self, key: object) -> bool:
        return key in self._assignments


def unique_principals(principals: Iterable[Principal]) -> list[Principal]:
    """Collapse repeated principal ids, keeping first-appearance order."""
    seen: dict[str, Principal] = {}
    for principal in principals:
        seen.setdefault(principal.id, principal)
    return list(seen.values())
