"""Unit tests for assignment deduplication."""

from landing_zone.domain.assignments import AssignmentSet, unique_principals
from landing_zone.domain.value_objects import Principal


def principals(*ids: str) -> list[Principal]:
    return [Principal(id=i) for i in ids]


class TestAssignmentSet:
    """Tests for the (account, principal) ordered set."""

    def test_duplicate_principal_is_assigned_once(self):
        assignments = AssignmentSet(permission_set_name="admin")

        collapsed = assignments.add_all("west", principals("u-1", "u-2", "u-1"))

        assert collapsed == 1
        assert [p.id for p in assignments.principals_for("west")] == ["u-1", "u-2"]

    def test_accounts_are_disjoint_with_overlapping_members(self):
        """Overlapping members across accounts yield one assignment per account."""
        assignments = AssignmentSet(permission_set_name="admin")
        assignments.add_all("a", principals("p1", "p2"))
        assignments.add_all("b", principals("p2", "p3"))

        assert {a.key for a in assignments} == {
            ("a", "p1"),
            ("a", "p2"),
            ("b", "p2"),
            ("b", "p3"),
        }
        assert [a.principal.id for a in assignments.for_account("a")] == ["p1", "p2"]
        assert [a.principal.id for a in assignments.for_account("b")] == ["p2", "p3"]

    def test_preserves_first_appearance_order(self):
        assignments = AssignmentSet(permission_set_name="admin")
        assignments.add("b", Principal(id="p2"))
        assignments.add("a", Principal(id="p1"))
        assignments.add("b", Principal(id="p2"))

        assert [a.key for a in assignments] == [("b", "p2"), ("a", "p1")]
        assert assignments.accounts() == ["b", "a"]

    def test_membership_and_length(self):
        assignments = AssignmentSet(permission_set_name="admin")

        assert assignments.add("a", Principal(id="p1")) is True
        assert assignments.add("a", Principal(id="p1")) is False
        assert ("a", "p1") in assignments
        assert len(assignments) == 1

    def test_assignments_carry_permission_set_name(self):
        assignments = AssignmentSet(permission_set_name="admin")
        assignments.add("a", Principal(id="p1"))

        assert next(iter(assignments)).permission_set_name == "admin"


class TestUniquePrincipals:
    def test_collapses_repeats_in_order(self):
        result = unique_principals(principals("u-3", "u-1", "u-3", "u-2", "u-1"))

        assert [p.id for p in result] == ["u-3", "u-1", "u-2"]

    def test_empty_input(self):
        assert unique_principals([]) == []
