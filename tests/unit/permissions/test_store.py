"""Unit tests for the permission store.

These tests verify the PermissionStore logic including:
- Grant round-trips and visibility defaults
- Independence of visibility and grants
- All-or-nothing column and global toggles
"""

import pytest

from rolematrix.core.permissions import (
    HierarchyPath,
    ModuleHierarchy,
    PermissionStore,
    permission_id,
    toggle_uniform,
)


pytestmark = pytest.mark.unit

HRMS = HierarchyPath("HRMS")
ATTENDANCE = HierarchyPath("HRMS", "Attendance")
RECORD = HierarchyPath("HRMS", "Attendance", "Attendance Record")
OVERTIME = HierarchyPath("HRMS", "Attendance", "Overtime")
HR_VIEW = HierarchyPath("HRMS", "Attendance", "HR View")
INVENTORY = HierarchyPath("Inventory")


class TestPermissions:
    """Tests for single grants."""

    def test_operator_inventory_view(self, store: PermissionStore):
        """Granting View on Inventory does not grant Edit."""
        store.set_permission("Operator", "Inventory", None, "View", True)

        assert store.get_permission_state("Operator", "Inventory", None, "View")
        assert not store.get_permission_state("Operator", "Inventory", None, "Edit")

    def test_set_then_revoke(self, store: PermissionStore):
        store.set_permission("Admin", "HRMS", "Attendance", "Edit", True)
        store.set_permission("Admin", "HRMS", "Attendance", "Edit", False)

        assert not store.get_permission_state("Admin", "HRMS", "Attendance", "Edit")
        assert store.permissions_for("Admin") == frozenset()

    def test_set_is_idempotent(self, store: PermissionStore):
        store.set_permission("Admin", "HRMS", None, "View", True)
        store.set_permission("Admin", "HRMS", None, "View", True)

        assert store.permissions_for("Admin") == {permission_id("HRMS", None, "View")}

    def test_popup_level_grant(self, store: PermissionStore):
        store.set_permission(
            "Admin", "HRMS", "Attendance", "Delete", True, popup="Overtime"
        )

        assert store.get_permission_state(
            "Admin", "HRMS", "Attendance", "Delete", popup="Overtime"
        )
        assert not store.get_permission_state("Admin", "HRMS", "Attendance", "Delete")

    def test_lookup_ignores_case(self, store: PermissionStore):
        store.set_permission("Admin", "Inventory", "RM Issue", "View", True)

        assert store.get_permission_state("Admin", "inventory", "rm  issue", "VIEW")

    def test_unknown_role_starts_empty(self, store: PermissionStore):
        assert not store.get_permission_state("Auditor", "Inventory", None, "View")

        store.set_permission("Auditor", "Inventory", None, "View", True)

        assert store.get_permission_state("Auditor", "Inventory", None, "View")

    def test_roles_do_not_share_grants(self, store: PermissionStore):
        store.set_permission("Admin", "Inventory", None, "View", True)

        assert not store.get_permission_state("Operator", "Inventory", None, "View")

    def test_permissions_for_is_a_snapshot(self, store: PermissionStore):
        snapshot = store.permissions_for("Admin")
        store.set_permission("Admin", "Inventory", None, "View", True)

        assert snapshot == frozenset()

    def test_replace_permissions(self, store: PermissionStore):
        store.set_permission("Admin", "Inventory", None, "View", True)
        store.replace_permissions("Admin", [permission_id("Sales", None, "Edit")])

        assert store.permissions_for("Admin") == {permission_id("Sales", None, "Edit")}

    def test_initial_permissions_accept_strings(self, hierarchy: ModuleHierarchy):
        store = PermissionStore(
            hierarchy,
            permissions={"Admin": ["inventory.view", permission_id("HRMS", None, "Edit")]},
        )

        assert store.is_granted("Admin", INVENTORY, "View")
        assert store.is_granted("Admin", HRMS, "Edit")


class TestVisibility:
    """Tests for navigation visibility flags."""

    def test_default_is_hidden(self, store: PermissionStore):
        assert store.get_visibility("Admin", "HRMS") is False
        assert store.get_visibility("Admin", ATTENDANCE) is False

    def test_set_and_get(self, store: PermissionStore):
        store.set_visibility("Admin", "HRMS:Attendance", True)

        assert store.get_visibility("Admin", ATTENDANCE)

    def test_keys_ignore_case(self, store: PermissionStore):
        store.set_visibility("Admin", "hrms", True)

        assert store.get_visibility("Admin", HRMS)
        assert store.visibility_for("Admin") == {"hrms": True}

    def test_does_not_cascade(self, store: PermissionStore):
        store.set_visibility("Admin", HRMS, True)

        assert not store.get_visibility("Admin", ATTENDANCE)

    def test_hide_and_unhide_preserves_grants(self, store: PermissionStore):
        store.set_visibility("Manager", ATTENDANCE, True)
        store.set_permission("Manager", "HRMS", "Attendance", "Edit", True)

        store.set_visibility("Manager", ATTENDANCE, False)
        assert store.get_permission_state("Manager", "HRMS", "Attendance", "Edit")

        store.set_visibility("Manager", ATTENDANCE, True)
        assert store.get_permission_state("Manager", "HRMS", "Attendance", "Edit")

    def test_hidden_node_keeps_stored_grant(self, store: PermissionStore):
        """Manager may hold a grant on Attendance while it is hidden."""
        store.set_visibility("Manager", HRMS, True)
        store.set_permission("Manager", "HRMS", "Attendance", "View", True)

        assert store.get_permission_state("Manager", "HRMS", "Attendance", "View")
        assert not store.get_visibility("Manager", ATTENDANCE)
        assert not store.is_effectively_visible("Manager", ATTENDANCE)

    def test_effective_visibility_needs_ancestors(self, store: PermissionStore):
        store.set_visibility("Admin", ATTENDANCE, True)
        assert not store.is_effectively_visible("Admin", ATTENDANCE)

        store.set_visibility("Admin", HRMS, True)
        assert store.is_effectively_visible("Admin", ATTENDANCE)

    def test_visible_paths(self, hrms_visible: PermissionStore):
        assert hrms_visible.visible_paths("Operator") == [
            HRMS,
            ATTENDANCE,
            RECORD,
            OVERTIME,
        ]


class TestToggleUniform:
    """Tests for the all-or-nothing rule."""

    def test_partial_coverage_grants_all(self):
        a = permission_id("A", None, "View")
        b = permission_id("B", None, "View")
        granted = {a}

        assert toggle_uniform(granted, [a, b]) is True
        assert granted == {a, b}

    def test_full_coverage_revokes_all(self):
        a = permission_id("A", None, "View")
        b = permission_id("B", None, "View")
        other = permission_id("C", None, "View")
        granted = {a, b, other}

        assert toggle_uniform(granted, [a, b]) is False
        assert granted == {other}

    def test_empty_targets_is_noop(self):
        granted = {permission_id("A", None, "View")}

        assert toggle_uniform(granted, []) is False
        assert granted == {permission_id("A", None, "View")}


class TestToggleColumn:
    """Tests for column toggles."""

    def test_grants_every_visible_node(self, hrms_visible: PermissionStore):
        assert hrms_visible.toggle_column("Operator", "View") is True

        for path in (HRMS, ATTENDANCE, RECORD, OVERTIME):
            assert hrms_visible.is_granted("Operator", path, "View")
        assert not hrms_visible.is_granted("Operator", HR_VIEW, "View")
        assert not hrms_visible.is_granted("Operator", HRMS, "Edit")
        assert hrms_visible.is_column_selected("Operator", "View")

    def test_twice_restores_previous_set(self, hrms_visible: PermissionStore):
        hrms_visible.set_permission("Operator", "Inventory", None, "View", True)
        before = hrms_visible.permissions_for("Operator")

        hrms_visible.toggle_column("Operator", "View")
        hrms_visible.toggle_column("Operator", "View")

        assert hrms_visible.permissions_for("Operator") == before

    def test_partial_coverage_grants_rather_than_flips(
        self, hrms_visible: PermissionStore
    ):
        hrms_visible.grant("Operator", HRMS, "View", True)

        assert hrms_visible.toggle_column("Operator", "View") is True
        assert hrms_visible.is_granted("Operator", HRMS, "View")
        assert hrms_visible.is_granted("Operator", OVERTIME, "View")

    def test_hidden_grants_untouched(self, hrms_visible: PermissionStore):
        hrms_visible.grant("Operator", INVENTORY, "View", True)
        hrms_visible.grant("Operator", HR_VIEW, "View", True)

        hrms_visible.toggle_column("Operator", "View")
        hrms_visible.toggle_column("Operator", "View")

        assert hrms_visible.is_granted("Operator", INVENTORY, "View")
        assert hrms_visible.is_granted("Operator", HR_VIEW, "View")

    def test_nothing_visible_is_noop(self, store: PermissionStore):
        assert store.toggle_column("Admin", "View") is False
        assert store.permissions_for("Admin") == frozenset()
        assert not store.is_column_selected("Admin", "View")

    def test_children_of_hidden_parent_out_of_scope(self, store: PermissionStore):
        store.set_visibility("Admin", ATTENDANCE, True)

        assert store.toggle_column("Admin", "View") is False
        assert not store.is_granted("Admin", ATTENDANCE, "View")


class TestToggleAll:
    """Tests for the select-all toggle."""

    def test_grants_every_action_on_visible_nodes(self, hrms_visible: PermissionStore):
        assert hrms_visible.toggle_all("Operator") is True

        assert len(hrms_visible.permissions_for("Operator")) == 4 * len(
            hrms_visible.actions
        )
        assert hrms_visible.is_all_selected("Operator")

    def test_only_touches_nodes_visible_at_call_time(
        self, hrms_visible: PermissionStore
    ):
        hrms_visible.toggle_all("Operator")
        hrms_visible.set_visibility("Operator", INVENTORY, True)

        assert not hrms_visible.is_granted("Operator", INVENTORY, "View")
        assert not hrms_visible.is_all_selected("Operator")

    def test_second_toggle_revokes(self, hrms_visible: PermissionStore):
        hrms_visible.toggle_all("Operator")

        assert hrms_visible.toggle_all("Operator") is False
        assert hrms_visible.permissions_for("Operator") == frozenset()


class TestToggleNestedGroup:
    """Tests for toggles scoped to one submodule's popup modules."""

    def test_works_on_pending_copy(self, hrms_visible: PermissionStore):
        pending = set(hrms_visible.permissions_for("Operator"))

        result = hrms_visible.toggle_nested_group(
            "Operator", ATTENDANCE, ["View", "Edit"], pending
        )

        assert result is True
        assert pending == {
            permission_id("HRMS", "Attendance", action, popup=popup)
            for popup in ("Attendance Record", "Overtime")
            for action in ("View", "Edit")
        }
        assert hrms_visible.permissions_for("Operator") == frozenset()

    def test_no_visible_popups_is_noop(self, store: PermissionStore):
        pending: set = set()

        assert store.toggle_nested_group("Admin", ATTENDANCE, ["View"], pending) is False
        assert pending == set()
