"""Unit tests for the staged popup editor."""

import pytest

from rolematrix.core.errors import BadRequestError, HierarchyError
from rolematrix.core.permissions import (
    HierarchyPath,
    PermissionStore,
    PopupEditor,
    permission_id,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def editor(hrms_visible: PermissionStore) -> PopupEditor:
    """Editor for Operator's HRMS > Attendance dialog."""
    return PopupEditor.open(hrms_visible, "Operator", "HRMS", "Attendance")


class TestOpen:
    """Tests for opening a dialog."""

    def test_submodule_without_popups_rejected(self, store: PermissionStore):
        with pytest.raises(HierarchyError):
            PopupEditor(store, "Operator", "Inventory", "RM Issue")

    def test_unknown_submodule_rejected(self, store: PermissionStore):
        with pytest.raises(HierarchyError):
            PopupEditor(store, "Operator", "HRMS", "Nope")

    def test_parent_uses_canonical_names(self, store: PermissionStore):
        editor = PopupEditor(store, "Operator", "hrms", "attendance")

        assert editor.parent == HierarchyPath("HRMS", "Attendance")
        assert editor.popup_modules == (
            "Attendance Record",
            "Overtime",
            "HR View",
            "Bulk Attendance",
        )

    def test_starts_clean(self, editor: PopupEditor):
        assert editor.is_open
        assert not editor.is_dirty


class TestStagedEdits:
    """Tests for edits made inside the dialog."""

    def test_toggle_is_staged_only(self, editor: PopupEditor, hrms_visible: PermissionStore):
        assert editor.toggle("Overtime", "View") is True

        assert editor.is_granted("Overtime", "View")
        assert editor.is_dirty
        assert not hrms_visible.get_permission_state(
            "Operator", "HRMS", "Attendance", "View", popup="Overtime"
        )

    def test_toggle_twice_is_clean(self, editor: PopupEditor):
        editor.toggle("Overtime", "View")
        editor.toggle("Overtime", "View")

        assert not editor.is_dirty

    def test_hidden_popup_toggle_ignored(self, editor: PopupEditor):
        assert editor.toggle("HR View", "View") is False
        assert not editor.is_granted("HR View", "View")

    def test_popup_lookup_ignores_case(self, editor: PopupEditor):
        assert editor.child("overtime") == HierarchyPath("HRMS", "Attendance", "Overtime")

    def test_unknown_popup(self, editor: PopupEditor):
        with pytest.raises(HierarchyError):
            editor.toggle("Nope", "View")

    def test_visibility_applies_immediately(
        self, editor: PopupEditor, hrms_visible: PermissionStore
    ):
        editor.set_visibility("HR View", True)

        assert hrms_visible.get_visibility("Operator", "HRMS:Attendance:HR View")
        assert editor.toggle("HR View", "View") is True

    def test_toggle_column_covers_visible_popups(self, editor: PopupEditor):
        assert editor.toggle_column("View") is True

        assert editor.column_selected("View")
        assert editor.is_granted("Attendance Record", "View")
        assert editor.is_granted("Overtime", "View")
        assert not editor.is_granted("HR View", "View")

    def test_toggle_column_revokes_when_full(self, editor: PopupEditor):
        editor.toggle("Attendance Record", "Edit")
        editor.toggle("Overtime", "Edit")

        assert editor.toggle_column("Edit") is False
        assert not editor.is_granted("Overtime", "Edit")

    def test_column_not_selected_without_visible_popups(self, store: PermissionStore):
        editor = PopupEditor(store, "Admin", "HRMS", "Core HR")

        assert not editor.column_selected("View")
        assert editor.toggle_nested_group(["View", "Edit"]) is False


class TestSaveAndCancel:
    """Tests for closing the dialog."""

    def test_cancel_leaves_store_unchanged(
        self, editor: PopupEditor, hrms_visible: PermissionStore
    ):
        hrms_visible.set_permission("Operator", "Inventory", None, "View", True)
        permissions_before = hrms_visible.permissions_for("Operator")
        visibility_before = hrms_visible.visibility_for("Operator")
        editor = PopupEditor(hrms_visible, "Operator", "HRMS", "Attendance")

        editor.toggle("Attendance Record", "View")
        editor.toggle("Overtime", "Delete")
        editor.cancel()

        assert hrms_visible.permissions_for("Operator") == permissions_before
        assert hrms_visible.visibility_for("Operator") == visibility_before
        assert not editor.is_open

    def test_save_commits_staged_grants(
        self, editor: PopupEditor, hrms_visible: PermissionStore
    ):
        editor.toggle("Attendance Record", "View")
        editor.toggle("Overtime", "Create")

        assert editor.save() is True
        assert hrms_visible.permissions_for("Operator") == {
            permission_id("HRMS", "Attendance", "View", popup="Attendance Record"),
            permission_id("HRMS", "Attendance", "Create", popup="Overtime"),
        }

    def test_save_without_changes_is_noop(
        self, editor: PopupEditor, hrms_visible: PermissionStore
    ):
        before = hrms_visible.permissions_for("Operator")

        assert editor.save() is False
        assert hrms_visible.permissions_for("Operator") == before
        assert not editor.is_open

    def test_save_keeps_changes_made_outside_dialog(
        self, editor: PopupEditor, hrms_visible: PermissionStore
    ):
        editor.toggle("Overtime", "View")
        hrms_visible.set_permission("Operator", "Sales", None, "Edit", True)

        editor.save()

        assert hrms_visible.get_permission_state("Operator", "Sales", None, "Edit")
        assert hrms_visible.get_permission_state(
            "Operator", "HRMS", "Attendance", "View", popup="Overtime"
        )

    def test_save_revokes_unticked_grants(self, hrms_visible: PermissionStore):
        hrms_visible.set_permission(
            "Operator", "HRMS", "Attendance", "View", True, popup="Overtime"
        )
        editor = PopupEditor(hrms_visible, "Operator", "HRMS", "Attendance")

        editor.toggle("Overtime", "View")
        editor.save()

        assert hrms_visible.permissions_for("Operator") == frozenset()

    @pytest.mark.parametrize("close", ["save", "cancel"])
    def test_closed_editor_rejects_use(self, editor: PopupEditor, close: str):
        getattr(editor, close)()

        with pytest.raises(BadRequestError):
            editor.toggle("Overtime", "View")
        with pytest.raises(BadRequestError):
            editor.save()
        with pytest.raises(BadRequestError):
            editor.cancel()
