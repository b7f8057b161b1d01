"""Read model for the Roles & Permissions screen.

MatrixView turns store state into what the admin UI draws: one row per
module or submodule with its checkbox states, plus the column header and
"select all" summaries. It also hosts the checkbox click handler, which
ignores clicks on disabled rows instead of raising.
"""

from dataclasses import dataclass, field

import structlog

from rolematrix.core.permissions.keys import HierarchyPath
from rolematrix.core.permissions.staging import PopupEditor
from rolematrix.core.permissions.store import PermissionStore


logger = structlog.get_logger()


@dataclass(frozen=True)
class MatrixRow:
    """One row of the permission matrix.

    Attributes:
        path: Node the row represents
        label: Text shown in the first column
        level: 0 for a module, 1 for a submodule, 2 for a popup module
        visible: State of the row's "Show in menu" switch
        disabled: True when the action checkboxes cannot be clicked, i.e. the
            node or any of its ancestors is hidden (popup rows: the popup itself)
        grants: Checked state per action, in action order
        popup_modules: Children edited through the Configure dialog
    """

    path: HierarchyPath
    label: str
    level: int
    visible: bool
    disabled: bool
    grants: dict[str, bool] = field(default_factory=dict)
    popup_modules: tuple[str, ...] = ()

    @property
    def has_popup(self) -> bool:
        return bool(self.popup_modules)


class MatrixView:
    """Derives matrix rows and summaries from a PermissionStore."""

    def __init__(self, store: PermissionStore) -> None:
        self.store = store

    def _row(
        self,
        role: str,
        path: HierarchyPath,
        label: str,
        popup_modules: tuple[str, ...] = (),
    ) -> MatrixRow:
        return MatrixRow(
            path=path,
            label=label,
            level=path.depth - 1,
            visible=self.store.get_visibility(role, path),
            disabled=not self.store.is_effectively_visible(role, path),
            grants={
                action: self.store.is_granted(role, path, action)
                for action in self.store.actions
            },
            popup_modules=popup_modules,
        )

    def rows(self, role: str) -> list[MatrixRow]:
        """Module and submodule rows in display order."""
        rows: list[MatrixRow] = []
        for module in self.store.hierarchy.modules:
            module_path = HierarchyPath(module.name)
            rows.append(self._row(role, module_path, module.name))
            for sub in module.submodules:
                rows.append(
                    self._row(
                        role,
                        module_path.child(sub.name),
                        sub.name,
                        tuple(sub.popup_modules),
                    )
                )
        return rows

    def popup_rows(self, editor: PopupEditor) -> list[MatrixRow]:
        """Rows of a Configure dialog, showing the editor's staged grants."""
        rows: list[MatrixRow] = []
        for popup in editor.popup_modules:
            visible = editor.is_visible(popup)
            rows.append(
                MatrixRow(
                    path=editor.child(popup),
                    label=popup,
                    level=2,
                    visible=visible,
                    disabled=not visible,
                    grants={
                        action: editor.is_granted(popup, action)
                        for action in self.store.actions
                    },
                )
            )
        return rows

    def column_selected(self, role: str, action: str) -> bool:
        return self.store.is_column_selected(role, action)

    def all_selected(self, role: str) -> bool:
        return self.store.is_all_selected(role)

    def toggle_permission(self, role: str, path: HierarchyPath, action: str) -> bool:
        """Handle a click on one matrix checkbox.

        Clicks on a row that is not effectively visible are ignored.

        Returns:
            True if the grant was flipped, False if the click was ignored
        """
        if not self.store.is_effectively_visible(role, path):
            logger.debug(
                "permission_toggle_ignored",
                role=role,
                path=str(path),
                action=action,
            )
            return False

        self.store.grant(role, path, action, not self.store.is_granted(role, path, action))
        return True
