"""Staged editing of popup-level permissions.

The Configure dialog of a submodule edits the grants of its popup modules
on a private copy of the role's permission set. Nothing reaches the store
until save(); cancel() throws the copy away.
"""

from collections.abc import Sequence
from typing import Self

import structlog

from rolematrix.core.errors import BadRequestError, HierarchyError
from rolematrix.core.permissions.keys import HierarchyPath, PermissionId
from rolematrix.core.permissions.store import PermissionStore
from rolematrix.core.utils.text import normalize_segment


logger = structlog.get_logger()


class PopupEditor:
    """Pending-permission buffer for one submodule's popup modules.

    Popup visibility switches are applied to the store immediately; only
    permission grants are staged.

    Attributes:
        role: Role being edited
        parent: Path of the submodule that owns the popup modules
        popup_modules: Names of the popup modules, in display order
    """

    def __init__(
        self,
        store: PermissionStore,
        role: str,
        module: str,
        submodule: str,
    ) -> None:
        node = store.hierarchy.get_submodule(module, submodule)
        if not node.popup_modules:
            raise HierarchyError(
                "Submodule has no popup modules to configure",
                details={"module": module, "submodule": submodule},
            )

        self.store = store
        self.role = role
        self.parent = HierarchyPath(store.hierarchy.get_module(module).name, node.name)
        self.popup_modules: tuple[str, ...] = tuple(node.popup_modules)
        self._snapshot = store.permissions_for(role)
        self._pending: set[PermissionId] = set(self._snapshot)
        self._closed = False

        logger.debug("popup_opened", role=role, parent=str(self.parent))

    @classmethod
    def open(
        cls, store: PermissionStore, role: str, module: str, submodule: str
    ) -> Self:
        """Open the Configure dialog of ``module`` > ``submodule`` for ``role``.

        Raises:
            HierarchyError: If the submodule does not exist or has no popup modules
        """
        return cls(store, role, module, submodule)

    @property
    def is_open(self) -> bool:
        return not self._closed

    @property
    def is_dirty(self) -> bool:
        """True when the buffer differs from the state at open time."""
        return self._pending != self._snapshot

    def _ensure_open(self) -> None:
        if self._closed:
            raise BadRequestError(
                "Popup editor is closed",
                error_code="popup_closed",
                details={"parent": str(self.parent)},
            )

    def child(self, popup: str) -> HierarchyPath:
        """Path of one of this submodule's popup modules.

        Raises:
            HierarchyError: If ``popup`` is not a child of this submodule
        """
        key = normalize_segment(popup)
        for name in self.popup_modules:
            if normalize_segment(name) == key:
                return self.parent.child(name)
        raise HierarchyError(
            "Unknown popup module",
            details={"parent": str(self.parent), "popup": popup},
        )

    def is_visible(self, popup: str) -> bool:
        return self.store.get_visibility(self.role, self.child(popup))

    def set_visibility(self, popup: str, visible: bool) -> None:
        """Show or hide a popup module. Applied to the store at once."""
        self._ensure_open()
        self.store.set_visibility(self.role, self.child(popup), visible)

    def is_granted(self, popup: str, action: str) -> bool:
        """Staged state of one checkbox."""
        return PermissionId.build(self.child(popup), action) in self._pending

    def toggle(self, popup: str, action: str) -> bool:
        """Flip one staged checkbox.

        A hidden popup module's checkbox is disabled, so the click is
        ignored.

        Returns:
            True if the buffer changed
        """
        self._ensure_open()
        if not self.is_visible(popup):
            logger.debug(
                "popup_toggle_ignored",
                role=self.role,
                parent=str(self.parent),
                popup=popup,
            )
            return False

        pid = PermissionId.build(self.child(popup), action)
        if pid in self._pending:
            self._pending.remove(pid)
        else:
            self._pending.add(pid)
        return True

    def column_selected(self, action: str) -> bool:
        """True when some popup module is visible and all visible ones hold ``action``."""
        visible = [popup for popup in self.popup_modules if self.is_visible(popup)]
        return bool(visible) and all(self.is_granted(popup, action) for popup in visible)

    def toggle_nested_group(self, actions: Sequence[str]) -> bool:
        """All-or-nothing toggle of ``actions`` over the visible popup modules."""
        self._ensure_open()
        return self.store.toggle_nested_group(
            self.role, self.parent, actions, self._pending
        )

    def toggle_column(self, action: str) -> bool:
        return self.toggle_nested_group([action])

    def save(self) -> bool:
        """Commit staged changes to the store and close the editor.

        Only the difference from the open-time snapshot is applied, on
        top of the store's current set, in a single replacement.

        Returns:
            True if changes were committed, False if nothing was staged
        """
        self._ensure_open()
        self._closed = True

        if not self.is_dirty:
            logger.debug("popup_saved_unchanged", role=self.role, parent=str(self.parent))
            return False

        added = self._pending - self._snapshot
        removed = self._snapshot - self._pending
        current = set(self.store.permissions_for(self.role))
        self.store.replace_permissions(self.role, (current - removed) | added)

        logger.info(
            "popup_saved",
            role=self.role,
            parent=str(self.parent),
            added=len(added),
            removed=len(removed),
        )
        return True

    def cancel(self) -> None:
        """Discard staged changes and close the editor."""
        self._ensure_open()
        self._closed = True
        self._pending = set(self._snapshot)
        logger.debug("popup_cancelled", role=self.role, parent=str(self.parent))
