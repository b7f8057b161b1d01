"""In-memory permission store.

This module provides the single source of truth for which permissions a
role holds and which hierarchy nodes a role can see in navigation.
Visibility and grants are stored independently: hiding a node never
clears its grants, it only takes the node out of bulk-toggle scope.
"""

from collections.abc import Iterable, Mapping, Sequence

import structlog

from rolematrix.core.constants import DEFAULT_ACTIONS, DEFAULT_ROLES
from rolematrix.core.permissions.hierarchy import ModuleHierarchy
from rolematrix.core.permissions.keys import HierarchyPath, PermissionId


logger = structlog.get_logger()

PathLike = HierarchyPath | str


def _as_path(path: PathLike) -> HierarchyPath:
    if isinstance(path, HierarchyPath):
        return path
    return HierarchyPath.from_visibility_key(path)


def _visibility_key(path: PathLike) -> str:
    """Case- and whitespace-insensitive key for the visibility map."""
    return _as_path(path).normalized.visibility_key


def toggle_uniform(granted: set[PermissionId], targets: Sequence[PermissionId]) -> bool:
    """Apply an all-or-nothing toggle to ``granted`` in place.

    If every target is already granted, all of them are revoked;
    otherwise all of them are granted. An empty target list is a no-op.

    Args:
        granted: Permission set to mutate
        targets: Permission ids in scope of the toggle

    Returns:
        True if the targets ended up granted, False if revoked or no-op
    """
    if not targets:
        return False

    if all(target in granted for target in targets):
        granted.difference_update(targets)
        return False

    granted.update(targets)
    return True


class PermissionStore:
    """Role -> permission and role -> visibility state.

    A store is built with its roles, actions and hierarchy injected, so
    independent instances never share state.

    Attributes:
        hierarchy: The static module tree
        roles: Known role names, in display order
        actions: Action verbs applied at every hierarchy level
    """

    def __init__(
        self,
        hierarchy: ModuleHierarchy,
        roles: Iterable[str] = DEFAULT_ROLES,
        actions: Iterable[str] = DEFAULT_ACTIONS,
        permissions: Mapping[str, Iterable[PermissionId | str]] | None = None,
        visibility: Mapping[str, Mapping[str, bool]] | None = None,
    ) -> None:
        self.hierarchy = hierarchy
        self.roles: tuple[str, ...] = tuple(roles)
        self.actions: tuple[str, ...] = tuple(actions)
        self._permissions: dict[str, set[PermissionId]] = {}
        self._visibility: dict[str, dict[str, bool]] = {}

        for role, ids in (permissions or {}).items():
            self._permissions[role] = {
                pid if isinstance(pid, PermissionId) else PermissionId.parse(pid)
                for pid in ids
            }
        for role, flags in (visibility or {}).items():
            self._visibility[role] = {
                _visibility_key(key): bool(value) for key, value in flags.items()
            }

    # ------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------

    def is_granted(self, role: str, path: HierarchyPath, action: str) -> bool:
        """Check whether ``role`` holds ``action`` on the node at ``path``."""
        return PermissionId.build(path, action) in self._permissions.get(role, ())

    def grant(self, role: str, path: HierarchyPath, action: str, granted: bool) -> None:
        """Add or remove one grant. Idempotent."""
        pid = PermissionId.build(path, action)
        current = self._permissions.setdefault(role, set())
        if granted:
            current.add(pid)
        else:
            current.discard(pid)
        logger.debug(
            "permission_granted" if granted else "permission_revoked",
            role=role,
            permission_id=str(pid),
        )

    def get_permission_state(
        self,
        role: str,
        module: str,
        submodule: str | None,
        action: str,
        popup: str | None = None,
    ) -> bool:
        """True iff the derived permission id is in the role's granted set.

        Example:
            store.get_permission_state("Operator", "Inventory", None, "View")
        """
        return self.is_granted(role, HierarchyPath(module, submodule, popup), action)

    def set_permission(
        self,
        role: str,
        module: str,
        submodule: str | None,
        action: str,
        granted: bool,
        popup: str | None = None,
    ) -> None:
        """Grant or revoke an action on a module, submodule or popup module.

        A role with no prior entries starts from an empty set. The grant
        is stored whether or not the node is visible.
        """
        self.grant(role, HierarchyPath(module, submodule, popup), action, granted)

    def permissions_for(self, role: str) -> frozenset[PermissionId]:
        """Snapshot of the role's granted permission ids."""
        return frozenset(self._permissions.get(role, ()))

    def replace_permissions(self, role: str, ids: Iterable[PermissionId]) -> None:
        """Replace the role's whole permission set in one step."""
        self._permissions[role] = set(ids)
        logger.info(
            "permissions_replaced",
            role=role,
            count=len(self._permissions[role]),
        )

    # ------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------

    def get_visibility(self, role: str, path: PathLike) -> bool:
        """Stored "shown in navigation" flag, False when never set.

        Args:
            role: Role name
            path: HierarchyPath or visibility key such as "HRMS:Attendance"
        """
        return self._visibility.get(role, {}).get(_visibility_key(path), False)

    def set_visibility(self, role: str, path: PathLike, visible: bool) -> None:
        """Upsert a visibility flag.

        Does not cascade to children and does not touch grants.
        """
        key = _visibility_key(path)
        self._visibility.setdefault(role, {})[key] = visible
        logger.debug("visibility_changed", role=role, key=key, visible=visible)

    def visibility_for(self, role: str) -> dict[str, bool]:
        """Copy of the role's visibility map, keyed by normalized visibility key."""
        return dict(self._visibility.get(role, {}))

    def is_effectively_visible(self, role: str, path: PathLike) -> bool:
        """True when the node and every ancestor are visible."""
        return all(
            self.get_visibility(role, node) for node in _as_path(path).lineage
        )

    def visible_paths(self, role: str) -> list[HierarchyPath]:
        """Effectively visible nodes of the hierarchy, in display order.

        Children of a hidden node are skipped even if their own flag is on.
        """
        paths: list[HierarchyPath] = []
        for module in self.hierarchy.modules:
            module_path = HierarchyPath(module.name)
            if not self.get_visibility(role, module_path):
                continue
            paths.append(module_path)

            for sub in module.submodules:
                sub_path = module_path.child(sub.name)
                if not self.get_visibility(role, sub_path):
                    continue
                paths.append(sub_path)

                for popup in sub.popup_modules:
                    popup_path = sub_path.child(popup)
                    if self.get_visibility(role, popup_path):
                        paths.append(popup_path)
        return paths

    # ------------------------------------------------------------
    # Bulk toggles
    # ------------------------------------------------------------

    def _column_targets(self, role: str, action: str) -> list[PermissionId]:
        return [PermissionId.build(path, action) for path in self.visible_paths(role)]

    def _all_targets(self, role: str) -> list[PermissionId]:
        return [
            PermissionId.build(path, action)
            for path in self.visible_paths(role)
            for action in self.actions
        ]

    def is_column_selected(self, role: str, action: str) -> bool:
        """True when at least one node is visible and all hold ``action``."""
        targets = self._column_targets(role, action)
        granted = self._permissions.get(role, set())
        return bool(targets) and all(target in granted for target in targets)

    def is_all_selected(self, role: str) -> bool:
        """True when at least one node is visible and holds every action."""
        targets = self._all_targets(role)
        granted = self._permissions.get(role, set())
        return bool(targets) and all(target in granted for target in targets)

    def toggle_column(self, role: str, action: str) -> bool:
        """All-or-nothing toggle of one action across every visible node.

        Returns:
            True if the action was granted, False if revoked or nothing visible
        """
        targets = self._column_targets(role, action)
        result = toggle_uniform(self._permissions.setdefault(role, set()), targets)
        logger.info(
            "column_toggled",
            role=role,
            action=action,
            granted=result,
            nodes=len(targets),
        )
        return result

    def toggle_all(self, role: str) -> bool:
        """All-or-nothing toggle of every action across every visible node.

        Returns:
            True if everything in scope was granted, False if revoked
        """
        targets = self._all_targets(role)
        result = toggle_uniform(self._permissions.setdefault(role, set()), targets)
        logger.info("all_toggled", role=role, granted=result, grants=len(targets))
        return result

    def toggle_nested_group(
        self,
        role: str,
        parent_path: HierarchyPath,
        actions: Sequence[str],
        pending: set[PermissionId],
    ) -> bool:
        """All-or-nothing toggle over one submodule's visible popup children.

        Works on ``pending``, a staged copy of the role's permissions; the
        store itself is not modified. Only popup children whose own flag
        is visible are in scope.

        Args:
            role: Role whose visibility decides the scope
            parent_path: Submodule owning the popup modules
            actions: Actions to toggle together
            pending: Staged permission set, mutated in place

        Returns:
            True if the group was granted, False if revoked or nothing visible
        """
        sub = self.hierarchy.get_submodule(parent_path.module, parent_path.submodule or "")
        targets = [
            PermissionId.build(parent_path.child(popup), action)
            for popup in sub.popup_modules
            if self.get_visibility(role, parent_path.child(popup))
            for action in actions
        ]
        return toggle_uniform(pending, targets)
