"""Role-based permission matrix: keys, hierarchy, store and views."""

from rolematrix.core.permissions.hierarchy import (
    ModuleHierarchy,
    ModuleNode,
    SubmoduleNode,
    default_hierarchy,
    load_hierarchy,
)
from rolematrix.core.permissions.keys import HierarchyPath, PermissionId, permission_id
from rolematrix.core.permissions.matrix import MatrixRow, MatrixView
from rolematrix.core.permissions.navigation import MenuItem, MenuSection, build_menu
from rolematrix.core.permissions.seed import PermissionSeed, build_store, load_seed
from rolematrix.core.permissions.staging import PopupEditor
from rolematrix.core.permissions.store import PermissionStore, toggle_uniform


__all__ = [
    "HierarchyPath",
    "MatrixRow",
    "MatrixView",
    "MenuItem",
    "MenuSection",
    "ModuleHierarchy",
    "ModuleNode",
    "PermissionId",
    "PermissionSeed",
    "PermissionStore",
    "PopupEditor",
    "SubmoduleNode",
    "build_menu",
    "build_store",
    "default_hierarchy",
    "load_hierarchy",
    "load_seed",
    "permission_id",
    "toggle_uniform",
]
