"""Initial store configuration.

A seed file lists, per role, which nodes are visible and which actions
are granted on which nodes. Nodes are written as visibility keys:

    roles:
      Operator:
        visible: [Inventory, "Inventory:RM Issue"]
        grants:
          Inventory: [View]
          "Inventory:RM Issue": [View, Create]
"""

from pathlib import Path

import pydantic
import structlog
import yaml
from pydantic import BaseModel, Field

from rolematrix.config import Settings
from rolematrix.core.errors import HierarchyError
from rolematrix.core.permissions.hierarchy import (
    ModuleHierarchy,
    default_hierarchy,
    load_hierarchy,
)
from rolematrix.core.permissions.keys import HierarchyPath, PermissionId
from rolematrix.core.permissions.store import PermissionStore


logger = structlog.get_logger()


class RoleSeed(BaseModel):
    """Initial visibility and grants for one role."""

    visible: list[str] = Field(default_factory=list)
    grants: dict[str, list[str]] = Field(default_factory=dict)


class PermissionSeed(BaseModel):
    """Initial state for every seeded role."""

    roles: dict[str, RoleSeed] = Field(default_factory=dict)

    def permissions(self) -> dict[str, set[PermissionId]]:
        return {
            role: {
                PermissionId.build(HierarchyPath.from_visibility_key(key), action)
                for key, actions in seed.grants.items()
                for action in actions
            }
            for role, seed in self.roles.items()
        }

    def visibility(self) -> dict[str, dict[str, bool]]:
        return {
            role: dict.fromkeys(seed.visible, True) for role, seed in self.roles.items()
        }


def load_seed(path: Path) -> PermissionSeed:
    """Load a seed file.

    Raises:
        HierarchyError: If the file cannot be read or is malformed
    """
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return PermissionSeed.model_validate(data)
    except (OSError, yaml.YAMLError) as e:
        raise HierarchyError(
            f"Cannot read seed file: {e}",
            details={"path": str(path)},
        ) from e
    except pydantic.ValidationError as e:
        raise HierarchyError(
            "Invalid seed file",
            details={
                "path": str(path),
                "errors": e.errors(include_url=False, include_context=False),
            },
        ) from e


def build_store(
    settings: Settings,
    hierarchy: ModuleHierarchy | None = None,
    seed: PermissionSeed | None = None,
) -> PermissionStore:
    """Create a PermissionStore from settings.

    Explicit ``hierarchy`` and ``seed`` arguments win over the files named
    in settings. Seeded paths must exist in the hierarchy.

    Raises:
        HierarchyError: If a file is invalid or a seeded path is unknown
    """
    if hierarchy is None:
        hierarchy = (
            load_hierarchy(settings.hierarchy_file)
            if settings.hierarchy_file
            else default_hierarchy()
        )
    if seed is None:
        seed = load_seed(settings.seed_file) if settings.seed_file else PermissionSeed()

    for role_seed in seed.roles.values():
        for key in (*role_seed.visible, *role_seed.grants):
            if not hierarchy.contains(HierarchyPath.from_visibility_key(key)):
                raise HierarchyError("Seed refers to an unknown node", details={"node": key})

    store = PermissionStore(
        hierarchy,
        roles=settings.roles,
        actions=settings.actions,
        permissions=seed.permissions(),
        visibility=seed.visibility(),
    )
    logger.info(
        "permission_store_created",
        roles=len(store.roles),
        modules=len(hierarchy.modules),
        seeded_roles=sorted(seed.roles),
    )
    return store
