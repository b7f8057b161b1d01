"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Path, Request

from rolematrix.core.errors import NotFoundError
from rolematrix.core.permissions import PermissionStore


def get_permission_store(request: Request) -> PermissionStore:
    """Return the store owned by the running application."""
    return request.app.state.permission_store


# Type alias for permission store dependency
Store = Annotated[PermissionStore, Depends(get_permission_store)]


def get_known_role(store: Store, role: str = Path(..., description="Role name")) -> str:
    """Resolve the ``{role}`` path parameter.

    Raises:
        NotFoundError: If the role is not one of the store's roles
    """
    if role not in store.roles:
        raise NotFoundError("Role not found", resource="role", resource_id=role)
    return role


KnownRole = Annotated[str, Depends(get_known_role)]


def get_known_action(
    store: Store, action: str = Path(..., description="Action name")
) -> str:
    """Resolve the ``{action}`` path parameter.

    Raises:
        NotFoundError: If the action is not one of the store's actions
    """
    return require_action(store, action)


def require_action(store: PermissionStore, action: str) -> str:
    """Match ``action`` against the store's actions, ignoring case.

    Raises:
        NotFoundError: If there is no such action
    """
    for known in store.actions:
        if known.lower() == action.strip().lower():
            return known
    raise NotFoundError("Action not found", resource="action", resource_id=action)


KnownAction = Annotated[str, Depends(get_known_action)]
