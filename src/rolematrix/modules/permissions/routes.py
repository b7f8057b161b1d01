"""Permission matrix API routes.

These endpoints are the contract between the permission store and the
Roles & Permissions screen: reading the matrix, clicking checkboxes and
switches, column and global toggles, and the staged Configure dialog.
"""

from uuid import UUID

from fastapi import status

from rolematrix.api.dependencies import KnownAction, KnownRole, Store, require_action
from rolematrix.core.permissions import (
    MatrixView,
    ModuleHierarchy,
    PopupEditor,
    build_menu,
)
from rolematrix.modules.permissions import router
from rolematrix.modules.permissions.schemas import (
    GrantListResponse,
    MatrixResponse,
    MatrixRowResponse,
    MenuItemResponse,
    MenuSectionResponse,
    PermissionStateResponse,
    PermissionToggle,
    PermissionUpdate,
    PopupOpen,
    PopupSaveResponse,
    PopupStateResponse,
    PopupToggle,
    PopupVisibilityUpdate,
    RolesResponse,
    ToggleResponse,
    VisibilityUpdate,
)
from rolematrix.modules.permissions.services import Sessions, require_popup, resolve_node


def _popup_state(
    session_id: UUID, editor: PopupEditor, store: Store
) -> PopupStateResponse:
    view = MatrixView(store)
    return PopupStateResponse(
        id=session_id,
        role=editor.role,
        module=editor.parent.module,
        submodule=editor.parent.submodule or "",
        dirty=editor.is_dirty,
        rows=[MatrixRowResponse.from_row(row) for row in view.popup_rows(editor)],
        columns={action: editor.column_selected(action) for action in store.actions},
    )


# ============================================================
# Configuration
# ============================================================


@router.get("/roles", response_model=RolesResponse, summary="List roles and actions")
async def list_roles(store: Store) -> RolesResponse:
    """Roles and actions known to the store."""
    return RolesResponse(roles=list(store.roles), actions=list(store.actions))


@router.get(
    "/hierarchy",
    response_model=ModuleHierarchy,
    summary="Module hierarchy",
    description="The static module -> submodule -> popup tree.",
)
async def get_hierarchy(store: Store) -> ModuleHierarchy:
    """Module hierarchy."""
    return store.hierarchy


# ============================================================
# Matrix
# ============================================================


@router.get("/{role}/matrix", response_model=MatrixResponse, summary="Permission matrix")
async def get_matrix(role: KnownRole, store: Store) -> MatrixResponse:
    """Rows, column header states and the select-all state for a role."""
    view = MatrixView(store)
    return MatrixResponse(
        role=role,
        actions=list(store.actions),
        rows=[MatrixRowResponse.from_row(row) for row in view.rows(role)],
        columns={action: view.column_selected(role, action) for action in store.actions},
        all_selected=view.all_selected(role),
    )


@router.get(
    "/{role}/grants",
    response_model=GrantListResponse,
    summary="Granted permission ids",
)
async def list_grants(role: KnownRole, store: Store) -> GrantListResponse:
    """All permission ids granted to a role, sorted."""
    return GrantListResponse(
        role=role,
        permissions=[str(pid) for pid in sorted(store.permissions_for(role))],
    )


@router.put(
    "/{role}/grants",
    response_model=PermissionStateResponse,
    summary="Grant or revoke an action",
    description="Stores the grant regardless of visibility.",
)
async def set_grant(
    role: KnownRole, data: PermissionUpdate, store: Store
) -> PermissionStateResponse:
    """Grant or revoke one action."""
    path = resolve_node(store, data)
    action = require_action(store, data.action)
    store.grant(role, path, action, data.granted)
    return PermissionStateResponse(
        granted=store.is_granted(role, path, action),
        visible=store.get_visibility(role, path),
        disabled=not store.is_effectively_visible(role, path),
    )


@router.post(
    "/{role}/grants/toggle",
    response_model=ToggleResponse,
    summary="Click a matrix checkbox",
    description="Ignored (applied=false) when the row is not visible.",
)
async def toggle_grant(
    role: KnownRole, data: PermissionToggle, store: Store
) -> ToggleResponse:
    """Flip one checkbox."""
    path = resolve_node(store, data)
    action = require_action(store, data.action)
    applied = MatrixView(store).toggle_permission(role, path, action)
    return ToggleResponse(applied=applied, granted=store.is_granted(role, path, action))


@router.put(
    "/{role}/visibility",
    response_model=PermissionStateResponse,
    summary="Show or hide a node",
)
async def set_visibility(
    role: KnownRole, data: VisibilityUpdate, store: Store
) -> PermissionStateResponse:
    """Flip a "Show in menu" switch. Grants are left untouched."""
    path = resolve_node(store, data)
    store.set_visibility(role, path, data.visible)
    return PermissionStateResponse(
        granted=any(store.is_granted(role, path, action) for action in store.actions),
        visible=store.get_visibility(role, path),
        disabled=not store.is_effectively_visible(role, path),
    )


@router.post(
    "/{role}/columns/{action}/toggle",
    response_model=ToggleResponse,
    summary="Toggle an action column",
)
async def toggle_column(
    role: KnownRole, action: KnownAction, store: Store
) -> ToggleResponse:
    """All-or-nothing toggle of one action over every visible node."""
    return ToggleResponse(granted=store.toggle_column(role, action))


@router.post(
    "/{role}/toggle-all",
    response_model=ToggleResponse,
    summary="Select or clear all",
)
async def toggle_all(role: KnownRole, store: Store) -> ToggleResponse:
    """All-or-nothing toggle of every action over every visible node."""
    return ToggleResponse(granted=store.toggle_all(role))


@router.get(
    "/{role}/menu",
    response_model=list[MenuSectionResponse],
    summary="Navigation menu",
)
async def get_menu(role: KnownRole, store: Store) -> list[MenuSectionResponse]:
    """Sidebar sections the role would see."""
    return [
        MenuSectionResponse(
            title=section.title,
            items=[MenuItemResponse.from_item(item) for item in section.items],
        )
        for section in build_menu(store, role)
    ]


# ============================================================
# Configure dialog (staged edits)
# ============================================================


@router.post(
    "/{role}/popups",
    response_model=PopupStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a Configure dialog",
)
async def open_popup(
    role: KnownRole, data: PopupOpen, store: Store, sessions: Sessions
) -> PopupStateResponse:
    """Snapshot the role's grants into a new staged editor."""
    session_id, editor = sessions.open(store, role, data.module, data.submodule)
    return _popup_state(session_id, editor, store)


@router.get(
    "/{role}/popups/{session_id}",
    response_model=PopupStateResponse,
    summary="Configure dialog state",
)
async def get_popup(
    role: KnownRole, session_id: UUID, store: Store, sessions: Sessions
) -> PopupStateResponse:
    """Staged state of an open dialog."""
    return _popup_state(session_id, sessions.get(role, session_id), store)


@router.post(
    "/{role}/popups/{session_id}/toggle",
    response_model=PopupStateResponse,
    summary="Click a staged checkbox",
)
async def toggle_popup_grant(
    role: KnownRole,
    session_id: UUID,
    data: PopupToggle,
    store: Store,
    sessions: Sessions,
) -> PopupStateResponse:
    """Flip one staged checkbox."""
    editor = sessions.get(role, session_id)
    popup = require_popup(editor, data.popup)
    editor.toggle(popup, require_action(store, data.action))
    return _popup_state(session_id, editor, store)


@router.put(
    "/{role}/popups/{session_id}/visibility",
    response_model=PopupStateResponse,
    summary="Show or hide a popup module",
    description="Applied to the store immediately, not staged.",
)
async def set_popup_visibility(
    role: KnownRole,
    session_id: UUID,
    data: PopupVisibilityUpdate,
    store: Store,
    sessions: Sessions,
) -> PopupStateResponse:
    """Flip a popup module's visibility switch."""
    editor = sessions.get(role, session_id)
    editor.set_visibility(require_popup(editor, data.popup), data.visible)
    return _popup_state(session_id, editor, store)


@router.post(
    "/{role}/popups/{session_id}/columns/{action}/toggle",
    response_model=PopupStateResponse,
    summary="Toggle a staged action column",
)
async def toggle_popup_column(
    role: KnownRole,
    session_id: UUID,
    action: KnownAction,
    store: Store,
    sessions: Sessions,
) -> PopupStateResponse:
    """All-or-nothing toggle of one action over the visible popup modules."""
    editor = sessions.get(role, session_id)
    editor.toggle_column(action)
    return _popup_state(session_id, editor, store)


@router.post(
    "/{role}/popups/{session_id}/save",
    response_model=PopupSaveResponse,
    summary="Save a Configure dialog",
)
async def save_popup(
    role: KnownRole, session_id: UUID, sessions: Sessions
) -> PopupSaveResponse:
    """Commit staged grants and close the dialog."""
    editor = sessions.get(role, session_id)
    saved = editor.save()
    sessions.close(session_id)
    return PopupSaveResponse(saved=saved)


@router.delete(
    "/{role}/popups/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a Configure dialog",
)
async def cancel_popup(role: KnownRole, session_id: UUID, sessions: Sessions) -> None:
    """Discard staged grants and close the dialog."""
    sessions.get(role, session_id).cancel()
    sessions.close(session_id)
