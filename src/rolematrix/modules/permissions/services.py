"""Popup editor sessions for the permissions API."""

import time
from collections.abc import Callable
from typing import Annotated
from uuid import UUID, uuid4

import structlog
from fastapi import Depends, Request

from rolematrix.core.errors import HierarchyError, NotFoundError
from rolematrix.core.permissions import HierarchyPath, PermissionStore, PopupEditor
from rolematrix.modules.permissions.schemas import NodeRef


logger = structlog.get_logger()


def resolve_node(store: PermissionStore, ref: NodeRef) -> HierarchyPath:
    """Turn a node reference from a request into a hierarchy path.

    Raises:
        NotFoundError: If the reference does not name a node of the hierarchy
    """
    try:
        path = HierarchyPath(ref.module, ref.submodule, ref.popup)
    except HierarchyError as e:
        raise NotFoundError(e.message, resource="node", details=e.details) from e

    if not store.hierarchy.contains(path):
        raise NotFoundError(
            "Unknown hierarchy node",
            resource="node",
            resource_id=path.visibility_key,
        )
    return path


class PopupSessions:
    """Open popup editors keyed by session id.

    Each Configure dialog opened through the API gets its own editor and
    staged buffer; closing the dialog (save or cancel) drops the session.
    A dialog the client never closes is evicted once it is older than
    ``max_age`` seconds, when the same role reopens the same submodule,
    or when more than ``max_count`` sessions are open (oldest first).
    An evicted session answers 404 like any unknown one.
    """

    def __init__(
        self,
        max_age: float = 3600,
        max_count: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_age = max_age
        self.max_count = max_count
        self._clock = clock
        self._editors: dict[UUID, tuple[str, PopupEditor, float]] = {}

    def _evict(self, session_id: UUID, reason: str) -> None:
        role, editor, _ = self._editors.pop(session_id)
        if editor.is_open:
            editor.cancel()
        logger.info(
            "popup_session_evicted",
            session_id=str(session_id),
            role=role,
            reason=reason,
        )

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [
            session_id
            for session_id, (_, _, opened_at) in self._editors.items()
            if now - opened_at >= self.max_age
        ]
        for session_id in expired:
            self._evict(session_id, "expired")

    def open(
        self, store: PermissionStore, role: str, module: str, submodule: str
    ) -> tuple[UUID, PopupEditor]:
        try:
            editor = PopupEditor.open(store, role, module, submodule)
        except HierarchyError as e:
            raise NotFoundError(e.message, resource="submodule", details=e.details) from e

        self._evict_expired()
        superseded = [
            session_id
            for session_id, (other_role, other, _) in self._editors.items()
            if other_role == role and other.parent == editor.parent
        ]
        for session_id in superseded:
            self._evict(session_id, "reopened")
        # Insertion order is opening order
        while self._editors and len(self._editors) >= self.max_count:
            self._evict(next(iter(self._editors)), "limit")

        session_id = uuid4()
        self._editors[session_id] = (role, editor, self._clock())
        logger.info("popup_session_opened", session_id=str(session_id), role=role)
        return session_id, editor

    def get(self, role: str, session_id: UUID) -> PopupEditor:
        """Get an open editor of ``role``.

        Raises:
            NotFoundError: If no open session matches or it has expired
        """
        self._evict_expired()
        entry = self._editors.get(session_id)
        if entry is None or entry[0] != role:
            raise NotFoundError(
                "Popup session not found",
                resource="popup_session",
                resource_id=str(session_id),
            )
        return entry[1]

    def close(self, session_id: UUID) -> None:
        self._editors.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._editors)


def get_popup_sessions(request: Request) -> PopupSessions:
    """Return the application's popup session registry."""
    return request.app.state.popup_sessions


Sessions = Annotated[PopupSessions, Depends(get_popup_sessions)]


def require_popup(editor: PopupEditor, popup: str) -> str:
    """Check that ``popup`` belongs to the editor's submodule.

    Raises:
        NotFoundError: If it does not
    """
    try:
        return editor.child(popup).name
    except HierarchyError as e:
        raise NotFoundError(e.message, resource="popup_module", details=e.details) from e
