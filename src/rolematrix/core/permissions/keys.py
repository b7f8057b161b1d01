"""Hierarchy paths, permission ids and visibility keys.

A permission id identifies one (module, submodule, popup, action) grant.
Each segment is normalized and escaped before joining, so two distinct
paths can never encode to the same id and every id decodes back to
exactly one path and action.
"""

from dataclasses import dataclass
from typing import Self

from rolematrix.core.constants import (
    MAX_HIERARCHY_DEPTH,
    PERMISSION_ID_ESCAPE,
    PERMISSION_ID_SEPARATOR,
    VISIBILITY_SEPARATOR,
)
from rolematrix.core.errors import HierarchyError
from rolematrix.core.utils.text import escape_segment, normalize_segment, split_escaped


@dataclass(frozen=True, slots=True)
class HierarchyPath:
    """Location of a node in the module -> submodule -> popup tree.

    Attributes:
        module: Top-level module name (e.g. "HRMS")
        submodule: Child of the module (e.g. "Attendance")
        popup: Child of the submodule shown in its Configure dialog
            (e.g. "Attendance Record")
    """

    module: str
    submodule: str | None = None
    popup: str | None = None

    def __post_init__(self) -> None:
        for field_name in ("module", "submodule", "popup"):
            value = getattr(self, field_name)
            if value is None:
                continue
            stripped = value.strip()
            if not stripped:
                raise HierarchyError(
                    f"Empty {field_name} name in hierarchy path",
                    details={"field": field_name},
                )
            object.__setattr__(self, field_name, stripped)

        if self.popup is not None and self.submodule is None:
            raise HierarchyError(
                "Popup module requires a submodule",
                details={"module": self.module, "popup": self.popup},
            )

    @property
    def segments(self) -> tuple[str, ...]:
        """Names from the module down to this node."""
        return tuple(
            name for name in (self.module, self.submodule, self.popup) if name is not None
        )

    @property
    def depth(self) -> int:
        """1 for a module, 2 for a submodule, 3 for a popup module."""
        return len(self.segments)

    @property
    def name(self) -> str:
        """Display name of the node itself."""
        return self.segments[-1]

    @property
    def parent(self) -> "HierarchyPath | None":
        """Path of the enclosing node, or None for a module."""
        if self.popup is not None:
            return HierarchyPath(self.module, self.submodule)
        if self.submodule is not None:
            return HierarchyPath(self.module)
        return None

    @property
    def lineage(self) -> tuple["HierarchyPath", ...]:
        """This path and all its ancestors, outermost first."""
        return tuple(
            HierarchyPath(*self.segments[:size]) for size in range(1, self.depth + 1)
        )

    @property
    def normalized(self) -> "HierarchyPath":
        """Same path with every name normalized (lowercase, single spaces)."""
        return HierarchyPath(*(normalize_segment(name) for name in self.segments))

    def child(self, name: str) -> "HierarchyPath":
        """Build the path of a direct child of this node.

        Raises:
            HierarchyError: If this node is already a popup module
        """
        if self.depth >= MAX_HIERARCHY_DEPTH:
            raise HierarchyError(
                "Popup modules cannot have children",
                details={"path": self.visibility_key},
            )
        return HierarchyPath(*self.segments, name)

    @property
    def visibility_key(self) -> str:
        """Key used in the per-role visibility map.

        ``Module``, ``Module:Submodule`` or ``Module:Submodule:Popup``. A
        colon inside a name is escaped with a backslash.
        """
        return VISIBILITY_SEPARATOR.join(
            name.replace(PERMISSION_ID_ESCAPE, PERMISSION_ID_ESCAPE * 2).replace(
                VISIBILITY_SEPARATOR, PERMISSION_ID_ESCAPE + VISIBILITY_SEPARATOR
            )
            for name in self.segments
        )

    @classmethod
    def from_visibility_key(cls, key: str) -> Self:
        """Parse a visibility key back into a path.

        Raises:
            HierarchyError: If the key is empty, has too many levels or ends
                with a dangling escape
        """
        segments: list[str] = []
        current: list[str] = []
        chars = iter(key)
        for char in chars:
            if char == PERMISSION_ID_ESCAPE:
                escaped = next(chars, None)
                if escaped is None:
                    raise HierarchyError(
                        "Visibility key ends with a dangling escape",
                        details={"key": key},
                    )
                current.append(escaped)
            elif char == VISIBILITY_SEPARATOR:
                segments.append("".join(current))
                current = []
            else:
                current.append(char)
        segments.append("".join(current))

        if len(segments) > MAX_HIERARCHY_DEPTH:
            raise HierarchyError(
                "Visibility key has too many levels",
                details={"key": key},
            )
        return cls(*segments)

    def __str__(self) -> str:
        return self.visibility_key


@dataclass(frozen=True, slots=True, order=True)
class PermissionId:
    """Structured key for a single grant.

    Attributes:
        path: Normalized hierarchy segments, outermost first
        action: Normalized action verb
    """

    path: tuple[str, ...]
    action: str

    @classmethod
    def build(cls, path: HierarchyPath, action: str) -> Self:
        """Derive the permission id for an action on a hierarchy node.

        Raises:
            HierarchyError: If the action name is blank
        """
        normalized_action = normalize_segment(action)
        if not normalized_action:
            raise HierarchyError("Empty action name", details={"path": str(path)})
        return cls(
            path=tuple(normalize_segment(name) for name in path.segments),
            action=normalized_action,
        )

    @classmethod
    def parse(cls, value: str) -> Self:
        """Decode a string produced by ``str(PermissionId)``.

        Raises:
            HierarchyError: If the string does not hold 2 to 4 segments
        """
        try:
            segments = split_escaped(value)
        except ValueError as e:
            raise HierarchyError(str(e), details={"permission_id": value}) from e

        if not 2 <= len(segments) <= MAX_HIERARCHY_DEPTH + 1 or not all(segments):
            raise HierarchyError(
                "Malformed permission id",
                details={"permission_id": value},
            )
        return cls(path=tuple(segments[:-1]), action=segments[-1])

    @property
    def depth(self) -> int:
        return len(self.path)

    def __str__(self) -> str:
        return PERMISSION_ID_SEPARATOR.join(
            escape_segment(segment) for segment in (*self.path, self.action)
        )


def permission_id(
    module: str,
    submodule: str | None,
    action: str,
    popup: str | None = None,
) -> PermissionId:
    """Shortcut for ``PermissionId.build(HierarchyPath(...), action)``."""
    return PermissionId.build(HierarchyPath(module, submodule, popup), action)
