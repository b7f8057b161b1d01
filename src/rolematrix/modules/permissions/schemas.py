"""Pydantic schemas for the permission matrix API."""

from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from rolematrix.core.permissions import MatrixRow, MenuItem


class NodeRef(BaseModel):
    """Reference to a hierarchy node."""

    module: str = Field(..., min_length=1)
    submodule: str | None = None
    popup: str | None = None

    @model_validator(mode="after")
    def check_levels(self) -> "NodeRef":
        if self.popup is not None and self.submodule is None:
            raise ValueError("popup requires submodule")
        return self


class RolesResponse(BaseModel):
    roles: list[str]
    actions: list[str]


class PermissionUpdate(NodeRef):
    """Grant or revoke one action on a node."""

    action: str = Field(..., min_length=1)
    granted: bool


class PermissionToggle(NodeRef):
    """A click on a matrix checkbox."""

    action: str = Field(..., min_length=1)


class VisibilityUpdate(NodeRef):
    """Show or hide a node in navigation."""

    visible: bool


class PermissionStateResponse(BaseModel):
    granted: bool
    visible: bool
    disabled: bool


class ToggleResponse(BaseModel):
    """Result of a checkbox click or a bulk toggle.

    Attributes:
        applied: False when the click hit a disabled checkbox
        granted: Resulting state of the toggled grants
    """

    applied: bool = True
    granted: bool


class MatrixRowResponse(BaseModel):
    key: str
    label: str
    level: int
    visible: bool
    disabled: bool
    grants: dict[str, bool]
    popup_modules: list[str] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: MatrixRow) -> "MatrixRowResponse":
        return cls(
            key=row.path.visibility_key,
            label=row.label,
            level=row.level,
            visible=row.visible,
            disabled=row.disabled,
            grants=row.grants,
            popup_modules=list(row.popup_modules),
        )


class MatrixResponse(BaseModel):
    role: str
    actions: list[str]
    rows: list[MatrixRowResponse]
    columns: dict[str, bool] = Field(description="Column header checkbox states")
    all_selected: bool


class GrantListResponse(BaseModel):
    role: str
    permissions: list[str]


class MenuItemResponse(BaseModel):
    name: str
    route: str | None = None
    sub_items: list["MenuItemResponse"] = Field(default_factory=list)

    @classmethod
    def from_item(cls, item: MenuItem) -> "MenuItemResponse":
        return cls(
            name=item.name,
            route=item.route,
            sub_items=[cls.from_item(sub) for sub in item.sub_items],
        )


class MenuSectionResponse(BaseModel):
    title: str
    items: list[MenuItemResponse]


class PopupOpen(BaseModel):
    """Open the Configure dialog of a submodule."""

    module: str = Field(..., min_length=1)
    submodule: str = Field(..., min_length=1)


class PopupToggle(BaseModel):
    popup: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)


class PopupVisibilityUpdate(BaseModel):
    popup: str = Field(..., min_length=1)
    visible: bool


class PopupStateResponse(BaseModel):
    id: UUID
    role: str
    module: str
    submodule: str
    dirty: bool
    rows: list[MatrixRowResponse]
    columns: dict[str, bool]


class PopupSaveResponse(BaseModel):
    saved: bool
