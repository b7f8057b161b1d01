"""Static module hierarchy for the permission matrix.

The hierarchy is read-only configuration: a list of modules, each with
submodules, each submodule optionally carrying popup modules that are
edited in the Configure dialog. It is loaded once from YAML or taken from
the built-in ERP layout.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any, Literal

import pydantic
import structlog
import yaml
from pydantic import BaseModel, Field, model_validator

from rolematrix.core.constants import (
    CATEGORY_CORE,
    CATEGORY_OPTIONAL,
    CATEGORY_SYSTEM,
    MAX_NAME_LENGTH,
)
from rolematrix.core.errors import HierarchyError
from rolematrix.core.permissions.keys import HierarchyPath
from rolematrix.core.utils.text import normalize_segment


logger = structlog.get_logger()

Category = Literal["Core Modules", "Optional Modules", "System"]


def _check_unique(names: list[str], scope: str) -> None:
    """Reject sibling names that collide after normalization."""
    seen: dict[str, str] = {}
    for name in names:
        key = normalize_segment(name)
        if key in seen:
            raise HierarchyError(
                f"Duplicate name in {scope}: {name!r} collides with {seen[key]!r}",
                details={"scope": scope, "name": name, "existing": seen[key]},
            )
        seen[key] = name


class SubmoduleNode(BaseModel):
    """Second-level node, e.g. "Attendance" under "HRMS"."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    route: str | None = Field(None, description="Frontend route for the sidebar")
    popup_modules: list[str] = Field(
        default_factory=list,
        description="Third-level children edited in the Configure dialog",
    )

    @model_validator(mode="after")
    def check_popup_names(self) -> "SubmoduleNode":
        _check_unique(self.popup_modules, f"popup modules of {self.name}")
        return self


class ModuleNode(BaseModel):
    """Top-level business area, e.g. "Inventory"."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    label: str | None = Field(None, description="Sidebar label, defaults to name")
    route: str | None = None
    category: Category = CATEGORY_CORE
    submodules: list[SubmoduleNode] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_submodule_names(self) -> "ModuleNode":
        _check_unique([sub.name for sub in self.submodules], f"module {self.name}")
        return self

    @property
    def display_name(self) -> str:
        return self.label or self.name


class ModuleHierarchy(BaseModel):
    """The full module -> submodule -> popup tree."""

    modules: list[ModuleNode] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_module_names(self) -> "ModuleHierarchy":
        _check_unique([module.name for module in self.modules], "hierarchy")
        return self

    def iter_paths(self) -> Iterator[HierarchyPath]:
        """Yield every node path depth-first, in declaration order."""
        for module in self.modules:
            module_path = HierarchyPath(module.name)
            yield module_path
            for sub in module.submodules:
                sub_path = module_path.child(sub.name)
                yield sub_path
                for popup in sub.popup_modules:
                    yield sub_path.child(popup)

    def get_module(self, name: str) -> ModuleNode:
        """Look up a module by name, ignoring case and extra whitespace.

        Raises:
            HierarchyError: If no such module exists
        """
        key = normalize_segment(name)
        for module in self.modules:
            if normalize_segment(module.name) == key:
                return module
        raise HierarchyError("Unknown module", details={"module": name})

    def get_submodule(self, module: str, submodule: str) -> SubmoduleNode:
        """Look up a submodule of a module.

        Raises:
            HierarchyError: If the module or submodule does not exist
        """
        key = normalize_segment(submodule)
        for sub in self.get_module(module).submodules:
            if normalize_segment(sub.name) == key:
                return sub
        raise HierarchyError(
            "Unknown submodule",
            details={"module": module, "submodule": submodule},
        )

    def contains(self, path: HierarchyPath) -> bool:
        """Check whether a path names a node of this hierarchy."""
        try:
            if path.submodule is None:
                self.get_module(path.module)
                return True
            sub = self.get_submodule(path.module, path.submodule)
        except HierarchyError:
            return False
        if path.popup is None:
            return True
        key = normalize_segment(path.popup)
        return any(normalize_segment(popup) == key for popup in sub.popup_modules)


def parse_hierarchy(data: Any) -> ModuleHierarchy:
    """Validate raw hierarchy data (as loaded from YAML or JSON).

    Raises:
        HierarchyError: If the data does not describe a valid hierarchy
    """
    try:
        return ModuleHierarchy.model_validate(data)
    except pydantic.ValidationError as e:
        raise HierarchyError(
            "Invalid hierarchy definition",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def load_hierarchy(path: Path) -> ModuleHierarchy:
    """Load a hierarchy from a YAML file.

    Args:
        path: YAML file with a top-level ``modules`` list

    Returns:
        The validated hierarchy

    Raises:
        HierarchyError: If the file is missing, unreadable or invalid
    """
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise HierarchyError(
            f"Cannot read hierarchy file: {e}",
            details={"path": str(path)},
        ) from e

    hierarchy = parse_hierarchy(data or {})
    logger.info("hierarchy_loaded", path=str(path), modules=len(hierarchy.modules))
    return hierarchy


def _sub(name: str, route: str | None = None, *popups: str) -> dict[str, Any]:
    return {"name": name, "route": route, "popup_modules": list(popups)}


DEFAULT_HIERARCHY_DATA: dict[str, Any] = {
    "modules": [
        {"name": "Dashboard", "route": "/"},
        {"name": "Chat", "route": "/chat"},
        {
            "name": "HRMS",
            "label": "HRMS & Payroll",
            "route": "/hrms",
            "submodules": [
                _sub("Dashboard", "/hrms"),
                _sub(
                    "Core HR",
                    "/hrms/core-hr",
                    "Personal Details",
                    "Job Details",
                    "Documents",
                ),
                _sub(
                    "Attendance",
                    "/hrms/attendance",
                    "Attendance Record",
                    "Overtime",
                    "HR View",
                    "Bulk Attendance",
                ),
                _sub("Leave Management", "/hrms/leave-management"),
                _sub("Payroll Management", "/hrms/payroll-management"),
                _sub("Self Service (ESS)", "/hrms/ess"),
            ],
        },
        {"name": "Products", "label": "Products & Items", "route": "/products"},
        {
            "name": "Inventory",
            "route": "/inventory",
            "submodules": [
                _sub("Dashboard", "/inventory"),
                _sub("RM Receipt", "/inventory/rm-receipt"),
                _sub("RM Issue", "/inventory/rm-issue"),
                _sub("RM Ledger", "/inventory/rm-ledger"),
                _sub("FG Stock", "/inventory/fg-stock"),
                _sub("Stock Adjustment", "/inventory/stock-adjustment"),
                _sub("Alerts & Thresholds", "/inventory/alerts"),
            ],
        },
        {
            "name": "Production",
            "route": "/production",
            "submodules": [
                _sub("Dashboard", "/production"),
                _sub("Production Entry", "/production/entry"),
                _sub("History", "/production/history"),
                _sub("Quality Check", "/production/quality"),
                _sub("Waste Tracking", "/production/waste"),
                _sub("Machine Performance", "/production/machines"),
                _sub("Shift Summary", "/production/shifts"),
            ],
        },
        {
            "name": "Sales",
            "label": "Sales & Invoicing",
            "route": "/sales-invoicing",
            "submodules": [
                _sub("Dashboard", "/sales-invoicing"),
                _sub("Sales Order", "/sales-invoicing/orders"),
                _sub("Dispatch Note", "/sales-invoicing/dispatch"),
                _sub("Invoice", "/sales-invoicing/invoices"),
                _sub("Purchase Orders", "/sales-invoicing/purchases"),
                _sub("Reports", "/sales-invoicing/reports"),
            ],
        },
        {"name": "Purchases", "label": "Purchases & Vendors", "route": "/purchases"},
        {"name": "Customers", "label": "Customers (CRM)", "route": "/customers"},
        {"name": "Accounting", "route": "/accounting", "category": CATEGORY_OPTIONAL},
        {"name": "Logistics", "route": "/logistics", "category": CATEGORY_OPTIONAL},
        {
            "name": "System",
            "label": "Users & Roles",
            "route": "/settings",
            "category": CATEGORY_SYSTEM,
        },
        {
            "name": "HR Setup",
            "route": "/hr-setup",
            "category": CATEGORY_SYSTEM,
            "submodules": [
                _sub("Employee Salary Details", "/hr-setup/employee-salary"),
                _sub("Salary Component", "/hr-setup/salary-component"),
                _sub("Salary Structure", "/hr-setup/salary-structure"),
                _sub("Pay Period", "/hr-setup/pay-period"),
            ],
        },
        {
            "name": "Masters",
            "route": "/masters",
            "category": CATEGORY_SYSTEM,
            "submodules": [_sub("HRMS", "/masters/hrms")],
        },
    ]
}


def default_hierarchy() -> ModuleHierarchy:
    """Return a fresh copy of the built-in ERP module hierarchy."""
    return parse_hierarchy(DEFAULT_HIERARCHY_DATA)
