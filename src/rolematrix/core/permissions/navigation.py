"""Sidebar menu built from per-role visibility."""

from dataclasses import dataclass, field

from rolematrix.core.constants import CATEGORY_SYSTEM, NAVIGATION_CATEGORIES
from rolematrix.core.permissions.keys import HierarchyPath
from rolematrix.core.permissions.store import PermissionStore


MY_ACCOUNT_NAME = "My Account"
MY_ACCOUNT_ROUTE = "/my-account"


@dataclass(frozen=True)
class MenuItem:
    name: str
    route: str | None
    sub_items: tuple["MenuItem", ...] = ()


@dataclass(frozen=True)
class MenuSection:
    title: str
    items: list[MenuItem] = field(default_factory=list)


def build_menu(store: PermissionStore, role: str) -> list[MenuSection]:
    """Build the navigation menu a role sees.

    Only visible modules appear, and only visible submodules of those
    modules appear as sub-items. Sections without items are dropped,
    except System, which always carries the My Account entry.

    Args:
        store: Permission store holding visibility flags
        role: Role to build the menu for

    Returns:
        Sections in sidebar order
    """
    sections: dict[str, MenuSection] = {
        title: MenuSection(title=title) for title in NAVIGATION_CATEGORIES
    }

    for module in store.hierarchy.modules:
        module_path = HierarchyPath(module.name)
        if not store.get_visibility(role, module_path):
            continue

        sub_items = tuple(
            MenuItem(name=sub.name, route=sub.route)
            for sub in module.submodules
            if store.get_visibility(role, module_path.child(sub.name))
        )
        sections[module.category].items.append(
            MenuItem(name=module.display_name, route=module.route, sub_items=sub_items)
        )

    sections[CATEGORY_SYSTEM].items.append(
        MenuItem(name=MY_ACCOUNT_NAME, route=MY_ACCOUNT_ROUTE)
    )

    return [section for section in sections.values() if section.items]
