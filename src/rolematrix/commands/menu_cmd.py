"""Command: rolematrix menu - Preview a role's sidebar."""


import typer
from rich.console import Console
from rich.markup import escape

from rolematrix.commands.options import (
    HierarchyOption,
    SeedOption,
    load_store,
    require_role,
)
from rolematrix.core.permissions import build_menu


console = Console()


def show_menu(
    role: str = typer.Argument(..., help="Role to preview"),
    hierarchy_file: HierarchyOption = None,
    seed_file: SeedOption = None,
) -> None:
    """Preview the navigation menu a role would see."""
    store = load_store(console, hierarchy_file, seed_file)
    role = require_role(console, store, role)

    console.print()
    for section in build_menu(store, role):
        console.print(f"[bold cyan]{escape(section.title)}[/bold cyan]")
        for item in section.items:
            route = escape(item.route or "")
            console.print(f"  {escape(item.name)} [dim]{route}[/dim]")
            for sub in item.sub_items:
                route = escape(sub.route or "")
                console.print(f"    - {escape(sub.name)} [dim]{route}[/dim]")
    console.print()
