"""Command: rolematrix matrix - Print a role's permission matrix."""


import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rolematrix.commands.options import (
    HierarchyOption,
    SeedOption,
    load_store,
    require_role,
)
from rolematrix.core.permissions import MatrixView


console = Console()

CHECKED = "[green]✓[/green]"
UNCHECKED = "[dim]·[/dim]"


def show_matrix(
    role: str = typer.Argument(..., help="Role to show"),
    hierarchy_file: HierarchyOption = None,
    seed_file: SeedOption = None,
) -> None:
    """Print the permission matrix of a role.

    Rows whose checkboxes are disabled (hidden node or hidden parent) are
    dimmed.
    """
    store = load_store(console, hierarchy_file, seed_file)
    role = require_role(console, store, role)
    view = MatrixView(store)

    table = Table(title=f"Permissions: {escape(role)}", show_header=True)
    table.add_column("Module", no_wrap=True)
    table.add_column("Menu", justify="center", no_wrap=True)
    for action in store.actions:
        marker = " ✓" if view.column_selected(role, action) else ""
        table.add_column(f"{escape(action)}{marker}", justify="center", no_wrap=True)

    for row in view.rows(role):
        label = ("  " * row.level) + escape(row.label)
        if row.has_popup:
            label += f" [dim]+{len(row.popup_modules)}[/dim]"
        cells = [
            label,
            "on" if row.visible else "[dim]off[/dim]",
            *(CHECKED if row.grants[action] else UNCHECKED for action in store.actions),
        ]
        table.add_row(*cells, style="dim" if row.disabled else None)

    console.print()
    console.print(table)
    if view.all_selected(role):
        console.print("[green]All visible permissions are granted.[/green]")
    console.print()
