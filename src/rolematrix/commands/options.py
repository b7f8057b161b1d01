"""Options and store loading shared by the CLI commands."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from rolematrix.config import get_settings
from rolematrix.core.errors import HierarchyError
from rolematrix.core.permissions import (
    PermissionStore,
    build_store,
    load_hierarchy,
    load_seed,
)


HierarchyOption = Annotated[
    Path | None,
    typer.Option(
        "--hierarchy",
        "-H",
        help="YAML file describing the module tree",
        exists=True,
        dir_okay=False,
    ),
]
SeedOption = Annotated[
    Path | None,
    typer.Option(
        "--seed",
        "-s",
        help="YAML file with initial visibility and grants",
        exists=True,
        dir_okay=False,
    ),
]


def load_store(
    console: Console,
    hierarchy_file: Path | None,
    seed_file: Path | None,
) -> PermissionStore:
    """Build a store from the given files, falling back to settings.

    Exits with status 1 when a file is invalid.
    """
    try:
        return build_store(
            get_settings(),
            hierarchy=load_hierarchy(hierarchy_file) if hierarchy_file else None,
            seed=load_seed(seed_file) if seed_file else None,
        )
    except HierarchyError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        for key, value in e.details.items():
            console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")
        raise typer.Exit(1) from e


def require_role(console: Console, store: PermissionStore, role: str) -> str:
    """Match ``role`` case-insensitively against the configured roles."""
    for known in store.roles:
        if known.lower() == role.strip().lower():
            return known
    console.print(
        f"[red]Error:[/red] Unknown role '{role}'. "
        f"Known roles: {', '.join(store.roles)}"
    )
    raise typer.Exit(1)
