"""Main rolematrix CLI application."""

import sys

import typer
from rich.console import Console

from rolematrix import __version__
from rolematrix.commands import hierarchy_cmd, matrix_cmd, menu_cmd
from rolematrix.config import get_settings
from rolematrix.core.logging import configure_logging


console = Console()

app = typer.Typer(
    name="rolematrix",
    help="Inspect module hierarchies, permission matrices and menus.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="hierarchy")(hierarchy_cmd.show_hierarchy)
app.command(name="matrix")(matrix_cmd.show_matrix)
app.command(name="menu")(menu_cmd.show_menu)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log store construction to stderr."
    ),
) -> None:
    """Rolematrix CLI - Inspect roles and permissions."""
    if version:
        console.print(f"[bold cyan]rolematrix[/bold cyan] version {__version__}")
        raise typer.Exit()

    settings = get_settings().model_copy(
        update={"log_level": "DEBUG" if verbose else "WARNING"}
    )
    configure_logging(settings, file=sys.stderr)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
