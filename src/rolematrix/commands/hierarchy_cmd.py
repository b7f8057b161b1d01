"""Command: rolematrix hierarchy - Show the module tree."""


from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from rolematrix.commands.options import HierarchyOption, SeedOption, load_store


console = Console()


def show_hierarchy(
    hierarchy_file: HierarchyOption = None,
    seed_file: SeedOption = None,
) -> None:
    """Show modules, submodules and popup modules with their permission ids."""
    store = load_store(console, hierarchy_file, seed_file)

    tree = Tree("[bold]Modules[/bold]")
    for module in store.hierarchy.modules:
        name = escape(module.display_name)
        module_branch = tree.add(f"[cyan]{name}[/cyan] [dim]({module.category})[/dim]")
        for sub in module.submodules:
            sub_branch = module_branch.add(
                f"{escape(sub.name)} [dim]{escape(sub.route or '')}[/dim]".rstrip()
            )
            for popup in sub.popup_modules:
                sub_branch.add(f"[magenta]{escape(popup)}[/magenta]")

    console.print()
    console.print(tree)
    console.print(
        f"\n[dim]{len(store.hierarchy.modules)} modules, "
        f"{sum(1 for _ in store.hierarchy.iter_paths())} nodes, "
        f"actions: {escape(', '.join(store.actions))}[/dim]\n"
    )
