"""verbs command: print the verb → list mapping in effect."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

console = Console()


@click.command("verbs")
@click.pass_context
def verbs_cmd(ctx):
    """Show which leading verbs move a card, and to which list.

    Set 'verbs:' in .commitcards.yml to replace the built-in mapping.
    """
    from commitcards_core.config import load_verbs

    try:
        verbs = load_verbs(ctx.obj["config"])
    except ValueError as e:
        raise click.UsageError(str(e))

    if not verbs:
        console.print("[yellow]No verbs configured. Cards are commented on but never moved.[/yellow]")
        return

    table = Table(title="Verb mapping", show_header=True, header_style="bold cyan")
    table.add_column("Verb", style="bold")
    table.add_column("Moves card to")
    for verb, list_name in sorted(verbs.items()):
        table.add_row(verb, list_name)

    console.print(table)
