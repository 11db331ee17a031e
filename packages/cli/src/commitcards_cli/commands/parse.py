"""parse command: show how a commit message is read, line by line."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from commitcards_core.config import load_verbs
from commitcards_core.parser import CommitMessageParser

console = Console()


@click.command("parse")
@click.argument("message", required=False)
@click.pass_context
def parse_cmd(ctx, message: str | None):
    """Parse MESSAGE (or stdin) and print one row per line examined.

    Handy in a commit hook to check a message before it is committed.
    Exits with status 1 if no line produced a card comment.
    """
    if message is None:
        message = click.get_text_stream("stdin").read().rstrip("\r\n")

    try:
        parser = CommitMessageParser(load_verbs(ctx.obj["config"]))
    except ValueError as e:
        raise click.UsageError(str(e))

    outcomes = parser.parse_message(message)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Line", max_width=40)
    table.add_column("Board")
    table.add_column("Card", justify="right", width=6)
    table.add_column("Move to")
    table.add_column("Message / reason")

    for outcome in outcomes:
        d = outcome.directive
        if d is not None:
            table.add_row(outcome.line, d.board_name, f"#{d.card_id}", d.list_name or "", d.message)
        elif outcome.stopped:
            table.add_row(outcome.line, "", "", "", f"[dim]{outcome.reason}; remaining lines ignored[/dim]")
        else:
            table.add_row(outcome.line, "", "", "", f"[red]{outcome.reason}[/red]")

    console.print(table)
    if not any(o.ok for o in outcomes):
        ctx.exit(1)
