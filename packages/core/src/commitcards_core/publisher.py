"""Push parsed directives to Trello."""

from __future__ import annotations

import logging
from typing import Iterable

from rich.console import Console
from rich.table import Table

from commitcards_core.errors import AuthorizationError, TrelloError
from commitcards_core.models import CommentDirective, PublishFailure, PublishSummary
from commitcards_core.trello.client import Board, TrelloClient

console = Console()
logger = logging.getLogger(__name__)


def group_by_board(directives: Iterable[CommentDirective]) -> dict[str, list[CommentDirective]]:
    """Group directives by board name, each group sorted by revision.

    The sort is stable, so directives from the same revision keep the order
    they were parsed in.
    """
    groups: dict[str, list[CommentDirective]] = {}
    for directive in directives:
        groups.setdefault(directive.board_name, []).append(directive)
    return {board: sorted(items, key=lambda d: d.revision) for board, items in groups.items()}


def push_comment(client: TrelloClient, board: Board, directive: CommentDirective) -> bool:
    """Comment on the directive's card and move it if a list is set.

    Returns True when the card was moved.
    """
    card = client.find_card(directive.card_id, board)
    client.add_comment(card, directive.comment_text())
    console.print(f"Added comment to card #{card.short_id} on the {board.name} board")
    if directive.list_name is None:
        return False
    target = client.find_list(board, directive.list_name)
    client.move_card(card, target)
    console.print(f"  Moved card #{card.short_id} to [bold]{target.name}[/bold]")
    return True


def publish_directives(
    client: TrelloClient,
    directives: Iterable[CommentDirective],
    fail_fast: bool = False,
) -> PublishSummary:
    """Post every directive, resolving each board once.

    A failed board or directive is logged and recorded in the summary, and
    publishing carries on. With ``fail_fast`` the first failure is raised
    instead. Authorization errors always propagate.
    """
    summary = PublishSummary()

    for board_name, items in group_by_board(directives).items():
        summary.boards.append(board_name)
        try:
            board = client.search_board(board_name)
        except AuthorizationError:
            raise
        except TrelloError as e:
            if fail_fast:
                raise
            logger.error("Skipping %d comment(s) for board %r: %s", len(items), board_name, e)
            summary.failed.extend(PublishFailure(directive=d, error=str(e)) for d in items)
            continue

        for directive in items:
            try:
                moved = push_comment(client, board, directive)
            except AuthorizationError:
                raise
            except TrelloError as e:
                if fail_fast:
                    raise
                logger.error("Failed to update card #%d on %r: %s", directive.card_id, board_name, e)
                summary.failed.append(PublishFailure(directive=directive, error=str(e)))
                continue
            summary.posted.append(directive)
            if moved:
                summary.moved.append(directive)

    return summary


def print_dry_run(directives: list[CommentDirective]) -> None:
    """Print the comments a publish pass would post, without touching Trello."""
    if not directives:
        console.print("[yellow]Dry run: no card directives found.[/yellow]")
        return

    table = Table(title=f"Dry run: {len(directives)} comment(s) (not posted)", header_style="bold cyan")
    table.add_column("Board", style="bold")
    table.add_column("Card", justify="right", width=6)
    table.add_column("Move to")
    table.add_column("Comment")

    for board_name, items in group_by_board(directives).items():
        for d in items:
            table.add_row(board_name, f"#{d.card_id}", d.list_name or "", d.comment_text())

    console.print(table)
