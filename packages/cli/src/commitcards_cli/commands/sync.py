"""sync command: push card comments from recent commits to Trello."""

from __future__ import annotations

from datetime import datetime, timedelta

import click
from rich.console import Console

from commitcards_core.errors import AuthorizationError, ConfigurationError, TrelloError, VcsError
from commitcards_core.models import PublishSummary
from commitcards_core.parser import CommitMessageParser
from commitcards_core.publisher import print_dry_run
from commitcards_core.sync import CardSync, load_directives

console = Console()


def _print_summary(summary: PublishSummary) -> None:
    console.print(
        f"\n[green]Posted {len(summary.posted)} comment(s) across {len(summary.boards)} board(s), "
        f"moved {len(summary.moved)} card(s).[/green]"
    )
    if summary.failed:
        console.print(f"[red]{len(summary.failed)} comment(s) could not be posted:[/red]")
        for failure in summary.failed:
            d = failure.directive
            console.print(f"  [bold]{d.board_name}[/bold] card #{d.card_id} (r{d.revision}): {failure.error}")


@click.command("sync")
@click.option("--repo", default=None, help="Path to the Mercurial repository. Overrides config file.")
@click.option(
    "--since",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M"]),
    default=None,
    help="Only read commits newer than this local time. Defaults to since_hours ago (1 hour).",
)
@click.option("--dry-run", "-n", "dry_run", is_flag=True, help="Print the comments without posting to Trello.")
@click.option(
    "--fail-fast",
    "fail_fast",
    is_flag=True,
    help="Abort on the first card that cannot be updated instead of skipping it.",
)
@click.pass_context
def sync_cmd(ctx, repo: str | None, since: datetime | None, dry_run: bool, fail_fast: bool):
    """Parse recent commit messages and comment on the Trello cards they name.

    \b
    Commit message lines look like:
      [verb] <board name> card <id> [message]
    e.g. "testing Website card 12 login form validated"

    \b
    Required environment variables (unless set in the config file):
      TRELLO_APP_KEY    Trello application key
      TRELLO_TOKEN      Trello authentication token
    """
    from commitcards_core.config import load_run_options, load_verbs
    from commitcards_cli.auth import resolve_trello_credentials

    config = dict(ctx.obj["config"])
    if repo is not None:
        config["repo"] = repo
    if fail_fast:
        config["fail_fast"] = True

    repo_path = config.get("repo")
    if not repo_path:
        raise click.UsageError("You need to provide a path for the Mercurial repository (--repo or 'repo:').")

    try:
        verbs = load_verbs(config)
        since_hours, hg_timeout = load_run_options(config)
    except ValueError as e:
        raise click.UsageError(str(e))

    if since is None:
        since = datetime.now() - timedelta(hours=since_hours)

    if dry_run:
        try:
            directives = load_directives(repo_path, since, CommitMessageParser(verbs), hg_timeout)
        except VcsError as e:
            raise click.ClickException(str(e))
        print_dry_run(directives)
        return

    app_key, token = resolve_trello_credentials(config)
    if not app_key or not token:
        raise click.UsageError(
            "You need to specify your Trello application key and auth token. "
            "Set TRELLO_APP_KEY and TRELLO_TOKEN.\n"
            "Get them at https://trello.com/app-key"
        )

    try:
        with CardSync(app_key, token, verbs=verbs, hg_timeout=hg_timeout) as card_sync:
            directives = card_sync.check_commits(repo_path, since)
            summary = card_sync.push_comments(directives, fail_fast=config["fail_fast"])
    except ConfigurationError as e:
        raise click.UsageError(str(e))
    except AuthorizationError as e:
        raise click.ClickException(f"Trello authorization failed: {e}")
    except VcsError as e:
        raise click.ClickException(f"Could not read commits: {e}")
    except TrelloError as e:
        raise click.ClickException(f"Trello update aborted: {e}")

    _print_summary(summary)
    if not summary.ok:
        ctx.exit(1)
