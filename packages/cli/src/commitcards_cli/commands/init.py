"""init command: interactive setup wizard.

Writes .commitcards.yml with the repository path and verb mapping, and can
install an hg hook so incoming changesets are synced without a cron job.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

from commitcards_core.parser import DEFAULT_VERBS

console = Console()
logger = logging.getLogger(__name__)

_HOOK_TEMPLATE = """
[hooks]
# Added by commitcards init
{hook_name} = commitcards --config {config_path} sync --repo {repo}
"""


@click.command("init")
@click.option("--repo", default=None, help="Mercurial repository path. Auto-detected with `hg root`.")
@click.pass_context
def init_cmd(ctx, repo: str | None):
    """Set up commitcards for a repository.

    Creates .commitcards.yml and optionally adds an hg hook that runs
    `commitcards sync` after changesets arrive.
    """
    config_path = Path(ctx.obj["config_path"]) if ctx.obj else Path(".commitcards.yml")
    console.print("\n[bold cyan]commitcards init[/bold cyan]: setup wizard\n")

    # --- Detect repo from hg ---
    if repo is None:
        repo = _detect_hg_root()
        if repo:
            console.print(f"[dim]Detected repository: {repo}[/dim]")
        else:
            repo = click.prompt("Mercurial repository path")

    config: dict = {"repo": repo}

    # --- Verbs ---
    console.print("\nBuilt-in verbs:")
    for verb, list_name in DEFAULT_VERBS.items():
        console.print(f"  [bold]{verb}[/bold] → {list_name}")
    if click.confirm("Use a custom verb mapping instead?", default=False):
        config["verbs"] = _prompt_verbs()

    since_hours = click.prompt("Look back how many hours by default?", type=int, default=1)
    if since_hours != 1:
        config["since_hours"] = since_hours

    # --- Write .commitcards.yml ---
    _write_config(config, config_path)
    console.print(f"[green]Created {config_path}[/green]")

    # --- hg hook ---
    if click.confirm("\nAdd a 'changegroup' hook to the repository's .hg/hgrc?", default=False):
        hgrc = _write_hook(repo, config_path.resolve())
        console.print(f"[green]Added hook to {hgrc}[/green]")
        console.print(
            "\n[yellow]The hook needs [bold]TRELLO_APP_KEY[/bold] and [bold]TRELLO_TOKEN[/bold] "
            "in the environment of whoever pushes.[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Preview with: [bold]commitcards sync --dry-run[/bold]")


def _detect_hg_root() -> str | None:
    """Return the root of the Mercurial repository containing the cwd, if any."""
    try:
        result = subprocess.run(["hg", "root"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def _prompt_verbs() -> dict[str, str]:
    """Prompt for verb/list pairs until an empty verb is entered."""
    verbs: dict[str, str] = {}
    while True:
        verb = click.prompt("Verb (empty to finish)", default="", show_default=False).strip().lower()
        if not verb:
            return verbs
        verbs[verb] = click.prompt(f"List for '{verb}'")


def _write_config(config: dict, path: Path) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False, allow_unicode=True))


def _write_hook(repo: str, config_path: Path) -> Path:
    hgrc = Path(repo) / ".hg" / "hgrc"
    hgrc.parent.mkdir(parents=True, exist_ok=True)
    with open(hgrc, "a", encoding="utf-8") as f:
        f.write(
            _HOOK_TEMPLATE.format(
                hook_name="changegroup.commitcards", config_path=shlex.quote(str(config_path)), repo=shlex.quote(repo)
            )
        )
    logger.debug("Appended commitcards hook to %s", hgrc)
    return hgrc
