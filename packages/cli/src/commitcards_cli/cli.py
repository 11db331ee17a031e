"""CLI entry point for commitcards.

Commands:
  sync     load recent commits and push their card comments to Trello
  parse    show how a commit message would be parsed
  verbs    print the verb → list mapping in effect
  init     interactive setup wizard that writes .commitcards.yml
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.logging import RichHandler

from commitcards_cli.commands.init import init_cmd
from commitcards_cli.commands.parse import parse_cmd
from commitcards_cli.commands.sync import sync_cmd
from commitcards_cli.commands.verbs import verbs_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )
    # httpx logs every request URL at INFO, and the URL carries the token.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("commitcards"),
    prog_name="commitcards",
)
@click.option(
    "--config",
    "config_path",
    default=".commitcards.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="COMMITCARDS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Post Mercurial commit messages as comments on Trello cards."""
    from commitcards_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = load_config(config_path)


main.add_command(sync_cmd)
main.add_command(parse_cmd)
main.add_command(verbs_cmd)
main.add_command(init_cmd)
