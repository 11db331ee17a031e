"""Commit → Trello synchronisation.

Usage::

    with CardSync(app_key, token) as sync:
        directives = sync.check_commits("path/to/repo")
        sync.push_comments(directives)

``check_commits`` returns a fresh list on every call; nothing accumulates on
the instance apart from the last repository path, which later calls may omit.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Mapping

import httpx
from rich.console import Console

from commitcards_core.errors import ConfigurationError
from commitcards_core.models import CommentDirective, CommitRecord, PublishSummary
from commitcards_core.parser import CommitMessageParser
from commitcards_core.publisher import publish_directives
from commitcards_core.trello.client import TrelloClient
from commitcards_core.vcs.mercurial import DEFAULT_TIMEOUT, load_commits_since

console = Console()
logger = logging.getLogger(__name__)


def construct_comments(parser: CommitMessageParser, commit: CommitRecord) -> list[CommentDirective]:
    """Parse one commit's message and tag each directive with its author and revision."""
    return [d.for_commit(commit) for d in parser.parse(commit.message)]


def load_directives(
    repo_path: str,
    since: datetime | None = None,
    parser: CommitMessageParser | None = None,
    hg_timeout: int = DEFAULT_TIMEOUT,
) -> list[CommentDirective]:
    """Load commits newer than ``since`` and parse them into directives, in log order."""
    parser = parser or CommitMessageParser()
    directives: list[CommentDirective] = []
    for commit in load_commits_since(repo_path, since, timeout=hg_timeout):
        directives.extend(construct_comments(parser, commit))
    return directives


class CardSync:
    """Connects to Trello on construction and publishes commit directives."""

    def __init__(
        self,
        app_key: str,
        token: str,
        verbs: Mapping[str, str] | None = None,
        hg_timeout: int = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._client = TrelloClient(app_key, token, http_client=http_client)
        member = self._client.authorize()
        console.print(f"Connected to Trello as [bold]{member}[/bold]")
        self._parser = CommitMessageParser(verbs)
        self._repo_path: str | None = None
        self._hg_timeout = hg_timeout

    @property
    def parser(self) -> CommitMessageParser:
        return self._parser

    def set_verbs(self, verbs: Mapping[str, str]) -> None:
        self._parser.set_verbs(verbs)

    def check_commits(self, repo_path: str | None = None, since: datetime | None = None) -> list[CommentDirective]:
        """Return directives from commits since ``since`` (default: one hour ago).

        ``repo_path`` is required on the first call and remembered for the next.
        """
        if repo_path:
            self._repo_path = repo_path
        elif self._repo_path is None:
            raise ConfigurationError("You need to provide a path for the Mercurial repository")

        directives = load_directives(self._repo_path, since, self._parser, self._hg_timeout)
        console.print(f"Found {len(directives)} card comment(s) in {self._repo_path}")
        return directives

    def push_comments(self, directives: Iterable[CommentDirective], fail_fast: bool = False) -> PublishSummary:
        return publish_directives(self._client, directives, fail_fast=fail_fast)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> CardSync:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
