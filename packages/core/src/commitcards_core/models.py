"""Data records passed between the loader, parser and publisher."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime


@dataclass(frozen=True)
class CommitRecord:
    """A single changeset as read from the repository log."""

    author: str
    revision: int
    timestamp: datetime
    message: str


@dataclass(frozen=True)
class CommentDirective:
    """One parsed ``<board> card <id> <message>`` line.

    Built by the parser with board, card and message resolved. Author and
    revision are attached afterwards with ``for_commit()``, which returns a
    new directive rather than mutating this one.
    """

    board_name: str
    card_id: int
    message: str
    list_name: str | None = None
    author: str = ""
    revision: int = 0

    def for_commit(self, commit: CommitRecord) -> CommentDirective:
        return replace(self, author=commit.author, revision=commit.revision)

    def comment_text(self) -> str:
        """Render the text posted to the card, e.g. ``10:Alice - done``."""
        return f"{self.revision}:{self.author} - {self.message}"

    def __str__(self) -> str:
        return self.comment_text()


@dataclass(frozen=True)
class LineOutcome:
    """Result of parsing one line of a commit message.

    Exactly one of ``directive`` / ``reason`` is set. ``stopped`` marks the
    line without a ``card`` token that ended parsing of the message.
    """

    line: str
    directive: CommentDirective | None = None
    reason: str | None = None
    stopped: bool = False

    @property
    def ok(self) -> bool:
        return self.directive is not None


@dataclass
class PublishFailure:
    directive: CommentDirective
    error: str


@dataclass
class PublishSummary:
    """What a publish pass did, returned to the caller for reporting."""

    posted: list[CommentDirective] = field(default_factory=list)
    moved: list[CommentDirective] = field(default_factory=list)
    failed: list[PublishFailure] = field(default_factory=list)
    boards: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
