"""Commit message parser.

Grammar, one directive per line:

    [<verb>] <board name> card <card-id-token> [<free-text message>]

Only a leading run of directive lines counts: the first line without a
``card`` token ends parsing of the whole message. Any other malformed line is
skipped on its own and the next line is still parsed.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from commitcards_core.models import CommentDirective, LineOutcome

logger = logging.getLogger(__name__)

DEFAULT_VERBS: dict[str, str] = {
    "developing": "Development",
    "coding": "Development",
    "testing": "Testing",
    "waiting": "User Acceptance",
    "finishing": "Done",
    "finished": "Done",
}

CARD_KEYWORD = "card"
MAX_CARD_ID = 2**31 - 1

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")
_NON_DIGIT_RE = re.compile(r"[^0-9]+")


class CommitMessageParser:
    def __init__(self, verbs: Mapping[str, str] | None = None) -> None:
        self._verbs: dict[str, str] = {}
        self.set_verbs(DEFAULT_VERBS if verbs is None else verbs)

    @property
    def verbs(self) -> dict[str, str]:
        return dict(self._verbs)

    def set_verbs(self, verbs: Mapping[str, str]) -> None:
        """Replace the verb → list mapping wholesale (no merge with defaults)."""
        self._verbs = {verb.lower(): list_name for verb, list_name in verbs.items()}

    def parse_line(self, line: str) -> LineOutcome:
        tokens = line.split(" ")
        list_name = self._verbs.get(tokens[0].lower())
        if list_name is not None:
            tokens = tokens[1:]

        card_index = next((i for i, token in enumerate(tokens) if token.lower() == CARD_KEYWORD), None)
        if card_index is None:
            return LineOutcome(line=line, reason="no 'card' token", stopped=True)

        board_name = " ".join(tokens[:card_index])
        if not board_name.strip() or board_name == CARD_KEYWORD:
            return LineOutcome(line=line, reason="missing board name")

        if card_index + 1 >= len(tokens):
            return LineOutcome(line=line, reason="missing card id")
        digits = _NON_DIGIT_RE.sub("", tokens[card_index + 1])
        if not digits or not 0 < int(digits) <= MAX_CARD_ID:
            return LineOutcome(line=line, reason=f"invalid card id {tokens[card_index + 1]!r}")

        message = " ".join(tokens[card_index + 2 :]).strip()
        directive = CommentDirective(
            board_name=board_name,
            card_id=int(digits),
            message=message,
            list_name=list_name,
        )
        return LineOutcome(line=line, directive=directive)

    def parse_message(self, message: str) -> list[LineOutcome]:
        """Return one outcome per line examined, up to and including the line that stopped parsing."""
        outcomes: list[LineOutcome] = []
        for line in _NEWLINE_RE.split(message):
            outcome = self.parse_line(line)
            outcomes.append(outcome)
            if outcome.stopped:
                break
            if not outcome.ok:
                logger.info("Caught poorly formatted message (%s): %s", outcome.reason, line)
        return outcomes

    def parse(self, message: str) -> list[CommentDirective]:
        return [o.directive for o in self.parse_message(message) if o.directive is not None]
