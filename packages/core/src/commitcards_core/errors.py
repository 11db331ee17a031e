"""Exception hierarchy for commitcards.

Fatal categories (configuration, authorization) are kept distinct so the CLI
can tell operators whether to fix their setup or refresh their Trello token.
Line parse failures are not exceptions; see ``LineOutcome``.
"""

from __future__ import annotations


class CommitCardsError(Exception):
    """Base class for every error raised by commitcards."""


class ConfigurationError(CommitCardsError, ValueError):
    """Missing or empty credentials, or no repository path to read from."""


class AuthorizationError(CommitCardsError):
    """Trello rejected the application key / token pair."""


class VcsError(CommitCardsError):
    """The version-control log could not be read."""


class TrelloError(CommitCardsError):
    """A Trello request failed for a reason other than authorization."""


class BoardNotFoundError(TrelloError, LookupError):
    """Board search returned no match."""


class CardNotFoundError(TrelloError, LookupError):
    """No card with the given short id exists on the board."""


class ListLookupError(TrelloError, LookupError):
    """A list name matched zero or more than one list on the board."""
