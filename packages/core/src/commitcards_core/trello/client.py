"""Thin Trello REST client covering the calls commitcards needs.

Every request carries the application key and token as query parameters.
A 401 from any endpoint is raised as ``AuthorizationError`` so an expired
token is never mistaken for a lookup failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from commitcards_core.errors import (
    AuthorizationError,
    BoardNotFoundError,
    CardNotFoundError,
    ConfigurationError,
    ListLookupError,
    TrelloError,
)

logger = logging.getLogger(__name__)

TRELLO_API_URL = "https://api.trello.com/1"


@dataclass(frozen=True)
class Board:
    id: str
    name: str


@dataclass(frozen=True)
class Card:
    id: str
    short_id: int
    name: str = ""


@dataclass(frozen=True)
class TrelloList:
    id: str
    name: str


class TrelloClient:
    def __init__(
        self,
        app_key: str,
        token: str,
        base_url: str = TRELLO_API_URL,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not app_key or not token:
            raise ConfigurationError("You need to specify your Trello application key and auth token")
        self._auth = {"key": app_key, "token": token}
        self._http = http_client if http_client is not None else httpx.Client()
        self._base_url = base_url.rstrip("/")

    # ----- Helpers -----
    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        allow_missing: bool = False,
    ) -> Any:
        """Send one request. A 404 returns None only when ``allow_missing`` is set."""
        query = {**self._auth, **(params or {})}
        try:
            resp = self._http.request(method, self._base_url + path, params=query)
        except httpx.HTTPError as e:
            raise TrelloError(f"{method} {path} failed: {e}") from e

        if resp.status_code == 401:
            raise AuthorizationError("Could not connect to Trello. Perhaps your auth token has expired?")
        if resp.status_code == 404 and allow_missing:
            return None
        if resp.is_error:
            raise TrelloError(f"{method} {path} returned HTTP {resp.status_code}: {resp.text[:200]}")
        return resp.json()

    # ----- Public APIs -----
    def authorize(self) -> str:
        """Check the credentials and return the member's full name."""
        me = self._request("GET", "/members/me", {"fields": "fullName,username"}, allow_missing=True)
        if me is None:
            raise AuthorizationError("Could not connect to Trello. Perhaps your auth token has expired?")
        return me.get("fullName") or me.get("username", "")

    def search_board(self, name: str) -> Board:
        data = self._request(
            "GET",
            "/search",
            {"query": name, "modelTypes": "boards", "boards_limit": 1, "board_fields": "name"},
        )
        boards = (data or {}).get("boards") or []
        if not boards:
            raise BoardNotFoundError(f"No Trello board matches {name!r}")
        return Board(id=boards[0]["id"], name=boards[0]["name"])

    def find_card(self, short_id: int, board: Board) -> Card:
        data = self._request(
            "GET", f"/boards/{board.id}/cards/{short_id}", {"fields": "idShort,name"}, allow_missing=True
        )
        if data is None:
            raise CardNotFoundError(f"Card #{short_id} not found on the {board.name} board")
        return Card(id=data["id"], short_id=data.get("idShort", short_id), name=data.get("name", ""))

    def add_comment(self, card: Card, text: str) -> None:
        self._request("POST", f"/cards/{card.id}/actions/comments", {"text": text})

    def lists_for_board(self, board: Board) -> list[TrelloList]:
        data = self._request("GET", f"/boards/{board.id}/lists", {"fields": "name"}) or []
        return [TrelloList(id=item["id"], name=item["name"]) for item in data]

    def find_list(self, board: Board, name: str) -> TrelloList:
        """Return the single list on ``board`` named exactly ``name``."""
        matches = [lst for lst in self.lists_for_board(board) if lst.name == name]
        if len(matches) != 1:
            raise ListLookupError(f"Expected one list named {name!r} on the {board.name} board, found {len(matches)}")
        return matches[0]

    def move_card(self, card: Card, lst: TrelloList) -> None:
        self._request("PUT", f"/cards/{card.id}", {"idList": lst.id})

    def close(self) -> None:
        self._http.close()
