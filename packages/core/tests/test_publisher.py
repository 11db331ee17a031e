"""Tests for grouping, ordering and publishing directives."""

import pytest

from commitcards_core.errors import AuthorizationError, BoardNotFoundError, CardNotFoundError, ListLookupError
from commitcards_core.models import CommentDirective
from commitcards_core.publisher import group_by_board, print_dry_run, publish_directives
from commitcards_core.trello.client import Board, Card, TrelloList


def make_directive(board="Website", card=1, message="done", list_name=None, author="Alice", revision=1):
    return CommentDirective(
        board_name=board, card_id=card, message=message, list_name=list_name, author=author, revision=revision
    )


class FakeTrello:
    """Records calls in order; boards/cards/lists are keyed by name and short id."""

    def __init__(self, boards=("Website", "Mobile"), lists=("Testing", "Done"), missing_cards=()):
        self.boards = set(boards)
        self.lists = list(lists)
        self.missing_cards = set(missing_cards)
        self.calls = []

    def search_board(self, name):
        self.calls.append(("search", name))
        if name not in self.boards:
            raise BoardNotFoundError(f"No Trello board matches {name!r}")
        return Board(id=f"id-{name}", name=name)

    def find_card(self, short_id, board):
        if short_id in self.missing_cards:
            raise CardNotFoundError(f"Card #{short_id} not found on the {board.name} board")
        return Card(id=f"card-{short_id}", short_id=short_id)

    def add_comment(self, card, text):
        self.calls.append(("comment", card.short_id, text))

    def find_list(self, board, name):
        matches = [n for n in self.lists if n == name]
        if len(matches) != 1:
            raise ListLookupError(f"Expected one list named {name!r}, found {len(matches)}")
        return TrelloList(id=f"list-{name}", name=name)

    def move_card(self, card, lst):
        self.calls.append(("move", card.short_id, lst.name))

    def comments(self):
        return [c[2] for c in self.calls if c[0] == "comment"]


class TestGroupByBoard:
    def test_groups_and_sorts_by_revision(self):
        groups = group_by_board(
            [
                make_directive(board="A", revision=5),
                make_directive(board="B", revision=2),
                make_directive(board="A", revision=3),
            ]
        )
        assert set(groups) == {"A", "B"}
        assert [d.revision for d in groups["A"]] == [3, 5]

    def test_sort_is_stable_within_a_revision(self):
        groups = group_by_board([make_directive(card=2, revision=4), make_directive(card=1, revision=4)])
        assert [d.card_id for d in groups["Website"]] == [2, 1]


class TestPublishDirectives:
    def test_posts_in_revision_order(self):
        trello = FakeTrello()
        publish_directives(
            trello,
            [make_directive(message="later", revision=5), make_directive(message="earlier", revision=3)],
        )
        assert trello.comments() == ["3:Alice - earlier", "5:Alice - later"]

    def test_each_board_searched_once(self):
        trello = FakeTrello()
        summary = publish_directives(
            trello,
            [make_directive(board="Website", card=1), make_directive(board="Mobile"), make_directive(card=2)],
        )
        searches = [c[1] for c in trello.calls if c[0] == "search"]
        assert sorted(searches) == ["Mobile", "Website"]
        assert sorted(summary.boards) == ["Mobile", "Website"]
        assert len(summary.posted) == 3

    def test_moves_card_when_list_set(self):
        trello = FakeTrello()
        summary = publish_directives(trello, [make_directive(card=4, list_name="Done")])
        assert ("move", 4, "Done") in trello.calls
        assert trello.calls.index(("comment", 4, "1:Alice - done")) < trello.calls.index(("move", 4, "Done"))
        assert len(summary.moved) == 1

    def test_no_move_without_list(self):
        trello = FakeTrello()
        summary = publish_directives(trello, [make_directive()])
        assert not [c for c in trello.calls if c[0] == "move"]
        assert summary.moved == []

    def test_unknown_list_skips_only_that_directive(self):
        trello = FakeTrello()
        summary = publish_directives(
            trello,
            [make_directive(card=1, list_name="Shipped", revision=1), make_directive(card=2, revision=2)],
        )
        # The comment for card 1 was posted before the move failed.
        assert trello.comments() == ["1:Alice - done", "2:Alice - done"]
        assert [f.directive.card_id for f in summary.failed] == [1]
        assert "Shipped" in summary.failed[0].error
        assert [d.card_id for d in summary.posted] == [2]
        assert not summary.ok

    def test_ambiguous_list_is_a_failure(self):
        trello = FakeTrello(lists=("Done", "Done"))
        summary = publish_directives(trello, [make_directive(list_name="Done")])
        assert len(summary.failed) == 1

    def test_missing_card_skipped(self):
        trello = FakeTrello(missing_cards={9})
        summary = publish_directives(trello, [make_directive(card=9), make_directive(card=1, revision=2)])
        assert trello.comments() == ["2:Alice - done"]
        assert [f.directive.card_id for f in summary.failed] == [9]

    def test_unknown_board_skips_its_directives_only(self):
        trello = FakeTrello(boards=("Website",))
        summary = publish_directives(trello, [make_directive(board="Ghost"), make_directive(board="Website")])
        assert trello.comments() == ["1:Alice - done"]
        assert [f.directive.board_name for f in summary.failed] == ["Ghost"]

    def test_fail_fast_raises_first_error(self):
        trello = FakeTrello()
        with pytest.raises(ListLookupError):
            publish_directives(
                trello,
                [make_directive(card=1, list_name="Shipped", revision=1), make_directive(card=2, revision=2)],
                fail_fast=True,
            )
        assert trello.comments() == ["1:Alice - done"]

    def test_fail_fast_unknown_board(self):
        with pytest.raises(BoardNotFoundError):
            publish_directives(FakeTrello(boards=()), [make_directive()], fail_fast=True)

    def test_authorization_error_always_propagates(self):
        trello = FakeTrello()

        def expired(card, text):
            raise AuthorizationError("Could not connect to Trello.")

        trello.add_comment = expired
        with pytest.raises(AuthorizationError):
            publish_directives(trello, [make_directive()])

    def test_empty_input(self):
        trello = FakeTrello()
        summary = publish_directives(trello, [])
        assert trello.calls == []
        assert summary.ok


class TestPrintDryRun:
    def test_prints_comment_text(self, capsys):
        print_dry_run([make_directive(board="Website", card=7, message="done", author="Alice", revision=10)])
        out = capsys.readouterr().out
        assert "Website" in out
        assert "#7" in out
        assert "10:Alice - done" in out

    def test_empty(self, capsys):
        print_dry_run([])
        assert "no card directives" in capsys.readouterr().out
