"""Tests for the directive and commit records."""

import dataclasses
from datetime import datetime, timezone

import pytest

from commitcards_core.models import CommentDirective, CommitRecord, LineOutcome, PublishFailure, PublishSummary


def _commit(author="Alice", revision=10):
    return CommitRecord(
        author=author,
        revision=revision,
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        message="Website card 1 done",
    )


class TestCommentDirective:
    def test_comment_text_format(self):
        d = CommentDirective(board_name="Website", card_id=1, message="done", author="Alice", revision=10)
        assert d.comment_text() == "10:Alice - done"
        assert str(d) == "10:Alice - done"

    def test_comment_text_with_empty_message(self):
        d = CommentDirective(board_name="Website", card_id=1, message="", author="Bob", revision=3)
        assert d.comment_text() == "3:Bob - "

    def test_for_commit_returns_new_directive(self):
        d = CommentDirective(board_name="Website", card_id=1, message="done", list_name="Done")
        tagged = d.for_commit(_commit())
        assert tagged is not d
        assert (tagged.author, tagged.revision) == ("Alice", 10)
        assert tagged.list_name == "Done"
        assert (d.author, d.revision) == ("", 0)

    def test_directive_is_immutable(self):
        d = CommentDirective(board_name="Website", card_id=1, message="done")
        with pytest.raises(dataclasses.FrozenInstanceError):
            d.card_id = 2


class TestOutcomes:
    def test_line_outcome_ok(self):
        d = CommentDirective(board_name="W", card_id=1, message="")
        assert LineOutcome(line="W card 1", directive=d).ok
        assert not LineOutcome(line="W card", reason="missing card id").ok

    def test_publish_summary_ok_until_failure(self):
        summary = PublishSummary()
        assert summary.ok
        summary.failed.append(PublishFailure(CommentDirective("W", 1, ""), "boom"))
        assert not summary.ok
