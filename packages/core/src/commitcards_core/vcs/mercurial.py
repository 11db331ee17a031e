"""Read changesets from a Mercurial repository via the ``hg`` command line."""

from __future__ import annotations

import logging
import os
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

from commitcards_core.errors import VcsError
from commitcards_core.models import CommitRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1200

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
LOG_TEMPLATE = _FIELD_SEP.join(["{rev}", "{author|person}", "{date|hgdate}", "{desc}"]) + _RECORD_SEP


def default_since() -> datetime:
    return datetime.now(timezone.utc) - timedelta(hours=1)


def _as_aware(value: datetime) -> datetime:
    # Naive datetimes are taken as local time.
    return value if value.tzinfo is not None else value.astimezone()


def _parse_hgdate(value: str) -> datetime:
    # hgdate is "<unix seconds> <offset>"; the unix part is already UTC.
    return datetime.fromtimestamp(int(value.split()[0]), tz=timezone.utc)


def parse_log_output(output: str) -> list[CommitRecord]:
    commits = []
    for record in output.split(_RECORD_SEP):
        if not record.strip():
            continue
        try:
            rev, author, date, desc = record.lstrip("\n").split(_FIELD_SEP, 3)
            commits.append(
                CommitRecord(author=author, revision=int(rev), timestamp=_parse_hgdate(date), message=desc)
            )
        except ValueError as e:
            raise VcsError(f"Unexpected hg log output: {record[:80]!r}") from e
    return commits


def read_log(repo_path: str, timeout: int = DEFAULT_TIMEOUT) -> list[CommitRecord]:
    """Return every changeset in the repository, in hg's natural log order."""
    try:
        result = subprocess.run(
            ["hg", "log", "--repository", repo_path, "--template", LOG_TEMPLATE],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            env={**os.environ, "HGPLAIN": "1", "HGENCODING": "utf-8"},
            timeout=timeout,
        )
    except FileNotFoundError:
        raise VcsError("The 'hg' executable was not found. Is Mercurial installed?")
    except subprocess.TimeoutExpired:
        raise VcsError(f"hg log did not finish within {timeout}s for {repo_path}")

    if result.returncode != 0:
        raise VcsError(f"hg log failed for {repo_path}: {result.stderr.strip()}")
    return parse_log_output(result.stdout)


def load_commits_since(
    repo_path: str,
    since: datetime | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> list[CommitRecord]:
    """Return commits strictly newer than ``since`` (default: one hour ago)."""
    since = _as_aware(since) if since is not None else default_since()
    logger.info("Found repository at %s", Path(repo_path).resolve())
    logger.info("Loading commits committed since %s...", since.isoformat())

    commits = [c for c in read_log(repo_path, timeout=timeout) if c.timestamp > since]
    for commit in commits:
        logger.info("Found commit r%d from %s by %s", commit.revision, commit.timestamp.isoformat(), commit.author)
    return commits
