"""Parser for `git log --numstat` output."""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Optional, Union

from commitboard.config import HEADER_DELIMITER
from commitboard.models import Commit
from commitboard.periods import PeriodStrategy, resolve_period_strategy

logger = logging.getLogger(__name__)


@dataclass
class ParsedHeader:
    """Fields of a commit header line."""

    sha: str
    date: date
    author: str
    subject: str


@dataclass
class _OpenCommit:
    """Commit whose change lines are still being read."""

    header: ParsedHeader
    duplicate: bool = False
    additions: int = 0
    deletions: int = 0
    changes_seen: bool = False


class LogStreamParser:
    """Turn raw log text into Commit records.

    Expects the output of:

        git log --pretty=format:%h|%ad|%an|%s --date=short --numstat

    i.e. one header line per commit followed by zero or more
    ``additions<TAB>deletions<TAB>path`` lines. Binary files report ``-``
    instead of counts and contribute nothing to the totals.

    A parser instance represents one analysis run: a hash that has already
    been emitted is never emitted again, even across several calls to
    ``parse``.
    """

    # additions<TAB>deletions<TAB>path, "-" for binary files
    NUMSTAT_PATTERN = re.compile(
        r"^(?P<additions>\d+|-)\t(?P<deletions>\d+|-)\t(?P<path>.*)$"
    )

    def __init__(
        self,
        period_strategy: Union[str, PeriodStrategy, None] = None,
        merge_hashes: Optional[Iterable[str]] = None,
    ):
        """Initialize the parser.

        Args:
            period_strategy: Name or callable used to derive period keys
            merge_hashes: Hashes the caller knows to be merge commits
        """
        self._period_key = resolve_period_strategy(period_strategy)
        self.merge_hashes = set(merge_hashes or ())
        self.seen_hashes: set[str] = set()
        self.duplicates = 0
        self.skipped_lines = 0
        self.binary_lines = 0

    def parse_header(self, line: str) -> Optional[ParsedHeader]:
        """Split a header line into its fields.

        Only the first three delimiters separate fields; everything after
        the third one is the subject, delimiters included.

        Args:
            line: A single log line

        Returns:
            ParsedHeader, or None if the line is not a valid header
        """
        parts = line.split(HEADER_DELIMITER, 3)
        if len(parts) < 4:
            return None

        sha, date_str, author, subject = parts
        sha = sha.strip()
        if not sha:
            return None

        try:
            day = date.fromisoformat(date_str.strip())
        except ValueError:
            return None

        return ParsedHeader(sha=sha, date=day, author=author.strip(), subject=subject)

    def parse(self, text: str) -> Iterator[Commit]:
        """Yield every non-duplicate commit in the log text, in log order.

        Args:
            text: Complete output of the log command

        Yields:
            Commit objects with their additions and deletions summed
        """
        current: Optional[_OpenCommit] = None

        for line in text.splitlines():
            match = self.NUMSTAT_PATTERN.match(line)
            if match:
                if current is None:
                    # Change lines with no open commit belong to nothing
                    self.skipped_lines += 1
                    logger.debug("Ignoring change line outside a commit: %r", line)
                    continue
                current.changes_seen = True
                additions = match.group("additions")
                deletions = match.group("deletions")
                if additions == "-" or deletions == "-":
                    self.binary_lines += 1
                    continue
                current.additions += int(additions)
                current.deletions += int(deletions)
                continue

            if not line.strip():
                # git separates a header from its numstat block with a blank
                # line, so only a blank after change lines ends the commit
                if current is not None and current.changes_seen:
                    commit = self._close(current)
                    current = None
                    if commit is not None:
                        yield commit
                continue

            header = self.parse_header(line)
            if header is None:
                self.skipped_lines += 1
                logger.debug("Ignoring malformed log line: %r", line)
                continue

            if current is not None:
                commit = self._close(current)
                if commit is not None:
                    yield commit

            current = self._open(header)

        if current is not None:
            commit = self._close(current)
            if commit is not None:
                yield commit

    def parse_all(self, text: str) -> list[Commit]:
        """Parse the whole text into a list."""
        return list(self.parse(text))

    def _open(self, header: ParsedHeader) -> _OpenCommit:
        duplicate = header.sha in self.seen_hashes
        if duplicate:
            self.duplicates += 1
            logger.debug("Skipping duplicate commit %s", header.sha)
        else:
            self.seen_hashes.add(header.sha)
        return _OpenCommit(header=header, duplicate=duplicate)

    def _close(self, open_commit: _OpenCommit) -> Optional[Commit]:
        if open_commit.duplicate:
            return None

        header = open_commit.header
        return Commit(
            sha=header.sha,
            author=header.author,
            date=header.date,
            message=header.subject,
            period_key=self._period_key(header.date),
            additions=open_commit.additions,
            deletions=open_commit.deletions,
            is_merge=header.sha in self.merge_hashes,
        )
