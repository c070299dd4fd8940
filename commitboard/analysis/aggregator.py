"""Bucket commits by author and period."""

from datetime import date
from typing import Iterable

from commitboard.models import AuthorPeriodStats, Commit


class PeriodAggregator:
    """Accumulate running totals per (author, period) bucket.

    Commits are folded in arrival order. Authors and periods remember the
    order in which they were first seen, which later serves as the stable
    tie-break for leaderboards.
    """

    def __init__(self):
        self.buckets: dict[tuple[str, str], AuthorPeriodStats] = {}
        self.authors: list[str] = []
        self._author_index: dict[str, int] = {}
        self._periods_by_author: dict[str, list[str]] = {}
        self._dates_by_author: dict[str, list[tuple[date, bool]]] = {}

    def add(self, commit: Commit) -> AuthorPeriodStats:
        """Fold one commit into its bucket.

        Args:
            commit: Fully parsed commit

        Returns:
            The bucket the commit landed in
        """
        author = commit.author
        if author not in self._author_index:
            self._author_index[author] = len(self.authors)
            self.authors.append(author)
            self._periods_by_author[author] = []
            self._dates_by_author[author] = []

        key = (author, commit.period_key)
        bucket = self.buckets.get(key)
        if bucket is None:
            bucket = AuthorPeriodStats(author=author, period_key=commit.period_key)
            self.buckets[key] = bucket
            self._periods_by_author[author].append(commit.period_key)

        bucket.add_commit(commit)
        self._dates_by_author[author].append((commit.date, commit.is_merge))
        return bucket

    def add_all(self, commits: Iterable[Commit]) -> "PeriodAggregator":
        for commit in commits:
            self.add(commit)
        return self

    def first_seen(self, author: str) -> int:
        """Position of the author in encounter order."""
        return self._author_index[author]

    def buckets_for(self, author: str) -> list[AuthorPeriodStats]:
        """An author's buckets in chronological period order."""
        periods = sorted(self._periods_by_author.get(author, []))
        return [self.buckets[(author, period)] for period in periods]

    def commit_dates(self, author: str) -> list[tuple[date, bool]]:
        """(date, is_merge) for each of the author's commits, in log order."""
        return list(self._dates_by_author.get(author, []))

    @property
    def periods(self) -> list[str]:
        """All period keys seen, oldest first."""
        return sorted({period for _, period in self.buckets})

    @property
    def total_additions(self) -> int:
        return sum(b.total_additions for b in self.buckets.values())

    @property
    def total_deletions(self) -> int:
        return sum(b.total_deletions for b in self.buckets.values())
