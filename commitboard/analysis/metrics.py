"""Impact and productivity scores."""

from datetime import date

from commitboard.analysis.aggregator import PeriodAggregator
from commitboard.config import NEUTRAL_IMPACT_SCORE
from commitboard.models import AuthorMetrics, AuthorPeriodStats, PeriodMetrics


def impact_score(additions: int, deletions: int) -> float:
    """Score the balance of added versus deleted lines on a 0-100 scale.

    Pure additions score 100, pure deletions 0. No changes at all is
    neutral (50).
    """
    total = additions + deletions
    if total == 0:
        return NEUTRAL_IMPACT_SCORE

    ratio = (additions - deletions) / total
    return min(max((ratio + 1) * 50, 0.0), 100.0)


def productivity(additions: int, deletions: int, commits: int) -> float:
    """Average lines changed per commit."""
    if commits == 0:
        return 0.0
    return (additions + deletions) / commits


def average_interval_days(commit_dates: list[tuple[date, bool]]) -> float:
    """Mean number of days between consecutive non-merge commits.

    Args:
        commit_dates: (date, is_merge) pairs in any order

    Returns:
        Average gap in days, or 0.0 with fewer than 2 non-merge commits
    """
    days = sorted(day for day, is_merge in commit_dates if not is_merge)
    if len(days) < 2:
        return 0.0

    total_days = sum((days[i] - days[i - 1]).days for i in range(1, len(days)))
    return total_days / (len(days) - 1)


class MetricsCalculator:
    """Derive per-period and overall metrics from a finished aggregation.

    Calling ``calculate`` repeatedly on the same aggregator returns equal
    results; the aggregator is never modified.
    """

    def __init__(self, aggregator: PeriodAggregator):
        """Initialize the calculator.

        Args:
            aggregator: Aggregator holding every bucket of the run
        """
        self.aggregator = aggregator

    @staticmethod
    def period_metrics(bucket: AuthorPeriodStats) -> PeriodMetrics:
        """Metrics for a single (author, period) bucket."""
        return PeriodMetrics(
            commits=bucket.commit_count,
            additions=bucket.total_additions,
            deletions=bucket.total_deletions,
            impact_score=impact_score(bucket.total_additions, bucket.total_deletions),
            productivity=productivity(
                bucket.total_additions, bucket.total_deletions, bucket.commit_count
            ),
            most_impactful_commit=bucket.most_impactful_commit,
            messages=list(bucket.messages),
        )

    def author_metrics(self, author: str) -> AuthorMetrics:
        """Roll up all of an author's buckets."""
        metrics = AuthorMetrics(
            author=author, first_seen=self.aggregator.first_seen(author)
        )

        for bucket in self.aggregator.buckets_for(author):
            metrics.total_commits += bucket.commit_count
            metrics.total_additions += bucket.total_additions
            metrics.total_deletions += bucket.total_deletions
            metrics.periods[bucket.period_key] = self.period_metrics(bucket)

        metrics.overall_impact_score = impact_score(
            metrics.total_additions, metrics.total_deletions
        )
        metrics.overall_productivity = productivity(
            metrics.total_additions, metrics.total_deletions, metrics.total_commits
        )

        commit_dates = self.aggregator.commit_dates(author)
        metrics.merge_commits = sum(1 for _, is_merge in commit_dates if is_merge)
        metrics.avg_commit_interval_days = average_interval_days(commit_dates)
        return metrics

    def calculate(self) -> dict[str, AuthorMetrics]:
        """Metrics for every author, in first-seen order."""
        return {
            author: self.author_metrics(author) for author in self.aggregator.authors
        }
