"""Leaderboards and best performer selection."""

from typing import Callable, Optional

from commitboard.config import (
    DEFAULT_TIE_BREAK,
    DEFAULT_TOP_N,
    OVERALL,
    RANKING_METRICS,
    TOP_PERIODS_COUNT,
)
from commitboard.models import (
    AuthorMetrics,
    BestPerformer,
    ImpactfulCommit,
    PeriodMetrics,
    Ranking,
    RankingEntry,
)


class Ranker:
    """Order authors by a metric within a period.

    Equal values keep the order in which authors first appeared in the log.
    """

    def __init__(self, metrics: dict[str, AuthorMetrics]):
        """Initialize the ranker.

        Args:
            metrics: Author metrics of a single repository
        """
        self.metrics = metrics
        self._ordered = sorted(metrics.values(), key=lambda m: m.first_seen)

    def rank(self, metric: str, period: str = OVERALL) -> Ranking:
        """Build the leaderboard for one metric.

        Args:
            metric: One of RANKING_METRICS
            period: A period key, or "overall" for all periods combined

        Returns:
            Ranking sorted by value, highest first

        Raises:
            ValueError: If the metric is unknown
        """
        if metric not in RANKING_METRICS:
            raise ValueError(f"Unknown metric: {metric}")

        entries = []
        for author_metrics in self._ordered:
            if period == OVERALL:
                value = author_metrics.value(metric)
            else:
                period_metrics = author_metrics.periods.get(period)
                if period_metrics is None:
                    continue
                value = period_metrics.value(metric)
            entries.append(RankingEntry(author=author_metrics.author, value=value or 0))

        # sorted() is stable, also with reverse=True
        entries = sorted(entries, key=lambda e: e.value, reverse=True)
        return Ranking(metric=metric, period=period, entries=entries)

    def rank_period(self, period: str = OVERALL) -> dict[str, Ranking]:
        """Leaderboards for every metric in one period."""
        return {metric: self.rank(metric, period) for metric in RANKING_METRICS}

    def rank_selectors(self, selectors: dict[str, str]) -> dict[str, dict[str, Ranking]]:
        """Leaderboards for named period selectors (e.g. current, overall)."""
        return {name: self.rank_period(period) for name, period in selectors.items()}


# Secondary sort keys applied after combined score
TIE_BREAKS: dict[str, Callable[[AuthorMetrics], tuple]] = {
    "by_commits": lambda m: (m.combined_score, m.total_commits),
    "by_changes": lambda m: (m.combined_score, m.total_changes),
    "none": lambda m: (m.combined_score,),
}


def most_impactful_commit(author_metrics: AuthorMetrics) -> Optional[ImpactfulCommit]:
    """The author's largest commit across all periods.

    Returns None when none of the author's commits changed any lines.
    """
    best = None
    for period in sorted(author_metrics.periods):
        candidate = author_metrics.periods[period].most_impactful_commit
        if candidate is None:
            continue
        if best is None or candidate.total_changes > best.total_changes:
            best = candidate

    if best is None or best.total_changes == 0:
        return None
    return best


def top_periods(
    author_metrics: AuthorMetrics, count: int = TOP_PERIODS_COUNT
) -> list[tuple[str, PeriodMetrics]]:
    """The author's periods with the highest impact score."""
    chronological = sorted(author_metrics.periods.items())
    ranked = sorted(chronological, key=lambda item: item[1].impact_score, reverse=True)
    return ranked[:count]


class BestPerformerSelector:
    """Pick the top authors by combined score."""

    def __init__(
        self,
        top_n: int = DEFAULT_TOP_N,
        tie_break: str = DEFAULT_TIE_BREAK,
        periods_per_performer: int = TOP_PERIODS_COUNT,
    ):
        """Initialize the selector.

        Args:
            top_n: Maximum number of performers returned
            tie_break: Name of the secondary ordering, see TIE_BREAKS

        Raises:
            ValueError: If top_n is negative or tie_break is unknown
        """
        if top_n < 0:
            raise ValueError("top_n must not be negative")
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"Unknown tie-break policy: {tie_break}")
        self.top_n = top_n
        self.tie_break = tie_break
        self.periods_per_performer = periods_per_performer

    def select(self, metrics: dict[str, AuthorMetrics]) -> list[BestPerformer]:
        """Return up to top_n performers, best first."""
        ordered = sorted(metrics.values(), key=lambda m: m.first_seen)
        ranked = sorted(ordered, key=TIE_BREAKS[self.tie_break], reverse=True)

        return [self._performer(m) for m in ranked[: self.top_n]]

    def _performer(self, author_metrics: AuthorMetrics) -> BestPerformer:
        return BestPerformer(
            author=author_metrics.author,
            combined_score=author_metrics.combined_score,
            total_commits=author_metrics.total_commits,
            total_additions=author_metrics.total_additions,
            total_deletions=author_metrics.total_deletions,
            overall_impact_score=author_metrics.overall_impact_score,
            overall_productivity=author_metrics.overall_productivity,
            most_impactful_commit=most_impactful_commit(author_metrics),
            top_periods=top_periods(author_metrics, self.periods_per_performer),
        )
