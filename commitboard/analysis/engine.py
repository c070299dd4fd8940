"""Run the full analysis for one or many repositories."""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from commitboard.analysis.aggregator import PeriodAggregator
from commitboard.analysis.metrics import MetricsCalculator
from commitboard.analysis.ranking import BestPerformerSelector, Ranker
from commitboard.config import DEFAULT_PERIOD, DEFAULT_TIE_BREAK, DEFAULT_TOP_N
from commitboard.git.parser import LogStreamParser
from commitboard.git.repository import (
    GitRepository,
    GitRepositoryError,
    discover_repositories,
)
from commitboard.models import AnalysisResult, RepositoryFailure, RepositoryResult
from commitboard.periods import (
    DateRange,
    PeriodStrategy,
    standard_period_selectors,
)

logger = logging.getLogger(__name__)


class ContributionAnalyzer:
    """Parse, aggregate, score and rank the history of a single repository.

    Each call starts from scratch; nothing is shared between runs.
    """

    def __init__(
        self,
        period_strategy: Union[str, PeriodStrategy, None] = DEFAULT_PERIOD,
        top_n: int = DEFAULT_TOP_N,
        tie_break: str = DEFAULT_TIE_BREAK,
    ):
        """Initialize the analyzer.

        Args:
            period_strategy: "monthly", "weekly", "daily" or a callable
            top_n: Number of best performers to report
            tie_break: Best performer tie-break policy
        """
        self.period_strategy = period_strategy
        self.selector = BestPerformerSelector(top_n=top_n, tie_break=tie_break)

    def analyze_text(
        self,
        text: str,
        name: str,
        merge_hashes: Optional[Iterable[str]] = None,
        path: Optional[str] = None,
        date_range: Optional[DateRange] = None,
    ) -> RepositoryResult:
        """Analyze log text that has already been captured.

        Args:
            text: Output of the numstat log command
            name: Repository name used in the result
            merge_hashes: Hashes of merge commits, if known
            path: Repository path for the result
            date_range: Range the log was captured for

        Returns:
            RepositoryResult with metrics, rankings and best performers
        """
        parser = LogStreamParser(self.period_strategy, merge_hashes=merge_hashes)
        aggregator = PeriodAggregator().add_all(parser.parse(text))

        metrics = MetricsCalculator(aggregator).calculate()
        periods = aggregator.periods
        ranker = Ranker(metrics)

        rankings = ranker.rank_selectors(standard_period_selectors(periods))
        for period in periods:
            rankings.setdefault(period, ranker.rank_period(period))

        if parser.duplicates:
            logger.debug("%s: skipped %d duplicate commits", name, parser.duplicates)

        return RepositoryResult(
            name=name,
            path=path,
            since=date_range.since if date_range else None,
            until=date_range.until if date_range else None,
            authors=metrics,
            periods=periods,
            rankings=rankings,
            best_performers=self.selector.select(metrics),
            duplicates_skipped=parser.duplicates,
            lines_skipped=parser.skipped_lines,
        )

    def analyze_repository(
        self,
        path: Union[str, Path],
        date_range: Optional[DateRange] = None,
        branch: Optional[str] = None,
    ) -> RepositoryResult:
        """Read a repository's log with git and analyze it.

        Raises:
            GitRepositoryError: If the log cannot be obtained
        """
        repo = GitRepository(str(path))
        since = date_range.since if date_range else None
        until = date_range.until if date_range else None

        logger.info("Analyzing repository: %s", repo.name)
        text = repo.log_text(since=since, until=until, branch=branch)
        merges = repo.merge_hashes(since=since, until=until, branch=branch)

        result = self.analyze_text(
            text,
            name=repo.name,
            merge_hashes=merges,
            path=str(path),
            date_range=date_range,
        )
        if not result.authors:
            logger.info("No commits found for repository: %s", repo.name)
        return result


class MultiRepoMerger:
    """Analyze a batch of repositories, keeping results per repository.

    Authors with the same name in different repositories are not merged.
    A repository whose log cannot be read is recorded in the diagnostics
    and the batch carries on.
    """

    def __init__(self, analyzer: Optional[ContributionAnalyzer] = None):
        self.analyzer = analyzer or ContributionAnalyzer()

    def analyze_many(
        self,
        paths: Iterable[Union[str, Path]],
        date_range: Optional[DateRange] = None,
        branch: Optional[str] = None,
    ) -> AnalysisResult:
        """Analyze each repository in turn.

        Args:
            paths: Repository paths
            date_range: Range applied to every repository
            branch: Branch to read in every repository

        Returns:
            AnalysisResult keyed by repository name
        """
        result = AnalysisResult(
            since=date_range.since if date_range else None,
            until=date_range.until if date_range else None,
        )

        for path in paths:
            path = Path(path)
            try:
                repo_result = self.analyzer.analyze_repository(
                    path, date_range=date_range, branch=branch
                )
            except GitRepositoryError as e:
                logger.warning("Skipping repository %s: %s", path.name, e)
                result.diagnostics.append(
                    RepositoryFailure(name=path.name, path=str(path), reason=str(e))
                )
                continue

            key = repo_result.name
            if key in result.repositories:
                key = str(path)
            result.repositories[key] = repo_result

        return result

    def analyze_folder(
        self,
        base_path: Union[str, Path],
        date_range: Optional[DateRange] = None,
        branch: Optional[str] = None,
    ) -> AnalysisResult:
        """Analyze every subdirectory of a folder."""
        paths = discover_repositories(str(base_path))
        if not paths:
            logger.info("No repositories found in %s", base_path)
        return self.analyze_many(paths, date_range=date_range, branch=branch)
