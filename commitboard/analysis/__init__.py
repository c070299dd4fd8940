"""Analysis module."""

from commitboard.analysis.aggregator import PeriodAggregator
from commitboard.analysis.metrics import (
    MetricsCalculator,
    impact_score,
    productivity,
)
from commitboard.analysis.ranking import BestPerformerSelector, Ranker
from commitboard.analysis.engine import ContributionAnalyzer, MultiRepoMerger

__all__ = [
    "PeriodAggregator",
    "MetricsCalculator",
    "impact_score",
    "productivity",
    "Ranker",
    "BestPerformerSelector",
    "ContributionAnalyzer",
    "MultiRepoMerger",
]
