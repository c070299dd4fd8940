"""Data models for commitboard."""

from commitboard.models.dataclasses import (
    Commit,
    ImpactfulCommit,
    AuthorPeriodStats,
    PeriodMetrics,
    AuthorMetrics,
    RankingEntry,
    Ranking,
    BestPerformer,
    RepositoryResult,
    RepositoryFailure,
    AnalysisResult,
)

__all__ = [
    "Commit",
    "ImpactfulCommit",
    "AuthorPeriodStats",
    "PeriodMetrics",
    "AuthorMetrics",
    "RankingEntry",
    "Ranking",
    "BestPerformer",
    "RepositoryResult",
    "RepositoryFailure",
    "AnalysisResult",
]
