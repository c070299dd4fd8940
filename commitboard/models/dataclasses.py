"""Data models for contribution analysis."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Commit:
    """A commit parsed from the log stream, with its accumulated line counts."""

    sha: str
    author: str
    date: date
    message: str
    period_key: str
    additions: int = 0
    deletions: int = 0
    is_merge: bool = False

    @property
    def total_changes(self) -> int:
        """Total lines changed (added + deleted)."""
        return self.additions + self.deletions


@dataclass(frozen=True)
class ImpactfulCommit:
    """Snapshot of a commit reported as the most impactful one."""

    sha: str
    message: str
    date: date
    additions: int
    deletions: int

    @classmethod
    def from_commit(cls, commit: Commit) -> "ImpactfulCommit":
        return cls(
            sha=commit.sha,
            message=commit.message,
            date=commit.date,
            additions=commit.additions,
            deletions=commit.deletions,
        )

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions

    def to_dict(self) -> dict:
        return {
            "sha": self.sha,
            "message": self.message,
            "date": self.date.isoformat(),
            "additions": self.additions,
            "deletions": self.deletions,
        }


@dataclass
class AuthorPeriodStats:
    """Running totals for one (author, period) bucket.

    Buckets only ever grow: every folded commit increments the commit
    count, adds its line counts and appends its message.
    """

    author: str
    period_key: str
    commit_count: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    messages: list[str] = field(default_factory=list)
    most_impactful_commit: Optional[ImpactfulCommit] = None

    @property
    def total_changes(self) -> int:
        return self.total_additions + self.total_deletions

    def add_commit(self, commit: Commit) -> None:
        """Fold a commit into the bucket."""
        self.commit_count += 1
        self.total_additions += commit.additions
        self.total_deletions += commit.deletions
        self.messages.append(commit.message)

        # Ties keep the earlier commit
        best = self.most_impactful_commit
        if best is None or commit.total_changes > best.total_changes:
            self.most_impactful_commit = ImpactfulCommit.from_commit(commit)


@dataclass
class PeriodMetrics:
    """Derived figures for one author in one period."""

    commits: int
    additions: int
    deletions: int
    impact_score: float
    productivity: float
    most_impactful_commit: Optional[ImpactfulCommit] = None
    messages: list[str] = field(default_factory=list)

    def value(self, metric: str) -> float:
        """Look up a ranking metric by name."""
        return {
            "commits": self.commits,
            "additions": self.additions,
            "deletions": self.deletions,
            "impactScore": self.impact_score,
            "productivity": self.productivity,
        }.get(metric, 0)

    def to_dict(self) -> dict:
        return {
            "commits": self.commits,
            "additions": self.additions,
            "deletions": self.deletions,
            "impactScore": self.impact_score,
            "productivity": self.productivity,
            "mostImpactfulCommit": (
                self.most_impactful_commit.to_dict()
                if self.most_impactful_commit
                else None
            ),
            "messages": list(self.messages),
        }


@dataclass
class AuthorMetrics:
    """Per-author rollup across all periods of one analysis run."""

    author: str
    first_seen: int = 0
    total_commits: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    periods: dict[str, PeriodMetrics] = field(default_factory=dict)
    overall_impact_score: float = 50.0
    overall_productivity: float = 0.0
    merge_commits: int = 0
    avg_commit_interval_days: float = 0.0

    @property
    def total_changes(self) -> int:
        """Total code churn (additions + deletions)."""
        return self.total_additions + self.total_deletions

    @property
    def combined_score(self) -> float:
        """Average of overall impact score and overall productivity."""
        return (self.overall_impact_score + self.overall_productivity) / 2

    def value(self, metric: str) -> float:
        """Overall value of a ranking metric."""
        return {
            "commits": self.total_commits,
            "additions": self.total_additions,
            "deletions": self.total_deletions,
            "impactScore": self.overall_impact_score,
            "productivity": self.overall_productivity,
        }.get(metric, 0)

    def to_dict(self) -> dict:
        return {
            "author": self.author,
            "totalCommits": self.total_commits,
            "totalAdditions": self.total_additions,
            "totalDeletions": self.total_deletions,
            "overallImpactScore": self.overall_impact_score,
            "overallProductivity": self.overall_productivity,
            "combinedScore": self.combined_score,
            "mergeCommits": self.merge_commits,
            "avgCommitIntervalDays": self.avg_commit_interval_days,
            "perPeriod": {key: pm.to_dict() for key, pm in self.periods.items()},
        }


@dataclass(frozen=True)
class RankingEntry:
    """One line of a leaderboard."""

    author: str
    value: float


@dataclass
class Ranking:
    """Leaderboard for one metric in one period, highest value first."""

    metric: str
    period: str
    entries: list[RankingEntry] = field(default_factory=list)

    @property
    def authors(self) -> list[str]:
        return [entry.author for entry in self.entries]

    def to_dict(self) -> list[dict]:
        return [{"author": e.author, "value": e.value} for e in self.entries]


@dataclass
class BestPerformer:
    """An author selected by combined score."""

    author: str
    combined_score: float
    total_commits: int
    total_additions: int
    total_deletions: int
    overall_impact_score: float
    overall_productivity: float
    most_impactful_commit: Optional[ImpactfulCommit] = None
    top_periods: list[tuple[str, PeriodMetrics]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "author": self.author,
            "combinedScore": self.combined_score,
            "totalCommits": self.total_commits,
            "totalAdditions": self.total_additions,
            "totalDeletions": self.total_deletions,
            "overallImpactScore": self.overall_impact_score,
            "overallProductivity": self.overall_productivity,
            "mostImpactfulCommit": (
                self.most_impactful_commit.to_dict()
                if self.most_impactful_commit
                else None
            ),
            "topPeriods": [
                {
                    "period": key,
                    "commits": pm.commits,
                    "additions": pm.additions,
                    "deletions": pm.deletions,
                    "impactScore": pm.impact_score,
                }
                for key, pm in self.top_periods
            ],
        }


@dataclass
class RepositoryResult:
    """Everything computed for a single repository."""

    name: str
    authors: dict[str, AuthorMetrics] = field(default_factory=dict)
    periods: list[str] = field(default_factory=list)
    rankings: dict[str, dict[str, Ranking]] = field(default_factory=dict)
    best_performers: list[BestPerformer] = field(default_factory=list)
    path: Optional[str] = None
    since: Optional[date] = None
    until: Optional[date] = None
    duplicates_skipped: int = 0
    lines_skipped: int = 0

    @property
    def total_commits(self) -> int:
        return sum(m.total_commits for m in self.authors.values())

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "since": self.since.isoformat() if self.since else None,
            "until": self.until.isoformat() if self.until else None,
            "periods": list(self.periods),
            "authors": {name: m.to_dict() for name, m in self.authors.items()},
            "rankings": {
                period: {metric: r.to_dict() for metric, r in by_metric.items()}
                for period, by_metric in self.rankings.items()
            },
            "bestPerformers": [p.to_dict() for p in self.best_performers],
            "duplicatesSkipped": self.duplicates_skipped,
            "linesSkipped": self.lines_skipped,
        }


@dataclass(frozen=True)
class RepositoryFailure:
    """A repository that was skipped because its log could not be read."""

    name: str
    path: str
    reason: str


@dataclass
class AnalysisResult:
    """Repository-scoped results of one batch run."""

    repositories: dict[str, RepositoryResult] = field(default_factory=dict)
    diagnostics: list[RepositoryFailure] = field(default_factory=list)
    since: Optional[date] = None
    until: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "since": self.since.isoformat() if self.since else None,
            "until": self.until.isoformat() if self.until else None,
            "repositories": {
                name: result.to_dict() for name, result in self.repositories.items()
            },
            "diagnostics": [
                {"name": f.name, "path": f.path, "reason": f.reason}
                for f in self.diagnostics
            ],
        }
