"""Tests for GitRepository class."""

import os
import shutil
import subprocess
from datetime import date

import pytest

from commitboard.analysis import ContributionAnalyzer
from commitboard.git import GitRepository, GitRepositoryError, discover_repositories
from commitboard.periods import DateRange


pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def git(repo_path, *args, when=None):
    """Run a git command, optionally with fixed author and committer dates.

    A bare date commits at noon UTC; a full timestamp without an offset is
    taken in local time.
    """
    env = dict(os.environ)
    if when:
        stamp = when if "T" in when else f"{when}T12:00:00+0000"
        env["GIT_AUTHOR_DATE"] = stamp
        env["GIT_COMMITTER_DATE"] = stamp
    return subprocess.run(
        ["git", *args],
        cwd=repo_path,
        env=env,
        capture_output=True,
        check=True,
        text=True,
    )


def init_repo(repo_path):
    repo_path.mkdir()
    git(repo_path, "init")
    git(repo_path, "config", "user.email", "test@example.com")
    git(repo_path, "config", "user.name", "Test Author")
    git(repo_path, "config", "commit.gpgsign", "false")


def commit_all(repo_path, message, when):
    git(repo_path, "add", ".")
    git(repo_path, "commit", "-m", message, when=when)


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a temporary git repository with dated commits and a merge."""
    repo_path = tmp_path / "test_repo"
    init_repo(repo_path)

    (repo_path / "README.md").write_text("# Test Repository\n")
    commit_all(repo_path, "chore: initial commit", "2024-01-10")
    git(repo_path, "branch", "-M", "main")

    (repo_path / "main.py").write_text("def main():\n    print('Hello')\n")
    commit_all(repo_path, "feat: add main | entry point", "2024-01-20")

    (repo_path / "logo.bin").write_bytes(b"\x00\x01\x02\x00binary")
    commit_all(repo_path, "chore: add logo", "2024-02-05")

    git(repo_path, "checkout", "-b", "feature")
    (repo_path / "feature.py").write_text("a = 1\nb = 2\nc = 3\n")
    commit_all(repo_path, "feat: add feature", "2024-02-10")

    git(repo_path, "checkout", "main")
    (repo_path / "main.py").write_text("def main():\n    print('Hello, World!')\n")
    commit_all(repo_path, "fix: update greeting", "2024-02-12")

    git(
        repo_path,
        "merge",
        "--no-ff",
        "feature",
        "-m",
        "Merge branch 'feature'",
        when="2024-02-15",
    )

    return repo_path


@pytest.fixture
def git_repo(temp_git_repo):
    """Create a GitRepository instance from temp repo."""
    return GitRepository(str(temp_git_repo))


class TestGitRepositoryInit:
    """Tests for GitRepository initialization."""

    def test_valid_repository(self, temp_git_repo):
        """Can initialize with valid git repository."""
        repo = GitRepository(str(temp_git_repo))
        assert repo.path == temp_git_repo

    def test_invalid_repository(self, tmp_path):
        """Raises error for non-git directory."""
        with pytest.raises(GitRepositoryError) as exc_info:
            GitRepository(str(tmp_path))

        assert "Not a git repository" in str(exc_info.value)

    def test_missing_path(self, tmp_path):
        """Raises error for a path that does not exist."""
        with pytest.raises(GitRepositoryError):
            GitRepository(str(tmp_path / "missing"))

    def test_repository_name(self, git_repo, temp_git_repo):
        """Repository name is derived from directory."""
        assert git_repo.name == temp_git_repo.name


class TestLogText:
    """Tests for reading the numstat log."""

    def test_headers_present(self, git_repo):
        """Each commit produces a header line."""
        text = git_repo.log_text()
        headers = [line for line in text.splitlines() if line.count("|") >= 3]

        assert len(headers) == 6
        assert any("|2024-01-20|Test Author|feat: add main | entry point" in h for h in headers)

    def test_binary_marker(self, git_repo):
        """Binary files are reported with '-' counts."""
        text = git_repo.log_text()

        assert "-\t-\tlogo.bin" in text

    def test_since_filter(self, git_repo):
        """Only commits on or after since are included."""
        text = git_repo.log_text(since=date(2024, 2, 1))
        headers = [line for line in text.splitlines() if line.count("|") >= 3]

        assert len(headers) == 4

    def test_range_covers_whole_days(self, git_repo):
        """Both ends of the range are sent to git as full days."""
        args = git_repo._range_args(date(2024, 5, 10), date(2024, 5, 10), "main")

        assert args == [
            "--since=2024-05-10 00:00:00",
            "--until=2024-05-10 23:59:59",
            "main",
        ]

    def test_empty_repository_fails(self, tmp_path):
        """A repository without commits cannot produce a log."""
        repo_path = tmp_path / "empty"
        init_repo(repo_path)

        with pytest.raises(GitRepositoryError):
            GitRepository(str(repo_path)).log_text()

    def test_merge_hashes(self, git_repo):
        """The merge commit is reported."""
        merges = git_repo.merge_hashes()
        text = git_repo.log_text()
        merge_header = next(line for line in text.splitlines() if "Merge branch" in line)

        assert merges == {merge_header.split("|")[0]}


class TestAnalyzeRepository:
    """End-to-end analysis of a real repository."""

    def test_totals(self, temp_git_repo):
        """Line counts and commits are aggregated from git output."""
        result = ContributionAnalyzer().analyze_repository(temp_git_repo)
        author = result.authors["Test Author"]

        assert author.total_commits == 6
        assert author.total_additions == 1 + 2 + 3 + 1
        assert author.total_deletions == 1
        assert author.merge_commits == 1

    def test_periods(self, temp_git_repo):
        """Commits are bucketed by month of the author date."""
        result = ContributionAnalyzer().analyze_repository(temp_git_repo)
        author = result.authors["Test Author"]

        assert result.periods == ["2024-01", "2024-02"]
        assert author.periods["2024-01"].commits == 2
        assert author.periods["2024-02"].commits == 4

    def test_subject_with_delimiter(self, temp_git_repo):
        """The full subject survives parsing."""
        result = ContributionAnalyzer().analyze_repository(temp_git_repo)
        messages = result.authors["Test Author"].periods["2024-01"].messages

        assert "feat: add main | entry point" in messages

    def test_single_day_range_includes_early_and_late_commits(self, tmp_path):
        """Commits just after midnight and just before midnight are both kept."""
        repo_path = tmp_path / "one_day"
        init_repo(repo_path)

        (repo_path / "a.txt").write_text("a\n")
        commit_all(repo_path, "early", "2024-05-10T00:30:00")
        (repo_path / "b.txt").write_text("b\n")
        commit_all(repo_path, "late", "2024-05-10T23:30:00")
        (repo_path / "c.txt").write_text("c\n")
        commit_all(repo_path, "next day", "2024-05-11T00:30:00")

        result = ContributionAnalyzer().analyze_repository(
            repo_path, date_range=DateRange(date(2024, 5, 10), date(2024, 5, 10))
        )

        assert result.total_commits == 2
        assert result.authors["Test Author"].periods["2024-05"].messages == [
            "late",
            "early",
        ]


class TestDiscoverRepositories:
    """Tests for discover_repositories."""

    def test_lists_subdirectories(self, tmp_path):
        """Only directories are returned, sorted by name."""
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        (tmp_path / "notes.txt").write_text("x")

        assert [p.name for p in discover_repositories(str(tmp_path))] == ["a", "b"]

    def test_missing_folder(self, tmp_path):
        """A folder that cannot be listed gives no repositories."""
        assert discover_repositories(str(tmp_path / "missing")) == []
