"""GitPython wrapper that produces raw log text for the parser."""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from git import Repo
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError

from commitboard.config import LOG_FORMAT

logger = logging.getLogger(__name__)


class GitRepositoryError(Exception):
    """Exception raised for git repository errors."""

    pass


class GitRepository:
    """Wrapper around GitPython for reading commit logs.

    Only reads history; the repository is never modified.
    """

    def __init__(self, path: str):
        """Initialize the repository wrapper.

        Args:
            path: Path to the git repository

        Raises:
            GitRepositoryError: If path is not a valid git repository
        """
        self.path = Path(path)

        try:
            self._repo = Repo(self.path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise GitRepositoryError(f"Not a git repository: {path}")
        except (GitError, OSError) as e:
            raise GitRepositoryError(f"Could not open {path}: {e}")

    @property
    def name(self) -> str:
        """Get the repository name from the directory."""
        return self.path.name

    def _range_args(
        self,
        since: Optional[date],
        until: Optional[date],
        branch: Optional[str],
    ) -> list[str]:
        # Both ends are whole days
        args = []
        if since:
            args.append(f"--since={since.isoformat()} 00:00:00")
        if until:
            args.append(f"--until={until.isoformat()} 23:59:59")
        if branch:
            args.append(branch)
        return args

    def log_text(
        self,
        since: Optional[date] = None,
        until: Optional[date] = None,
        branch: Optional[str] = None,
    ) -> str:
        """Get the numstat log for a date range.

        Args:
            since: Only include commits on or after this date
            until: Only include commits on or before this date
            branch: Branch to read (default: current branch)

        Returns:
            Raw log text, one header line per commit followed by its
            numstat lines

        Raises:
            GitRepositoryError: If git log fails (e.g. no commits yet) or git
                cannot be run
        """
        try:
            return self._repo.git.log(
                f"--pretty=format:{LOG_FORMAT}",
                "--date=short",
                "--numstat",
                *self._range_args(since, until, branch),
            )
        except (GitError, OSError) as e:
            raise GitRepositoryError(f"Git command failed: {e}")

    def merge_hashes(
        self,
        since: Optional[date] = None,
        until: Optional[date] = None,
        branch: Optional[str] = None,
    ) -> set[str]:
        """Abbreviated hashes of merge commits in the date range."""
        try:
            output = self._repo.git.log(
                "--merges",
                "--pretty=format:%h",
                *self._range_args(since, until, branch),
            )
        except (GitError, OSError) as e:
            raise GitRepositoryError(f"Git command failed: {e}")
        return {line.strip() for line in output.splitlines() if line.strip()}


def discover_repositories(base_path: str) -> list[Path]:
    """List the immediate subdirectories of a folder, sorted by name.

    Subdirectories are candidates only; non-repositories are reported
    when they are opened. An unreadable folder yields no candidates.

    Args:
        base_path: Folder containing one checkout per subdirectory

    Returns:
        Sorted list of subdirectory paths
    """
    try:
        entries = list(Path(base_path).iterdir())
    except OSError as e:
        logger.warning("Could not list repositories in %s: %s", base_path, e)
        return []

    return sorted((p for p in entries if p.is_dir()), key=lambda p: p.name)
