"""Git operations module."""

from commitboard.git.repository import (
    GitRepository,
    GitRepositoryError,
    discover_repositories,
)
from commitboard.git.parser import LogStreamParser, ParsedHeader

__all__ = [
    "GitRepository",
    "GitRepositoryError",
    "discover_repositories",
    "LogStreamParser",
    "ParsedHeader",
]
