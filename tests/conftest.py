"""Shared pytest fixtures for commitboard tests."""

from datetime import date

import pytest

from commitboard.models import Commit


SAMPLE_LOG = """\
a1b2c3d|2024-03-05|Alice|feat: add login
10\t2\tsrc/login.py

e4f5a6b|2024-03-12|Bob|docs: readme
3\t0\tREADME.md
-\t-\tdocs/logo.png

c7d8e9f|2024-03-20|Alice|fix: drop legacy auth
5\t20\tsrc/legacy.py

0a1b2c3|2024-04-02|Carol|refactor: split | merge helpers
40\t10\tsrc/helpers.py
2\t2\tsrc/util|old.py

d4e5f6a|2024-04-15|Bob|chore: bump version
"""


@pytest.fixture
def sample_log():
    """Log text covering binary files, empty commits and '|' in subjects."""
    return SAMPLE_LOG


def make_commit(
    sha="abc1234",
    author="Alice",
    day=date(2024, 3, 5),
    message="feat: add login",
    additions=0,
    deletions=0,
    merge=False,
):
    """Build a Commit with a monthly period key."""
    return Commit(
        sha=sha,
        author=author,
        date=day,
        message=message,
        period_key=day.strftime("%Y-%m"),
        additions=additions,
        deletions=deletions,
        is_merge=merge,
    )


@pytest.fixture
def sample_commit():
    """Sample commit with known line counts."""
    return make_commit(additions=10, deletions=2)


@pytest.fixture
def sample_commits():
    """Commits by two authors across two months."""
    return [
        make_commit(sha="a1", author="Alice", additions=10, deletions=2),
        make_commit(
            sha="b1",
            author="Bob",
            day=date(2024, 3, 12),
            message="docs: readme",
            additions=3,
        ),
        make_commit(
            sha="a2",
            author="Alice",
            day=date(2024, 3, 20),
            message="fix: drop legacy auth",
            additions=5,
            deletions=20,
        ),
        make_commit(
            sha="b2",
            author="Bob",
            day=date(2024, 4, 15),
            message="chore: bump version",
        ),
    ]


@pytest.fixture
def commit_factory():
    """Factory for Commit objects with sensible defaults."""
    return make_commit
