"""Per-author contribution metrics and leaderboards from git history."""
