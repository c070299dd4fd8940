"""Configuration constants for commitboard."""

import os

from dotenv import load_dotenv

# Load .env file from project root
load_dotenv()

# git log header format: hash|date|author|subject (subject may contain "|")
LOG_FORMAT = "%h|%ad|%an|%s"
HEADER_DELIMITER = "|"

# Impact score for a bucket with no line changes
NEUTRAL_IMPACT_SCORE = 50.0

# Metrics available for leaderboards
RANKING_METRICS = [
    "commits",
    "additions",
    "deletions",
    "impactScore",
    "productivity",
]

# Period selector meaning "all periods combined"
OVERALL = "overall"

# Number of best periods reported per best performer
TOP_PERIODS_COUNT = 3

# Defaults that callers may override
DEFAULT_MONTHS_BACK = int(os.getenv("COMMITBOARD_MONTHS_BACK", "3"))
DEFAULT_TOP_N = int(os.getenv("COMMITBOARD_TOP_N", "5"))
DEFAULT_PERIOD = os.getenv("COMMITBOARD_PERIOD", "monthly")
DEFAULT_TIE_BREAK = os.getenv("COMMITBOARD_TIE_BREAK", "by_commits")
