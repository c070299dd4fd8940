"""Period bucketing strategies and date ranges."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional, Union

from commitboard.config import OVERALL

PeriodStrategy = Callable[[date], str]


def monthly(day: date) -> str:
    """Bucket by calendar month (YYYY-MM)."""
    return day.strftime("%Y-%m")


def weekly(day: date) -> str:
    """Bucket by ISO week, keyed by the week's Monday (YYYY-MM-DD)."""
    monday = day - timedelta(days=day.weekday())
    return monday.isoformat()


def daily(day: date) -> str:
    """Bucket by day (YYYY-MM-DD)."""
    return day.isoformat()


PERIOD_STRATEGIES: dict[str, PeriodStrategy] = {
    "monthly": monthly,
    "weekly": weekly,
    "daily": daily,
}


def resolve_period_strategy(
    strategy: Union[str, PeriodStrategy, None],
) -> PeriodStrategy:
    """Turn a strategy name or callable into a period key function.

    Args:
        strategy: One of the PERIOD_STRATEGIES names, a callable mapping a
            date to a chronologically sortable key, or None for monthly

    Returns:
        Callable producing period keys

    Raises:
        ValueError: If the name is not a known strategy
    """
    if strategy is None:
        return monthly
    if callable(strategy):
        return strategy
    try:
        return PERIOD_STRATEGIES[strategy]
    except KeyError:
        choices = ", ".join(PERIOD_STRATEGIES)
        raise ValueError(f"Unknown period strategy: {strategy} (expected {choices})")


def standard_period_selectors(periods: list[str]) -> dict[str, str]:
    """Named period selectors used for default leaderboards.

    The latest period is "current", the one before it "previous", and the
    period three back from the latest is "quarter". "overall" is always
    present.
    """
    ordered = sorted(periods)
    selectors = {}
    if ordered:
        selectors["current"] = ordered[-1]
    if len(ordered) > 1:
        selectors["previous"] = ordered[-2]
    if len(ordered) >= 3:
        selectors["quarter"] = ordered[-3]
    selectors[OVERALL] = OVERALL
    return selectors


def subtract_months(day: date, months: int) -> date:
    """Move a date back by whole months, clamping to the month's last day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range handed to git log as --since/--until."""

    since: date
    until: date

    def __post_init__(self):
        if self.since > self.until:
            raise ValueError(
                f"Start date {self.since.isoformat()} is after end date "
                f"{self.until.isoformat()}"
            )

    @classmethod
    def months_back(cls, months: int, today: Optional[date] = None) -> "DateRange":
        """Range covering the last N months up to today."""
        if months < 0:
            raise ValueError("months must not be negative")
        end = today or date.today()
        return cls(since=subtract_months(end, months), until=end)

    @property
    def label(self) -> str:
        return f"{self.since.isoformat()} to {self.until.isoformat()}"
