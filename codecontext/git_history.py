"""Commit history filtering and time-period parsing."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

_PERIODS: dict[str, tuple[int, int, int]] = {
    "1y": (-1, 0, 0),
    "1year": (-1, 0, 0),
    "1 year": (-1, 0, 0),
    "6m": (0, -6, 0),
    "6month": (0, -6, 0),
    "6 months": (0, -6, 0),
    "3m": (0, -3, 0),
    "3month": (0, -3, 0),
    "3 months": (0, -3, 0),
    "1m": (0, -1, 0),
    "1month": (0, -1, 0),
    "1 month": (0, -1, 0),
    "30d": (0, 0, -30),
    "30days": (0, 0, -30),
    "30 days": (0, 0, -30),
    "7d": (0, 0, -7),
    "7days": (0, 0, -7),
    "7 days": (0, 0, -7),
    "1d": (0, 0, -1),
    "1day": (0, 0, -1),
    "1 day": (0, 0, -1),
}


@dataclass
class CommitInfo:
    """One commit with the files it touched."""

    hash: str = ""
    author: str = ""
    email: str = ""
    date: datetime | None = None
    message: str = ""
    files: list[str] = field(default_factory=list)


@dataclass
class TimeRange:
    """Span between the oldest and the newest commit considered."""

    start: datetime | None = None
    end: datetime | None = None


@dataclass
class GitHistory:
    """Filtered commits, newest first, with their contributors."""

    commits: list[CommitInfo] = field(default_factory=list)
    total_commits: int = 0
    time_range: TimeRange = field(default_factory=TimeRange)
    contributors: list[str] = field(default_factory=list)


def _add_date(moment: datetime, years: int, months: int, days: int) -> datetime:
    """Calendar arithmetic where an overflowing day rolls into the next month."""
    total = moment.year * 12 + (moment.month - 1) + years * 12 + months
    year, month_index = divmod(total, 12)
    base = moment.replace(year=year, month=month_index + 1, day=1)
    return base + timedelta(days=moment.day - 1 + days)


def parse_time_period(period: str, now: datetime | None = None) -> datetime:
    """Start of the named period ending at ``now``; unknown names raise ValueError."""
    try:
        years, months, days = _PERIODS[period]
    except KeyError:
        raise ValueError(f"不支持的时间周期: {period}") from None
    if now is None:
        now = datetime.now().astimezone()
    return _add_date(now, years, months, days)


def _newest_first(commits: Iterable[CommitInfo]) -> list[CommitInfo]:
    return sorted(commits, key=lambda c: c.date, reverse=True)


def build_history(
    commits: Iterable[CommitInfo],
    count: int = 0,
    since: datetime | None = None,
    until: datetime | None = None,
    authors: Sequence[str] | None = None,
) -> GitHistory:
    """Filter commits by time and author, keep at most ``count`` (0 = all), newest first."""
    selected: list[CommitInfo] = []
    for commit in commits:
        if since is not None and commit.date < since:
            continue
        if until is not None and commit.date > until:
            continue
        if authors and commit.author not in authors:
            continue
        selected.append(commit)
        if count > 0 and len(selected) >= count:
            break

    ordered = _newest_first(selected)
    time_range = TimeRange()
    if ordered:
        time_range = TimeRange(start=ordered[-1].date, end=ordered[0].date)
    return GitHistory(
        commits=ordered,
        total_commits=len(ordered),
        time_range=time_range,
        contributors=sorted({c.author for c in ordered}),
    )