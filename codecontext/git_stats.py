"""Repository activity statistics computed from commit history."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .git_history import CommitInfo, TimeRange, _newest_first, parse_time_period


@dataclass
class CommitStats:
    total_commits: int = 0
    avg_commits_per_day: float = 0.0
    busiest_day: str = ""


@dataclass
class AuthorStat:
    name: str = ""
    commits: int = 0
    percentage: float = 0.0


@dataclass
class FileStat:
    file_path: str = ""
    changes: int = 0
    insertions: int = 0
    deletions: int = 0


@dataclass
class GitStats:
    time_period: TimeRange = field(default_factory=TimeRange)
    commit_stats: CommitStats = field(default_factory=CommitStats)
    author_stats: list[AuthorStat] = field(default_factory=list)
    file_stats: list[FileStat] = field(default_factory=list)
    activity_heatmap: dict[str, int] = field(default_factory=dict)


def _day(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


def calculate_commit_stats(commits: Sequence[CommitInfo]) -> CommitStats:
    """Totals for commits ordered newest first."""
    stats = CommitStats(total_commits=len(commits))
    if not commits:
        return stats
    days = (commits[0].date - commits[-1].date).total_seconds() / 86400
    if days > 0:
        stats.avg_commits_per_day = len(commits) / days
    daily = Counter(_day(c.date) for c in commits)
    # Ties go to the earliest day so the result is stable.
    stats.busiest_day = max(sorted(daily), key=lambda day: daily[day])
    return stats


def _limited(items: list, top: int) -> list:
    return items[:top] if top > 0 else items


def calculate_author_stats(author_commits: Mapping[str, int], top: int = 0) -> list[AuthorStat]:
    """Authors by commit count, most active first, cut to ``top`` when positive."""
    total = sum(author_commits.values())
    stats = [
        AuthorStat(
            name=name,
            commits=count,
            percentage=count * 100.0 / total if total > 0 else 0.0,
        )
        for name, count in sorted(author_commits.items())
    ]
    stats.sort(key=lambda s: s.commits, reverse=True)
    return _limited(stats, top)


def calculate_file_stats(file_changes: Mapping[str, int], top: int = 0) -> list[FileStat]:
    """Files by number of commits touching them, most changed first."""
    stats = [FileStat(file_path=path, changes=changes) for path, changes in sorted(file_changes.items())]
    stats.sort(key=lambda s: s.changes, reverse=True)
    return _limited(stats, top)


def calculate_activity_heatmap(commits: Iterable[CommitInfo]) -> dict[str, int]:
    """Commit count per calendar day."""
    return dict(Counter(_day(c.date) for c in commits))


def generate_stats(
    commits: Iterable[CommitInfo],
    time_period: str = "",
    authors_top: int = 0,
    files_top: int = 0,
    now: datetime | None = None,
) -> GitStats:
    """Statistics over commits newer than ``time_period`` (all when empty)."""
    since = parse_time_period(time_period, now) if time_period else None
    selected = [c for c in commits if since is None or not c.date < since]

    author_commits: Counter[str] = Counter(c.author for c in selected)
    file_changes: Counter[str] = Counter(path for c in selected for path in c.files)

    ordered = _newest_first(selected)
    period = TimeRange()
    if ordered:
        period = TimeRange(start=ordered[-1].date, end=ordered[0].date)
    return GitStats(
        time_period=period,
        commit_stats=calculate_commit_stats(ordered),
        author_stats=calculate_author_stats(author_commits, authors_top),
        file_stats=calculate_file_stats(file_changes, files_top),
        activity_heatmap=calculate_activity_heatmap(ordered),
    )