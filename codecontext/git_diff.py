"""Simplified diff rendering and change counting for commits."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FileDiff:
    """Changes made to one file by a commit."""

    file_path: str = ""
    status: str = ""
    insertions: int = 0
    deletions: int = 0
    diff: str = ""


@dataclass
class CommitDiff:
    """All file changes of one commit."""

    commit_hash: str = ""
    files: list[FileDiff] = field(default_factory=list)
    total_changes: int = 0


def _unified(from_lines: list[str], to_lines: list[str]) -> str:
    parts = [f"@@ -1,{len(from_lines)} +1,{len(to_lines)} @@\n"]
    for i, line in enumerate(to_lines):
        if i < len(from_lines):
            if line != from_lines[i]:
                parts.append(f"-{from_lines[i]}\n+{line}\n")
        else:
            parts.append(f"+{line}\n")
    return "".join(parts)


def _context(to_lines: list[str]) -> str:
    parts = ["--- a/\n", "+++ b/\n", "***************\n"]
    parts.extend(f"  {line}\n" for line in to_lines)
    return "".join(parts)


def format_diff(from_content: str, to_content: str, diff_format: str) -> str:
    """Render a line-by-line comparison; unknown formats fall back to unified."""
    from_lines = from_content.split("\n")
    to_lines = to_content.split("\n")
    if diff_format == "context":
        return _context(to_lines)
    if diff_format == "raw":
        return to_content
    return _unified(from_lines, to_lines)


def count_changes(diff: str) -> tuple[int, int]:
    """Count added and removed lines in a rendered diff, ignoring file headers."""
    insertions = deletions = 0
    for line in diff.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            insertions += 1
        elif line.startswith("-") and not line.startswith("---"):
            deletions += 1
    return insertions, deletions


def count_content_changes(from_content: str, to_content: str) -> tuple[int, int]:
    """Compare two texts position by position and count inserted and deleted lines."""
    from_lines = from_content.split("\n")
    to_lines = to_content.split("\n")
    insertions = deletions = 0
    for i in range(max(len(from_lines), len(to_lines))):
        if i >= len(from_lines):
            insertions += 1
        elif i >= len(to_lines):
            deletions += 1
        elif from_lines[i] != to_lines[i]:
            insertions += 1
            deletions += 1
    return insertions, deletions


def added_file_diff(path: str, content: str, diff_format: str) -> FileDiff:
    """Diff entry for a file introduced by a root commit."""
    lines = content.count("\n")
    if not content.endswith("\n"):
        lines += 1
    return FileDiff(
        file_path=path,
        status="added",
        insertions=lines,
        deletions=0,
        diff=format_diff("", content, diff_format) if diff_format else "",
    )