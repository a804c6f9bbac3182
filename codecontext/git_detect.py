"""Locating Git repositories and reading their current branch."""

from __future__ import annotations

import os
from pathlib import Path

_SHORT_PREFIXES = ("refs/heads/", "refs/tags/", "refs/remotes/", "refs/")
_NOT_FOUND = "未找到Git仓库"


def is_git_repository(path: str | os.PathLike[str]) -> bool:
    """True when ``path`` holds a ``.git`` entry (directory or file)."""
    return (Path(path) / ".git").exists()


def find_git_repository(start_path: str | os.PathLike[str]) -> str:
    """Absolute path of the nearest directory at or above ``start_path`` that is a repository."""
    current = Path(os.path.abspath(start_path))
    for candidate in (current, *current.parents):
        if is_git_repository(candidate):
            return str(candidate)
    raise FileNotFoundError(_NOT_FOUND)


def _git_dir(root: Path) -> Path:
    """The repository's git directory, following a ``gitdir:`` pointer file."""
    dot_git = root / ".git"
    if dot_git.is_file():
        try:
            text = dot_git.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError):
            return dot_git
        if text.startswith("gitdir:"):
            target = Path(text[len("gitdir:"):].strip())
            return target if target.is_absolute() else root / target
    return dot_git


def _common_dir(git_dir: Path) -> Path:
    try:
        text = (git_dir / "commondir").read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return git_dir
    target = Path(text)
    return target if target.is_absolute() else git_dir / target


def _ref_exists(git_dir: Path, ref: str) -> bool:
    common = _common_dir(git_dir)
    if (git_dir / ref).is_file() or (common / ref).is_file():
        return True
    try:
        packed = (common / "packed-refs").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False
    for line in packed.splitlines():
        if line.startswith(("#", "^")):
            continue
        _, _, name = line.partition(" ")
        if name.strip() == ref:
            return True
    return False


def _short_name(ref: str) -> str:
    for prefix in _SHORT_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def current_branch(repo_path: str | os.PathLike[str]) -> str:
    """Short name of the checked-out branch of the repository containing ``repo_path``.

    A detached HEAD gives ``"HEAD"``; an unborn or unreadable HEAD gives ``""``.
    Raises FileNotFoundError when no repository encloses ``repo_path``.
    """
    root = Path(find_git_repository(repo_path))
    git_dir = _git_dir(root)
    try:
        head = (git_dir / "HEAD").read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return ""
    if not head.startswith("ref:"):
        return "HEAD" if head else ""
    ref = head[len("ref:"):].strip()
    if not _ref_exists(git_dir, ref):
        return ""
    return _short_name(ref)