"""Locate the Git repository that the player works on."""

from __future__ import annotations

from pathlib import Path


class RepoPathError(Exception):
    """Raised when a path is missing or not inside a Git repository."""


def find_git_root(start_path: Path | str) -> Path | None:
    """The nearest directory at or above ``start_path`` that holds ``.git``."""
    start = Path(start_path)
    current = start.parent if start.is_file() else start
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def validate_repo_path(path: Path | str | None = None) -> Path:
    """Resolve ``path`` (default: the current directory) to its repository root."""
    start = Path(path) if path is not None else Path(".")
    if not start.exists():
        raise RepoPathError(f"Path does not exist: {start}")
    try:
        canonical = start.resolve(strict=True)
    except OSError as exc:
        raise RepoPathError("Failed to resolve path") from exc
    root = find_git_root(canonical)
    if root is None:
        raise RepoPathError(
            f"Not a Git repository: {start} (or any parent directories)"
        )
    return root