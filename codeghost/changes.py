"""Data describing a commit and the file changes it carries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

WORKING_TREE_HASH = "working-tree"


class DiffMode(Enum):
    """Which working tree changes to show; staged is the default."""

    STAGED = "staged"
    UNSTAGED = "unstaged"


class FileStatus(Enum):
    """How a file changed, with the one-letter code as its value."""

    ADDED = "A"
    DELETED = "D"
    MODIFIED = "M"
    RENAMED = "R"
    COPIED = "C"
    UNMODIFIED = "U"

    def __str__(self) -> str:
        return self.value


class LineChangeType(Enum):
    """The kind of a line within a diff hunk."""

    ADDITION = "+"
    DELETION = "-"
    CONTEXT = " "


@dataclass
class LineChange:
    """One line of a diff hunk."""

    change_type: LineChangeType
    content: str
    old_line_no: int | None = None
    new_line_no: int | None = None


@dataclass
class DiffHunk:
    """A contiguous block of changes; line numbers start at 1."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[LineChange] = field(default_factory=list)

    def count(self, change_type: LineChangeType) -> int:
        """Number of lines of the given kind in this hunk."""
        return sum(1 for line in self.lines if line.change_type is change_type)


@dataclass
class FileChange:
    """A single file touched by a commit or a working tree diff."""

    path: str
    status: FileStatus
    old_path: str | None = None
    is_binary: bool = False
    is_excluded: bool = False
    exclusion_reason: str | None = None
    old_content: str | None = None
    new_content: str | None = None
    hunks: list[DiffHunk] = field(default_factory=list)
    diff: str = ""

    def changed_line_count(self) -> int:
        """Total additions and deletions over all hunks."""
        return sum(
            hunk.count(LineChangeType.ADDITION) + hunk.count(LineChangeType.DELETION)
            for hunk in self.hunks
        )


def _tree_order_key(path: str) -> tuple[str, str]:
    directory, sep, filename = path.rpartition("/")
    if not sep:
        return "", path
    return directory, filename


@dataclass
class CommitMetadata:
    """A commit (or working tree diff) and all of its file changes."""

    hash: str
    author: str
    date: datetime
    message: str
    changes: list[FileChange] = field(default_factory=list)

    def sorted_file_indices(self) -> list[int]:
        """Indices of ``changes`` in file tree order: directory, then filename."""
        return sorted(
            range(len(self.changes)),
            key=lambda index: _tree_order_key(self.changes[index].path),
        )

    def is_working_tree(self) -> bool:
        """True when this describes uncommitted changes rather than a commit."""
        return self.hash == WORKING_TREE_HASH