"""The editor buffer being typed into, and per-file typing speed rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from codeghost.globmatch import Glob, GlobError

_U64_MAX = 2**64 - 1
_SPEED = re.compile(r"\+?[0-9]+")


def _content_lines(content: str) -> list[str]:
    """Split on newlines, dropping a final empty line and trailing CRs."""
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def line_offsets(content: str) -> list[int]:
    """UTF-8 byte offset of the start of every line; CRLF is handled too."""
    data = content.encode("utf-8")
    return [0] + [index + 1 for index, byte in enumerate(data) if byte == 0x0A]


@dataclass
class EditorBuffer:
    """Lines of the file being edited, cursor, scroll and highlight state."""

    lines: list[str] = field(default_factory=lambda: [""])
    cursor_line: int = 0
    cursor_col: int = 0
    scroll_offset: int = 0
    cached_highlights: list[Any] = field(default_factory=list)
    old_highlights: list[Any] = field(default_factory=list)
    new_highlights: list[Any] = field(default_factory=list)
    old_content_lines: list[str] = field(default_factory=list)
    new_content_lines: list[str] = field(default_factory=list)
    old_content_line_offsets: list[int] = field(default_factory=list)
    new_content_line_offsets: list[int] = field(default_factory=list)

    @classmethod
    def from_content(cls, content: str) -> EditorBuffer:
        """A buffer holding ``content``; empty content gives one empty line."""
        lines = _content_lines(content) if content else [""]
        return cls(lines=lines or [""])

    def insert_char(self, line: int, col: int, ch: str) -> None:
        """Insert ``ch`` at character column ``col``, appending past the end."""
        if line >= len(self.lines):
            self.lines.extend([""] * (line + 1 - len(self.lines)))
        text = self.lines[line]
        col = min(col, len(text))
        self.lines[line] = text[:col] + ch + text[col:]

    def insert_line(self, line: int, content: str) -> None:
        """Insert a new line before index ``line``, padding with empty lines."""
        if line > len(self.lines):
            self.lines.extend([""] * (line - len(self.lines)))
        self.lines.insert(line, content)

    def delete_line(self, line: int) -> None:
        """Remove line ``line`` if it exists; the buffer never becomes empty."""
        if 0 <= line < len(self.lines):
            del self.lines[line]
        if not self.lines:
            self.lines.append("")


@dataclass(frozen=True)
class SpeedRule:
    """Typing speed in milliseconds for files that match a glob."""

    matcher: Glob
    speed_ms: int

    @classmethod
    def parse(cls, text: str) -> SpeedRule | None:
        """Parse ``PATTERN:SPEED_MS``, such as ``*.java:50``; None if invalid."""
        pattern, sep, speed_text = text.rpartition(":")
        if not sep or not _SPEED.fullmatch(speed_text):
            return None
        speed_ms = int(speed_text)
        if speed_ms > _U64_MAX:
            return None
        try:
            matcher = Glob(pattern)
        except GlobError:
            return None
        return cls(matcher=matcher, speed_ms=speed_ms)

    def matches(self, path: str) -> bool:
        """True if ``path`` matches this rule's pattern."""
        return self.matcher.matches(path)