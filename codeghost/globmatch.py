"""Shell-style glob patterns for matching repository paths.

``*`` and ``?`` also match ``/``. ``**`` as a whole path component matches
any number of directories. ``[...]`` is a character class, ``{a,b}``
picks one of several alternatives, and ``\\`` escapes the next character.
"""

from __future__ import annotations

import re
from collections.abc import Iterable


class GlobError(ValueError):
    """Raised when a glob pattern cannot be compiled."""


class _Translator:
    """Turns one glob pattern into a regular expression."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.pos = 0
        self.parts: list[str] = []
        self.branches: list[list[str]] | None = None

    @property
    def current(self) -> list[str]:
        return self.parts if self.branches is None else self.branches[-1]

    def error(self, message: str) -> GlobError:
        return GlobError(f"error parsing glob {self.pattern!r}: {message}")

    def translate(self) -> str:
        text = self.pattern
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\":
                self._escape()
            elif char == "?":
                self.current.append(".")
                self.pos += 1
            elif char == "*":
                self._star()
            elif char == "[":
                self._char_class()
            elif char == "{":
                self._open_alternates()
            elif char == "}" and self.branches is not None:
                self._close_alternates()
            elif char == "}":
                raise self.error("unopened alternate group; missing '{'")
            elif char == "," and self.branches is not None:
                self.branches.append([])
                self.pos += 1
            else:
                self.current.append(re.escape(char))
                self.pos += 1
        if self.branches is not None:
            raise self.error("unclosed alternate group; missing '}'")
        return "".join(self.parts)

    def _escape(self) -> None:
        if self.pos + 1 >= len(self.pattern):
            raise self.error("dangling '\\'")
        self.current.append(re.escape(self.pattern[self.pos + 1]))
        self.pos += 2

    def _star(self) -> None:
        text = self.pattern
        if not text.startswith("**", self.pos):
            self.current.append(".*")
            self.pos += 1
            return
        after = self.pos + 2
        while after < len(text) and text[after] == "*":
            after += 1
        parts = self.current
        at_start = self.branches is None and not parts
        after_sep = self.branches is None and bool(parts) and parts[-1] == "/"
        at_end = after == len(text)
        before_sep = not at_end and text[after] == "/"
        if not (at_start or after_sep) or not (at_end or before_sep):
            parts.append(".*")
        elif at_start and at_end:
            parts.append(".*")
        elif at_start:
            parts.append("(?:.*/)?")
            after += 1
        elif at_end:
            parts.pop()
            parts.append("/.*")
        else:
            parts.pop()
            parts.append("(?:/|/.*/)")
            after += 1
        self.pos = after

    def _char_class(self) -> None:
        text = self.pattern
        pos = self.pos + 1
        negated = pos < len(text) and text[pos] in "!^"
        if negated:
            pos += 1
        members: list[str] = []
        first = True
        while True:
            if pos >= len(text):
                raise self.error("unclosed character class; missing ']'")
            char = text[pos]
            if char == "]" and not first:
                pos += 1
                break
            first = False
            if (
                pos + 2 < len(text)
                and text[pos + 1] == "-"
                and text[pos + 2] != "]"
            ):
                start, end = char, text[pos + 2]
                if start > end:
                    raise self.error(f"invalid range; '{start}' > '{end}'")
                members.append(f"{re.escape(start)}-{re.escape(end)}")
                pos += 3
            else:
                members.append(re.escape(char))
                pos += 1
        prefix = "^" if negated else ""
        self.current.append(f"[{prefix}{''.join(members)}]")
        self.pos = pos

    def _open_alternates(self) -> None:
        if self.branches is not None:
            raise self.error("nested alternate groups are not allowed")
        self.branches = [[]]
        self.pos += 1

    def _close_alternates(self) -> None:
        assert self.branches is not None
        choices = "|".join("".join(branch) for branch in self.branches)
        self.branches = None
        self.parts.append(f"(?:{choices})")
        self.pos += 1


class Glob:
    """A single compiled glob pattern."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._regex = re.compile(_Translator(pattern).translate(), re.DOTALL)

    def matches(self, path: str) -> bool:
        """Return True if the whole of ``path`` matches the pattern."""
        return self._regex.fullmatch(path) is not None

    def __repr__(self) -> str:
        return f"Glob({self.pattern!r})"


class GlobSet:
    """A collection of globs that matches a path if any of them does."""

    def __init__(self, patterns: Iterable[str]) -> None:
        self.globs = [Glob(pattern) for pattern in patterns]

    def matches(self, path: str) -> bool:
        """Return True if any glob in the set matches ``path``."""
        return any(glob.matches(path) for glob in self.globs)

    def __len__(self) -> int:
        return len(self.globs)

    def __repr__(self) -> str:
        return f"GlobSet({[glob.pattern for glob in self.globs]!r})"