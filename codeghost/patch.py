"""Read unified diff text for one file into diff hunks."""

from __future__ import annotations

import re
from collections.abc import Iterator

from codeghost.changes import DiffHunk, LineChange, LineChangeType

_HEADER = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_LINE = re.compile(r"[^\n]*\n|[^\n]+")

_ORIGINS = {
    "+": LineChangeType.ADDITION,
    "-": LineChangeType.DELETION,
    " ": LineChangeType.CONTEXT,
}


class PatchError(ValueError):
    """Raised when diff text is not a well-formed unified diff."""


def parse_hunk_header(line: str) -> DiffHunk:
    """Parse an ``@@ -a,b +c,d @@`` line into an empty hunk.

    A missing count means one line, as in unified diff format.
    """
    match = _HEADER.match(line)
    if match is None:
        raise PatchError(f"invalid hunk header: {line.rstrip()!r}")
    old_start, old_lines, new_start, new_lines = match.groups()
    return DiffHunk(
        old_start=int(old_start),
        old_lines=int(old_lines) if old_lines is not None else 1,
        new_start=int(new_start),
        new_lines=int(new_lines) if new_lines is not None else 1,
    )


def _split_lines(text: str) -> Iterator[str]:
    """Yield lines split on newlines only, each keeping its newline."""
    for match in _LINE.finditer(text):
        yield match.group()


def _read_hunk(hunk: DiffHunk, lines: Iterator[str]) -> None:
    old_remaining = hunk.old_lines
    new_remaining = hunk.new_lines
    old_no = hunk.old_start
    new_no = hunk.new_start

    while old_remaining > 0 or new_remaining > 0:
        raw = next(lines, None)
        if raw is None:
            raise PatchError("hunk ends before all of its lines were read")
        if raw.startswith("\\"):
            # "\ No newline at end of file"
            continue
        if raw in ("\n", ""):
            # Some tools strip the leading space of empty context lines.
            origin, content = " ", raw
        else:
            origin, content = raw[0], raw[1:]
        change_type = _ORIGINS.get(origin)
        if change_type is None:
            raise PatchError(f"unexpected line in hunk: {raw.rstrip()!r}")

        if change_type is LineChangeType.ADDITION:
            if new_remaining == 0:
                raise PatchError("hunk has more added lines than its header says")
            hunk.lines.append(LineChange(change_type, content, None, new_no))
            new_no += 1
            new_remaining -= 1
        elif change_type is LineChangeType.DELETION:
            if old_remaining == 0:
                raise PatchError("hunk has more deleted lines than its header says")
            hunk.lines.append(LineChange(change_type, content, old_no, None))
            old_no += 1
            old_remaining -= 1
        else:
            if old_remaining == 0 or new_remaining == 0:
                raise PatchError("hunk has more context lines than its header says")
            hunk.lines.append(LineChange(change_type, content, old_no, new_no))
            old_no += 1
            new_no += 1
            old_remaining -= 1
            new_remaining -= 1


def parse_patch(text: str) -> list[DiffHunk]:
    """Parse the hunks of a single file's unified diff.

    File headers and anything outside hunks are skipped, so a binary
    patch yields no hunks. Line contents keep their trailing newline.
    """
    hunks: list[DiffHunk] = []
    lines = _split_lines(text)
    for line in lines:
        if not line.startswith("@@"):
            continue
        hunk = parse_hunk_header(line)
        _read_hunk(hunk, lines)
        hunks.append(hunk)
    return hunks