"""Animation steps and the generation of editing steps for diff hunks."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from codeghost.buffer import EditorBuffer
from codeghost.changes import DiffHunk, FileChange, LineChangeType

# Pause multipliers relative to the typing speed.
CURSOR_MOVE_PAUSE = 0.5
CURSOR_MOVE_SHORT_MULTIPLIER = 1.0
CURSOR_MOVE_MEDIUM_MULTIPLIER = 0.3
CURSOR_MOVE_LONG_MULTIPLIER = 0.05
MAX_SCROLL_STEPS = 60
MIN_LOG_STEPS = 50
LOG_SCALE_FACTOR = 8.0
DELETE_LINE_PAUSE = 10.0
INSERT_LINE_PAUSE = 6.7
HUNK_PAUSE = 50.0
CHECKOUT_PAUSE = 16.7
CHECKOUT_OUTPUT_PAUSE = 33.3
OPEN_FILE_FIRST_PAUSE = 33.3
OPEN_FILE_PAUSE = 50.0
OPEN_DIALOG_PAUSE = 5.0
OPEN_CMD_PAUSE = 16.7
FILE_SWITCH_PAUSE = 26.7
GIT_ADD_PAUSE = 33.3
GIT_ADD_CMD_PAUSE = 16.7
GIT_COMMIT_PAUSE = 26.7
COMMIT_OUTPUT_PAUSE = 33.3
GIT_PUSH_PAUSE = 16.7
PUSH_OUTPUT_PAUSE = 10.0
PUSH_FINAL_PAUSE = 66.7

_SHORT_DISTANCE = 50
_MEDIUM_DISTANCE = 200


@dataclass(frozen=True)
class InsertChar:
    line: int
    col: int
    ch: str


@dataclass(frozen=True)
class InsertLine:
    line: int
    content: str


@dataclass(frozen=True)
class DeleteLine:
    line: int


@dataclass(frozen=True)
class MoveCursor:
    line: int
    col: int


@dataclass(frozen=True)
class Pause:
    multiplier: float


@dataclass(frozen=True)
class SwitchFile:
    file_index: int
    old_content: str
    new_content: str
    path: str


@dataclass(frozen=True)
class OpenFileDialogStart:
    pass


@dataclass(frozen=True)
class DialogTypeChar:
    ch: str


@dataclass(frozen=True)
class TerminalPrompt:
    pass


@dataclass(frozen=True)
class TerminalTypeChar:
    ch: str


@dataclass(frozen=True)
class TerminalOutput:
    text: str


@dataclass(frozen=True)
class ResetState:
    pass


Step = Union[
    InsertChar,
    InsertLine,
    DeleteLine,
    MoveCursor,
    Pause,
    SwitchFile,
    OpenFileDialogStart,
    DialogTypeChar,
    TerminalPrompt,
    TerminalTypeChar,
    TerminalOutput,
    ResetState,
]


def _indentation(text: str) -> int:
    """Number of leading whitespace characters."""
    return len(text) - len(text.lstrip())


def ease_in_out_cubic(t: float) -> float:
    """Cubic easing: slow start, fast middle, slow end."""
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def is_change_pause(multiplier: float) -> bool:
    """True for the pause that separates hunks."""
    return abs(multiplier - HUNK_PAUSE) < sys.float_info.epsilon


def _step_count(distance: int) -> int:
    if distance <= MIN_LOG_STEPS:
        return distance
    log_steps = int(math.log(distance) * LOG_SCALE_FACTOR)
    return max(MIN_LOG_STEPS, min(log_steps, MAX_SCROLL_STEPS))


def cursor_movement_steps(
    from_line: int, to_line: int, lines: Sequence[str]
) -> list[Step]:
    """Eased cursor moves from one line to another, each followed by a pause.

    The cursor column is the indentation of the target line in ``lines``.
    """
    if from_line == to_line:
        return []
    distance = abs(to_line - from_line)

    if distance <= _SHORT_DISTANCE:
        speed = CURSOR_MOVE_SHORT_MULTIPLIER
    elif distance <= _MEDIUM_DISTANCE:
        speed = CURSOR_MOVE_MEDIUM_MULTIPLIER
    else:
        speed = CURSOR_MOVE_LONG_MULTIPLIER

    num_steps = _step_count(distance)
    direction = 1 if to_line > from_line else -1
    positions: list[int] = []
    for i in range(num_steps + 1):
        eased = ease_in_out_cubic(i / num_steps)
        progress = math.floor(eased * distance + 0.5)
        line = from_line + direction * progress
        if not positions or positions[-1] != line:
            positions.append(line)

    pause = max(CURSOR_MOVE_PAUSE * speed, 0.01)
    steps: list[Step] = []
    for line in positions:
        if line == from_line:
            continue
        col = _indentation(lines[line]) if 0 <= line < len(lines) else 0
        steps.append(MoveCursor(line=line, col=col))
        steps.append(Pause(multiplier=pause))
    return steps


def hunk_steps(
    hunk: DiffHunk, start_cursor_line: int, start_buffer_line: int
) -> tuple[list[Step], int, int]:
    """Steps that apply one hunk, with the final cursor and buffer lines."""
    steps: list[Step] = []
    buffer_line = start_buffer_line
    cursor_line = start_cursor_line

    for change in hunk.lines:
        if change.change_type is LineChangeType.DELETION:
            steps.append(DeleteLine(line=buffer_line))
            steps.append(Pause(multiplier=DELETE_LINE_PAUSE))
            cursor_line = buffer_line
        elif change.change_type is LineChangeType.ADDITION:
            content = change.content
            indent = _indentation(content)
            steps.append(InsertLine(line=buffer_line, content=content[:indent]))
            steps.extend(
                InsertChar(line=buffer_line, col=col, ch=ch)
                for col, ch in enumerate(content[indent:], start=indent)
            )
            cursor_line = buffer_line
            buffer_line += 1
            steps.append(Pause(multiplier=INSERT_LINE_PAUSE))
        else:
            if buffer_line != cursor_line:
                steps.append(
                    MoveCursor(line=buffer_line, col=_indentation(change.content))
                )
                steps.append(Pause(multiplier=CURSOR_MOVE_PAUSE))
            cursor_line = buffer_line
            buffer_line += 1

    return steps, cursor_line, buffer_line


def file_steps(change: FileChange) -> list[Step]:
    """Editing steps for every hunk of a file, with a pause after each hunk."""
    old_lines = EditorBuffer.from_content(change.old_content or "").lines
    steps: list[Step] = []
    cursor_line = 0
    line_offset = 0

    for hunk in change.hunks:
        target_line = max(hunk.old_start - 1 + line_offset, 0)
        steps.extend(cursor_movement_steps(cursor_line, target_line, old_lines))
        hunk_part, cursor_line, _ = hunk_steps(hunk, target_line, target_line)
        steps.extend(hunk_part)
        line_offset += hunk.count(LineChangeType.ADDITION) - hunk.count(
            LineChangeType.DELETION
        )
        steps.append(Pause(multiplier=HUNK_PAUSE))

    return steps