"""The state machine that plays animation steps against an editor and terminal."""

from __future__ import annotations

import copy
import random
import time
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from codeghost.buffer import EditorBuffer, SpeedRule, line_offsets
from codeghost.changes import CommitMetadata
from codeghost.layout import scroll_offset
from codeghost.script import build_steps
from codeghost.steps import (
    DeleteLine,
    DialogTypeChar,
    InsertChar,
    InsertLine,
    MoveCursor,
    OpenFileDialogStart,
    Pause,
    ResetState,
    Step,
    SwitchFile,
    TerminalOutput,
    TerminalPrompt,
    TerminalTypeChar,
    is_change_pause,
)

MAX_LINE_CHECKPOINTS = 200
MAX_CHANGE_CHECKPOINTS = 64
TARGET_FPS = 120
CURSOR_BLINK_SECONDS = 0.5


class Highlighter(Protocol):
    """Syntax highlighter used to colour file contents."""

    def set_language_from_path(self, path: str) -> Any: ...

    def highlight(self, content: str) -> list[Any]: ...


class AnimationState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    FINISHED = "finished"


class ActivePane(Enum):
    EDITOR = "editor"
    TERMINAL = "terminal"


class StepMode(Enum):
    """How far a manual step advances: one line or one whole change."""

    LINE = "line"
    CHANGE = "change"


@dataclass
class _Checkpoint:
    step_index: int
    buffer: EditorBuffer
    current_file_index: int
    current_file_path: str | None
    terminal_lines: list[str]
    active_pane: ActivePane
    line_offset: int
    dialog_title: str | None
    dialog_typing_text: str
    speed_ms: int


def _leading_whitespace(text: str) -> int:
    return len(text) - len(text.lstrip())


def _is_boundary(step: Step, mode: StepMode) -> bool:
    if isinstance(step, (SwitchFile, TerminalPrompt, TerminalOutput, ResetState)):
        return True
    if isinstance(step, Pause):
        return mode is StepMode.LINE or is_change_pause(step.multiplier)
    return False


class AnimationEngine:
    """Plays the steps of a commit at typing speed, frame by frame."""

    def __init__(self, speed_ms: int, highlighter: Highlighter | None = None) -> None:
        now = time.monotonic()
        self.buffer = EditorBuffer()
        self.state = AnimationState.IDLE
        self.steps: list[Step] = []
        self.current_step = 0
        self.speed_ms = speed_ms
        self.base_speed_ms = speed_ms
        self.cursor_visible = True
        self.viewport_height = 20
        self.content_width = 80
        self.current_file_index = 0
        self.current_file_path: str | None = None
        self.terminal_lines: list[str] = []
        self.active_pane = ActivePane.TERMINAL
        self.highlighter = highlighter
        self.line_offset = 0
        self.dialog_title: str | None = None
        self.dialog_typing_text = ""
        self.speed_rules: list[SpeedRule] = []
        self.paused = False
        self.rng = random.Random()
        self.frame_interval_ms = 1000 // TARGET_FPS
        self._last_update = now
        self._last_frame = now
        self._cursor_blink_timer = now
        self._next_step_delay = speed_ms
        self._pause_until: float | None = None
        self._current_metadata: CommitMetadata | None = None
        self._pending_metadata: CommitMetadata | None = None
        self._line_checkpoints: deque[_Checkpoint] = deque(maxlen=MAX_LINE_CHECKPOINTS)
        self._change_checkpoints: deque[_Checkpoint] = deque(
            maxlen=MAX_CHANGE_CHECKPOINTS
        )

    @property
    def current_metadata(self) -> CommitMetadata | None:
        """The commit currently shown, set once its intro has played."""
        return self._current_metadata

    def pause(self) -> None:
        """Stop automatic playback."""
        self.paused = True

    def resume(self) -> None:
        """Continue automatic playback from the current step."""
        if self.paused:
            self.paused = False
            now = time.monotonic()
            self._last_update = now
            self._last_frame = now

    def manual_step(self, mode: StepMode) -> bool:
        """Run steps up to and including the next boundary for ``mode``."""
        if self.state is not AnimationState.PLAYING:
            return False
        if self.current_step >= len(self.steps):
            self.state = AnimationState.FINISHED
            return False

        self._pause_until = None
        executed = False
        while self.current_step < len(self.steps):
            step = self.steps[self.current_step]
            self.execute_step(step)
            self.current_step += 1
            executed = True
            if self.current_step >= len(self.steps):
                self.state = AnimationState.FINISHED
            if _is_boundary(step, mode):
                break

        if executed:
            now = time.monotonic()
            self._last_update = now
            self._last_frame = now
        return executed

    def restore_line_checkpoint(self) -> bool:
        """Go back one line; True if there was somewhere to go back to."""
        return self._restore(self._line_checkpoints)

    def restore_change_checkpoint(self) -> bool:
        """Go back one change; True if there was somewhere to go back to."""
        return self._restore(self._change_checkpoints)

    def _restore(self, checkpoints: deque[_Checkpoint]) -> bool:
        if len(checkpoints) < 2:
            return False
        checkpoints.pop()
        self._apply_checkpoint(checkpoints[-1])
        return True

    def _apply_checkpoint(self, snapshot: _Checkpoint) -> None:
        self.current_step = snapshot.step_index
        self.buffer = copy.deepcopy(snapshot.buffer)
        self.current_file_index = snapshot.current_file_index
        self.current_file_path = snapshot.current_file_path
        self.terminal_lines = list(snapshot.terminal_lines)
        self.active_pane = snapshot.active_pane
        self.line_offset = snapshot.line_offset
        self.dialog_title = snapshot.dialog_title
        self.dialog_typing_text = snapshot.dialog_typing_text
        self.speed_ms = snapshot.speed_ms
        self._pause_until = None
        self.paused = True
        self.state = AnimationState.PLAYING

    def _snapshot(self) -> _Checkpoint:
        return _Checkpoint(
            step_index=min(self.current_step + 1, len(self.steps)),
            buffer=copy.deepcopy(self.buffer),
            current_file_index=self.current_file_index,
            current_file_path=self.current_file_path,
            terminal_lines=list(self.terminal_lines),
            active_pane=self.active_pane,
            line_offset=self.line_offset,
            dialog_title=self.dialog_title,
            dialog_typing_text=self.dialog_typing_text,
            speed_ms=self.speed_ms,
        )

    def _record(self, checkpoints: deque[_Checkpoint]) -> None:
        if self.current_step == 0:
            return
        snapshot = self._snapshot()
        if checkpoints and checkpoints[-1].step_index == snapshot.step_index:
            return
        checkpoints.append(snapshot)

    def _handle_checkpoint(self, step: Step) -> None:
        if isinstance(step, ResetState):
            self._line_checkpoints.clear()
            self._change_checkpoints.clear()
            self._record(self._change_checkpoints)
            self._record(self._line_checkpoints)
        elif isinstance(step, SwitchFile):
            self._line_checkpoints.clear()
            self._record(self._change_checkpoints)
            self._record(self._line_checkpoints)
        elif isinstance(step, Pause) and self.active_pane is ActivePane.EDITOR:
            self._record(self._line_checkpoints)
            if is_change_pause(step.multiplier):
                self._record(self._change_checkpoints)

    def set_speed_rules(self, rules: Iterable[SpeedRule]) -> None:
        """Typing speeds for files by pattern; the first match wins."""
        self.speed_rules = list(rules)

    def _speed_for_file(self, path: str) -> int:
        return next(
            (rule.speed_ms for rule in self.speed_rules if rule.matches(path)),
            self.base_speed_ms,
        )

    def set_viewport_height(self, height: int) -> None:
        self.viewport_height = height

    def set_content_width(self, width: int) -> None:
        self.content_width = width

    def load_commit(self, metadata: CommitMetadata) -> None:
        """Prepare the steps for ``metadata`` and start playing them."""
        self._pending_metadata = metadata
        self.steps = build_steps(metadata)
        self.current_step = 0
        self.state = AnimationState.PLAYING
        self._last_update = time.monotonic()
        self._pause_until = None
        self.buffer = EditorBuffer()
        self._line_checkpoints.clear()
        self._change_checkpoints.clear()

    def tick(self) -> bool:
        """Advance playback; True if the display needs to be redrawn."""
        self._update_cursor_blink()
        if self.paused:
            return True
        if self._pause_active():
            return True
        if self.state is not AnimationState.PLAYING:
            return False

        now = time.monotonic()
        if (now - self._last_frame) * 1000 < self.frame_interval_ms:
            return False

        executed = self._execute_batch(now)
        if self.current_step >= len(self.steps):
            self.state = AnimationState.FINISHED
        return executed

    def _update_cursor_blink(self) -> None:
        now = time.monotonic()
        if now - self._cursor_blink_timer >= CURSOR_BLINK_SECONDS:
            self.cursor_visible = not self.cursor_visible
            self._cursor_blink_timer = now

    def _pause_active(self) -> bool:
        if self._pause_until is not None:
            if time.monotonic() < self._pause_until:
                return True
            self._pause_until = None
        return False

    def _execute_batch(self, frame_start: float) -> bool:
        accumulated = 0
        executed_any = False
        while self.current_step < len(self.steps):
            if not executed_any:
                elapsed_ms = (time.monotonic() - self._last_update) * 1000
                if elapsed_ms < self._next_step_delay:
                    break
            elif accumulated + self._next_step_delay > self.frame_interval_ms:
                break
            step_delay = self._next_step_delay
            self.execute_step(self.steps[self.current_step])
            self.current_step += 1
            executed_any = True
            accumulated += step_delay

        if executed_any:
            self._last_update = time.monotonic()
            self._last_frame = frame_start
        return executed_any

    def _delay_after(self, step: Step) -> int:
        if isinstance(step, (InsertChar, TerminalTypeChar)):
            return int(self.speed_ms * self.rng.uniform(0.7, 1.3))
        if isinstance(step, DialogTypeChar):
            return int(self.speed_ms * 2.0 * self.rng.uniform(0.7, 1.3))
        if isinstance(step, Pause):
            return 0
        return self.speed_ms

    def execute_step(self, step: Step) -> None:
        """Apply one step to the editor, dialog and terminal state."""
        self._next_step_delay = self._delay_after(step)

        match step:
            case InsertChar(line=line, col=col, ch=ch):
                self.active_pane = ActivePane.EDITOR
                self.buffer.insert_char(line, col, ch)
                self.buffer.cursor_line = line
                self.buffer.cursor_col = col + 1
            case InsertLine(line=line, content=content):
                self.active_pane = ActivePane.EDITOR
                self.buffer.insert_line(line, content)
                self.buffer.cursor_line = line
                self.buffer.cursor_col = len(content)
                self.line_offset += 1
            case DeleteLine(line=line):
                self.active_pane = ActivePane.EDITOR
                self.buffer.delete_line(line)
                self.buffer.cursor_line = line
                lines = self.buffer.lines
                self.buffer.cursor_col = (
                    _leading_whitespace(lines[line]) if line < len(lines) else 0
                )
                self.line_offset -= 1
            case MoveCursor(line=line, col=col):
                self.active_pane = ActivePane.EDITOR
                self.buffer.cursor_line = line
                self.buffer.cursor_col = col
            case Pause(multiplier=multiplier):
                duration_ms = int(self.speed_ms * multiplier)
                self._pause_until = time.monotonic() + duration_ms / 1000
            case OpenFileDialogStart():
                self.dialog_typing_text = ""
                self.dialog_title = "Open File..."
            case DialogTypeChar(ch=ch):
                self.dialog_typing_text += ch
            case SwitchFile():
                self._switch_file(step)
            case TerminalPrompt():
                self.active_pane = ActivePane.TERMINAL
                self.terminal_lines.append("~ ")
            case TerminalTypeChar(ch=ch):
                self.active_pane = ActivePane.TERMINAL
                if self.terminal_lines:
                    self.terminal_lines[-1] += ch
            case TerminalOutput(text=text):
                self.active_pane = ActivePane.TERMINAL
                self.terminal_lines.append(text)
            case ResetState():
                if self._pending_metadata is not None:
                    self._current_metadata = self._pending_metadata
                    self._pending_metadata = None
                self.current_file_index = 0
                self.buffer = EditorBuffer()
                self.current_file_path = None
                self.active_pane = ActivePane.TERMINAL

        self._handle_checkpoint(step)
        self._update_scroll()

    def _switch_file(self, step: SwitchFile) -> None:
        self.active_pane = ActivePane.EDITOR
        self.dialog_title = None
        self.dialog_typing_text = ""
        self.current_file_index = step.file_index
        self.current_file_path = step.path
        self.buffer = EditorBuffer.from_content(step.old_content)
        self.speed_ms = self._speed_for_file(step.path)

        if self.highlighter is not None:
            self.highlighter.set_language_from_path(step.path)
            self.buffer.old_highlights = list(self.highlighter.highlight(step.old_content))
            self.buffer.new_highlights = list(self.highlighter.highlight(step.new_content))
        else:
            self.buffer.old_highlights = []
            self.buffer.new_highlights = []

        self.buffer.old_content_lines = EditorBuffer.from_content(step.old_content).lines
        self.buffer.new_content_lines = EditorBuffer.from_content(step.new_content).lines
        self.buffer.old_content_line_offsets = line_offsets(step.old_content)
        self.buffer.new_content_line_offsets = line_offsets(step.new_content)
        self.buffer.cached_highlights = list(self.buffer.old_highlights)
        self.line_offset = 0

    def _update_scroll(self) -> None:
        if self.viewport_height == 0:
            return
        self.buffer.scroll_offset = scroll_offset(
            self.buffer.lines,
            self.buffer.cursor_line,
            self.viewport_height,
            self.content_width,
        )

    def is_finished(self) -> bool:
        """True once every step has been played."""
        return self.state is AnimationState.FINISHED