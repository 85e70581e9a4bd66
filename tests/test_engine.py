import time
from datetime import datetime, timezone

from codeghost.buffer import SpeedRule, line_offsets
from codeghost.changes import (
    CommitMetadata,
    DiffHunk,
    FileChange,
    FileStatus,
    LineChange,
    LineChangeType,
)
from codeghost.engine import ActivePane, AnimationEngine, AnimationState, StepMode
from codeghost.layout import scroll_offset
from codeghost.script import build_steps
from codeghost.steps import DeleteLine, InsertChar, InsertLine, Pause, SwitchFile


def _metadata(hash_value="0123456789abcdef0123456789abcdef01234567"):
    hunk = DiffHunk(
        old_start=1,
        old_lines=2,
        new_start=1,
        new_lines=2,
        lines=[
            LineChange(LineChangeType.CONTEXT, "a", 1, 1),
            LineChange(LineChangeType.DELETION, "b", 2, None),
            LineChange(LineChangeType.ADDITION, "c", None, 2),
        ],
    )
    change = FileChange(
        path="hello.txt",
        status=FileStatus.MODIFIED,
        old_content="a\nb\n",
        new_content="a\nc\n",
        hunks=[hunk],
    )
    return CommitMetadata(
        hash=hash_value,
        author="Test User",
        date=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        message="Change greeting",
        changes=[change],
    )


def _play(engine, mode):
    calls = 0
    while engine.manual_step(mode):
        calls += 1
    return calls


class _FakeHighlighter:
    def __init__(self):
        self.paths = []

    def set_language_from_path(self, path):
        self.paths.append(path)
        return True

    def highlight(self, content):
        return [("span", content)]


def test_new_engine_is_idle():
    engine = AnimationEngine(30)
    assert engine.state is AnimationState.IDLE
    assert engine.active_pane is ActivePane.TERMINAL
    assert engine.buffer.lines == [""]
    assert engine.manual_step(StepMode.LINE) is False


def test_load_commit_prepares_steps():
    engine = AnimationEngine(30)
    metadata = _metadata()
    engine.load_commit(metadata)
    assert engine.state is AnimationState.PLAYING
    assert engine.steps == build_steps(metadata)
    assert engine.current_step == 0


def test_first_line_step_stops_at_prompt():
    engine = AnimationEngine(30)
    engine.load_commit(_metadata())
    assert engine.manual_step(StepMode.LINE) is True
    assert engine.terminal_lines == ["~ "]
    assert engine.current_step == 1


def test_full_playback_applies_the_diff():
    engine = AnimationEngine(30)
    metadata = _metadata()
    engine.load_commit(metadata)
    _play(engine, StepMode.LINE)
    assert engine.is_finished()
    assert engine.buffer.lines == ["a", "c"]
    assert engine.current_metadata is metadata
    assert engine.terminal_lines[0] == "~ time-travel 2024-01-02 03:04:05"
    assert "~ git push origin main" in engine.terminal_lines
    assert engine.current_file_path == "hello.txt"


def test_working_tree_intro():
    engine = AnimationEngine(30)
    engine.load_commit(_metadata("working-tree"))
    _play(engine, StepMode.CHANGE)
    assert engine.terminal_lines[0] == "~ git diff --stat"
    assert engine.buffer.lines == ["a", "c"]


def test_change_mode_takes_no_more_steps_than_line_mode():
    by_line = AnimationEngine(30)
    by_line.load_commit(_metadata())
    by_change = AnimationEngine(30)
    by_change.load_commit(_metadata())
    assert _play(by_change, StepMode.CHANGE) <= _play(by_line, StepMode.LINE)
    assert by_change.buffer.lines == by_line.buffer.lines


def test_no_checkpoint_to_restore_after_load():
    engine = AnimationEngine(30)
    engine.load_commit(_metadata())
    assert engine.restore_line_checkpoint() is False
    assert engine.restore_change_checkpoint() is False


def test_restore_line_checkpoint_and_replay():
    engine = AnimationEngine(30)
    engine.load_commit(_metadata())
    _play(engine, StepMode.LINE)
    finished_at = engine.current_step
    assert engine.restore_line_checkpoint() is True
    assert engine.paused is True
    assert engine.state is AnimationState.PLAYING
    assert engine.current_step < finished_at
    _play(engine, StepMode.LINE)
    assert engine.is_finished()
    assert engine.buffer.lines == ["a", "c"]


def test_restore_change_checkpoint_and_replay():
    engine = AnimationEngine(30)
    engine.load_commit(_metadata())
    _play(engine, StepMode.LINE)
    assert engine.restore_change_checkpoint() is True
    assert engine.state is AnimationState.PLAYING
    _play(engine, StepMode.CHANGE)
    assert engine.buffer.lines == ["a", "c"]


def test_execute_editing_steps():
    engine = AnimationEngine(30)
    engine.execute_step(InsertLine(line=0, content="  "))
    assert engine.buffer.lines == ["  ", ""]
    assert engine.buffer.cursor_col == len("  ")
    assert engine.line_offset == 1
    assert engine.active_pane is ActivePane.EDITOR

    engine.execute_step(InsertChar(line=0, col=2, ch="x"))
    assert engine.buffer.lines[0] == "  x"
    assert engine.buffer.cursor_col == 3

    engine.execute_step(DeleteLine(line=0))
    assert engine.buffer.lines == [""]
    assert engine.line_offset == 0
    assert engine.buffer.cursor_col == 0


def test_pause_step_holds_tick():
    engine = AnimationEngine(10)
    engine.load_commit(_metadata())
    engine.execute_step(Pause(multiplier=1000.0))
    time.sleep(0.02)
    assert engine.tick() is True
    assert engine.current_step == 0


def test_user_pause_and_resume():
    engine = AnimationEngine(0)
    engine.load_commit(_metadata())
    engine.pause()
    time.sleep(0.02)
    assert engine.tick() is True
    assert engine.current_step == 0
    engine.resume()
    assert engine.paused is False
    deadline = time.monotonic() + 2.0
    while engine.current_step == 0 and time.monotonic() < deadline:
        time.sleep(0.01)
        engine.tick()
    assert engine.current_step > 0


def test_tick_plays_to_the_end():
    engine = AnimationEngine(0)
    engine.load_commit(_metadata())
    deadline = time.monotonic() + 3.0
    while not engine.is_finished() and time.monotonic() < deadline:
        time.sleep(0.01)
        engine.tick()
    assert engine.is_finished()
    assert engine.buffer.lines == ["a", "c"]
    assert engine.tick() is False


def test_speed_rules_apply_on_switch():
    engine = AnimationEngine(30)
    engine.set_speed_rules([SpeedRule.parse("*.java:50")])
    engine.execute_step(SwitchFile(0, "x\n", "y\n", "src/App.java"))
    assert engine.speed_ms == 50
    engine.execute_step(SwitchFile(1, "x\n", "y\n", "main.py"))
    assert engine.speed_ms == 30


def test_switch_file_loads_old_content():
    engine = AnimationEngine(30)
    old = "one\r\ntwo\n"
    new = "one\nthree\nfour\n"
    engine.execute_step(SwitchFile(3, old, new, "notes.txt"))
    assert engine.buffer.lines == ["one", "two"]
    assert engine.buffer.new_content_lines == ["one", "three", "four"]
    assert engine.buffer.old_content_line_offsets == line_offsets(old)
    assert engine.buffer.new_content_line_offsets == line_offsets(new)
    assert engine.current_file_index == 3
    assert engine.dialog_title is None


def test_switch_file_uses_highlighter():
    highlighter = _FakeHighlighter()
    engine = AnimationEngine(30, highlighter)
    engine.execute_step(SwitchFile(0, "old", "new", "main.rs"))
    assert highlighter.paths == ["main.rs"]
    assert engine.buffer.old_highlights == [("span", "old")]
    assert engine.buffer.new_highlights == [("span", "new")]
    assert engine.buffer.cached_highlights == engine.buffer.old_highlights


def test_scroll_follows_cursor():
    engine = AnimationEngine(30)
    engine.set_viewport_height(6)
    engine.set_content_width(80)
    for index in range(40):
        engine.execute_step(InsertLine(line=index, content=f"line {index}"))
    assert engine.buffer.scroll_offset == scroll_offset(
        engine.buffer.lines, engine.buffer.cursor_line, 6, 80
    )
    assert engine.buffer.scroll_offset <= engine.buffer.cursor_line
    assert engine.buffer.scroll_offset > 0