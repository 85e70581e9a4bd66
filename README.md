# codeghost

codeghost turns a commit's changes into a slow, typed-out replay. From a
description of a commit it builds a script of editor and terminal steps:
a time-travel intro, opening each file through an "Open File..." dialog,
moving the cursor with eased scrolling, deleting and inserting lines,
typing characters one at a time, and then `git add`, `git commit` and
`git push` in a simulated terminal. An animation engine plays that script
back frame by frame, keeps the cursor near the middle of the viewport and
records checkpoints so playback can be stepped and rewound.

## Modules

- `codeghost.changes`: the data model: `CommitMetadata`, `FileChange`,
  `DiffHunk`, `LineChange`, and the enums `FileStatus`, `LineChangeType`
  and `DiffMode`. `CommitMetadata.sorted_file_indices()` gives files in
  file tree order (directory, then filename); a commit whose hash is
  `"working-tree"` is treated as uncommitted changes.
- `codeghost.patch`: `parse_patch` reads the hunks of one file's unified
  diff text; `parse_hunk_header` reads a single `@@ -a,b +c,d @@` line.
  Malformed hunks raise `PatchError`. Line contents keep their newline.
- `codeghost.globmatch`: `Glob` and `GlobSet`. `*` and `?` also match
  `/`, `**` as a whole component matches any number of directories, and
  `[...]`, `{a,b}` and `\` escapes are supported. Bad patterns raise
  `GlobError`.
- `codeghost.history`: `matches_author` (case-insensitive partial match on
  name or email), `matches_date_filter`, `parse_date` (ISO dates,
  `MM/DD/YYYY`, month names, `yesterday`, `3 days ago`, `last friday` and
  the like, returned in UTC), `split_range` for `A..B` and `A..` ranges
  (`...` is rejected), and `CommitPlaylist` for oldest-first, newest-first
  or random selection of commit ids. Errors raise `HistoryError`.
- `codeghost.buffer`: `EditorBuffer`, the lines being edited with cursor,
  scroll and highlight state; `line_offsets` for UTF-8 byte offsets of
  each line; and `SpeedRule`, a per-file typing speed written as
  `PATTERN:MILLISECONDS`.
- `codeghost.steps`: the step types (`InsertChar`, `InsertLine`,
  `DeleteLine`, `MoveCursor`, `Pause`, `SwitchFile`, `OpenFileDialogStart`,
  `DialogTypeChar`, `TerminalPrompt`, `TerminalTypeChar`, `TerminalOutput`,
  `ResetState`) and the functions that turn hunks into editing steps
  (`hunk_steps`, `file_steps`, `cursor_movement_steps`).
- `codeghost.script`: `build_steps(metadata)` builds the whole script for
  a commit; `terminal_command` builds a typed terminal command. Deleted and
  renamed files get `rm`/`mv` and `git add` only, and files with
  `is_excluded` set are shown as skipped with their `exclusion_reason`.
- `codeghost.layout`: `line_display_height` and `scroll_offset`, which
  wrap lines by terminal display width.
- `codeghost.engine`: `AnimationEngine`, with `load_commit`, `tick`,
  `manual_step`, `pause`/`resume`, `restore_line_checkpoint` and
  `restore_change_checkpoint`, plus `AnimationState`, `ActivePane` and
  `StepMode`.
- `codeghost.config`: `Config`, read with `Config.load` and written with
  `Config.save`. The default location is `~/.config/codeghost/config.toml`
  (`config_path()`); saving over an existing file keeps its comments.
  Missing keys fall back to: theme `tokyo-night`, speed 30 ms per
  character, background on, order `random`, no looping, and no ignore
  patterns or speed rules. Problems raise `ConfigError`.
- `codeghost.paths`: `find_git_root` and `validate_repo_path`, which walk
  up from a path to the directory holding `.git` and raise
  `RepoPathError` when there is none.
- `codeghost.cli`: `build_parser` and `parse_args` for the options
  (`--path`, `--commit`, `--speed`, `--theme`, `--background`, `--order`,
  `--loop`, `--author`, `--before`, `--after`, `--ignore`, `--ignore-file`,
  `--speed-rule`, and the `theme` and `diff` subcommands), along with
  `resolve_order`, `collect_speed_rules`, `read_ignore_file` and the
  `PlaybackOrder` enum.

## Examples

Typing speed per file type:

```python
from codeghost.buffer import SpeedRule

rule = SpeedRule.parse("*.java:50")
rule.matches("src/App.java")   # True
rule.speed_ms                  # 50
SpeedRule.parse("no-speed")    # None
```

Editing a buffer directly:

```python
from codeghost.buffer import EditorBuffer

buf = EditorBuffer.from_content("first\nthird")
buf.insert_line(1, "second")
buf.lines   # ["first", "second", "third"]
```

Matching ignore globs:

```python
from codeghost.globmatch import GlobSet

ignored = GlobSet(["*.svg", "dist/**"])
ignored.matches("assets/icon.svg")   # True
ignored.matches("dist/css/main.css") # True
ignored.matches("src/index.js")      # False
```

Replaying a commit built from diff text:

```python
from datetime import datetime, timezone

from codeghost.changes import CommitMetadata, FileChange, FileStatus
from codeghost.engine import AnimationEngine, StepMode
from codeghost.patch import parse_patch

change = FileChange(
    path="notes.txt",
    status=FileStatus.MODIFIED,
    old_content="one\ntwo\n",
    new_content="one\n2\n",
    hunks=parse_patch("@@ -1,2 +1,2 @@\n one\n-two\n+2\n"),
)
metadata = CommitMetadata(
    hash="0123456789abcdef",
    author="Ada",
    date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    message="Fix notes",
    changes=[change],
)

engine = AnimationEngine(speed_ms=30)
engine.load_commit(metadata)
while engine.manual_step(StepMode.CHANGE):
    pass
engine.is_finished()   # True
```

For real-time playback, call `engine.tick()` in a loop and redraw when it
returns True; `engine.buffer`, `engine.terminal_lines`,
`engine.dialog_title` and `engine.active_pane` describe what to show.

## What the package does not do

- It does not read Git repositories. There is no commit walking and no
  diff extraction from repository objects: callers build
  `CommitMetadata` themselves, for instance from diff text with
  `parse_patch`, and pick commit ids with `CommitPlaylist`.
- It does not decide which files to skip. There is no built-in list of
  lock files or generated files; set `is_excluded` and `exclusion_reason`
  on a `FileChange` to have it shown as skipped.
- It draws nothing on screen and has no themes. The engine only holds
  state; rendering is up to the caller.
- It has no syntax highlighter of its own. `AnimationEngine` accepts any
  object with `set_language_from_path(path)` and `highlight(content)`.
- It installs no command. `parse_args` parses the options, but nothing in
  the package runs a player from them.