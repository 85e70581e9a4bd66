from datetime import datetime, timezone

from codeghost.changes import (
    WORKING_TREE_HASH,
    CommitMetadata,
    DiffHunk,
    FileChange,
    FileStatus,
    LineChange,
    LineChangeType,
)
from codeghost.script import build_steps, terminal_command
from codeghost.steps import (
    PUSH_FINAL_PAUSE,
    DialogTypeChar,
    OpenFileDialogStart,
    Pause,
    ResetState,
    SwitchFile,
    TerminalOutput,
    TerminalPrompt,
    TerminalTypeChar,
)

HASH = "0123456789abcdef0123456789abcdef01234567"
DATE = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _commands(steps):
    commands = []
    for step in steps:
        if isinstance(step, TerminalPrompt):
            commands.append("")
        elif isinstance(step, TerminalTypeChar):
            commands[-1] += step.ch
    return commands


def _outputs(steps):
    return [step.text for step in steps if isinstance(step, TerminalOutput)]


def _modified(path):
    hunk = DiffHunk(1, 1, 1, 1, [
        LineChange(LineChangeType.DELETION, "a\n"),
        LineChange(LineChangeType.ADDITION, "b\n"),
    ])
    return FileChange(path=path, status=FileStatus.MODIFIED,
                      old_content="a\n", new_content="b\n", hunks=[hunk])


def _commit(changes, message="Fix things\n\nbody"):
    return CommitMetadata(hash=HASH, author="Ada", date=DATE,
                          message=message, changes=changes)


def test_terminal_command():
    assert terminal_command("ls") == [
        TerminalPrompt(), TerminalTypeChar("l"), TerminalTypeChar("s")
    ]


def test_commit_script_structure():
    steps = build_steps(_commit([_modified("src/a.rs")]))
    commands = _commands(steps)
    assert commands[0] == "time-travel " + DATE.strftime("%Y-%m-%d %H:%M:%S")
    assert "git add src/a.rs" in commands
    assert 'git commit -m "Fix things"' in commands
    assert commands[-1] == "git push origin main"
    assert steps.count(ResetState()) == 1
    assert steps[-1] == Pause(PUSH_FINAL_PAUSE)
    outputs = _outputs(steps)
    assert "🚀 Launching code into the cloud..." in outputs
    assert f"📍 Location: commit {HASH[:7]} by Ada" in outputs
    assert f"   {HASH[:7]}..{HASH[:7]} ✨ SUCCESS" in outputs


def test_dialog_types_path_before_switch():
    steps = build_steps(_commit([_modified("src/a.rs")]))
    start = steps.index(OpenFileDialogStart())
    switch = next(i for i, s in enumerate(steps) if isinstance(s, SwitchFile))
    typed = "".join(s.ch for s in steps[start:switch] if isinstance(s, DialogTypeChar))
    assert typed == "src/a.rs"
    assert steps[switch] == SwitchFile(0, "a\n", "b\n", "src/a.rs")


def test_empty_message_uses_update():
    commands = _commands(build_steps(_commit([_modified("a")], message="")))
    assert 'git commit -m "Update"' in commands


def test_working_tree_script():
    metadata = CommitMetadata(hash=WORKING_TREE_HASH, author="Working Tree",
                              date=DATE, message="Staged changes",
                              changes=[_modified("a.txt")])
    steps = build_steps(metadata)
    commands = _commands(steps)
    assert commands[0] == "git diff --stat"
    assert "git push origin main" not in commands
    assert "📝 Staged changes" in _outputs(steps)
    assert steps[-1] == Pause(PUSH_FINAL_PAUSE)


def test_deleted_file_uses_rm():
    change = FileChange(path="old.txt", status=FileStatus.DELETED, old_content="x\n")
    steps = build_steps(_commit([change]))
    commands = _commands(steps)
    assert "rm old.txt" in commands
    assert "git add old.txt" in commands
    assert OpenFileDialogStart() not in steps
    assert SwitchFile(0, "x\n", "", "old.txt") in steps


def test_renamed_file_uses_mv():
    change = FileChange(path="new.txt", old_path="old.txt",
                        status=FileStatus.RENAMED)
    commands = _commands(build_steps(_commit([change])))
    assert "mv old.txt new.txt" in commands
    assert "git add new.txt" in commands


def test_excluded_file_is_skipped():
    locked = FileChange(path="Cargo.lock", status=FileStatus.MODIFIED,
                        is_excluded=True, exclusion_reason="lock/generated file")
    other = FileChange(path="z.bin", status=FileStatus.MODIFIED, is_excluded=True)
    steps = build_steps(_commit([locked, other]))
    outputs = _outputs(steps)
    assert "📦 Cargo.lock (skipped - lock/generated file)" in outputs
    assert "📦 z.bin (skipped - excluded file)" in outputs
    assert OpenFileDialogStart() not in steps


def test_files_follow_tree_order():
    metadata = _commit([_modified("src/b.rs"), _modified("a.rs"), _modified("lib/c.rs")])
    switches = [s.file_index for s in build_steps(metadata) if isinstance(s, SwitchFile)]
    assert switches == metadata.sorted_file_indices()
    assert sorted(switches) == [0, 1, 2]