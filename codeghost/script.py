"""The full sequence of animation steps that replays one commit."""

from __future__ import annotations

from codeghost.changes import CommitMetadata, FileChange, FileStatus
from codeghost.steps import (
    CHECKOUT_OUTPUT_PAUSE,
    CHECKOUT_PAUSE,
    COMMIT_OUTPUT_PAUSE,
    FILE_SWITCH_PAUSE,
    GIT_ADD_CMD_PAUSE,
    GIT_ADD_PAUSE,
    GIT_COMMIT_PAUSE,
    GIT_PUSH_PAUSE,
    OPEN_CMD_PAUSE,
    OPEN_DIALOG_PAUSE,
    OPEN_FILE_FIRST_PAUSE,
    OPEN_FILE_PAUSE,
    PUSH_FINAL_PAUSE,
    PUSH_OUTPUT_PAUSE,
    DialogTypeChar,
    OpenFileDialogStart,
    Pause,
    ResetState,
    Step,
    SwitchFile,
    TerminalOutput,
    TerminalPrompt,
    TerminalTypeChar,
    file_steps,
)


def terminal_command(command: str) -> list[Step]:
    """A prompt followed by the command typed one character at a time."""
    return [TerminalPrompt(), *(TerminalTypeChar(ch=ch) for ch in command)]


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def _switch(index: int, change: FileChange, new_content: str | None) -> SwitchFile:
    return SwitchFile(
        file_index=index,
        old_content=change.old_content or "",
        new_content=new_content or "",
        path=change.path,
    )


def _intro(metadata: CommitMetadata) -> list[Step]:
    count = len(metadata.changes)
    if metadata.is_working_tree():
        return [
            *terminal_command("git diff --stat"),
            Pause(CHECKOUT_PAUSE),
            TerminalOutput(f"📝 {metadata.message}"),
            TerminalOutput(f"📁 {count} file{_plural(count)} changed"),
            Pause(CHECKOUT_OUTPUT_PAUSE),
        ]
    stamp = metadata.date.strftime("%Y-%m-%d %H:%M:%S")
    return [
        *terminal_command(f"time-travel {stamp}"),
        Pause(CHECKOUT_PAUSE),
        TerminalOutput("⚡ Initializing temporal displacement field..."),
        Pause(CHECKOUT_OUTPUT_PAUSE * 0.5),
        TerminalOutput("✨ Warping through spacetime..."),
        Pause(CHECKOUT_OUTPUT_PAUSE * 0.5),
        TerminalOutput(f"🕰️  Arrived at {stamp}"),
        TerminalOutput(
            f"📍 Location: commit {metadata.hash[:7]} by {metadata.author}"
        ),
        Pause(CHECKOUT_OUTPUT_PAUSE),
    ]


def _change_steps(index: int, change: FileChange) -> list[Step]:
    if change.is_excluded:
        reason = change.exclusion_reason or "excluded file"
        return [
            _switch(index, change, change.new_content),
            Pause(OPEN_FILE_PAUSE),
            TerminalOutput(f"📦 {change.path} (skipped - {reason})"),
            Pause(OPEN_CMD_PAUSE),
        ]

    if change.status is FileStatus.DELETED:
        return [
            _switch(index, change, None),
            Pause(GIT_ADD_PAUSE),
            *terminal_command(f"rm {change.path}"),
            Pause(GIT_ADD_CMD_PAUSE),
            *terminal_command(f"git add {change.path}"),
            Pause(GIT_ADD_CMD_PAUSE),
        ]

    if change.status is FileStatus.RENAMED:
        steps: list[Step] = [
            _switch(index, change, change.new_content),
            Pause(GIT_ADD_PAUSE),
        ]
        if change.old_path is not None:
            steps += terminal_command(f"mv {change.old_path} {change.path}")
            steps.append(Pause(GIT_ADD_CMD_PAUSE))
        steps += terminal_command(f"git add {change.path}")
        steps.append(Pause(GIT_ADD_CMD_PAUSE))
        return steps

    return [
        Pause(OPEN_FILE_FIRST_PAUSE if index == 0 else OPEN_FILE_PAUSE),
        OpenFileDialogStart(),
        Pause(OPEN_DIALOG_PAUSE),
        *(DialogTypeChar(ch=ch) for ch in change.path),
        Pause(OPEN_CMD_PAUSE),
        _switch(index, change, change.new_content),
        Pause(FILE_SWITCH_PAUSE),
        *file_steps(change),
        Pause(GIT_ADD_PAUSE),
        *terminal_command(f"git add {change.path}"),
        Pause(GIT_ADD_CMD_PAUSE),
    ]


def _outro(metadata: CommitMetadata) -> list[Step]:
    if metadata.is_working_tree():
        return [Pause(PUSH_FINAL_PAUSE)]
    short = metadata.hash[:7]
    subject = metadata.message.split("\n")[0].removesuffix("\r") if metadata.message else "Update"
    count = len(metadata.changes)
    return [
        *terminal_command(f'git commit -m "{subject}"'),
        Pause(GIT_COMMIT_PAUSE),
        TerminalOutput(f"💾 [main {short}] {subject}"),
        TerminalOutput(f"📝 {count} file{_plural(count)} changed - immortalized forever!"),
        Pause(COMMIT_OUTPUT_PAUSE),
        *terminal_command("git push origin main"),
        Pause(GIT_PUSH_PAUSE),
        TerminalOutput("🚀 Launching code into the cloud..."),
        Pause(PUSH_OUTPUT_PAUSE),
        TerminalOutput("📦 Compressing digital dreams: 100% (5/5)"),
        Pause(PUSH_OUTPUT_PAUSE),
        TerminalOutput("✍️  Signing with invisible ink: done."),
        Pause(GIT_PUSH_PAUSE),
        TerminalOutput("📡 Beaming to origin/main via satellite..."),
        Pause(PUSH_OUTPUT_PAUSE),
        TerminalOutput(f"   {short}..{short} ✨ SUCCESS"),
        Pause(PUSH_FINAL_PAUSE),
    ]


def build_steps(metadata: CommitMetadata) -> list[Step]:
    """Every step that replays ``metadata``, files in file tree order."""
    steps = _intro(metadata)
    steps.append(ResetState())
    for index in metadata.sorted_file_indices():
        steps += _change_steps(index, metadata.changes[index])
    steps += _outro(metadata)
    return steps