"""Command-line options and the rules that combine them with the config file."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

from codeghost.buffer import SpeedRule

VERSION = "0.8.0"
_U64_MAX = 2**64 - 1


class PlaybackOrder(Enum):
    """Order in which commits are played back."""

    RANDOM = "random"
    ASC = "asc"
    DESC = "desc"

    def __str__(self) -> str:
        return self.value


def _bool_value(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise argparse.ArgumentTypeError(
        f"invalid value '{text}' (expected 'true' or 'false')"
    )


def _speed_value(text: str) -> int:
    if not text.isdigit() or int(text) > _U64_MAX:
        raise argparse.ArgumentTypeError(f"invalid speed '{text}'")
    return int(text)


def _author_value(text: str) -> str:
    if not text.strip():
        raise argparse.ArgumentTypeError("Author pattern cannot be empty")
    return text


def _order_value(text: str) -> PlaybackOrder:
    try:
        return PlaybackOrder(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid order '{text}'") from None


def _add_optional_bool(parser: argparse.ArgumentParser, flag: str, dest: str, help: str) -> None:
    parser.add_argument(
        flag,
        dest=dest,
        nargs="?",
        const=True,
        default=None,
        type=_bool_value,
        metavar="BOOL",
        help=help,
    )


def build_parser() -> argparse.ArgumentParser:
    """The argument parser with all options and subcommands."""
    parser = argparse.ArgumentParser(
        prog="codeghost",
        description="A Git history screensaver - watch your code rewrite itself",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-p", "--path", type=Path, metavar="PATH",
        help="Path to Git repository (defaults to current directory)",
    )
    parser.add_argument(
        "-c", "--commit", metavar="HASH_OR_RANGE",
        help="Replay a specific commit or commit range (e.g., HEAD~5..HEAD or abc123..)",
    )
    parser.add_argument(
        "-s", "--speed", type=_speed_value, metavar="MS",
        help="Typing speed in milliseconds per character (overrides config file)",
    )
    parser.add_argument(
        "-t", "--theme", metavar="NAME", help="Theme to use (overrides config file)"
    )
    _add_optional_bool(
        parser, "--background", "background",
        "Show background colors (use --background=false for transparent background)",
    )
    parser.add_argument(
        "--order", type=_order_value, choices=list(PlaybackOrder), metavar="ORDER",
        help="Commit playback order: random, asc or desc (overrides config file)",
    )
    _add_optional_bool(
        parser, "--loop", "loop_playback", "Loop the animation continuously"
    )
    parser.add_argument(
        "--license", action="store_true",
        help="Display third-party license information",
    )
    parser.add_argument(
        "-a", "--author", type=_author_value, metavar="PATTERN",
        help="Filter commits by author name or email (partial match, case-insensitive)",
    )
    parser.add_argument(
        "--before", metavar="DATE",
        help="Show commits before this date (e.g., '2024-01-01', '1 week ago', 'yesterday')",
    )
    parser.add_argument(
        "--after", metavar="DATE",
        help="Show commits after this date (e.g., '2024-01-01', '1 week ago', 'yesterday')",
    )
    parser.add_argument(
        "-i", "--ignore", action="append", default=[], metavar="PATTERN",
        help="Ignore files matching pattern (can be given multiple times)",
    )
    parser.add_argument(
        "--ignore-file", dest="ignore_file", type=Path, metavar="PATH",
        help="Path to file containing ignore patterns (one per line)",
    )
    parser.add_argument(
        "--speed-rule", dest="speed_rule", action="append", default=[],
        metavar="PATTERN:MS",
        help="Typing speed for files matching pattern (e.g., '*.java:50')",
    )

    commands = parser.add_subparsers(dest="command")

    theme = commands.add_parser("theme", help="Theme management commands")
    theme_commands = theme.add_subparsers(dest="theme_command", required=True)
    theme_commands.add_parser("list", help="List all available themes")
    theme_set = theme_commands.add_parser("set", help="Set default theme in config file")
    theme_set.add_argument("name", metavar="NAME", help="Theme name to set as default")

    diff = commands.add_parser(
        "diff",
        help="Show staged working tree changes (use --unstaged for unstaged changes)",
    )
    diff.add_argument(
        "--unstaged", action="store_true",
        help="Show unstaged changes instead of staged",
    )
    diff.add_argument(
        "-s", "--speed", dest="diff_speed", type=_speed_value, metavar="MS",
        help="Typing speed in milliseconds per character",
    )
    diff.add_argument("-t", "--theme", dest="diff_theme", metavar="NAME", help="Theme to use")
    _add_optional_bool(
        diff, "--background", "diff_background",
        "Show background colors (use --background=false for transparent)",
    )
    _add_optional_bool(diff, "--loop", "diff_loop_playback", "Loop the animation continuously")
    diff.add_argument(
        "-i", "--ignore", dest="diff_ignore", action="append", default=[],
        metavar="PATTERN", help="Ignore files matching pattern",
    )
    diff.add_argument(
        "--speed-rule", dest="diff_speed_rule", action="append", default=[],
        metavar="PATTERN:MS",
        help="Typing speed for files matching pattern (e.g., '*.java:50')",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments; ``argv`` defaults to ``sys.argv[1:]``."""
    return build_parser().parse_args(argv)


def read_ignore_file(path: Path | str) -> list[str]:
    """Patterns from an ignore file, skipping blank and ``#`` comment lines.

    A file that cannot be read gives no patterns.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []
    lines = (line.removesuffix("\r") for line in content.split("\n"))
    return [line for line in lines if line.strip() and not line.startswith("#")]


def collect_speed_rules(
    cli_rules: Iterable[str], config_rules: Iterable[str]
) -> list[SpeedRule]:
    """Parse command-line rules first, then config rules; invalid ones are skipped."""
    rules: list[SpeedRule] = []
    for text in (*cli_rules, *config_rules):
        rule = SpeedRule.parse(text)
        if rule is None:
            print(f"Warning: Invalid speed rule '{text}', skipping", file=sys.stderr)
        else:
            rules.append(rule)
    return rules


def resolve_order(
    cli_order: PlaybackOrder | None,
    config_order: str,
    is_range_mode: bool,
    is_filtered: bool,
) -> PlaybackOrder:
    """Playback order from the command line, else the config file.

    Ranges and filtered playback default to ascending order unless an
    order was given on the command line.
    """
    if cli_order is not None:
        return cli_order
    if is_range_mode or is_filtered:
        return PlaybackOrder.ASC
    if config_order == "asc":
        return PlaybackOrder.ASC
    if config_order == "desc":
        return PlaybackOrder.DESC
    return PlaybackOrder.RANDOM