"""User settings stored as TOML in the user's configuration directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

APP_NAME = "codeghost"
CONFIG_FILE_NAME = "config.toml"

DEFAULT_THEME = "tokyo-night"
DEFAULT_SPEED = 30
DEFAULT_BACKGROUND = True
DEFAULT_ORDER = "random"
DEFAULT_LOOP = False

_U64_MAX = 2**64 - 1


class ConfigError(Exception):
    """Raised when the configuration cannot be read, parsed or written."""


def _home() -> Path:
    try:
        return Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ConfigError("Failed to determine home directory") from exc


def _ensure_dir(directory: Path, what: str) -> Path:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Failed to create {what} directory: {directory}") from exc
    return directory


def config_path() -> Path:
    """Path of the configuration file; its directory is created if missing."""
    directory = _ensure_dir(_home() / ".config" / APP_NAME, "config")
    return directory / CONFIG_FILE_NAME


def themes_dir() -> Path:
    """Directory for user themes, created if missing."""
    return _ensure_dir(_home() / ".config" / APP_NAME / "themes", "themes")


def _check_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _check_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean")
    return value


def _check_speed(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer")
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"'{key}' must be a non-negative integer")
    return value


def _check_str_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'{key}' must be an array of strings")
    return list(value)


def _quoted_array(items: list[str]) -> str:
    if not items:
        return "[]"
    return "[" + ", ".join(f'"{item}"' for item in items) + "]"


@dataclass
class Config:
    """Settings that apply when no command-line option overrides them."""

    theme: str = DEFAULT_THEME
    speed: int = DEFAULT_SPEED
    background: bool = DEFAULT_BACKGROUND
    order: str = DEFAULT_ORDER
    loop_playback: bool = DEFAULT_LOOP
    ignore_patterns: list[str] = field(default_factory=list)
    speed_rules: list[str] = field(default_factory=list)

    @classmethod
    def _from_mapping(cls, data: dict[str, Any]) -> Config:
        config = cls()
        if "theme" in data:
            config.theme = _check_str(data["theme"], "theme")
        if "speed" in data:
            config.speed = _check_speed(data["speed"], "speed")
        if "background" in data:
            config.background = _check_bool(data["background"], "background")
        if "order" in data:
            config.order = _check_str(data["order"], "order")
        if "loop_playback" in data:
            config.loop_playback = _check_bool(data["loop_playback"], "loop_playback")
        if "ignore_patterns" in data:
            config.ignore_patterns = _check_str_list(
                data["ignore_patterns"], "ignore_patterns"
            )
        if "speed_rules" in data:
            config.speed_rules = _check_str_list(data["speed_rules"], "speed_rules")
        return config

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Read settings from ``path`` (default: :func:`config_path`).

        A missing file gives the defaults; missing keys keep their defaults.
        """
        file_path = Path(path) if path is not None else config_path()
        if not file_path.exists():
            return cls()
        try:
            contents = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read config file: {file_path}") from exc
        try:
            data = tomlkit.parse(contents).unwrap()
            return cls._from_mapping(data)
        except (TOMLKitError, ValueError) as exc:
            raise ConfigError(f"Failed to parse config file: {file_path}") from exc

    def _render_new(self) -> str:
        return (
            f"# {APP_NAME} configuration file\n"
            "# All settings are optional and will use defaults if not specified\n"
            "\n"
            "# Theme to use for syntax highlighting\n"
            f'theme = "{self.theme}"\n'
            "\n"
            "# Typing speed in milliseconds per character\n"
            f"speed = {self.speed}\n"
            "\n"
            "# Show background colors (set to false for transparent background)\n"
            f"background = {str(self.background).lower()}\n"
            "\n"
            "# Commit playback order: random, asc, or desc\n"
            f'order = "{self.order}"\n'
            "\n"
            "# Loop the animation continuously\n"
            f"loop = {str(self.loop_playback).lower()}\n"
            "\n"
            "# Ignore patterns (gitignore syntax)\n"
            '# Examples: ["*.png", "*.ipynb", "dist/**"]\n'
            f"ignore_patterns = {_quoted_array(self.ignore_patterns)}\n"
            "\n"
            "# Speed rules for different file types (pattern:milliseconds)\n"
            '# Examples: ["*.java:50", "*.xml:5", "*.rs:30"]\n'
            f"speed_rules = {_quoted_array(self.speed_rules)}\n"
        )

    def _render_existing(self, existing: str, file_path: Path) -> str:
        try:
            doc = tomlkit.parse(existing)
        except TOMLKitError as exc:
            raise ConfigError(f"Failed to parse config file: {file_path}") from exc
        doc["theme"] = self.theme
        doc["speed"] = self.speed
        doc["background"] = self.background
        doc["order"] = self.order
        doc["loop"] = self.loop_playback
        patterns = tomlkit.array()
        patterns.extend(self.ignore_patterns)
        doc["ignore_patterns"] = patterns
        rules = tomlkit.array()
        rules.extend(self.speed_rules)
        doc["speed_rules"] = rules
        return doc.as_string()

    def save(self, path: Path | str | None = None) -> None:
        """Write settings, keeping the comments of an existing file."""
        file_path = Path(path) if path is not None else config_path()
        if file_path.exists():
            try:
                existing = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise ConfigError(f"Failed to read config file: {file_path}") from exc
            contents = self._render_existing(existing, file_path)
        else:
            contents = self._render_new()
        try:
            file_path.write_text(contents, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to write config file: {file_path}") from exc