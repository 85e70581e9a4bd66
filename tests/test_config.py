from pathlib import Path
from unittest import mock

import pytest

from codeghost.config import Config, ConfigError, config_path, themes_dir


def test_defaults():
    config = Config()
    assert config.theme == "tokyo-night"
    assert config.speed == 30
    assert config.background is True
    assert config.order == "random"
    assert config.loop_playback is False
    assert config.ignore_patterns == []
    assert config.speed_rules == []


def test_load_missing_file_gives_defaults(tmp_path):
    assert Config.load(tmp_path / "missing.toml") == Config()


def test_load_partial_keeps_other_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('speed = 50\ntheme = "dracula"\n', encoding="utf-8")
    config = Config.load(path)
    assert config.speed == 50
    assert config.theme == "dracula"
    assert config.order == Config().order
    assert config.background is True


def test_load_lists_and_loop_playback(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        'loop_playback = true\nignore_patterns = ["*.png", "dist/**"]\n'
        'speed_rules = ["*.java:50"]\nbackground = false\n',
        encoding="utf-8",
    )
    config = Config.load(path)
    assert config.loop_playback is True
    assert config.ignore_patterns == ["*.png", "dist/**"]
    assert config.speed_rules == ["*.java:50"]
    assert config.background is False


def test_load_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('unknown = 1\norder = "asc"\n', encoding="utf-8")
    assert Config.load(path).order == "asc"


def test_load_invalid_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("speed = = 3\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse config file"):
        Config.load(path)


@pytest.mark.parametrize(
    "text",
    ['speed = "fast"\n', "speed = -1\n", 'background = "yes"\n', "ignore_patterns = [1]\n"],
)
def test_load_wrong_types(tmp_path, text):
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        Config.load(path)


def test_save_new_file_round_trip(tmp_path):
    path = tmp_path / "config.toml"
    config = Config(
        theme="dracula",
        speed=12,
        background=False,
        order="desc",
        ignore_patterns=["*.png", "dist/**"],
        speed_rules=["*.java:50", "*.xml:5"],
    )
    config.save(path)
    assert Config.load(path) == config
    assert path.read_text(encoding="utf-8").startswith("# codeghost configuration file\n")


def test_save_new_file_writes_loop_key(tmp_path):
    path = tmp_path / "config.toml"
    Config(loop_playback=True).save(path)
    text = path.read_text(encoding="utf-8")
    assert "loop = true\n" in text
    assert "ignore_patterns = []\n" in text


def test_save_existing_file_preserves_comments(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('# my own note\ntheme = "old"\n', encoding="utf-8")
    Config(theme="dracula", speed_rules=["*.rs:30"]).save(path)
    text = path.read_text(encoding="utf-8")
    assert "# my own note" in text
    loaded = Config.load(path)
    assert loaded.theme == "dracula"
    assert loaded.speed_rules == ["*.rs:30"]


def test_save_twice_round_trip(tmp_path):
    path = tmp_path / "config.toml"
    Config().save(path)
    updated = Config(theme="nord", speed=99, ignore_patterns=["*.svg"])
    updated.save(path)
    assert Config.load(path) == updated


def test_config_path_under_home(tmp_path):
    with mock.patch.object(Path, "home", return_value=tmp_path):
        path = config_path()
    assert path == tmp_path / ".config" / "codeghost" / "config.toml"
    assert path.parent.is_dir()


def test_themes_dir_created(tmp_path):
    with mock.patch.object(Path, "home", return_value=tmp_path):
        directory = themes_dir()
    assert directory == tmp_path / ".config" / "codeghost" / "themes"
    assert directory.is_dir()


def test_load_and_save_default_location(tmp_path):
    with mock.patch.object(Path, "home", return_value=tmp_path):
        Config(theme="nord").save()
        loaded = Config.load()
    assert loaded.theme == "nord"