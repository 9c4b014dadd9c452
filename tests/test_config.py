"""Tests for configuration loading and saving."""

import tomllib
from pathlib import Path

import pytest

from pathmark.config import (
    CONFIG_FILENAME,
    config_as_dict,
    get_home_dir,
    load_config,
    save_config,
    set_config_value,
)


class TestConfig:
    def test_defaults(self, isolated_home: Path):
        config = load_config()
        assert config.home == isolated_home
        assert config.store_path == isolated_home / "paths.json"
        assert config.lock is True
        assert config.exclusive_quick is False
        assert not config.exists()

    def test_home_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PATHMARK_HOME", str(tmp_path / "elsewhere"))
        assert get_home_dir() == tmp_path / "elsewhere"

    def test_home_default(self, monkeypatch):
        monkeypatch.delenv("PATHMARK_HOME")
        assert get_home_dir() == Path.home() / ".pathmark"

    def test_toml_file(self, isolated_home: Path):
        isolated_home.mkdir()
        (isolated_home / CONFIG_FILENAME).write_text("""
[store]
file = "marks.json"
lock = false

[quick]
exclusive = true
""")
        config = load_config()
        assert config.store_path == isolated_home / "marks.json"
        assert config.lock is False
        assert config.exclusive_quick is True

    def test_absolute_store_file(self, isolated_home: Path, tmp_path):
        isolated_home.mkdir()
        target = tmp_path / "abs.json"
        (isolated_home / CONFIG_FILENAME).write_text(f'[store]\nfile = "{target}"\n')
        assert load_config().store_path == target

    def test_env_overrides_toml(self, isolated_home: Path, tmp_path, monkeypatch):
        isolated_home.mkdir()
        (isolated_home / CONFIG_FILENAME).write_text('[store]\nfile = "marks.json"\n')
        monkeypatch.setenv("PATHMARK_STORE", str(tmp_path / "env.json"))
        assert load_config().store_path == tmp_path / "env.json"  # env wins

    def test_invalid_toml(self, isolated_home: Path):
        isolated_home.mkdir()
        (isolated_home / CONFIG_FILENAME).write_text("[store\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_invalid_bool(self, isolated_home: Path):
        isolated_home.mkdir()
        (isolated_home / CONFIG_FILENAME).write_text('[quick]\nexclusive = "maybe"\n')
        with pytest.raises(ValueError):
            load_config()

    def test_save_round_trip(self, isolated_home: Path):
        config = load_config()
        config.exclusive_quick = True
        config.store_file = "other.json"
        save_config(config)

        with open(isolated_home / CONFIG_FILENAME, "rb") as f:
            data = tomllib.load(f)
        assert data["quick"]["exclusive"] is True

        reloaded = load_config()
        assert reloaded.exclusive_quick is True
        assert reloaded.store_path == isolated_home / "other.json"

    def test_override_not_persisted(self, isolated_home: Path, tmp_path, monkeypatch):
        monkeypatch.setenv("PATHMARK_STORE", str(tmp_path / "env.json"))
        save_config(load_config())
        monkeypatch.delenv("PATHMARK_STORE")
        assert load_config().store_path == isolated_home / "paths.json"


class TestSetConfigValue:
    def test_set_bool(self, isolated_home: Path):
        set_config_value(load_config(), "quick.exclusive", "yes")
        assert load_config().exclusive_quick is True

    def test_set_string(self):
        set_config_value(load_config(), "store.file", " marks.json ")
        assert load_config().store_file == "marks.json"

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            set_config_value(load_config(), "store.colour", "blue")

    def test_bad_value(self, isolated_home: Path):
        with pytest.raises(ValueError):
            set_config_value(load_config(), "store.lock", "sometimes")
        assert not (isolated_home / CONFIG_FILENAME).exists()

    def test_config_as_dict(self, isolated_home: Path):
        d = config_as_dict(load_config())
        assert d["quick.exclusive"] is False
        assert d["store.path"] == str(isolated_home / "paths.json")
