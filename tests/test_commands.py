"""Tests for the command layer (record, list, navigate, remove, quick, clear)."""

import logging
import os
from pathlib import Path

import pytest

from pathmark import commands
from pathmark.errors import InvalidSelector, NotFoundError


class TestRecord:
    def test_records_current_directory(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        b = commands.record(store, "alpha")
        assert b.path == str(dirs["alpha"])
        assert b.name == "alpha"
        assert b.sequence_number == 1

    def test_unnamed(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["beta"])
        assert commands.record(store).name == ""

    def test_explicit_directory_made_absolute(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["alpha"].parent)
        b = commands.record(store, cwd=Path("gamma"))
        assert b.path == str(dirs["gamma"])

    def test_numeric_name_warns(self, store, caplog):
        """An all-digit name would always be read back as a position."""
        with caplog.at_level(logging.WARNING, logger="pathmark.commands"):
            b = commands.record(store, "3", cwd=Path("/srv"))
        assert b.name == "3"
        assert "numeric" in caplog.text

    def test_text_name_does_not_warn(self, store, caplog):
        with caplog.at_level(logging.WARNING, logger="pathmark.commands"):
            commands.record(store, "v2", cwd=Path("/srv"))
        assert caplog.text == ""

    def test_missing_directory_is_recorded(self, store, tmp_path):
        """Existence is checked on navigation, not when recording."""
        b = commands.record(store, cwd=tmp_path / "not-yet")
        assert b.path.endswith("not-yet")


class TestList:
    def test_lazy_and_fresh(self, store):
        store.append("/srv/a", "a")
        listing = commands.list_bookmarks(store)
        # Generator body has not run yet, so later writes are seen
        store.append("/srv/b", "b")
        assert [b.name for b in listing] == ["a", "b"]

    def test_each_call_reflects_latest_state(self, store):
        store.append("/srv/a", "a")
        assert len(list(commands.list_bookmarks(store))) == 1
        store.remove("a")
        assert list(commands.list_bookmarks(store)) == []


class TestSelect:
    def test_changes_directory(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        store.append(str(dirs["beta"]), "beta")
        b = commands.select(store, "beta")
        assert Path(os.getcwd()) == dirs["beta"]
        assert b.is_last

    def test_by_index(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        store.append(str(dirs["beta"]))
        store.append(str(dirs["gamma"]))
        commands.select(store, "2")
        assert Path(os.getcwd()) == dirs["gamma"]

    def test_unknown_selector(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        store.append(str(dirs["beta"]), "beta")
        with pytest.raises(NotFoundError):
            commands.select(store, "nope")
        with pytest.raises(NotFoundError):
            commands.select(store, "5")
        assert Path(os.getcwd()) == dirs["alpha"]

    def test_vanished_directory(self, store, dirs, tmp_path, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        gone = tmp_path / "gone"
        gone.mkdir()
        store.append(str(gone), "gone")
        gone.rmdir()
        before = store.path.read_bytes()
        with pytest.raises(NotFoundError, match="missing directory"):
            commands.select(store, "gone")
        assert Path(os.getcwd()) == dirs["alpha"]
        assert store.path.read_bytes() == before

    def test_unwritable_store_still_navigates(self, store, dirs, monkeypatch, caplog):
        """Failing to remember the last bookmark doesn't fail the selection."""
        monkeypatch.chdir(dirs["alpha"])
        store.append(str(dirs["beta"]), "beta")
        before = store.path.read_bytes()

        def fail_replace(src, dst):
            raise OSError("read-only file system")

        with monkeypatch.context() as m:
            m.setattr(os, "replace", fail_replace)
            with caplog.at_level(logging.WARNING, logger="pathmark.commands"):
                b = commands.select(store, "beta")

        assert b.path == str(dirs["beta"])
        assert Path(os.getcwd()) == dirs["beta"]
        assert "Could not remember last bookmark" in caplog.text
        assert store.path.read_bytes() == before

    def test_empty_selector(self, store):
        with pytest.raises(InvalidSelector):
            commands.select(store, "")

    def test_last_returns_to_selected(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        store.append(str(dirs["beta"]), "beta")
        store.append(str(dirs["gamma"]), "gamma")
        commands.select(store, "gamma")
        os.chdir(dirs["alpha"])
        assert commands.last(store).name == "gamma"
        assert Path(os.getcwd()) == dirs["gamma"]

    def test_last_without_selection(self, store):
        store.append("/srv/a")
        with pytest.raises(NotFoundError):
            commands.last(store)


class TestRemove:
    def test_remove(self, store):
        store.append("/srv/a", "a")
        store.append("/srv/b", "b")
        assert commands.remove(store, "1").name == "a"
        assert [(b.sequence_number, b.name) for b in store.load()] == [(1, "b")]

    def test_remove_missing(self, store):
        store.append("/srv/a", "a")
        with pytest.raises(NotFoundError):
            commands.remove(store, "b")
        assert len(store.load()) == 1


class TestQuick:
    def test_set_and_get(self, store, dirs, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        store.append(str(dirs["beta"]), "beta")
        commands.set_quick(store, "beta")
        b = commands.get_quick(store)
        assert b.is_quick
        assert Path(os.getcwd()) == dirs["beta"]

    def test_set_missing(self, store):
        with pytest.raises(NotFoundError):
            commands.set_quick(store, "1")

    def test_get_without_quick(self, store):
        store.append("/srv/a")
        with pytest.raises(NotFoundError, match="No quick path"):
            commands.get_quick(store)

    def test_get_vanished(self, store, dirs, tmp_path, monkeypatch):
        monkeypatch.chdir(dirs["alpha"])
        store.append(str(tmp_path / "missing"), "missing")
        commands.set_quick(store, "missing")
        with pytest.raises(NotFoundError):
            commands.get_quick(store)
        assert Path(os.getcwd()) == dirs["alpha"]


class TestClearAll:
    def test_clear(self, store):
        store.append("/srv/a")
        store.append("/srv/b")
        assert commands.clear_all(store) == 2
        assert list(commands.list_bookmarks(store)) == []
