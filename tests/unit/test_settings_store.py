"""Tests for the JSON settings store."""

from __future__ import annotations

import json
import os
import stat
import sys

import pytest

from sqlcomplete.stores.settings import SettingsStore, load_settings, save_settings


@pytest.fixture
def settings_store(tmp_path):
    """Create a SettingsStore with a temporary file."""
    return SettingsStore(file_path=tmp_path / "config" / "settings.json")


class TestSettingsStore:
    """Tests for SettingsStore functionality."""

    def test_missing_file(self, settings_store):
        assert settings_store.load_all() == {}
        assert settings_store.get("keyword_casing", "auto") == "auto"

    def test_set_and_get(self, settings_store):
        settings_store.set("keyword_casing", "lower")
        assert settings_store.get("keyword_casing") == "lower"

    def test_set_keeps_other_keys(self, settings_store):
        settings_store.save_all({"theme": "dark"})
        settings_store.set("ranked_completion", True)
        assert settings_store.load_all() == {"theme": "dark", "ranked_completion": True}

    def test_update_merges(self, settings_store):
        settings_store.save_all({"theme": "dark", "log_level": "INFO"})
        written = settings_store.update({"log_level": "DEBUG"})
        assert written == {"theme": "dark", "log_level": "DEBUG"}
        assert settings_store.load_all() == written

    def test_delete_key_with_null_value(self, settings_store):
        settings_store.save_all({"log_file": None})
        assert settings_store.delete("log_file") is True

    def test_delete(self, settings_store):
        settings_store.set("log_level", "DEBUG")
        assert settings_store.delete("log_level") is True
        assert settings_store.delete("log_level") is False
        assert settings_store.load_all() == {}

    def test_non_object_file(self, settings_store):
        """A settings file holding a list reads as empty."""
        settings_store.save_all({})
        settings_store.file_path.write_text("[1, 2]")
        assert settings_store.load_all() == {}

    def test_corrupt_file(self, settings_store):
        settings_store.save_all({})
        settings_store.file_path.write_text("{oops")
        assert settings_store.load_all() == {}

    def test_write_leaves_no_temp_files(self, settings_store):
        settings_store.save_all({"a": 1})
        settings_store.save_all({"a": 2})
        assert [p.name for p in settings_store.file_path.parent.iterdir()] == ["settings.json"]
        assert json.loads(settings_store.file_path.read_text()) == {"a": 2}

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_file_permissions(self, settings_store):
        settings_store.save_all({"a": 1})
        mode = stat.S_IMODE(os.stat(settings_store.file_path).st_mode)
        assert mode == 0o600
        dir_mode = stat.S_IMODE(os.stat(settings_store.file_path.parent).st_mode)
        assert dir_mode == 0o700


class TestSettingsPathOverride:
    """Tests for the SQLCOMPLETE_SETTINGS_PATH override."""

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"keyword_casing": "upper"}))
        monkeypatch.setenv("SQLCOMPLETE_SETTINGS_PATH", str(path))
        assert load_settings() == {"keyword_casing": "upper"}
        assert SettingsStore.get_instance().file_path == path

    def test_save_settings(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        monkeypatch.setenv("SQLCOMPLETE_SETTINGS_PATH", str(path))
        save_settings({"smart_completion": False})
        assert json.loads(path.read_text()) == {"smart_completion": False}
