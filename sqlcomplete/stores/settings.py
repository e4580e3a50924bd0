"""Settings file for completion and logging options.

The file is a flat JSON object. Keys this package doesn't know are kept
untouched on write so the file can be shared with a host shell.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .base import CONFIG_DIR, JSONFileStore

SETTINGS_PATH_ENV = "SQLCOMPLETE_SETTINGS_PATH"


def _resolve_settings_path() -> Path:
    override = os.environ.get(SETTINGS_PATH_ENV, "").strip()
    return Path(override).expanduser() if override else CONFIG_DIR / "settings.json"


class SettingsStore(JSONFileStore):
    """Settings stored in ``settings.json`` under the config directory.

    ``$SQLCOMPLETE_SETTINGS_PATH`` points the default store at another file.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or _resolve_settings_path())

    @classmethod
    def get_instance(cls) -> SettingsStore:
        """Shared store for the settings path currently in effect."""
        return _get_store()

    def load_all(self) -> dict[str, Any]:
        return self._read_object()

    def save_all(self, settings: Mapping[str, Any]) -> None:
        """Replace the whole file."""
        self._write_json(dict(settings))

    def update(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Merge ``values`` into the file, keeping other keys.

        Returns:
            The settings as written.
        """
        settings = self.load_all()
        settings.update(values)
        self.save_all(settings)
        return settings

    def get(self, key: str, default: Any = None) -> Any:
        return self.load_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.update({key: value})

    def delete(self, key: str) -> bool:
        """Remove a key.

        Returns:
            False if the key wasn't set.
        """
        settings = self.load_all()
        if key not in settings:
            return False
        del settings[key]
        self.save_all(settings)
        return True


_store: SettingsStore | None = None


def _get_store() -> SettingsStore:
    # Rebuilt when the env override changes between calls (tests do this)
    global _store
    path = _resolve_settings_path()
    if _store is None or _store.file_path != path:
        _store = SettingsStore(file_path=path)
    return _store


def load_settings() -> dict[str, Any]:
    """Read the default settings file."""
    return _get_store().load_all()


def save_settings(settings: Mapping[str, Any]) -> None:
    """Replace the default settings file."""
    _get_store().save_all(settings)
