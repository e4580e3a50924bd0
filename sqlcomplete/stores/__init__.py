"""Data persistence stores for sqlcomplete.

- SettingsStore: completion and logging settings
- FavoritesStore: named queries offered as favorite completions
"""

from .base import CONFIG_DIR, JSONFileStore
from .favorites import FavoritesStore
from .settings import SettingsStore, load_settings, save_settings

__all__ = [
    "CONFIG_DIR",
    "FavoritesStore",
    "JSONFileStore",
    "SettingsStore",
    "load_settings",
    "save_settings",
]
