"""Completion settings.

Settings live in the JSON settings store. Values that can't be used are
replaced by their defaults, so a bad settings file never stops completion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .completion import Completer, KeywordCasing
from .metadata import Metadata
from .refresh import DEFAULT_REFRESH_TIMEOUT
from .stores.settings import SettingsStore

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CompletionSettings:
    """Settings that shape completion behavior."""

    smart_completion: bool = True
    keyword_casing: KeywordCasing = KeywordCasing.AUTO
    ranked: bool = False
    refresh_timeout: float = DEFAULT_REFRESH_TIMEOUT
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompletionSettings:
        """Create from a settings dictionary, ignoring unusable values."""
        settings = cls()

        smart = data.get("smart_completion")
        if isinstance(smart, bool):
            settings.smart_completion = smart
        elif smart is not None:
            logger.warning("Ignoring smart_completion=%r (expected true/false)", smart)

        if "keyword_casing" in data:
            casing = KeywordCasing.parse(data["keyword_casing"])
            if casing is None:
                logger.warning("Ignoring keyword_casing=%r (expected upper, lower or auto)", data["keyword_casing"])
            else:
                settings.keyword_casing = casing

        ranked = data.get("ranked_completion")
        if isinstance(ranked, bool):
            settings.ranked = ranked

        timeout = data.get("metadata_refresh_timeout")
        if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
            settings.refresh_timeout = float(timeout)
        elif timeout is not None:
            logger.warning("Ignoring metadata_refresh_timeout=%r (expected a positive number)", timeout)

        level = data.get("log_level")
        if isinstance(level, str) and level.upper() in LOG_LEVELS:
            settings.log_level = level.upper()
        elif level is not None:
            logger.warning("Ignoring log_level=%r", level)

        log_file = data.get("log_file")
        if isinstance(log_file, str) and log_file.strip():
            settings.log_file = log_file.strip()

        return settings

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "smart_completion": self.smart_completion,
            "keyword_casing": self.keyword_casing.value,
            "ranked_completion": self.ranked,
            "metadata_refresh_timeout": self.refresh_timeout,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }

    def create_completer(self, metadata: Metadata | None = None) -> Completer:
        """Build a Completer configured by these settings."""
        return Completer(
            metadata,
            smart=self.smart_completion,
            keyword_casing=self.keyword_casing,
            ranked=self.ranked,
        )


def load_completion_settings(store: SettingsStore | None = None) -> CompletionSettings:
    """Load completion settings from the settings store."""
    store = store or SettingsStore.get_instance()
    return CompletionSettings.from_dict(store.load_all())


def save_completion_settings(settings: CompletionSettings, store: SettingsStore | None = None) -> None:
    """Write completion settings, keeping unrelated keys in the file."""
    (store or SettingsStore.get_instance()).update(settings.to_dict())
