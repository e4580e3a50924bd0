"""JSON file storage shared by the settings and favorites stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Overridable so tests never touch the real home directory
CONFIG_DIR = Path(os.environ.get("SQLCOMPLETE_CONFIG_DIR", Path.home() / ".sqlcomplete"))


class JSONFileStore:
    """A single JSON document on disk.

    A missing or unreadable file reads as None and never raises, so a bad
    config file can't stop completion. Writes replace the file atomically
    and keep it readable by the owner only.
    """

    def __init__(self, file_path: Path):
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.exists()

    def _read_json(self) -> Any:
        if not self._file_path.exists():
            return None
        try:
            with open(self._file_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable store file %s: %s", self._file_path, e)
            return None

    def _read_object(self) -> dict[str, Any]:
        """Read the document as a JSON object; anything else reads as empty."""
        data = self._read_json()
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object, got %s", self._file_path, type(data).__name__)
            return {}
        return data

    def _write_json(self, data: Any) -> None:
        """Replace the file with ``data``.

        Raises:
            OSError: If the directory or file can't be written.
        """
        directory = self._file_path.parent
        directory.mkdir(parents=True, exist_ok=True)
        try:
            os.chmod(directory, 0o700)
        except OSError:
            logger.debug("could not restrict permissions on %s", directory)

        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".tmp_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
