"""Favorites store for named (saved) queries."""

from __future__ import annotations

from pathlib import Path

from .base import CONFIG_DIR, JSONFileStore


class FavoritesStore(JSONFileStore):
    """Store for managing favorite queries.

    Favorites are stored as a JSON object in ~/.sqlcomplete/favorites.json
    Structure: { "name": "query", ... }

    Favorite names are offered as completions; the queries themselves are
    only kept here for the host shell to run.
    """

    _instance: FavoritesStore | None = None

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or CONFIG_DIR / "favorites.json")

    @classmethod
    def get_instance(cls) -> FavoritesStore:
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_all(self) -> dict[str, str]:
        """Load all favorites, dropping entries that aren't name -> query strings."""
        return {name: query for name, query in self._read_object().items() if isinstance(query, str)}

    def names(self) -> list[str]:
        """Favorite names, sorted."""
        return sorted(self.load_all())

    def get(self, name: str) -> str | None:
        """Get the query saved under a name."""
        return self.load_all().get(name)

    def save_query(self, name: str, query: str) -> bool:
        """Save a query under a name.

        Returns:
            True if the name is new, False if an existing favorite was replaced.
        """
        favorites = self.load_all()
        is_new = name not in favorites
        favorites[name] = query.strip()
        self._write_json(favorites)
        return is_new

    def delete_query(self, name: str) -> bool:
        """Delete a favorite.

        Returns:
            True if deleted, False if it didn't exist.
        """
        favorites = self.load_all()
        if name not in favorites:
            return False
        del favorites[name]
        self._write_json(favorites)
        return True
