"""Shared pytest fixtures for sqlcomplete tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="sqlcomplete-test-config-"))
os.environ.setdefault("SQLCOMPLETE_CONFIG_DIR", str(_TEST_CONFIG_DIR))

from sqlcomplete.metadata import Metadata, SpecialCommand  # noqa: E402
from sqlcomplete.stores.favorites import FavoritesStore  # noqa: E402


@pytest.fixture
def metadata() -> Metadata:
    """Sample schema snapshot."""
    return Metadata.create(
        tables=["users", "orders", "products", "user_settings", "django_migrations"],
        views=["active_users", "order_summary"],
        columns={
            "users": ["id", "name", "email", "created_at", "is_active"],
            "orders": ["id", "user_id", "product_id", "quantity", "total", "created_at"],
            "products": ["id", "name", "price", "description", "category"],
            "user_settings": ["id", "user_id", "setting_key", "setting_value"],
        },
        functions=["count", "sum", "avg", "max", "min", "now", "coalesce"],
        schemas=["public", "auth", "billing"],
        databases=["mydb", "testdb", "production"],
        datatypes=["integer", "text", "boolean", "timestamp", "jsonb", "uuid"],
        specials=[
            SpecialCommand("\\dt", "List tables."),
            SpecialCommand("\\di", "List indexes."),
            SpecialCommand("\\dv", "List views."),
            SpecialCommand("\\df", "List functions."),
            SpecialCommand("\\l", "List databases."),
            SpecialCommand("\\q", "Quit."),
        ],
        favorites=["active_users_query", "daily_report"],
    )


@pytest.fixture(autouse=True)
def _isolated_favorites(tmp_path, monkeypatch):
    """Point the shared favorites store at a per-test file."""
    monkeypatch.setattr(FavoritesStore, "_instance", FavoritesStore(tmp_path / "favorites.json"))
    yield
