"""Mock metadata profiles for demos and testing.

Usage:
    sqlcomplete --mock=demo complete "SELECT * FROM "
    sqlcomplete --mock=empty context "SELECT u."
"""

from __future__ import annotations

from collections.abc import Callable

from .metadata import Metadata, SpecialCommand, build_metadata

DEMO_SPECIALS = (
    SpecialCommand("\\dt", "List tables."),
    SpecialCommand("\\dv", "List views."),
    SpecialCommand("\\di", "List indexes."),
    SpecialCommand("\\df", "List functions."),
    SpecialCommand("\\dn", "List schemas."),
    SpecialCommand("\\du", "List roles."),
    SpecialCommand("\\l", "List databases."),
    SpecialCommand("\\x", "Toggle expanded output."),
    SpecialCommand("\\q", "Quit."),
)


class MockMetadataProvider:
    """In-memory MetadataProvider backed by a fixed schema."""

    def __init__(
        self,
        columns: dict[str, list[str]] | None = None,
        views: list[str] | None = None,
        functions: list[str] | None = None,
        schemas: list[str] | None = None,
        databases: list[str] | None = None,
        datatypes: list[str] | None = None,
    ):
        self._columns = columns or {}
        self._views = views or []
        self._functions = functions or []
        self._schemas = schemas or []
        self._databases = databases or []
        self._datatypes = datatypes or []

    def tables(self) -> list[str]:
        return list(self._columns)

    def views(self) -> list[str]:
        return list(self._views)

    def columns(self, table: str) -> list[str]:
        return list(self._columns.get(table, []))

    def schemas(self) -> list[str]:
        return list(self._schemas)

    def functions(self) -> list[str]:
        return list(self._functions)

    def databases(self) -> list[str]:
        return list(self._databases)

    def datatypes(self) -> list[str]:
        return list(self._datatypes)


def create_demo_provider() -> MockMetadataProvider:
    """A small shop schema."""
    return MockMetadataProvider(
        columns={
            "users": ["id", "name", "email", "created_at", "is_active"],
            "orders": ["id", "user_id", "product_id", "quantity", "total", "created_at"],
            "products": ["id", "name", "price", "description", "category"],
            "user_settings": ["id", "user_id", "setting_key", "setting_value"],
            "django_migrations": ["id", "app", "name", "applied"],
        },
        views=["active_users", "order_summary"],
        functions=["count", "sum", "avg", "max", "min", "now", "coalesce"],
        schemas=["public", "auth", "billing"],
        databases=["shop", "shop_test"],
        datatypes=["integer", "text", "boolean", "timestamp", "jsonb", "uuid"],
    )


def _create_demo_profile() -> Metadata:
    return build_metadata(
        create_demo_provider(),
        specials=DEMO_SPECIALS,
        favorites=["active_users_query", "daily_report"],
    )


def _create_empty_profile() -> Metadata:
    return Metadata.create(specials=DEMO_SPECIALS)


MOCK_PROFILES: dict[str, Callable[[], Metadata]] = {
    "demo": _create_demo_profile,
    "empty": _create_empty_profile,
}


def get_mock_metadata(name: str) -> Metadata | None:
    """Get a mock metadata profile by name."""
    factory = MOCK_PROFILES.get(name)
    return factory() if factory else None


def list_mock_profiles() -> list[str]:
    """List available mock profile names."""
    return list(MOCK_PROFILES)
