"""Schema metadata snapshots consumed by the completer.

A Metadata instance is immutable: hosts build a new one and hand it to
``Completer.update_metadata`` instead of editing the current one.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple, Protocol, runtime_checkable

from .exceptions import MetadataFileError, MetadataRefreshError

logger = logging.getLogger(__name__)


class SpecialCommand(NamedTuple):
    """A backslash command offered by the host shell."""

    name: str
    description: str = ""


@runtime_checkable
class MetadataProvider(Protocol):
    """Source of live schema information (usually a database connection)."""

    def tables(self) -> list[str]: ...

    def views(self) -> list[str]: ...

    def columns(self, table: str) -> list[str]: ...

    def schemas(self) -> list[str]: ...

    def functions(self) -> list[str]: ...

    def databases(self) -> list[str]: ...

    def datatypes(self) -> list[str]: ...


def _empty_columns() -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({})


@dataclass(frozen=True)
class Metadata:
    """Read-only schema picture used for completions."""

    tables: tuple[str, ...] = ()
    views: tuple[str, ...] = ()
    columns: Mapping[str, tuple[str, ...]] = field(default_factory=_empty_columns)
    functions: tuple[str, ...] = ()
    schemas: tuple[str, ...] = ()
    databases: tuple[str, ...] = ()
    datatypes: tuple[str, ...] = ()
    specials: tuple[SpecialCommand, ...] = ()
    favorites: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        *,
        tables: Iterable[str] = (),
        views: Iterable[str] = (),
        columns: Mapping[str, Iterable[str]] | None = None,
        functions: Iterable[str] = (),
        schemas: Iterable[str] = (),
        databases: Iterable[str] = (),
        datatypes: Iterable[str] = (),
        specials: Iterable[SpecialCommand | str | tuple[str, str]] = (),
        favorites: Iterable[str] = (),
    ) -> Metadata:
        """Build a snapshot, copying every input so callers can't mutate it later."""
        frozen_columns = {table: tuple(cols) for table, cols in (columns or {}).items()}
        return cls(
            tables=tuple(tables),
            views=tuple(views),
            columns=MappingProxyType(frozen_columns),
            functions=tuple(functions),
            schemas=tuple(schemas),
            databases=tuple(databases),
            datatypes=tuple(datatypes),
            specials=tuple(_to_special(s) for s in specials),
            favorites=tuple(favorites),
        )

    def columns_for(self, table: str) -> tuple[str, ...]:
        """Columns of a table, empty when the table is unknown."""
        return self.columns.get(table, ())


def _to_special(value: SpecialCommand | str | tuple[str, str]) -> SpecialCommand:
    if isinstance(value, SpecialCommand):
        return value
    if isinstance(value, str):
        return SpecialCommand(value)
    name, description = value
    return SpecialCommand(name, description)


def _call_provider(category: str, fn: Any, *args: Any) -> list[str]:
    try:
        return list(fn(*args))
    except Exception as error:
        raise MetadataRefreshError(category, error) from error


def build_metadata(
    provider: MetadataProvider,
    *,
    specials: Iterable[SpecialCommand | str | tuple[str, str]] = (),
    favorites: Iterable[str] = (),
) -> Metadata:
    """Load a complete snapshot from a provider.

    Columns are loaded for every table. Any provider failure aborts the
    whole load so a half-populated snapshot is never produced.

    Raises:
        MetadataRefreshError: If any provider call fails.
    """
    tables = _call_provider("tables", provider.tables)
    columns = {table: _call_provider(f"columns of {table}", provider.columns, table) for table in tables}

    return Metadata.create(
        tables=tables,
        views=_call_provider("views", provider.views),
        columns=columns,
        functions=_call_provider("functions", provider.functions),
        schemas=_call_provider("schemas", provider.schemas),
        databases=_call_provider("databases", provider.databases),
        datatypes=_call_provider("datatypes", provider.datatypes),
        specials=specials,
        favorites=favorites,
    )


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key) or []
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def metadata_from_dict(data: Mapping[str, Any]) -> Metadata:
    """Build a snapshot from a JSON-style dictionary.

    Unknown keys are ignored and malformed sections are treated as empty.
    Specials may be plain names or ``{"name": ..., "description": ...}`` objects.
    """
    data = dict(data)

    raw_columns = data.get("columns") or {}
    columns: dict[str, list[str]] = {}
    if isinstance(raw_columns, dict):
        for table, cols in raw_columns.items():
            if isinstance(cols, list):
                columns[str(table)] = [str(c) for c in cols]

    specials: list[SpecialCommand] = []
    raw_specials = data.get("specials") or []
    if isinstance(raw_specials, list):
        for item in raw_specials:
            if isinstance(item, str):
                specials.append(SpecialCommand(item))
            elif isinstance(item, dict) and item.get("name"):
                specials.append(SpecialCommand(str(item["name"]), str(item.get("description", ""))))

    return Metadata.create(
        tables=_string_list(data, "tables"),
        views=_string_list(data, "views"),
        columns=columns,
        functions=_string_list(data, "functions"),
        schemas=_string_list(data, "schemas"),
        databases=_string_list(data, "databases"),
        datatypes=_string_list(data, "datatypes"),
        specials=specials,
        favorites=_string_list(data, "favorites"),
    )


def load_metadata_file(path: str | Path) -> Metadata:
    """Load a snapshot from a JSON file.

    Raises:
        MetadataFileError: If the file can't be read or isn't a JSON object.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as error:
        raise MetadataFileError(str(path), error.strerror or str(error)) from error
    except json.JSONDecodeError as error:
        raise MetadataFileError(str(path), f"invalid JSON ({error.msg})") from error

    if not isinstance(data, dict):
        raise MetadataFileError(str(path), "top-level value must be an object")

    metadata = metadata_from_dict(data)
    logger.debug("loaded metadata from %s: %d tables", path, len(metadata.tables))
    return metadata
