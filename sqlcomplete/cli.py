#!/usr/bin/env python3
"""sqlcomplete - context-aware SQL completion from the command line."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .completion import KeywordCasing, analyze_context, tokenize
from .config import CompletionSettings, load_completion_settings
from .exceptions import MetadataFileError
from .log import configure_logging
from .metadata import Metadata, load_metadata_file
from .mocks import get_mock_metadata, list_mock_profiles
from .stores.favorites import FavoritesStore
from .stores.settings import SettingsStore

logger = logging.getLogger(__name__)

console = Console()


def _load_metadata(args: Any) -> Metadata:
    """Resolve the snapshot from --metadata or --mock, adding stored favorites."""
    if args.metadata:
        metadata = load_metadata_file(args.metadata)
    elif args.mock:
        metadata = get_mock_metadata(args.mock) or Metadata()
    else:
        metadata = Metadata()

    stored = FavoritesStore.get_instance().names()
    extra = [name for name in stored if name not in metadata.favorites]
    if extra:
        metadata = dataclasses.replace(metadata, favorites=metadata.favorites + tuple(extra))
    return metadata


def _resolve_settings(args: Any) -> CompletionSettings:
    store = SettingsStore(file_path=Path(args.settings).expanduser()) if args.settings else None
    settings = load_completion_settings(store)
    if args.no_smart:
        settings.smart_completion = False
    if args.keyword_casing:
        settings.keyword_casing = KeywordCasing(args.keyword_casing)
    if args.ranked:
        settings.ranked = True
    if args.log_level:
        settings.log_level = args.log_level.upper()
    return settings


def cmd_complete(args: Any, settings: CompletionSettings) -> int:
    """Print suggestions for TEXT at the cursor."""
    metadata = _load_metadata(args)
    completer = settings.create_completer(metadata)
    cursor = len(args.text) if args.cursor is None else args.cursor
    suggestions = completer.complete(args.text, cursor)

    if args.json:
        for s in suggestions:
            print(json.dumps({"text": s.text, "type": s.type.value, "description": s.description}))
        return 0

    if not suggestions:
        console.print("[dim]No suggestions.[/dim]")
        return 0

    table = Table(show_header=True, header_style="bold")
    table.add_column("Suggestion")
    table.add_column("Type")
    table.add_column("Description")
    for s in suggestions:
        table.add_row(escape(s.display_text), s.type.value, escape(s.description))
    console.print(table)
    return 0


def cmd_context(args: Any, settings: CompletionSettings) -> int:
    """Print the analyzed context for TEXT."""
    ctx = analyze_context(args.text)
    data = {
        "clause": ctx.clause,
        "is_backslash": ctx.is_backslash,
        "after_dot": ctx.after_dot,
        "before_dot": ctx.before_dot,
        "tables": [{"name": t.name, "alias": t.alias} for t in ctx.tables],
    }
    if args.json:
        print(json.dumps(data))
        return 0

    for key, value in data.items():
        if key == "tables":
            value = ", ".join(f"{t['name']} AS {t['alias']}" if t["alias"] else t["name"] for t in value) or "-"
        console.print(f"[bold]{key}[/bold]: {escape(str(value))}")
    return 0


def cmd_tokens(args: Any, settings: CompletionSettings) -> int:
    """Print the token stream for TEXT, one token per line."""
    for token in tokenize(args.text):
        print(token)
    return 0


def cmd_favorites(args: Any, settings: CompletionSettings) -> int:
    """Manage favorite (named) queries."""
    store = FavoritesStore.get_instance()

    if args.favorites_command == "add":
        store.save_query(args.name, args.query)
        print(f"Saved favorite '{args.name}'.")
        return 0

    if args.favorites_command == "delete":
        if not store.delete_query(args.name):
            print(f"Error: Favorite '{args.name}' not found.", file=sys.stderr)
            return 1
        print(f"Deleted favorite '{args.name}'.")
        return 0

    favorites = store.load_all()
    if not favorites:
        console.print("[dim]No favorites saved.[/dim]")
        return 0
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Query")
    for name in sorted(favorites):
        table.add_row(escape(name), escape(favorites[name]))
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlcomplete",
        description="Context-aware SQL completion",
        epilog='Example: sqlcomplete --mock demo complete "SELECT * FROM us"',
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--metadata", metavar="PATH", help="Path to a metadata JSON file")
    source.add_argument(
        "--mock",
        metavar="PROFILE",
        choices=list_mock_profiles(),
        help=f"Use built-in mock metadata (profiles: {', '.join(list_mock_profiles())})",
    )
    parser.add_argument("--no-smart", action="store_true", help="Disable context-aware completion")
    parser.add_argument(
        "--keyword-casing",
        choices=[c.value for c in KeywordCasing],
        help="Keyword casing (default from settings, else auto)",
    )
    parser.add_argument("--ranked", action="store_true", help="Sort each category by match quality")
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Path to settings JSON file (overrides ~/.sqlcomplete/settings.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default from settings, else INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    complete_parser = subparsers.add_parser("complete", help="Suggest completions for SQL text")
    complete_parser.add_argument("text", help="SQL text typed so far")
    complete_parser.add_argument("--cursor", type=int, help="Cursor offset (default: end of text)")
    complete_parser.add_argument("--json", action="store_true", help="Print one JSON object per suggestion")
    complete_parser.set_defaults(func=cmd_complete)

    context_parser = subparsers.add_parser("context", help="Show the clause context of SQL text")
    context_parser.add_argument("text", help="SQL text before the cursor")
    context_parser.add_argument("--json", action="store_true", help="Print the context as JSON")
    context_parser.set_defaults(func=cmd_context)

    tokens_parser = subparsers.add_parser("tokens", help="Show the tokens of SQL text")
    tokens_parser.add_argument("text", help="SQL text")
    tokens_parser.set_defaults(func=cmd_tokens)

    favorites_parser = subparsers.add_parser("favorites", help="Manage favorite queries")
    favorites_sub = favorites_parser.add_subparsers(dest="favorites_command", metavar="ACTION")
    favorites_sub.add_parser("list", help="List favorites")
    add_parser = favorites_sub.add_parser("add", help="Save a favorite query")
    add_parser.add_argument("name", help="Favorite name")
    add_parser.add_argument("query", help="SQL query")
    delete_parser = favorites_sub.add_parser("delete", help="Delete a favorite")
    delete_parser.add_argument("name", help="Favorite name")
    favorites_parser.set_defaults(func=cmd_favorites)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = _resolve_settings(args)
    configure_logging(settings.log_level, settings.log_file)

    try:
        return args.func(args, settings)
    except MetadataFileError as e:
        logger.debug("metadata file error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
