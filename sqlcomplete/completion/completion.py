"""Main SQL completion engine.

Combines context detection with the current metadata snapshot to build the
suggestion list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..metadata import Metadata
from .context import SQLContext, analyze_context, resolve_table_name
from .core import (
    ALL_KEYWORDS,
    DDL_KEYWORDS,
    FROM_KEYWORDS,
    SELECT_KEYWORDS,
    WHERE_KEYWORDS,
    KeywordCasing,
    Suggestion,
    SuggestionType,
)
from .fuzzy import fuzzy_filter
from .lexer import word_span

logger = logging.getLogger(__name__)


def _suggestions(
    word: str,
    candidates: Iterable[str],
    suggestion_type: SuggestionType,
    description: str,
    *,
    ranked: bool,
    suffix: str = "",
) -> list[Suggestion]:
    return [
        Suggestion(text=c + suffix, display_text=c + suffix, type=suggestion_type, description=description)
        for c in fuzzy_filter(word, candidates, ranked=ranked)
    ]


def filter_word(text: str) -> str:
    """The part of the current word used to filter candidates.

    A qualifier is dropped, so ``u.na`` filters on ``na``.
    """
    word = word_span(text).word
    if "." in word:
        return word.rsplit(".", 1)[1]
    return word


class Completer:
    """Context-aware SQL completer.

    Usage:
        completer = Completer(metadata)
        suggestions = completer.complete("SELECT * FROM us", 16)

    The metadata snapshot is read once per ``complete`` call, so a
    background refresh calling ``update_metadata`` never exposes a
    half-built snapshot to an in-flight completion.
    """

    def __init__(
        self,
        metadata: Metadata | None = None,
        smart: bool = True,
        keyword_casing: KeywordCasing | str = KeywordCasing.AUTO,
        ranked: bool = False,
    ):
        self._metadata = metadata or Metadata()
        self.smart = smart
        self.ranked = ranked
        self.keyword_casing = KeywordCasing.AUTO
        self.set_keyword_casing(keyword_casing)

    @property
    def metadata(self) -> Metadata:
        """The snapshot currently used for completions."""
        return self._metadata

    def set_smart(self, smart: bool) -> None:
        """Toggle context-aware completion."""
        self.smart = smart

    def set_keyword_casing(self, casing: KeywordCasing | str) -> None:
        """Set keyword casing; unknown values fall back to auto."""
        parsed = KeywordCasing.parse(casing)
        if parsed is None:
            logger.warning("Unknown keyword casing %r, using auto", casing)
            parsed = KeywordCasing.AUTO
        self.keyword_casing = parsed

    def update_metadata(self, metadata: Metadata) -> None:
        """Replace the metadata snapshot."""
        self._metadata = metadata

    def complete(self, text: str, cursor_pos: int) -> list[Suggestion]:
        """Get suggestions for the text at the cursor position.

        Args:
            text: The full input buffer
            cursor_pos: Cursor offset, clamped to the text bounds

        Returns:
            Suggestions ordered by category
        """
        cursor_pos = max(0, min(cursor_pos, len(text)))
        before_cursor = text[:cursor_pos]
        word = filter_word(before_cursor)
        meta = self._metadata

        if not self.smart:
            return self._all_completions(meta, word)

        return self._context_completions(meta, analyze_context(before_cursor), word)

    def _context_completions(self, meta: Metadata, ctx: SQLContext, word: str) -> list[Suggestion]:
        if ctx.is_backslash:
            return self._special_suggestions(meta, word)

        if ctx.after_dot:
            table = resolve_table_name(ctx.before_dot, ctx.tables)
            return _suggestions(word, meta.columns_for(table), SuggestionType.COLUMN, table, ranked=self.ranked)

        suggestions: list[Suggestion] = []

        if ctx.in_select:
            suggestions += self._keyword_suggestions(word, SELECT_KEYWORDS)
            suggestions += self._function_suggestions(meta, word)
            suggestions += self._table_suggestions(meta, word)
            suggestions += self._column_suggestions(meta, ctx, word)

        elif ctx.in_from or ctx.in_join:
            suggestions += self._keyword_suggestions(word, FROM_KEYWORDS)
            suggestions += self._table_suggestions(meta, word)
            suggestions += self._view_suggestions(meta, word)
            suggestions += self._schema_suggestions(meta, word)

        elif ctx.in_where or ctx.in_having or ctx.in_on:
            suggestions += self._keyword_suggestions(word, WHERE_KEYWORDS)
            suggestions += self._column_suggestions(meta, ctx, word)
            suggestions += self._function_suggestions(meta, word)

        elif ctx.in_order_by or ctx.in_group_by:
            suggestions += self._column_suggestions(meta, ctx, word)

        elif ctx.in_insert:
            suggestions += self._table_suggestions(meta, word)
            suggestions += self._column_suggestions(meta, ctx, word)

        elif ctx.in_update:
            suggestions += self._table_suggestions(meta, word)

        elif ctx.in_set:
            suggestions += self._column_suggestions(meta, ctx, word)

        elif ctx.in_create or ctx.in_alter or ctx.in_drop:
            suggestions += self._keyword_suggestions(word, DDL_KEYWORDS)
            suggestions += self._table_suggestions(meta, word)
            suggestions += self._schema_suggestions(meta, word)
            suggestions += self._datatype_suggestions(meta, word)

        else:
            suggestions += self._all_completions(meta, word)

        return suggestions

    def _all_completions(self, meta: Metadata, word: str) -> list[Suggestion]:
        suggestions: list[Suggestion] = []
        suggestions += self._keyword_suggestions(word, ALL_KEYWORDS)
        suggestions += self._table_suggestions(meta, word)
        suggestions += self._view_suggestions(meta, word)
        suggestions += self._all_column_suggestions(meta, word)
        suggestions += self._function_suggestions(meta, word)
        suggestions += self._schema_suggestions(meta, word)
        suggestions += self._datatype_suggestions(meta, word)
        suggestions += self._special_suggestions(meta, word)
        suggestions += _suggestions(word, meta.favorites, SuggestionType.FAVORITE, "favorite", ranked=self.ranked)
        return suggestions

    def _table_suggestions(self, meta: Metadata, word: str) -> list[Suggestion]:
        return _suggestions(word, meta.tables, SuggestionType.TABLE, "table", ranked=self.ranked)

    def _view_suggestions(self, meta: Metadata, word: str) -> list[Suggestion]:
        return _suggestions(word, meta.views, SuggestionType.VIEW, "view", ranked=self.ranked)

    def _function_suggestions(self, meta: Metadata, word: str) -> list[Suggestion]:
        return _suggestions(word, meta.functions, SuggestionType.FUNCTION, "function", ranked=self.ranked, suffix="()")

    def _schema_suggestions(self, meta: Metadata, word: str) -> list[Suggestion]:
        return _suggestions(word, meta.schemas, SuggestionType.SCHEMA, "schema", ranked=self.ranked)

    def _datatype_suggestions(self, meta: Metadata, word: str) -> list[Suggestion]:
        return _suggestions(word, meta.datatypes, SuggestionType.DATATYPE, "type", ranked=self.ranked)

    def _special_suggestions(self, meta: Metadata, word: str) -> list[Suggestion]:
        descriptions = {s.name: s.description for s in meta.specials}
        return [
            Suggestion(text=name, display_text=name, type=SuggestionType.SPECIAL, description=descriptions[name])
            for name in fuzzy_filter(word, [s.name for s in meta.specials], ranked=self.ranked)
        ]

    def _column_suggestions(self, meta: Metadata, ctx: SQLContext, word: str) -> list[Suggestion]:
        """Columns of the referenced tables, or every column when none match."""
        suggestions: list[Suggestion] = []
        for ref in ctx.tables:
            if ref.name in meta.columns:
                suggestions += _suggestions(
                    word, meta.columns[ref.name], SuggestionType.COLUMN, ref.name, ranked=self.ranked
                )
        if not suggestions:
            suggestions = self._all_column_suggestions(meta, word)
        return suggestions

    def _all_column_suggestions(self, meta: Metadata, word: str) -> list[Suggestion]:
        suggestions: list[Suggestion] = []
        for table, cols in meta.columns.items():
            suggestions += _suggestions(word, cols, SuggestionType.COLUMN, table, ranked=self.ranked)
        return suggestions

    def _keyword_suggestions(self, word: str, keywords: Iterable[str]) -> list[Suggestion]:
        suggestions = []
        for kw in fuzzy_filter(word, keywords, ranked=self.ranked):
            text = self._case_keyword(kw, word)
            suggestions.append(Suggestion(text=text, display_text=text, type=SuggestionType.KEYWORD, description="keyword"))
        return suggestions

    def _case_keyword(self, keyword: str, word: str) -> str:
        if self.keyword_casing == KeywordCasing.UPPER:
            return keyword.upper()
        if self.keyword_casing == KeywordCasing.LOWER:
            return keyword.lower()
        if not word or word == word.upper():
            return keyword.upper()
        return keyword.lower()


def apply_suggestion(text: str, cursor_pos: int, suggestion: Suggestion | str) -> tuple[str, int]:
    """Insert an accepted suggestion, replacing the word being typed.

    When the typed word is qualified (``u.na``), only the part after the
    last dot is replaced so the qualifier stays.

    Returns:
        Tuple of (new_text, new_cursor_pos)
    """
    replacement = suggestion.text if isinstance(suggestion, Suggestion) else suggestion
    cursor_pos = max(0, min(cursor_pos, len(text)))
    start, end, word = word_span(text, cursor_pos)

    if "." in word:
        start += word.rindex(".") + 1

    new_text = text[:start] + replacement + text[end:]
    return new_text, start + len(replacement)
