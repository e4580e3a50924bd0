"""SQL completion engine.

Provides context-aware SQL autocompletion with:
- Clause detection from a backward token scan (SELECT, FROM, WHERE, ...)
- Alias recognition (FROM users u -> u. suggests users columns)
- Fuzzy matching (prefix, substring, subsequence)
- Keyword casing policy
- Backslash command and favorite query suggestions
"""

from .completion import Completer, apply_suggestion, filter_word
from .context import SQLContext, analyze_context, extract_table_refs, resolve_table_name
from .core import (
    ALL_KEYWORDS,
    DDL_KEYWORDS,
    FROM_KEYWORDS,
    KEYWORD_SET,
    SELECT_KEYWORDS,
    WHERE_KEYWORDS,
    KeywordCasing,
    Suggestion,
    SuggestionType,
    TableRef,
    is_keyword,
)
from .fuzzy import NO_MATCH, fuzzy_filter, fuzzy_match, fuzzy_score
from .lexer import WordSpan, last_word, tokenize, word_span

__all__ = [
    # Main API
    "Completer",
    "apply_suggestion",
    "analyze_context",
    # Types
    "KeywordCasing",
    "SQLContext",
    "Suggestion",
    "SuggestionType",
    "TableRef",
    "WordSpan",
    # Constants
    "ALL_KEYWORDS",
    "DDL_KEYWORDS",
    "FROM_KEYWORDS",
    "KEYWORD_SET",
    "NO_MATCH",
    "SELECT_KEYWORDS",
    "WHERE_KEYWORDS",
    # Utilities
    "extract_table_refs",
    "filter_word",
    "fuzzy_filter",
    "fuzzy_match",
    "fuzzy_score",
    "is_keyword",
    "last_word",
    "resolve_table_name",
    "tokenize",
    "word_span",
]
