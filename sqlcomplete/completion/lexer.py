"""Tokenizer and current-word helpers for completion."""

from __future__ import annotations

from typing import NamedTuple

SEPARATORS = frozenset(",();")
OPERATORS = frozenset("=<>!")
QUOTES = frozenset("'\"")
WORD_EXTRA_CHARS = frozenset("_.\\#")


class WordSpan(NamedTuple):
    """The word being typed and its [start, end) offsets in the text."""

    start: int
    end: int
    word: str


def tokenize(sql: str) -> list[str]:
    """Split SQL text into upper-cased tokens for context detection.

    Whitespace, commas, parentheses and semicolons separate tokens and are
    dropped. Quoted spans stay inside a single token, quotes included, and
    an unterminated quote runs to the end of the text. The operators
    ``= < > !`` are emitted as one-character tokens.

    Args:
        sql: SQL text, usually everything before the cursor.

    Returns:
        List of tokens in source order.
    """
    tokens: list[str] = []
    current: list[str] = []
    quote_char: str | None = None

    def flush() -> None:
        if current:
            tokens.append("".join(current).upper())
            current.clear()

    for char in sql:
        if quote_char is not None:
            current.append(char)
            if char == quote_char:
                quote_char = None
            continue
        if char in QUOTES:
            quote_char = char
            current.append(char)
            continue
        if char.isspace() or char in SEPARATORS:
            flush()
            continue
        if char in OPERATORS:
            flush()
            tokens.append(char)
            continue
        current.append(char)

    flush()
    return tokens


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char in WORD_EXTRA_CHARS


def word_span(text: str, cursor_pos: int | None = None) -> WordSpan:
    """Locate the word being typed right before the cursor.

    Accepting a suggestion must replace exactly ``text[start:end]``.
    A cursor after whitespace gives an empty span at the cursor.
    """
    if cursor_pos is None:
        cursor_pos = len(text)
    end = max(0, min(cursor_pos, len(text)))

    if end == 0 or text[end - 1] in " \t\n":
        return WordSpan(end, end, "")

    start = end
    while start > 0 and _is_word_char(text[start - 1]):
        start -= 1
    return WordSpan(start, end, text[start:end])


def last_word(text: str) -> str:
    """Get the trailing word (identifier, dotted name or backslash command).

    Returns an empty string when the text ends in whitespace, so a fresh
    word matches everything instead of filtering on a stale fragment.
    """
    return word_span(text).word
