"""Clause context detection.

A greedy backward scan over tokens, not a parser: the most recent clause
keyword before the cursor decides the context. Subqueries are not tracked,
so ``SELECT ... FROM (SELECT ... FROM x) t WHERE ...`` is classified by its
last clause keyword only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields

from .core import TableRef, is_keyword
from .lexer import last_word, tokenize

logger = logging.getLogger(__name__)

# Keywords whose next token names a table
TABLE_INTRODUCERS = frozenset({"FROM", "JOIN", "UPDATE", "INTO"})

# Keywords that end a table reference instead of aliasing it; commas never
# reach here since tokenize drops them, so "FROM a, b" reads b as an alias
ALIAS_STOP_TOKENS = frozenset({"ON", "WHERE", "SET"})

JOIN_MODIFIERS = frozenset({"INNER", "LEFT", "RIGHT", "CROSS", "FULL", "NATURAL"})

# Clause keywords that set their flag unconditionally
CLAUSE_FLAGS = {
    "SELECT": "in_select",
    "FROM": "in_from",
    "WHERE": "in_where",
    "HAVING": "in_having",
    "INSERT": "in_insert",
    "INTO": "in_insert",
    "UPDATE": "in_update",
    "SET": "in_set",
    "ON": "in_on",
    "USING": "in_using",
    "CREATE": "in_create",
    "ALTER": "in_alter",
    "DROP": "in_drop",
}


@dataclass
class SQLContext:
    """Where the cursor sits in the statement.

    At most one ``in_*`` flag is set. ``before_dot`` holds the lower-cased
    identifier in front of a trailing dot when ``after_dot`` is set.
    """

    in_select: bool = False
    in_from: bool = False
    in_join: bool = False
    in_where: bool = False
    in_order_by: bool = False
    in_group_by: bool = False
    in_having: bool = False
    in_insert: bool = False
    in_update: bool = False
    in_set: bool = False
    in_on: bool = False
    in_using: bool = False
    in_create: bool = False
    in_alter: bool = False
    in_drop: bool = False
    is_backslash: bool = False
    after_dot: bool = False
    before_dot: str = ""
    tables: list[TableRef] = field(default_factory=list)

    @property
    def clause(self) -> str | None:
        """Name of the active clause flag without the ``in_`` prefix."""
        for f in fields(self):
            if f.name.startswith("in_") and getattr(self, f.name):
                return f.name[3:]
        return None


def extract_table_refs(tokens: list[str]) -> list[TableRef]:
    """Collect tables named after FROM, JOIN, UPDATE and INTO.

    Handles patterns like:
    - FROM users
    - FROM users u
    - FROM users AS u
    - JOIN orders o ON ...
    - UPDATE users SET ...

    Args:
        tokens: Output of tokenize()

    Returns:
        TableRef list in statement order
    """
    refs: list[TableRef] = []

    for i, tok in enumerate(tokens):
        if tok not in TABLE_INTRODUCERS or i + 1 >= len(tokens):
            continue

        name = tokens[i + 1]
        if is_keyword(name):
            continue

        ref = TableRef(name=name.lower())
        if i + 2 < len(tokens):
            nxt = tokens[i + 2]
            if nxt == "AS":
                if i + 3 < len(tokens):
                    ref.alias = tokens[i + 3].lower()
            elif not is_keyword(nxt) and nxt not in ALIAS_STOP_TOKENS:
                ref.alias = nxt.lower()
        refs.append(ref)

    return refs


def resolve_table_name(name: str, refs: list[TableRef]) -> str:
    """Map an alias or table name to the referenced table.

    The first matching ref wins when an alias collides with a table name.
    Unknown names are returned unchanged.
    """
    for ref in refs:
        if ref.alias == name or ref.name == name:
            return ref.name
    return name


def _next_is(tokens: list[str], i: int, value: str) -> bool:
    return i + 1 < len(tokens) and tokens[i + 1] == value


def analyze_context(text: str) -> SQLContext:
    """Classify the SQL text before the cursor.

    Args:
        text: Everything before the cursor

    Returns:
        SQLContext with at most one clause flag set
    """
    ctx = SQLContext()
    text = text.strip()

    if not text:
        return ctx

    # Backslash commands have their own namespace
    if text.startswith("\\"):
        ctx.is_backslash = True
        return ctx

    if text.endswith("."):
        ctx.after_dot = True
        ctx.before_dot = last_word(text[:-1]).split(".")[-1].lower()

    tokens = tokenize(text)
    ctx.tables = extract_table_refs(tokens)

    for i in range(len(tokens) - 1, -1, -1):
        tok = tokens[i]

        flag = CLAUSE_FLAGS.get(tok)
        if flag is None:
            if tok == "JOIN" or (tok in JOIN_MODIFIERS and _next_is(tokens, i, "JOIN")):
                flag = "in_join"
            elif tok == "ORDER" and _next_is(tokens, i, "BY"):
                flag = "in_order_by"
            elif tok == "GROUP" and _next_is(tokens, i, "BY"):
                flag = "in_group_by"

        if flag is not None:
            setattr(ctx, flag, True)
            break

    logger.debug("context for %r: clause=%s after_dot=%s", text, ctx.clause, ctx.after_dot)
    return ctx
