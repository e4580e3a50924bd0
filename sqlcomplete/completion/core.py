"""Core SQL completion types and keyword lists.

Shared by the lexer, context classifier and suggestion generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class SuggestionType(str, Enum):
    """Types of SQL completion suggestions."""

    KEYWORD = "keyword"
    TABLE = "table"
    VIEW = "view"
    COLUMN = "column"
    FUNCTION = "function"
    SCHEMA = "schema"
    DATABASE = "database"
    DATATYPE = "datatype"
    ALIAS = "alias"
    SPECIAL = "special"
    FAVORITE = "favorite"


class KeywordCasing(str, Enum):
    """How keyword suggestions are cased."""

    UPPER = "upper"
    LOWER = "lower"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: KeywordCasing | str | None) -> KeywordCasing | None:
        """Return the casing for a config value, or None if it is not recognized."""
        if isinstance(value, KeywordCasing):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Suggestion(NamedTuple):
    """A single completion candidate."""

    text: str
    display_text: str
    type: SuggestionType
    description: str = ""


@dataclass
class TableRef:
    """A table referenced by the statement, with optional alias.

    Both fields are lower-cased so lookups are case-insensitive.
    """

    name: str
    alias: str | None = None


# Keywords offered right after SELECT
SELECT_KEYWORDS: tuple[str, ...] = (
    "DISTINCT", "ALL", "AS", "FROM", "WHERE", "GROUP", "BY",
    "HAVING", "ORDER", "LIMIT", "OFFSET", "UNION", "INTERSECT",
    "EXCEPT", "CASE", "WHEN", "THEN", "ELSE", "END", "AND",
    "OR", "NOT", "IN", "EXISTS", "BETWEEN", "LIKE", "ILIKE",
    "IS", "NULL", "TRUE", "FALSE", "ASC", "DESC", "NULLS",
    "FIRST", "LAST", "OVER", "PARTITION", "ROWS", "RANGE",
    "UNBOUNDED", "PRECEDING", "FOLLOWING", "CURRENT", "ROW",
    "FILTER", "WITHIN", "LATERAL", "CROSS", "NATURAL",
)

# Keywords offered in FROM / JOIN
FROM_KEYWORDS: tuple[str, ...] = (
    "JOIN", "INNER", "LEFT", "RIGHT", "FULL", "OUTER", "CROSS",
    "NATURAL", "ON", "USING", "WHERE", "GROUP", "BY", "HAVING",
    "ORDER", "LIMIT", "OFFSET", "AS", "UNION", "INTERSECT",
    "EXCEPT",
)

# Keywords offered in WHERE / HAVING / ON
WHERE_KEYWORDS: tuple[str, ...] = (
    "AND", "OR", "NOT", "IN", "EXISTS", "BETWEEN", "LIKE",
    "ILIKE", "IS", "NULL", "TRUE", "FALSE", "ANY", "ALL",
    "SOME", "GROUP", "BY", "HAVING", "ORDER", "LIMIT", "OFFSET",
)

# Keywords offered in CREATE / ALTER / DROP
DDL_KEYWORDS: tuple[str, ...] = (
    "TABLE", "INDEX", "VIEW", "MATERIALIZED", "SEQUENCE",
    "SCHEMA", "DATABASE", "FUNCTION", "PROCEDURE", "TRIGGER",
    "TYPE", "DOMAIN", "EXTENSION", "IF", "EXISTS", "NOT",
    "CASCADE", "RESTRICT", "COLUMN", "CONSTRAINT", "PRIMARY",
    "KEY", "UNIQUE", "REFERENCES", "FOREIGN", "CHECK", "DEFAULT",
)

# Every keyword; a superset of the context lists above
ALL_KEYWORDS: tuple[str, ...] = (
    "SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "ALTER",
    "DROP", "TRUNCATE", "FROM", "WHERE", "JOIN", "INNER", "LEFT",
    "RIGHT", "FULL", "OUTER", "CROSS", "NATURAL", "ON", "USING",
    "GROUP", "BY", "HAVING", "ORDER", "LIMIT", "OFFSET", "AS",
    "DISTINCT", "ALL", "ANY", "SOME", "UNION", "INTERSECT", "EXCEPT",
    "AND", "OR", "NOT", "IN", "EXISTS", "BETWEEN", "LIKE", "ILIKE",
    "IS", "NULL", "TRUE", "FALSE", "CASE", "WHEN", "THEN",
    "ELSE", "END", "ASC", "DESC", "NULLS", "FIRST", "LAST",
    "INTO", "VALUES", "SET", "DEFAULT", "RETURNING", "WITH",
    "RECURSIVE", "TABLE", "INDEX", "VIEW", "MATERIALIZED",
    "SEQUENCE", "SCHEMA", "DATABASE", "FUNCTION", "PROCEDURE",
    "TRIGGER", "TYPE", "DOMAIN", "EXTENSION", "IF", "CASCADE",
    "RESTRICT", "COLUMN", "CONSTRAINT", "PRIMARY", "KEY",
    "UNIQUE", "REFERENCES", "FOREIGN", "CHECK", "BEGIN",
    "COMMIT", "ROLLBACK", "SAVEPOINT", "GRANT", "REVOKE",
    "EXPLAIN", "ANALYZE", "VERBOSE", "COSTS", "BUFFERS",
    "FORMAT", "COPY", "TO", "STDIN", "STDOUT", "DELIMITER",
    "CSV", "HEADER", "QUOTE", "ESCAPE", "FORCE", "VACUUM",
    "REINDEX", "CLUSTER", "COMMENT", "OVER", "PARTITION",
    "ROWS", "RANGE", "UNBOUNDED", "PRECEDING", "FOLLOWING",
    "CURRENT", "ROW", "FILTER", "WITHIN", "LATERAL",
    "FETCH", "NEXT", "PRIOR", "ABSOLUTE", "RELATIVE",
    "FORWARD", "BACKWARD", "DECLARE", "CURSOR", "FOR",
    "CLOSE", "MOVE",
)

KEYWORD_SET: frozenset[str] = frozenset(ALL_KEYWORDS)


def is_keyword(word: str) -> bool:
    """Check whether a word is a known SQL keyword (case-insensitive)."""
    return word.upper() in KEYWORD_SET
