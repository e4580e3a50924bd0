"""Tests for clause context detection and table reference extraction."""

import pytest

from sqlcomplete.completion import (
    SQLContext,
    TableRef,
    analyze_context,
    extract_table_refs,
    resolve_table_name,
    tokenize,
)


class TestAnalyzeContext:
    """Tests for analyze_context()."""

    @pytest.mark.parametrize(
        "text,clause",
        [
            ("SELECT ", "select"),
            ("SELECT id, ", "select"),
            ("SELECT * FROM ", "from"),
            ("SELECT * FROM users WHERE ", "where"),
            ("SELECT * FROM users WHERE id = 1 AND ", "where"),
            ("SELECT * FROM users JOIN ", "join"),
            ("SELECT * FROM users LEFT JOIN ", "join"),
            ("SELECT * FROM users u INNER JOIN orders o ON ", "on"),
            ("SELECT * FROM users JOIN orders USING ", "using"),
            ("SELECT * FROM users ORDER BY ", "order_by"),
            ("SELECT count(*) FROM orders GROUP BY ", "group_by"),
            ("SELECT count(*) FROM orders GROUP BY user_id HAVING ", "having"),
            ("INSERT ", "insert"),
            ("INSERT INTO ", "insert"),
            ("UPDATE ", "update"),
            ("UPDATE users SET ", "set"),
            ("CREATE ", "create"),
            ("ALTER ", "alter"),
            ("DROP ", "drop"),
            ("select * from ", "from"),
        ],
    )
    def test_clause(self, text, clause):
        assert analyze_context(text).clause == clause

    def test_empty_input(self):
        """Empty or blank input gives the zero context."""
        assert analyze_context("") == SQLContext()
        assert analyze_context("   \n") == SQLContext()
        assert analyze_context("").clause is None

    def test_no_clause_keyword(self):
        """Text without a clause keyword sets no flag."""
        ctx = analyze_context("sel")
        assert ctx.clause is None
        assert not ctx.is_backslash
        assert not ctx.after_dot

    def test_order_without_by_is_ignored(self):
        """ORDER alone doesn't start an ORDER BY clause."""
        assert analyze_context("SELECT * FROM users ORDER ").clause == "from"

    def test_group_without_by_is_ignored(self):
        assert analyze_context("SELECT * FROM users GROUP ").clause == "from"

    def test_join_modifier_without_join_is_ignored(self):
        """LEFT alone doesn't start a join."""
        assert analyze_context("SELECT * FROM users LEFT ").clause == "from"

    def test_most_recent_clause_wins(self):
        """A subquery's SELECT overrides the outer WHERE."""
        assert analyze_context("SELECT * FROM users WHERE id IN (SELECT ").clause == "select"

    def test_closed_subquery_is_not_tracked(self):
        """Only the last clause keyword counts, even inside a closed subquery."""
        assert analyze_context("SELECT * FROM (SELECT id FROM x) t WHERE ").clause == "where"
        assert analyze_context("SELECT * FROM (SELECT id FROM x) t ").clause == "from"

    @pytest.mark.parametrize(
        "text",
        [
            "SELECT * FROM users u JOIN orders o ON u.id = o.user_id WHERE ",
            "UPDATE users SET name = 'x' WHERE ",
            "SELECT a FROM t GROUP BY a HAVING count(*) > 1 ORDER BY ",
            "INSERT INTO t SELECT * FROM s ",
        ],
    )
    def test_at_most_one_clause_flag(self, text):
        ctx = analyze_context(text)
        flags = [name for name, value in vars(ctx).items() if name.startswith("in_") and value]
        assert len(flags) <= 1

    def test_backslash(self):
        """Leading backslash marks a special command."""
        ctx = analyze_context("\\d")
        assert ctx.is_backslash
        assert ctx.clause is None
        assert ctx.tables == []

    def test_backslash_after_whitespace(self):
        assert analyze_context("  \\dt").is_backslash

    def test_backslash_not_leading(self):
        assert not analyze_context("SELECT \\d").is_backslash

    def test_after_dot(self):
        ctx = analyze_context("SELECT users.")
        assert ctx.after_dot
        assert ctx.before_dot == "users"

    def test_after_dot_with_alias_keeps_clause(self):
        """Dot context is detected alongside the clause."""
        ctx = analyze_context("SELECT * FROM users u WHERE u.")
        assert ctx.after_dot
        assert ctx.before_dot == "u"
        assert ctx.clause == "where"
        assert ctx.tables == [TableRef("users", "u")]

    def test_after_dot_schema_qualified(self):
        """Only the last qualifier before the dot is kept."""
        assert analyze_context("SELECT public.users.").before_dot == "users"

    def test_before_dot_lowercased(self):
        assert analyze_context("SELECT Users.").before_dot == "users"

    def test_no_dot(self):
        ctx = analyze_context("SELECT users")
        assert not ctx.after_dot
        assert ctx.before_dot == ""


class TestExtractTableRefs:
    """Tests for extract_table_refs()."""

    def test_table_and_aliases(self):
        ctx = analyze_context("SELECT * FROM users u JOIN orders o ON u.id = o.user_id")
        assert ctx.tables == [TableRef("users", "u"), TableRef("orders", "o")]

    def test_as_alias(self):
        assert extract_table_refs(tokenize("SELECT * FROM users AS u")) == [TableRef("users", "u")]

    def test_no_alias_before_keyword(self):
        assert extract_table_refs(tokenize("SELECT * FROM users WHERE id = 1")) == [TableRef("users")]

    def test_update(self):
        assert extract_table_refs(tokenize("UPDATE users SET name = 'x'")) == [TableRef("users")]

    def test_insert_into(self):
        assert extract_table_refs(tokenize("INSERT INTO orders VALUES")) == [TableRef("orders")]

    def test_delete_from(self):
        assert extract_table_refs(tokenize("DELETE FROM users")) == [TableRef("users")]

    def test_keyword_after_introducer_is_skipped(self):
        """FROM followed by a keyword names no table."""
        assert extract_table_refs(tokenize("SELECT * FROM WHERE")) == []

    def test_introducer_at_end(self):
        assert extract_table_refs(tokenize("SELECT * FROM")) == []

    def test_names_lowercased(self):
        assert extract_table_refs(tokenize("SELECT * FROM Users U")) == [TableRef("users", "u")]

    def test_insert_column_list_reads_as_alias(self):
        """The token after the table is taken as an alias when it isn't a keyword."""
        assert extract_table_refs(tokenize("INSERT INTO users (id")) == [TableRef("users", "id")]

    def test_comma_list_reads_second_table_as_alias(self):
        """Commas are dropped by the tokenizer, so the next name becomes an alias."""
        assert extract_table_refs(tokenize("SELECT * FROM users, orders")) == [TableRef("users", "orders")]

    def test_empty(self):
        assert extract_table_refs([]) == []


class TestResolveTableName:
    """Tests for resolve_table_name()."""

    REFS = [TableRef("users", "u"), TableRef("orders", "o")]

    def test_alias(self):
        assert resolve_table_name("u", self.REFS) == "users"
        assert resolve_table_name("o", self.REFS) == "orders"

    def test_table_name(self):
        assert resolve_table_name("orders", self.REFS) == "orders"

    def test_unknown_name_returned_unchanged(self):
        assert resolve_table_name("x", self.REFS) == "x"

    def test_first_ref_wins_on_collision(self):
        """An alias that shadows a later table name resolves to the first ref."""
        refs = [TableRef("users", "orders"), TableRef("orders", "o")]
        assert resolve_table_name("orders", refs) == "users"
