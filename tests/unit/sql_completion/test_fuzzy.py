"""Tests for fuzzy matching and scoring."""

import pytest

from sqlcomplete.completion import NO_MATCH, fuzzy_filter, fuzzy_match, fuzzy_score


class TestFuzzyMatch:
    """Tests for fuzzy_match()."""

    def test_exact_prefix(self):
        assert fuzzy_match("use", "users")

    def test_substring(self):
        assert fuzzy_match("ser", "users")

    def test_subsequence(self):
        """Characters in order but not contiguous still match."""
        assert fuzzy_match("djmi", "django_migrations")

    def test_case_insensitive(self):
        assert fuzzy_match("SEL", "select")
        assert fuzzy_match("sel", "SELECT")

    def test_empty_matches_everything(self):
        assert fuzzy_match("", "anything")
        assert fuzzy_match("", "")

    def test_no_match(self):
        assert not fuzzy_match("xyz", "abc")

    def test_order_matters(self):
        """Subsequence matching respects character order."""
        assert not fuzzy_match("sru", "users")

    def test_underscore_words(self):
        assert fuzzy_match("us", "user_settings")

    def test_longer_than_candidate(self):
        assert not fuzzy_match("users_table", "users")


class TestFuzzyScore:
    """Tests for fuzzy_score()."""

    @pytest.mark.parametrize(
        "text,candidate,expected",
        [
            ("users", "users", 0),
            ("USERS", "users", 0),
            ("use", "users", 1),
            ("ser", "users", 2),
            ("djmi", "django_migrations", 3),
            ("xyz", "abc", NO_MATCH),
            ("", "users", NO_MATCH),
        ],
    )
    def test_score(self, text, candidate, expected):
        assert fuzzy_score(text, candidate) == expected

    def test_score_agrees_with_match(self):
        """Every candidate that matches gets a score below NO_MATCH."""
        for candidate in ["users", "user_settings", "products", "orders", "django_migrations"]:
            assert (fuzzy_score("us", candidate) < NO_MATCH) == fuzzy_match("us", candidate)


class TestFuzzyFilter:
    """Tests for fuzzy_filter()."""

    CANDIDATES = ["bus", "users", "u_s", "us", "orders"]

    def test_keeps_input_order_by_default(self):
        """Unranked filtering keeps candidate order."""
        assert fuzzy_filter("us", self.CANDIDATES) == ["bus", "users", "u_s", "us"]

    def test_ranked_sorts_by_score(self):
        """Ranked filtering puts exact, prefix, substring, subsequence in that order."""
        assert fuzzy_filter("us", self.CANDIDATES, ranked=True) == ["us", "users", "bus", "u_s"]

    def test_empty_text_returns_everything(self):
        assert fuzzy_filter("", self.CANDIDATES, ranked=True) == self.CANDIDATES

    def test_accepts_any_iterable(self):
        assert fuzzy_filter("or", (c for c in self.CANDIDATES)) == ["orders"]
