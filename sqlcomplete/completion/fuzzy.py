"""Fuzzy matching and scoring of completion candidates."""

from __future__ import annotations

from collections.abc import Iterable

SCORE_EXACT = 0
SCORE_PREFIX = 1
SCORE_SUBSTRING = 2
SCORE_SUBSEQUENCE = 3
NO_MATCH = 100


def _is_subsequence(text: str, candidate: str) -> bool:
    idx = 0
    for char in text:
        idx = candidate.find(char, idx)
        if idx == -1:
            return False
        idx += 1
    return True


def fuzzy_match(text: str, candidate: str) -> bool:
    """Check whether candidate matches the typed text.

    Case-insensitive. Tries a prefix match, then a substring match, then an
    ordered subsequence match, e.g. 'djmi' matches 'django_migrations'.
    Empty text matches everything.
    """
    if not text:
        return True

    text_lower = text.lower()
    c_lower = candidate.lower()

    if c_lower.startswith(text_lower):
        return True
    if text_lower in c_lower:
        return True
    return _is_subsequence(text_lower, c_lower)


def fuzzy_score(text: str, candidate: str) -> int:
    """Rank how well candidate matches text (lower is better).

    Returns:
        0 for identical, 1 for prefix, 2 for substring, 3 for subsequence
        and NO_MATCH when nothing matches or text is empty.
    """
    if not text:
        return NO_MATCH

    text_lower = text.lower()
    c_lower = candidate.lower()

    if c_lower == text_lower:
        return SCORE_EXACT
    if c_lower.startswith(text_lower):
        return SCORE_PREFIX
    if text_lower in c_lower:
        return SCORE_SUBSTRING
    if _is_subsequence(text_lower, c_lower):
        return SCORE_SUBSEQUENCE
    return NO_MATCH


def fuzzy_filter(text: str, candidates: Iterable[str], *, ranked: bool = False) -> list[str]:
    """Filter candidates by fuzzy match.

    Args:
        text: The word typed so far
        candidates: Candidate strings
        ranked: Stable-sort the matches by fuzzy_score

    Returns:
        Matching candidates, in input order unless ranked
    """
    matches = [c for c in candidates if fuzzy_match(text, c)]
    if ranked and text:
        matches.sort(key=lambda c: fuzzy_score(text, c))
    return matches
