# dictation/sync/StabilityMatcher.py
"""Stable word-prefix detection between consecutive recognizer hypotheses.

A word is considered stable once two consecutive hypotheses agree on it and
on every word before it. Comparison is case-insensitive; punctuation is part
of the word, so "world" and "world." disagree.
"""
from dictation.types import Hypothesis


def tokenize(text: Hypothesis) -> list[str]:
    """Split text into words on runs of whitespace, dropping empty tokens."""
    return text.split() if text else []


def _same_word(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def stable_prefix(current: Hypothesis, previous: Hypothesis) -> list[str]:
    """Return the longest common leading run of words of two hypotheses.

    Words are walked in lockstep from the start and the walk stops at the
    first mismatch. The result is bounded by the shorter hypothesis and uses
    the spelling from ``current``.

    Args:
        current: Hypothesis from this poll tick
        previous: Hypothesis from the previous poll tick

    Returns:
        Stable words; empty when either input is empty or the first words differ

    Example:
        >>> stable_prefix("the quick fox", "the quick brown")
        ['the', 'quick']
    """
    curr_words = tokenize(current)
    prev_words = tokenize(previous)

    length = 0
    while (length < len(curr_words) and length < len(prev_words)
           and _same_word(curr_words[length], prev_words[length])):
        length += 1
    return curr_words[:length]
