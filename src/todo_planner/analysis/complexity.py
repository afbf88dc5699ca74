"""Lexical complexity scoring for subtasks."""

import re

MIN_COMPLEXITY = 1
MAX_COMPLEXITY = 5

_CHECKBOX_PREFIX = re.compile(r"^\s*[-*]\s*\[[ xX]\]\s*")

# Simple actions short-circuit to the minimum score
_SIMPLE_ACTION = re.compile(r"^(check|verify|confirm|send|email|call|read)")

# (pattern, bonus), each band counted at most once
_BONUSES: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"update|fix|edit|write|create|add|remove"), 1),
    (re.compile(r"design|implement|develop|analyze|research|build"), 2),
    (re.compile(r"architect|optimize|refactor|integrate|deploy"), 3),
    (re.compile(r"multiple|various|several"), 1),
    (re.compile(r"complex|advanced|comprehensive"), 1),
]


def score_complexity(title: str) -> int:
    """Score a subtask title from 1 (trivial) to 5 (very complex).

    A leading checkbox prefix is ignored. Keyword bands match anywhere in the
    lower-cased text, so ``"readdress"`` counts as a simple action and
    ``"address"`` as an edit.
    """
    text = _CHECKBOX_PREFIX.sub("", title).strip().lower()

    if _SIMPLE_ACTION.match(text):
        return MIN_COMPLEXITY

    score = MIN_COMPLEXITY
    for pattern, bonus in _BONUSES:
        if pattern.search(text):
            score += bonus

    return max(MIN_COMPLEXITY, min(score, MAX_COMPLEXITY))
