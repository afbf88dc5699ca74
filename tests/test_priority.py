"""Tests for priority classification and time allocation."""

from collections.abc import Callable

import pytest

from todo_planner.analysis.priority import (
    allocated_time,
    classify_priority,
    describe_priority,
    resolve_priority,
    suggest_priority_from_content,
    validate_auto_priority,
)
from todo_planner.config import PlannerConfig, PriorityThresholds
from todo_planner.models import Priority, TaskRecord


@pytest.mark.parametrize(
    ("count", "expected"),
    [
        (0, Priority.D),
        (1, Priority.D),
        (2, Priority.C),
        (3, Priority.C),
        (4, Priority.B),
        (5, Priority.B),
        (6, Priority.A),
        (25, Priority.A),
    ],
)
def test_classify_default_thresholds(count: int, expected: Priority) -> None:
    """Test the default threshold table at and around its boundaries."""
    assert classify_priority(count) is expected


def test_classify_is_monotonic() -> None:
    """Test that more subtasks never yield a lower tier."""
    ranks = [classify_priority(n).rank for n in range(0, 30)]
    assert ranks == sorted(ranks)


def test_classify_custom_thresholds() -> None:
    """Test classification with configured thresholds."""
    thresholds = PriorityThresholds(priority_a=10, priority_b=5, priority_c=1)
    assert classify_priority(1, thresholds) is Priority.C
    assert classify_priority(9, thresholds) is Priority.B
    assert classify_priority(10, thresholds) is Priority.A


@pytest.mark.parametrize(
    ("priority", "minutes"),
    [(Priority.A, 30), (Priority.B, 30), (Priority.C, 10), (Priority.D, 60)],
)
def test_allocated_time_defaults(priority: Priority, minutes: int) -> None:
    """Test the default time table."""
    assert allocated_time(priority) == minutes


def test_allocated_time_uses_config(config: PlannerConfig) -> None:
    """Test that a custom time table is honoured."""
    custom = config.model_copy(
        update={"time_allocation": {Priority.A: 45, Priority.B: 30, Priority.C: 15, Priority.D: 90}}
    )
    assert allocated_time(Priority.A, custom) == 45
    assert allocated_time(Priority.D, custom) == 90


def test_resolve_priority_manual_wins(config: PlannerConfig) -> None:
    """Test that a manual override beats the subtask count."""
    assert resolve_priority(8, Priority.D, config) == (Priority.D, False)
    assert resolve_priority(8, None, config) == (Priority.A, True)


def test_validate_auto_priority_matching(make_task: Callable[..., TaskRecord]) -> None:
    """Test that a correctly classified task is valid."""
    task = make_task(complexities=[1, 1], priority=Priority.C)
    result = validate_auto_priority(task)
    assert result.is_valid
    assert result.suggested_priority is None


def test_validate_auto_priority_stale_auto(make_task: Callable[..., TaskRecord]) -> None:
    """Test that a stale automatic tier is flagged."""
    task = make_task(complexities=[1, 1, 1, 1], priority=Priority.D)
    result = validate_auto_priority(task)
    assert not result.is_valid
    assert result.suggested_priority is Priority.B


def test_validate_auto_priority_manual_is_valid(make_task: Callable[..., TaskRecord]) -> None:
    """Test that manual overrides are valid but report the automatic tier."""
    task = make_task(complexities=[1, 1, 1, 1], priority=Priority.D, is_auto_priority=False)
    result = validate_auto_priority(task)
    assert result.is_valid
    assert result.suggested_priority is Priority.B
    assert result.reason is not None and "Manual priority D" in result.reason


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Urgent: design the new platform", Priority.A),
        ("Implement login", Priority.B),
        ("Water plants", Priority.C),
        ("Call mom", Priority.D),
    ],
)
def test_suggest_priority_from_content(title: str, expected: Priority) -> None:
    """Test keyword-based tier suggestions."""
    suggestion = suggest_priority_from_content(title)
    assert suggestion.priority is expected
    assert 0 < suggestion.confidence <= 1


def test_suggest_priority_from_content_reasoning_fallback() -> None:
    """Test the reasoning text when no keyword matches."""
    assert suggest_priority_from_content("Water plants").reasoning == "Based on content analysis"


def test_describe_priority() -> None:
    """Test tier descriptions include budget and threshold."""
    assert describe_priority(Priority.A) == "High priority (30min each, 6+ subtasks)"
    assert describe_priority(Priority.D) == "Low priority (60min each, fewer than 2 subtasks)"
