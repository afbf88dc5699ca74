"""Tests for the suitability analyzer."""

from collections.abc import Callable

from todo_planner.analysis.suitability import (
    analyze_suitability,
    breakdown_summary,
    breakdown_urgency,
    estimate_task_time,
    needs_immediate_breakdown,
    should_suggest_breakdown,
)
from todo_planner.markdown.extractor import parse_document
from todo_planner.models import (
    IssueKind,
    Priority,
    RecommendedAction,
    Severity,
    TaskRecord,
    Urgency,
)

TaskFactory = Callable[..., TaskRecord]


def _kinds(task: TaskRecord) -> list[IssueKind]:
    return [issue.kind for issue in analyze_suitability(task).issues]


def test_well_formed_task_has_no_issues(make_task: TaskFactory) -> None:
    """Test a small task that fits its tier."""
    task = make_task(complexities=[1, 1], priority=Priority.C, allocated_time=20)
    result = analyze_suitability(task)

    assert result.issues == []
    assert not result.is_problematic
    assert result.recommended_action is RecommendedAction.NONE
    assert breakdown_urgency(task) is Urgency.NONE
    assert not should_suggest_breakdown(task)
    assert breakdown_summary(task) == "Task structure looks good for the current priority system."


def test_estimate_task_time(make_task: TaskFactory) -> None:
    """Test 10 minutes per complexity point, 30 without subtasks."""
    assert estimate_task_time(make_task()) == 30
    assert estimate_task_time(make_task(complexities=[1, 2, 3])) == 60


def test_eleven_uniform_subtasks_too_complex(make_task: TaskFactory) -> None:
    """Test that more than ten subtasks is too complex and requires a breakdown."""
    task = make_task(complexities=[1] * 11, priority=Priority.A)
    result = analyze_suitability(task)

    assert IssueKind.TOO_COMPLEX in _kinds(task)
    assert IssueKind.INCONSISTENT_COMPLEXITY not in _kinds(task)
    assert result.recommended_action is RecommendedAction.REQUIRED
    assert needs_immediate_breakdown(task)


def test_ten_subtasks_is_not_too_complex(make_task: TaskFactory) -> None:
    """Test the subtask count boundary."""
    task = make_task(complexities=[1] * 10, priority=Priority.A, allocated_time=100)
    assert _kinds(task) == []


def test_complexity_keywords_in_title(make_task: TaskFactory) -> None:
    """Test that three distinct complexity keywords flag the task."""
    assert IssueKind.TOO_COMPLEX in _kinds(make_task(title="Research and design the new system"))
    assert IssueKind.TOO_COMPLEX not in _kinds(make_task(title="Design system"))


def test_complexity_keywords_in_description(make_task: TaskFactory) -> None:
    """Test that keywords in the description count too."""
    task = make_task(title="Billing", description="implement, test and deploy")
    assert IssueKind.TOO_COMPLEX in _kinds(task)


def test_inconsistent_complexity_suggested(make_task: TaskFactory) -> None:
    """Test a wide complexity spread on its own suggests a breakdown."""
    task = make_task(complexities=[1, 1, 1, 5, 5], priority=Priority.B, allocated_time=200)
    result = analyze_suitability(task)

    assert _kinds(task) == [IssueKind.INCONSISTENT_COMPLEXITY]
    assert result.issues[0].severity is Severity.MEDIUM
    assert result.recommended_action is RecommendedAction.SUGGESTED
    assert breakdown_urgency(task) is Urgency.MEDIUM
    assert should_suggest_breakdown(task)
    assert not needs_immediate_breakdown(task)
    assert breakdown_summary(task) == (
        "Found 1 issue. Consider breaking down this task for better time management."
    )


def test_inconsistent_complexity_with_default_budget(make_task: TaskFactory) -> None:
    """Test [1,1,1,5,5] under tier B is at least suggested."""
    task = make_task(complexities=[1, 1, 1, 5, 5], priority=Priority.B)
    result = analyze_suitability(task)

    assert IssueKind.INCONSISTENT_COMPLEXITY in _kinds(task)
    assert result.recommended_action in (RecommendedAction.SUGGESTED, RecommendedAction.REQUIRED)


def test_spread_needs_three_subtasks(make_task: TaskFactory) -> None:
    """Test that two subtasks never count as inconsistent."""
    task = make_task(complexities=[1, 5], priority=Priority.C, allocated_time=100)
    assert IssueKind.INCONSISTENT_COMPLEXITY not in _kinds(task)


def test_spread_of_three_is_consistent(make_task: TaskFactory) -> None:
    """Test the spread boundary."""
    task = make_task(complexities=[1, 2, 4], priority=Priority.C, allocated_time=100)
    assert IssueKind.INCONSISTENT_COMPLEXITY not in _kinds(task)


def test_time_mismatch_tier_d(make_task: TaskFactory) -> None:
    """Test a 60 minute task estimated above 90 minutes."""
    task = make_task(complexities=[5, 5], priority=Priority.D, is_auto_priority=False)
    result = analyze_suitability(task)

    assert _kinds(task) == [IssueKind.TIME_MISMATCH]
    assert result.estimated_time == 100
    assert result.recommended_action is RecommendedAction.REQUIRED
    assert breakdown_urgency(task) is Urgency.HIGH


def test_time_mismatch_boundary(make_task: TaskFactory) -> None:
    """Test that exactly 1.5x the budget is still acceptable."""
    task = make_task(complexities=[3, 3, 3], priority=Priority.D, is_auto_priority=False)
    assert IssueKind.TIME_MISMATCH not in _kinds(task)


def test_time_mismatch_without_subtasks(make_task: TaskFactory) -> None:
    """Test the 30 minute default against a 10 minute tier."""
    task = make_task(priority=Priority.C, is_auto_priority=False)
    assert _kinds(task) == [IssueKind.TIME_MISMATCH]


def test_summary_counts_high_issues(make_task: TaskFactory) -> None:
    """Test the summary line for multiple high severity issues."""
    task = make_task(complexities=[1] * 11, priority=Priority.A)
    assert breakdown_summary(task) == (
        "Found 2 issues (2 high severity). Task breakdown is required before assignment."
    )


def test_vacation_example() -> None:
    """Test the plan-vacation document end to end."""
    text = """- [ ] Plan vacation
  - [ ] Book flights
  - [ ] Reserve hotel
  - [ ] Plan itinerary
  - [ ] Research visa requirements
"""
    records = parse_document(text)

    assert len(records) == 1
    task = records[0]
    assert task.subtask_count == 4
    assert task.priority is Priority.B
    assert task.is_auto_priority
    assert task.allocated_time == 30
    assert [s.complexity for s in task.subtasks] == [1, 1, 1, 3]

    result = analyze_suitability(task)
    assert result.estimated_time == 60
    assert [i.kind for i in result.issues] == [IssueKind.TIME_MISMATCH]
    assert result.recommended_action is RecommendedAction.REQUIRED
