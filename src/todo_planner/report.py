"""Report models combining classification and analysis of a task."""

from datetime import date

from pydantic import BaseModel

from todo_planner.analysis.autofix import auto_fix
from todo_planner.analysis.breakdown import suggest_breakdown
from todo_planner.analysis.priority import describe_priority
from todo_planner.analysis.suitability import (
    analyze_suitability,
    breakdown_summary,
    breakdown_urgency,
)
from todo_planner.config import PlannerConfig
from todo_planner.models import (
    BreakdownSuggestion,
    Priority,
    RecommendedAction,
    SuitabilityIssue,
    TaskRecord,
    Urgency,
)


class TaskReport(BaseModel):
    """Analysis of a single task, as printed by the command line."""

    id: str
    title: str
    document: str
    line: int
    priority: Priority
    priority_description: str
    is_auto_priority: bool
    completed: bool
    subtask_count: int
    allocated_time: int
    estimated_time: int
    assigned_date: date | None
    tags: list[str]
    parent_id: str | None
    child_ids: list[str]
    recommended_action: RecommendedAction
    urgency: Urgency
    summary: str
    issues: list[SuitabilityIssue]
    breakdown: list[BreakdownSuggestion]
    fixes: list[str]


def build_report(task: TaskRecord, config: PlannerConfig) -> TaskReport:
    """Convert a TaskRecord to a TaskReport."""
    fix = auto_fix(task, config)
    fixed = fix.task
    result = analyze_suitability(fixed)
    breakdown = suggest_breakdown(fixed, config) if result.is_problematic else []

    return TaskReport(
        id=fixed.id,
        title=fixed.title,
        document=fixed.source.document,
        line=fixed.source.line + 1,
        priority=fixed.priority,
        priority_description=describe_priority(fixed.priority, config),
        is_auto_priority=fixed.is_auto_priority,
        completed=fixed.completed,
        subtask_count=fixed.subtask_count,
        allocated_time=fixed.allocated_time,
        estimated_time=result.estimated_time,
        assigned_date=fixed.assigned_date,
        tags=list(fixed.tags),
        parent_id=fixed.parent_id,
        child_ids=list(fixed.child_ids),
        recommended_action=result.recommended_action,
        urgency=breakdown_urgency(fixed),
        summary=breakdown_summary(fixed),
        issues=result.issues,
        breakdown=breakdown,
        fixes=fix.changes,
    )
