"""Detect tasks whose shape no longer fits the fixed tier/time model."""

import logging

from todo_planner.models import (
    IssueKind,
    RecommendedAction,
    Severity,
    SuitabilityIssue,
    SuitabilityResult,
    TaskRecord,
    Urgency,
)

logger = logging.getLogger(__name__)

MAX_SUBTASKS = 10
MIN_COMPLEX_KEYWORDS = 3
MIN_SUBTASKS_FOR_SPREAD = 3
MAX_COMPLEXITY_SPREAD = 3
DEFAULT_TASK_MINUTES = 30
MINUTES_PER_COMPLEXITY_POINT = 10
TIME_OVERRUN_FACTOR = 1.5

COMPLEXITY_KEYWORDS = (
    "research",
    "analyze",
    "design",
    "implement",
    "test",
    "deploy",
    "multiple",
    "various",
    "several",
    "comprehensive",
    "complete",
    "system",
    "platform",
    "architecture",
    "infrastructure",
)


def estimate_task_time(task: TaskRecord) -> int:
    """Estimate minutes as 10 per complexity point, 30 for a task without subtasks."""
    if not task.subtasks:
        return DEFAULT_TASK_MINUTES
    return sum(s.complexity * MINUTES_PER_COMPLEXITY_POINT for s in task.subtasks)


def _is_too_complex(task: TaskRecord) -> bool:
    if task.subtask_count > MAX_SUBTASKS:
        return True
    content = f"{task.title} {task.description}".lower()
    hits = sum(1 for keyword in COMPLEXITY_KEYWORDS if keyword in content)
    return hits >= MIN_COMPLEX_KEYWORDS


def _has_inconsistent_complexity(task: TaskRecord) -> bool:
    if task.subtask_count < MIN_SUBTASKS_FOR_SPREAD:
        return False
    scores = [s.complexity for s in task.subtasks]
    return max(scores) - min(scores) > MAX_COMPLEXITY_SPREAD


def _recommended_action(issues: list[SuitabilityIssue]) -> RecommendedAction:
    if any(i.severity is Severity.HIGH for i in issues):
        return RecommendedAction.REQUIRED
    if issues:
        return RecommendedAction.SUGGESTED
    return RecommendedAction.NONE


def analyze_suitability(task: TaskRecord) -> SuitabilityResult:
    """Run the three independent structure checks against a task."""
    issues: list[SuitabilityIssue] = []
    estimated = estimate_task_time(task)

    if _is_too_complex(task):
        issues.append(
            SuitabilityIssue(
                kind=IssueKind.TOO_COMPLEX,
                severity=Severity.HIGH,
                message="Task appears too complex for a single priority assignment",
                suggestion="Break into smaller, more manageable tasks",
            )
        )

    if _has_inconsistent_complexity(task):
        issues.append(
            SuitabilityIssue(
                kind=IssueKind.INCONSISTENT_COMPLEXITY,
                severity=Severity.MEDIUM,
                message="Subtasks vary greatly in complexity",
                suggestion="Group subtasks of similar complexity or split the complex ones",
            )
        )

    if estimated > task.allocated_time * TIME_OVERRUN_FACTOR:
        issues.append(
            SuitabilityIssue(
                kind=IssueKind.TIME_MISMATCH,
                severity=Severity.HIGH,
                message=(
                    f"Estimated {estimated} minutes exceeds the {task.allocated_time} minute "
                    f"budget of priority {task.priority.value}"
                ),
                suggestion="Adjust subtasks to fit the priority time block",
            )
        )

    action = _recommended_action(issues)
    if issues:
        logger.debug(
            f"[Suitability] {task.id}: {[i.kind.value for i in issues]} -> {action.value}"
        )
    return SuitabilityResult(issues=issues, recommended_action=action, estimated_time=estimated)


def needs_immediate_breakdown(task: TaskRecord) -> bool:
    return analyze_suitability(task).recommended_action is RecommendedAction.REQUIRED


def should_suggest_breakdown(task: TaskRecord) -> bool:
    return analyze_suitability(task).recommended_action is not RecommendedAction.NONE


def breakdown_urgency(task: TaskRecord) -> Urgency:
    """Map the recommended action and issue severities to an urgency level."""
    result = analyze_suitability(task)
    if result.recommended_action is RecommendedAction.REQUIRED:
        return Urgency.HIGH
    if result.recommended_action is RecommendedAction.SUGGESTED:
        severities = {i.severity for i in result.issues}
        if Severity.HIGH in severities:
            return Urgency.HIGH
        if Severity.MEDIUM in severities:
            return Urgency.MEDIUM
        return Urgency.LOW
    return Urgency.NONE


def breakdown_summary(task: TaskRecord) -> str:
    """One-line, human-readable verdict for a task."""
    result = analyze_suitability(task)
    if not result.is_problematic:
        return "Task structure looks good for the current priority system."

    count = len(result.issues)
    high = sum(1 for i in result.issues if i.severity is Severity.HIGH)

    summary = f"Found {count} issue{'s' if count > 1 else ''}"
    if high:
        summary += f" ({high} high severity)"
    summary += ". "

    if result.recommended_action is RecommendedAction.REQUIRED:
        summary += "Task breakdown is required before assignment."
    else:
        summary += "Consider breaking down this task for better time management."
    return summary
