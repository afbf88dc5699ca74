"""Priority tier classification and time allocation."""

import logging
import re
from dataclasses import dataclass

from todo_planner.config import DEFAULT_CONFIG, PlannerConfig, PriorityThresholds
from todo_planner.models import Priority, TaskRecord

logger = logging.getLogger(__name__)

# Content keywords and their weight for suggest_priority_from_content
_CONTENT_SIGNALS: list[tuple[re.Pattern[str], int, str]] = [
    (re.compile(r"urgent|asap|immediately|critical|emergency"), 3, "Contains urgency keywords"),
    (re.compile(r"complex|comprehensive|multiple|various|several"), 2, "Contains complexity indicators"),
    (
        re.compile(r"design|implement|develop|analyze|research|build|architect"),
        2,
        "Contains complex action verbs",
    ),
    (re.compile(r"project|system|platform|infrastructure|architecture"), 1, "Large scope indicators"),
    (re.compile(r"check|verify|confirm|send|email|call|read|update"), -1, "Contains simple action verbs"),
]


@dataclass(frozen=True)
class PriorityValidation:
    """Whether a task's tier agrees with its subtask count."""

    is_valid: bool
    suggested_priority: Priority | None = None
    reason: str | None = None


@dataclass(frozen=True)
class ContentSuggestion:
    """Tier suggested from a task's wording alone."""

    priority: Priority
    confidence: float  # 0-1
    reasoning: str


def classify_priority(subtask_count: int, thresholds: PriorityThresholds | None = None) -> Priority:
    """Map a subtask count to a tier, checking the highest threshold first."""
    thresholds = thresholds or DEFAULT_CONFIG.thresholds
    if subtask_count >= thresholds.priority_a:
        return Priority.A
    if subtask_count >= thresholds.priority_b:
        return Priority.B
    if subtask_count >= thresholds.priority_c:
        return Priority.C
    return Priority.D


def allocated_time(priority: Priority, config: PlannerConfig | None = None) -> int:
    """Fixed per-task time budget in minutes for a tier."""
    return (config or DEFAULT_CONFIG).minutes_for(priority)


def resolve_priority(
    subtask_count: int,
    manual: Priority | None,
    config: PlannerConfig | None = None,
) -> tuple[Priority, bool]:
    """Pick the effective tier; a manual override always wins.

    Returns:
        Tuple of (tier, is_auto_priority)
    """
    if manual is not None:
        return manual, False
    return classify_priority(subtask_count, (config or DEFAULT_CONFIG).thresholds), True


def validate_auto_priority(task: TaskRecord, config: PlannerConfig | None = None) -> PriorityValidation:
    """Check a task's tier against what its subtask count would assign.

    Manual overrides are always valid but carry the automatic tier as feedback.
    """
    config = config or DEFAULT_CONFIG
    expected = classify_priority(task.subtask_count, config.thresholds)

    if task.priority is expected:
        return PriorityValidation(is_valid=True)

    if not task.is_auto_priority:
        return PriorityValidation(
            is_valid=True,
            suggested_priority=expected,
            reason=(
                f"Manual priority {task.priority.value} set, but {expected.value} would be "
                f"auto-assigned based on {task.subtask_count} subtasks"
            ),
        )

    return PriorityValidation(
        is_valid=False,
        suggested_priority=expected,
        reason=(
            f"Priority {task.priority.value} doesn't match expected {expected.value} "
            f"for {task.subtask_count} subtasks"
        ),
    )


def suggest_priority_from_content(title: str, description: str = "") -> ContentSuggestion:
    """Suggest a tier from urgency, scope and action keywords in the text."""
    content = f"{title} {description}".lower()
    score = 0
    reasons: list[str] = []

    for pattern, weight, reason in _CONTENT_SIGNALS:
        if pattern.search(content):
            score += weight
            reasons.append(reason)

    if score >= 4:
        priority, confidence = Priority.A, 0.8
    elif score >= 2:
        priority, confidence = Priority.B, 0.7
    elif score >= 0:
        priority, confidence = Priority.C, 0.6
    else:
        priority, confidence = Priority.D, 0.5

    logger.debug(f"[Priority] Content score {score} for {title!r} -> {priority.value}")
    return ContentSuggestion(
        priority=priority,
        confidence=confidence,
        reasoning=", ".join(reasons) or "Based on content analysis",
    )


def describe_priority(priority: Priority, config: PlannerConfig | None = None) -> str:
    """One-line description of a tier's budget and subtask threshold."""
    config = config or DEFAULT_CONFIG
    thresholds = config.thresholds
    minutes = config.minutes_for(priority)
    if priority is Priority.A:
        return f"High priority ({minutes}min each, {thresholds.priority_a}+ subtasks)"
    if priority is Priority.B:
        return f"Medium-high priority ({minutes}min each, {thresholds.priority_b}+ subtasks)"
    if priority is Priority.C:
        return f"Medium priority ({minutes}min each, {thresholds.priority_c}+ subtasks)"
    return f"Low priority ({minutes}min each, fewer than {thresholds.priority_c} subtasks)"
