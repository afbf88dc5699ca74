"""Propose smaller, well-sized tasks from a task's subtasks."""

import logging
import re

from todo_planner.config import DEFAULT_CONFIG, PlannerConfig
from todo_planner.models import BreakdownSuggestion, Priority, SubtaskRecord, TaskRecord

logger = logging.getLogger(__name__)

GENERAL = "General"
MIN_GROUP_SIZE = 2
FALLBACK_MIN_SUBTASKS = 6  # Complexity banding only kicks in above this count

# Evaluated in order, first match wins
CATEGORY_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("Design", re.compile(r"design|wireframe|mockup|layout|ui|ux|visual")),
    ("Implementation", re.compile(r"implement|code|develop|build|create|program")),
    ("Testing", re.compile(r"test|verify|check|validate|qa|debug")),
    ("Research", re.compile(r"research|analyze|investigate|study|explore")),
    ("Documentation", re.compile(r"document|write|update|record|note")),
    ("Planning", re.compile(r"plan|organize|schedule|prepare|setup")),
    ("Deployment", re.compile(r"deploy|release|publish|launch|install")),
]


def categorize_subtask(title: str) -> str:
    lowered = title.lower()
    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return GENERAL


def group_subtasks(
    subtasks: tuple[SubtaskRecord, ...] | list[SubtaskRecord],
) -> list[tuple[str, list[SubtaskRecord]]]:
    """Group subtasks by category in order of first appearance."""
    groups: list[tuple[str, list[SubtaskRecord]]] = []
    for subtask in subtasks:
        category = categorize_subtask(subtask.title)
        for name, members in groups:
            if name == category:
                members.append(subtask)
                break
        else:
            groups.append((category, [subtask]))
    return groups


def priority_for_group(members: list[SubtaskRecord]) -> Priority:
    """Tier for a group from its average complexity and size."""
    count = len(members)
    average = sum(s.complexity for s in members) / count
    if average >= 4 or count >= 6:
        return Priority.A
    if average >= 3 or count >= 4:
        return Priority.B
    if average >= 2 or count >= 2:
        return Priority.C
    return Priority.D


def _complexity_breakdown(task: TaskRecord, config: PlannerConfig) -> list[BreakdownSuggestion]:
    high = [s for s in task.subtasks if s.complexity >= 4]
    medium = [s for s in task.subtasks if 2 <= s.complexity < 4]
    low = [s for s in task.subtasks if s.complexity < 2]

    suggestions: list[BreakdownSuggestion] = []
    if high:
        suggestions.append(
            BreakdownSuggestion(
                title=f"{task.title} - Complex Tasks",
                priority=Priority.A,
                subtasks=[s.title for s in high],
                estimated_time=30,
                reasoning=f"{len(high)} high-complexity tasks requiring focused attention",
            )
        )
    if medium:
        priority = Priority.B if len(medium) >= 4 else Priority.C
        suggestions.append(
            BreakdownSuggestion(
                title=f"{task.title} - Standard Tasks",
                priority=priority,
                subtasks=[s.title for s in medium],
                estimated_time=config.minutes_for(priority),
                reasoning=f"{len(medium)} medium-complexity tasks",
            )
        )
    if low:
        suggestions.append(
            BreakdownSuggestion(
                title=f"{task.title} - Quick Tasks",
                priority=Priority.C,
                subtasks=[s.title for s in low],
                estimated_time=10,
                reasoning=f"{len(low)} simple tasks that can be done quickly",
            )
        )
    return suggestions


def suggest_breakdown(task: TaskRecord, config: PlannerConfig | None = None) -> list[BreakdownSuggestion]:
    """Suggest smaller tasks, grouping by category and falling back to complexity bands."""
    config = config or DEFAULT_CONFIG
    suggestions: list[BreakdownSuggestion] = []

    for category, members in group_subtasks(task.subtasks):
        if len(members) < MIN_GROUP_SIZE:
            continue
        priority = priority_for_group(members)
        suggestions.append(
            BreakdownSuggestion(
                title=f"{task.title} - {category}",
                priority=priority,
                subtasks=[s.title for s in members],
                estimated_time=config.minutes_for(priority),
                reasoning=f"Grouped {len(members)} {category.lower()} tasks",
            )
        )

    if not suggestions and task.subtask_count > FALLBACK_MIN_SUBTASKS:
        logger.debug(f"[Breakdown] {task.id}: no category groups, splitting by complexity")
        suggestions = _complexity_breakdown(task, config)

    return suggestions
