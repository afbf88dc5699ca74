"""State transitions for task records.

Every function returns a new ``TaskRecord``; fields that belong together
(tier and time budget, status and remaining time) change in one step.
"""

import logging
from dataclasses import replace
from datetime import date, datetime

from todo_planner.analysis.complexity import score_complexity
from todo_planner.analysis.priority import allocated_time
from todo_planner.config import DEFAULT_CONFIG, PlannerConfig
from todo_planner.models import (
    Priority,
    RescheduleEvent,
    SubtaskRecord,
    TaskRecord,
    TaskStatus,
)

logger = logging.getLogger(__name__)


def update_priority(
    task: TaskRecord,
    priority: Priority,
    config: PlannerConfig | None = None,
    manual: bool = False,
) -> TaskRecord:
    """Set a new tier and reset the time budget for it."""
    minutes = allocated_time(priority, config)
    return replace(
        task,
        priority=priority,
        is_auto_priority=not manual,
        allocated_time=minutes,
        remaining_time=0 if task.completed else minutes,
    )


def complete(task: TaskRecord, now: datetime | None = None) -> TaskRecord:
    """Todo -> Done."""
    if task.completed:
        return task
    return replace(
        task,
        status=TaskStatus.DONE,
        completed_at=now or datetime.now(),
        remaining_time=0,
    )


def reopen(task: TaskRecord) -> TaskRecord:
    """Done -> Todo."""
    if not task.completed:
        return task
    return replace(
        task,
        status=TaskStatus.TODO,
        completed_at=None,
        remaining_time=task.allocated_time,
    )


def assign_to_date(task: TaskRecord, day: date) -> TaskRecord:
    """Assign a date, remembering the first one ever assigned."""
    return replace(
        task,
        assigned_date=day,
        original_assigned_date=task.original_assigned_date or day,
    )


def reschedule(
    task: TaskRecord,
    to_date: date,
    reason: str,
    config: PlannerConfig | None = None,
    now: datetime | None = None,
) -> TaskRecord:
    """Move a task to another date and append the event to its history."""
    config = config or DEFAULT_CONFIG
    event = RescheduleEvent(
        timestamp=now or datetime.now(),
        reason=reason,
        from_date=task.assigned_date,
        to_date=to_date,
    )
    history = (*task.reschedule_history, event)
    needs_warning = len(history) >= config.reschedule_warning_threshold
    if needs_warning and not task.needs_reschedule_warning:
        logger.info(f"[Lifecycle] Task {task.id} rescheduled {len(history)} times")
    return replace(
        task,
        assigned_date=to_date,
        original_assigned_date=task.original_assigned_date or task.assigned_date or to_date,
        reschedule_history=history,
        needs_reschedule_warning=needs_warning,
    )


def _next_subtask_index(task: TaskRecord) -> int:
    prefix = f"{task.id}_sub_"
    used = [
        int(s.id[len(prefix) :])
        for s in task.subtasks
        if s.id.startswith(prefix) and s.id[len(prefix) :].isdigit()
    ]
    return max(used, default=-1) + 1


def add_subtask(task: TaskRecord, title: str, complexity: int | None = None) -> TaskRecord:
    """Append a subtask, scoring it when no complexity is given.

    The new id never repeats one already used in the record.
    """
    subtask = SubtaskRecord(
        id=f"{task.id}_sub_{_next_subtask_index(task)}",
        title=title,
        completed=False,
        task_id=task.id,
        complexity=score_complexity(title) if complexity is None else complexity,
    )
    return replace(task, subtasks=(*task.subtasks, subtask))


def remove_subtask(task: TaskRecord, subtask_id: str) -> TaskRecord:
    """Drop a subtask by id; unknown ids leave the record unchanged."""
    remaining = tuple(s for s in task.subtasks if s.id != subtask_id)
    if len(remaining) == len(task.subtasks):
        return task
    return replace(task, subtasks=remaining)


def completion_percentage(task: TaskRecord) -> int:
    if not task.subtasks:
        return 100 if task.completed else 0
    done = sum(1 for s in task.subtasks if s.completed)
    return round(done / len(task.subtasks) * 100)


def is_overdue(task: TaskRecord, today: date | None = None) -> bool:
    if task.assigned_date is None or task.completed:
        return False
    return task.assigned_date < (today or date.today())


def days_until_due(task: TaskRecord, today: date | None = None) -> int | None:
    if task.assigned_date is None:
        return None
    return (task.assigned_date - (today or date.today())).days


def is_assigned_today(task: TaskRecord, today: date | None = None) -> bool:
    return task.assigned_date is not None and task.assigned_date == (today or date.today())
