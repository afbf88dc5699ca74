"""Best-effort correction of stale classification fields."""

import logging
from dataclasses import replace

from todo_planner.analysis.priority import classify_priority
from todo_planner.analysis.suitability import estimate_task_time
from todo_planner.config import DEFAULT_CONFIG, PlannerConfig
from todo_planner.lifecycle import update_priority
from todo_planner.models import AutoFixResult, TaskRecord

logger = logging.getLogger(__name__)

ESTIMATE_TOLERANCE = 10  # Minutes of drift tolerated before overwriting


def auto_fix(task: TaskRecord, config: PlannerConfig | None = None) -> AutoFixResult:
    """Recompute an automatic tier and refresh a drifted time estimate.

    Manually overridden tiers are never touched. The returned result carries
    the corrected record; the input record is left as is.
    """
    config = config or DEFAULT_CONFIG
    changes: list[str] = []
    fixed = task

    if fixed.is_auto_priority:
        expected = classify_priority(fixed.subtask_count, config.thresholds)
        if fixed.priority is not expected:
            changes.append(f"Updated priority from {fixed.priority.value} to {expected.value}")
            fixed = update_priority(fixed, expected, config, manual=False)

    estimated = estimate_task_time(fixed)
    if abs(fixed.estimated_time - estimated) > ESTIMATE_TOLERANCE:
        changes.append(f"Updated estimated time to {estimated} minutes")
        fixed = replace(fixed, estimated_time=estimated)

    if changes:
        logger.debug(f"[AutoFix] {task.id}: {'; '.join(changes)}")
    return AutoFixResult(fixed=bool(changes), changes=changes, task=fixed)
