"""Render task records back into checklist lines."""

import logging
from datetime import date

from todo_planner.config import DATE_PLACEHOLDER, DEFAULT_CONFIG, PlannerConfig
from todo_planner.markdown.extractor import (
    DUE_TAG,
    PRIORITY_OVERRIDE,
    TASK_LINE,
    daily_note_date,
    date_tag_pattern,
    extract_due_date,
    parse_date,
)
from todo_planner.models import TaskRecord

logger = logging.getLogger(__name__)

SUBTASK_INDENT = "  "


def _checkbox(completed: bool) -> str:
    return "[x]" if completed else "[ ]"


def _tag_date(tag: str, config: PlannerConfig) -> date | None:
    for pattern in (date_tag_pattern(config.date_tag_format), DUE_TAG):
        match = pattern.fullmatch(tag)
        if match:
            parsed = parse_date(match.group(1), config.date_format)
            if parsed is not None:
                return parsed
    return None


def _implied_date(task: TaskRecord, tags: list[str], config: PlannerConfig) -> date | None:
    """Date a re-parse of the rendered line would assign."""
    found = extract_due_date(" ".join([task.title, task.description, *tags]), config)
    if found is None and task.source.document:
        return daily_note_date(task.source.document)
    return found


def _render_tags(task: TaskRecord, config: PlannerConfig) -> list[str]:
    tags: list[str] = []
    priority_written = False

    for tag in task.tags:
        # Same rule as the extractor: "#b-roll" is an override for tier B
        override = PRIORITY_OVERRIDE.match(tag)
        if override:
            # Keep the author's override tag when it still names the tier
            if (
                not task.is_auto_priority
                and not priority_written
                and override.group(1).upper() == task.priority.value
            ):
                tags.append(tag)
                priority_written = True
            continue
        if task.assigned_date is not None:
            tag_date = _tag_date(tag, config)
            if tag_date is not None and tag_date != task.assigned_date:
                continue
        tags.append(tag)

    if not task.is_auto_priority and not priority_written:
        tags.insert(0, f"#priority/{task.priority.value}")

    # An author's date tag, a bare date or a daily note name may already say it
    if task.assigned_date is not None and _implied_date(task, tags, config) != task.assigned_date:
        rendered = task.assigned_date.strftime(config.date_format)
        tags.append(config.date_tag_format.replace(DATE_PLACEHOLDER, rendered))

    return tags


def serialize(task: TaskRecord, config: PlannerConfig | None = None) -> str:
    """Render a record as its task line followed by its subtask lines.

    The priority tag is written only for manually overridden tiers, and a date
    tag only when the rest of the line does not already imply the assigned date.
    """
    config = config or DEFAULT_CONFIG
    indent = " " * task.source.start

    parts = [f"{indent}- {_checkbox(task.completed)}"]
    if task.title:
        parts.append(task.title)
    if task.description:
        parts.append(" ".join(task.description.split()))
    parts.extend(_render_tags(task, config))

    lines = [" ".join(parts)]
    for subtask in task.subtasks:
        line = f"{indent}{SUBTASK_INDENT}- {_checkbox(subtask.completed)} {subtask.title}"
        lines.append(line.rstrip())
    return "\n".join(lines)


def serialize_all(tasks: list[TaskRecord], config: PlannerConfig | None = None) -> str:
    return "\n".join(serialize(task, config) for task in tasks)


def replace_task_block(text: str, task: TaskRecord, config: PlannerConfig | None = None) -> str:
    """Replace a task's source span (task line through last subtask) in a document.

    Raises:
        ValueError: If the document changed and the source line is no longer a task
    """
    lines = text.split("\n")
    source = task.source
    if source.line >= len(lines) or not TASK_LINE.match(lines[source.line].rstrip("\r")):
        raise ValueError(f"Line {source.line} of {source.document or '<text>'} is no longer a task")

    end = min(source.end_line, len(lines) - 1)
    replacement = serialize(task, config).split("\n")
    logger.debug(
        f"[Serializer] Replacing lines {source.line}-{end} of {source.document or '<text>'} "
        f"with {len(replacement)} lines"
    )
    return "\n".join(lines[: source.line] + replacement + lines[end + 1 :])
