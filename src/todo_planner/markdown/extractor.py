"""Checklist task extraction from markdown text."""

import hashlib
import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from pathlib import PurePosixPath

from todo_planner.analysis.complexity import score_complexity
from todo_planner.analysis.priority import resolve_priority
from todo_planner.config import DATE_PLACEHOLDER, DEFAULT_CONFIG, PlannerConfig
from todo_planner.models import (
    Priority,
    SourceLocation,
    SubtaskRecord,
    TaskRecord,
    TaskStatus,
)

logger = logging.getLogger(__name__)

# indent, bullet, checkbox state, rest of line
TASK_LINE = re.compile(r"^([ \t]*)[-*] \[([ xX])\](.*)$")
TAG = re.compile(r"#[\w/-]+")
# First of "#priority/X" or bare "#X" in the line wins
PRIORITY_OVERRIDE = re.compile(r"#(?:priority/)?([ABCD])(?!\w)", re.IGNORECASE)
DUE_TAG = re.compile(r"#due/([\w./-]+)")
BARE_DATE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")

PROJECT_PREFIXES = ("#project/", "#work/", "#personal/")
UNCATEGORIZED = "uncategorized"
PARENT_PREFIX = "#parent/"
CHILD_PREFIX = "#child/"

MAX_LINE_CONTENT = 200


@dataclass(frozen=True)
class LineValidation:
    """Format check of a single checklist line."""

    is_valid: bool
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


def is_task_line(line: str) -> bool:
    return TASK_LINE.match(line) is not None


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(4))


def _task_id(document: str, line: int) -> str:
    digest = hashlib.sha1(document.encode("utf-8")).hexdigest()[:8]
    return f"todo_{digest}_{line}"


def extract_tags(content: str) -> tuple[str, ...]:
    """All tag tokens in order of appearance, without duplicates."""
    return tuple(dict.fromkeys(TAG.findall(content)))


def extract_manual_priority(line: str) -> Priority | None:
    match = PRIORITY_OVERRIDE.search(line)
    if not match:
        return None
    return Priority(match.group(1).upper())


def parse_date(value: str, date_format: str) -> date | None:
    try:
        return datetime.strptime(value, date_format).date()
    except ValueError:
        return None


def date_tag_pattern(date_tag_format: str) -> re.Pattern[str]:
    before, _, after = date_tag_format.partition(DATE_PLACEHOLDER)
    return re.compile(re.escape(before) + r"([\w./-]+)" + re.escape(after))


def extract_due_date(content: str, config: PlannerConfig | None = None) -> date | None:
    """Find an assigned date in a line; malformed dates are ignored.

    Checks the configured date tag, then ``#due/<date>``, then a bare
    ``YYYY-MM-DD`` token.
    """
    config = config or DEFAULT_CONFIG

    for pattern in (date_tag_pattern(config.date_tag_format), DUE_TAG):
        for match in pattern.finditer(content):
            parsed = parse_date(match.group(1), config.date_format)
            if parsed is not None:
                return parsed

    for match in BARE_DATE.finditer(content):
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            logger.debug(f"[Extractor] Ignoring invalid date {match.group(1)!r}")
    return None


def daily_note_date(document: str) -> date | None:
    """Date encoded in a daily note's file name, if any."""
    stem = PurePosixPath(document.replace("\\", "/")).stem
    candidates: list[tuple[str, str]] = [
        (r"\d{4}-\d{2}-\d{2}", "%Y-%m-%d"),
        (r"\d{2}-\d{2}-\d{4}", "%m-%d-%Y"),
        (r"\d{8}", "%Y%m%d"),
    ]
    for pattern, date_format in candidates:
        if re.fullmatch(pattern, stem):
            return parse_date(stem, date_format)
    return None


def split_content(content: str) -> tuple[str, str, tuple[str, ...]]:
    """Split checkbox text into (title, description, tags)."""
    tags = extract_tags(content)
    lines = [" ".join(part.split()) for part in TAG.sub("", content).strip().split("\n")]
    title = lines[0] if lines else ""
    description = "\n".join(lines[1:]).strip()
    return title, description, tags


def _scan_subtasks(lines: list[str], index: int, indent: int) -> tuple[list[tuple[int, str, bool]], int]:
    """Collect the nested checklist block below a task line.

    Returns:
        Tuple of ((line index, title, completed) per subtask, last consumed line)
    """
    subtasks: list[tuple[int, str, bool]] = []
    end_line = index
    for j in range(index + 1, len(lines)):
        line = lines[j]
        match = TASK_LINE.match(line)
        if match and _indent_width(match.group(1)) > indent:
            subtasks.append((j, match.group(3).strip(), match.group(2) in "xX"))
            end_line = j
        elif line.strip() == "":
            continue
        else:
            break
    return subtasks, end_line


def parse_document(
    text: str,
    config: PlannerConfig | None = None,
    document: str = "",
    now: datetime | None = None,
) -> list[TaskRecord]:
    """Parse every top-level checklist task in a document.

    Lines nested under a task are its subtasks and are not emitted as separate
    records. Lines that are not checklist items are skipped.

    Args:
        text: Full document text
        config: Thresholds, time table and date settings
        document: Document identifier stored in each record's source location
        now: Creation timestamp for the records
    """
    config = config or DEFAULT_CONFIG
    created_at = now or datetime.now()
    lines = [line.rstrip("\r") for line in text.split("\n")]
    fallback_date = daily_note_date(document) if document else None

    records: list[TaskRecord] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        match = TASK_LINE.match(line)
        if not match:
            index += 1
            continue

        indent = _indent_width(match.group(1))
        content = match.group(3).strip()
        raw_subtasks, end_line = _scan_subtasks(lines, index, indent)

        task_id = _task_id(document, index)
        subtasks = tuple(
            SubtaskRecord(
                id=f"{task_id}_sub_{n}",
                title=title,
                completed=completed,
                task_id=task_id,
                complexity=score_complexity(title),
            )
            for n, (_, title, completed) in enumerate(raw_subtasks)
        )

        title, description, tags = split_content(content)
        priority, is_auto = resolve_priority(len(subtasks), extract_manual_priority(line), config)
        minutes = config.minutes_for(priority)
        done = match.group(2) in "xX"
        assigned = extract_due_date(content, config) or fallback_date

        records.append(
            TaskRecord(
                id=task_id,
                title=title,
                description=description,
                priority=priority,
                is_auto_priority=is_auto,
                allocated_time=minutes,
                remaining_time=0 if done else minutes,
                estimated_time=minutes,
                source=SourceLocation(
                    document=document,
                    line=index,
                    start=len(match.group(1)),
                    length=len(line),
                    end_line=end_line,
                ),
                created_at=created_at,
                subtasks=subtasks,
                status=TaskStatus.DONE if done else TaskStatus.TODO,
                assigned_date=assigned,
                original_assigned_date=assigned,
                tags=tags,
            )
        )
        index = end_line + 1

    logger.debug(f"[Extractor] Parsed {len(records)} tasks from {document or '<text>'}")
    return records


def _first_tag_value(record: TaskRecord, prefix: str) -> str | None:
    for tag in record.tags:
        if tag.startswith(prefix) and len(tag) > len(prefix):
            return tag[len(prefix) :]
    return None


def link_relationships(records: list[TaskRecord]) -> list[TaskRecord]:
    """Resolve ``#parent/<key>`` and ``#child/<key>`` tags across a batch.

    A record tagged ``#parent/<key>`` is the parent named ``<key>``; records
    tagged ``#child/<key>`` become its children. Keys without a parent in the
    batch form no link. Records are matched by position, so every input record
    is returned even when ids collide.
    """
    linked = list(records)
    parents: dict[str, int] = {}
    for index, record in enumerate(linked):
        key = _first_tag_value(record, PARENT_PREFIX)
        if key is not None:
            parents[key] = index

    for index, record in enumerate(records):
        key = _first_tag_value(record, CHILD_PREFIX)
        parent_index = parents.get(key) if key is not None else None
        if parent_index is None or parent_index == index:
            continue
        parent = linked[parent_index]
        linked[index] = replace(linked[index], parent_id=parent.id)
        if record.id not in parent.child_ids:
            linked[parent_index] = replace(parent, child_ids=(*parent.child_ids, record.id))

    return linked


def group_by_project(records: list[TaskRecord]) -> dict[str, list[TaskRecord]]:
    """Group records under each of their project tags, or ``uncategorized``."""
    groups: dict[str, list[TaskRecord]] = {}
    for record in records:
        projects = [tag for tag in record.tags if tag.startswith(PROJECT_PREFIXES)]
        for project in projects or [UNCATEGORIZED]:
            groups.setdefault(project, []).append(record)
    return groups


def validate_task_line(line: str) -> LineValidation:
    """Report formatting problems of a checklist line."""
    match = TASK_LINE.match(line)
    if not match:
        return LineValidation(
            is_valid=False,
            issues=["Line is not a valid task format"],
            suggestions=["Use format: - [ ] Task description"],
        )

    content = match.group(3).strip()
    issues: list[str] = []
    suggestions: list[str] = []

    if not content:
        issues.append("Task has no description")
        suggestions.append("Add a meaningful task description")

    if len(content) > MAX_LINE_CONTENT:
        issues.append("Task description is very long")
        suggestions.append("Consider breaking into subtasks or shortening the description")

    if "TODO:" in content or "FIXME:" in content:
        suggestions.append("Remove TODO:/FIXME: prefixes, the checkbox already marks a task")

    return LineValidation(is_valid=not issues, issues=issues, suggestions=suggestions)
