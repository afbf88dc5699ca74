"""Domain and report models for todo-planner."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Priority(str, Enum):
    """Priority tier governing a task's nominal time budget."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def rank(self) -> int:
        """Ordering key where D < C < B < A."""
        return "DCBA".index(self.value)


class TaskStatus(str, Enum):
    """Checkbox state of a task line."""

    TODO = "todo"
    DONE = "done"


class IssueKind(str, Enum):
    TOO_COMPLEX = "too_complex"
    INCONSISTENT_COMPLEXITY = "inconsistent_complexity"
    TIME_MISMATCH = "time_mismatch"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecommendedAction(str, Enum):
    REQUIRED = "required"
    SUGGESTED = "suggested"
    NONE = "none"


class Urgency(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class SourceLocation:
    """Where a task came from, used to write edits back."""

    document: str  # Document identifier, usually a vault-relative path
    line: int  # 0-based index of the task line
    start: int  # Column of the bullet (indentation width)
    length: int  # Length of the task line
    end_line: int  # Last line consumed by the task (last subtask line)


@dataclass(frozen=True)
class SubtaskRecord:
    """Checklist line nested under a task."""

    id: str
    title: str
    completed: bool
    task_id: str
    complexity: int  # 1-5


@dataclass(frozen=True)
class RescheduleEvent:
    """A change of a task's assigned date."""

    timestamp: datetime
    reason: str
    from_date: date | None  # None when the task had no date before
    to_date: date


@dataclass(frozen=True)
class TaskRecord:
    """Task parsed from a checklist line.

    Records are immutable; use the functions in ``todo_planner.lifecycle`` to
    derive updated copies.
    """

    id: str
    title: str
    description: str
    priority: Priority
    is_auto_priority: bool
    allocated_time: int  # Minutes budgeted for the tier
    remaining_time: int  # Minutes left, 0 once completed
    estimated_time: int  # Stored estimate, corrected by auto-fix
    source: SourceLocation
    created_at: datetime
    subtasks: tuple[SubtaskRecord, ...] = ()
    status: TaskStatus = TaskStatus.TODO
    completed_at: datetime | None = None
    assigned_date: date | None = None
    original_assigned_date: date | None = None
    reschedule_history: tuple[RescheduleEvent, ...] = ()
    needs_reschedule_warning: bool = False
    parent_id: str | None = None
    child_ids: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def subtask_count(self) -> int:
        return len(self.subtasks)

    @property
    def reschedule_count(self) -> int:
        return len(self.reschedule_history)

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.DONE


class SuitabilityIssue(BaseModel):
    """Structural mismatch between a task and its tier."""

    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    severity: Severity
    message: str
    suggestion: str


class SuitabilityResult(BaseModel):
    """Outcome of a suitability analysis."""

    model_config = ConfigDict(frozen=True)

    issues: list[SuitabilityIssue] = Field(default_factory=list)
    recommended_action: RecommendedAction = RecommendedAction.NONE
    estimated_time: int  # Complexity-based estimate in minutes

    @property
    def is_problematic(self) -> bool:
        return len(self.issues) > 0


class BreakdownSuggestion(BaseModel):
    """Proposed smaller task built from a subset of subtasks."""

    model_config = ConfigDict(frozen=True)

    title: str
    priority: Priority
    subtasks: list[str]
    estimated_time: int
    reasoning: str


@dataclass(frozen=True)
class AutoFixResult:
    """Outcome of an auto-fix pass; ``task`` is the corrected record."""

    fixed: bool
    changes: list[str]
    task: TaskRecord
