"""Test fixtures for todo-planner."""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from todo_planner.config import PlannerConfig
from todo_planner.models import Priority, SourceLocation, SubtaskRecord, TaskRecord

NOW = datetime(2026, 3, 2, 9, 30)


@pytest.fixture
def config() -> PlannerConfig:
    """Default configuration without environment overrides."""
    return PlannerConfig.model_construct()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_task() -> Callable[..., TaskRecord]:
    """Build a TaskRecord with subtasks of the given complexities."""

    def factory(
        complexities: list[int] | None = None,
        priority: Priority = Priority.D,
        is_auto_priority: bool = True,
        title: str = "Task",
        description: str = "",
        allocated_time: int | None = None,
        estimated_time: int | None = None,
        subtask_titles: list[str] | None = None,
    ) -> TaskRecord:
        minutes = {Priority.A: 30, Priority.B: 30, Priority.C: 10, Priority.D: 60}[priority]
        scores = complexities or []
        titles = subtask_titles or [f"Subtask {n}" for n in range(len(scores))]
        if not scores and subtask_titles:
            scores = [1] * len(subtask_titles)
        subtasks = tuple(
            SubtaskRecord(
                id=f"task_sub_{n}",
                title=sub_title,
                completed=False,
                task_id="task",
                complexity=score,
            )
            for n, (sub_title, score) in enumerate(zip(titles, scores))
        )
        allocated = minutes if allocated_time is None else allocated_time
        return TaskRecord(
            id="task",
            title=title,
            description=description,
            priority=priority,
            is_auto_priority=is_auto_priority,
            allocated_time=allocated,
            remaining_time=allocated,
            estimated_time=allocated if estimated_time is None else estimated_time,
            source=SourceLocation(document="notes.md", line=0, start=0, length=0, end_line=0),
            created_at=NOW,
            subtasks=subtasks,
        )

    return factory


@pytest.fixture
def tmp_vault(tmp_path: Path) -> Path:
    """Create temporary Obsidian vault structure."""
    vault = tmp_path / "vault"
    notes_dir = vault / "Notes"
    notes_dir.mkdir(parents=True)
    return vault


@pytest.fixture
def sample_note_file(tmp_vault: Path) -> Path:
    """Create a sample note with checklist tasks."""
    note_file = tmp_vault / "Notes" / "Trip.md"

    content = """---
status: planning
---
# Trip

Some notes about the trip.

- [ ] Plan vacation #project/travel
  - [ ] Book flights
  - [ ] Reserve hotel
  - [ ] Plan itinerary
  - [ ] Research visa requirements

- [x] Renew passport #2026-01-15
- [ ] Pack bags #priority/C
"""

    note_file.write_text(content)
    return note_file
