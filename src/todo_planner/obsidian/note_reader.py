"""Note reader for Obsidian vaults."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol

from todo_planner.config import PlannerConfig
from todo_planner.markdown.extractor import link_relationships, parse_document
from todo_planner.markdown.serializer import replace_task_block
from todo_planner.models import TaskRecord

logger = logging.getLogger(__name__)


class NoteReader(Protocol):
    """Protocol for reading tasks from notes."""

    def list_tasks(self, link: bool = True) -> list[TaskRecord]:
        """Parse tasks from all notes."""
        ...

    def read_note(self, note_id: str, link: bool = True) -> list[TaskRecord]:
        """Parse tasks from a specific note."""
        ...

    def write_task(self, task: TaskRecord) -> None:
        """Write a task's edits back into its note."""
        ...


class ObsidianNoteReader:
    """Reads checklist tasks from Obsidian markdown notes."""

    def __init__(self, vault_path: str, notes_folder: str, config: PlannerConfig) -> None:
        """Initialize reader with vault and notes folder paths."""
        self._vault_path = Path(vault_path)
        self._notes_dir = self._vault_path / notes_folder
        self._config = config

    def list_tasks(self, link: bool = True) -> list[TaskRecord]:
        """Parse tasks from every note below the notes folder.

        Parent/child tags are resolved across the whole batch unless ``link`` is
        False, for callers that link a larger batch themselves. Notes that
        cannot be read are logged and skipped.
        """
        tasks: list[TaskRecord] = []
        now = datetime.now()
        for file_path in sorted(self._notes_dir.rglob("*.md")):
            try:
                tasks.extend(self._parse_note(file_path, now))
            except OSError as e:
                logger.warning(f"[NoteReader] Failed to read {file_path.name}: {e}")
                continue
        logger.info(f"[NoteReader] Parsed {len(tasks)} tasks from {self._notes_dir}")
        return link_relationships(tasks) if link else tasks

    def read_note(self, note_id: str, link: bool = True) -> list[TaskRecord]:
        """Parse tasks from a note by ID (path below the notes folder, without .md)."""
        file_path = self._note_path(note_id)
        if not file_path.exists():
            raise FileNotFoundError(f"Note not found: {note_id}")
        tasks = self._parse_note(file_path, datetime.now())
        return link_relationships(tasks) if link else tasks

    def write_task(self, task: TaskRecord) -> None:
        """Replace the task's lines in its source note with its serialized form.

        Raises:
            FileNotFoundError: If the source note no longer exists
            ValueError: If the note changed and the task line moved
        """
        file_path = self._vault_path / task.source.document
        if not file_path.exists():
            raise FileNotFoundError(f"Note not found: {task.source.document}")

        content, encoding = self._read_text(file_path)
        new_content = replace_task_block(content, task, self._config)

        # Write back with same encoding
        file_path.write_text(new_content, encoding=encoding)
        logger.info(f"[NoteReader] Wrote task {task.id} to {task.source.document}")

    def _note_path(self, note_id: str) -> Path:
        return self._notes_dir / f"{note_id}.md"

    def _parse_note(self, file_path: Path, now: datetime) -> list[TaskRecord]:
        """Parse a markdown file into task records."""
        content, _ = self._read_text(file_path)
        document = file_path.relative_to(self._vault_path).as_posix()
        return parse_document(content, self._config, document=document, now=now)

    def _read_text(self, file_path: Path) -> tuple[str, str]:
        # Try UTF-8 first, fallback to latin-1 for non-UTF-8 files
        try:
            return file_path.read_text(encoding="utf-8"), "utf-8"
        except UnicodeDecodeError:
            return file_path.read_text(encoding="latin-1"), "latin-1"
