"""todo-planner command line."""

import argparse
import json
import logging
import sys
from pathlib import Path

from todo_planner.config import PlannerConfig, load_config
from todo_planner.markdown.extractor import group_by_project, link_relationships
from todo_planner.models import TaskRecord
from todo_planner.obsidian.note_reader import ObsidianNoteReader
from todo_planner.report import TaskReport, build_report

logger = logging.getLogger(__name__)


def _collect_tasks(paths: list[str], config: PlannerConfig) -> list[TaskRecord]:
    """Parse tasks from files and folders, or from the configured vault.

    Parent/child tags are resolved once over the records of every path.
    """
    if not paths:
        return ObsidianNoteReader(config.vault_path, config.notes_folder, config).list_tasks()

    tasks: list[TaskRecord] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            tasks.extend(ObsidianNoteReader(str(path), "", config).list_tasks(link=False))
        elif path.suffix == ".md":
            reader = ObsidianNoteReader(str(path.parent), "", config)
            tasks.extend(reader.read_note(path.stem, link=False))
        else:
            raise FileNotFoundError(f"Not a markdown note or folder: {raw}")
    return link_relationships(tasks)


def _print_text(reports_by_project: dict[str, list[TaskReport]]) -> None:
    for project, reports in reports_by_project.items():
        print(f"== {project} ({len(reports)})")
        for report in reports:
            mode = "auto" if report.is_auto_priority else "manual"
            status = "x" if report.completed else " "
            print(
                f"[{status}] {report.priority.value} ({mode}) {report.title or '<untitled>'}"
                f"  {report.document}:{report.line}"
            )
            print(
                f"    {report.subtask_count} subtasks, {report.allocated_time} min allocated, "
                f"{report.estimated_time} min estimated"
            )
            print(f"    {report.summary}")
            for issue in report.issues:
                print(f"    - {issue.severity.value}: {issue.message}. {issue.suggestion}")
            for suggestion in report.breakdown:
                print(
                    f"    > {suggestion.title} [{suggestion.priority.value}, "
                    f"{suggestion.estimated_time} min]: {suggestion.reasoning}"
                )
            for change in report.fixes:
                print(f"    * {change}")


def main(argv: list[str] | None = None) -> int:
    """Run the report."""
    parser = argparse.ArgumentParser(
        prog="todo-planner",
        description="Classify checklist tasks in markdown notes and flag tasks that need a breakdown.",
    )
    parser.add_argument("paths", nargs="*", help="Notes or folders (default: configured vault)")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--json", action="store_true", help="Print reports as JSON")
    parser.add_argument("--all", action="store_true", help="Include completed tasks")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s [%(name)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = load_config(args.config)
        tasks = _collect_tasks(args.paths, config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"[Main] {e}")
        return 1

    if not args.all:
        tasks = [task for task in tasks if not task.completed]

    reports_by_project = {
        project: [build_report(task, config) for task in grouped]
        for project, grouped in group_by_project(tasks).items()
    }

    if args.json:
        payload = {
            project: [report.model_dump(mode="json") for report in reports]
            for project, reports in reports_by_project.items()
        }
        print(json.dumps(payload, indent=2))
    else:
        _print_text(reports_by_project)

    return 0


if __name__ == "__main__":
    sys.exit(main())
