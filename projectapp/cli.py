#!/usr/bin/env python3
"""
PROJECTAPP - CLI Interface
==========================
Command-line tool for managing projects and their tasks.

Usage:
    projectapp add "Website" -d "Company site relaunch"
    projectapp list
    projectapp find "Website"
    projectapp show 0
    projectapp task add 0 "Write copy" -p high
    projectapp task list 0 --not-done --sort
    projectapp task assign 0 0 alice
    projectapp task state 0 0 done
    projectapp remove 0
    projectapp shell
"""

import argparse
import json
import logging
import shlex
import sys
from typing import Optional, List, Tuple

from pydantic import ValidationError

from .config import get_settings
from .exceptions import AlreadyAssignedError, DuplicateTitleError, StorageError
from .logging_setup import setup_logging
from .manager import ProjectsManager
from .matchers import AllMatcher, DescriptionMatcher, NotDoneMatcher, PrioMatcher, TakenByMatcher
from .report import format_project_list, format_task, format_task_list, get_status_report, project_summary
from .schema import Project, Task, TaskPrio, TaskState
from .storage import ProjectsStore

logger = logging.getLogger("projectapp.cli")

PRIO_CHOICES = [p.value for p in TaskPrio]
STATE_CHOICES = [s.value for s in TaskState]

# (exit code, whether the collection changed and must be saved)
Result = Tuple[int, bool]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projectapp",
        description="ProjectApp - projects and tasks from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  projectapp add Website -d "Relaunch"     Create a project
  projectapp list                          List all projects
  projectapp show 0                        Show project 0 and its tasks
  projectapp task add 0 "Write copy" -p high
  projectapp task list 0 --not-done        Unfinished tasks of project 0
  projectapp task assign 0 0 alice         Give task 0 to alice
  projectapp shell                         Interactive mode
        """
    )
    parser.add_argument("--file", help="Project data file (env PROJECTAPP_DATA_FILE)")
    parser.add_argument("--log-level", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Console log level (env PROJECTAPP_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # LIST command
    list_parser = subparsers.add_parser("list", help="List all projects")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # FIND command
    find_parser = subparsers.add_parser("find", help="Find projects by exact title")
    find_parser.add_argument("title", help="Project title")

    # ADD command
    add_parser = subparsers.add_parser("add", help="Create a project")
    add_parser.add_argument("title", help="Unique project title")
    add_parser.add_argument("-d", "--description", default="", help="Project description")

    # REMOVE command
    remove_parser = subparsers.add_parser("remove", help="Remove a project")
    remove_parser.add_argument("project_id", type=int, help="Project ID")

    # SHOW command
    show_parser = subparsers.add_parser("show", help="Show one project with its tasks")
    show_parser.add_argument("project_id", type=int, help="Project ID")
    show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # TASK commands
    task_parser = subparsers.add_parser("task", help="Manage the tasks of a project")
    task_sub = task_parser.add_subparsers(dest="task_command", help="Task commands")

    t_add = task_sub.add_parser("add", help="Add a task")
    t_add.add_argument("project_id", type=int, help="Project ID")
    t_add.add_argument("description", help="Task description")
    t_add.add_argument("-p", "--prio", type=str.lower, choices=PRIO_CHOICES,
                       default=TaskPrio.MEDIUM.value, help="Priority")

    t_list = task_sub.add_parser("list", help="List and filter tasks")
    t_list.add_argument("project_id", type=int, help="Project ID")
    t_list.add_argument("--not-done", action="store_true", help="Only unfinished tasks")
    t_list.add_argument("--prio", type=str.lower, choices=PRIO_CHOICES, help="Only this priority")
    t_list.add_argument("--taken-by", help="Only tasks taken by this person")
    t_list.add_argument("--search", help="Only tasks whose description contains this text")
    t_list.add_argument("--sort", action="store_true", help="Sort by priority, then description")

    t_assign = task_sub.add_parser("assign", help="Take a task (only once)")
    t_assign.add_argument("project_id", type=int, help="Project ID")
    t_assign.add_argument("task_id", type=int, help="Task ID")
    t_assign.add_argument("name", help="Who takes the task")

    t_state = task_sub.add_parser("state", help="Change task state")
    t_state.add_argument("project_id", type=int, help="Project ID")
    t_state.add_argument("task_id", type=int, help="Task ID")
    t_state.add_argument("state", type=str.lower, choices=STATE_CHOICES, help="New state")

    t_prio = task_sub.add_parser("prio", help="Change task priority")
    t_prio.add_argument("project_id", type=int, help="Project ID")
    t_prio.add_argument("task_id", type=int, help="Task ID")
    t_prio.add_argument("prio", type=str.lower, choices=PRIO_CHOICES, help="New priority")

    t_describe = task_sub.add_parser("describe", help="Change task description")
    t_describe.add_argument("project_id", type=int, help="Project ID")
    t_describe.add_argument("task_id", type=int, help="Task ID")
    t_describe.add_argument("description", help="New description")

    t_remove = task_sub.add_parser("remove", help="Remove a task")
    t_remove.add_argument("project_id", type=int, help="Project ID")
    t_remove.add_argument("task_id", type=int, help="Task ID")

    # SHELL command
    subparsers.add_parser("shell", help="Interactive mode (saves on exit)")

    return parser


# ========================================
# HELPERS
# ========================================

def _get_project(manager: ProjectsManager, project_id: int) -> Optional[Project]:
    project = manager.get_project_by_id(project_id)
    if project is None:
        print(f"❌ Project not found: {project_id}")
    return project


def _get_task(project: Project, task_id: int) -> Optional[Task]:
    task = project.get_task_by_id(task_id)
    if task is None:
        print(f"❌ Task not found: {task_id} (project {project.id})")
    return task


# ========================================
# PROJECT COMMANDS
# ========================================

def cmd_list(args, manager: ProjectsManager) -> Result:
    projects = manager.list_projects()
    if args.json:
        print(json.dumps([project_summary(p) for p in projects], indent=2))
    else:
        print(format_project_list(projects))
    return 0, False


def cmd_find(args, manager: ProjectsManager) -> Result:
    found = manager.find_projects(args.title)
    if not found:
        print("No matches.")
        return 0, False
    for project in found:
        print(project)
    return 0, False


def cmd_add(args, manager: ProjectsManager) -> Result:
    try:
        project = manager.add_project(args.title, args.description)
    except DuplicateTitleError as e:
        logger.warning(str(e))
        print(f"❌ A project with that title already exists: {e.title}")
        return 1, False
    print(f"✅ Project created: [{project.id}] {project.title}")
    return 0, True


def cmd_remove(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    if project is None:
        return 1, False
    manager.remove_project(project)
    print(f"🗑️ Project removed: {project.title}")
    return 0, True


def cmd_show(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    if project is None:
        return 1, False
    if args.json:
        data = project.model_dump(mode="json")
        data["state"] = project.get_project_state().value
        print(json.dumps(data, indent=2, default=str))
    else:
        print(get_status_report(project))
    return 0, False


# ========================================
# TASK COMMANDS
# ========================================

def task_add(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    if project is None:
        return 1, False
    task = project.add_task(args.description, TaskPrio(args.prio))
    logger.info(f"Added task {task.id} to project {project.id}")
    print(f"✅ Task added:\n{format_task(task)}")
    return 0, True


def task_list(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    if project is None:
        return 1, False

    matchers = []
    if args.not_done:
        matchers.append(NotDoneMatcher())
    if args.prio:
        matchers.append(PrioMatcher(TaskPrio(args.prio)))
    if args.taken_by:
        matchers.append(TakenByMatcher(args.taken_by))
    if args.search:
        matchers.append(DescriptionMatcher(args.search))

    tasks = project.find_tasks(AllMatcher(*matchers))
    if args.sort:
        tasks = sorted(tasks)
    print(format_task_list(tasks))
    return 0, False


def task_assign(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    task = project and _get_task(project, args.task_id)
    if task is None:
        return 1, False
    try:
        task.assign(args.name)
    except AlreadyAssignedError as e:
        logger.warning(str(e))
        print(f"❌ Task {task.id} is already taken by {e.taken_by}")
        return 1, False
    logger.info(f"Task {task.id} in project {project.id} taken by {task.taken_by}")
    print(f"👤 Task {task.id} taken by {task.taken_by}")
    return 0, True


def task_state(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    task = project and _get_task(project, args.task_id)
    if task is None:
        return 1, False
    task.set_state(TaskState(args.state))
    logger.info(f"Task {task.id} in project {project.id} is now {task.state.value}")
    print(f"🔄 Task {task.id}: {task.state.value}")
    return 0, True


def task_prio(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    task = project and _get_task(project, args.task_id)
    if task is None:
        return 1, False
    task.set_prio(TaskPrio(args.prio))
    print(f"🔄 Task {task.id}: priority {task.prio.value}")
    return 0, True


def task_describe(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    task = project and _get_task(project, args.task_id)
    if task is None:
        return 1, False
    task.set_description(args.description)
    print(f"✏️ Task {task.id}: {task.description}")
    return 0, True


def task_remove(args, manager: ProjectsManager) -> Result:
    project = _get_project(manager, args.project_id)
    task = project and _get_task(project, args.task_id)
    if task is None:
        return 1, False
    project.remove_task(task)
    logger.info(f"Removed task {task.id} from project {project.id}")
    print(f"🗑️ Task removed: {task.description}")
    return 0, True


COMMANDS = {
    "list": cmd_list,
    "find": cmd_find,
    "add": cmd_add,
    "remove": cmd_remove,
    "show": cmd_show,
}

TASK_COMMANDS = {
    "add": task_add,
    "list": task_list,
    "assign": task_assign,
    "state": task_state,
    "prio": task_prio,
    "describe": task_describe,
    "remove": task_remove,
}


def dispatch(parser: argparse.ArgumentParser, args, manager: ProjectsManager) -> Result:
    if args.command == "task":
        handler = TASK_COMMANDS.get(args.task_command)
        if handler is None:
            print("Missing task command. Try: task --help")
            return 1, False
        return handler(args, manager)

    handler = COMMANDS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}")
        return 1, False
    return handler(args, manager)


# ========================================
# INTERACTIVE SHELL
# ========================================

def run_shell(parser: argparse.ArgumentParser, manager: ProjectsManager) -> bool:
    """
    Request/response loop over the same commands as the CLI.

    Returns whether anything changed, so the caller can save once on exit.
    """
    changed = False
    print("ProjectApp shell. Type 'help' for commands, 'exit' to quit.")

    while True:
        try:
            line = input("projectapp> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        line = line.strip()
        if not line:
            continue
        if line in ("exit", "quit", "x", "X"):
            break
        if line == "help":
            parser.print_help()
            continue

        try:
            argv = shlex.split(line)
        except ValueError as e:
            print(f"❌ {e}")
            continue

        try:
            args = parser.parse_args(argv)
        except SystemExit:
            # argparse already printed usage or help
            continue

        if args.command is None:
            continue
        if args.command == "shell":
            print("Already in the shell.")
            continue
        if args.file or args.log_level:
            print("❌ --file and --log-level only apply when starting projectapp")
            continue

        _, mutated = dispatch(parser, args, manager)
        changed = changed or mutated

    return changed


# ========================================
# ENTRY POINT
# ========================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"❌ Invalid settings: {e.errors()[0].get('msg') if e.errors() else e}")
        return 1
    setup_logging(args.log_level or settings.log_level, settings.log_file)

    data_file = args.file or settings.data_file
    store = ProjectsStore(data_file)
    manager = ProjectsManager()

    try:
        store.load_into(manager)
    except StorageError as e:
        logger.error(str(e))
        print(f"❌ {e}")
        return 1

    if args.command == "shell":
        code, changed = 0, run_shell(parser, manager)
    else:
        code, changed = dispatch(parser, args, manager)

    if changed:
        try:
            store.save_from(manager)
        except StorageError as e:
            logger.error(str(e))
            print(f"❌ {e}")
            return 1

    return code


if __name__ == "__main__":
    sys.exit(main())
