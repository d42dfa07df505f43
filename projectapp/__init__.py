"""
PROJECTAPP - Project & Task Tracker
===================================

Projects own tasks; a manager owns projects. State is saved to one JSON file.

Usage:
    from projectapp import ProjectsManager, ProjectsStore, TaskPrio, NotDoneMatcher

    store = ProjectsStore("projects.json")
    manager = store.load_into(ProjectsManager())

    project = manager.add_project("Website", "Company site relaunch")
    task = project.add_task("Write copy", TaskPrio.HIGH)
    task.assign("alice")

    open_tasks = project.find_tasks(NotDoneMatcher())
    store.save_from(manager)
"""

from .exceptions import (
    ProjectAppError,
    DuplicateTitleError,
    AlreadyAssignedError,
    StorageError,
    IOFailure,
    FormatError
)

from .schema import (
    Task,
    TaskPrio,
    TaskState,
    Project,
    ProjectState,
    ProjectCollection
)

from .matchers import (
    TaskMatcher,
    NotDoneMatcher,
    PrioMatcher,
    TakenByMatcher,
    StateMatcher,
    DescriptionMatcher,
    AllMatcher,
    AnyMatcher
)

from .manager import ProjectsManager
from .storage import ProjectsStore, save_projects, load_projects

__version__ = "1.0.0"
__all__ = [
    "ProjectsManager",
    "ProjectsStore",
    "save_projects",
    "load_projects",
    "Project",
    "ProjectState",
    "ProjectCollection",
    "Task",
    "TaskPrio",
    "TaskState",
    "TaskMatcher",
    "NotDoneMatcher",
    "PrioMatcher",
    "TakenByMatcher",
    "StateMatcher",
    "DescriptionMatcher",
    "AllMatcher",
    "AnyMatcher",
    "ProjectAppError",
    "DuplicateTitleError",
    "AlreadyAssignedError",
    "StorageError",
    "IOFailure",
    "FormatError"
]
