"""
PROJECTAPP - Project & Task Schema Definition
=============================================
Domain model for projects and the tasks they own.
Project state is derived from task states on every call, never stored.
"""

from enum import Enum
from typing import Optional, List, Dict
from datetime import datetime, timedelta
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import AlreadyAssignedError


STORAGE_VERSION = 1


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


class TaskState(str, Enum):
    """Task lifecycle states"""
    TO_DO = "to_do"               # Not started
    IN_PROGRESS = "in_progress"   # Someone is working on it
    DONE = "done"                 # Finished


class TaskPrio(str, Enum):
    """Task priority levels, most urgent first"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return list(TaskPrio).index(self)


class ProjectState(str, Enum):
    """Derived project states"""
    EMPTY = "empty"           # No tasks
    ONGOING = "ongoing"       # At least one task not done
    COMPLETED = "completed"   # Every task done


class Task(BaseModel):
    """Individual task, owned by exactly one project"""
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(ge=0, frozen=True)
    description: str
    prio: TaskPrio = TaskPrio.MEDIUM
    state: TaskState = TaskState.TO_DO
    taken_by: Optional[str] = None
    last_updated: datetime = Field(default_factory=datetime.now)

    @property
    def is_taken(self) -> bool:
        return bool(self.taken_by)

    def __setattr__(self, name, value):
        # taken_by only goes from unset to set, however it is written
        if name == "taken_by" and self.is_taken and value != self.taken_by:
            raise AlreadyAssignedError(self.id, self.taken_by)
        super().__setattr__(name, value)

    def touch(self) -> None:
        """Refresh last_updated, keeping it strictly increasing"""
        now = datetime.now()
        if now <= self.last_updated:
            now = self.last_updated + timedelta(microseconds=1)
        self.last_updated = now

    def set_description(self, description: str) -> None:
        self.description = description
        self.touch()

    def set_prio(self, prio: TaskPrio) -> None:
        self.prio = prio
        self.touch()

    def set_state(self, state: TaskState) -> None:
        self.state = state
        self.touch()

    def assign(self, name: str) -> None:
        """
        Give the task to someone. A task can only be taken once.

        Raises:
            AlreadyAssignedError: if the task already has an assignee
        """
        if self.is_taken:
            raise AlreadyAssignedError(self.id, self.taken_by)
        self.taken_by = name
        self.touch()

    def compare(self, other: "Task") -> int:
        """Order by priority, then alphabetically by description"""
        result = _cmp(self.prio.rank, other.prio.rank)
        if result == 0:
            result = _cmp(self.description, other.description)
        return result

    def __lt__(self, other: "Task") -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.compare(other) < 0


class Project(BaseModel):
    """A titled collection of tasks"""
    id: int = Field(ge=0, frozen=True)
    title: str = Field(frozen=True)
    description: str = Field(default="", frozen=True)
    created: datetime = Field(default_factory=datetime.now, frozen=True)

    # Never decremented, so removed task ids are not handed out again
    next_task_id: int = Field(default=0, ge=0)

    # Internal storage; read through get_tasks() and change through add_task/remove_task
    tasks: List[Task] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_task_ids(self) -> "Project":
        ids = [task.id for task in self.tasks]
        if len(ids) != len(set(ids)):
            raise ValueError(f"project {self.id} has duplicate task ids")
        if ids and max(ids) >= self.next_task_id:
            raise ValueError(
                f"project {self.id} next_task_id {self.next_task_id} "
                f"is not above task id {max(ids)}"
            )
        return self

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def add_task(self, description: str, prio: TaskPrio = TaskPrio.MEDIUM) -> Task:
        task = Task(id=self.next_task_id, description=description, prio=prio)
        self.next_task_id += 1
        self.tasks.append(task)
        return task

    def remove_task(self, task: Task) -> bool:
        for i, candidate in enumerate(self.tasks):
            if candidate is task:
                del self.tasks[i]
                return True
        return False

    def get_task_by_id(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def get_tasks(self) -> List[Task]:
        return list(self.tasks)

    def find_tasks(self, matcher) -> List[Task]:
        """Tasks accepted by a TaskMatcher, in insertion order"""
        return [task for task in self.tasks if matcher.match(task)]

    def sorted_tasks(self) -> List[Task]:
        return sorted(self.tasks)

    # ========================================
    # DERIVED STATE
    # ========================================

    def get_last_updated(self) -> datetime:
        if not self.tasks:
            return self.created
        return max(task.last_updated for task in self.tasks)

    def get_project_state(self) -> ProjectState:
        if not self.tasks:
            return ProjectState.EMPTY
        if all(task.state == TaskState.DONE for task in self.tasks):
            return ProjectState.COMPLETED
        return ProjectState.ONGOING

    @property
    def progress_pct(self) -> int:
        if not self.tasks:
            return 0
        done = sum(1 for t in self.tasks if t.state == TaskState.DONE)
        return int((done / len(self.tasks)) * 100)

    @property
    def state_summary(self) -> Dict[str, int]:
        summary = {state.value: 0 for state in TaskState}
        for task in self.tasks:
            summary[task.state.value] += 1
        return summary

    def compare(self, other: "Project") -> int:
        return _cmp(self.title, other.title)

    def __lt__(self, other: "Project") -> bool:
        if not isinstance(other, Project):
            return NotImplemented
        return self.compare(other) < 0

    def __str__(self) -> str:
        return (
            f"id={self.id}, title={self.title!r}, "
            f"description={self.description!r}, created={self.created:%Y-%m-%d %H:%M}"
        )


class ProjectCollection(BaseModel):
    """On-disk document: every project plus the manager's id counter"""
    version: int = STORAGE_VERSION
    saved_at: datetime = Field(default_factory=datetime.now)
    next_project_id: int = Field(default=0, ge=0)
    projects: List[Project] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_projects(self) -> "ProjectCollection":
        if self.version != STORAGE_VERSION:
            raise ValueError(f"unsupported version {self.version}")
        ids = [p.id for p in self.projects]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate project ids")
        titles = [p.title for p in self.projects]
        if len(titles) != len(set(titles)):
            raise ValueError("duplicate project titles")
        return self
