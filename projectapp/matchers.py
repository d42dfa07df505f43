"""
PROJECTAPP - Task Matchers
==========================
Predicates used by Project.find_tasks to filter tasks.

A matcher holds its own comparison value and answers match(task).
New filters subclass TaskMatcher; Project and ProjectsManager stay unchanged.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .schema import Task, TaskPrio, TaskState


class TaskMatcher(ABC):
    """Predicate over a single task"""

    @abstractmethod
    def match(self, task: Task) -> bool:
        ...

    def __call__(self, task: Task) -> bool:
        return self.match(task)


class NotDoneMatcher(TaskMatcher):
    """Tasks that are not finished yet"""

    def match(self, task: Task) -> bool:
        return task.state != TaskState.DONE

    def __repr__(self) -> str:
        return "NotDoneMatcher()"


class PrioMatcher(TaskMatcher):
    """Tasks with exactly the given priority"""

    def __init__(self, prio: TaskPrio):
        self.prio = TaskPrio(prio)

    def match(self, task: Task) -> bool:
        return task.prio == self.prio

    def __repr__(self) -> str:
        return f"PrioMatcher({self.prio.value!r})"


class TakenByMatcher(TaskMatcher):
    """Tasks taken by the given person. Unassigned tasks never match."""

    def __init__(self, taken_by: Optional[str]):
        self.taken_by = taken_by

    def match(self, task: Task) -> bool:
        if not task.is_taken:
            return False
        return task.taken_by == self.taken_by

    def __repr__(self) -> str:
        return f"TakenByMatcher({self.taken_by!r})"


class StateMatcher(TaskMatcher):
    """Tasks in one specific state"""

    def __init__(self, state: TaskState):
        self.state = TaskState(state)

    def match(self, task: Task) -> bool:
        return task.state == self.state

    def __repr__(self) -> str:
        return f"StateMatcher({self.state.value!r})"


class DescriptionMatcher(TaskMatcher):
    """Tasks whose description contains the given text"""

    def __init__(self, text: str, case_sensitive: bool = False):
        self.text = text
        self.case_sensitive = case_sensitive

    def match(self, task: Task) -> bool:
        if self.case_sensitive:
            return self.text in task.description
        return self.text.casefold() in task.description.casefold()

    def __repr__(self) -> str:
        return f"DescriptionMatcher({self.text!r}, case_sensitive={self.case_sensitive})"


class AllMatcher(TaskMatcher):
    """Matches when every wrapped matcher does (an empty AllMatcher matches everything)"""

    def __init__(self, *matchers: TaskMatcher):
        self.matchers = list(matchers)

    def match(self, task: Task) -> bool:
        return all(m.match(task) for m in self.matchers)

    def __repr__(self) -> str:
        return f"AllMatcher({', '.join(map(repr, self.matchers))})"


class AnyMatcher(TaskMatcher):
    """Matches when at least one wrapped matcher does"""

    def __init__(self, *matchers: TaskMatcher):
        self.matchers = list(matchers)

    def match(self, task: Task) -> bool:
        return any(m.match(task) for m in self.matchers)

    def __repr__(self) -> str:
        return f"AnyMatcher({', '.join(map(repr, self.matchers))})"
