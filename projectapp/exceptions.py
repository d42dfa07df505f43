"""
PROJECTAPP - Error Types
========================
Every error the domain model and the storage layer raise.
Lookups never raise: a missing project or task is returned as None.
"""

from pathlib import Path
from typing import Optional, Union


class ProjectAppError(Exception):
    """Base class for all projectapp errors"""


class DuplicateTitleError(ProjectAppError):
    """A project with the same title already exists"""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Project title is not unique: {title!r}")


class AlreadyAssignedError(ProjectAppError):
    """A task can only be taken once"""

    def __init__(self, task_id: int, taken_by: str):
        self.task_id = task_id
        self.taken_by = taken_by
        super().__init__(f"Task {task_id} is already taken by {taken_by!r}")


class StorageError(ProjectAppError):
    """Base class for persistence failures"""

    def __init__(self, path: Union[str, Path], message: str):
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class IOFailure(StorageError):
    """The data file could not be read or written"""


class FormatError(StorageError):
    """The data file exists but does not hold a valid project collection"""

    def __init__(self, path: Union[str, Path], message: str, detail: Optional[str] = None):
        self.detail = detail
        if detail:
            message = f"{message} ({detail})"
        super().__init__(path, message)
