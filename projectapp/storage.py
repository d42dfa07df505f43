"""
PROJECTAPP - File Storage
=========================
Saves the project collection as one JSON document and loads it back.

- A missing or empty file loads as an empty collection (first run)
- Writes go to a temp file that replaces the target in one step,
  so a failed save never leaves a half-written file behind
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, List, Iterable, Union

from pydantic import ValidationError

from .exceptions import IOFailure, FormatError
from .manager import ProjectsManager
from .schema import Project, ProjectCollection

logger = logging.getLogger("projectapp.storage")

PathLike = Union[str, Path]


def save_projects(
    destination: PathLike,
    projects: Optional[Iterable[Project]],
    next_project_id: Optional[int] = None
) -> None:
    """
    Write every project (with its tasks) to destination.

    None or an empty sequence writes an empty collection.

    Raises:
        FormatError: if the projects do not form a valid collection
            (duplicate titles or ids); nothing is written
        IOFailure: if the file or its directory cannot be written
    """
    path = Path(destination)
    projects = list(projects or [])
    if next_project_id is None:
        next_project_id = max((p.id for p in projects), default=-1) + 1

    try:
        document = ProjectCollection(next_project_id=next_project_id, projects=projects)
    except ValidationError as e:
        raise FormatError(path, "Projects do not form a valid collection", detail=_first_error(e)) from e
    payload = document.model_dump_json(indent=2)

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False
        ) as f:
            tmp_name = f.name
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise IOFailure(path, f"Could not write project file: {e.strerror or e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning(f"Could not remove temp file {tmp_name}")

    logger.info(f"Saved {len(projects)} projects to {path}")


def _read_collection(source: PathLike) -> Optional[ProjectCollection]:
    path = Path(source)
    if not path.exists():
        logger.info(f"No project file at {path}, starting empty")
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise FormatError(path, "Project file is not valid UTF-8 text") from e
    except OSError as e:
        raise IOFailure(path, f"Could not read project file: {e.strerror or e}") from e

    if not text.strip():
        logger.info(f"Project file {path} is empty, starting empty")
        return None

    try:
        return ProjectCollection.model_validate_json(text)
    except ValidationError as e:
        raise FormatError(path, "Not a valid project file", detail=_first_error(e)) from e


def _first_error(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    where = ".".join(str(part) for part in first.get("loc", ()))
    return f"{where}: {first.get('msg')}" if where else str(first.get("msg"))


def load_projects(source: PathLike) -> List[Project]:
    """
    Read a previously saved collection.

    Raises:
        IOFailure: if the file exists but cannot be read
        FormatError: if the content is not a valid project collection
    """
    collection = _read_collection(source)
    if collection is None:
        return []
    logger.info(f"Loaded {len(collection.projects)} projects from {source}")
    return collection.projects


class ProjectsStore:
    """
    One project file bound to a ProjectsManager.

    Unlike load_projects, this also restores the manager's id counter, so ids
    of removed projects stay retired across restarts.
    """

    def __init__(self, path: PathLike):
        self.path = Path(path)

    def load_into(self, manager: ProjectsManager) -> ProjectsManager:
        collection = _read_collection(self.path)
        if collection is not None:
            manager.set_projects(collection.projects, collection.next_project_id)
            logger.info(f"Loaded {len(collection.projects)} projects from {self.path}")
        return manager

    def save_from(self, manager: ProjectsManager) -> None:
        save_projects(self.path, manager.list_projects(), manager.next_project_id)
