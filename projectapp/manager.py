"""
PROJECTAPP - Projects Manager
=============================
Owns every project, hands out project ids and keeps titles unique.
Persistence lives in projectapp.storage; the manager never touches files.
"""

import logging
from typing import Optional, List, Dict, Iterable

from .exceptions import DuplicateTitleError
from .schema import Project, ProjectState

logger = logging.getLogger("projectapp.manager")


class ProjectsManager:
    """
    Projects Manager

    Key rules:
    - Project titles are unique (case-sensitive)
    - Project ids only grow; removed ids are never handed out again
    - Projects keep insertion order
    """

    def __init__(self):
        self._next_project_id: int = 0
        self._projects: List[Project] = []

    @property
    def next_project_id(self) -> int:
        return self._next_project_id

    # ========================================
    # PROJECT OPERATIONS
    # ========================================

    def add_project(self, title: str, description: str = "") -> Project:
        """
        Create and register a new project.

        Raises:
            DuplicateTitleError: if a project with this title exists.
                No id is consumed in that case.
        """
        if not self.is_title_unique(title):
            raise DuplicateTitleError(title)

        project = Project(id=self._next_project_id, title=title, description=description)
        self._next_project_id += 1
        self._projects.append(project)

        logger.info(f"Added project: {project.title} ({project.id})")
        return project

    def remove_project(self, project: Project) -> None:
        for i, candidate in enumerate(self._projects):
            if candidate is project:
                del self._projects[i]
                logger.info(f"Removed project: {project.title} ({project.id})")
                return
        logger.debug(f"Project not registered, nothing removed: {project.id}")

    def set_projects(self, projects: Iterable[Project], next_project_id: int = 0) -> None:
        """
        Replace the whole collection, e.g. after loading from disk.

        The id counter becomes the largest of its current value, the given
        next_project_id and highest id + 1.
        """
        incoming = list(projects)

        seen_titles = set()
        seen_ids = set()
        for project in incoming:
            if project.title in seen_titles:
                raise DuplicateTitleError(project.title)
            if project.id in seen_ids:
                raise ValueError(f"Duplicate project id: {project.id}")
            seen_titles.add(project.title)
            seen_ids.add(project.id)

        self._projects = incoming
        highest = self.get_highest_id()
        floor = 0 if highest is None else highest + 1
        self._next_project_id = max(self._next_project_id, next_project_id, floor)

        logger.debug(
            f"Replaced project collection: {len(incoming)} projects, "
            f"next id {self._next_project_id}"
        )

    # ========================================
    # QUERIES
    # ========================================

    def is_title_unique(self, title: str) -> bool:
        return all(project.title != title for project in self._projects)

    def get_project_by_id(self, project_id: int) -> Optional[Project]:
        """Lookup by the stored project id, not by list position"""
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def find_projects(self, title: str) -> List[Project]:
        return [project for project in self._projects if project.title == title]

    def get_highest_id(self) -> Optional[int]:
        """Highest project id, or None when there are no projects"""
        if not self._projects:
            return None
        return max(project.id for project in self._projects)

    def list_projects(self) -> List[Project]:
        return list(self._projects)

    def project_states(self) -> Dict[int, ProjectState]:
        return {project.id: project.get_project_state() for project in self._projects}

    def __len__(self) -> int:
        return len(self._projects)
