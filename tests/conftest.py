# tests/conftest.py

import logging
from pathlib import Path

import pytest

from projectapp.manager import ProjectsManager
from projectapp.schema import Project, TaskPrio


@pytest.fixture()
def manager() -> ProjectsManager:
    return ProjectsManager()


@pytest.fixture()
def project(manager: ProjectsManager) -> Project:
    """A project with three tasks: HIGH, LOW, HIGH (ids 0, 1, 2)"""
    p = manager.add_project("Website", "Company site relaunch")
    p.add_task("Write copy", TaskPrio.HIGH)
    p.add_task("Pick fonts", TaskPrio.LOW)
    p.add_task("Draft sitemap", TaskPrio.HIGH)
    return p


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "projects.json"


@pytest.fixture(autouse=True)
def _reset_logging():
    """Remove handlers that main() installed, so they never outlive capsys"""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_projectapp", False):
            root.removeHandler(handler)
            handler.close()
