"""
PROJECTAPP - Text Reports
=========================
Human-readable rendering of projects and tasks for the command line.
"""

from typing import List, Dict, Any

from .schema import Project, ProjectState, Task, TaskPrio, TaskState

STATE_ICONS = {
    TaskState.TO_DO: "⬜",
    TaskState.IN_PROGRESS: "🔵",
    TaskState.DONE: "✅",
}

PRIO_LABELS = {
    TaskPrio.HIGH: "HIGH",
    TaskPrio.MEDIUM: "MED ",
    TaskPrio.LOW: "LOW ",
}

PROJECT_STATE_LABELS = {
    ProjectState.EMPTY: "empty",
    ProjectState.ONGOING: "ongoing",
    ProjectState.COMPLETED: "completed",
}


def _fmt_time(dt) -> str:
    return dt.strftime("%Y-%m-%d %H:%M")


def format_task(task: Task) -> str:
    icon = STATE_ICONS.get(task.state, "❓")
    taken = f" (taken by {task.taken_by})" if task.is_taken else ""
    return f"  {icon} [{task.id}] {PRIO_LABELS[task.prio]} {task.description}{taken}"


def format_task_list(tasks: List[Task]) -> str:
    if not tasks:
        return "No matching tasks."
    return "\n".join(format_task(task) for task in tasks)


def format_project_line(project: Project) -> str:
    state = PROJECT_STATE_LABELS[project.get_project_state()]
    return (
        f"  [{project.id}] {project.title} - {state} "
        f"({len(project.get_tasks())} tasks, updated {_fmt_time(project.get_last_updated())})"
    )


def format_project_list(projects: List[Project]) -> str:
    if not projects:
        return "No projects created."
    lines = ["📋 Projects:", "-" * 60]
    lines.extend(format_project_line(p) for p in projects)
    lines.append("-" * 60)
    return "\n".join(lines)


def get_status_report(project: Project) -> str:
    """Project header, progress bar and every task sorted by priority"""
    pct = project.progress_pct
    lines = [
        f"📋 [{project.id}] {project.title}",
        f"Description: {project.description or '-'}",
        f"Created: {_fmt_time(project.created)}",
        f"Last updated: {_fmt_time(project.get_last_updated())}",
        f"State: {PROJECT_STATE_LABELS[project.get_project_state()]}",
        f"Progress: {'█' * (pct // 10)}{'░' * (10 - pct // 10)} {pct}%",
        "",
        "Tasks:",
    ]
    if project.get_tasks():
        lines.extend(format_task(task) for task in project.sorted_tasks())
    else:
        lines.append("  (none)")
    return "\n".join(lines)


def project_summary(project: Project) -> Dict[str, Any]:
    """JSON-friendly listing entry, including the derived state"""
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "state": project.get_project_state().value,
        "tasks": len(project.get_tasks()),
        "progress": project.progress_pct,
        "last_updated": project.get_last_updated().isoformat(),
    }
