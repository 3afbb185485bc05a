"""Project CRUD API routes."""

from fastapi import APIRouter, Query, Response

from saad.dependencies import Workspace
from saad.errors.exceptions import ValidationError
from saad.models.enums import ProjectStatus
from saad.models.project import Project, ProjectCreate, ProjectStatusUpdate, ProjectUpdate
from saad.services.metrics import prod_progress

router = APIRouter(tags=["Projects"])


def project_card(project: Project) -> dict:
    """List representation: the project without its chat history."""
    body = project.model_dump(mode="json", exclude={"chat_history"})
    body["progress"] = prod_progress(project.tasks)
    body["task_count"] = len(project.tasks)
    return body


@router.get("/projects")
async def list_projects(
    workspace: Workspace,
    status: ProjectStatus | None = Query(None),
) -> list[dict]:
    projects = await workspace.load()
    if status is not None:
        projects = workspace.projects_with_status(status)
    return [project_card(p) for p in projects]


@router.post("/projects", status_code=201)
async def create_project(body: ProjectCreate, workspace: Workspace) -> dict:
    project = await workspace.create_project(body.name, body.description)
    if project is None:
        raise ValidationError("Project name must not be blank")
    return project.model_dump(mode="json")


@router.get("/projects/{project_id}")
async def get_project(project_id: str, workspace: Workspace) -> dict:
    project = await workspace.load_project(project_id)
    return project.model_dump(mode="json")


@router.patch("/projects/{project_id}")
async def update_project(project_id: str, body: ProjectUpdate, workspace: Workspace) -> dict:
    await workspace.load_project(project_id)
    project = await workspace.update_project(project_id, body.name, body.description)
    if project is None:
        raise ValidationError("Project name must not be blank")
    return project_card(project)


@router.put("/projects/{project_id}/status")
async def set_project_status(project_id: str, body: ProjectStatusUpdate, workspace: Workspace) -> dict:
    await workspace.load_project(project_id)
    project = await workspace.set_status(project_id, body.status)
    return project_card(project)


@router.post("/projects/{project_id}/toggle-status")
async def toggle_project_status(project_id: str, workspace: Workspace) -> dict:
    await workspace.load_project(project_id)
    project = await workspace.toggle_status(project_id)
    return project_card(project)


@router.delete("/projects/{project_id}", status_code=204)
async def delete_project(project_id: str, workspace: Workspace) -> Response:
    await workspace.load_project(project_id)
    await workspace.delete_project(project_id)
    return Response(status_code=204)
