"""Task board API routes: manual entry, edit, move, delete."""

from fastapi import APIRouter, Response

from saad.dependencies import Workspace
from saad.models.task import TaskCreate, TaskMove, TaskUpdate

router = APIRouter(tags=["Tasks"])


@router.post("/projects/{project_id}/tasks", status_code=201)
async def create_task(project_id: str, body: TaskCreate, workspace: Workspace) -> dict:
    await workspace.load_project(project_id)
    task = await workspace.create_task(
        project_id,
        code=body.code,
        title=body.title,
        category=body.category,
        description=body.description,
        squad=body.squad,
    )
    return task.model_dump(mode="json")


@router.put("/projects/{project_id}/tasks/{task_id}")
async def update_task(project_id: str, task_id: str, body: TaskUpdate, workspace: Workspace) -> dict:
    await workspace.load_project(project_id)
    task = await workspace.update_task(project_id, task_id, body)
    return task.model_dump(mode="json")


@router.post("/projects/{project_id}/tasks/{task_id}/move")
async def move_task(project_id: str, task_id: str, body: TaskMove, workspace: Workspace) -> dict:
    """Move a task to any column; answers 200 even when the write failed."""
    await workspace.load_project(project_id)
    result = await workspace.move_task(project_id, task_id, body.column)
    return {"task": result.task.model_dump(mode="json"), "persisted": result.persisted}


@router.delete("/projects/{project_id}/tasks/{task_id}", status_code=204)
async def delete_task(project_id: str, task_id: str, workspace: Workspace) -> Response:
    await workspace.load_project(project_id)
    await workspace.delete_task(project_id, task_id)
    return Response(status_code=204)
