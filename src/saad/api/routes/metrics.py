"""Read-only metric views: dashboard, squad/drift analysis and the board."""

from fastapi import APIRouter

from saad.dependencies import Workspace
from saad.services.metrics import analysis_metrics, dashboard_metrics
from saad.services.pipeline import COLUMN_ORDER

router = APIRouter(tags=["Metrics"])


@router.get("/projects/{project_id}/dashboard")
async def get_dashboard(project_id: str, workspace: Workspace) -> dict:
    project = await workspace.load_project(project_id)
    body = dashboard_metrics(project.tasks, project.timeline).model_dump(mode="json")
    body["timeline"] = project.timeline.model_dump(mode="json") if project.timeline else None
    body["insights"] = project.insights
    return body


@router.get("/projects/{project_id}/analysis")
async def get_analysis(project_id: str, workspace: Workspace) -> dict:
    project = await workspace.load_project(project_id)
    return analysis_metrics(project.tasks, project.timeline, project.insights).model_dump(mode="json")


@router.get("/projects/{project_id}/board")
async def get_board(project_id: str, workspace: Workspace) -> list[dict]:
    project = await workspace.load_project(project_id)
    return [
        {
            "column": column.value,
            "tasks": [t.model_dump(mode="json") for t in project.tasks if t.column == column],
        }
        for column in COLUMN_ORDER
    ]
