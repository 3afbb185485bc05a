"""Chat API routes: conversation history and intake turns."""

from fastapi import APIRouter

from saad.dependencies import TraceId, Workspace
from saad.logging_config import bind_request_context
from saad.models.chat import ChatTurnRequest

router = APIRouter(tags=["Chat"])


@router.get("/projects/{project_id}/chat")
async def get_chat_history(project_id: str, workspace: Workspace) -> list[dict]:
    project = await workspace.load_project(project_id)
    return [m.model_dump(mode="json") for m in project.chat_history]


@router.get("/projects/{project_id}/chat/status")
async def get_chat_status(project_id: str, workspace: Workspace) -> dict:
    await workspace.load_project(project_id)
    return {"project_id": project_id, "busy": workspace.is_busy(project_id)}


@router.post("/projects/{project_id}/chat")
async def send_chat_message(
    project_id: str,
    body: ChatTurnRequest,
    workspace: Workspace,
    trace_id: TraceId,
) -> dict:
    """Run one intake turn.

    Collaborator failures never surface here: the reply is then the fallback
    message and ``fallback`` is true.
    """
    bind_request_context(trace_id, project_id=project_id)
    await workspace.load_project(project_id)
    outcome = await workspace.send_message(project_id, body.message)
    return {
        "user_message": outcome.user_message.model_dump(mode="json"),
        "reply": outcome.reply.model_dump(mode="json"),
        "new_tasks": [t.model_dump(mode="json") for t in outcome.new_tasks],
        "timeline": outcome.timeline.model_dump(mode="json") if outcome.timeline else None,
        "insights": outcome.insights,
        "fallback": outcome.fallback,
        "skipped_tasks": outcome.skipped_tasks,
        "notices": outcome.notices,
    }
