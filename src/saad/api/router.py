"""Master API router mounted at /api/v1."""

from fastapi import APIRouter
from saad.api.routes import (
    chat,
    health,
    metrics,
    projects,
    tasks,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(projects.router)
api_router.include_router(tasks.router)
api_router.include_router(chat.router)
api_router.include_router(metrics.router)
