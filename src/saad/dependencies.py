"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request

from saad.services.intake.generator import Generator
from saad.services.intake.merge import IntakeService, TurnGate
from saad.services.store import ProjectStore
from saad.services.workspace import ProjectWorkspace


async def get_db(request: Request) -> AsyncGenerator:
    """Yield a database session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "trc_unknown")


def get_generator(request: Request) -> Generator:
    """Return the generation collaborator configured on app state."""
    return request.app.state.generator


def get_turn_gate(request: Request) -> TurnGate:
    return request.app.state.turn_gate


async def get_workspace(
    db=Depends(get_db),
    generator: Generator = Depends(get_generator),
    gate: TurnGate = Depends(get_turn_gate),
) -> ProjectWorkspace:
    """Build a workspace over a per-request store."""
    store = ProjectStore(db)
    return ProjectWorkspace(store, intake=IntakeService(store, generator), gate=gate)


# Type aliases for dependency injection
TraceId = Annotated[str, Depends(get_trace_id)]
Workspace = Annotated[ProjectWorkspace, Depends(get_workspace)]
