"""Shared test fixtures."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from saad.db.base import Base
# Import all models to register with Base.metadata
import saad.db.models  # noqa: F401
from saad.db.engine import create_db_engine, create_session_factory
from saad.services.intake.generator import GenerationError, Generator
from saad.services.intake.merge import TurnGate
from saad.services.store import ProjectStore


class FakeGenerator(Generator):
    """Replays queued responses; an Exception instance is raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.schemas: list[dict] = []

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    async def generate(self, prompt: str, schema: dict) -> str:
        self.prompts.append(prompt)
        self.schemas.append(schema)
        if not self.responses:
            raise GenerationError("no response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return json.dumps(response, ensure_ascii=False)
        return response


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_db_engine("sqlite+aiosqlite:///")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session."""
    session_factory = create_session_factory(db_engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session):
    return ProjectStore(db_session)


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def app(db_engine, fake_generator):
    """Create a test application instance with in-memory DB and fake generator."""
    from saad.main import create_app

    _app = create_app()
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = create_session_factory(db_engine)
    _app.state.generator = fake_generator
    _app.state.turn_gate = TurnGate()
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
