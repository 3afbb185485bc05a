"""One intake turn: user message in, structured state changes merged out.

Order of a turn:

1. the user's message is persisted, then appended to the cached history;
2. the collaborator is called with the history including that message;
3. on success the AI reply is appended, new tasks are appended (never merged
   into existing ones), a returned timeline replaces the old one wholesale
   and a non-empty insight list replaces the old list;
4. on any collaborator or parsing failure a fixed fallback reply is appended
   and nothing else changes.

Every write is checked before the cached project is touched. A failed write
leaves its piece of the cache as it was and adds a notice to the outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from saad.errors.exceptions import ConflictError, PersistenceError
from saad.models.chat import ChatMessage
from saad.models.enums import ChatRole
from saad.models.project import Project
from saad.models.task import Task
from saad.models.timeline import Timeline
from saad.services.id_generator import MESSAGE_ID_PREFIX, generate_id
from saad.services.intake.generator import Generator
from saad.services.intake.parser import IntakeResult, parse_intake_response
from saad.services.intake.prompt import RESPONSE_SCHEMA, build_prompt
from saad.services.store import ProjectStore

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Desculpe, ocorreu um erro ao processar sua solicitação. Tente novamente."


class TurnGate:
    """Tracks projects with a turn in flight; one turn per project at a time."""

    def __init__(self):
        self._busy: set[str] = set()

    def is_busy(self, project_id: str) -> bool:
        return project_id in self._busy

    @contextmanager
    def hold(self, project_id: str) -> Iterator[None]:
        if project_id in self._busy:
            raise ConflictError(f"Project '{project_id}' is still processing the previous message")
        self._busy.add(project_id)
        try:
            yield
        finally:
            self._busy.discard(project_id)


@dataclass
class IntakeOutcome:
    user_message: ChatMessage
    reply: ChatMessage
    new_tasks: list[Task] = field(default_factory=list)
    timeline: Timeline | None = None
    insights: list[str] = field(default_factory=list)
    fallback: bool = False
    skipped_tasks: int = 0
    notices: list[str] = field(default_factory=list)


def _message(role: ChatRole, content: str) -> ChatMessage:
    return ChatMessage(
        id=generate_id(MESSAGE_ID_PREFIX),
        role=role,
        content=content,
        timestamp=datetime.now(timezone.utc),
    )


class IntakeService:
    def __init__(
        self,
        store: ProjectStore,
        generator: Generator,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.generator = generator
        self.today = today

    async def _generate(self, message: str, history: list[ChatMessage]) -> IntakeResult | None:
        prompt = build_prompt(message, history, self.today().isoformat())
        try:
            text = await self.generator.generate(prompt, RESPONSE_SCHEMA)
            return parse_intake_response(text)
        except Exception:
            # Any collaborator failure degrades to the fallback reply.
            logger.exception("Intake generation failed")
            return None

    async def run_turn(self, project: Project, message: str) -> IntakeOutcome:
        """Run one turn against ``project`` (the cached copy is updated in place).

        Raises:
            PersistenceError: if the user's own message could not be stored;
                the collaborator is not called in that case.
        """
        user_msg = _message(ChatRole.USER, message)
        if not await self.store.add_chat_message(project.id, user_msg):
            raise PersistenceError("Não foi possível salvar sua mensagem. Tente novamente.")
        project.chat_history.append(user_msg)

        result = await self._generate(message, list(project.chat_history))
        if result is None:
            return await self._fallback(project, user_msg)
        return await self._merge(project, user_msg, result)

    async def _fallback(self, project: Project, user_msg: ChatMessage) -> IntakeOutcome:
        reply = _message(ChatRole.AI, FALLBACK_REPLY)
        outcome = IntakeOutcome(user_message=user_msg, reply=reply, fallback=True)
        if await self.store.add_chat_message(project.id, reply):
            project.chat_history.append(reply)
        else:
            outcome.notices.append("A resposta do assistente não foi salva.")
        return outcome

    async def _merge(self, project: Project, user_msg: ChatMessage, result: IntakeResult) -> IntakeOutcome:
        reply = _message(ChatRole.AI, result.reply)
        outcome = IntakeOutcome(user_message=user_msg, reply=reply, skipped_tasks=result.skipped_tasks)

        if await self.store.add_chat_message(project.id, reply):
            project.chat_history.append(reply)
        else:
            outcome.notices.append("A resposta do assistente não foi salva.")

        if result.tasks:
            if await self.store.save_tasks(project.id, result.tasks):
                project.tasks.extend(result.tasks)
                outcome.new_tasks = list(result.tasks)
            else:
                outcome.notices.append("As novas tarefas não foram salvas.")

        if result.timeline is not None:
            if await self.store.update_timeline(project.id, result.timeline):
                project.timeline = result.timeline
                outcome.timeline = result.timeline
            else:
                outcome.notices.append("O cronograma não foi salvo.")

        if result.insights:
            if await self.store.update_project_insights(project.id, result.insights):
                project.insights = list(result.insights)
                outcome.insights = list(result.insights)
            else:
                outcome.notices.append("Os insights não foram salvos.")

        logger.info(
            "Intake turn merged for %s: %d tasks, timeline=%s, %d insights, %d skipped",
            project.id,
            len(outcome.new_tasks),
            outcome.timeline is not None,
            len(outcome.insights),
            outcome.skipped_tasks,
        )
        return outcome
