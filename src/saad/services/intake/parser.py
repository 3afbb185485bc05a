"""Validation and mapping of the collaborator's JSON response.

The response is untrusted. The envelope must be a JSON object whose known
fields have the right top-level types, otherwise the whole response is
rejected. Below the envelope each piece is judged on its own: a task missing
code, title or category is dropped without affecting its siblings, and a
timeline that cannot be validated is dropped without affecting the tasks.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

import jsonschema
from pydantic import ValidationError as PydanticValidationError

from saad.models.enums import Squad
from saad.models.task import Task
from saad.models.timeline import Timeline
from saad.services.id_generator import TASK_ID_PREFIX, generate_id
from saad.services.pipeline import INITIAL_COLUMN

logger = logging.getLogger(__name__)

DEFAULT_REPLY = "Processado."

ENVELOPE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "reply": {"type": ["string", "null"]},
        "newTasks": {"type": ["array", "null"]},
        "timeline": {"type": ["object", "null"]},
        "insights": {"type": ["array", "null"]},
    },
}

# Required task fields must be present and non-blank; squad and description
# fall back to defaults instead of dropping the task.
REQUIRED_TASK_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "code": {"type": "string", "pattern": r"\S"},
        "title": {"type": "string", "pattern": r"\S"},
        "category": {"type": "string", "pattern": r"\S"},
    },
    "required": ["code", "title", "category"],
}

REQUIRED_TIMELINE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "startDate": {"type": "string"},
        "endDate": {"type": "string"},
        "totalWeeks": {"type": "integer", "minimum": 1},
        "currentWeek": {"type": "integer"},
        "progressMessage": {"type": ["string", "null"]},
    },
    "required": ["startDate", "endDate", "totalWeeks", "currentWeek"],
}

_envelope_validator = jsonschema.Draft7Validator(ENVELOPE_SCHEMA)
_task_validator = jsonschema.Draft7Validator(REQUIRED_TASK_SCHEMA)
_timeline_validator = jsonschema.Draft7Validator(REQUIRED_TIMELINE_SCHEMA)


class IntakeResponseError(Exception):
    """The response as a whole is unusable."""


@dataclass
class IntakeResult:
    reply: str
    tasks: list[Task] = field(default_factory=list)
    timeline: Timeline | None = None
    insights: list[str] = field(default_factory=list)
    skipped_tasks: int = 0


def _first_error(validator: jsonschema.Draft7Validator, instance) -> str | None:
    error = jsonschema.exceptions.best_match(validator.iter_errors(instance))
    return error.message if error else None


def _squad(value) -> Squad:
    if isinstance(value, str):
        try:
            return Squad(value)
        except ValueError:
            pass
    return Squad.GERAL


def _description(value) -> str:
    return value if isinstance(value, str) else ""


def map_task(raw: dict) -> Task:
    """Build a TODO task from a validated raw element, text kept verbatim.

    Optional fields of the wrong type fall back to their defaults.
    """
    return Task(
        id=generate_id(TASK_ID_PREFIX),
        code=raw["code"],
        title=raw["title"],
        category=raw["category"],
        description=_description(raw.get("description")),
        column=INITIAL_COLUMN,
        squad=_squad(raw.get("squad")),
    )


def map_tasks(raw_tasks: list) -> tuple[list[Task], int]:
    """Map every valid element; returns (tasks, skipped count)."""
    tasks: list[Task] = []
    skipped = 0
    for index, raw in enumerate(raw_tasks):
        problem = _first_error(_task_validator, raw)
        if problem is not None:
            logger.warning("Skipping extracted task #%d: %s", index, problem)
            skipped += 1
            continue
        try:
            tasks.append(map_task(raw))
        except PydanticValidationError as exc:
            logger.warning("Skipping extracted task #%d: %s", index, exc)
            skipped += 1
    return tasks, skipped


def map_timeline(raw: dict | None) -> Timeline | None:
    if raw is None:
        return None
    problem = _first_error(_timeline_validator, raw)
    if problem is not None:
        logger.warning("Discarding extracted timeline: %s", problem)
        return None
    try:
        return Timeline(
            start_date=raw["startDate"],
            end_date=raw["endDate"],
            total_weeks=raw["totalWeeks"],
            current_week=raw["currentWeek"],
            progress_message=raw.get("progressMessage"),
        )
    except PydanticValidationError as exc:
        logger.warning("Discarding extracted timeline: %s", exc)
        return None


def map_insights(raw: list | None) -> list[str]:
    return [item for item in raw or [] if isinstance(item, str) and item.strip()]


def parse_intake_response(text: str | None) -> IntakeResult:
    """Parse and validate raw collaborator output.

    Raises:
        IntakeResponseError: if the text is empty, not JSON, or the envelope
            has the wrong shape.
    """
    if not text:
        raise IntakeResponseError("Empty response")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise IntakeResponseError(f"Response is not valid JSON: {exc}") from exc

    problem = _first_error(_envelope_validator, data)
    if problem is not None:
        raise IntakeResponseError(f"Response envelope is invalid: {problem}")

    tasks, skipped = map_tasks(data.get("newTasks") or [])
    return IntakeResult(
        reply=data.get("reply") or DEFAULT_REPLY,
        tasks=tasks,
        timeline=map_timeline(data.get("timeline")),
        insights=map_insights(data.get("insights")),
        skipped_tasks=skipped,
    )
