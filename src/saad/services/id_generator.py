"""Opaque entity ids: a kind prefix followed by 16 hex characters."""

import uuid

PROJECT_ID_PREFIX = "proj_"
TASK_ID_PREFIX = "task_"
MESSAGE_ID_PREFIX = "msg_"


def generate_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:16]}"
