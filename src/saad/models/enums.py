"""String enums for the delivery pipeline and project lifecycle."""

from enum import StrEnum


class ColumnType(StrEnum):
    """Pipeline columns, declared in board order.

    Values are the board labels and are what the store persists.
    """

    TODO = "A Fazer"
    DOING = "Fazendo"
    TESTING = "Testes"
    DEPLOY_DEV = "Deploy Dev"
    DEPLOY_PROD = "Deploy Prod"


class Squad(StrEnum):
    UX_UI = "UX/UI"
    BACKEND = "Backend"
    FRONTEND = "Frontend"
    GERAL = "Geral"


class ProjectStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class ChatRole(StrEnum):
    USER = "user"
    AI = "ai"


class DriftStatus(StrEnum):
    LAGGING = "lagging"
    AT_RISK = "at_risk"
    ON_TRACK = "on_track"
    AHEAD = "ahead"
