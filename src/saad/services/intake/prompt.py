"""Prompt and response schema for the intake assistant.

The same schema is handed to the generation collaborator as its structured
output contract and reused by the parser to check what comes back.
"""

from __future__ import annotations

from collections.abc import Sequence

from saad.models.chat import ChatMessage
from saad.models.enums import Squad

ASSISTANT_NAME = "Agente SAAD"

SQUAD_VALUES: list[str] = [s.value for s in Squad]

TASK_ITEM_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "code": {"type": "string"},
        "title": {"type": "string"},
        "category": {"type": "string"},
        "description": {"type": "string"},
        "squad": {
            "type": "string",
            "enum": SQUAD_VALUES,
            "description": "Squad mais relevante para a tarefa.",
        },
    },
    "required": ["code", "title", "category", "squad"],
}

TIMELINE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "startDate": {"type": "string", "description": "Data ISO"},
        "endDate": {"type": "string", "description": "Data ISO"},
        "totalWeeks": {"type": "integer"},
        "currentWeek": {"type": "integer"},
        "progressMessage": {"type": "string"},
    },
}

RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "reply": {
            "type": "string",
            "description": "Resposta conversacional ao usuário, em português.",
        },
        "newTasks": {"type": "array", "items": TASK_ITEM_SCHEMA},
        "timeline": TIMELINE_SCHEMA,
        "insights": {"type": "array", "items": {"type": "string"}},
    },
}


def render_history(history: Sequence[ChatMessage]) -> str:
    """One ``ROLE: content`` line per message, oldest first."""
    return "\n".join(f"{msg.role.value.upper()}: {msg.content}" for msg in history)


def build_prompt(message: str, history: Sequence[ChatMessage], current_date: str) -> str:
    """Build the full instruction prompt for one intake turn.

    ``history`` is expected to already include ``message`` as its last entry.
    """
    squads = ", ".join(f"'{s}'" for s in SQUAD_VALUES)
    lines: list[str] = []
    lines.append(f'Você é "{ASSISTANT_NAME}", especialista em gestão de projetos de software.')
    lines.append(f"Data atual: {current_date}")
    lines.append("")
    lines.append("OBJETIVO: manter o quadro do projeto a partir da mensagem do usuário e do histórico do chat.")
    lines.append("")
    lines.append("REGRAS:")
    lines.append("1. Cronograma primeiro.")
    lines.append("   - Não crie tarefas enquanto nenhum cronograma (duração, prazo ou datas de início/fim) for conhecido.")
    lines.append("   - Se houver Regras de Negócio (RNs) mas nenhum cronograma no histórico nem na mensagem atual,")
    lines.append("     pergunte pelo cronograma e devolva 'newTasks' vazio.")
    lines.append("   - Datas informadas pelo usuário vão para o objeto 'timeline'.")
    lines.append("2. Criação de tarefas.")
    lines.append("   - Com o cronograma conhecido, gere uma tarefa por RN.")
    lines.append("   - Procure as RNs na mensagem atual; se ela trouxer apenas o cronograma (ex.: '4 semanas'),")
    lines.append("     use as RNs enviadas antes no histórico.")
    lines.append("   - Copie 'code', 'title' e 'description' EXATAMENTE como escritos. Nunca resuma, parafraseie,")
    lines.append("     encurte ou use reticências; regras longas são copiadas por inteiro.")
    lines.append("   - 'RN - 001 Título' é a categoria pai: code 'RN - 001', category 'RN - 001 Título'.")
    lines.append("   - 'RN - 001.1 Subtarefa: texto' vira code 'RN - 001.1', title 'Subtarefa', description 'texto'")
    lines.append("     e category igual à RN pai (ou o próprio código quando não houver pai).")
    lines.append(f"   - Toda tarefa recebe um squad entre {squads}.")
    lines.append("3. Cronograma.")
    lines.append("   - Preencha startDate, endDate, totalWeeks e currentWeek.")
    lines.append("   - Só a duração: início = hoje. Só o prazo final: conte para trás.")
    lines.append("   - currentWeek = semanas inteiras entre o início e hoje + 1.")
    lines.append("4. Resposta.")
    lines.append("   - 'reply': explique ao usuário, em português, o que foi feito.")
    lines.append("   - 'insights': dois insights estratégicos em português quando existirem tarefas.")
    lines.append("")
    lines.append("Histórico do chat:")
    lines.append(render_history(history))
    lines.append("")
    lines.append("Mensagem atual do usuário:")
    lines.append(message)
    lines.append("")
    lines.append("Responda estritamente em JSON conforme o esquema.")
    return "\n".join(lines)
