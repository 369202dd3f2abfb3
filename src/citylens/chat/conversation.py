"""Conversation turn controller.

One turn:
  1. The user message is persisted in the background (non-blocking write).
  2. A pending assistant placeholder stands in while the model runs.
  3. The catalog is rendered as grounding context and the completion service
     is called with the prior transcript.
  4. The raw reply is interpreted into answer text + optional chart.
  5. The placeholder is replaced by the final message (same id), which is
     persisted after the user message.
"""

from __future__ import annotations

import dataclasses
import logging

from citylens.db.models import Message, Role, new_id, now_ms
from citylens.rag.context import DEFAULT_MAX_CHARS, build_context
from citylens.rag.interpreter import interpret
from citylens.rag.llm_client import CompletionService
from citylens.rag.prompt import build_system_instruction, history_to_messages
from citylens.store.gateway import PersistenceGateway

logger = logging.getLogger("citylens.chat")

WELCOME_TEXT = (
    "Olá! Sou o **Gonçalinho**, seu especialista em indicadores.\n\n"
    "Para começar, adicione seus arquivos (CSV, XLSX, PDF, etc.) e preencha os "
    "detalhes de cada um para que eu possa fazer análises precisas e cruzamentos "
    "de dados!"
)
ERROR_TEXT = (
    "Desculpe, ocorreu um erro ao se conectar com o modelo ou processar os dados."
)


class ConversationService:
    """Drive conversation turns against a gateway and a completion service."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        completion: CompletionService,
        max_chars_per_file: int = DEFAULT_MAX_CHARS,
    ) -> None:
        self.gateway = gateway
        self.completion = completion
        self.max_chars_per_file = max_chars_per_file
        self.transcript: list[Message] = []

    async def load_transcript(self) -> list[Message]:
        """Load the stored transcript; an empty one yields an unsaved welcome message."""
        messages = await self.gateway.list_messages()
        if not messages:
            messages = [
                Message(id="welcome", role=Role.ASSISTANT, text=WELCOME_TEXT, timestamp=now_ms())
            ]
        self.transcript = list(messages)
        return self.transcript

    async def ask(self, question: str) -> Message:
        """Run one turn for *question* and return the final assistant message.

        Raises:
            ValueError: If *question* is blank.
            BackendExhaustedError: If the final message cannot be stored anywhere.
        """
        if not question.strip():
            raise ValueError("question must not be empty")

        prior = list(self.transcript)
        user_msg = Message(id=new_id(), role=Role.USER, text=question, timestamp=now_ms())
        self.transcript.append(user_msg)
        self.gateway.schedule_message(user_msg)

        placeholder = Message(
            id=new_id(), role=Role.ASSISTANT, text="", timestamp=now_ms(), pending=True
        )
        self.transcript.append(placeholder)
        try:
            final = await self._answer(placeholder, prior, question)
        finally:
            # The placeholder never outlives the turn, even when the catalog read fails.
            if placeholder in self.transcript:
                self.transcript.remove(placeholder)

        self.transcript.append(final)
        await self.gateway.add_message(final)
        return final

    async def _answer(self, placeholder: Message, prior: list[Message], question: str) -> Message:
        catalog = await self.gateway.list_files()
        system = build_system_instruction(build_context(catalog, self.max_chars_per_file))
        try:
            raw = await self.completion(system, history_to_messages(prior), question)
        except Exception as exc:
            logger.error("Completion failed: %s", exc)
            return dataclasses.replace(
                placeholder, text=ERROR_TEXT, timestamp=now_ms(), pending=False
            )
        result = interpret(raw)
        return dataclasses.replace(
            placeholder,
            text=result.answer_text,
            chart=result.chart,
            timestamp=now_ms(),
            pending=False,
        )
