from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List

from .index import DEFAULT_TOP_K, search
from .llm import CompletionClient
from .models import Chunk, Message
from .prompting import build_prompt
from .store import ConversationLog, SettingsStore

log = logging.getLogger(__name__)

FALLBACK_ANSWER = "Sorry, I encountered an error. Please try again."


class AssistantBusyError(RuntimeError):
    """A question was submitted while another one is still in flight."""


class AskState(str, Enum):
    IDLE = "idle"
    RANKING = "ranking"
    ASSEMBLING = "assembling"
    AWAITING_COMPLETION = "awaiting_completion"


def referenced_documents(message: Message) -> List[str]:
    """Source filenames of a message without duplicates, in first-seen order."""
    return list(dict.fromkeys(message.source_docs or []))


class Assistant:
    """
    Answers one question at a time: rank chunks, build the prompt, call the
    completion service and record both turns in the conversation log.
    """

    def __init__(
        self,
        client: CompletionClient,
        conversation: ConversationLog,
        settings: SettingsStore,
        model: str,
        max_tokens: int = 1000,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        self.client = client
        self.conversation = conversation
        self.settings = settings
        self.model = model
        self.max_tokens = max_tokens
        self.top_k = top_k
        self.state = AskState.IDLE

    @property
    def busy(self) -> bool:
        return self.state is not AskState.IDLE

    async def ask(self, question: str, candidates: Iterable[Chunk]) -> Message:
        """Answer `question` using `candidates` as retrievable context.

        Returns the assistant message that was appended. Raises
        AssistantBusyError if a question is already being answered.
        """
        if self.busy:
            raise AssistantBusyError("a question is already being answered")
        question = question.strip()
        if not question:
            raise ValueError("question must not be empty")

        try:
            self.state = AskState.RANKING
            ranked = search(question, candidates, top_k=self.top_k)

            self.state = AskState.ASSEMBLING
            prompt = build_prompt(question, ranked, self.settings.current)

            self.state = AskState.AWAITING_COMPLETION
            user_msg = Message(role="user", content=question)
            try:
                answer = await self.client.complete(self.model, self.max_tokens, prompt)
            except Exception as exc:
                log.error("Completion failed for question %r: %s", question, exc)
                reply = Message(role="assistant", content=FALLBACK_ANSWER)
            else:
                reply = Message(
                    role="assistant",
                    content=answer,
                    source_docs=[chunk.filename for chunk in ranked],
                    used_personalization=True,
                )
            self.conversation.append(user_msg, reply)
            return reply
        finally:
            self.state = AskState.IDLE


__all__ = ["AskState", "Assistant", "AssistantBusyError", "FALLBACK_ANSWER", "referenced_documents"]
