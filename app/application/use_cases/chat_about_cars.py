"""Conversational car-buying assistant use case."""

import logging
from typing import Any, Callable, Mapping, Optional

from app.application.dtos.ai_search import ChatReply
from app.application.ports.llm_client import LLMClient
from app.application.use_cases.bounded_llm_call import call_llm_with_timeout
from app.application.use_cases.prompts import CHAT_SYSTEM_PROMPT, build_chat_prompt
from app.domain.errors import ValidationError

MAX_MESSAGE_LENGTH = 1000
FALLBACK_REPLY = "I understand. Let me help you find the perfect car!"


class ChatAboutCars:
    """Use case for answering a free-form shopper message."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        timeout_seconds: float = 10.0,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize chat use case.

        Args:
            llm_client: LLM client (None disables the LLM path)
            timeout_seconds: Deadline for the LLM call
            logger: Optional logger function (component, **kwargs)
        """
        self._llm_client = llm_client
        self._timeout_seconds = timeout_seconds
        self._logger = logger

    def _log(self, component: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(component, **kwargs)

    async def execute(
        self, message: Optional[str], context: Optional[Mapping[str, Any]] = None
    ) -> ChatReply:
        """
        Reply to a shopper message.

        Args:
            message: User message
            context: Free-form conversation context

        Returns:
            Assistant reply; a fixed acknowledgement when the LLM is unavailable

        Raises:
            ValidationError: If the message is missing or too long
        """
        if not message or not message.strip():
            raise ValidationError("Message is required")
        message = message.strip()
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Message must be at most {MAX_MESSAGE_LENGTH} characters")

        try:
            response = await call_llm_with_timeout(
                self._llm_client,
                build_chat_prompt(message, context),
                CHAT_SYSTEM_PROMPT,
                self._timeout_seconds,
            )
            if not response.strip():
                raise ValueError("Empty chat reply from LLM")
        except Exception as e:
            self._log(
                "llm_fallback",
                level=logging.WARNING,
                operation="chat",
                reason=str(e),
            )
            return ChatReply(response=FALLBACK_REPLY)

        return ChatReply(response=response.strip(), source="llm")
