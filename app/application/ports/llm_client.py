"""LLM client port interface."""

from abc import ABC, abstractmethod
from typing import Optional


class LLMClient(ABC):
    """Port interface for LLM client."""

    @abstractmethod
    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Generate a completion for a prompt.

        Args:
            prompt: User prompt
            system_prompt: Optional system instruction

        Returns:
            Raw completion text

        Raises:
            Exception: If LLM call fails or returns empty response
        """
        pass
