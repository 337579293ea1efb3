"""OpenAI LLM client adapter."""

from typing import Optional

from openai import OpenAI

from app.application.ports.llm_client import LLMClient
from app.infrastructure.config.settings import settings


class OpenAILLMClient(LLMClient):
    """OpenAI LLM client implementation using official SDK."""

    TEMPERATURE = 0.3
    MAX_TOKENS = 1024

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """
        Initialize OpenAI LLM client.

        Args:
            api_key: OpenAI API key (defaults to settings.openai_api_key)
            model: Model name (defaults to settings.openai_model)
            timeout_seconds: Request timeout in seconds (defaults to settings.openai_timeout_seconds)
        """
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_model
        self._timeout = timeout_seconds or settings.openai_timeout_seconds

        if not self._api_key:
            raise ValueError("OpenAI API key is required")

        # Callers bound the call with their own deadline and fall back, so no SDK retries
        self._client = OpenAI(
            api_key=self._api_key,
            timeout=self._timeout,
            max_retries=0,
        )

    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Generate a completion using OpenAI API.

        Args:
            prompt: User prompt
            system_prompt: Optional system instruction

        Returns:
            Completion text

        Raises:
            Exception: If LLM call fails or returns empty response
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt.strip()})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
            )

            if not response.choices or response.choices[0].message.content is None:
                raise ValueError("Empty response from OpenAI API")

            reply = response.choices[0].message.content.strip()

            if not reply:
                raise ValueError("Empty reply from OpenAI API")

            return reply

        except Exception as e:
            # Re-raise to allow fallback handling at use case level
            raise Exception(f"OpenAI API call failed: {str(e)}") from e
