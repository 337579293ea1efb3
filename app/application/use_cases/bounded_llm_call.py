"""Timeout-bounded invocation of the blocking LLM client."""

import asyncio
import json
from typing import Any, Optional

from app.application.ports.llm_client import LLMClient
from app.domain.errors import ExternalServiceError


async def call_llm_with_timeout(
    llm_client: Optional[LLMClient],
    prompt: str,
    system_prompt: Optional[str] = None,
    timeout_seconds: float = 10.0,
) -> str:
    """
    Run a blocking LLM completion in a worker thread with a deadline.

    On timeout the worker result is discarded; the thread itself cannot be
    cancelled and finishes in the background.

    Args:
        llm_client: LLM client (None when the LLM is disabled)
        prompt: User prompt
        system_prompt: Optional system instruction
        timeout_seconds: Deadline for the whole call

    Returns:
        Raw completion text

    Raises:
        ExternalServiceError: If the client is missing, times out or fails
    """
    if llm_client is None:
        raise ExternalServiceError("llm", "LLM client is not configured")
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(llm_client.complete, prompt, system_prompt),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise ExternalServiceError("llm", f"LLM call timed out after {timeout_seconds}s") from e
    except ExternalServiceError:
        raise
    except Exception as e:
        raise ExternalServiceError("llm", str(e)) from e


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```) if present."""
    cleaned = raw.strip()
    if "```json" in cleaned:
        cleaned = cleaned.split("```json", 1)[1].split("```", 1)[0].strip()
    elif "```" in cleaned:
        cleaned = cleaned.split("```", 1)[1].split("```", 1)[0].strip()
    return cleaned


def parse_json_object(raw: str) -> dict[str, Any]:
    """
    Decode an LLM reply that must be a JSON object.

    Args:
        raw: Raw completion text, possibly fenced

    Returns:
        Decoded object

    Raises:
        ValueError: If the text is not JSON or not an object
    """
    data = json.loads(strip_code_fences(raw))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data
