# =============================================================================
# agents/llm.py - Shared OpenAI Access for Agents
# =============================================================================
# Every agent talks to the LLM through the sync OpenAI client. This module
# owns the client instances and a small chat() helper so agents only deal
# with prompts and parsing.
#
# Two clients are available:
# - get_openai_client(): the OpenAI API (translation, writing, images)
# - get_research_client(): an OpenAI-compatible endpoint used for keyword
#   research; falls back to the OpenAI client when not configured
#
# Usage:
#   from agents.llm import chat
#   text = chat(
#       [{"role": "system", "content": "..."}, {"role": "user", "content": "..."}],
#       temperature=0.3,
#       max_tokens=200,
#   )
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from openai import OpenAI

from app.config import settings

logger = logging.getLogger(__name__)

_openai_client: OpenAI | None = None
_research_client: OpenAI | None = None


# =============================================================================
# Exceptions
# =============================================================================

class AgentError(Exception):
    """
    Error raised when an LLM call fails or returns nothing usable.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "AGENT_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


# =============================================================================
# Clients
# =============================================================================

def get_openai_client() -> OpenAI:
    """Get or create the shared OpenAI client."""
    global _openai_client
    if _openai_client is None:
        _openai_client = OpenAI(api_key=settings.OPENAI_API_KEY)
        logger.info(f"OpenAI client initialized (model={settings.OPENAI_MODEL})")
    return _openai_client


def get_research_client() -> tuple[OpenAI, str]:
    """
    Get the client and model used for keyword research.

    Returns:
        (client, model) - the research endpoint when RESEARCH_BASE_URL is set,
        otherwise the OpenAI client and OPENAI_MODEL
    """
    global _research_client
    if not settings.RESEARCH_BASE_URL:
        return get_openai_client(), settings.RESEARCH_MODEL or settings.OPENAI_MODEL

    if _research_client is None:
        _research_client = OpenAI(
            api_key=settings.RESEARCH_API_KEY or settings.OPENAI_API_KEY,
            base_url=settings.RESEARCH_BASE_URL,
        )
        logger.info(f"Research client initialized ({settings.RESEARCH_BASE_URL})")
    return _research_client, settings.RESEARCH_MODEL or settings.OPENAI_MODEL


# =============================================================================
# Chat Helper
# =============================================================================

def chat(
    messages: list[dict[str, str]],
    temperature: float,
    max_tokens: int,
    model: str | None = None,
    client: OpenAI | None = None,
) -> str:
    """
    Run a chat completion and return the stripped text of the first choice.

    Args:
        messages: OpenAI messages array
        temperature: Sampling temperature
        max_tokens: Completion token limit
        model: Model ID (default: settings.OPENAI_MODEL)
        client: Client to use (default: the shared OpenAI client)

    Returns:
        Response text ("" when the model returned no content)

    Raises:
        AgentError: If the API call fails
    """
    client = client or get_openai_client()
    model = model or settings.OPENAI_MODEL

    try:
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except Exception as e:
        raise AgentError(
            message=f"OpenAI API call failed: {e}",
            code="OPENAI_ERROR",
            suggestion="Check your OPENAI_API_KEY and network connection",
            details={"model": model}
        )

    text = (response.choices[0].message.content or "").strip() if response.choices else ""
    logger.debug(f"LLM response ({model}): {text[:200]}...")
    return text
