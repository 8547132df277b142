"""Text generation behind a small async interface."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import openai
from langchain_openai import ChatOpenAI

from consigliere.errors import ServiceUnavailable


logger = logging.getLogger("uvicorn.error")

BLOCKED_RESPONSE = (
    "My AI response was blocked. This can happen due to safety filters. "
    "Please try rephrasing your query. (Reason: {reason})"
)

SYSTEM_INSTRUCTION = (
    "You are an NBA front-office assistant.\n"
    "ONLY use the data provided in the prompt. Never invent players, teams, salaries or numbers.\n"
    "Output MUST be Markdown."
)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


def _blocked_reason(message: Any) -> str | None:
    metadata = getattr(message, "response_metadata", None) or {}
    if metadata.get("finish_reason") == "content_filter":
        return "content_filter"
    extra = getattr(message, "additional_kwargs", None) or {}
    if extra.get("refusal"):
        return "refusal"
    content = getattr(message, "content", "")
    if not (content if isinstance(content, str) else str(content)).strip():
        return metadata.get("finish_reason") or "empty response"
    return None


class OpenAIGenerator:
    """Chat-model generator; a filtered or empty reply becomes a readable blocked message."""

    def __init__(
        self,
        *,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        temperature: float = 0.0,
        llm: Any | None = None,
    ):
        self.model = model
        self.llm = llm or ChatOpenAI(model=model, temperature=temperature, api_key=api_key)

    async def generate(self, prompt: str) -> str:
        try:
            message = await self.llm.ainvoke(
                [
                    {"role": "system", "content": SYSTEM_INSTRUCTION},
                    {"role": "user", "content": prompt},
                ]
            )
        except openai.APIError as exc:
            logger.error("Text generation failed: %s", exc)
            raise ServiceUnavailable("The text generator is unavailable. Please try again later.") from exc

        reason = _blocked_reason(message)
        if reason is not None:
            logger.warning("Generated response blocked: %s", reason)
            return BLOCKED_RESPONSE.format(reason=reason)
        content = message.content
        return (content if isinstance(content, str) else str(content)).strip()
