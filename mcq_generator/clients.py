import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import groq
import openai

from mcq_generator.config import Settings
from mcq_generator.exceptions import UpstreamError


logger = logging.getLogger(__name__)


def field(obj: Any, name: str) -> Any:
    """Read ``name`` from an SDK object or a plain dict."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_output_text(response: Any) -> str:
    """Pull the completion text out of a provider response envelope.

    Handles the Responses API shapes (flattened ``output_text`` or a list of
    output items holding content blocks) and the chat completion shape.
    """
    output_text = field(response, "output_text")
    if isinstance(output_text, str) and output_text.strip():
        return output_text.strip()

    output = field(response, "output")
    if isinstance(output, list) and output:
        parts = []
        for item in output:
            for block in field(item, "content") or []:
                text = block if isinstance(block, str) else field(block, "text")
                if isinstance(text, str):
                    parts.append(text)
        return "".join(parts).strip()

    choices = field(response, "choices")
    if isinstance(choices, list) and choices:
        content = field(field(choices[0], "message"), "content")
        if isinstance(content, str):
            return content.strip()

    return ""


@dataclass
class Completion:
    text: str
    response: Any


class CompletionClient(ABC):
    """One provider client, bound to a single credential."""

    @abstractmethod
    async def complete(self, model: str, system_prompt: str, user_prompt: str,
                       temperature: float, max_output_tokens: int) -> Completion:
        """Send both prompts and return the completion text with the raw response."""


class OpenAIResponsesClient(CompletionClient):
    def __init__(self, api_key: Optional[str], timeout: float):
        try:
            self.client = openai.AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        except openai.OpenAIError as e:
            raise UpstreamError(str(e)) from e

    async def complete(self, model, system_prompt, user_prompt, temperature, max_output_tokens):
        try:
            response = await self.client.responses.create(
                model=model,
                input=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            )
        except openai.OpenAIError as e:
            raise UpstreamError(str(e)) from e
        return Completion(text=extract_output_text(response), response=response)


class GroqChatClient(CompletionClient):
    def __init__(self, api_key: Optional[str], timeout: float):
        try:
            self.client = groq.AsyncGroq(api_key=api_key, timeout=timeout, max_retries=0)
        except groq.GroqError as e:
            raise UpstreamError(str(e)) from e

    async def complete(self, model, system_prompt, user_prompt, temperature, max_output_tokens):
        try:
            chat_completion = await self.client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                model=model,
                temperature=temperature,
                max_tokens=max_output_tokens,
            )
        except groq.GroqError as e:
            raise UpstreamError(str(e)) from e
        return Completion(text=extract_output_text(chat_completion), response=chat_completion)


def build_client(settings: Settings, credential: Optional[str] = None) -> CompletionClient:
    """Create a client for one request.

    ``credential`` is the caller-supplied key; without it the process-wide key
    from the environment is used.
    """
    api_key = credential or settings.api_key
    logger.debug("Building %s client (caller credential: %s)", settings.provider, credential is not None)
    if settings.provider == "groq":
        return GroqChatClient(api_key, settings.request_timeout)
    return OpenAIResponsesClient(api_key, settings.request_timeout)
