"""OpenAI-compatible model adapter implementation."""

import logging
from typing import Any, Dict, List, Optional

import openai
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import settings
from ..models.chat import ChatMessage, CompletionResult, ModelInfo
from .model_adapter import CompletionError, ModelAdapter

logger = logging.getLogger(__name__)


# Response shape accepted from the completion endpoint

class _ReplyMessage(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    content: Optional[str] = None


class _Choice(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    message: _ReplyMessage


class _Usage(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class _CompletionPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    model: str
    choices: List[_Choice] = Field(min_length=1)
    usage: Optional[_Usage] = None


def to_openai_messages(messages: List[ChatMessage], system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
    """Convert stored messages to the chat-completions wire format (role and content only)."""
    openai_messages = []
    if system_prompt:
        openai_messages.append({"role": "system", "content": system_prompt})
    for msg in messages:
        openai_messages.append({"role": msg.role.value, "content": msg.content})
    return openai_messages


class OpenAIAdapter(ModelAdapter):
    """Adapter for OpenAI-compatible chat-completion endpoints (Groq by default)."""

    def __init__(self, api_key: str, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, client: Any = None):
        super().__init__(api_key)
        if client is None:
            client_kwargs: Dict[str, Any] = {"api_key": api_key, "base_url": base_url}
            if timeout is not None:
                client_kwargs["timeout"] = timeout
            client = openai.AsyncOpenAI(**client_kwargs)
        self.client = client
        self.available_models = [
            ModelInfo(
                provider="groq",
                name="llama-3.3-70b-versatile",
                display_name="Llama 3.3 70B Versatile",
                description="General purpose Llama model",
                max_tokens=32768
            ),
            ModelInfo(
                provider="groq",
                name="llama-3.1-8b-instant",
                display_name="Llama 3.1 8B Instant",
                description="Fast and efficient model",
                max_tokens=8192
            )
        ]

    @classmethod
    def from_settings(cls) -> "OpenAIAdapter":
        return cls(
            settings.groq_api_key,
            base_url=settings.completion_base_url,
            timeout=settings.completion_timeout_seconds,
        )

    async def chat_completion(
        self,
        messages: List[ChatMessage],
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
        system_prompt: Optional[str] = None
    ) -> CompletionResult:
        """Generate chat completion using the configured endpoint."""
        if not self.api_key:
            raise CompletionError("API key is not configured")

        request: Dict[str, Any] = {
            "model": model,
            "messages": to_openai_messages(messages, system_prompt),
            "temperature": temperature,
            "stream": False,
        }
        if max_tokens is not None:
            request["max_tokens"] = max_tokens
        if top_p is not None:
            request["top_p"] = top_p

        try:
            response = await self.client.chat.completions.create(**request)
        except openai.OpenAIError as e:
            raise CompletionError(f"Completion API error: {str(e)}") from e

        try:
            payload = _CompletionPayload.model_validate(response, from_attributes=True)
        except ValidationError as e:
            raise CompletionError(f"Malformed completion response: {e.error_count()} errors") from e

        logger.debug(f"Completion from {payload.model}: {len(payload.choices)} choices")
        return CompletionResult(
            content=payload.choices[0].message.content or "",
            model=payload.model,
            usage=payload.usage.model_dump() if payload.usage else None
        )

    def get_available_models(self) -> List[ModelInfo]:
        """Get list of available models."""
        return self.available_models

    def validate_model(self, model: str) -> bool:
        """Validate if model is available for this endpoint."""
        return any(m.name == model for m in self.available_models)
