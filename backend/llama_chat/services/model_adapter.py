"""Abstract base class for AI model adapters."""

from abc import ABC, abstractmethod
from typing import List, Optional
from ..models.chat import ChatMessage, CompletionResult, ModelInfo


class CompletionError(Exception):
    """A completion request failed: credentials, transport, status or payload shape."""


class ModelAdapter(ABC):
    """Abstract base class for AI model adapters."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[ChatMessage],
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
        system_prompt: Optional[str] = None
    ) -> CompletionResult:
        """Generate chat completion, raising CompletionError on failure."""
        pass

    @abstractmethod
    def get_available_models(self) -> List[ModelInfo]:
        """Get list of available models for this provider."""
        pass

    @abstractmethod
    def validate_model(self, model: str) -> bool:
        """Validate if model is available for this provider."""
        pass
