from typing import List, Optional

import pytest

from llama_chat.models.chat import ChatMessage, CompletionResult, ModelInfo
from llama_chat.services.model_adapter import CompletionError, ModelAdapter
from llama_chat.services.session_store import SessionStore
from llama_chat.services.storage_service import JsonFileSlot, StorageService


class FakeAdapter(ModelAdapter):
    """Records calls and answers with a canned reply or error."""

    def __init__(self, reply: str = "Hi!", error: Optional[Exception] = None, gate=None):
        super().__init__("test-key")
        self.reply = reply
        self.error = error
        self.gate = gate
        self.calls: List[dict] = []

    async def chat_completion(self, messages, model, temperature=0.7, max_tokens=None,
                              top_p=None, system_prompt=None) -> CompletionResult:
        self.calls.append({
            "messages": list(messages),
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": top_p,
            "system_prompt": system_prompt,
        })
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return CompletionResult(content=self.reply, model=model)

    def get_available_models(self) -> List[ModelInfo]:
        return [ModelInfo(provider="fake", name="fake-model", display_name="Fake")]

    def validate_model(self, model: str) -> bool:
        return model == "fake-model"


def user(text: str) -> ChatMessage:
    return ChatMessage(role="user", content=text)


def assistant(text: str) -> ChatMessage:
    return ChatMessage(role="assistant", content=text)


@pytest.fixture
def storage(tmp_path) -> StorageService:
    return StorageService(JsonFileSlot(str(tmp_path / "data")))


@pytest.fixture
def store(storage) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
def failing_adapter() -> FakeAdapter:
    return FakeAdapter(error=CompletionError("boom"))
