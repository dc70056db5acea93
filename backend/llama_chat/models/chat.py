"""Data models for chat sessions and messages."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


TITLE_MAX_LENGTH = 30
TITLE_ELLIPSIS = "..."
DEFAULT_TITLE = "New Chat"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def derive_title(text: str) -> str:
    """Title from the first characters of a message, ellipsized when cut."""
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return text


class ChatRole(str, Enum):
    """Role of a message author."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """One turn in a conversation."""
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str
    name: Optional[str] = None


class ChatSession(BaseModel):
    """A named conversation thread."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = DEFAULT_TITLE
    messages: List[ChatMessage] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    @classmethod
    def create_new(cls, messages: Optional[List[ChatMessage]] = None) -> "ChatSession":
        """Create a new session, titled after its first message."""
        messages = list(messages or [])
        title = derive_title(messages[0].content) if messages and messages[0].content else DEFAULT_TITLE
        return cls(title=title, messages=messages)

    def touch(self):
        self.updated_at = utc_now()


class ModelInfo(BaseModel):
    """Model offered by a completion provider."""
    provider: str
    name: str
    display_name: str
    description: str = ""
    max_tokens: Optional[int] = None


class CompletionResult(BaseModel):
    """Assistant reply produced by a completion adapter."""
    content: str
    model: str
    usage: Optional[dict] = None


# HTTP request / response bodies

class CreateSessionRequest(BaseModel):
    messages: List[ChatMessage] = Field(default_factory=list)


class RenameSessionRequest(BaseModel):
    title: str


class ReplaceMessagesRequest(BaseModel):
    messages: List[ChatMessage]


class SelectSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: Optional[str] = Field(default=None, alias="chatId")


class InputRequest(BaseModel):
    text: str


class ChatRequest(BaseModel):
    """Submit a turn; without a message the pending input is sent."""
    message: Optional[str] = None


class TurnResult(BaseModel):
    """Outcome of one submitted turn."""
    model_config = ConfigDict(populate_by_name=True)

    accepted: bool
    reason: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    reply: Optional[ChatMessage] = None
    failed: bool = False
