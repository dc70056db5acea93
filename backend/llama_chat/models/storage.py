"""Data models for the persisted chat state."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .chat import ChatSession


class PersistedState(BaseModel):
    """Subset of the store written to the durable slot."""
    model_config = ConfigDict(populate_by_name=True)

    sessions: List[ChatSession] = Field(default_factory=list)
    current_chat_id: Optional[str] = Field(default=None, alias="currentChatId")
    is_sidebar_collapsed: bool = Field(default=False, alias="isSidebarCollapsed")

    def to_json_data(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ChatState(PersistedState):
    """Full store state, including the ephemeral UI flags."""
    input: str = ""
    is_loading: bool = Field(default=False, alias="isLoading")
