"""In-memory session store with write-through persistence."""

import functools
import logging
from typing import Callable, List, Optional

from ..models.chat import ChatRole, ChatSession, ChatMessage, derive_title
from ..models.storage import ChatState, PersistedState
from .storage_service import StorageService

logger = logging.getLogger(__name__)


def persists(method: Callable) -> Callable:
    """Write the store snapshot to storage after the wrapped mutation."""
    @functools.wraps(method)
    def wrapper(self: "SessionStore", *args, **kwargs):
        result = method(self, *args, **kwargs)
        self.persist()
        return result
    return wrapper


class SessionStore:
    """Owns chat sessions, the active session pointer and transient input state.

    Operations on an unknown session id leave the state untouched and report
    it through their return value (None or False) instead of raising.
    """

    def __init__(self, storage: Optional[StorageService] = None):
        self.storage = storage
        self.sessions: List[ChatSession] = []
        self.current_chat_id: Optional[str] = None
        self.is_sidebar_collapsed = False
        self.input = ""
        self.is_loading = False

    @classmethod
    def from_storage(cls, storage: StorageService) -> "SessionStore":
        """Build a store and restore whatever the storage slot holds."""
        store = cls(storage)
        store.restore(storage.load())
        return store

    # Persistence

    def snapshot(self) -> PersistedState:
        return PersistedState(
            sessions=[session.model_copy(deep=True) for session in self.sessions],
            current_chat_id=self.current_chat_id,
            is_sidebar_collapsed=self.is_sidebar_collapsed,
        )

    def restore(self, state: PersistedState):
        self.sessions = [session.model_copy(deep=True) for session in state.sessions]
        self.current_chat_id = state.current_chat_id
        self.is_sidebar_collapsed = state.is_sidebar_collapsed
        logger.debug(f"Restored {len(self.sessions)} sessions")

    def persist(self):
        if self.storage is not None:
            self.storage.save(self.snapshot())

    def state(self) -> ChatState:
        """Full state view including the ephemeral flags."""
        return ChatState(
            **self.snapshot().model_dump(),
            input=self.input,
            is_loading=self.is_loading,
        )

    # Queries

    def get_session(self, session_id: Optional[str]) -> Optional[ChatSession]:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def current_session(self) -> Optional[ChatSession]:
        return self.get_session(self.current_chat_id)

    # Session mutations

    @persists
    def create_session(self, initial_messages: Optional[List[ChatMessage]] = None) -> ChatSession:
        """Create a session at the front of the list and make it current."""
        session = ChatSession.create_new(initial_messages)
        self.sessions.insert(0, session)
        self.current_chat_id = session.id
        logger.info(f"Created session {session.id}")
        return session

    @persists
    def append_message(self, session_id: str, message: ChatMessage) -> Optional[ChatSession]:
        session = self.get_session(session_id)
        if session is None:
            logger.warning(f"Cannot append message: session {session_id} not found")
            return None

        if not session.messages and message.role == ChatRole.USER:
            session.title = derive_title(message.content)
        session.messages.append(message)
        session.touch()
        return session

    @persists
    def update_session(self, session_id: str, messages: List[ChatMessage]) -> Optional[ChatSession]:
        """Replace a session's whole message list."""
        session = self.get_session(session_id)
        if session is None:
            return None
        session.messages = list(messages)
        session.touch()
        return session

    @persists
    def rename_session(self, session_id: str, title: str) -> Optional[ChatSession]:
        session = self.get_session(session_id)
        if session is None:
            return None
        session.title = title
        session.touch()
        return session

    @persists
    def delete_session(self, session_id: str) -> bool:
        """Remove a session; the active pointer falls back to the first remaining one."""
        remaining = [s for s in self.sessions if s.id != session_id]
        if len(remaining) == len(self.sessions):
            return False

        self.sessions = remaining
        if self.current_chat_id == session_id:
            self.current_chat_id = remaining[0].id if remaining else None
        logger.info(f"Deleted session {session_id}")
        return True

    @persists
    def set_current_chat_id(self, chat_id: Optional[str]):
        self.current_chat_id = chat_id

    def ensure_current(self) -> Optional[str]:
        """Select the first session when nothing valid is selected.

        Storage is only written when the pointer changes.
        """
        if self.current_session() is None:
            selected = self.sessions[0].id if self.sessions else None
            if selected != self.current_chat_id:
                self.current_chat_id = selected
                self.persist()
        return self.current_chat_id

    @persists
    def toggle_sidebar(self) -> bool:
        self.is_sidebar_collapsed = not self.is_sidebar_collapsed
        return self.is_sidebar_collapsed

    # Ephemeral UI state, never persisted

    def set_input(self, text: str):
        self.input = text

    def set_loading(self, is_loading: bool):
        self.is_loading = is_loading
