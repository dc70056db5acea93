"""Chat service driving one conversation turn at a time."""

import logging
from typing import Optional

from ..config import Settings, settings as default_settings
from ..models.chat import ChatMessage, ChatRole, TurnResult
from .model_adapter import CompletionError, ModelAdapter
from .session_store import SessionStore

logger = logging.getLogger(__name__)

REJECT_EMPTY = "empty_input"
REJECT_BUSY = "turn_in_progress"


class ChatService:
    """Sends user turns to the completion adapter and records the replies.

    A turn goes Idle -> Sending -> Idle. While a turn is outstanding the
    store's loading flag is set and further submits are rejected. The reply
    lands in the session the turn started in, even if another session has
    been selected since; it is dropped if that session was deleted.
    """

    def __init__(self, store: SessionStore, adapter: ModelAdapter, config: Optional[Settings] = None):
        self.store = store
        self.adapter = adapter
        self.config = config or default_settings

    async def submit(self, text: Optional[str] = None) -> TurnResult:
        """Send ``text`` (or the pending input) as a user turn.

        A rejected submit leaves the pending input untouched.
        """
        content = self.store.input if text is None else text
        if not content.strip():
            return TurnResult(accepted=False, reason=REJECT_EMPTY)
        if self.store.is_loading:
            logger.info("Submit rejected: a turn is already in progress")
            return TurnResult(accepted=False, reason=REJECT_BUSY)

        user_message = ChatMessage(role=ChatRole.USER, content=content)
        session = self.store.current_session()
        if session is None:
            session = self.store.create_session([user_message])
        else:
            self.store.append_message(session.id, user_message)
        session_id = session.id

        self.store.set_input("")
        self.store.set_loading(True)
        failed = False
        try:
            try:
                result = await self.adapter.chat_completion(
                    messages=list(session.messages),
                    model=self.config.completion_model,
                    temperature=self.config.completion_temperature,
                    max_tokens=self.config.completion_max_tokens,
                    top_p=self.config.completion_top_p,
                    system_prompt=self.config.system_prompt
                )
                reply_text = result.content or self.config.empty_reply_text
            except CompletionError as e:
                logger.error(f"Completion failed for session {session_id}: {e}")
                reply_text = self.config.error_reply_text
                failed = True
            except Exception:
                logger.exception(f"Unexpected completion failure for session {session_id}")
                reply_text = self.config.error_reply_text
                failed = True

            reply = ChatMessage(role=ChatRole.ASSISTANT, content=reply_text)
            if self.store.append_message(session_id, reply) is None:
                logger.warning(f"Discarding reply for deleted session {session_id}")
        finally:
            self.store.set_loading(False)

        return TurnResult(accepted=True, session_id=session_id, reply=reply, failed=failed)
