"""Chat session API endpoints."""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..models.chat import (
    ChatMessage, ChatRequest, ChatSession, CreateSessionRequest, InputRequest,
    ModelInfo, RenameSessionRequest, ReplaceMessagesRequest, SelectSessionRequest,
    TurnResult
)
from ..models.storage import ChatState
from ..services.chat_service import REJECT_BUSY, ChatService
from ..services.session_store import SessionStore

router = APIRouter(prefix="/api", tags=["chat"])


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_store(chat_service: ChatService = Depends(get_chat_service)) -> SessionStore:
    return chat_service.store


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Session {session_id} not found"
    )


@router.get("/state", response_model=ChatState, response_model_by_alias=True)
async def get_state(store: SessionStore = Depends(get_store)):
    """Get the full store state."""
    return store.state()


@router.get("/sessions", response_model=List[ChatSession], response_model_by_alias=True)
async def list_sessions(store: SessionStore = Depends(get_store)):
    """List sessions, newest first."""
    return store.sessions


@router.post("/sessions", response_model=ChatSession, response_model_by_alias=True,
             status_code=status.HTTP_201_CREATED)
async def create_session(body: CreateSessionRequest, store: SessionStore = Depends(get_store)):
    """Create a session and make it the current one."""
    return store.create_session(body.messages)


@router.get("/sessions/{session_id}", response_model=ChatSession, response_model_by_alias=True)
async def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    session = store.get_session(session_id)
    if session is None:
        raise _not_found(session_id)
    return session


@router.patch("/sessions/{session_id}", response_model=ChatSession, response_model_by_alias=True)
async def rename_session(session_id: str, body: RenameSessionRequest,
                         store: SessionStore = Depends(get_store)):
    session = store.rename_session(session_id, body.title)
    if session is None:
        raise _not_found(session_id)
    return session


@router.post("/sessions/{session_id}/messages", response_model=ChatSession, response_model_by_alias=True)
async def append_message(session_id: str, message: ChatMessage,
                         store: SessionStore = Depends(get_store)):
    """Append one message without requesting a completion."""
    session = store.append_message(session_id, message)
    if session is None:
        raise _not_found(session_id)
    return session


@router.put("/sessions/{session_id}/messages", response_model=ChatSession, response_model_by_alias=True)
async def replace_messages(session_id: str, body: ReplaceMessagesRequest,
                           store: SessionStore = Depends(get_store)):
    session = store.update_session(session_id, body.messages)
    if session is None:
        raise _not_found(session_id)
    return session


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
    """Delete a session. Unknown ids are ignored."""
    store.delete_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/current", response_model=ChatState, response_model_by_alias=True)
async def select_session(body: SelectSessionRequest, store: SessionStore = Depends(get_store)):
    store.set_current_chat_id(body.chat_id)
    return store.state()


@router.put("/input", response_model=ChatState, response_model_by_alias=True)
async def set_input(body: InputRequest, store: SessionStore = Depends(get_store)):
    store.set_input(body.text)
    return store.state()


@router.post("/sidebar/toggle", response_model=ChatState, response_model_by_alias=True)
async def toggle_sidebar(store: SessionStore = Depends(get_store)):
    store.toggle_sidebar()
    return store.state()


@router.post("/chat", response_model=TurnResult, response_model_by_alias=True)
async def send_message(body: ChatRequest, chat_service: ChatService = Depends(get_chat_service)):
    """Send a user turn and wait for the assistant reply."""
    result = await chat_service.submit(body.message)
    if not result.accepted:
        code = status.HTTP_409_CONFLICT if result.reason == REJECT_BUSY else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=result.reason)
    return result


@router.get("/models", response_model=List[ModelInfo])
async def list_models(chat_service: ChatService = Depends(get_chat_service)):
    return chat_service.adapter.get_available_models()
