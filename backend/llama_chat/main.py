"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.chat import router as chat_router
from .config import settings
from .services.chat_service import ChatService
from .services.openai_adapter import OpenAIAdapter
from .services.session_store import SessionStore
from .services.storage_service import build_storage_service

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def build_chat_service() -> ChatService:
    """Restore the store from the configured slot and wire the completion adapter."""
    storage = build_storage_service()
    store = SessionStore.from_storage(storage)
    store.ensure_current()
    return ChatService(store, OpenAIAdapter.from_settings())


def create_app(chat_service: Optional[ChatService] = None) -> FastAPI:
    """Create the application; without a chat service one is built at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_service = getattr(app.state, "chat_service", None) is None
        if owns_service:
            app.state.chat_service = build_chat_service()
            logger.info(f"Loaded {len(app.state.chat_service.store.sessions)} chat sessions")
        yield
        storage = app.state.chat_service.store.storage
        if owns_service and storage is not None:
            storage.close()

    app = FastAPI(title="Llama Chat", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(chat_router)

    if chat_service is not None:
        app.state.chat_service = chat_service

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


configure_logging()
app = create_app()
