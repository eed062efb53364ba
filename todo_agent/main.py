import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .agent import TodoAgent
from .api import router
from .config import Settings, settings as default_settings
from .llm import create_backend
from .storage import create_storage
from .store import MatchTuning, TodoStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings = default_settings, store: TodoStore = None, backend=None) -> FastAPI:
    """Build the HTTP app. Store and backend default to what settings select."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store.load()
        logger.info(f"Todo agent ready (provider={settings.llm_provider}, storage={settings.storage_backend})")
        yield

    app = FastAPI(title="todo-agent", lifespan=lifespan)
    if store is None:
        store = TodoStore(create_storage(settings), MatchTuning.from_settings(settings))
    if backend is None:
        backend = create_backend(settings)
    app.state.store = store
    app.state.agent = TodoAgent(store, backend)

    @app.get("/health")
    async def health():
        return {"ok": True}

    app.include_router(router)
    return app
