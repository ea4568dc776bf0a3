from __future__ import annotations
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from knowtrack.config import Settings, load_settings
from knowtrack.data.paper_repo import PaperRepo
from knowtrack.data.word_repo import WordRepo
from knowtrack.db.store import StoreClient
from knowtrack.service.auth_service import AuthService
from knowtrack.service.collection import CollectionCache
from knowtrack.service.paper_service import PaperService
from knowtrack.service.word_service import WordService
from knowtrack.web.dependencies import AppServices
from knowtrack.web.routers import auth, home, papers, words

logger = logging.getLogger(__name__)


def build_services(settings: Settings, store: StoreClient) -> AppServices:
    paper_repo = PaperRepo(store)
    word_repo = WordRepo(store)
    paper_cache = CollectionCache("papers", paper_repo.list_papers)
    word_cache = CollectionCache("words", word_repo.list_words)
    return AppServices(
        settings=settings,
        papers=PaperService(paper_repo, paper_cache),
        words=WordService(word_repo, word_cache),
        paper_cache=paper_cache,
        word_cache=word_cache,
        auth=AuthService(store),
    )


def create_app(settings: Settings | None = None, transport: httpx.BaseTransport | None = None) -> FastAPI:
    """Build the app. Missing store settings raise ConfigError here, before serving."""
    if settings is None:
        settings = load_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = StoreClient(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("knowtrack started against %s", settings.STORE_URL)
        yield
        store.close()

    app = FastAPI(title="Knowtrack", lifespan=lifespan)
    app.state.services = build_services(settings, store)

    app.include_router(home.router)
    app.include_router(auth.router)
    app.include_router(papers.router)
    app.include_router(words.router)
    return app
