import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv

# Load .env as early as possible so Settings.from_env sees it
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sheetqa.config import Settings
from sheetqa.routes import answer, health
from sheetqa.services.answer import AnswerService
from sheetqa.services.completer import CompletionClient
from sheetqa.services.document_store import CorpusSnapshot, SheetSource, load_snapshot
from sheetqa.services.embedder import EmbeddingClient
from sheetqa.services.openai_client import make_client

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    snapshot: Optional[CorpusSnapshot] = None,
    embedder=None,
    completer=None,
    source=None,
) -> FastAPI:
    """Build the service. Collaborators not passed in are created from settings at startup."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        emb, comp = embedder, completer
        if emb is None or comp is None:
            settings.require("openai_api_key")
            client = make_client(settings.openai_api_key, settings.openai_base_url, settings.request_timeout)
            emb = emb or EmbeddingClient(client, model=settings.embedding_model)
            comp = comp or CompletionClient(client, model=settings.completion_model, options=settings.completion)
        snap = snapshot
        if snap is None:
            # StoreLoadError propagates and aborts startup
            snap = await load_snapshot(
                source or SheetSource(api_key=settings.google_api_key),
                emb,
                settings.spreadsheet_id,
                settings.sheet_name,
            )
        app.state.snapshot = snap
        app.state.service = AnswerService(
            snap,
            emb,
            comp,
            word_budget=settings.max_context_words,
            options=settings.completion,
        )
        logger.info("startup: serving %d documents", len(snap))
        yield
        app.state.service = None

    app = FastAPI(title="Sheet QA", lifespan=lifespan)
    app.state.settings = settings
    app.state.snapshot = None
    app.state.service = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(answer.router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
