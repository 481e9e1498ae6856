import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
import uvicorn
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from crossword_sync import __version__
from crossword_sync.core.config import settings
from crossword_sync.core.database import Base, engine
from crossword_sync.realtime import ConnectionRegistry, GridRelay
from crossword_sync.routers import puzzle_routers, session_routers, ws_routers
from crossword_sync.utils.logger_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)

    # one registry per process, torn down with it
    registry = ConnectionRegistry()
    app.state.registry = registry
    app.state.relay = GridRelay(registry)
    logger.info("Crossword sync started, live relay on %s", settings.WS_PATH)
    try:
        yield
    finally:
        registry.clear()
        logger.info("Crossword sync stopped")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_TITLE, version=__version__, lifespan=lifespan)

    # storage round-trip failed; surfaced to the caller, never retried here
    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Storage error"})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # get routers
    app.include_router(puzzle_routers.router, prefix="/api/puzzles", tags=["Puzzles"])
    app.include_router(session_routers.router, prefix="/api/sessions", tags=["Sessions"])
    app.include_router(ws_routers.router, tags=["Live"])
    return app


configure_logging()

# create FastAPI
app = create_app()


def run():
    """Console entry point"""
    uvicorn.run("crossword_sync.main:app", host="0.0.0.0", port=8000)
