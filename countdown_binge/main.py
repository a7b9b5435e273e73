"""FastAPI application entry point for countdown-binge."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .database import init_database, session_scope
from .errors import CountdownError
from .routers import shows_router
from .services.background import BackgroundRefresher
from .services.tmdb import TMDBService

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_refresher() -> BackgroundRefresher:
    """Background refresher wired to the application database and TMDB."""
    return BackgroundRefresher(
        session_factory=session_scope,
        catalog_factory=lambda: TMDBService(api_key=settings.tmdb_api_key),
        interval=timedelta(minutes=settings.background_refresh_interval_minutes),
        stale_after=timedelta(hours=settings.refresh_stale_hours),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting countdown-binge...")
    init_database()
    logger.info("Database initialized")

    refresher = None
    if settings.background_refresh_enabled and settings.tmdb_api_key:
        refresher = create_refresher()
        await refresher.start()
    elif settings.background_refresh_enabled:
        logger.warning("Background refresh disabled: TMDB API key not configured")

    yield

    if refresher is not None:
        await refresher.stop()
    logger.info("Shutting down countdown-binge...")


app = FastAPI(
    title="Countdown Binge",
    description="Follow TV shows and know when a season is ready to binge",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shows_router)


@app.get("/")
async def root():
    return {"message": "Countdown Binge API", "docs": "/docs", "version": __version__}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.exception_handler(CountdownError)
async def countdown_exception_handler(request: Request, exc: CountdownError):
    """Domain errors that escaped a route are reported with their description."""
    logger.error(f"Unhandled domain error: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "countdown_binge.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
