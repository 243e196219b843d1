"""FastAPI application entry point for the desktop shell."""
import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timebird.config import settings
from timebird.routers import settings as settings_router
from timebird.routers import time_entries, timer
from timebird.services.badge import BadgeIndicator
from timebird.services.credential_store import SettingsStore
from timebird.services.moneybird_client import MoneybirdClient
from timebird.services.time_entry_store import TimeEntryStore
from timebird.services.timer_service import TimerService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - build services on startup, release them on shutdown."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    http = httpx.AsyncClient(
        base_url=settings.moneybird_api_url,
        timeout=settings.request_timeout_seconds,
    )
    badge = BadgeIndicator()
    store = TimeEntryStore(
        SettingsStore(settings.store_path),
        MoneybirdClient(http, web_url=settings.moneybird_web_url),
        page_size=settings.page_size,
    )
    timer_service = TimerService(
        busy_indicator=badge,
        tick_interval=settings.tick_interval_seconds,
    )

    app.state.badge = badge
    app.state.time_entry_store = store
    app.state.timer_service = timer_service

    logger.info("Using settings file %s", settings.store_path)
    await store.initialize()
    yield

    await timer_service.reset()
    await http.aclose()


app = FastAPI(
    title="Timebird",
    description="Local API behind the Timebird desktop time tracker",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(timer.router)
app.include_router(time_entries.router)
app.include_router(settings_router.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Timebird API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


def run() -> None:
    """Serve the API for the desktop shell."""
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
