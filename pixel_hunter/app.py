from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import Settings, get_settings
from .dispatcher import ProtocolDispatcher
from .logging_config import get_logger, setup_logging
from .routers import rooms as rooms_router
from .routers import websockets as ws_router
from .schemas import RoomConfig
from .store import RoomStore

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(log_level=settings.log_level, log_file=settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Shutdown: drop pending countdowns with their rooms
        for room in app.state.store:
            room.cancel_countdown()

    app = FastAPI(title="Pixel Hunter Relay", lifespan=lifespan)

    # -----------------------------
    # Shared runtime state
    # -----------------------------

    store = RoomStore(
        default_config=RoomConfig(
            target_level=settings.target_level,
            diff_start=settings.diff_start,
            diff_min=settings.diff_min,
        )
    )
    app.state.settings = settings
    app.state.store = store
    app.state.dispatcher = ProtocolDispatcher(store, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers (before the static mount so "/" websockets win)
    app.include_router(rooms_router.router)
    app.include_router(ws_router.router)

    # -----------------------------
    # Static file mounting
    # -----------------------------

    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.info(f"Static directory {settings.static_dir!r} not found; serving the relay only")

    return app


__all__ = ["create_app"]
