from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger
from .routers import rooms as rooms_router
from .routers import websockets as ws_router
from .session_router import SessionRouter

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the relay application with its own :class:`SessionRouter`."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(title="Duel Relay")

    # Allow all origins, game clients connect from anywhere.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # The one owner of all room / client state for this process
    app.state.settings = settings
    app.state.session_router = SessionRouter()

    app.include_router(rooms_router.router)
    app.include_router(ws_router.router)

    logger.info("Relay application created", host=settings.host, port=settings.port)
    return app


__all__ = ["create_app"]
